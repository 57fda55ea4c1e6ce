"""Scan documents and photos, then crop away the scanner bed."""

__version__ = "0.1.0"


def __getattr__(name):
    """Lazy import to avoid loading cv2 until an image is actually processed."""
    if name in ("run_job", "ScanResult"):
        from .pipeline import ScanResult, run_job
        return {"run_job": run_job, "ScanResult": ScanResult}[name]
    if name in ("DocumentType", "Geometry", "ScanJob", "Tone"):
        from .models import DocumentType, Geometry, ScanJob, Tone
        return {"DocumentType": DocumentType, "Geometry": Geometry, "ScanJob": ScanJob, "Tone": Tone}[name]
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    "run_job",
    "ScanResult",
    "ScanJob",
    "DocumentType",
    "Tone",
    "Geometry",
]
