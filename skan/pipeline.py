"""Run a resolved scan job end to end."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from .acquisition import ScanimageDriver, acquire
from .config import Settings
from .crop import Launcher, auto_crop, manual_crop, preview
from .imaging import ImageProcessor, make_processor
from .models import ScanJob


@dataclass
class ScanResult:
    """Outcome of a scan job."""

    intermediate: Path
    final: Path | None = None
    # Detached editor/viewer processes, never waited on
    launched: list = field(default_factory=list)


def run_job(
    job: ScanJob,
    driver=None,
    processor: ImageProcessor | None = None,
    launcher: Launcher | None = None,
    settings: Settings | None = None,
) -> ScanResult:
    """Scan, then auto-crop or open the editor, then optionally preview.

    Collaborators default to the real external programs configured in
    settings; pass fakes to run without a scanner.
    """
    if settings is None:
        settings = Settings.from_env()
    if driver is None:
        driver = ScanimageDriver(settings.scanimage, settings.device)
    if processor is None:
        processor = make_processor(settings)
    if launcher is None:
        launcher = Launcher(settings.editor, settings.viewer)

    paths = job.paths
    intermediate = acquire(job, paths, driver, processor)
    result = ScanResult(intermediate=intermediate)

    if job.manual_crop:
        result.launched.append(manual_crop(paths, launcher))
        return result

    result.final = auto_crop(job, paths, processor)
    print(f"Saved {result.final}")

    if job.show_result:
        result.launched.append(preview(paths, launcher))

    return result
