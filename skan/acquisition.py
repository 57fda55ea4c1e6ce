"""Scanner acquisition: run scanimage and shave the sensor-bed edges."""

from __future__ import annotations

from pathlib import Path

from .files import superseded
from .imaging import ImageProcessor
from .models import ScanJob, ScanMode, ScanPaths
from .process import run_tool


class ScanimageDriver:
    """SANE scanimage wrapper. Writes the raw scan (pnm/ppm) to a file."""

    def __init__(self, scanimage: str = "scanimage", device: str | None = None):
        self.scanimage = scanimage
        self.device = device

    def command(self, mode: ScanMode, resolution: int) -> list[str]:
        cmd = [self.scanimage]
        if self.device:
            cmd += ["--device-name", self.device]
        cmd += ["--mode", mode.value, "--resolution", str(resolution)]
        return cmd

    def acquire(self, mode: ScanMode, resolution: int, dest: Path) -> Path:
        """Scan one page into dest. Blocks until the scanner is done."""
        with open(dest, "wb") as f:
            run_tool(self.command(mode, resolution), stdout=f)
        return dest


def acquire(job: ScanJob, paths: ScanPaths, driver, processor: ImageProcessor) -> Path:
    """Scan the page and write the edge-shaved intermediate image.

    The raw scan is removed once the intermediate exists. If shaving fails
    the raw scan is left behind.

    Returns:
        Path of the intermediate image
    """
    print("\nOne moment please...\n")

    paths.native.parent.mkdir(parents=True, exist_ok=True)
    driver.acquire(job.scan_mode, job.resolution, paths.native)

    with superseded(paths.native, paths.intermediate):
        processor.shave(paths.native, paths.intermediate, job.shave)

    return paths.intermediate
