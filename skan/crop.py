"""Crop stage: auto-crop the scanner bed away, or hand off to an editor."""

from __future__ import annotations

import shlex
import subprocess
from pathlib import Path
from typing import Callable, Sequence

from .files import superseded
from .imaging import ImageProcessor
from .models import CropSettings, ScanJob, ScanPaths
from .process import launch_detached


class Launcher:
    """Opens images in desktop programs without waiting for them to exit."""

    def __init__(
        self,
        editor: str = "gimp",
        viewer: str = "photoqt",
        spawn: Callable[[Sequence[str]], subprocess.Popen] = launch_detached,
    ):
        self.editor = editor
        self.viewer = viewer
        self.spawn = spawn

    def edit(self, path: Path) -> subprocess.Popen:
        return self.spawn([*shlex.split(self.editor), str(path)])

    def view(self, path: Path) -> subprocess.Popen:
        return self.spawn([*shlex.split(self.viewer), str(path)])


def auto_crop(job: ScanJob, paths: ScanPaths, processor: ImageProcessor) -> Path:
    """Find the document on the scanner bed and crop to it.

    The bounding box is searched on a blurred copy, but the crop is applied
    to the unblurred intermediate image. The intermediate is removed once the
    final image has been written.

    Returns:
        Path of the final image
    """
    settings = CropSettings.for_job(job)

    with superseded(paths.intermediate, paths.final):
        geometry = processor.compute_crop_box(paths.intermediate, settings)
        if job.verbose:
            print(f"  Crop Box:  {geometry} (fuzz {settings.fuzz}%)")
        processor.crop(paths.intermediate, geometry, paths.final)

    return paths.final


def manual_crop(paths: ScanPaths, launcher: Launcher) -> subprocess.Popen:
    """Open the intermediate image in the editor. The file is kept for the user."""
    print(f"Opening {paths.intermediate} for manual cropping")
    return launcher.edit(paths.intermediate)


def preview(paths: ScanPaths, launcher: Launcher) -> subprocess.Popen:
    return launcher.view(paths.final)
