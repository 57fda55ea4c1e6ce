"""Shared fakes standing in for the scanner, image tools and desktop apps."""

from __future__ import annotations

from pathlib import Path

import pytest

from skan.crop import Launcher
from skan.imaging import ImageProcessor
from skan.models import CropSettings, Geometry, ScanMode


class FakeDriver:
    """Records scan requests and writes a placeholder raw scan."""

    def __init__(self):
        self.calls: list[tuple[ScanMode, int, Path]] = []

    def acquire(self, mode: ScanMode, resolution: int, dest: Path) -> Path:
        self.calls.append((mode, resolution, dest))
        dest.write_bytes(b"raw scan")
        return dest


class FakeProcessor(ImageProcessor):
    """Records every image operation; optionally fails one of them."""

    def __init__(self, box: Geometry = Geometry(100, 80, 5, 5), fail_on: str | None = None):
        self.box = box
        self.fail_on = fail_on
        self.shaved: list[tuple[Path, Path, int]] = []
        self.searched: list[tuple[Path, CropSettings]] = []
        self.cropped: list[tuple[Path, Geometry, Path]] = []

    def _maybe_fail(self, op: str) -> None:
        if self.fail_on == op:
            raise RuntimeError(f"{op} failed")

    def shave(self, src: Path, dest: Path, pixels: int) -> None:
        self._maybe_fail("shave")
        self.shaved.append((src, dest, pixels))
        dest.write_bytes(b"shaved")

    def compute_crop_box(self, src: Path, settings: CropSettings) -> Geometry:
        self._maybe_fail("compute_crop_box")
        self.searched.append((src, settings))
        return self.box

    def crop(self, src: Path, geometry: Geometry, dest: Path) -> None:
        self._maybe_fail("crop")
        self.cropped.append((src, geometry, dest))
        dest.write_bytes(b"cropped")


class FakeSpawn:
    """Collects the commands a Launcher would start."""

    def __init__(self):
        self.commands: list[list[str]] = []

    def __call__(self, command):
        self.commands.append(list(command))
        return object()


@pytest.fixture
def scans_dir(tmp_path: Path) -> Path:
    return tmp_path / "scans"


@pytest.fixture
def driver() -> FakeDriver:
    return FakeDriver()


@pytest.fixture
def processor() -> FakeProcessor:
    return FakeProcessor()


@pytest.fixture
def spawn() -> FakeSpawn:
    return FakeSpawn()


@pytest.fixture
def launcher(spawn: FakeSpawn) -> Launcher:
    return Launcher(editor="gimp", viewer="photoqt", spawn=spawn)


@pytest.fixture
def failing_processor():
    def _make(op: str) -> FakeProcessor:
        return FakeProcessor(fail_on=op)

    return _make
