"""Scoped cleanup of intermediate files."""

from __future__ import annotations

from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from .exceptions import ImageWriteError


@contextmanager
def superseded(old: Path, new: Path) -> Iterator[Path]:
    """Delete old once the block has produced new.

    Any new left over from an earlier run is removed first, so only a file
    written by the block counts. If the block raises, or finishes without
    new on disk, old is kept so the user can recover it by hand.
    """
    new.unlink(missing_ok=True)
    yield new
    if not new.exists():
        raise ImageWriteError(str(new))
    old.unlink(missing_ok=True)
