"""Runtime settings read from the environment."""

from __future__ import annotations

import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Mapping


class Backend(Enum):
    """Image processing backend used for shaving and auto-crop."""

    IMAGEMAGICK = "imagemagick"
    OPENCV = "opencv"


@dataclass(frozen=True)
class Settings:
    """External programs and directories used by a scan.

    Every field can be overridden with an environment variable:

        SKAN_SCANS_DIR   directory for scans (default: ~/scans)
        SKAN_BACKEND     imagemagick or opencv (default: imagemagick)
        SKAN_CONVERT     ImageMagick convert command (default: convert)
        SKAN_SCANIMAGE   SANE scanimage command (default: scanimage)
        SKAN_DEVICE      scanner device name (default: scanimage picks one)
        SKAN_EDITOR      editor for manual cropping (default: gimp)
        SKAN_VIEWER      viewer for --show (default: photoqt)
    """

    scans_dir: Path = Path("~/scans").expanduser()
    backend: Backend = Backend.IMAGEMAGICK
    convert: str = "convert"
    scanimage: str = "scanimage"
    device: str | None = None
    editor: str = "gimp"
    viewer: str = "photoqt"

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> Settings:
        """Build settings from environment variables, falling back to defaults."""
        env = os.environ if environ is None else environ
        defaults = cls()

        backend_name = env.get("SKAN_BACKEND", defaults.backend.value).strip().lower()
        try:
            backend = Backend(backend_name)
        except ValueError:
            choices = ", ".join(b.value for b in Backend)
            raise ValueError(f"Invalid SKAN_BACKEND '{backend_name}' (choose from: {choices})")

        scans_dir = env.get("SKAN_SCANS_DIR")
        return cls(
            scans_dir=Path(scans_dir).expanduser() if scans_dir else defaults.scans_dir,
            backend=backend,
            convert=env.get("SKAN_CONVERT", defaults.convert),
            scanimage=env.get("SKAN_SCANIMAGE", defaults.scanimage),
            device=env.get("SKAN_DEVICE") or None,
            editor=env.get("SKAN_EDITOR", defaults.editor),
            viewer=env.get("SKAN_VIEWER", defaults.viewer),
        )
