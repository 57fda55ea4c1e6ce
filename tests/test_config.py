"""Tests for skan.config: environment overrides."""

from __future__ import annotations

from pathlib import Path

import pytest

from skan.config import Backend, Settings


def test_defaults() -> None:
    settings = Settings.from_env({})
    assert settings.scans_dir == Path.home() / "scans"
    assert settings.backend is Backend.IMAGEMAGICK
    assert settings.convert == "convert"
    assert settings.scanimage == "scanimage"
    assert settings.device is None
    assert settings.editor == "gimp"
    assert settings.viewer == "photoqt"


def test_overrides(tmp_path: Path) -> None:
    settings = Settings.from_env(
        {
            "SKAN_SCANS_DIR": str(tmp_path),
            "SKAN_BACKEND": "OpenCV",
            "SKAN_CONVERT": "magick",
            "SKAN_DEVICE": "pixma:04A91912",
            "SKAN_EDITOR": "krita",
            "SKAN_VIEWER": "eog",
        }
    )
    assert settings.scans_dir == tmp_path
    assert settings.backend is Backend.OPENCV
    assert settings.convert == "magick"
    assert settings.device == "pixma:04A91912"
    assert settings.editor == "krita"
    assert settings.viewer == "eog"


def test_empty_device_means_default() -> None:
    assert Settings.from_env({"SKAN_DEVICE": ""}).device is None


def test_unknown_backend() -> None:
    with pytest.raises(ValueError, match="Invalid SKAN_BACKEND 'pil'"):
        Settings.from_env({"SKAN_BACKEND": "pil"})
