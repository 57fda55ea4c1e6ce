"""Image processing backends: shaving, bounding-box search and cropping."""

from __future__ import annotations

from pathlib import Path

import cv2
import numpy as np

from .config import Backend, Settings
from .exceptions import ImageReadError, ImageWriteError, InvalidCropGeometryError
from .models import CropSettings, Geometry
from .process import run_tool


class ImageProcessor:
    """Operations the acquisition and crop stages need from an image library."""

    def shave(self, src: Path, dest: Path, pixels: int) -> None:
        """Write src to dest with `pixels` removed from every edge."""
        raise NotImplementedError

    def compute_crop_box(self, src: Path, settings: CropSettings) -> Geometry:
        """Locate the document on the scanner bed and return its geometry."""
        raise NotImplementedError

    def crop(self, src: Path, geometry: Geometry, dest: Path) -> None:
        """Crop src to geometry, drop page offsets, and write dest."""
        raise NotImplementedError


class ImageMagickProcessor(ImageProcessor):
    """Delegates every operation to ImageMagick's convert."""

    def __init__(self, convert: str = "convert"):
        self.convert = convert

    def shave(self, src: Path, dest: Path, pixels: int) -> None:
        run_tool([self.convert, str(src), "-shave", f"{pixels}x{pixels}", str(dest)])

    def compute_crop_box(self, src: Path, settings: CropSettings) -> Geometry:
        result = run_tool(
            [
                self.convert,
                str(src),
                "-virtual-pixel",
                "edge",
                "-blur",
                settings.blur_arg,
                "-fuzz",
                f"{settings.fuzz}%",
                "-trim",
                "-format",
                settings.format_spec,
                "info:",
            ]
        )
        output = result.stdout.strip()
        try:
            geometry = Geometry.parse(output)
        except ValueError:
            raise InvalidCropGeometryError(f"unexpected convert output {output!r}")

        if geometry.width <= 0 or geometry.height <= 0:
            raise InvalidCropGeometryError(str(geometry))

        # -trim on a uniform image leaves a 1x1 box at offset -1,-1
        trimmed = geometry.padded(-settings.padding)
        if trimmed.width <= 1 and trimmed.height <= 1:
            raise InvalidCropGeometryError(f"image is entirely background ({geometry})")
        return geometry

    def crop(self, src: Path, geometry: Geometry, dest: Path) -> None:
        run_tool([self.convert, str(src), "-crop", str(geometry), "+repage", str(dest)])


def read_image(path: Path) -> np.ndarray:
    """Read an image keeping its depth and channel count."""
    img = cv2.imread(str(path), cv2.IMREAD_UNCHANGED)
    if img is None:
        raise ImageReadError(str(path))
    return img


def write_image(path: Path, img: np.ndarray) -> None:
    if not cv2.imwrite(str(path), img):
        raise ImageWriteError(str(path))


def color_distance(img: np.ndarray, reference: np.ndarray) -> np.ndarray:
    """Return per-pixel RMS distance to reference, normalized to 0-1.

    Works for grayscale (H, W) and color (H, W, C) images. An alpha channel
    is ignored.
    """
    if np.issubdtype(img.dtype, np.integer):
        scale = float(np.iinfo(img.dtype).max)
    else:
        scale = 1.0

    pixels = img.astype(np.float64) / scale
    ref = np.asarray(reference, dtype=np.float64) / scale

    if pixels.ndim == 2:
        return np.abs(pixels - ref)

    pixels = pixels[..., :3]
    ref = ref[..., :3]
    return np.sqrt(np.mean((pixels - ref) ** 2, axis=-1))


def trim_box(img: np.ndarray, fuzz_percent: float) -> Geometry:
    """Bounding box of everything that does not match the corner color.

    Mirrors ImageMagick's -trim: the top-left pixel is taken as the
    background, and pixels within fuzz_percent of it are trimmed.
    """
    distance = color_distance(img, img[0, 0])
    content = distance > fuzz_percent / 100.0

    rows = np.flatnonzero(content.any(axis=1))
    cols = np.flatnonzero(content.any(axis=0))
    if rows.size == 0 or cols.size == 0:
        raise InvalidCropGeometryError("image is entirely background")

    top, bottom = int(rows[0]), int(rows[-1])
    left, right = int(cols[0]), int(cols[-1])
    return Geometry(right - left + 1, bottom - top + 1, left, top)


class OpenCVProcessor(ImageProcessor):
    """Native implementation of the ImageMagick pipeline using OpenCV."""

    def shave(self, src: Path, dest: Path, pixels: int) -> None:
        img = read_image(src)
        h, w = img.shape[:2]
        if 2 * pixels >= h or 2 * pixels >= w:
            raise InvalidCropGeometryError(f"cannot shave {pixels}px from a {w}x{h} image")
        write_image(dest, img[pixels : h - pixels, pixels : w - pixels])

    def compute_crop_box(self, src: Path, settings: CropSettings) -> Geometry:
        img = read_image(src)

        # BORDER_REPLICATE is ImageMagick's "-virtual-pixel edge"
        blurred = cv2.GaussianBlur(
            img,
            (0, 0),
            sigmaX=settings.blur_sigma,
            borderType=cv2.BORDER_REPLICATE,
        )
        return trim_box(blurred, settings.fuzz).padded(settings.padding)

    def crop(self, src: Path, geometry: Geometry, dest: Path) -> None:
        img = read_image(src)
        h, w = img.shape[:2]
        box = geometry.clipped(w, h)
        if box.width == 0 or box.height == 0:
            raise InvalidCropGeometryError(f"{geometry} lies outside the {w}x{h} image")

        rows, cols = box.as_slices()
        write_image(dest, img[rows, cols])


def make_processor(settings: Settings) -> ImageProcessor:
    """Return the image processor selected in settings."""
    if settings.backend is Backend.OPENCV:
        return OpenCVProcessor()
    return ImageMagickProcessor(settings.convert)
