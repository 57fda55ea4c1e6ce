"""Data models for scan jobs and crop geometry."""

from __future__ import annotations

import re
from dataclasses import dataclass, replace
from enum import Enum
from pathlib import Path

VALID_RESOLUTIONS = (150, 300)
DEFAULT_RESOLUTION = 150

# ImageMagick "-blur 0x12": radius chosen by IM, sigma 12
BLUR_SIGMA = 12.0

# Documents get this many pixels of slack around the detected box
DOCUMENT_PADDING = 10


class DocumentType(Enum):
    """What is lying on the scanner bed.

    DOCUMENT: Grayscale preset, fixed at 150 dpi, tight fuzz
    PHOTO: Color preset, fuzz depends on the image tone
    """

    DOCUMENT = "document"
    PHOTO = "photo"


class Tone(Enum):
    """Overall brightness of a photo, used to pick the trim fuzz."""

    LIGHT = "light"
    DARK = "dark"


class ScanMode(Enum):
    """Color modes passed to scanimage --mode."""

    GRAY = "gray"
    COLOR = "color"


def shave_pixels(resolution: int) -> int:
    """Return the number of sensor-bed pixels to shave from each edge."""
    return resolution // 10


def fuzz_percent(document_type: DocumentType, tone: Tone) -> int:
    """Return the trim fuzz threshold in percent.

    Photos carry more noise near their edges than printed pages, so they
    need a much looser match before a pixel counts as background.
    """
    if document_type is DocumentType.DOCUMENT:
        return 10
    return 60 if tone is Tone.DARK else 50


@dataclass(frozen=True)
class ScanJob:
    """Fully resolved configuration for one scan."""

    output_base: Path
    document_type: DocumentType = DocumentType.DOCUMENT
    tone: Tone = Tone.LIGHT
    resolution: int = DEFAULT_RESOLUTION
    show_result: bool = False
    manual_crop: bool = False
    verbose: bool = False

    def __post_init__(self):
        if self.resolution not in VALID_RESOLUTIONS:
            raise ValueError(
                f"resolution must be one of {VALID_RESOLUTIONS}, got {self.resolution}"
            )
        if self.document_type is DocumentType.DOCUMENT and self.resolution != DEFAULT_RESOLUTION:
            raise ValueError("document scans are fixed at 150 dpi")
        if self.manual_crop and self.show_result:
            raise ValueError("show_result cannot be combined with manual_crop")

    @property
    def scan_mode(self) -> ScanMode:
        if self.document_type is DocumentType.DOCUMENT:
            return ScanMode.GRAY
        return ScanMode.COLOR

    @property
    def native_suffix(self) -> str:
        """Extension of the file scanimage writes (pnm for gray, ppm for color)."""
        if self.document_type is DocumentType.DOCUMENT:
            return ".pnm"
        return ".ppm"

    @property
    def shave(self) -> int:
        return shave_pixels(self.resolution)

    @property
    def fuzz(self) -> int:
        return fuzz_percent(self.document_type, self.tone)

    @property
    def paths(self) -> ScanPaths:
        return ScanPaths.for_job(self)


@dataclass(frozen=True)
class ScanPaths:
    """Files produced by one job, in the order they are created."""

    native: Path
    intermediate: Path
    final: Path

    @classmethod
    def for_job(cls, job: ScanJob) -> ScanPaths:
        base = job.output_base
        return cls(
            native=base.with_name(base.name + job.native_suffix),
            intermediate=base.with_name(base.name + "_temp.png"),
            final=base.with_name(base.name + ".png"),
        )


_NUMBER = r"(\d+(?:\.\d+)?)"
# fx escapes like "+%[fx:page.x-10]" render as "+-10" when page.x is 0
_OFFSET = r"([+-])(-?\d+(?:\.\d+)?)"
_GEOMETRY_RE = re.compile(rf"^{_NUMBER}x{_NUMBER}{_OFFSET}{_OFFSET}$")


@dataclass(frozen=True)
class Geometry:
    """Crop rectangle in ImageMagick terms: size plus offset from the top-left."""

    width: int
    height: int
    x: int
    y: int

    @classmethod
    def parse(cls, value: str) -> Geometry:
        """Parse a WxH+X+Y geometry string.

        Accepts the doubled signs ImageMagick emits for negative fx
        offsets, e.g. "120x80+-10+-10".
        """
        match = _GEOMETRY_RE.match(value.strip())
        if match is None:
            raise ValueError(f"Invalid geometry: {value!r}")
        w, h, x_sign, x, y_sign, y = match.groups()
        x_val = round(float(x)) * (-1 if x_sign == "-" else 1)
        y_val = round(float(y)) * (-1 if y_sign == "-" else 1)
        return cls(round(float(w)), round(float(h)), x_val, y_val)

    def padded(self, pad: int) -> Geometry:
        """Grow the rectangle outward by pad pixels on every side."""
        if pad == 0:
            return self
        return Geometry(self.width + 2 * pad, self.height + 2 * pad, self.x - pad, self.y - pad)

    def clipped(self, image_width: int, image_height: int) -> Geometry:
        """Intersect with the image, the way -crop treats boxes hanging off the canvas."""
        left = max(self.x, 0)
        top = max(self.y, 0)
        right = min(self.x + self.width, image_width)
        bottom = min(self.y + self.height, image_height)
        return replace(self, width=max(right - left, 0), height=max(bottom - top, 0), x=left, y=top)

    def as_slices(self) -> tuple[slice, slice]:
        """Return (rows, cols) slices for numpy indexing."""
        return slice(self.y, self.y + self.height), slice(self.x, self.x + self.width)

    def __str__(self) -> str:
        return f"{self.width}x{self.height}{self.x:+d}{self.y:+d}"


@dataclass(frozen=True)
class CropSettings:
    """Parameters for the blur + fuzzy trim bounding-box search."""

    fuzz: int
    blur_sigma: float = BLUR_SIGMA
    padding: int = 0

    @classmethod
    def for_job(cls, job: ScanJob) -> CropSettings:
        padding = DOCUMENT_PADDING if job.document_type is DocumentType.DOCUMENT else 0
        return cls(fuzz=job.fuzz, padding=padding)

    @property
    def format_spec(self) -> str:
        """ImageMagick -format string that prints the (padded) trim box."""
        if self.padding == 0:
            return "%[fx:w]x%[fx:h]+%[fx:page.x]+%[fx:page.y]"
        p = self.padding
        return f"%[fx:w+{2 * p}]x%[fx:h+{2 * p}]+%[fx:page.x-{p}]+%[fx:page.y-{p}]"

    @property
    def blur_arg(self) -> str:
        sigma = int(self.blur_sigma) if float(self.blur_sigma).is_integer() else self.blur_sigma
        return f"0x{sigma}"
