from __future__ import annotations

from dataclasses import asdict, dataclass
from enum import Enum
from pathlib import Path
from typing import Any

from contracts.pages import PageUnit

# Pixel-area budget applied to every page image before OCR (3 megapixels).
DEFAULT_MAX_AREA_PX = 3_000_000

IMAGE_SUFFIXES = (".jpg", ".jpeg", ".png", ".webp")


class InputKind(str, Enum):
    PDF = "pdf"
    IMAGE = "image"


class NormalizeEngineName(str, Enum):
    """
    Rendering backend identifiers.
    """

    PYPDFIUM2 = "pypdfium2"


@dataclass(frozen=True, slots=True)
class NormalizeError:
    code: str
    message: str
    detail: dict[str, Any] | None = None


@dataclass(frozen=True, slots=True)
class DecomposeResult:
    """
    Outcome of splitting the input document into page images.

    On failure `ok` is False and `pages` is empty; the run driver treats this
    as fatal.
    """

    ok: bool
    kind: InputKind | None
    source_file: str
    pages: list[PageUnit]
    errors: list[NormalizeError]
    meta: dict[str, Any]

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True, slots=True)
class ImageNormalizeResult:
    ok: bool
    source_file: str
    out_file: Path | None
    width_px: int | None
    height_px: int | None
    resized: bool
    errors: list[NormalizeError]


@dataclass(frozen=True, slots=True)
class NormalizeConfig:
    """
    Decomposition and image normalization settings.

    `dpi` of 72 renders PDF pages at scale 1.0 (PDF points are 1/72 inch).
    """

    engine: NormalizeEngineName = NormalizeEngineName.PYPDFIUM2
    dpi: int = 72
    max_area_px: int = DEFAULT_MAX_AREA_PX
    jpeg_quality: int = 90

    def __post_init__(self) -> None:
        if self.dpi <= 0:
            raise ValueError("dpi must be a positive integer")
        if self.max_area_px <= 0:
            raise ValueError("max_area_px must be a positive integer")
        if not 1 <= self.jpeg_quality <= 95:
            raise ValueError("jpeg_quality must be within [1, 95]")
