"""
Document decomposition and page image normalization.

- Splits a PDF or image input into ordered page images (PDFs via pypdfium2).
- Shrinks page images to a pixel-area budget before OCR (Pillow).
- Performs NO OCR and no text extraction.
"""

from .contracts import (
    DEFAULT_MAX_AREA_PX,
    DecomposeResult,
    ImageNormalizeResult,
    InputKind,
    NormalizeConfig,
    NormalizeEngineName,
    NormalizeError,
)
from .image_normalizer import normalize_image_area, scaled_size
from .module import decompose_input, detect_input_kind

__all__ = [
    "DEFAULT_MAX_AREA_PX",
    "DecomposeResult",
    "ImageNormalizeResult",
    "InputKind",
    "NormalizeConfig",
    "NormalizeEngineName",
    "NormalizeError",
    "decompose_input",
    "detect_input_kind",
    "normalize_image_area",
    "scaled_size",
]
