"""
Text extraction stage: page image -> markdown text.

- Input: one normalized page image
- Output: the OCR model's markdown, or coded errors
- No environment variable reads in this module
"""

from .contracts import DEFAULT_OCR_MODEL, OcrConfig, OcrEngineName, OcrError, OcrTextResult
from .module import extract_text, get_engine

__all__ = [
    "DEFAULT_OCR_MODEL",
    "OcrConfig",
    "OcrEngineName",
    "OcrError",
    "OcrTextResult",
    "extract_text",
    "get_engine",
]
