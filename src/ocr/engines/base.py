from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path

from ..contracts import OcrConfig, OcrTextResult


class OcrEngine(ABC):
    """
    Page image in, markdown out.

    Expected failures (missing binary, timeout, non-zero exit) come back as
    `ok=False` results. The recognized text is passed through uncorrected.
    """

    @abstractmethod
    def run_on_image_file(self, *, config: OcrConfig, image_file: Path) -> OcrTextResult: ...
