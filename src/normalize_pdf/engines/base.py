from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Any


@dataclass(frozen=True, slots=True)
class EngineRenderedPage:
    page_num: int
    image_file: Path
    width_px: int
    height_px: int


class PdfRenderEngine(ABC):
    """
    Turns PDF pages into JPEG files inside a scratch directory.

    Rendering only: resizing to the OCR pixel budget happens later, per page.
    """

    @abstractmethod
    def backend_id(self) -> str: ...

    def backend_version(self) -> str | None:
        return None

    def describe(self) -> dict[str, Any]:
        return {"backend": self.backend_id(), "backend_version": self.backend_version()}

    @abstractmethod
    def get_page_count(self, *, pdf_file: Path) -> int: ...

    @abstractmethod
    def render_pdf_to_images(
        self,
        *,
        pdf_file: Path,
        out_dir: Path,
        dpi: int,
        pages: list[int],
        jpeg_quality: int,
    ) -> list[EngineRenderedPage]:
        """`pages` are 1-indexed; output follows their order."""
