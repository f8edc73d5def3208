from __future__ import annotations

from pathlib import Path

import pypdfium2 as pdfium

from .base import EngineRenderedPage, PdfRenderEngine


class Pypdfium2Engine(PdfRenderEngine):
    """
    Rasterizes PDF pages with PDFium, one JPEG per page.
    """

    def backend_id(self) -> str:
        return "pypdfium2"

    def backend_version(self) -> str | None:
        return getattr(pdfium, "__version__", None)

    def get_page_count(self, *, pdf_file: Path) -> int:
        doc = pdfium.PdfDocument(str(pdf_file))
        try:
            return len(doc)
        finally:
            doc.close()

    def render_pdf_to_images(
        self,
        *,
        pdf_file: Path,
        out_dir: Path,
        dpi: int,
        pages: list[int],
        jpeg_quality: int,
    ) -> list[EngineRenderedPage]:
        doc = pdfium.PdfDocument(str(pdf_file))
        try:
            total = len(doc)
            scale = dpi / 72.0
            out_dir.mkdir(parents=True, exist_ok=True)

            out: list[EngineRenderedPage] = []
            for page_num in pages:
                if not 1 <= page_num <= total:
                    raise ValueError(f"Page out of range: {page_num} (1..{total})")

                bitmap = doc[page_num - 1].render(scale=scale)
                image = bitmap.to_pil().convert("RGB")
                out_file = out_dir / f"page_{page_num}.jpg"
                image.save(out_file, format="JPEG", quality=jpeg_quality)

                out.append(
                    EngineRenderedPage(
                        page_num=page_num,
                        image_file=out_file,
                        width_px=image.width,
                        height_px=image.height,
                    )
                )
            return out
        finally:
            doc.close()
