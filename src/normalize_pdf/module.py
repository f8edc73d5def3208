from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from contracts.pages import PageUnit

from .contracts import (
    IMAGE_SUFFIXES,
    DecomposeResult,
    InputKind,
    NormalizeConfig,
    NormalizeEngineName,
    NormalizeError,
)
from .engines import Pypdfium2Engine

logger = logging.getLogger("invoice_ocr.normalize")


def _get_engine(engine: NormalizeEngineName):
    if engine == NormalizeEngineName.PYPDFIUM2:
        return Pypdfium2Engine()
    raise ValueError(f"Unsupported normalization engine: {engine}")


def detect_input_kind(input_file: Path) -> InputKind | None:
    """
    Classify the input by extension. Returns None for unsupported types.
    """

    suffix = input_file.suffix.lower()
    if suffix == ".pdf":
        return InputKind.PDF
    if suffix in IMAGE_SUFFIXES:
        return InputKind.IMAGE
    return None


def _failure(
    *, kind: InputKind | None, input_file: Path, error: NormalizeError, meta: dict[str, Any]
) -> DecomposeResult:
    return DecomposeResult(
        ok=False,
        kind=kind,
        source_file=str(input_file),
        pages=[],
        errors=[error],
        meta=meta,
    )


def decompose_input(*, config: NormalizeConfig, input_file: Path, workspace: Path) -> DecomposeResult:
    """
    Split the input document into ordered page images.

    - image input: the input itself is the single page (no copy)
    - PDF input: every page is rendered into `workspace` as page_<n>.jpg
    """

    meta: dict[str, Any] = {"dpi": config.dpi}
    kind = detect_input_kind(input_file)

    if kind is None:
        return _failure(
            kind=None,
            input_file=input_file,
            error=NormalizeError(
                code="DECOMPOSE_UNSUPPORTED_TYPE",
                message=f"Unsupported file type: {input_file.suffix.lower()}",
                detail={"input_file": str(input_file)},
            ),
            meta=meta,
        )

    if not input_file.is_file():
        return _failure(
            kind=kind,
            input_file=input_file,
            error=NormalizeError(
                code="DECOMPOSE_INPUT_NOT_FOUND",
                message=f"Input file not found: {input_file}",
                detail={"input_file": str(input_file)},
            ),
            meta=meta,
        )

    if kind == InputKind.IMAGE:
        return DecomposeResult(
            ok=True,
            kind=kind,
            source_file=str(input_file),
            pages=[PageUnit(page_num=1, image_file=input_file)],
            errors=[],
            meta=meta,
        )

    logger.info("Converting PDF to images: %s", input_file)
    engine = _get_engine(config.engine)
    meta.update(engine.describe())

    try:
        page_count = engine.get_page_count(pdf_file=input_file)
    except Exception as e:
        return _failure(
            kind=kind,
            input_file=input_file,
            error=NormalizeError(
                code="DECOMPOSE_BACKEND_FAILED",
                message=f"Failed to read PDF page count: {e}",
                detail={"error": repr(e)},
            ),
            meta=meta,
        )

    if page_count < 1:
        return _failure(
            kind=kind,
            input_file=input_file,
            error=NormalizeError(
                code="DECOMPOSE_NO_PAGES",
                message="Input document has no pages",
                detail={"input_file": str(input_file)},
            ),
            meta=meta,
        )

    try:
        rendered = engine.render_pdf_to_images(
            pdf_file=input_file,
            out_dir=workspace,
            dpi=config.dpi,
            pages=list(range(1, page_count + 1)),
            jpeg_quality=config.jpeg_quality,
        )
    except Exception as e:
        return _failure(
            kind=kind,
            input_file=input_file,
            error=NormalizeError(
                code="DECOMPOSE_BACKEND_FAILED",
                message=f"PDF rendering failed: {e}",
                detail={"error": repr(e)},
            ),
            meta=meta,
        )

    pages = [
        PageUnit(page_num=rp.page_num, image_file=rp.image_file)
        for rp in sorted(rendered, key=lambda rp: rp.page_num)
    ]
    logger.info("Extracted %d pages from PDF", len(pages))

    return DecomposeResult(
        ok=True,
        kind=kind,
        source_file=str(input_file),
        pages=pages,
        errors=[],
        meta={**meta, "page_count": page_count},
    )
