from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Sequence

from contracts.invoice import SellerMetadata
from contracts.pages import PageError, PageResult, PageUnit, RunResult
from extraction.contracts import ExtractionConfig
from extraction.module import extract_structured
from extraction.ollama_http import OllamaGenerateClient
from normalize_pdf.contracts import NormalizeConfig
from normalize_pdf.image_normalizer import normalize_image_area
from ocr.contracts import OcrConfig
from ocr.engines.base import OcrEngine
from ocr.module import extract_text

from .errors import DecompositionError

logger = logging.getLogger("invoice_ocr.pipeline")


@dataclass(frozen=True, slots=True)
class RunContext:
    """
    Explicit run state handed to the orchestrator by the run driver.

    The orchestrator only writes inside `workspace`; it never creates or
    removes it.
    """

    workspace: Path
    normalize_config: NormalizeConfig
    ocr_config: OcrConfig
    extraction_config: ExtractionConfig
    ocr_engine: OcrEngine
    extraction_client: OllamaGenerateClient


def _page_error(*, stage: str, code: str, message: str, detail: dict[str, Any] | None) -> PageError:
    return PageError(code=code, message=message, detail={"stage": stage, **(detail or {})})


def _process_page(*, unit: PageUnit, index: int, seller: SellerMetadata, context: RunContext) -> PageResult:
    normalized = normalize_image_area(
        image_file=unit.image_file,
        out_stem=context.workspace / f"resized_{index}",
        max_area_px=context.normalize_config.max_area_px,
        jpeg_quality=context.normalize_config.jpeg_quality,
    )
    if not normalized.ok or normalized.out_file is None:
        err = normalized.errors[0]
        return PageResult.failure(
            page_num=unit.page_num,
            error=_page_error(stage="normalize", code=err.code, message=err.message, detail=err.detail),
        )

    logger.info("Running OCR...")
    ocr_result = extract_text(
        config=context.ocr_config,
        image_file=normalized.out_file,
        engine=context.ocr_engine,
    )
    if not ocr_result.ok or ocr_result.text is None:
        err = ocr_result.errors[0]
        return PageResult.failure(
            page_num=unit.page_num,
            error=_page_error(stage="ocr", code=err.code, message=err.message, detail=err.detail),
        )

    markdown = seller.header() + ocr_result.text

    logger.info("Converting to JSON...")
    extracted = extract_structured(
        config=context.extraction_config,
        markdown=markdown,
        seller=seller,
        client=context.extraction_client,
    )
    if not extracted.ok or extracted.text is None:
        err = extracted.errors[0]
        return PageResult.failure(
            page_num=unit.page_num,
            error=_page_error(stage="extraction", code=err.code, message=err.message, detail=err.detail),
        )

    return PageResult.success(page_num=unit.page_num, markdown=markdown, structured_output=extracted.text)


def process_pages(
    *, pages: Sequence[PageUnit], seller: SellerMetadata, context: RunContext
) -> RunResult:
    """
    Drive every page through normalize -> OCR -> structured extraction.

    Pages run one at a time in the given order. Each page yields exactly one
    PageResult; a failing page is recorded and the loop moves on, so the
    result always has one entry per input page.
    """

    if not pages:
        raise DecompositionError(code="DECOMPOSE_NO_PAGES", message="No pages to process")

    total = len(pages)
    results: list[PageResult] = []
    for index, unit in enumerate(pages):
        logger.info("Processing page %d/%d...", index + 1, total)
        try:
            result = _process_page(unit=unit, index=index, seller=seller, context=context)
        except Exception as e:
            logger.exception("Unexpected error on page %d", unit.page_num)
            result = PageResult.failure(
                page_num=unit.page_num,
                error=PageError(
                    code="PAGE_UNEXPECTED_ERROR",
                    message=str(e) or repr(e),
                    detail={"error": repr(e)},
                ),
            )

        if result.error is None:
            logger.info("Page %d processed successfully", unit.page_num)
        else:
            logger.warning("Page %d failed: %s", unit.page_num, result.error.message)
        results.append(result)

    failed = [r.page_num for r in results if not r.ok]
    return RunResult(pages=results, meta={"page_count": total, "failed_pages": failed})
