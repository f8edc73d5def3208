from __future__ import annotations

import logging
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import TextIO

from contracts.invoice import SellerMetadata
from contracts.pages import RunResult
from extraction.contracts import ExtractionConfig
from extraction.ollama_http import OllamaGenerateClient
from normalize_pdf.contracts import NormalizeConfig
from normalize_pdf.module import decompose_input
from ocr.contracts import OcrConfig
from ocr.engines.base import OcrEngine
from ocr.module import get_engine as get_ocr_engine

from .artifacts import serialize_output_array, write_output_json
from .errors import DecompositionError
from .orchestrator import RunContext, process_pages
from .preflight import ensure_models_ready
from .workspace import scratch_workspace

logger = logging.getLogger("invoice_ocr.pipeline")


@dataclass(frozen=True, slots=True)
class RunOptions:
    input_file: Path
    output_file: Path | None = None
    seller: SellerMetadata = field(default_factory=SellerMetadata)
    normalize_config: NormalizeConfig = field(default_factory=NormalizeConfig)
    ocr_config: OcrConfig = field(default_factory=OcrConfig)
    extraction_config: ExtractionConfig = field(default_factory=ExtractionConfig)
    workspace_parent: Path | None = None  # None => system temp dir
    check_models: bool = True


def emit_results(*, result: RunResult, output_file: Path | None, stream: TextIO | None = None) -> None:
    if output_file is not None:
        write_output_json(result=result, out_file=output_file)
        logger.info("Results written to %s", output_file)
        return
    print(serialize_output_array(result), file=stream if stream is not None else sys.stdout)


def run_invoice_pipeline(
    *,
    options: RunOptions,
    ocr_engine: OcrEngine | None = None,
    extraction_client: OllamaGenerateClient | None = None,
    stream: TextIO | None = None,
) -> RunResult:
    """
    Run driver: preflight, scratch workspace, decomposition, page loop, output.

    Raises `PipelineFatalError` subclasses for setup and decomposition
    failures. The scratch workspace is removed on every exit path.
    """

    if options.check_models:
        ensure_models_ready([options.ocr_config.model, options.extraction_config.model])

    if ocr_engine is None:
        ocr_engine = get_ocr_engine(options.ocr_config.engine)
    if extraction_client is None:
        extraction_client = OllamaGenerateClient()

    with scratch_workspace(input_file=options.input_file, parent=options.workspace_parent) as workspace:
        decomposed = decompose_input(
            config=options.normalize_config,
            input_file=options.input_file,
            workspace=workspace,
        )
        if not decomposed.ok:
            err = decomposed.errors[0]
            raise DecompositionError(code=err.code, message=err.message, detail=err.detail)

        context = RunContext(
            workspace=workspace,
            normalize_config=options.normalize_config,
            ocr_config=options.ocr_config,
            extraction_config=options.extraction_config,
            ocr_engine=ocr_engine,
            extraction_client=extraction_client,
        )
        result = process_pages(pages=decomposed.pages, seller=options.seller, context=context)
        emit_results(result=result, output_file=options.output_file, stream=stream)

    if not result.ok:
        logger.warning("%d of %d pages failed: %s", len(result.failed_pages), len(result.pages), result.failed_pages)
    return result
