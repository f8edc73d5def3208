from __future__ import annotations

import argparse
import logging
import math
import os
import sys
from pathlib import Path
from typing import NoReturn

from dotenv import load_dotenv

from contracts.invoice import SellerMetadata
from extraction.contracts import DEFAULT_JSON_MODEL, DEFAULT_NUM_CTX, DEFAULT_OLLAMA_HOST, ExtractionConfig
from normalize_pdf.contracts import NormalizeConfig
from ocr.contracts import DEFAULT_OCR_MODEL, OcrConfig

from .errors import PipelineFatalError
from .logging_config import LOG_LEVELS, configure_logging
from .runner import RunOptions, run_invoice_pipeline

USAGE = (
    "Usage: invoice-ocr --input <file> [--output <file>] "
    "[--seller-address <addr>] [--seller-tax-no <taxno>]"
)

logger = logging.getLogger("invoice_ocr")


def _resolve_host(raw: str | None) -> str:
    host = (raw or "").strip() or DEFAULT_OLLAMA_HOST
    if not host.startswith(("http://", "https://")):
        # Ollama itself accepts bare host:port in OLLAMA_HOST.
        host = f"http://{host}"
    return host


class _UsageArgumentParser(argparse.ArgumentParser):
    """Argument errors exit with status 1 and the one-line usage."""

    def error(self, message: str) -> NoReturn:
        self.exit(1, f"{USAGE}\n{self.prog}: error: {message}\n")


def build_arg_parser() -> argparse.ArgumentParser:
    p = _UsageArgumentParser(
        prog="invoice-ocr",
        description=(
            "Scan a PDF or image invoice page by page: OCR each page to markdown, "
            "then extract structured invoice JSON. Prints a JSON array with one entry per page."
        ),
    )
    p.add_argument("--input", type=Path, default=None, help="Input PDF or image file (required).")
    p.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Output JSON file. Default: print to stdout.",
    )
    p.add_argument("--seller-address", default="", help="Seller address injected into the prompt.")
    p.add_argument("--seller-tax-no", default="", help="Seller tax ID injected into the prompt.")
    p.add_argument(
        "--ocr-model",
        default=None,
        help=f"Ollama OCR model (env INVOICE_OCR_MODEL, default: {DEFAULT_OCR_MODEL}).",
    )
    p.add_argument(
        "--json-model",
        default=None,
        help=f"Ollama extraction model (env INVOICE_JSON_MODEL, default: {DEFAULT_JSON_MODEL}).",
    )
    p.add_argument("--dpi", type=int, default=72, help="PDF render DPI (default: 72).")
    p.add_argument(
        "--max-megapixels",
        type=float,
        default=3.0,
        help="Pixel-area budget per page image before OCR (default: 3).",
    )
    p.add_argument(
        "--num-ctx",
        type=int,
        default=DEFAULT_NUM_CTX,
        help=f"Context window for the extraction model (default: {DEFAULT_NUM_CTX}).",
    )
    p.add_argument(
        "--timeout-s",
        type=float,
        default=600.0,
        help="Timeout per inference call in seconds (default: 600).",
    )
    p.add_argument(
        "--strict-json",
        action="store_true",
        help="Fail a page when the extraction response is not invoice JSON with HUR/DAY/PCE units.",
    )
    p.add_argument(
        "--skip-model-check",
        action="store_true",
        help="Do not verify/pull Ollama models before the run.",
    )
    p.add_argument(
        "--log-level",
        choices=sorted(LOG_LEVELS),
        default="INFO",
        help="Log level for progress output on stderr (default: INFO).",
    )
    return p


def build_run_options(args: argparse.Namespace) -> RunOptions:
    """
    Resolve CLI args and environment into explicit, frozen stage configs.
    """

    ocr_model = args.ocr_model or os.getenv("INVOICE_OCR_MODEL") or DEFAULT_OCR_MODEL
    json_model = args.json_model or os.getenv("INVOICE_JSON_MODEL") or DEFAULT_JSON_MODEL
    if not math.isfinite(args.max_megapixels) or args.max_megapixels <= 0:
        raise ValueError("max_megapixels must be a positive finite number")

    return RunOptions(
        input_file=args.input,
        output_file=args.output,
        seller=SellerMetadata(address=args.seller_address, tax_no=args.seller_tax_no),
        normalize_config=NormalizeConfig(
            dpi=args.dpi,
            max_area_px=int(args.max_megapixels * 1_000_000),
        ),
        ocr_config=OcrConfig(model=ocr_model, timeout_s=args.timeout_s),
        extraction_config=ExtractionConfig(
            host=_resolve_host(os.getenv("OLLAMA_HOST")),
            model=json_model,
            num_ctx=args.num_ctx,
            timeout_s=args.timeout_s,
            strict=args.strict_json,
        ),
        check_models=not args.skip_model_check,
    )


def main(argv: list[str] | None = None) -> int:
    try:
        args = build_arg_parser().parse_args(argv)
    except SystemExit as e:
        # --help exits 0; argument errors exit 1 via _UsageArgumentParser.error
        return e.code if isinstance(e.code, int) else 1

    if args.input is None:
        print(USAGE, file=sys.stderr)
        return 1

    load_dotenv()
    configure_logging(args.log_level)

    try:
        options = build_run_options(args)
    except ValueError as e:
        print(f"Fatal error: {e}", file=sys.stderr)
        return 1

    try:
        run_invoice_pipeline(options=options)
    except PipelineFatalError as e:
        print(f"Fatal error: {e.message}", file=sys.stderr)
        return 1
    except Exception as e:
        logger.debug("Unhandled fatal error", exc_info=True)
        print(f"Fatal error: {e}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
