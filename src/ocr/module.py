from __future__ import annotations

from pathlib import Path

from .contracts import OcrConfig, OcrEngineName, OcrTextResult
from .engines import OcrEngine, OllamaCliEngine


def get_engine(engine: OcrEngineName) -> OcrEngine:
    if engine == OcrEngineName.OLLAMA_CLI:
        return OllamaCliEngine()
    raise ValueError(f"Unsupported OCR engine: {engine}")


def extract_text(*, config: OcrConfig, image_file: Path, engine: OcrEngine | None = None) -> OcrTextResult:
    """
    Run OCR on one normalized page image and return its markdown text.

    `engine` defaults to the backend named in `config`.
    """

    if engine is None:
        engine = get_engine(config.engine)
    return engine.run_on_image_file(config=config, image_file=image_file)
