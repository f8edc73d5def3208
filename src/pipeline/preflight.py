from __future__ import annotations

import logging
from typing import Iterable

from ocr.engines.ollama_cli import OllamaModelError, model_available, ollama_installed, pull_model

from .errors import SetupError

logger = logging.getLogger("invoice_ocr.preflight")


def ensure_models_ready(models: Iterable[str]) -> None:
    """
    Fail fast before any page is processed: Ollama must be installed and each
    model present locally (missing models are pulled once).
    """

    logger.info("Ensuring Ollama is available...")
    if not ollama_installed():
        raise SetupError(
            code="SETUP_OLLAMA_NOT_FOUND",
            message="Ollama not found. Please run setup.sh first.",
        )

    for model in dict.fromkeys(models):
        logger.info("Ensuring model %s is available...", model)
        if model_available(model):
            continue

        logger.info("Pulling model %s...", model)
        try:
            pull_model(model)
        except OllamaModelError as e:
            raise SetupError(
                code="SETUP_MODEL_UNAVAILABLE",
                message=str(e),
                detail={"model": model},
            ) from e
