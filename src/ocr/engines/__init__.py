from .base import OcrEngine
from .ollama_cli import OllamaCliEngine, OllamaModelError, model_available, ollama_installed, pull_model

__all__ = [
    "OcrEngine",
    "OllamaCliEngine",
    "OllamaModelError",
    "model_available",
    "ollama_installed",
    "pull_model",
]
