"""
Structured extraction stage: page markdown -> invoice JSON text.

- Sends the markdown plus a fixed instruction template to Ollama's generate API
- Returns the raw model response; JSON is only checked in strict mode
"""

from .contracts import (
    DEFAULT_JSON_MODEL,
    DEFAULT_NUM_CTX,
    DEFAULT_OLLAMA_HOST,
    ExtractionConfig,
    ExtractionError,
    ExtractionResult,
)
from .module import extract_structured
from .ollama_http import OllamaGenerateClient
from .prompt import build_invoice_prompt
from .validation import validate_invoice_json

__all__ = [
    "DEFAULT_JSON_MODEL",
    "DEFAULT_NUM_CTX",
    "DEFAULT_OLLAMA_HOST",
    "ExtractionConfig",
    "ExtractionError",
    "ExtractionResult",
    "OllamaGenerateClient",
    "build_invoice_prompt",
    "extract_structured",
    "validate_invoice_json",
]
