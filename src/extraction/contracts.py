from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any

DEFAULT_OLLAMA_HOST = "http://localhost:11434"
DEFAULT_JSON_MODEL = "qwen3:1.7b-q4_K_M"
DEFAULT_NUM_CTX = 10240


@dataclass(frozen=True, slots=True)
class ExtractionError:
    code: str
    message: str
    detail: dict[str, Any] | None = None


@dataclass(frozen=True, slots=True)
class ExtractionResult:
    """
    Raw structured-extraction response for one page.

    `text` is the model's response string, trimmed. It is expected to be JSON
    but is only checked when strict mode is enabled.
    """

    ok: bool
    model: str
    text: str | None
    errors: list[ExtractionError]
    meta: dict[str, Any]

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True, slots=True)
class ExtractionConfig:
    """
    Structured extraction settings.

    `host` must be resolved by the caller (the CLI reads OLLAMA_HOST); this
    module does not read environment variables.
    """

    host: str = DEFAULT_OLLAMA_HOST
    model: str = DEFAULT_JSON_MODEL
    num_ctx: int = DEFAULT_NUM_CTX
    timeout_s: float | None = 600.0
    strict: bool = False  # opt-in: reject non-JSON output and unknown unit codes

    def __post_init__(self) -> None:
        if not self.host.startswith(("http://", "https://")):
            raise ValueError("host must be an http(s) URL")
        if not self.model.strip():
            raise ValueError("model must be a non-empty string")
        if self.num_ctx <= 0:
            raise ValueError("num_ctx must be a positive integer")
        if self.timeout_s is not None and self.timeout_s <= 0:
            raise ValueError("timeout_s must be positive when set")

    @property
    def generate_url(self) -> str:
        return f"{self.host.rstrip('/')}/api/generate"
