from __future__ import annotations

from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any

DEFAULT_OCR_MODEL = "glm-ocr"


class OcrEngineName(str, Enum):
    """
    OCR backends supported by this module.
    """

    OLLAMA_CLI = "ollama_cli"


@dataclass(frozen=True, slots=True)
class OcrError:
    code: str
    message: str
    detail: dict[str, Any] | None = None


@dataclass(frozen=True, slots=True)
class OcrTextResult:
    """
    Markdown text recognized on one page image.

    On failure, `ok` is False and `text` is None. No content is fabricated to
    "fill in" missing OCR results.
    """

    ok: bool
    engine: OcrEngineName
    source_image: str
    text: str | None
    errors: list[OcrError]
    meta: dict[str, Any]

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True, slots=True)
class OcrConfig:
    """
    OCR module configuration.

    This module must NOT read environment variables itself; the CLI resolves
    them and passes an explicit config.
    """

    engine: OcrEngineName = OcrEngineName.OLLAMA_CLI
    model: str = DEFAULT_OCR_MODEL
    prompt_template: str = "Text Recognition: <{image_path}>"
    timeout_s: float | None = 600.0

    def __post_init__(self) -> None:
        if not self.model.strip():
            raise ValueError("model must be a non-empty string")
        if "{image_path}" not in self.prompt_template:
            raise ValueError("prompt_template must contain an {image_path} placeholder")
        if self.timeout_s is not None and self.timeout_s <= 0:
            raise ValueError("timeout_s must be positive when set")
