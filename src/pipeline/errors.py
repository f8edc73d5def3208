from __future__ import annotations

from typing import Any


class PipelineFatalError(Exception):
    """
    Run-level failure that aborts the whole run (exit code 1).

    Page-level failures are never raised; they are recorded as
    `PageResult.failure` entries instead.
    """

    def __init__(self, *, code: str, message: str, detail: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.detail = detail


class SetupError(PipelineFatalError):
    """Inference engine missing or a model cannot be made ready."""


class DecompositionError(PipelineFatalError):
    """Unsupported input, unreadable document, or no pages to process."""
