from __future__ import annotations

from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any


@dataclass(frozen=True, slots=True)
class PageUnit:
    """
    One page of the input document, ready for the page pipeline.

    `image_file` is either the original input image or a rasterized page
    inside the scratch workspace.
    """

    page_num: int  # 1-indexed
    image_file: Path

    def __post_init__(self) -> None:
        if not isinstance(self.page_num, int) or self.page_num < 1:
            raise ValueError("page_num must be an int >= 1")


@dataclass(frozen=True, slots=True)
class PageError:
    code: str
    message: str
    detail: dict[str, Any] | None = None


@dataclass(frozen=True, slots=True)
class PageResult:
    """
    Terminal state of a single page.

    Exactly one of the two slot groups is populated:
    - success: `markdown` + `structured_output`
    - failure: `error`
    """

    page_num: int
    markdown: str | None = None
    structured_output: str | None = None
    error: PageError | None = None

    def __post_init__(self) -> None:
        has_success = self.markdown is not None and self.structured_output is not None
        has_partial = (self.markdown is None) != (self.structured_output is None)
        has_failure = self.error is not None

        if has_partial:
            raise ValueError("markdown and structured_output must be set together")
        if has_success == has_failure:
            raise ValueError("PageResult must hold exactly one of success payload or error")

    @classmethod
    def success(cls, *, page_num: int, markdown: str, structured_output: str) -> PageResult:
        return cls(page_num=page_num, markdown=markdown, structured_output=structured_output)

    @classmethod
    def failure(cls, *, page_num: int, error: PageError) -> PageResult:
        return cls(page_num=page_num, error=error)

    @property
    def ok(self) -> bool:
        return self.error is None

    def output_entry(self) -> str:
        """Element of the final output array for this page."""
        if self.error is not None:
            return self.error.message
        return self.structured_output or ""

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True, slots=True)
class RunResult:
    """
    Ordered per-page results of one run, one entry per input page.
    """

    pages: list[PageResult]
    meta: dict[str, Any] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return all(p.ok for p in self.pages)

    @property
    def failed_pages(self) -> list[int]:
        return [p.page_num for p in self.pages if not p.ok]

    def to_output_array(self) -> list[str]:
        return [p.output_entry() for p in self.pages]

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)
