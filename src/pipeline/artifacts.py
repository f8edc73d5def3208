from __future__ import annotations

import json
from pathlib import Path

from contracts.pages import RunResult


def serialize_output_array(result: RunResult) -> str:
    """
    One entry per page, in page order: the structured-output text for a
    successful page, the error message for a failed one.
    """

    return json.dumps(result.to_output_array(), ensure_ascii=False, indent=2)


def write_output_json(*, result: RunResult, out_file: Path) -> None:
    out_file.parent.mkdir(parents=True, exist_ok=True)
    out_file.write_text(serialize_output_array(result), encoding="utf-8")
