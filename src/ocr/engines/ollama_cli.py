from __future__ import annotations

import shutil
import subprocess
import sys
from pathlib import Path
from typing import Any

from ..contracts import OcrConfig, OcrEngineName, OcrError, OcrTextResult
from .base import OcrEngine

OLLAMA_BINARY = "ollama"


class OllamaModelError(Exception):
    pass


def ollama_installed() -> bool:
    return shutil.which(OLLAMA_BINARY) is not None


def model_available(model: str) -> bool:
    """
    True if `ollama list` reports the model as installed locally.
    """

    try:
        proc = subprocess.run(
            [OLLAMA_BINARY, "list"],
            check=False,
            capture_output=True,
            text=True,
        )
    except FileNotFoundError:
        return False
    if proc.returncode != 0:
        return False
    return model in proc.stdout


def pull_model(model: str) -> None:
    """
    Download a model with `ollama pull`.

    Pull progress goes to stderr so stdout stays reserved for results.
    """

    try:
        proc = subprocess.run(
            [OLLAMA_BINARY, "pull", model],
            check=False,
            stdin=subprocess.DEVNULL,
            stdout=sys.stderr,
            stderr=sys.stderr,
        )
    except FileNotFoundError as e:
        raise OllamaModelError(f"Failed to pull model: {OLLAMA_BINARY} binary not found") from e
    if proc.returncode != 0:
        raise OllamaModelError(f"Failed to pull model: {proc.returncode}")


class OllamaCliEngine(OcrEngine):
    """
    OCR via `ollama run <model> "<prompt with image path>"`.

    The model's stdout is the page markdown. This engine performs no
    post-correction of the recognized text beyond trimming whitespace.
    """

    def run_on_image_file(self, *, config: OcrConfig, image_file: Path) -> OcrTextResult:
        meta: dict[str, Any] = {
            "backend": "ollama",
            "backend_mode": "cli",
            "model": config.model,
            "timeout_s": config.timeout_s,
        }

        if not image_file.exists():
            return OcrTextResult(
                ok=False,
                engine=OcrEngineName.OLLAMA_CLI,
                source_image=str(image_file),
                text=None,
                errors=[
                    OcrError(
                        code="OCR_INPUT_NOT_FOUND",
                        message=f"Input image file not found: {image_file}",
                        detail={"image_file": str(image_file)},
                    )
                ],
                meta=meta,
            )

        prompt = config.prompt_template.format(image_path=str(image_file))
        cmd = [OLLAMA_BINARY, "run", config.model, prompt]
        meta["command_template"] = [OLLAMA_BINARY, "run", config.model, config.prompt_template]

        try:
            proc = subprocess.run(
                cmd,
                check=False,
                stdin=subprocess.DEVNULL,
                capture_output=True,
                text=True,
                timeout=config.timeout_s,
            )
        except FileNotFoundError:
            return OcrTextResult(
                ok=False,
                engine=OcrEngineName.OLLAMA_CLI,
                source_image=str(image_file),
                text=None,
                errors=[
                    OcrError(
                        code="OCR_BACKEND_NOT_INSTALLED",
                        message="ollama binary not found on PATH",
                        detail={"expected_command": OLLAMA_BINARY},
                    )
                ],
                meta=meta,
            )
        except subprocess.TimeoutExpired:
            return OcrTextResult(
                ok=False,
                engine=OcrEngineName.OLLAMA_CLI,
                source_image=str(image_file),
                text=None,
                errors=[
                    OcrError(
                        code="OCR_TIMEOUT",
                        message=f"Ollama run timed out after {config.timeout_s}s",
                        detail={"timeout_s": config.timeout_s},
                    )
                ],
                meta=meta,
            )

        if proc.returncode != 0:
            return OcrTextResult(
                ok=False,
                engine=OcrEngineName.OLLAMA_CLI,
                source_image=str(image_file),
                text=None,
                errors=[
                    OcrError(
                        code="OCR_BACKEND_ERROR",
                        message=f"Ollama run failed: {proc.returncode}",
                        detail={
                            "returncode": proc.returncode,
                            "stderr": (proc.stderr or "")[-4000:],
                        },
                    )
                ],
                meta=meta,
            )

        return OcrTextResult(
            ok=True,
            engine=OcrEngineName.OLLAMA_CLI,
            source_image=str(image_file),
            text=(proc.stdout or "").strip(),
            errors=[],
            meta=meta,
        )
