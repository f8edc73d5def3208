from __future__ import annotations

from typing import Any

import requests

from .contracts import ExtractionConfig, ExtractionError, ExtractionResult


class OllamaGenerateClient:
    """
    Non-streaming client for Ollama's `POST /api/generate`.

    One request per call; failures come back as `ok=False` results.
    """

    def __init__(self, session: requests.Session | None = None) -> None:
        self._session = session

    def _post(self, url: str, *, json_body: dict[str, Any], timeout: float | None) -> requests.Response:
        if self._session is not None:
            return self._session.post(url, json=json_body, timeout=timeout)
        return requests.post(url, json=json_body, timeout=timeout)

    def generate(self, *, config: ExtractionConfig, prompt: str) -> ExtractionResult:
        body: dict[str, Any] = {
            "model": config.model,
            "prompt": prompt,
            "stream": False,
            "options": {"num_ctx": config.num_ctx},
        }
        meta: dict[str, Any] = {
            "backend": "ollama",
            "backend_mode": "http",
            "url": config.generate_url,
            "num_ctx": config.num_ctx,
        }

        try:
            resp = self._post(config.generate_url, json_body=body, timeout=config.timeout_s)
        except requests.Timeout:
            return ExtractionResult(
                ok=False,
                model=config.model,
                text=None,
                errors=[
                    ExtractionError(
                        code="EXTRACTION_TIMEOUT",
                        message=f"Ollama generate timed out after {config.timeout_s}s",
                        detail={"timeout_s": config.timeout_s},
                    )
                ],
                meta=meta,
            )
        except requests.RequestException as e:
            return ExtractionResult(
                ok=False,
                model=config.model,
                text=None,
                errors=[
                    ExtractionError(
                        code="EXTRACTION_UNREACHABLE",
                        message=f"Ollama generate request failed: {e}",
                        detail={"url": config.generate_url, "error": repr(e)},
                    )
                ],
                meta=meta,
            )

        meta["status_code"] = resp.status_code
        if not resp.ok:
            return ExtractionResult(
                ok=False,
                model=config.model,
                text=None,
                errors=[
                    ExtractionError(
                        code="EXTRACTION_HTTP_ERROR",
                        message=f"Ollama generate failed: {resp.status_code}",
                        detail={"status_code": resp.status_code, "body": resp.text[:800]},
                    )
                ],
                meta=meta,
            )

        try:
            envelope = resp.json()
        except ValueError as e:
            envelope = None
            envelope_error = repr(e)
        else:
            envelope_error = None

        response_text = envelope.get("response") if isinstance(envelope, dict) else None
        if not isinstance(response_text, str):
            return ExtractionResult(
                ok=False,
                model=config.model,
                text=None,
                errors=[
                    ExtractionError(
                        code="EXTRACTION_BAD_ENVELOPE",
                        message="Ollama generate returned a malformed response envelope",
                        detail={"error": envelope_error, "body": resp.text[:800]},
                    )
                ],
                meta=meta,
            )

        return ExtractionResult(
            ok=True,
            model=config.model,
            text=response_text.strip(),
            errors=[],
            meta=meta,
        )
