from __future__ import annotations

from contracts.invoice import SellerMetadata

from .contracts import ExtractionConfig, ExtractionResult
from .ollama_http import OllamaGenerateClient
from .prompt import build_invoice_prompt
from .validation import validate_invoice_json


def extract_structured(
    *,
    config: ExtractionConfig,
    markdown: str,
    seller: SellerMetadata,
    client: OllamaGenerateClient | None = None,
) -> ExtractionResult:
    """
    Turn page markdown into invoice JSON text via the extraction model.

    The response is returned as-is (trimmed). With `config.strict` the text
    must also pass `validate_invoice_json`, otherwise the result is a failure.
    """

    if client is None:
        client = OllamaGenerateClient()

    prompt = build_invoice_prompt(markdown=markdown, seller=seller)
    result = client.generate(config=config, prompt=prompt)

    if not (config.strict and result.ok and result.text is not None):
        return result

    errors = validate_invoice_json(result.text)
    if not errors:
        return result

    return ExtractionResult(
        ok=False,
        model=result.model,
        text=None,
        errors=errors,
        meta={**result.meta, "strict": True, "rejected_response": result.text[:800]},
    )
