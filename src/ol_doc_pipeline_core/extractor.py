from __future__ import annotations

import base64
from dataclasses import dataclass
from typing import Any, Protocol

import httpx

from ol_doc_pipeline_core.errors import ConfigurationError, ExtractionError

DEFAULT_EXTRACTION_MODEL = "google/gemini-2.5-flash-lite"

EXTRACTION_PROMPT = """Extract all text content from this PDF page.

Include:
- All visible text (headings, paragraphs, bullet points, captions)
- Text from diagrams, charts, or figures (describe what they show)
- Any code snippets or formulas

Format the output as clean, readable text. Preserve the logical structure and hierarchy of the content."""


class PageExtractor(Protocol):
    async def __call__(self, page_bytes: bytes, api_key: str) -> str: ...


def _pdf_data_url(pdf_bytes: bytes) -> str:
    b64 = base64.b64encode(pdf_bytes).decode("ascii")
    return f"data:application/pdf;base64,{b64}"


def _extract_message_content(payload: dict[str, Any]) -> str:
    choices = payload.get("choices") or []
    if not isinstance(choices, list) or not choices:
        raise ExtractionError("Chat completion response missing choices")
    first = choices[0] if isinstance(choices[0], dict) else {}
    msg = first.get("message") if isinstance(first.get("message"), dict) else {}
    content = msg.get("content")
    if isinstance(content, str):
        # Blank slides legitimately come back empty.
        return content.strip()
    text = first.get("text")
    if isinstance(text, str):
        return text.strip()
    raise ExtractionError("Chat completion response has no text content")


@dataclass(frozen=True)
class LlmPageExtractor:
    """
    Sends one single-page PDF to an OpenAI-compatible `/v1/chat/completions` endpoint
    (OpenRouter by default) and returns the model's plain-text rendition of it.

    The API key is passed per call so each upload can use its owner's key; `api_key`
    is the shared key used when the caller has none.
    """

    base_url: str = "https://openrouter.ai/api"
    model: str = DEFAULT_EXTRACTION_MODEL
    prompt: str = EXTRACTION_PROMPT
    api_key: str | None = None
    timeout_s: float = 120.0
    transport: httpx.AsyncBaseTransport | None = None

    def _body(self, page_bytes: bytes) -> dict[str, Any]:
        return {
            "model": self.model,
            "messages": [
                {
                    "role": "user",
                    "content": [
                        {"type": "text", "text": self.prompt},
                        {
                            "type": "file",
                            "file": {
                                "filename": "page.pdf",
                                "file_data": _pdf_data_url(page_bytes),
                            },
                        },
                    ],
                }
            ],
            "temperature": 0.0,
        }

    async def __call__(self, page_bytes: bytes, api_key: str) -> str:
        url = self.base_url.rstrip("/") + "/v1/chat/completions"
        key = api_key or self.api_key
        if not key:
            raise ConfigurationError("No API key available for page extraction")
        headers = {"Authorization": f"Bearer {key}"}
        async with httpx.AsyncClient(timeout=self.timeout_s, transport=self.transport) as client:
            try:
                r = await client.post(url, headers=headers, json=self._body(page_bytes))
                r.raise_for_status()
            except httpx.HTTPError as e:
                raise ExtractionError(f"Extraction request failed: {e}") from e
            return _extract_message_content(r.json())
