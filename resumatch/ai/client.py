# resumatch/ai/client.py
from __future__ import annotations

import base64
from dataclasses import dataclass
from typing import List, Optional, Protocol, Sequence, Union

from openai import AsyncOpenAI

from resumatch.core.config import settings
from resumatch.core.errors import AnalysisError, ModelUnavailableError
from resumatch.core.logging import get_logger
from resumatch.utils.documents import IMAGE_TYPES, normalize_mime, read_document_text

log = get_logger(__name__)


@dataclass(frozen=True)
class DocumentPart:
    """Binary document plus its declared media type."""
    data: bytes
    mime_type: str


Content = Union[str, DocumentPart]


class ModelClient(Protocol):
    async def generate(
        self,
        *,
        system_instruction: str,
        contents: Sequence[Content],
        schema: dict,
        schema_name: str,
    ) -> Optional[str]:
        """Return the raw response text (JSON, maybe fenced), or None if the model said nothing."""
        ...


def document_to_parts(doc: DocumentPart) -> List[dict]:
    mime = normalize_mime(doc.mime_type)
    if mime in IMAGE_TYPES:
        b64 = base64.b64encode(doc.data).decode("ascii")
        return [{"type": "image_url", "image_url": {"url": f"data:{mime};base64,{b64}"}}]
    try:
        text = read_document_text(doc.data, mime)
    except ValueError as exc:
        raise AnalysisError(str(exc)) from exc
    return [{"type": "text", "text": f"RESUME DOCUMENT ({mime}):\n{text}"}]


class OpenAIModelClient:
    """Chat-completions client pointed at an OpenAI-compatible endpoint (Gemini by default)."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        *,
        model: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
    ):
        self.model = model or settings.model_name
        self._client: Optional[AsyncOpenAI] = None
        if api_key:
            self._client = AsyncOpenAI(
                api_key=api_key,
                base_url=base_url or settings.model_base_url,
                timeout=timeout or settings.model_timeout_seconds,
            )
        else:
            log.error("Model API key is missing! Check GEMINI_API_KEY in your .env or environment.")

    @property
    def configured(self) -> bool:
        return self._client is not None

    def _require(self) -> AsyncOpenAI:
        if self._client is None:
            raise ModelUnavailableError("API key is missing. Please configure GEMINI_API_KEY in .env")
        return self._client

    async def generate(
        self,
        *,
        system_instruction: str,
        contents: Sequence[Content],
        schema: dict,
        schema_name: str,
    ) -> Optional[str]:
        client = self._require()
        parts: List[dict] = []
        for c in contents:
            if isinstance(c, DocumentPart):
                parts.extend(document_to_parts(c))
            else:
                parts.append({"type": "text", "text": c})

        resp = await client.chat.completions.create(
            model=self.model,
            messages=[
                {"role": "system", "content": system_instruction},
                {"role": "user", "content": parts},
            ],
            response_format={
                "type": "json_schema",
                "json_schema": {"name": schema_name, "schema": schema},
            },
        )
        if not resp.choices:
            return None
        return resp.choices[0].message.content

    async def list_models(self) -> List[str]:
        client = self._require()
        names: List[str] = []
        async for m in client.models.list():
            names.append(m.id)
        return names
