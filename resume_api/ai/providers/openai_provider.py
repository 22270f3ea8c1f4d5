from __future__ import annotations

import base64
import logging
import os
from typing import Any, Optional

from openai import AsyncOpenAI, OpenAIError

from resume_api.ai.types import DocumentPart
from resume_api.core.errors import AIProviderError

logger = logging.getLogger(__name__)


class OpenAIProvider:
    def __init__(
        self,
        model: str,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout_s: float = 60.0,
        max_retries: int = 0,
        temperature: float = 0.3,
        max_output_tokens: int = 8192,
    ):
        self._model = model
        self._temperature = temperature
        self._max_output_tokens = max_output_tokens
        key = (api_key or os.getenv("OPENAI_API_KEY") or "").strip()
        if not key:
            raise RuntimeError("OPENAI_API_KEY is missing")

        # Retries are handled by the pipeline, so the SDK's own are off by default.
        self._client = AsyncOpenAI(
            api_key=key,
            base_url=(base_url or os.getenv("OPENAI_BASE_URL") or None),
            timeout=float(os.getenv("OPENAI_TIMEOUT_S", str(timeout_s))),
            max_retries=int(os.getenv("OPENAI_MAX_RETRIES", str(max_retries))),
        )

    @staticmethod
    def _content_parts(prompt: str, document: DocumentPart | None) -> list[dict[str, Any]]:
        parts: list[dict[str, Any]] = [{"type": "text", "text": prompt}]
        if document is not None:
            encoded = base64.b64encode(document.data).decode("utf-8")
            parts.append(
                {
                    "type": "file",
                    "file": {
                        "filename": document.filename,
                        "file_data": f"data:{document.mime_type};base64,{encoded}",
                    },
                }
            )
        return parts

    async def generate(self, prompt: str, *, document: DocumentPart | None = None) -> str:
        try:
            response = await self._client.chat.completions.create(
                model=self._model,
                messages=[{"role": "user", "content": self._content_parts(prompt, document)}],
                temperature=self._temperature,
                max_tokens=self._max_output_tokens,
            )
        except OpenAIError as exc:
            logger.warning("openai_generate_failed model=%s prompt_len=%s: %s", self._model, len(prompt), exc)
            raise AIProviderError(f"OpenAI request failed: {exc}") from exc

        content = response.choices[0].message.content if response.choices else ""
        return (content or "").strip()

    async def aclose(self) -> None:
        await self._client.close()
