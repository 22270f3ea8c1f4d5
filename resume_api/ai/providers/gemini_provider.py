from __future__ import annotations

import logging
import os
from typing import Optional

from google import genai
from google.genai import errors, types

from resume_api.ai.types import DocumentPart
from resume_api.core.errors import AIProviderError

logger = logging.getLogger(__name__)


class GeminiProvider:
    def __init__(
        self,
        model: str,
        api_key: Optional[str] = None,
        temperature: float = 0.3,
        max_output_tokens: int = 8192,
    ):
        self._model = model
        key = (api_key or os.getenv("GEMINI_API_KEY") or os.getenv("GOOGLE_API_KEY") or "").strip()
        if not key:
            raise RuntimeError("GEMINI_API_KEY is missing")
        self._client = genai.Client(api_key=key)
        self._config = types.GenerateContentConfig(
            temperature=temperature,
            top_p=0.8,
            top_k=40,
            max_output_tokens=max_output_tokens,
        )

    async def generate(self, prompt: str, *, document: DocumentPart | None = None) -> str:
        contents: list[object] = [prompt]
        if document is not None:
            contents.append(types.Part.from_bytes(data=document.data, mime_type=document.mime_type))
        try:
            response = await self._client.aio.models.generate_content(
                model=self._model,
                contents=contents,
                config=self._config,
            )
        except errors.APIError as exc:
            logger.warning("gemini_generate_failed model=%s prompt_len=%s: %s", self._model, len(prompt), exc)
            raise AIProviderError(f"Gemini request failed: {exc}") from exc
        return (response.text or "").strip()

    async def aclose(self) -> None:
        return None
