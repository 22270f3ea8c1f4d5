"""
Helpers for talking to generative models: JSON extraction from free-form
responses and bounded retry with exponential backoff around model calls.
"""

from __future__ import annotations

import asyncio
import json
import logging
import re
from typing import Any, Awaitable, Callable, TypeVar

from resume_api.core.errors import UpstreamServiceError

logger = logging.getLogger(__name__)

T = TypeVar("T")

_DECODER = json.JSONDecoder()
_FENCE = re.compile(r"^```(?:json)?\s*|\s*```$", re.I)


def extract_json_object(raw: str) -> dict[str, Any]:
    """
    Parse the first JSON object found in a model response.

    The response may be bare JSON, JSON wrapped in markdown fences, or JSON
    surrounded by prose. Raises ValueError when nothing parseable is found
    or the parsed value is not an object.
    """
    text = _FENCE.sub("", (raw or "").strip())
    if not text:
        raise ValueError("empty model response")
    try:
        parsed = json.loads(text)
    except json.JSONDecodeError:
        parsed = _first_object(text)
    if not isinstance(parsed, dict):
        raise ValueError("model response JSON is not an object")
    return parsed


def _first_object(text: str) -> dict[str, Any]:
    start = text.find("{")
    while start != -1:
        try:
            return _DECODER.raw_decode(text, start)[0]
        except json.JSONDecodeError:
            start = text.find("{", start + 1)
    raise ValueError("no JSON object found in model response")


async def retry_with_backoff(
    operation: Callable[[], Awaitable[T]],
    *,
    attempts: int,
    base_delay_s: float,
    label: str,
    retryable: tuple[type[Exception], ...] = (UpstreamServiceError,),
) -> T:
    """Await ``operation`` up to ``attempts`` times, doubling the delay after each retryable failure."""
    attempts = max(1, attempts)
    for attempt in range(attempts):
        try:
            return await operation()
        except retryable as exc:
            if attempt == attempts - 1:
                raise
            delay = base_delay_s * (2**attempt)
            logger.warning(
                "ai_call_retry label=%s attempt=%s/%s delay=%.1fs: %s",
                label,
                attempt + 1,
                attempts,
                delay,
                exc,
            )
            await asyncio.sleep(delay)
    raise RuntimeError("retry loop exited without a result")
