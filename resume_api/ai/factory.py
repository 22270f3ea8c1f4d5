from resume_api.ai.config import load_ai_config
from resume_api.ai.types import AIClient

from resume_api.ai.providers.openai_provider import OpenAIProvider
from resume_api.ai.providers.gemini_provider import GeminiProvider


def get_ai_client() -> AIClient:
    cfg = load_ai_config()

    if cfg.provider == "openai":
        return OpenAIProvider(
            model=cfg.model,
            temperature=cfg.temperature,
            max_output_tokens=cfg.max_output_tokens,
        )

    if cfg.provider == "gemini":
        return GeminiProvider(
            model=cfg.model,
            temperature=cfg.temperature,
            max_output_tokens=cfg.max_output_tokens,
        )

    raise ValueError(f"Unsupported AI_PROVIDER='{cfg.provider}'")
