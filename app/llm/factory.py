"""Factory to create the LLM client used for conversation analysis."""
import os
from typing import Optional

from app.llm.client import LLMClient
from app.llm.gemini_client import GeminiClient
from app.settings import Settings, settings as default_settings


def get_llm_client(mode: Optional[str] = None, settings: Settings | None = None) -> LLMClient:
    """Return an LLMClient instance for the requested mode.

    Priority: explicit `mode` argument -> `LLM_MODE` env var -> default 'gemini'
    """
    settings = settings or default_settings
    selected = (mode or os.environ.get("LLM_MODE") or "gemini").lower()

    if selected in ("gemini", "google", "googleai"):
        return GeminiClient(api_key=settings.gemini_api_key or None, model_name=settings.gemini_model)

    raise ValueError(f"Unsupported LLM mode: {selected}")
