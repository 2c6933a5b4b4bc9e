"""LLM abstraction layer."""

from app.llm.client import LLMClient
from app.llm.factory import get_llm_client
from app.llm.gemini_client import GeminiClient

__all__ = ["LLMClient", "GeminiClient", "get_llm_client"]
