"""FastAPI dependencies for shared services and API clients."""

from fastapi import Request

from app.domain.services.analysis_cache import AnalysisCache, AnalysisCacheConfig
from app.infrastructure.chatkit_client import ChatKitClient
from app.infrastructure.voice_agent_client import VoiceAgentClient
from app.llm.factory import get_llm_client
from app.persistence.analysis_store import SqlAnalysisStore
from app.settings import settings


def get_analysis_cache(request: Request) -> AnalysisCache:
    """Get the application's analysis cache, creating it on first use.

    The LLM client is created lazily so the API starts without LLM credentials.
    """
    state = request.app.state
    cache = getattr(state, "analysis_cache", None)
    if cache is None:
        session_factory = getattr(state, "session_factory", None)
        store = SqlAnalysisStore(session_factory) if session_factory is not None else None
        cache = AnalysisCache(
            llm_client=get_llm_client(),
            store=store,
            config=AnalysisCacheConfig(
                temperature=settings.analysis_temperature,
                max_output_tokens=settings.analysis_max_output_tokens,
            ),
        )
        state.analysis_cache = cache
    return cache


def get_chatkit_client() -> ChatKitClient:
    """Get a ChatKit client configured from settings."""
    return ChatKitClient()


def get_voice_agent_client() -> VoiceAgentClient:
    """Get a voice agent API client configured from settings."""
    return VoiceAgentClient()
