"""Conversation analysis API endpoints."""

import logging
from typing import Annotated, Literal

import httpx
from fastapi import APIRouter, Depends, HTTPException, Path, Query, status
from pydantic import BaseModel

from app.api.deps import get_analysis_cache, get_chatkit_client, get_voice_agent_client
from app.domain.errors import GenerationFailed, NoTranscriptAvailable
from app.domain.models.analysis import AnalysisResult
from app.domain.services.analysis_cache import AnalysisCache
from app.domain.services.transcript_providers import build_transcript_provider
from app.infrastructure.chatkit_client import SERVICE_NAME as CHATKIT_SERVICE, ChatKitClient
from app.infrastructure.upstream import UpstreamAPIError
from app.infrastructure.voice_agent_client import SERVICE_NAME as VOICE_AGENT_SERVICE, VoiceAgentClient

logger = logging.getLogger(__name__)

router = APIRouter()


class AnalysisResponse(BaseModel):
    """Analysis response envelope."""

    data: AnalysisResult
    cached: bool


@router.get("/{conversation_id}", response_model=AnalysisResponse, response_model_by_alias=True)
async def get_analysis(
    cache: Annotated[AnalysisCache, Depends(get_analysis_cache)],
    voice_client: Annotated[VoiceAgentClient, Depends(get_voice_agent_client)],
    chatkit_client: Annotated[ChatKitClient, Depends(get_chatkit_client)],
    conversation_id: str = Path(..., min_length=1, description="Voice conversation id or chat thread id"),
    type: Literal["voice_call", "chat"] = Query(..., description="Conversation kind"),
    message_count: int = Query(..., alias="messageCount", ge=0, description="Transcript entries visible to the caller"),
    project_id: str | None = Query(None, alias="projectId", description="Voice agent project id"),
) -> AnalysisResponse:
    """Get the AI analysis of a conversation, generating it if the cache is stale.

    Args:
        cache: Analysis cache
        voice_client: Voice agent API client
        chatkit_client: ChatKit API client
        conversation_id: Conversation or thread id
        type: voice_call or chat
        message_count: Current number of messages/transcript entries
        project_id: Optional voice agent project override

    Returns:
        The analysis and whether it came from the cache
    """
    provider = build_transcript_provider(
        type,
        conversation_id,
        voice_client=voice_client,
        chatkit_client=chatkit_client,
        project_id=project_id,
    )

    try:
        outcome = await cache.get_or_compute(conversation_id, type, message_count, provider)
    except NoTranscriptAvailable as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        )
    except GenerationFailed:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to generate analysis",
        )
    except UpstreamAPIError as e:
        logger.error(f"[ANALYSIS] Transcript fetch failed for {conversation_id}: {e}")
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=f"Failed to fetch transcript from {e.service}",
        )
    except httpx.HTTPError as e:
        service = VOICE_AGENT_SERVICE if type == "voice_call" else CHATKIT_SERVICE
        logger.error(f"[ANALYSIS] Transcript fetch from {service} failed for {conversation_id}: {e}")
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=f"Failed to fetch transcript from {service}",
        )

    return AnalysisResponse(data=outcome.analysis, cached=outcome.cached)
