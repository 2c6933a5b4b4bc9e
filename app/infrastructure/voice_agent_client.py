"""Voice agent (Hamsa) API client.

Reads voice conversation details, including the call transcription, so calls
can be analyzed server-side.
"""

import logging
from typing import Any
from urllib.parse import quote

import httpx

from app.infrastructure.upstream import ensure_success
from app.settings import settings

logger = logging.getLogger(__name__)

SERVICE_NAME = "voice_agent"


class VoiceAgentClient:
    """Async client for the voice agent conversations API."""

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        project_id: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.api_key = api_key if api_key is not None else settings.voice_agent_api_key
        self.base_url = (base_url or settings.voice_agent_api_url).rstrip("/")
        self.project_id = project_id if project_id is not None else settings.voice_agent_project_id
        self.timeout = timeout or settings.http_timeout_seconds
        self.transport = transport

    async def get_conversation(self, conversation_id: str, project_id: str | None = None) -> dict[str, Any]:
        """Fetch a conversation's details.

        Args:
            conversation_id: Voice conversation id
            project_id: Project id; defaults to the configured project

        Returns:
            The `data` payload (agentDetails, jobResponse, status, callDuration, ...)

        Raises:
            UpstreamAPIError: If the API rejects the request
        """
        params: dict[str, str] = {}
        project = project_id or self.project_id
        if project:
            params["projectId"] = project

        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            resp = await client.get(
                f"{self.base_url}/v1/voice-agents/conversation/{quote(conversation_id, safe='')}",
                params=params,
                headers={"Authorization": f"Token {self.api_key}"},
            )

        if not resp.is_success:
            logger.error(f"[VOICE_AGENT] Conversation fetch failed for {conversation_id}: HTTP {resp.status_code}")
        ensure_success(SERVICE_NAME, resp)

        body = resp.json()
        return body.get("data") or {}
