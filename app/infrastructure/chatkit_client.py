"""OpenAI ChatKit API client.

Creates ChatKit sessions for the chatbot page and reads thread history for
the conversation history view and chat analyses.
"""

import logging
from typing import Any
from urllib.parse import quote

import httpx

from app.infrastructure.upstream import ensure_success
from app.settings import settings

logger = logging.getLogger(__name__)

SERVICE_NAME = "chatkit"


class ChatKitClient:
    """Thin async wrapper around the ChatKit REST endpoints."""

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.api_key = api_key if api_key is not None else settings.openai_api_key
        self.base_url = (base_url or settings.chatkit_api_base).rstrip("/")
        self.timeout = timeout or settings.http_timeout_seconds
        self.transport = transport

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self.api_key}",
            "OpenAI-Beta": "chatkit_beta=v1",
        }

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.base_url,
            headers=self._headers(),
            timeout=self.timeout,
            transport=self.transport,
        )

    async def create_session(self, workflow_id: str, user: str) -> dict[str, Any]:
        """Create a ChatKit session and return it (including client_secret).

        Raises:
            UpstreamAPIError: If ChatKit rejects the request
        """
        async with self._client() as client:
            resp = await client.post(
                "/sessions",
                json={"workflow": {"id": workflow_id}, "user": user},
            )
        if not resp.is_success:
            logger.error(f"[CHATKIT] Session creation failed: HTTP {resp.status_code}")
        ensure_success(SERVICE_NAME, resp)
        return resp.json()

    async def list_threads(self, user: str) -> dict[str, Any]:
        """List ChatKit threads for a user.

        Raises:
            UpstreamAPIError: If ChatKit rejects the request
        """
        async with self._client() as client:
            resp = await client.get("/threads", params={"user": user})
        if not resp.is_success:
            logger.error(f"[CHATKIT] Threads fetch failed: HTTP {resp.status_code}")
        ensure_success(SERVICE_NAME, resp)
        return resp.json()

    async def list_thread_items(self, thread_id: str) -> list[dict[str, Any]]:
        """List the items (messages, widgets, ...) of a thread, newest first.

        Raises:
            UpstreamAPIError: If ChatKit rejects the request
        """
        async with self._client() as client:
            resp = await client.get(f"/threads/{quote(thread_id, safe='')}/items")
        if not resp.is_success:
            logger.error(f"[CHATKIT] Thread items fetch failed for {thread_id}: HTTP {resp.status_code}")
        ensure_success(SERVICE_NAME, resp)
        return resp.json().get("data") or []
