"""ChatKit proxy endpoints for the chatbot and chat history pages."""

import logging
from typing import Annotated, Any

import httpx
from fastapi import APIRouter, Body, Depends, Query
from fastapi.responses import JSONResponse

from app.api.deps import get_chatkit_client
from app.infrastructure.chatkit_client import ChatKitClient
from app.infrastructure.upstream import UpstreamAPIError
from app.settings import settings

logger = logging.getLogger(__name__)

router = APIRouter()


def _upstream_error_response(e: UpstreamAPIError) -> JSONResponse:
    return JSONResponse(status_code=e.status_code, content={"error": e.body})


async def _create_session(client: ChatKitClient, workflow_id: str) -> Any:
    try:
        return await client.create_session(workflow_id, settings.demo_user_id)
    except UpstreamAPIError as e:
        return _upstream_error_response(e)
    except httpx.HTTPError as e:
        logger.error(f"[CHATKIT] Error creating session: {e}")
        return JSONResponse(status_code=500, content={"error": "Failed to create session"})


@router.post("/chatkit/session")
async def create_chatkit_session(
    client: Annotated[ChatKitClient, Depends(get_chatkit_client)],
) -> Any:
    """Create a ChatKit session and return its client_secret to the frontend."""
    return await _create_session(client, settings.chatkit_workflow_id)


@router.post("/create-session")
async def create_session(
    client: Annotated[ChatKitClient, Depends(get_chatkit_client)],
    payload: Annotated[dict[str, Any] | None, Body()] = None,
) -> Any:
    """Create a ChatKit session for an optional workflow_id (chatbot page)."""
    workflow_id = (payload or {}).get("workflow_id") or settings.chatkit_workflow_id
    return await _create_session(client, workflow_id)


@router.get("/chatkit/threads")
async def list_chatkit_threads(
    client: Annotated[ChatKitClient, Depends(get_chatkit_client)],
    user: str | None = Query(None, description="ChatKit user id"),
) -> Any:
    """List ChatKit threads for a user (defaults to the demo user)."""
    try:
        return await client.list_threads(user or settings.demo_user_id)
    except UpstreamAPIError as e:
        return _upstream_error_response(e)
    except httpx.HTTPError as e:
        logger.error(f"[CHATKIT] Error fetching threads: {e}")
        return JSONResponse(status_code=500, content={"error": "Failed to fetch threads"})


@router.get("/chatkit/threads/{thread_id}/messages")
async def list_chatkit_thread_messages(
    thread_id: str,
    client: Annotated[ChatKitClient, Depends(get_chatkit_client)],
) -> Any:
    """List the items of a ChatKit thread."""
    try:
        items = await client.list_thread_items(thread_id)
    except UpstreamAPIError as e:
        return _upstream_error_response(e)
    except httpx.HTTPError as e:
        logger.error(f"[CHATKIT] Error fetching messages for {thread_id}: {e}")
        return JSONResponse(status_code=500, content={"error": "Failed to fetch messages"})
    return {"data": items}
