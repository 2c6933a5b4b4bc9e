"""Tests for the analysis and ChatKit API endpoints."""

from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from app.api.deps import get_analysis_cache, get_chatkit_client, get_voice_agent_client
from app.domain.services.analysis_cache import AnalysisCache
from app.infrastructure.upstream import UpstreamAPIError
from app.main import app, mount_web_app

VOICE_DETAILS = {
    "status": "COMPLETED",
    "callDuration": 30,
    "channelType": "WEB",
    "agentDetails": {"agentName": "Teller", "greetingMessage": "Hello!"},
    "jobResponse": {"transcription": [{"agent-1": "Hello!"}, {"voice_assistant_user_1": "hi"}]},
}


@pytest.fixture
def voice_client():
    client = MagicMock()
    client.get_conversation = AsyncMock(return_value=VOICE_DETAILS)
    return client


@pytest.fixture
def chatkit_client():
    client = MagicMock()
    client.create_session = AsyncMock(return_value={"client_secret": "cs_1"})
    client.list_threads = AsyncMock(return_value={"data": [{"id": "thr_1"}]})
    client.list_thread_items = AsyncMock(return_value=[
        {"type": "chatkit.user_message", "content": [{"type": "input_text", "text": "Hi"}]},
    ])
    return client


@pytest.fixture
def fake_llm(llm_factory):
    return llm_factory()


@pytest.fixture
def api_client(fake_llm, voice_client, chatkit_client):
    """Test client with external collaborators replaced."""
    cache = AnalysisCache(llm_client=fake_llm, store=None)
    app.dependency_overrides[get_analysis_cache] = lambda: cache
    app.dependency_overrides[get_voice_agent_client] = lambda: voice_client
    app.dependency_overrides[get_chatkit_client] = lambda: chatkit_client

    yield TestClient(app)

    app.dependency_overrides.clear()


class TestAnalysisEndpoint:
    """Tests for GET /api/analysis/{id}."""

    def test_voice_call_analysis_returns_envelope(self, api_client, voice_client, fake_llm, sample_analysis):
        response = api_client.get(
            "/api/analysis/conv-1",
            params={"type": "voice_call", "messageCount": 2, "projectId": "proj-1"},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["cached"] is False
        assert body["data"] == sample_analysis
        voice_client.get_conversation.assert_awaited_once_with("conv-1", "proj-1")
        assert "Agent: Hello!\nUser: hi" in fake_llm.calls[0][0]

    def test_chat_analysis_uses_chatkit_thread(self, api_client, chatkit_client, voice_client):
        response = api_client.get("/api/analysis/thr_1", params={"type": "chat", "messageCount": 1})

        assert response.status_code == 200
        chatkit_client.list_thread_items.assert_awaited_once_with("thr_1")
        voice_client.get_conversation.assert_not_called()

    def test_empty_transcript_is_client_error(self, api_client, voice_client, fake_llm):
        voice_client.get_conversation.return_value = {"status": "PENDING", "jobResponse": {"transcription": []}}

        response = api_client.get("/api/analysis/conv-1", params={"type": "voice_call", "messageCount": 0})

        assert response.status_code == 400
        assert "No transcript" in response.json()["detail"]
        assert fake_llm.calls == []

    def test_generation_failure_is_server_error(self, api_client, fake_llm):
        fake_llm.response = "not json"

        response = api_client.get("/api/analysis/conv-1", params={"type": "voice_call", "messageCount": 2})

        assert response.status_code == 500
        assert response.json()["detail"] == "Failed to generate analysis"

    def test_upstream_failure_is_bad_gateway(self, api_client, voice_client):
        voice_client.get_conversation.side_effect = UpstreamAPIError("voice_agent", 503, "unavailable")

        response = api_client.get("/api/analysis/conv-1", params={"type": "voice_call", "messageCount": 2})

        assert response.status_code == 502

    def test_transcript_network_error_is_bad_gateway(self, api_client, voice_client, fake_llm):
        voice_client.get_conversation.side_effect = httpx.ConnectTimeout("timed out")

        response = api_client.get("/api/analysis/c1", params={"type": "voice_call", "messageCount": 2})

        assert response.status_code == 502
        assert response.json() == {"detail": "Failed to fetch transcript from voice_agent"}
        assert fake_llm.calls == []

    def test_chat_transcript_network_error_names_chatkit(self, api_client, chatkit_client):
        chatkit_client.list_thread_items.side_effect = httpx.ReadTimeout("timed out")

        response = api_client.get("/api/analysis/thr_1", params={"type": "chat", "messageCount": 1})

        assert response.status_code == 502
        assert response.json()["detail"] == "Failed to fetch transcript from chatkit"

    @pytest.mark.parametrize(
        "params",
        [
            {"type": "sms", "messageCount": 1},
            {"type": "chat", "messageCount": -1},
            {"type": "chat"},
        ],
    )
    def test_invalid_query_is_rejected(self, api_client, params):
        response = api_client.get("/api/analysis/thr_1", params=params)

        assert response.status_code == 422


class TestChatKitProxy:
    """Tests for the ChatKit proxy endpoints."""

    def test_create_session(self, api_client, chatkit_client):
        response = api_client.post("/api/chatkit/session")

        assert response.status_code == 200
        assert response.json() == {"client_secret": "cs_1"}
        chatkit_client.create_session.assert_awaited_once()

    def test_create_session_with_workflow_override(self, api_client, chatkit_client):
        response = api_client.post("/api/create-session", json={"workflow_id": "wf_custom"})

        assert response.status_code == 200
        assert chatkit_client.create_session.await_args.args[0] == "wf_custom"

    def test_list_threads_defaults_to_demo_user(self, api_client, chatkit_client):
        from app.settings import settings

        response = api_client.get("/api/chatkit/threads")

        assert response.status_code == 200
        assert response.json() == {"data": [{"id": "thr_1"}]}
        chatkit_client.list_threads.assert_awaited_once_with(settings.demo_user_id)

    def test_thread_messages_are_wrapped_in_data(self, api_client):
        response = api_client.get("/api/chatkit/threads/thr_1/messages")

        assert response.status_code == 200
        assert response.json()["data"][0]["type"] == "chatkit.user_message"

    def test_upstream_error_status_is_relayed(self, api_client, chatkit_client):
        chatkit_client.list_threads.side_effect = UpstreamAPIError("chatkit", 401, "invalid api key")

        response = api_client.get("/api/chatkit/threads", params={"user": "u1"})

        assert response.status_code == 401
        assert response.json() == {"error": "invalid api key"}


def test_health_check_and_request_id_header():
    """Health endpoint responds and echoes the request id."""
    client = TestClient(app)

    response = client.get("/health", headers={"X-Request-ID": "req-42"})

    assert response.status_code == 200
    assert response.json() == {"status": "healthy"}
    assert response.headers["X-Request-ID"] == "req-42"


class TestWebAppFallback:
    """Tests for serving the built single-page app."""

    @pytest.fixture
    def web_client(self, tmp_path):
        (tmp_path / "index.html").write_text("<html>app</html>")
        (tmp_path / "app.js").write_text("console.log('app')")

        web_app = FastAPI()

        @web_app.get("/api/ping")
        async def ping():
            return {"ok": True}

        mount_web_app(web_app, tmp_path, api_prefix="/api")
        return TestClient(web_app)

    def test_deep_link_returns_index(self, web_client):
        response = web_client.get("/history/thr_1")

        assert response.status_code == 200
        assert response.text == "<html>app</html>"

    def test_existing_asset_is_served(self, web_client):
        response = web_client.get("/app.js")

        assert response.status_code == 200
        assert "console.log" in response.text

    def test_unknown_api_path_is_not_found(self, web_client):
        assert web_client.get("/api/ping").json() == {"ok": True}
        assert web_client.get("/api/missing").status_code == 404


@patch("app.llm.gemini_client.genai.Client", side_effect=ValueError("No API key was provided"))
def test_analysis_without_llm_credentials(mock_genai_client, voice_client, chatkit_client):
    """Missing LLM credentials only fail requests that need a generation."""
    app.dependency_overrides[get_voice_agent_client] = lambda: voice_client
    app.dependency_overrides[get_chatkit_client] = lambda: chatkit_client
    app.state.analysis_cache = None
    app.state.session_factory = None
    client = TestClient(app)

    try:
        voice_client.get_conversation.return_value = {"jobResponse": {"transcription": []}}
        empty = client.get("/api/analysis/conv-1", params={"type": "voice_call", "messageCount": 0})

        voice_client.get_conversation.return_value = VOICE_DETAILS
        generated = client.get("/api/analysis/conv-1", params={"type": "voice_call", "messageCount": 2})

        assert empty.status_code == 400
        assert generated.status_code == 500
        assert generated.json()["detail"] == "Failed to generate analysis"
        assert isinstance(app.state.analysis_cache, AnalysisCache)
    finally:
        app.dependency_overrides.clear()
        app.state.analysis_cache = None
