"""Pytest configuration and fixtures."""

import copy
import json

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from app.domain.models.transcript import ConversationMetadata, SpeechEntry, Transcript
from app.llm.client import LLMClient
from app.persistence.database import Base
from app.persistence.models import *  # noqa: F401, F403


SAMPLE_ANALYSIS = {
    "summary": "The user greeted the agent and the agent replied. No request was made.",
    "outcome": "resolved",
    "sentiment": "neutral",
    "customerSatisfaction": 4,
    "topics": ["greeting"],
    "keyInsights": ["User only said hello"],
    "actionItems": [],
    "speakerAnalysis": {
        "agent": {"toneAssessment": "friendly", "effectivenessScore": 4},
        "user": {"intentSummary": "Say hello", "emotionalTone": "calm"},
    },
    "resolutionType": "voiceAgent",
    "language": "English",
    "tags": ["greeting", "short-call"],
}


class FakeLLMClient(LLMClient):
    """LLM client returning canned responses and recording prompts."""

    def __init__(self, response: str | None = None, error: Exception | None = None) -> None:
        self.response = json.dumps(SAMPLE_ANALYSIS) if response is None else response
        self.error = error
        self.calls: list[tuple[str, dict | None]] = []

    async def generate(self, prompt: str, context: dict | None = None) -> str:
        self.calls.append((prompt, context))
        if self.error is not None:
            raise self.error
        return self.response


class CountingTranscriptProvider:
    """Transcript provider returning a fixed transcript and counting calls."""

    def __init__(self, *lines: tuple[str, str], type: str = "voice_call") -> None:
        self.transcript = Transcript(
            entries=[SpeechEntry(speaker=speaker, text=text) for speaker, text in lines],
            metadata=ConversationMetadata(type=type, agent_name="Support Bot", status="COMPLETED", call_duration=42),
        )
        self.calls = 0

    async def __call__(self) -> Transcript:
        self.calls += 1
        return self.transcript


@pytest.fixture
def sample_analysis():
    """A well-formed analysis payload in wire (camelCase) format."""
    return copy.deepcopy(SAMPLE_ANALYSIS)


@pytest.fixture
def llm_factory():
    """Factory for fake LLM clients."""
    return FakeLLMClient


@pytest.fixture
def provider_factory():
    """Factory for counting transcript providers."""
    return CountingTranscriptProvider


@pytest.fixture
async def db_engine(tmp_path):
    """Create a file-backed SQLite engine with the schema created."""
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'test.db'}",
        echo=False,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    """Session factory bound to the test engine."""
    return async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def db_session(session_factory):
    """Create a test database session."""
    async with session_factory() as session:
        yield session
