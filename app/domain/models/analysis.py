"""Data models for AI-generated conversation analyses."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

ConversationKind = Literal["voice_call", "chat"]

CONVERSATION_KINDS: tuple[str, ...] = ("voice_call", "chat")

Outcome = Literal["resolved", "unresolved", "partial", "escalated", "dropped", "no_answer"]
Sentiment = Literal["positive", "negative", "neutral", "mixed"]
ResolutionType = Literal["voiceAgent", "transfer", "callback", "selfService", "none"]


class _CamelModel(BaseModel):
    """Base model serialized with camelCase keys (the LLM and API wire format)."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class AgentAnalysis(_CamelModel):
    """Assessment of the agent side of the conversation."""

    tone_assessment: str  # e.g., "friendly", "professional"
    effectiveness_score: int = Field(ge=1, le=5)


class UserAnalysis(_CamelModel):
    """Assessment of the user side of the conversation."""

    intent_summary: str
    emotional_tone: str  # e.g., "calm", "frustrated"


class SpeakerAnalysis(_CamelModel):
    """Per-speaker analysis."""

    agent: AgentAnalysis
    user: UserAnalysis


class AnalysisResult(_CamelModel):
    """Structured analysis of a single voice call or chat thread."""

    summary: str
    outcome: Outcome
    sentiment: Sentiment
    customer_satisfaction: int = Field(ge=1, le=5)
    topics: list[str]
    key_insights: list[str]
    action_items: list[str]
    speaker_analysis: SpeakerAnalysis
    resolution_type: ResolutionType
    language: str
    tags: list[str]

    @field_validator("tags")
    @classmethod
    def _dedupe_tags(cls, tags: list[str]) -> list[str]:
        # Tags are a set; keep first-seen order for stable output
        return list(dict.fromkeys(tags))

    def to_payload(self) -> dict:
        """Serialize to the camelCase JSON shape stored and returned by the API."""
        return self.model_dump(mode="json", by_alias=True)
