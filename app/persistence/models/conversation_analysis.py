"""Conversation analysis model caching AI-generated conversation analyses."""

from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Integer, JSON, String, Text
from sqlalchemy.dialects.postgresql import JSONB

from app.persistence.database import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ConversationAnalysis(Base):
    """Single-slot analysis cache row, one per voice call or chat thread."""

    __tablename__ = "conversation_analysis"

    # Voice conversation id or ChatKit thread id
    id = Column(Text, primary_key=True)

    # Values: voice_call, chat
    type = Column(String(20), nullable=False)

    # AnalysisResult serialized with camelCase keys
    analysis = Column(JSON().with_variant(JSONB(), "postgresql"), nullable=False)

    # Number of transcript entries the analysis was generated from
    message_count = Column(Integer, nullable=False, default=0, server_default="0")

    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow, nullable=False)

    def __repr__(self) -> str:
        return f"<ConversationAnalysis(id={self.id}, type={self.type}, message_count={self.message_count})>"
