"""Database models."""

from app.persistence.models.conversation_analysis import ConversationAnalysis

__all__ = [
    "ConversationAnalysis",
]
