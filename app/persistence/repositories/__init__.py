"""Repository layer."""

from app.persistence.repositories.conversation_analysis_repository import ConversationAnalysisRepository

__all__ = ["ConversationAnalysisRepository"]
