"""Errors raised while producing conversation analyses."""


class ConversationAnalysisError(Exception):
    """Base exception for conversation analysis errors."""
    pass


class NoTranscriptAvailable(ConversationAnalysisError):
    """The conversation has no transcript text to analyze."""

    def __init__(self, conversation_id: str) -> None:
        self.conversation_id = conversation_id
        super().__init__(f"No transcript available for conversation {conversation_id}")


class GenerationFailed(ConversationAnalysisError):
    """The LLM returned no content or content that is not a valid analysis."""
    pass


class PersistenceUnavailable(ConversationAnalysisError):
    """The analysis store is not configured or a read/write failed."""
    pass
