"""Keyed analysis store backed by the conversation_analysis table."""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Protocol

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.domain.errors import PersistenceUnavailable
from app.persistence.repositories.conversation_analysis_repository import ConversationAnalysisRepository


@dataclass
class StoredAnalysis:
    """Cached analysis payload and the message count it was generated from."""

    analysis: dict[str, Any]
    message_count: int


class AnalysisStore(Protocol):
    """Persistence capability used by the analysis cache."""

    async def get(self, id: str) -> StoredAnalysis | None:
        ...

    async def upsert(
        self,
        id: str,
        kind: str,
        analysis: dict[str, Any],
        message_count: int,
        now: datetime,
    ) -> None:
        ...


class SqlAnalysisStore:
    """AnalysisStore that opens one session per operation."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self.session_factory = session_factory

    async def get(self, id: str) -> StoredAnalysis | None:
        """Fetch the cached analysis row for a conversation.

        Raises:
            PersistenceUnavailable: If the database read fails
        """
        try:
            async with self.session_factory() as session:
                row = await ConversationAnalysisRepository(session).get_by_id(id)
        except (SQLAlchemyError, OSError) as e:
            raise PersistenceUnavailable(f"Analysis lookup failed for {id}: {e}") from e

        if row is None:
            return None
        return StoredAnalysis(analysis=row.analysis, message_count=row.message_count)

    async def upsert(
        self,
        id: str,
        kind: str,
        analysis: dict[str, Any],
        message_count: int,
        now: datetime,
    ) -> None:
        """Insert or overwrite the cached analysis for a conversation.

        Raises:
            PersistenceUnavailable: If the database write fails
        """
        try:
            async with self.session_factory() as session:
                await ConversationAnalysisRepository(session).upsert(
                    id=id,
                    type=kind,
                    analysis=analysis,
                    message_count=message_count,
                    now=now,
                )
        except (SQLAlchemyError, OSError) as e:
            raise PersistenceUnavailable(f"Analysis save failed for {id}: {e}") from e
