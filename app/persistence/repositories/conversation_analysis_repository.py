"""Conversation analysis repository."""

from datetime import datetime, timezone
from typing import Any

from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.ext.asyncio import AsyncSession

from app.persistence.models.conversation_analysis import ConversationAnalysis
from app.persistence.repositories.base import BaseRepository


class ConversationAnalysisRepository(BaseRepository[ConversationAnalysis]):
    """Repository for ConversationAnalysis entities."""

    def __init__(self, session: AsyncSession):
        """Initialize conversation analysis repository."""
        super().__init__(ConversationAnalysis, session)

    async def upsert(
        self,
        id: str,
        type: str,
        analysis: dict[str, Any],
        message_count: int,
        now: datetime | None = None,
    ) -> None:
        """Insert or overwrite the analysis row for a conversation.

        Args:
            id: Conversation or thread id (primary key)
            type: Conversation kind (voice_call or chat)
            analysis: Serialized AnalysisResult
            message_count: Message count the analysis was generated from
            now: Timestamp to record as updated_at (defaults to current UTC time)
        """
        now = now or datetime.now(timezone.utc)
        # ON CONFLICT upserts are dialect-specific constructs
        dialect = self.session.get_bind().dialect.name
        insert = sqlite_insert if dialect == "sqlite" else pg_insert

        stmt = insert(ConversationAnalysis).values(
            id=id,
            type=type,
            analysis=analysis,
            message_count=message_count,
            created_at=now,
            updated_at=now,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=[ConversationAnalysis.id],
            set_={
                "type": stmt.excluded["type"],
                "analysis": stmt.excluded["analysis"],
                "message_count": stmt.excluded["message_count"],
                "updated_at": stmt.excluded["updated_at"],
            },
        )
        await self.session.execute(stmt)
        await self.session.commit()
        # Refresh any stale instance already loaded in this session
        self.session.expire_all()
