"""Read-through cache of AI-generated conversation analyses.

An analysis is memoized per conversation id together with the message count it
was generated from. A lookup is a hit only when the stored count equals the
caller's current count; any other count regenerates the analysis and overwrites
the single cached row. The store is optional: without it every lookup misses
and writes are skipped.
"""

import json
import logging
import re
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from datetime import datetime, timezone

from pydantic import ValidationError

from app.domain.errors import GenerationFailed, NoTranscriptAvailable
from app.domain.models.analysis import CONVERSATION_KINDS, AnalysisResult, ConversationKind
from app.domain.models.transcript import Transcript
from app.domain.prompts.analysis import build_analysis_prompt
from app.llm.client import LLMClient
from app.persistence.analysis_store import AnalysisStore

logger = logging.getLogger(__name__)

TranscriptProvider = Callable[[], Awaitable[Transcript]]

_JSON_FENCE_RE = re.compile(r"^```(?:json)?\s*(.*?)\s*```$", re.DOTALL)


@dataclass
class AnalysisCacheConfig:
    """Generation settings for analysis requests."""

    temperature: float = 0.3
    max_output_tokens: int = 2048


@dataclass
class AnalysisOutcome:
    """An analysis and whether it was served from the cache."""

    analysis: AnalysisResult
    cached: bool


def parse_analysis(content: str | None) -> AnalysisResult:
    """Parse LLM output into an AnalysisResult.

    Raises:
        GenerationFailed: If the content is empty, not JSON, or the wrong shape
    """
    if not content or not content.strip():
        raise GenerationFailed("Empty response from LLM")

    text = content.strip()
    fenced = _JSON_FENCE_RE.match(text)
    if fenced:
        text = fenced.group(1)

    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise GenerationFailed(f"LLM returned invalid JSON: {e}") from e

    try:
        return AnalysisResult.model_validate(data)
    except ValidationError as e:
        raise GenerationFailed(f"LLM returned an invalid analysis: {e.error_count()} field error(s)") from e


class AnalysisCache:
    """Serves conversation analyses, regenerating them when a conversation grows."""

    def __init__(
        self,
        llm_client: LLMClient,
        store: AnalysisStore | None = None,
        config: AnalysisCacheConfig | None = None,
    ) -> None:
        self.llm_client = llm_client
        self.store = store
        self.config = config or AnalysisCacheConfig()

    async def get_or_compute(
        self,
        id: str,
        kind: ConversationKind,
        current_message_count: int,
        transcript_provider: TranscriptProvider,
    ) -> AnalysisOutcome:
        """Return the analysis for a conversation, computing it on a cache miss.

        Args:
            id: Conversation id (voice conversation id or chat thread id)
            kind: "voice_call" or "chat"
            current_message_count: Transcript entries visible to the caller now
            transcript_provider: Async callable fetching the normalized transcript

        Returns:
            AnalysisOutcome with the analysis and a cached flag

        Raises:
            ValueError: If the arguments are malformed
            NoTranscriptAvailable: If the transcript has no text
            GenerationFailed: If the LLM produced no usable analysis
        """
        if not id:
            raise ValueError("Conversation id must be non-empty")
        if kind not in CONVERSATION_KINDS:
            raise ValueError(f"Unsupported conversation kind: {kind}")
        if current_message_count < 0:
            raise ValueError("Message count must be >= 0")

        cached = await self._lookup(id, current_message_count)
        if cached is not None:
            logger.info(
                f"[ANALYSIS] Cache hit for {id}",
                extra={"conversation_id": id, "message_count": current_message_count},
            )
            return AnalysisOutcome(analysis=cached, cached=True)

        transcript = await transcript_provider()
        transcript_text = transcript.text
        if not transcript_text.strip():
            raise NoTranscriptAvailable(id)

        logger.info(
            f"[ANALYSIS] Generating analysis for {id}",
            extra={
                "conversation_id": id,
                "conversation_type": kind,
                "message_count": current_message_count,
                "transcript_entries": transcript.message_count,
            },
        )
        analysis = await self._generate(transcript_text, transcript)

        await self._save(id, kind, analysis, current_message_count)
        return AnalysisOutcome(analysis=analysis, cached=False)

    async def _lookup(self, id: str, message_count: int) -> AnalysisResult | None:
        if self.store is None:
            return None

        try:
            record = await self.store.get(id)
        except Exception as e:
            logger.warning(f"[ANALYSIS] Cache lookup failed for {id}: {e}")
            return None

        if record is None or record.message_count != message_count:
            return None

        try:
            return AnalysisResult.model_validate(record.analysis)
        except ValidationError:
            logger.warning(f"[ANALYSIS] Discarding malformed cached analysis for {id}")
            return None

    async def _generate(self, transcript_text: str, transcript: Transcript) -> AnalysisResult:
        prompt = build_analysis_prompt(transcript_text, transcript.metadata)
        try:
            content = await self.llm_client.generate(
                prompt,
                {
                    "temperature": self.config.temperature,
                    "max_tokens": self.config.max_output_tokens,
                    "json": True,
                },
            )
        except Exception as e:
            logger.error(f"[ANALYSIS] LLM call failed: {e}")
            raise GenerationFailed(f"LLM call failed: {e}") from e

        try:
            return parse_analysis(content)
        except GenerationFailed as e:
            logger.error(f"[ANALYSIS] {e}")
            raise

    async def _save(self, id: str, kind: str, analysis: AnalysisResult, message_count: int) -> None:
        if self.store is None:
            return

        try:
            await self.store.upsert(
                id,
                kind,
                analysis.to_payload(),
                message_count,
                datetime.now(timezone.utc),
            )
        except Exception as e:
            logger.warning(f"[ANALYSIS] Failed to save analysis for {id}: {e}")
