"""Normalized conversation transcripts.

Voice-call and chat transcripts arrive in different raw shapes. They are converted
once, at the transcript-provider boundary, into a list of tagged entries so the
analysis layer never has to inspect raw API payloads.
"""

import json
from dataclasses import dataclass, field
from typing import Any, Union

METADATA_KEY = "metadata"


@dataclass(frozen=True)
class FunctionCall:
    """A tool/function invocation made by a speaker."""

    name: str
    arguments: str = ""

    def render(self) -> str:
        return f"{self.name}({self.arguments})"


@dataclass(frozen=True)
class SpeechEntry:
    """A spoken or typed utterance."""

    speaker: str
    text: str

    def render(self) -> str:
        return f"{self.speaker}: {self.text}"


@dataclass(frozen=True)
class FunctionCallEntry:
    """One or more function calls emitted in place of an utterance."""

    speaker: str
    function_calls: tuple[FunctionCall | str, ...]

    def render(self) -> str:
        rendered = "; ".join(
            call.render() if isinstance(call, FunctionCall) else call
            for call in self.function_calls
        )
        return f"{self.speaker}: [function call] {rendered or '[Function call]'}"


TranscriptEntry = Union[SpeechEntry, FunctionCallEntry]


@dataclass
class ConversationMetadata:
    """Conversation facts given to the LLM alongside the transcript."""

    type: str
    agent_name: str | None = None
    status: str | None = None
    call_duration: float | None = None
    channel_type: str | None = None
    greeting_message: str | None = None


@dataclass
class Transcript:
    """A normalized transcript plus its conversation metadata."""

    entries: list[TranscriptEntry]
    metadata: ConversationMetadata
    message_count: int = field(init=False)

    def __post_init__(self) -> None:
        self.message_count = len(self.entries)

    @property
    def text(self) -> str:
        """Render the transcript as `Speaker: text` lines, skipping blank utterances."""
        return "\n".join(
            entry.render()
            for entry in self.entries
            if not (isinstance(entry, SpeechEntry) and not entry.text.strip())
        )


def display_speaker(speaker_key: str, speaker_id: str | None = None) -> str:
    """Map a raw voice transcription speaker key to a readable name."""
    if speaker_id:
        return speaker_id
    if "agent-" in speaker_key:
        return "Agent"
    if "voice_assistant_user_" in speaker_key:
        return "User"
    return speaker_key


def _parse_function_call(item: Any) -> FunctionCall | str:
    function = item.get("function") if isinstance(item, dict) else None
    if isinstance(function, dict) and function.get("name"):
        arguments = function.get("arguments")
        if arguments is None:
            arguments = ""
        elif not isinstance(arguments, str):
            arguments = json.dumps(arguments, separators=(",", ":"))
        return FunctionCall(name=function["name"], arguments=arguments)
    return json.dumps(item, separators=(",", ":"), default=str)


def normalize_voice_entry(raw: dict[str, Any]) -> TranscriptEntry | None:
    """Normalize one voice transcription row.

    A row maps a single speaker key to either the utterance text or a list of
    function calls, optionally next to a `metadata` dict (speaker_id, gender).

    Returns:
        The normalized entry, or None if the row carries no speaker key
    """
    speaker_keys = [key for key in raw if key != METADATA_KEY]
    if not speaker_keys:
        return None

    speaker_key = speaker_keys[0]
    value = raw[speaker_key]
    metadata = raw.get(METADATA_KEY)
    speaker_id = metadata.get("speaker_id") if isinstance(metadata, dict) else None
    speaker = display_speaker(speaker_key, speaker_id)

    if isinstance(value, list):
        return FunctionCallEntry(
            speaker=speaker,
            function_calls=tuple(_parse_function_call(item) for item in value),
        )
    return SpeechEntry(speaker=speaker, text="" if value is None else str(value))


def normalize_voice_transcription(rows: list[dict[str, Any]] | None) -> list[TranscriptEntry]:
    """Normalize a voice call's `jobResponse.transcription` list."""
    entries: list[TranscriptEntry] = []
    for row in rows or []:
        if not isinstance(row, dict):
            continue
        entry = normalize_voice_entry(row)
        if entry is not None:
            entries.append(entry)
    return entries


CHAT_SPEAKERS = {
    "chatkit.user_message": "User",
    "chatkit.assistant_message": "Assistant",
}


def normalize_chat_items(items: list[dict[str, Any]] | None) -> list[TranscriptEntry]:
    """Normalize ChatKit thread items (newest first) into chronological entries.

    Only user and assistant messages are kept; widgets, tasks and other item
    types are dropped.
    """
    entries: list[TranscriptEntry] = []
    for item in items or []:
        speaker = CHAT_SPEAKERS.get(item.get("type", ""))
        if speaker is None:
            continue
        content = item.get("content") or []
        text = "".join(part.get("text", "") for part in content if isinstance(part, dict))
        entries.append(SpeechEntry(speaker=speaker, text=text))
    entries.reverse()
    return entries
