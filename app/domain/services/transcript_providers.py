"""Transcript providers for voice calls and chat threads.

Each provider fetches one conversation from its upstream API and returns a
normalized Transcript. The analysis cache only ever calls them on a miss.
"""

from app.domain.models.transcript import (
    ConversationMetadata,
    Transcript,
    normalize_chat_items,
    normalize_voice_transcription,
)
from app.infrastructure.chatkit_client import ChatKitClient
from app.infrastructure.voice_agent_client import VoiceAgentClient


class VoiceCallTranscriptProvider:
    """Fetches a voice call's transcription and agent details."""

    def __init__(
        self,
        client: VoiceAgentClient,
        conversation_id: str,
        project_id: str | None = None,
    ) -> None:
        self.client = client
        self.conversation_id = conversation_id
        self.project_id = project_id

    async def __call__(self) -> Transcript:
        details = await self.client.get_conversation(self.conversation_id, self.project_id)
        agent = details.get("agentDetails") or {}
        job = details.get("jobResponse") or {}

        return Transcript(
            entries=normalize_voice_transcription(job.get("transcription")),
            metadata=ConversationMetadata(
                type="voice_call",
                agent_name=agent.get("agentName"),
                status=details.get("status"),
                call_duration=details.get("callDuration"),
                channel_type=details.get("channelType"),
                greeting_message=agent.get("greetingMessage"),
            ),
        )


class ChatTranscriptProvider:
    """Fetches a ChatKit thread's user and assistant messages."""

    def __init__(self, client: ChatKitClient, thread_id: str) -> None:
        self.client = client
        self.thread_id = thread_id

    async def __call__(self) -> Transcript:
        items = await self.client.list_thread_items(self.thread_id)
        return Transcript(
            entries=normalize_chat_items(items),
            metadata=ConversationMetadata(type="chat", channel_type="chat"),
        )


def build_transcript_provider(
    kind: str,
    conversation_id: str,
    voice_client: VoiceAgentClient,
    chatkit_client: ChatKitClient,
    project_id: str | None = None,
) -> VoiceCallTranscriptProvider | ChatTranscriptProvider:
    """Pick the transcript provider for a conversation kind.

    Raises:
        ValueError: If the kind is unknown
    """
    if kind == "voice_call":
        return VoiceCallTranscriptProvider(voice_client, conversation_id, project_id)
    if kind == "chat":
        return ChatTranscriptProvider(chatkit_client, conversation_id)
    raise ValueError(f"Unsupported conversation kind: {kind}")
