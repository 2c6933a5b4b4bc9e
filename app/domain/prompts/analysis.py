"""Prompt for structured conversation analysis."""

from app.domain.models.transcript import ConversationMetadata

ANALYSIS_PROMPT_TEMPLATE = """You are an expert conversation analyst. Analyze the following conversation and return a JSON object with these fields:

{{
  "summary": "2-3 sentence summary of the conversation - what was discussed, what was resolved",
  "outcome": "resolved | unresolved | partial | escalated | dropped | no_answer",
  "sentiment": "positive | negative | neutral | mixed",
  "customerSatisfaction": number (1-5 scale, estimated from tone and resolution),
  "topics": ["topic1", "topic2"],
  "keyInsights": ["insight1", "insight2"],
  "actionItems": ["action1", "action2"],
  "speakerAnalysis": {{
    "agent": {{ "toneAssessment": "friendly/professional/etc", "effectivenessScore": 1-5 }},
    "user": {{ "intentSummary": "what the user wanted", "emotionalTone": "calm/frustrated/etc" }}
  }},
  "resolutionType": "voiceAgent | transfer | callback | selfService | none",
  "language": "detected language of conversation",
  "tags": ["tag1", "tag2"]
}}

Return ONLY valid JSON, no markdown fences or extra text.

Conversation metadata:
- Type: {type}
- Agent: {agent_name}
- Status: {status}
- Duration: {call_duration} seconds
- Channel: {channel_type}
- Agent greeting: {greeting_message}

Transcript:
{transcript}"""


def _format_duration(duration: float | None) -> str:
    if duration is None:
        return "N/A"
    if float(duration).is_integer():
        return str(int(duration))
    return str(duration)


def build_analysis_prompt(transcript: str, metadata: ConversationMetadata) -> str:
    """Render the analysis prompt for a transcript and its metadata."""
    return ANALYSIS_PROMPT_TEMPLATE.format(
        type=metadata.type,
        agent_name=metadata.agent_name or "Unknown",
        status=metadata.status or "Unknown",
        call_duration=_format_duration(metadata.call_duration),
        channel_type=metadata.channel_type or "Unknown",
        greeting_message=metadata.greeting_message or "N/A",
        transcript=transcript,
    )
