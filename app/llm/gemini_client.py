"""Gemini client implementation."""

import os
from typing import Any

from google import genai
from google.genai import types

from app.llm.client import LLMClient
from app.settings import settings


class GeminiClient(LLMClient):
    """Gemini client using the google-genai SDK."""

    def __init__(self, api_key: str | None = None, model_name: str | None = None) -> None:
        """Initialize Gemini client, optionally behind a custom base URL.

        The SDK client is created on first use, so a missing API key surfaces
        as a generation failure instead of an error at construction time.
        """
        self.api_key = api_key or os.environ.get("AI_INTEGRATIONS_GEMINI_API_KEY", settings.gemini_api_key)
        self.base_url = os.environ.get("AI_INTEGRATIONS_GEMINI_BASE_URL")
        self.model_name = model_name or settings.gemini_model
        self._client: genai.Client | None = None

    @property
    def client(self) -> genai.Client:
        """The google-genai SDK client."""
        if self._client is None:
            if self.base_url:
                http_options = types.HttpOptions(api_version="v1beta", base_url=self.base_url)
            else:
                http_options = types.HttpOptions(api_version="v1beta")
            self._client = genai.Client(api_key=self.api_key, http_options=http_options)
        return self._client

    @staticmethod
    def build_generation_config(context: dict | None = None) -> dict[str, Any]:
        """Map a generic LLM context dict onto Gemini generation settings."""
        generation_config: dict[str, Any] = {
            "temperature": 0.3,
            "max_output_tokens": 500,
        }

        if context:
            if "temperature" in context:
                generation_config["temperature"] = context["temperature"]
            if "max_tokens" in context:
                generation_config["max_output_tokens"] = context["max_tokens"]
            if context.get("json"):
                generation_config["response_mime_type"] = "application/json"

        return generation_config

    async def generate(self, prompt: str, context: dict | None = None) -> str:
        """Generate a response using Gemini.

        Args:
            prompt: The prompt to send to the LLM
            context: Optional context dictionary (temperature, max_tokens, json)

        Returns:
            The generated response text

        Raises:
            Exception: If generation fails
        """
        try:
            response = await self.client.aio.models.generate_content(
                model=self.model_name,
                contents=prompt,
                config=types.GenerateContentConfig(**self.build_generation_config(context)),
            )

            return response.text or ""
        except Exception as e:
            raise Exception(f"Gemini generation failed: {str(e)}") from e
