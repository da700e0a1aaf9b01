"""LLM provider clients used for meal-plan generation.

Each provider exposes ``name``, ``model`` and ``complete(system_prompt, user_prompt) -> str``
and raises ProviderError on any failure (network, auth, quota, empty answer).
Both request JSON output from the model.
"""
import logging

from openai import OpenAI
from google import genai
from google.genai import types

from planeats.domain.errors import ProviderError

logger = logging.getLogger(__name__)


class OpenAIProvider:
    name = "openai"

    def __init__(self, api_key: str, model: str = "gpt-4o-mini", timeout: float = 30):
        self.model = model
        self._client = OpenAI(api_key=api_key, timeout=timeout, max_retries=0)

    def complete(self, system_prompt: str, user_prompt: str) -> str:
        try:
            response = self._client.responses.create(
                model=self.model,
                instructions=system_prompt,
                input=user_prompt,
                text={"format": {"type": "json_object"}},
            )
        except Exception as e:
            logger.error("OpenAI request failed: %s", e)
            raise ProviderError("OpenAI", str(e)) from e

        content = (response.output_text or "").strip()
        if not content:
            raise ProviderError("OpenAI", "empty response")
        return content


class GeminiProvider:
    name = "gemini"

    def __init__(self, api_key: str, model: str = "gemini-2.5-flash", timeout: float = 30):
        self.model = model
        self._client = genai.Client(
            api_key=api_key,
            http_options=types.HttpOptions(timeout=int(timeout * 1000)),
        )

    def complete(self, system_prompt: str, user_prompt: str) -> str:
        try:
            response = self._client.models.generate_content(
                model=self.model,
                contents=f"{system_prompt}\n\n{user_prompt}",
                config=types.GenerateContentConfig(
                    temperature=0.7,
                    top_k=40,
                    top_p=0.95,
                    max_output_tokens=8192,
                    response_mime_type="application/json",
                ),
            )
        except Exception as e:
            logger.error("Gemini request failed: %s", e)
            raise ProviderError("Gemini", str(e)) from e

        content = (response.text or "").strip()
        if not content:
            raise ProviderError("Gemini", "Invalid response format from Gemini API")
        return content


__all__ = ["OpenAIProvider", "GeminiProvider"]
