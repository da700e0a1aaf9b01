"""Meal-plan generation: prompt, provider fallback, response parsing.

The preferred provider (``AI_MODEL``) is tried first. When it fails or has no
credential, the alternate provider is tried if it is configured. Failures
come back as ``{"success": False, "error": ...}``; nothing is raised.
"""
import logging
from typing import Any, Dict, Optional

from planeats.domain.errors import ProviderError
from planeats.logic.ai.prompts import build_system_prompt, build_user_prompt
from planeats.logic.ai.response_parser import parse_ai_response

logger = logging.getLogger(__name__)


class AIService:
    def __init__(self, providers: Dict[str, Any], preferred: str = "gemini"):
        """``providers`` maps a provider name to a client, or to None when not configured."""
        self.providers = providers
        self.preferred = preferred

    @classmethod
    def from_config(cls):
        from planeats.utilities import config
        from planeats.infra.ai_providers import GeminiProvider, OpenAIProvider

        providers = {
            "gemini": GeminiProvider(config.GEMINI_API_KEY, config.GEMINI_MODEL, config.AI_REQUEST_TIMEOUT)
            if config.GEMINI_API_KEY else None,
            "openai": OpenAIProvider(config.OPENAI_API_KEY, config.OPENAI_MODEL, config.AI_REQUEST_TIMEOUT)
            if config.OPENAI_API_KEY else None,
        }
        return cls(providers, preferred=config.AI_MODEL)

    def _order(self):
        names = [self.preferred] + [n for n in self.providers if n != self.preferred]
        return [(n, self.providers[n]) for n in names if self.providers.get(n) is not None]

    @property
    def configured(self) -> bool:
        return bool(self._order())

    def complete(self, system_prompt: str, user_prompt: str) -> Dict[str, Any]:
        """Return {success, content, model, provider} from the first provider that answers."""
        candidates = self._order()
        if not candidates:
            return {"success": False, "error": "No AI API keys configured"}

        error: Optional[str] = None
        for position, (name, provider) in enumerate(candidates):
            if position > 0:
                logger.warning("Falling back to %s provider after: %s", name, error)
            try:
                content = provider.complete(system_prompt, user_prompt)
            except ProviderError as e:
                error = str(e)
                continue
            return {"success": True, "content": content, "model": provider.model, "provider": name}
        return {"success": False, "error": error}

    def generate_meal_plan(self, params: Dict[str, Any]) -> Dict[str, Any]:
        """Generate and parse a meal plan for ``params`` (see build_user_prompt for keys)."""
        if not params.get("ingredients"):
            return {"success": False, "error": "Ingredients are required"}
        if not params.get("duration") or params["duration"] < 1:
            return {"success": False, "error": "Duration must be at least 1 day"}

        answer = self.complete(build_system_prompt(), build_user_prompt(params))
        if not answer["success"]:
            logger.error("AI generation failed: %s", answer["error"])
            return answer

        parsed = parse_ai_response(answer["content"])
        if not parsed["success"]:
            return parsed
        return {"model": answer["model"], "provider": answer["provider"], **parsed}


__all__ = ["AIService"]
