from __future__ import annotations

import logging
from typing import Any, Optional

from openai import OpenAI, OpenAIError

from quizforge.core.exceptions import ConfigurationError, UpstreamError
from quizforge.core.settings import Settings, settings

logger = logging.getLogger(__name__)


def _secret(value: Any) -> str:
    if value is None:
        return ""
    getter = getattr(value, "get_secret_value", None)
    return (getter() if callable(getter) else str(value)).strip()


def validate_llm_settings(cfg: Settings) -> None:
    """Raise ConfigurationError unless key, model and base URL are all set."""
    if not _secret(cfg.openai_api_key):
        logger.error("OpenAI API key is not configured")
        raise ConfigurationError(
            "OpenAI API key is not configured. Please set OPENAI_API_KEY environment variable."
        )
    if not (cfg.llm_model or "").strip():
        logger.error("OpenAI model is not configured")
        raise ConfigurationError("OpenAI model is not configured.")
    if not (cfg.openai_base_url or "").strip():
        logger.error("OpenAI base URL is not configured")
        raise ConfigurationError("OpenAI base URL is not configured.")


class LLMService:
    """
    Chat-completion access for quiz generation.
    - OpenAI-compatible endpoint (base URL configurable).
    - Bounded retries and a per-call timeout from settings.
    """

    def __init__(self, *, openai_client: Optional[OpenAI] = None, cfg: Optional[Settings] = None) -> None:
        self.cfg = cfg or settings
        self._openai_client: Optional[OpenAI] = openai_client

    # ---------- internal helpers ----------

    @property
    def openai_client(self) -> OpenAI:
        if self._openai_client is None:
            validate_llm_settings(self.cfg)
            kwargs: dict[str, object] = {
                "api_key": _secret(self.cfg.openai_api_key),
                "base_url": self.cfg.openai_base_url,
                "timeout": self.cfg.llm_timeout_seconds,
                "max_retries": self.cfg.llm_max_retries,
            }
            if self.cfg.openai_organization:
                kwargs["organization"] = self.cfg.openai_organization
            self._openai_client = OpenAI(**kwargs)
        return self._openai_client

    # ---------- completion ----------

    def complete(self, prompt: str, *, model: Optional[str] = None) -> str:
        """Send `prompt` as a single user message and return the assistant text."""
        model_name = model or self.cfg.llm_model
        logger.debug("Calling model %s at %s", model_name, self.cfg.openai_base_url)
        try:
            resp = self.openai_client.chat.completions.create(
                model=model_name,
                messages=[{"role": "user", "content": prompt}],
                max_tokens=self.cfg.llm_max_tokens,
                temperature=self.cfg.llm_temperature,
            )
        except OpenAIError as exc:
            logger.error("Error calling model %s: %s", model_name, exc)
            raise UpstreamError(f"Failed to call model API: {exc}") from exc

        choices = getattr(resp, "choices", None) or []
        content = choices[0].message.content if choices else None
        if not content or not content.strip():
            raise UpstreamError("Model API returned empty response")
        logger.debug("Model response received, length: %d", len(content))
        return content


__all__ = ["LLMService", "validate_llm_settings"]
