"""Thin client around the OpenAI Responses API used by the AI assistant."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import Any

from openai import OpenAI, OpenAIError

from innovatefund.config import get_settings

logger = logging.getLogger(__name__)

_DEFAULT_MODEL = "gpt-4.1-mini"
_ALLOWED_ROLES = {"system", "user", "assistant"}

_SYSTEM_PROMPT = (
    "You are the InnovateFund assistant. You help innovators refine ideas and pitch "
    "them, and you help investors evaluate opportunities. Answer concisely."
)


class OpenAIConfigurationError(RuntimeError):
    """Raised when the assistant is not configured."""


class OpenAIServiceError(RuntimeError):
    """Raised when the provider does not answer as expected."""


class AssistantService:
    """Forward chat transcripts and scoring prompts to the configured model."""

    def __init__(self) -> None:
        settings = get_settings()

        api_key = (settings.openai_api_key or "").strip()
        if not api_key:
            raise OpenAIConfigurationError("OPENAI_API_KEY is not configured.")

        client_kwargs: dict[str, Any] = {"api_key": api_key}
        base_url = (settings.openai_base_url or "").strip()
        if base_url:
            client_kwargs["base_url"] = base_url

        max_output_tokens = settings.openai_max_output_tokens
        if max_output_tokens is not None and max_output_tokens <= 0:
            max_output_tokens = None

        self._client = OpenAI(**client_kwargs)
        self._model = (settings.openai_model or "").strip() or _DEFAULT_MODEL
        self._temperature = float(settings.openai_temperature)
        self._max_output_tokens = max_output_tokens

    def chat(self, messages: Sequence[Mapping[str, str]]) -> str:
        """Return the model reply for a ``[{role, content}]`` transcript."""

        transcript = [
            {"role": "system", "content": [{"type": "input_text", "text": _SYSTEM_PROMPT}]}
        ]
        for message in messages:
            role = message.get("role") or "user"
            if role not in _ALLOWED_ROLES:
                role = "user"
            content_type = "output_text" if role == "assistant" else "input_text"
            transcript.append(
                {
                    "role": role,
                    "content": [{"type": content_type, "text": str(message.get("content") or "")}],
                }
            )
        return self._complete(transcript)

    def impact_score(self, idea: str) -> str:
        prompt = (
            "Rate the impact of this idea on a scale of 1 to 100 and explain briefly. "
            f"Idea: {idea}"
        )
        return self._complete(
            [{"role": "user", "content": [{"type": "input_text", "text": prompt}]}]
        )

    def _complete(self, transcript: list[dict[str, Any]]) -> str:
        request_kwargs: dict[str, Any] = {
            "model": self._model,
            "input": transcript,
            "temperature": self._temperature,
        }
        if self._max_output_tokens is not None:
            request_kwargs["max_output_tokens"] = self._max_output_tokens

        try:
            resp = self._client.responses.create(**request_kwargs)
        except OpenAIError as exc:
            raise OpenAIServiceError("The request to OpenAI failed.") from exc

        text = getattr(resp, "output_text", None)
        if not text:
            try:
                text = resp.output[0].content[0].text
            except (AttributeError, IndexError, TypeError) as exc:
                raise OpenAIServiceError("The OpenAI response did not contain text.") from exc

        logger.debug("Raw model reply: %s", text)
        return text


__all__ = ["AssistantService", "OpenAIConfigurationError", "OpenAIServiceError"]
