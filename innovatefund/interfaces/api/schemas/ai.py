"""Pydantic models for the AI assistant endpoints."""

from __future__ import annotations

from typing import Literal

from pydantic import Field, model_validator

from .base import CamelModel


class AIChatMessage(CamelModel):
    role: Literal["system", "user", "assistant"]
    content: str = Field(..., min_length=1)


class AIChatRequest(CamelModel):
    """Conversation to continue.

    Older clients send a single ``prompt`` or ``message`` instead of the
    message list.
    """

    messages: list[AIChatMessage] | None = None
    prompt: str | None = None
    message: str | None = None

    @model_validator(mode="after")
    def _require_content(self) -> "AIChatRequest":
        if not self.transcript():
            raise ValueError("Provide messages, prompt or message")
        return self

    def transcript(self) -> list[dict[str, str]]:
        if self.messages:
            return [{"role": item.role, "content": item.content} for item in self.messages]
        text = (self.prompt or self.message or "").strip()
        return [{"role": "user", "content": text}] if text else []


class AIChatResponse(CamelModel):
    response: str


class ImpactScoreRequest(CamelModel):
    idea: str = Field(..., min_length=1)


class ImpactScoreResponse(CamelModel):
    impact_score: str
