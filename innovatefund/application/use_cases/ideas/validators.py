"""Validation helpers for idea payloads."""

from __future__ import annotations

from collections.abc import Sequence

from innovatefund.domain.entities import IDEA_CATEGORIES, IDEA_STAGES, MIN_FUNDING_GOAL
from innovatefund.domain.exceptions import ValidationError

TITLE_LENGTH = (5, 200)
DESCRIPTION_LENGTH = (20, 2000)
COMMENT_MAX_LENGTH = 1000
MAX_TAGS = 10


def _ensure_length(value: str, field: str, bounds: tuple[int, int]) -> str:
    cleaned = (value or "").strip()
    minimum, maximum = bounds
    if not minimum <= len(cleaned) <= maximum:
        raise ValidationError(f"{field} must be between {minimum} and {maximum} characters")
    return cleaned


def validate_title(title: str) -> str:
    return _ensure_length(title, "Title", TITLE_LENGTH)


def validate_description(description: str) -> str:
    return _ensure_length(description, "Description", DESCRIPTION_LENGTH)


def validate_category(category: str) -> str:
    normalized = (category or "").strip().lower()
    if normalized not in IDEA_CATEGORIES:
        raise ValidationError("Invalid category")
    return normalized


def validate_stage(stage: str | None) -> str:
    normalized = (stage or "idea").strip().lower()
    if normalized not in IDEA_STAGES:
        raise ValidationError("Invalid stage")
    return normalized


def validate_funding_goal(goal: float) -> float:
    if goal is None or goal < MIN_FUNDING_GOAL:
        raise ValidationError(f"Funding goal must be at least {MIN_FUNDING_GOAL}")
    return float(goal)


def validate_tags(tags: Sequence[str] | None) -> list[str]:
    cleaned = [tag.strip() for tag in tags or () if tag and tag.strip()]
    if len(cleaned) > MAX_TAGS:
        raise ValidationError(f"At most {MAX_TAGS} tags are allowed")
    return cleaned


def validate_comment(content: str, rating: int | None) -> tuple[str, int]:
    cleaned = _ensure_length(content, "Comment", (1, COMMENT_MAX_LENGTH))
    value = 5 if rating is None else rating
    if not 1 <= value <= 5:
        raise ValidationError("Rating must be between 1 and 5")
    return cleaned, value


def validate_amount(amount: float) -> float:
    if amount is None or amount <= 0:
        raise ValidationError("Valid investment amount is required")
    return float(amount)
