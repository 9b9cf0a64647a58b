"""Use cases for creating and reading ideas."""

from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy.orm import Session

from innovatefund.domain.entities import Idea
from innovatefund.domain.exceptions import NotFoundError
from innovatefund.infrastructure.repositories import IdeaRepository

from .validators import (
    validate_category,
    validate_description,
    validate_funding_goal,
    validate_stage,
    validate_tags,
    validate_title,
)


def create_idea(
    session: Session,
    *,
    creator_id: str,
    title: str,
    description: str,
    category: str,
    funding_goal: float,
    stage: str | None = None,
    tags: Sequence[str] | None = None,
) -> Idea:
    idea = Idea(
        id=None,
        creator_id=creator_id,
        title=validate_title(title),
        description=validate_description(description),
        category=validate_category(category),
        stage=validate_stage(stage),
        funding_goal=validate_funding_goal(funding_goal),
        tags=validate_tags(tags),
    )
    return IdeaRepository(session).create(idea)


def get_idea(session: Session, idea_id: str) -> Idea:
    """Return the idea identified by ``idea_id`` or raise :class:`NotFoundError`."""

    idea = IdeaRepository(session).get(idea_id)
    if idea is None:
        raise NotFoundError("Idea not found")
    return idea
