"""Use case for investing in an idea."""

from __future__ import annotations

from sqlalchemy.orm import Session

from innovatefund.application.use_cases.notifications import (
    Notifier,
    notify_funding_goal_reached,
    notify_new_investment,
)
from innovatefund.domain.entities import Idea, IdeaInvestment, User
from innovatefund.domain.exceptions import AccessDeniedError, ValidationError
from innovatefund.infrastructure.repositories import IdeaRepository

from .create_idea import get_idea
from .validators import validate_amount


def invest_in_idea(
    session: Session,
    notify: Notifier,
    *,
    idea_id: str,
    investor: User,
    amount: float,
    terms: str = "",
) -> tuple[IdeaInvestment, Idea]:
    """Record a single investment per investor and notify the creator.

    When this investment is the one that makes the idea reach its goal, a
    ``funding_goal_reached`` system notification follows.
    """

    if not investor.is_investor():
        raise AccessDeniedError("Only investors can invest")
    value = validate_amount(amount)

    idea = get_idea(session, idea_id)
    repository = IdeaRepository(session)
    if repository.has_invested(idea.id, investor.id):
        raise ValidationError("You have already invested in this idea")

    goal_was_reached = idea.goal_reached()
    investment, updated = repository.add_investment(
        IdeaInvestment(
            id=None,
            idea_id=idea.id,
            investor_id=investor.id,
            amount=value,
            terms=(terms or "").strip(),
        )
    )

    notify_new_investment(notify, idea=updated, investor=investor, amount=value)
    if not goal_was_reached and updated.goal_reached():
        notify_funding_goal_reached(notify, idea=updated)
    return investment, updated
