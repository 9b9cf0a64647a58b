"""Use cases for likes, comments and collaboration on ideas.

Each interaction that concerns another principal emits a notification
through the injected notifier.
"""

from __future__ import annotations

from sqlalchemy.orm import Session

from innovatefund.application.use_cases.notifications import (
    Notifier,
    notify_collaboration_accepted,
    notify_collaboration_request,
    notify_idea_commented,
    notify_idea_liked,
)
from innovatefund.domain.entities import IdeaComment, User
from innovatefund.domain.exceptions import AccessDeniedError, NotFoundError, ValidationError
from innovatefund.infrastructure.repositories import IdeaRepository, UserRepository

from .create_idea import get_idea
from .validators import validate_comment


def toggle_like(
    session: Session, notify: Notifier, *, idea_id: str, user: User
) -> tuple[bool, int]:
    """Like or unlike the idea and return ``(liked, likes_count)``.

    Every like transition notifies the creator, so unliking and liking again
    sends a second notification. The notification is stored before the like
    so a failed write leaves the idea untouched.
    """

    idea = get_idea(session, idea_id)
    if not idea.is_liked_by(user.id):
        notify_idea_liked(notify, idea=idea, actor=user)
    return IdeaRepository(session).toggle_like(idea_id, user.id)


def add_comment(
    session: Session,
    notify: Notifier,
    *,
    idea_id: str,
    user: User,
    content: str,
    rating: int | None = None,
) -> IdeaComment:
    idea = get_idea(session, idea_id)
    cleaned, value = validate_comment(content, rating)
    comment = IdeaRepository(session).add_comment(
        IdeaComment(id=None, idea_id=idea.id, user_id=user.id, content=cleaned, rating=value)
    )
    notify_idea_commented(notify, idea=idea, actor=user)
    return comment


def request_collaboration(
    session: Session, notify: Notifier, *, idea_id: str, user: User
) -> None:
    idea = get_idea(session, idea_id)
    if idea.creator_id == user.id:
        raise ValidationError("You cannot collaborate on your own idea")
    if user.id in idea.collaborators:
        raise ValidationError("You are already a collaborator")
    notify_collaboration_request(notify, idea=idea, requester=user)


def accept_collaborator(
    session: Session,
    notify: Notifier,
    *,
    idea_id: str,
    creator: User,
    collaborator_id: str,
) -> None:
    """Let the idea's creator add ``collaborator_id`` to the team."""

    idea = get_idea(session, idea_id)
    if idea.creator_id != creator.id:
        raise AccessDeniedError()
    if collaborator_id == creator.id:
        raise ValidationError("You cannot collaborate on your own idea")
    if collaborator_id in idea.collaborators:
        raise ValidationError("User is already a collaborator")
    if UserRepository(session).get(collaborator_id) is None:
        raise NotFoundError("User not found")

    IdeaRepository(session).add_collaborator(idea.id, collaborator_id)
    notify_collaboration_accepted(
        notify, idea=idea, creator=creator, collaborator_id=collaborator_id
    )
