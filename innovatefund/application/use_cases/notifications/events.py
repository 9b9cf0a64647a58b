"""Utility helpers to generate and dispatch domain notifications."""

from __future__ import annotations

from collections.abc import Callable

from innovatefund.domain.entities import (
    BODY_MAX_LENGTH,
    Idea,
    Notification,
    NotificationInput,
    NotificationKind,
    RelatedItem,
    RelatedItemType,
    User,
)

Notifier = Callable[[NotificationInput], Notification]


def _idea_link(idea: Idea) -> str:
    return f"/ideas/{idea.id}"


def _clip(text: str, limit: int = BODY_MAX_LENGTH) -> str:
    if len(text) <= limit:
        return text
    return text[: limit - 3].rstrip() + "..."


def _format_amount(amount: float) -> str:
    if float(amount).is_integer():
        return f"{int(amount):,}"
    return f"{amount:,.2f}"


def _notify_about_idea(
    notify: Notifier,
    *,
    recipient_id: str,
    idea: Idea,
    kind: NotificationKind,
    title: str,
    message: str,
    sender: User | None,
) -> Notification:
    return notify(
        NotificationInput(
            recipient_id=recipient_id,
            sender_id=sender.id if sender else None,
            kind=kind,
            title=title,
            body=_clip(message),
            related_item=RelatedItem(RelatedItemType.IDEA, idea.id),
            action_url=_idea_link(idea),
        )
    )


def notify_idea_liked(notify: Notifier, *, idea: Idea, actor: User) -> Notification | None:
    """Tell the creator that ``actor`` liked their idea."""

    if actor.id == idea.creator_id:
        return None
    return _notify_about_idea(
        notify,
        recipient_id=idea.creator_id,
        idea=idea,
        kind=NotificationKind.IDEA_LIKED,
        title="Your idea was liked!",
        message=f'{actor.name} liked your idea "{idea.title}"',
        sender=actor,
    )


def notify_idea_commented(notify: Notifier, *, idea: Idea, actor: User) -> Notification | None:
    if actor.id == idea.creator_id:
        return None
    return _notify_about_idea(
        notify,
        recipient_id=idea.creator_id,
        idea=idea,
        kind=NotificationKind.IDEA_COMMENTED,
        title="New comment on your idea",
        message=f'{actor.name} commented on your idea "{idea.title}"',
        sender=actor,
    )


def notify_new_investment(
    notify: Notifier, *, idea: Idea, investor: User, amount: float
) -> Notification:
    return _notify_about_idea(
        notify,
        recipient_id=idea.creator_id,
        idea=idea,
        kind=NotificationKind.NEW_INVESTMENT,
        title="New Investment Received!",
        message=(
            f'{investor.name} invested ${_format_amount(amount)} in your idea "{idea.title}"'
        ),
        sender=investor,
    )


def notify_funding_goal_reached(notify: Notifier, *, idea: Idea) -> Notification:
    """System notification sent once the idea's funding goal is met."""

    return _notify_about_idea(
        notify,
        recipient_id=idea.creator_id,
        idea=idea,
        kind=NotificationKind.FUNDING_GOAL_REACHED,
        title="Funding goal reached!",
        message=(
            f'Your idea "{idea.title}" reached its funding goal of '
            f"${_format_amount(idea.funding_goal)}"
        ),
        sender=None,
    )


def notify_collaboration_request(
    notify: Notifier, *, idea: Idea, requester: User
) -> Notification:
    return _notify_about_idea(
        notify,
        recipient_id=idea.creator_id,
        idea=idea,
        kind=NotificationKind.COLLABORATION_REQUEST,
        title="Collaboration Request",
        message=f'{requester.name} wants to collaborate on "{idea.title}"',
        sender=requester,
    )


def notify_collaboration_accepted(
    notify: Notifier, *, idea: Idea, creator: User, collaborator_id: str
) -> Notification:
    return _notify_about_idea(
        notify,
        recipient_id=collaborator_id,
        idea=idea,
        kind=NotificationKind.COLLABORATION_ACCEPTED,
        title="Collaboration accepted",
        message=f'{creator.name} accepted you as a collaborator on "{idea.title}"',
        sender=creator,
    )


__all__ = [
    "Notifier",
    "notify_collaboration_accepted",
    "notify_collaboration_request",
    "notify_funding_goal_reached",
    "notify_idea_commented",
    "notify_idea_liked",
    "notify_new_investment",
]
