from datetime import timedelta

import pytest

from innovatefund.application.use_cases.notifications import (
    count_unread_notifications,
    delete_notification,
    list_notifications,
    mark_all_notifications_read,
    mark_notification_read,
)
from innovatefund.domain.entities import Notification, NotificationKind
from innovatefund.domain.exceptions import NotFoundError, ValidationError
from innovatefund.infrastructure.repositories import NotificationRepository
from innovatefund.utils import now_in_app_timezone


def _seed(session, recipient_id, count):
    start = now_in_app_timezone() - timedelta(hours=count)
    repository = NotificationRepository(session)
    return [
        repository.create(
            Notification(
                id=None,
                recipient_id=recipient_id,
                kind=NotificationKind.IDEA_COMMENTED,
                title=f"Notification {index}",
                body="Someone commented on your idea",
                created_at=start + timedelta(hours=index),
            )
        )
        for index in range(count)
    ]


def test_read_at_is_set_once(session, make_user):
    owner = make_user("Rita")
    [record] = _seed(session, owner.id, 1)

    first = mark_notification_read(session, notification_id=record.id, recipient_id=owner.id)
    second = mark_notification_read(session, notification_id=record.id, recipient_id=owner.id)

    assert first.read is True
    assert first.read_at is not None
    assert second.read_at == first.read_at
    stored = NotificationRepository(session).get(record.id)
    assert stored.read is True
    assert stored.read_at == first.read_at


def test_other_principals_cannot_touch_a_record(session, make_user):
    owner, stranger = make_user("Rita"), make_user("Sam")
    [record] = _seed(session, owner.id, 1)

    with pytest.raises(NotFoundError):
        mark_notification_read(session, notification_id=record.id, recipient_id=stranger.id)
    with pytest.raises(NotFoundError):
        delete_notification(session, notification_id=record.id, recipient_id=stranger.id)

    assert NotificationRepository(session).get(record.id).read is False


def test_mark_all_read_only_counts_unread(session, make_user):
    owner = make_user("Rita")
    records = _seed(session, owner.id, 3)
    mark_notification_read(session, notification_id=records[0].id, recipient_id=owner.id)

    assert mark_all_notifications_read(session, recipient_id=owner.id) == 2
    assert mark_all_notifications_read(session, recipient_id=owner.id) == 0
    assert count_unread_notifications(session, recipient_id=owner.id) == 0


def test_listing_is_newest_first_and_paginated(session, make_user):
    owner, other = make_user("Rita"), make_user("Sam")
    _seed(session, owner.id, 5)
    _seed(session, other.id, 2)

    page = list_notifications(session, recipient_id=owner.id, page=1, limit=2)

    assert [n.title for n in page.notifications] == ["Notification 4", "Notification 3"]
    assert page.total_items == 5
    assert page.total_pages == 3
    assert page.unread_count == 5

    last = list_notifications(session, recipient_id=owner.id, page=3, limit=2)
    assert [n.title for n in last.notifications] == ["Notification 0"]


def test_unread_filter(session, make_user):
    owner = make_user("Rita")
    records = _seed(session, owner.id, 3)
    mark_notification_read(session, notification_id=records[2].id, recipient_id=owner.id)

    page = list_notifications(session, recipient_id=owner.id, unread_only=True)

    assert {n.id for n in page.notifications} == {records[0].id, records[1].id}
    assert page.total_items == 2


@pytest.mark.parametrize("page, limit", [(0, 20), (1, 0), (1, 101)])
def test_invalid_pagination_is_rejected(session, make_user, page, limit):
    owner = make_user("Rita")

    with pytest.raises(ValidationError):
        list_notifications(session, recipient_id=owner.id, page=page, limit=limit)


def test_delete_removes_the_record(session, make_user):
    owner = make_user("Rita")
    [record] = _seed(session, owner.id, 1)

    delete_notification(session, notification_id=record.id, recipient_id=owner.id)

    assert NotificationRepository(session).get(record.id) is None
    with pytest.raises(NotFoundError):
        delete_notification(session, notification_id=record.id, recipient_id=owner.id)
