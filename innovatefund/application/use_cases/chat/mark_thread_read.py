"""Use case for recording read receipts on a whole thread."""

from sqlalchemy.orm import Session

from innovatefund.domain.exceptions import AccessDeniedError, NotFoundError
from innovatefund.infrastructure.repositories import ChatRepository
from innovatefund.utils import now_in_app_timezone


def mark_thread_read(session: Session, *, thread_id: str, reader_id: str) -> int:
    """Add a receipt for ``reader_id`` to every message it has not read yet.

    Returns the number of receipts added; repeated calls add none. Nothing is
    broadcast.
    """

    repository = ChatRepository(session)
    participants = repository.get_participant_ids(thread_id)
    if participants is None:
        raise NotFoundError("Chat not found")
    if reader_id not in participants:
        raise AccessDeniedError()
    return repository.mark_thread_read(thread_id, reader_id, read_at=now_in_app_timezone())
