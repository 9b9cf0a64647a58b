"""Endpoints for chat threads and messages."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from innovatefund.application.use_cases.chat import (
    MAX_MESSAGES_PAGE_SIZE,
    MessagePublisher,
    get_or_create_direct_thread,
    list_messages,
    list_threads,
    mark_thread_read,
    send_message,
)
from innovatefund.domain.entities import ChatMessage, ChatThread, User
from innovatefund.infrastructure.database import get_db
from innovatefund.interfaces.api.dependencies import (
    get_current_active_user,
    get_message_publisher,
)
from innovatefund.interfaces.api.routes_helpers import DOMAIN_ERRORS, http_error_from
from innovatefund.interfaces.api.schemas import (
    ChatMessageRead,
    ChatThreadRead,
    CreateChatRequest,
    MarkChatReadResponse,
    MessageListResponse,
    Pagination,
    ReadReceiptRead,
    SendMessageRequest,
    SummaryRead,
)

router = APIRouter(prefix="/chat", tags=["chat"])


def _thread_to_schema(thread: ChatThread) -> ChatThreadRead:
    return ChatThreadRead(
        id=thread.id,
        participants=[
            SummaryRead(id=item.id, name=item.name, profile_picture=item.profile_picture)
            for item in thread.participants
        ],
        name=thread.name,
        is_group=thread.is_group,
        last_message_id=thread.last_message_id,
        last_activity=thread.last_activity,
        created_at=thread.created_at,
    )


def _message_to_schema(message: ChatMessage) -> ChatMessageRead:
    sender = message.sender
    return ChatMessageRead(
        id=message.id,
        chat=message.thread_id,
        sender=SummaryRead(
            id=message.sender_id,
            name=sender.name if sender else "",
            profile_picture=sender.profile_picture if sender else "",
        ),
        content=message.content,
        message_type=message.kind.value,
        read_by=[
            ReadReceiptRead(user=receipt.reader_id, read_at=receipt.read_at)
            for receipt in message.read_by
        ],
        created_at=message.created_at,
    )


@router.get("", response_model=list[ChatThreadRead])
def read_threads(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> list[ChatThreadRead]:
    """Return the caller's threads, most recently active first."""

    return [_thread_to_schema(thread) for thread in list_threads(db, user_id=current_user.id)]


@router.post("/create", response_model=ChatThreadRead)
def create_thread(
    payload: CreateChatRequest,
    response: Response,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> ChatThreadRead:
    try:
        thread, created = get_or_create_direct_thread(
            db, user_id=current_user.id, participant_id=payload.participant_id
        )
    except DOMAIN_ERRORS as exc:
        raise http_error_from(exc) from exc
    if created:
        response.status_code = status.HTTP_201_CREATED
    return _thread_to_schema(thread)


@router.get("/{chat_id}/messages", response_model=MessageListResponse)
def read_messages(
    chat_id: str,
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=MAX_MESSAGES_PAGE_SIZE),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> MessageListResponse:
    try:
        result = list_messages(
            db, thread_id=chat_id, user_id=current_user.id, page=page, limit=limit
        )
    except DOMAIN_ERRORS as exc:
        raise http_error_from(exc) from exc
    return MessageListResponse(
        messages=[_message_to_schema(message) for message in result.messages],
        pagination=Pagination(
            current_page=result.current_page,
            total_pages=result.total_pages,
            total_items=result.total_items,
        ),
    )


@router.post(
    "/{chat_id}/messages",
    response_model=ChatMessageRead,
    status_code=status.HTTP_201_CREATED,
)
def post_message(
    chat_id: str,
    payload: SendMessageRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
    publish: MessagePublisher = Depends(get_message_publisher),
) -> ChatMessageRead:
    """Store the message and broadcast ``new_message`` to every participant."""

    try:
        message = send_message(
            db,
            thread_id=chat_id,
            sender_id=current_user.id,
            content=payload.content,
            kind=payload.message_type,
            publish=publish,
        )
    except DOMAIN_ERRORS as exc:
        raise http_error_from(exc) from exc
    return _message_to_schema(message)


@router.post("/{chat_id}/read", response_model=MarkChatReadResponse)
def mark_read(
    chat_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> MarkChatReadResponse:
    try:
        updated = mark_thread_read(db, thread_id=chat_id, reader_id=current_user.id)
    except DOMAIN_ERRORS as exc:
        raise http_error_from(exc) from exc
    return MarkChatReadResponse(message="Messages marked as read", updated=updated)
