"""Endpoints for ideas and the interactions that notify their creators."""

from __future__ import annotations

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from innovatefund.application.use_cases.ideas import (
    accept_collaborator,
    add_comment,
    create_idea,
    get_idea,
    invest_in_idea,
    request_collaboration,
    toggle_like,
)
from innovatefund.application.use_cases.notifications import Notifier
from innovatefund.domain.entities import Idea, User
from innovatefund.infrastructure.database import get_db
from innovatefund.interfaces.api.dependencies import get_current_active_user, get_notifier
from innovatefund.interfaces.api.routes_helpers import DOMAIN_ERRORS, http_error_from
from innovatefund.interfaces.api.schemas import (
    CommentCreate,
    CommentRead,
    CommentResponse,
    IdeaCreate,
    IdeaRead,
    InvestmentRead,
    InvestmentRequest,
    InvestmentResponse,
    LikeResponse,
    MessageResponse,
)

router = APIRouter(prefix="/ideas", tags=["ideas"])


def _idea_to_schema(idea: Idea) -> IdeaRead:
    return IdeaRead(
        id=idea.id,
        creator=idea.creator_id,
        title=idea.title,
        description=idea.description,
        category=idea.category,
        stage=idea.stage,
        funding_goal=idea.funding_goal,
        current_funding=idea.current_funding,
        tags=idea.tags,
        likes_count=len(idea.likes),
        collaborators=idea.collaborators,
        created_at=idea.created_at,
        updated_at=idea.updated_at,
    )


@router.post("", response_model=IdeaRead, status_code=status.HTTP_201_CREATED)
def post_idea(
    payload: IdeaCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> IdeaRead:
    try:
        idea = create_idea(
            db,
            creator_id=current_user.id,
            title=payload.title,
            description=payload.description,
            category=payload.category,
            funding_goal=payload.funding_goal,
            stage=payload.stage,
            tags=payload.tags,
        )
    except DOMAIN_ERRORS as exc:
        raise http_error_from(exc) from exc
    return _idea_to_schema(idea)


@router.get("/{idea_id}", response_model=IdeaRead)
def read_idea(
    idea_id: str,
    db: Session = Depends(get_db),
    _: User = Depends(get_current_active_user),
) -> IdeaRead:
    try:
        idea = get_idea(db, idea_id)
    except DOMAIN_ERRORS as exc:
        raise http_error_from(exc) from exc
    return _idea_to_schema(idea)


@router.post("/{idea_id}/like", response_model=LikeResponse)
def like_idea(
    idea_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
    notify: Notifier = Depends(get_notifier),
) -> LikeResponse:
    try:
        liked, count = toggle_like(db, notify, idea_id=idea_id, user=current_user)
    except DOMAIN_ERRORS as exc:
        raise http_error_from(exc) from exc
    return LikeResponse(
        message="Idea liked" if liked else "Idea unliked",
        liked=liked,
        likes_count=count,
    )


@router.post(
    "/{idea_id}/comments",
    response_model=CommentResponse,
    status_code=status.HTTP_201_CREATED,
)
def comment_idea(
    idea_id: str,
    payload: CommentCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
    notify: Notifier = Depends(get_notifier),
) -> CommentResponse:
    try:
        comment = add_comment(
            db,
            notify,
            idea_id=idea_id,
            user=current_user,
            content=payload.content,
            rating=payload.rating,
        )
    except DOMAIN_ERRORS as exc:
        raise http_error_from(exc) from exc
    return CommentResponse(
        message="Comment added successfully",
        comment=CommentRead(
            id=comment.id,
            user=comment.user_id,
            content=comment.content,
            rating=comment.rating,
            created_at=comment.created_at,
        ),
    )


@router.post("/{idea_id}/invest", response_model=InvestmentResponse)
def invest(
    idea_id: str,
    payload: InvestmentRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
    notify: Notifier = Depends(get_notifier),
) -> InvestmentResponse:
    """Invest once in the idea; only investors may call this endpoint."""

    try:
        investment, idea = invest_in_idea(
            db,
            notify,
            idea_id=idea_id,
            investor=current_user,
            amount=payload.amount,
            terms=payload.terms,
        )
    except DOMAIN_ERRORS as exc:
        raise http_error_from(exc) from exc
    return InvestmentResponse(
        message="Investment made successfully",
        investment=InvestmentRead(
            id=investment.id,
            investor=investment.investor_id,
            amount=investment.amount,
            terms=investment.terms,
            created_at=investment.created_at,
        ),
        idea=_idea_to_schema(idea),
    )


@router.post("/{idea_id}/collaborate", response_model=MessageResponse)
def collaborate(
    idea_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
    notify: Notifier = Depends(get_notifier),
) -> MessageResponse:
    try:
        request_collaboration(db, notify, idea_id=idea_id, user=current_user)
    except DOMAIN_ERRORS as exc:
        raise http_error_from(exc) from exc
    return MessageResponse(message="Collaboration request sent successfully")


@router.post("/{idea_id}/collaborators/{user_id}/accept", response_model=IdeaRead)
def accept_collaboration(
    idea_id: str,
    user_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
    notify: Notifier = Depends(get_notifier),
) -> IdeaRead:
    try:
        accept_collaborator(
            db, notify, idea_id=idea_id, creator=current_user, collaborator_id=user_id
        )
        idea = get_idea(db, idea_id)
    except DOMAIN_ERRORS as exc:
        raise http_error_from(exc) from exc
    return _idea_to_schema(idea)
