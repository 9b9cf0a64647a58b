"""Persistence helpers for ideas and their interactions."""

from __future__ import annotations

from sqlalchemy.orm import Session

from innovatefund.domain.entities import Idea, IdeaComment, IdeaInvestment
from innovatefund.infrastructure.models import (
    IdeaCollaboratorModel,
    IdeaCommentModel,
    IdeaInvestmentModel,
    IdeaLikeModel,
    IdeaModel,
)
from innovatefund.utils import ensure_app_timezone


class IdeaRepository:
    """Provide CRUD operations for :class:`Idea` objects."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, idea_id: str) -> Idea | None:
        model = self.session.get(IdeaModel, idea_id)
        return self._to_entity(model) if model else None

    def create(self, idea: Idea) -> Idea:
        model = IdeaModel(
            creator_id=idea.creator_id,
            title=idea.title,
            description=idea.description,
            category=idea.category,
            stage=idea.stage,
            funding_goal=idea.funding_goal,
            current_funding=idea.current_funding,
            tags=list(idea.tags),
        )
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    def toggle_like(self, idea_id: str, user_id: str) -> tuple[bool, int]:
        """Flip the like of ``user_id`` and return ``(liked, likes_count)``."""

        existing = self.session.get(IdeaLikeModel, (idea_id, user_id))
        if existing is not None:
            self.session.delete(existing)
            liked = False
        else:
            self.session.add(IdeaLikeModel(idea_id=idea_id, user_id=user_id))
            liked = True
        self.session.commit()
        count = (
            self.session.query(IdeaLikeModel).filter(IdeaLikeModel.idea_id == idea_id).count()
        )
        return liked, count

    def add_comment(self, comment: IdeaComment) -> IdeaComment:
        model = IdeaCommentModel(
            idea_id=comment.idea_id,
            user_id=comment.user_id,
            content=comment.content,
            rating=comment.rating,
        )
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return IdeaComment(
            id=model.id,
            idea_id=model.idea_id,
            user_id=model.user_id,
            content=model.content,
            rating=model.rating,
            created_at=ensure_app_timezone(model.created_at),
        )

    def has_invested(self, idea_id: str, investor_id: str) -> bool:
        return (
            self.session.query(IdeaInvestmentModel.id)
            .filter(IdeaInvestmentModel.idea_id == idea_id)
            .filter(IdeaInvestmentModel.investor_id == investor_id)
            .first()
            is not None
        )

    def add_investment(self, investment: IdeaInvestment) -> tuple[IdeaInvestment, Idea]:
        """Record ``investment`` and increase the idea's funding in one transaction."""

        idea = self.session.get(IdeaModel, investment.idea_id)
        if idea is None:
            msg = f"Idea with id {investment.idea_id} not found"
            raise ValueError(msg)
        model = IdeaInvestmentModel(
            idea_id=investment.idea_id,
            investor_id=investment.investor_id,
            amount=investment.amount,
            terms=investment.terms or "",
        )
        self.session.add(model)
        idea.current_funding = (idea.current_funding or 0.0) + investment.amount
        self.session.commit()
        self.session.refresh(model)
        self.session.refresh(idea)
        saved = IdeaInvestment(
            id=model.id,
            idea_id=model.idea_id,
            investor_id=model.investor_id,
            amount=model.amount,
            terms=model.terms or "",
            created_at=ensure_app_timezone(model.created_at),
        )
        return saved, self._to_entity(idea)

    def add_collaborator(self, idea_id: str, user_id: str, *, role: str = "contributor") -> None:
        self.session.add(IdeaCollaboratorModel(idea_id=idea_id, user_id=user_id, role=role))
        self.session.commit()

    @staticmethod
    def _to_entity(model: IdeaModel) -> Idea:
        return Idea(
            id=model.id,
            creator_id=model.creator_id,
            title=model.title,
            description=model.description,
            category=model.category,
            stage=model.stage,
            funding_goal=float(model.funding_goal),
            current_funding=float(model.current_funding or 0.0),
            tags=list(model.tags or []),
            likes=[like.user_id for like in model.likes],
            collaborators=[collaborator.user_id for collaborator in model.collaborators],
            created_at=ensure_app_timezone(model.created_at),
            updated_at=ensure_app_timezone(model.updated_at),
        )


__all__ = ["IdeaRepository"]
