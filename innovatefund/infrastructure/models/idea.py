"""SQLAlchemy models for ideas and their interactions."""

from sqlalchemy import (
    JSON,
    Column,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from innovatefund.infrastructure.database import Base, new_id
from innovatefund.utils import now_utc_naive_datetime


class IdeaModel(Base):
    """Database representation of an idea."""

    __tablename__ = "idea"

    id = Column(String(32), primary_key=True, default=new_id)
    creator_id = Column(String(32), ForeignKey("user.id"), nullable=False, index=True)
    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=False)
    category = Column(String(30), nullable=False)
    stage = Column(String(20), nullable=False)
    funding_goal = Column(Float, nullable=False)
    current_funding = Column(Float, nullable=False, default=0.0)
    tags = Column(JSON, nullable=False, default=list)
    created_at = Column(DateTime, nullable=False, default=now_utc_naive_datetime)
    updated_at = Column(DateTime, nullable=True, onupdate=now_utc_naive_datetime)

    likes = relationship("IdeaLikeModel", cascade="all, delete-orphan", lazy="selectin")
    collaborators = relationship(
        "IdeaCollaboratorModel", cascade="all, delete-orphan", lazy="selectin"
    )


class IdeaLikeModel(Base):
    __tablename__ = "idea_like"

    idea_id = Column(String(32), ForeignKey("idea.id", ondelete="CASCADE"), primary_key=True)
    user_id = Column(String(32), ForeignKey("user.id", ondelete="CASCADE"), primary_key=True)
    liked_at = Column(DateTime, nullable=False, default=now_utc_naive_datetime)


class IdeaCollaboratorModel(Base):
    __tablename__ = "idea_collaborator"

    idea_id = Column(String(32), ForeignKey("idea.id", ondelete="CASCADE"), primary_key=True)
    user_id = Column(String(32), ForeignKey("user.id", ondelete="CASCADE"), primary_key=True)
    role = Column(String(50), nullable=False, default="contributor")
    joined_at = Column(DateTime, nullable=False, default=now_utc_naive_datetime)


class IdeaCommentModel(Base):
    __tablename__ = "idea_comment"

    id = Column(String(32), primary_key=True, default=new_id)
    idea_id = Column(
        String(32), ForeignKey("idea.id", ondelete="CASCADE"), nullable=False, index=True
    )
    user_id = Column(String(32), ForeignKey("user.id"), nullable=False)
    content = Column(String(1000), nullable=False)
    rating = Column(Integer, nullable=True)
    created_at = Column(DateTime, nullable=False, default=now_utc_naive_datetime)


class IdeaInvestmentModel(Base):
    __tablename__ = "idea_investment"
    __table_args__ = (
        UniqueConstraint("idea_id", "investor_id", name="uq_investment_investor"),
    )

    id = Column(String(32), primary_key=True, default=new_id)
    idea_id = Column(
        String(32), ForeignKey("idea.id", ondelete="CASCADE"), nullable=False, index=True
    )
    investor_id = Column(String(32), ForeignKey("user.id"), nullable=False)
    amount = Column(Float, nullable=False)
    terms = Column(Text, nullable=False, default="")
    created_at = Column(DateTime, nullable=False, default=now_utc_naive_datetime)


__all__ = [
    "IdeaCollaboratorModel",
    "IdeaCommentModel",
    "IdeaInvestmentModel",
    "IdeaLikeModel",
    "IdeaModel",
]
