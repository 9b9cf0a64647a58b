"""Schemas for ideas and the interactions on them."""

from __future__ import annotations

from datetime import datetime

from pydantic import Field

from .base import CamelModel


class IdeaCreate(CamelModel):
    title: str
    description: str
    category: str
    stage: str | None = None
    funding_goal: float
    tags: list[str] = Field(default_factory=list)


class IdeaRead(CamelModel):
    id: str
    creator: str
    title: str
    description: str
    category: str
    stage: str
    funding_goal: float
    current_funding: float
    tags: list[str] = Field(default_factory=list)
    likes_count: int = 0
    collaborators: list[str] = Field(default_factory=list)
    created_at: datetime | None = None
    updated_at: datetime | None = None


class LikeResponse(CamelModel):
    message: str
    liked: bool
    likes_count: int


class CommentCreate(CamelModel):
    content: str
    rating: int | None = None


class CommentRead(CamelModel):
    id: str
    user: str
    content: str
    rating: int | None = None
    created_at: datetime | None = None


class CommentResponse(CamelModel):
    message: str
    comment: CommentRead


class InvestmentRequest(CamelModel):
    amount: float
    terms: str = ""


class InvestmentRead(CamelModel):
    id: str
    investor: str
    amount: float
    terms: str = ""
    created_at: datetime | None = None


class InvestmentResponse(CamelModel):
    message: str
    investment: InvestmentRead
    idea: IdeaRead
