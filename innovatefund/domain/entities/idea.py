"""Domain entities describing ideas and the interactions they receive."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

IDEA_CATEGORIES: tuple[str, ...] = (
    "technology",
    "healthcare",
    "finance",
    "education",
    "environment",
    "social",
    "consumer",
    "enterprise",
)

IDEA_STAGES: tuple[str, ...] = ("idea", "prototype", "mvp", "beta", "launched")

MIN_FUNDING_GOAL = 1000


@dataclass
class IdeaComment:
    id: str | None
    idea_id: str
    user_id: str
    content: str
    rating: int | None = None
    created_at: datetime | None = None


@dataclass
class IdeaInvestment:
    id: str | None
    idea_id: str
    investor_id: str
    amount: float
    terms: str = ""
    created_at: datetime | None = None


@dataclass
class Idea:
    """Proposal published by an innovator to attract funding."""

    id: str | None
    creator_id: str
    title: str
    description: str
    category: str
    stage: str = "idea"
    funding_goal: float = MIN_FUNDING_GOAL
    current_funding: float = 0.0
    tags: list[str] = field(default_factory=list)
    likes: list[str] = field(default_factory=list)
    collaborators: list[str] = field(default_factory=list)
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def is_liked_by(self, user_id: str) -> bool:
        return user_id in self.likes

    def goal_reached(self) -> bool:
        return self.current_funding >= self.funding_goal


__all__ = [
    "IDEA_CATEGORIES",
    "IDEA_STAGES",
    "Idea",
    "IdeaComment",
    "IdeaInvestment",
    "MIN_FUNDING_GOAL",
]
