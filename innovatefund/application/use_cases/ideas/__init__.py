"""Use cases for ideas and the interactions that trigger notifications."""

from .create_idea import create_idea, get_idea
from .interactions import accept_collaborator, add_comment, request_collaboration, toggle_like
from .invest import invest_in_idea

__all__ = [
    "accept_collaborator",
    "add_comment",
    "create_idea",
    "get_idea",
    "invest_in_idea",
    "request_collaboration",
    "toggle_like",
]
