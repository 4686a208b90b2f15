"""Roles, skills and the conversation session."""

from .models import ConversationTurn, Role, Skill, Speaker
from .registry import DEFAULT_ROLE_ID, DEFAULT_SKILL_ID, AssistantRegistry
from .session import USER_LABEL, Session

__all__ = [
    "DEFAULT_ROLE_ID",
    "DEFAULT_SKILL_ID",
    "USER_LABEL",
    "AssistantRegistry",
    "ConversationTurn",
    "Role",
    "Session",
    "Skill",
    "Speaker",
]
