"""Data models for roles, skills and conversation turns.

These models define what the assistant can be asked to be (a role) and to
do (a skill), independent of how they are configured or displayed.
"""

from dataclasses import dataclass
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class Role(BaseModel):
    """A persona the assistant adopts.

    The empty Role (all fields blank) stands for "no role found".
    """

    model_config = ConfigDict(frozen=True)

    id: str = ""
    name: str = ""
    persona: str = ""


class Skill(BaseModel):
    """A task instruction scoped to one or more roles.

    The empty Skill (blank instruction) is the fallback when a role has
    no skill mapped to it.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = ""
    instruction: str = ""
    description: str = ""
    role_ids: tuple[str, ...] = Field(default=(), alias="roleIDs")

    def applies_to(self, role_id: str) -> bool:
        """Check whether this skill is offered for the given role."""
        return role_id in self.role_ids


class Speaker(str, Enum):
    """Who produced a conversation turn."""

    USER = "user"
    ASSISTANT = "assistant"


@dataclass
class ConversationTurn:
    """One displayed turn of the conversation."""

    speaker: Speaker
    text: str  # rendered text, may contain ANSI highlighting
