"""Conversation session: active persona plus turn history.

Hides how the active role and skill are tracked and how the transcript
is flattened for display and persistence. A session lives for one
process run and is only ever mutated from the UI event loop.
"""

import logging

from .models import ConversationTurn, Role, Skill, Speaker
from .registry import AssistantRegistry

logger = logging.getLogger(__name__)

USER_LABEL = "You"


class Session:
    """Active role/skill selection and the append-only turn history."""

    def __init__(self, registry: AssistantRegistry, assistant_label: str = "Gail"):
        self._registry = registry
        self._assistant_label = assistant_label
        self._role = registry.default_role()
        self._skill = registry.default_skill()
        self._turns: list[ConversationTurn] = []

    @property
    def registry(self) -> AssistantRegistry:
        return self._registry

    @property
    def active_role(self) -> Role:
        return self._role

    @property
    def active_skill(self) -> Skill:
        return self._skill

    @property
    def turns(self) -> list[ConversationTurn]:
        return list(self._turns)

    def available_skills(self) -> list[Skill]:
        """Skills offered for the active role, computed on demand."""
        return self._registry.role_skills(self._role.id)

    def select_role(self, role_id: str) -> Role:
        """Make role_id the active role.

        The active skill is kept when it applies to the new role, otherwise
        it falls back to the empty Skill. Turns are never discarded.

        Raises:
            ValueError: If no role has this id
        """
        role = self._registry.find_role(role_id)
        if not role.id:
            raise ValueError(f"Unknown role: {role_id!r}")

        self._role = role
        if self._skill.id and not self._skill.applies_to(role.id):
            logger.info("Skill '%s' does not apply to role '%s', clearing it", self._skill.id, role.id)
            self._skill = Skill()

        logger.info("Role selected: %s", role.id)
        return role

    def select_skill(self, skill_id: str) -> Skill:
        """Make skill_id the active skill.

        Raises:
            ValueError: If the skill does not exist or does not apply to the active role
        """
        for skill in self.available_skills():
            if skill.id == skill_id:
                self._skill = skill
                logger.info("Skill selected: %s", skill.id)
                return skill
        raise ValueError(f"Skill {skill_id!r} is not available for role {self._role.id!r}")

    def record_exchange(self, user_text: str, assistant_text: str) -> None:
        """Append a completed user/assistant exchange."""
        self._turns.append(ConversationTurn(speaker=Speaker.USER, text=user_text))
        self._turns.append(ConversationTurn(speaker=Speaker.ASSISTANT, text=assistant_text))

    def label(self, turn: ConversationTurn) -> str:
        return USER_LABEL if turn.speaker is Speaker.USER else self._assistant_label

    def transcript(self) -> str:
        """Flatten the turns into display text.

        User turns read "You: ..." and assistant turns are set off by blank
        lines, e.g. "You: hi\\n\\nGail: hello\\n". Highlighting codes in
        assistant text are kept; strip them before persisting.
        """
        lines = []
        for turn in self._turns:
            if turn.speaker is Speaker.USER:
                lines.append(f"{USER_LABEL}: {turn.text}")
            else:
                lines.append(f"\n{self._assistant_label}: {turn.text}\n")
        return "\n".join(lines)
