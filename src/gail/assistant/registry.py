"""Registry of configured roles and skills.

Lookups never raise: an unknown id yields the empty Role or Skill, which
callers treat as "nothing selected".
"""

from collections.abc import Iterable

from .models import Role, Skill

DEFAULT_ROLE_ID = "swe"
DEFAULT_SKILL_ID = "default"


class AssistantRegistry:
    """Immutable collection of roles and skills loaded once at startup."""

    def __init__(self, roles: Iterable[Role], skills: Iterable[Skill]):
        self._roles = tuple(roles)
        self._skills = tuple(skills)

    @property
    def roles(self) -> tuple[Role, ...]:
        return self._roles

    @property
    def skills(self) -> tuple[Skill, ...]:
        return self._skills

    def default_role(self) -> Role:
        return self.find_role(DEFAULT_ROLE_ID)

    def default_skill(self) -> Skill:
        return self.find_skill(DEFAULT_SKILL_ID)

    def find_role(self, role_id: str) -> Role:
        for role in self._roles:
            if role.id == role_id:
                return role
        return Role()

    def find_skill(self, skill_id: str) -> Skill:
        for skill in self._skills:
            if skill.id == skill_id:
                return skill
        return Skill()

    def role_skills(self, role_id: str) -> list[Skill]:
        """Skills whose role ids contain role_id, in configuration order."""
        return [skill for skill in self._skills if skill.applies_to(role_id)]
