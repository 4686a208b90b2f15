"""
Gail: a terminal chat client for swappable LLM backends.

The user converses with one backend under a selectable role (persona)
and skill (task instruction). Each package hides one design decision:
which remote protocol is spoken (llm), which input is refused (validator),
which persona is active (assistant) and how the terminal is driven (ui).
"""

__version__ = "0.1.0"

APP_NAME = "Gail"

from .assistant import AssistantRegistry, Role, Session, Skill
from .llm import Answer, LLMBackend, create_llm_backend
from .validator import InputValidator, ValidationRule

__all__ = [
    "APP_NAME",
    "Answer",
    "AssistantRegistry",
    "InputValidator",
    "LLMBackend",
    "Role",
    "Session",
    "Skill",
    "ValidationRule",
    "create_llm_backend",
]
