"""Textual terminal UI."""

from .app import AnswerReady, GailApp, run_gail_tui
from .state import IllegalTransition, UIEvent, UIMode, transition

__all__ = [
    "AnswerReady",
    "GailApp",
    "IllegalTransition",
    "UIEvent",
    "UIMode",
    "run_gail_tui",
    "transition",
]
