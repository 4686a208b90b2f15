from .assistants import AssistantsBackend
from .claude import ClaudeBackend
from .responses import ResponsesBackend

__all__ = ["AssistantsBackend", "ClaudeBackend", "ResponsesBackend"]
