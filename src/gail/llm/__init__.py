from .base import LLMBackend
from .errors import (
    BackendConstructionError,
    BackendError,
    BackendRequestError,
    MalformedResponseError,
    MissingContextError,
    ResponseNotCompletedError,
    RunTimeoutError,
)
from .factory import create_llm_backend
from .models import Answer, ChatMessage, Fingerprint
from .providers import AssistantsBackend, ClaudeBackend, ResponsesBackend

__all__ = [
    "Answer",
    "AssistantsBackend",
    "BackendConstructionError",
    "BackendError",
    "BackendRequestError",
    "ChatMessage",
    "ClaudeBackend",
    "Fingerprint",
    "LLMBackend",
    "MalformedResponseError",
    "MissingContextError",
    "ResponseNotCompletedError",
    "ResponsesBackend",
    "RunTimeoutError",
    "create_llm_backend",
]
