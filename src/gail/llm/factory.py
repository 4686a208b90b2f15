from typing import Any

from .base import LLMBackend
from .providers import AssistantsBackend, ClaudeBackend, ResponsesBackend


async def create_llm_backend(backend: str, **config: Any) -> LLMBackend:
    """Create an LLM backend instance.

    This factory function hides the instantiation logic for the different
    remote protocols. It is a coroutine because some backends open remote
    state (a conversation thread) while being built.

    Args:
        backend: Backend type ('gpt', 'claude', 'gpto')
        **config: Backend-specific configuration
            Common to all:
                - api_key: str (required)
                - validator: InputValidator (required)
                - model: str
                - max_tokens: int
                - user: str
            For gpt (Assistants, stateful):
                - poll_interval: float (default: 4.0)
                - poll_limit: int (default: 20)

    Returns:
        Initialized LLM backend instance

    Raises:
        ValueError: If backend type is not supported
        TypeError: If required configuration is missing
        BackendConstructionError: If remote setup fails

    Examples:
        >>> backend = await create_llm_backend(
        ...     "claude",
        ...     api_key="sk-ant-...",
        ...     validator=validator,
        ... )
    """
    backend_lower = backend.lower()

    for required in ("api_key", "validator"):
        if required not in config:
            raise TypeError(f"Backend '{backend}' requires '{required}' in config")

    if backend_lower == "gpt":
        return await AssistantsBackend.create(**config)

    if backend_lower == "claude":
        return ClaudeBackend(**config)

    if backend_lower == "gpto":
        return ResponsesBackend(**config)

    raise ValueError(
        f"Unsupported backend: {backend}. "
        f"Supported backends: 'gpt', 'claude', 'gpto'"
    )
