import logging
from abc import ABC, abstractmethod
from typing import Any

from ..validator import InputValidator
from .models import Answer, Fingerprint

logger = logging.getLogger(__name__)


class LLMBackend(ABC):
    """Abstract base class for LLM backends.

    This module hides the design decision of which remote conversation
    protocol is spoken. Implementations must handle:
    - API client setup and authentication
    - Remote context lifecycle (message lists, threads, assistants)
    - Request/response format conversion
    - Mapping SDK failures onto BackendError subclasses

    Every prompt is screened by the input validator first. A rejected input
    short-circuits: the rejection message comes back as a normal Answer, the
    remote service is not contacted and adapter state is left untouched.

    A backend is not safe for concurrent prompt() calls; callers must keep
    at most one call in flight.

    Supports async context manager protocol for proper resource cleanup:
        async with backend:
            answer = await backend.prompt(...)
    """

    def __init__(self, model: str, user: str, validator: InputValidator):
        self._model = model
        self._user = user
        self._validator = validator
        self._fingerprint = Fingerprint()

    @property
    def model(self) -> str:
        """Get the model name."""
        return self._model

    @property
    def user(self) -> str:
        """Get the end-user identifier sent along with requests."""
        return self._user

    @property
    def fingerprint(self) -> Fingerprint:
        """The (persona, instruction) pair last applied; empty before the first one."""
        return self._fingerprint

    def _fingerprint_changed(self, persona: str, instruction: str) -> bool:
        return self._fingerprint != Fingerprint(persona=persona, instruction=instruction)

    async def prompt(
        self,
        role_name: str,
        role_persona: str,
        skill_instruction: str,
        message: str,
    ) -> Answer:
        """Send a user message under the given role and skill.

        Args:
            role_name: Display name of the active role
            role_persona: Persona text of the active role
            skill_instruction: Instruction text of the active skill
            message: Raw user message

        Returns:
            Answer with the model's reply, or a rejected Answer carrying the
            validator's message

        Raises:
            BackendError: On transport, protocol or timeout failures
        """
        result = self._validator.validate(message)
        if not result.valid:
            logger.info("Prompt rejected by validator (model=%s)", self._model)
            return Answer(text=result.message, rejected=True)

        return await self._send(role_name, role_persona, skill_instruction, message)

    @abstractmethod
    async def _send(
        self,
        role_name: str,
        role_persona: str,
        skill_instruction: str,
        message: str,
    ) -> Answer:
        """Run the protocol-specific remote exchange for a validated message."""

    @abstractmethod
    async def close(self) -> None:
        """Close any open connections or resources."""

    async def __aenter__(self) -> "LLMBackend":
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Async context manager exit with automatic cleanup.

        Note: Suppresses "Event loop is closed" errors during cleanup.
        This is a known harmless race condition in httpx/anyio cleanup:
        https://github.com/encode/httpx/issues/914
        """
        try:
            await self.close()
        except RuntimeError as e:
            if "Event loop is closed" not in str(e):
                raise
