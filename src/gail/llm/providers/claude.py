"""Anthropic Claude backend (stateless multi-turn).

Uses the official Anthropic Python SDK for async message creation.
Reference: https://github.com/anthropics/anthropic-sdk-python
"""

import logging
from typing import Any

from anthropic import APIError, APIStatusError, AsyncAnthropic

from ...validator import InputValidator
from ..base import LLMBackend
from ..errors import BackendRequestError, MalformedResponseError
from ..models import Answer, ChatMessage, Fingerprint

logger = logging.getLogger(__name__)


class ClaudeBackend(LLMBackend):
    """Stateless Claude backend.

    Hidden design decisions:
    - The whole conversation is resent on every call as an append-only
      list of alternating user/assistant messages
    - Persona and instruction are injected by prefixing the first user
      message sent after they change: "{persona}. {instruction}. {message}"
    - A turn (and the new fingerprint) is committed only once the remote
      call succeeded, so a failure never leaves a dangling user message
    - No retries: the SDK client is created with max_retries=0
    """

    def __init__(
        self,
        api_key: str,
        validator: InputValidator,
        model: str = "claude-3-5-sonnet-20240620",
        max_tokens: int = 4092,
        user: str = "",
        client: Any | None = None,
        **client_kwargs: Any
    ):
        """Initialize Claude backend.

        Args:
            api_key: Anthropic API key
            validator: Input validator run before every prompt
            model: Model to use
            max_tokens: Maximum tokens to generate per reply
            user: End-user identifier (kept for the backend contract only)
            client: Optional pre-built client exposing messages.create()
            **client_kwargs: Additional kwargs for AsyncAnthropic client
        """
        super().__init__(model=model, user=user, validator=validator)
        self._max_tokens = max_tokens
        self._messages: list[ChatMessage] = []
        self._client = client or AsyncAnthropic(
            api_key=api_key,
            max_retries=0,
            **client_kwargs
        )

    @property
    def messages(self) -> list[ChatMessage]:
        """Conversation history sent with every request."""
        return list(self._messages)

    async def _send(
        self,
        role_name: str,
        role_persona: str,
        skill_instruction: str,
        message: str,
    ) -> Answer:
        fingerprint = Fingerprint(persona=role_persona, instruction=skill_instruction)
        if fingerprint != self._fingerprint:
            content = f"{role_persona}. {skill_instruction}. {message}"
            logger.debug("Persona or instruction changed, prefixing message (role=%s)", role_name)
        else:
            content = message

        pending = [*self._messages, ChatMessage(role="user", content=content)]

        try:
            response = await self._client.messages.create(
                model=self._model,
                max_tokens=self._max_tokens,
                messages=[msg.model_dump() for msg in pending],
            )
        except APIStatusError as e:
            raise BackendRequestError(
                f"Claude message request failed with status {e.status_code}: {e.message}",
                status_code=e.status_code,
            ) from e
        except APIError as e:
            raise BackendRequestError(f"Unable to make Claude message request: {e}") from e

        texts = [
            block.text
            for block in (getattr(response, "content", None) or [])
            if getattr(block, "text", None) is not None
        ]
        if not texts:
            raise MalformedResponseError("Claude reply contains no text content")
        answer_text = "".join(texts)

        usage = None
        if getattr(response, "usage", None):
            usage = {
                "prompt_tokens": response.usage.input_tokens,
                "completion_tokens": response.usage.output_tokens,
                "total_tokens": response.usage.input_tokens + response.usage.output_tokens
            }

        pending.append(ChatMessage(role="assistant", content=answer_text))
        self._messages = pending
        self._fingerprint = fingerprint

        return Answer(text=answer_text, usage=usage)

    async def close(self) -> None:
        """Close the Anthropic client."""
        await self._client.close()
