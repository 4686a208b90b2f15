"""OpenAI Responses backend (stateless, single call with reasoning effort).

Reference: https://platform.openai.com/docs/api-reference/responses
"""

import logging
from typing import Any

from openai import APIError, APIStatusError, AsyncOpenAI

from ...validator import InputValidator
from ..base import LLMBackend
from ..errors import BackendRequestError, MalformedResponseError, ResponseNotCompletedError
from ..models import Answer

logger = logging.getLogger(__name__)

REASONING_EFFORT = "medium"


def extract_answer(response: Any) -> str:
    """Validate a Responses API payload and return its answer text.

    Reasoning models put their reasoning summary in the first output entry
    and the message in the second, so the answer is output[1].content[0].

    Raises:
        ResponseNotCompletedError: If status is not 'completed'
        MalformedResponseError: If the second output entry or its content is missing
    """
    if response is None:
        raise MalformedResponseError("nil response")

    status = getattr(response, "status", None)
    if status != "completed":
        details = []
        if getattr(response, "error", None):
            details.append(f"error: {response.error}")
        if getattr(response, "incomplete_details", None):
            details.append(f"details: {response.incomplete_details}")
        raise ResponseNotCompletedError(str(status), ", ".join(details))

    output = getattr(response, "output", None) or []
    if len(output) < 2:
        raise MalformedResponseError(f"expected at least 2 outputs from OpenAI, got {len(output)}")

    contents = getattr(output[1], "content", None) or []
    if not contents:
        raise MalformedResponseError("no content in output[1]")

    text = getattr(contents[0], "text", None)
    if text is None:
        raise MalformedResponseError("output[1].content[0] carries no text")
    return text


class ResponsesBackend(LLMBackend):
    """Stateless reasoning backend.

    Hidden design decisions:
    - No remote handle is kept; persona and instruction are sent as the
      `instructions` of every request
    - Reasoning effort is fixed to "medium"
    - The answer lives in the second output entry, not the first
    """

    def __init__(
        self,
        api_key: str,
        validator: InputValidator,
        model: str = "o3-mini",
        max_tokens: int = 16384,
        user: str = "",
        client: Any | None = None,
        **client_kwargs: Any
    ):
        """Initialize Responses backend.

        Args:
            api_key: OpenAI API key
            validator: Input validator run before every prompt
            model: Reasoning model to use
            max_tokens: Maximum output tokens
            user: End-user identifier sent with each request
            client: Optional pre-built client exposing responses.create()
            **client_kwargs: Additional kwargs for AsyncOpenAI client
        """
        super().__init__(model=model, user=user, validator=validator)
        self._max_tokens = max_tokens
        self._client = client or AsyncOpenAI(api_key=api_key, max_retries=0, **client_kwargs)

    async def _send(
        self,
        role_name: str,
        role_persona: str,
        skill_instruction: str,
        message: str,
    ) -> Answer:
        try:
            response = await self._client.responses.create(
                model=self._model,
                instructions=f"{role_persona}. {skill_instruction}.",
                input=message,
                user=self._user,
                max_output_tokens=self._max_tokens,
                reasoning={"effort": REASONING_EFFORT},
            )
        except APIStatusError as e:
            raise BackendRequestError(
                f"OpenAI response request failed with status {e.status_code}: {e.message}",
                status_code=e.status_code,
            ) from e
        except APIError as e:
            raise BackendRequestError(f"Unable to make OpenAI response request: {e}") from e

        text = extract_answer(response)

        usage = None
        if getattr(response, "usage", None):
            usage = {
                "prompt_tokens": getattr(response.usage, "input_tokens", 0),
                "completion_tokens": getattr(response.usage, "output_tokens", 0),
                "total_tokens": getattr(response.usage, "total_tokens", 0)
            }

        logger.debug("Response received for role '%s'", role_name)
        return Answer(text=text, usage=usage)

    async def close(self) -> None:
        """Close the OpenAI client."""
        await self._client.close()
