"""OpenAI Assistants backend (stateful thread/run with completion polling).

Uses the `beta` namespace of the official OpenAI Python SDK, which sends
the `OpenAI-Beta: assistants=v2` header for every call.
Reference: https://platform.openai.com/docs/assistants/overview

Lifecycle of one conversation:

    Uninitialized -> HasConversationHandle (thread)
                  -> HasBoundContext (assistant)
                  -> MessagePosted -> RunSubmitted -> RunPolling
                  -> RunCompleted -> ResponseFetched
"""

import asyncio
import logging
from typing import Any

from openai import APIError, APIStatusError, AsyncOpenAI

from ...validator import InputValidator
from ..base import LLMBackend
from ..errors import (
    BackendConstructionError,
    BackendRequestError,
    MalformedResponseError,
    MissingContextError,
    RunTimeoutError,
)
from ..models import Answer, Fingerprint

logger = logging.getLogger(__name__)

RUN_POLL_INTERVAL = 4.0  # seconds between run status polls
RUN_POLL_LIMIT = 20  # polls before giving up
RUN_COMPLETED_STATUS = "completed"


def _request_error(action: str, e: APIError) -> BackendRequestError:
    if isinstance(e, APIStatusError):
        return BackendRequestError(
            f"OpenAI {action} failed with status {e.status_code}: {e.message}",
            status_code=e.status_code,
        )
    return BackendRequestError(f"Unable to make OpenAI {action} request: {e}")


class AssistantsBackend(LLMBackend):
    """Stateful OpenAI Assistants backend.

    Hidden design decisions:
    - One thread (conversation handle) is created at construction and kept
      for the backend's lifetime, so switching role or skill never loses
      earlier turns
    - Persona and instruction live in an assistant (bound context) that is
      recreated only when the (persona, instruction) fingerprint changes
    - The user's literal text is posted; the persona reaches the model
      through the assistant's instructions, not by text concatenation
    - Run completion is observed by bounded polling with a fixed interval
      and a fixed ceiling (no backoff)

    Use AssistantsBackend.create() to build an instance: creating the
    thread is a remote call.
    """

    def __init__(
        self,
        client: Any,
        validator: InputValidator,
        thread_id: str,
        model: str = "gpt-4o",
        max_tokens: int = 4096,
        user: str = "",
        poll_interval: float = RUN_POLL_INTERVAL,
        poll_limit: int = RUN_POLL_LIMIT,
    ):
        super().__init__(model=model, user=user, validator=validator)
        self._client = client
        self._max_tokens = max_tokens
        self._thread_id = thread_id
        self._assistant_id = ""
        self._poll_interval = poll_interval
        self._poll_limit = poll_limit

    @classmethod
    async def create(
        cls,
        api_key: str,
        validator: InputValidator,
        model: str = "gpt-4o",
        max_tokens: int = 4096,
        user: str = "",
        client: Any | None = None,
        poll_interval: float = RUN_POLL_INTERVAL,
        poll_limit: int = RUN_POLL_LIMIT,
        **client_kwargs: Any
    ) -> "AssistantsBackend":
        """Create the backend and its conversation thread.

        Args:
            api_key: OpenAI API key
            validator: Input validator run before every prompt
            model: Model the assistants are bound to
            max_tokens: Token budget (informational for this protocol)
            user: End-user identifier
            client: Optional pre-built client exposing the `beta` namespace
            poll_interval: Seconds between run status polls
            poll_limit: Number of polls before a run times out
            **client_kwargs: Additional kwargs for AsyncOpenAI client

        Raises:
            BackendConstructionError: If the thread cannot be created
        """
        client = client or AsyncOpenAI(api_key=api_key, max_retries=0, **client_kwargs)
        try:
            thread = await client.beta.threads.create()
        except APIError as e:
            raise BackendConstructionError(f"could not create an OpenAI thread: {e}") from e

        thread_id = getattr(thread, "id", None)
        if not thread_id:
            raise BackendConstructionError("OpenAI returned a thread without an id")

        logger.info("OpenAI thread created: %s", thread_id)
        return cls(
            client=client,
            validator=validator,
            thread_id=thread_id,
            model=model,
            max_tokens=max_tokens,
            user=user,
            poll_interval=poll_interval,
            poll_limit=poll_limit,
        )

    @property
    def thread_id(self) -> str:
        return self._thread_id

    @property
    def assistant_id(self) -> str:
        return self._assistant_id

    async def _send(
        self,
        role_name: str,
        role_persona: str,
        skill_instruction: str,
        message: str,
    ) -> Answer:
        if not self._thread_id:
            raise MissingContextError("OpenAI thread id is empty. No thread has been created")

        # Order matters: context, then message, then run.
        if self._fingerprint_changed(role_persona, skill_instruction):
            self._assistant_id = await self._create_assistant(
                role_name, role_persona, skill_instruction
            )
            self._fingerprint = Fingerprint(persona=role_persona, instruction=skill_instruction)

        if not self._assistant_id:
            raise MissingContextError("OpenAI assistant id is empty. No assistant has been created")

        await self._create_message(message)
        run_id = await self._create_run()
        await self.wait_run_completed(run_id)
        return Answer(text=await self._get_response())

    async def _create_assistant(self, role_name: str, persona: str, instruction: str) -> str:
        """Create an assistant bound to the given persona and instruction."""
        try:
            assistant = await self._client.beta.assistants.create(
                name=role_name,
                description=f"Gail: {persona}",
                model=self._model,
                instructions=f"{persona}. {instruction}.",
                tools=[{"type": "code_interpreter"}],
            )
        except APIError as e:
            raise _request_error("assistant creation", e) from e

        logger.info("OpenAI assistant created for role '%s': %s", role_name, assistant.id)
        return assistant.id

    async def _create_message(self, message: str) -> None:
        try:
            await self._client.beta.threads.messages.create(
                thread_id=self._thread_id,
                role="user",
                content=message,
            )
        except APIError as e:
            raise _request_error("message creation", e) from e

    async def _create_run(self) -> str:
        try:
            run = await self._client.beta.threads.runs.create(
                thread_id=self._thread_id,
                assistant_id=self._assistant_id,
            )
        except APIError as e:
            raise _request_error("run creation", e) from e
        return run.id

    async def wait_run_completed(self, run_id: str) -> None:
        """Poll a run until it reports 'completed'.

        Polls at most poll_limit times, waiting poll_interval seconds after
        each non-completed status.

        Raises:
            RunTimeoutError: If the ceiling is reached without completion
            BackendRequestError: If a status request fails
        """
        for attempt in range(self._poll_limit):
            try:
                run = await self._client.beta.threads.runs.retrieve(
                    run_id=run_id,
                    thread_id=self._thread_id,
                )
            except APIError as e:
                raise _request_error("run status", e) from e

            logger.info("Run %s poll %d: %s", run_id, attempt, run.status)
            if run.status == RUN_COMPLETED_STATUS:
                return

            await asyncio.sleep(self._poll_interval)

        raise RunTimeoutError(self._poll_limit, self._poll_interval)

    async def _get_response(self) -> str:
        """Fetch the newest thread message and return its first text block."""
        try:
            page = await self._client.beta.threads.messages.list(
                thread_id=self._thread_id,
                order="desc",
                limit=1,
            )
        except APIError as e:
            raise _request_error("message list", e) from e

        data = getattr(page, "data", None) or []
        if not data:
            raise MalformedResponseError("thread contains no messages")

        content = getattr(data[0], "content", None) or []
        if not content:
            raise MalformedResponseError("newest thread message has no content")

        text = getattr(content[0], "text", None)
        value = getattr(text, "value", None)
        if value is None:
            raise MalformedResponseError("first content block of the newest message carries no text")
        return value

    async def close(self) -> None:
        """Close the OpenAI client."""
        await self._client.close()
