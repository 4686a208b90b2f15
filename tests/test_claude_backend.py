"""Tests for the stateless Claude backend."""

from types import SimpleNamespace
from unittest.mock import AsyncMock

import anthropic
import httpx
import pytest
from conftest import make_claude_client

from gail.llm import BackendRequestError, ChatMessage, ClaudeBackend, Fingerprint, MalformedResponseError

PERSONA = "You are a senior software engineer"
INSTRUCTION = "Answer concisely"


def _status_error(status_code: int) -> anthropic.APIStatusError:
    request = httpx.Request("POST", "https://api.anthropic.com/v1/messages")
    response = httpx.Response(status_code, request=request)
    return anthropic.APIStatusError("overloaded", response=response, body=None)


class TestClaudeBackend:
    """Tests for message list handling and persona prefixing."""

    @pytest.mark.asyncio
    async def test_first_message_is_prefixed(self, claude_client, validator):
        """A new fingerprint prefixes persona and instruction to the message."""
        backend = ClaudeBackend(api_key="test", validator=validator, client=claude_client)

        answer = await backend.prompt("Software Engineer", PERSONA, INSTRUCTION, "fix this bug")

        assert answer.text == "Try X"
        assert answer.rejected is False
        kwargs = claude_client.messages.create.call_args.kwargs
        assert kwargs["messages"] == [
            {"role": "user", "content": f"{PERSONA}. {INSTRUCTION}. fix this bug"}
        ]
        assert kwargs["max_tokens"] == 4092

    @pytest.mark.asyncio
    async def test_no_role_or_skill_sends_literal_text(self, claude_client, validator):
        backend = ClaudeBackend(api_key="test", validator=validator, client=claude_client)

        await backend.prompt("", "", "", "hello")

        messages = claude_client.messages.create.call_args.kwargs["messages"]
        assert messages == [{"role": "user", "content": "hello"}]

    @pytest.mark.asyncio
    async def test_unchanged_fingerprint_sends_literal_text(self, claude_client, validator):
        backend = ClaudeBackend(api_key="test", validator=validator, client=claude_client)

        await backend.prompt("Software Engineer", PERSONA, INSTRUCTION, "fix this bug")
        await backend.prompt("Software Engineer", PERSONA, INSTRUCTION, "and this one")

        messages = claude_client.messages.create.call_args.kwargs["messages"]
        assert [m["role"] for m in messages] == ["user", "assistant", "user"]
        assert messages[1]["content"] == "Try X"
        assert messages[2]["content"] == "and this one"

    @pytest.mark.asyncio
    async def test_changed_fingerprint_prefixes_again(self, claude_client, validator):
        backend = ClaudeBackend(api_key="test", validator=validator, client=claude_client)

        await backend.prompt("Software Engineer", PERSONA, INSTRUCTION, "one")
        await backend.prompt("Software Engineer", PERSONA, "Review the code", "two")

        last = claude_client.messages.create.call_args.kwargs["messages"][-1]
        assert last["content"] == f"{PERSONA}. Review the code. two"

    @pytest.mark.asyncio
    async def test_history_alternates(self, claude_client, validator):
        backend = ClaudeBackend(api_key="test", validator=validator, client=claude_client)

        for text in ("one", "two", "three"):
            await backend.prompt("Software Engineer", PERSONA, INSTRUCTION, text)

        roles = [m.role for m in backend.messages]
        assert roles == ["user", "assistant"] * 3
        assert backend.messages[-1] == ChatMessage(role="assistant", content="Finally Z")

    @pytest.mark.asyncio
    async def test_rejected_input_never_reaches_remote(self, claude_client, validator):
        backend = ClaudeBackend(api_key="test", validator=validator, client=claude_client)

        answer = await backend.prompt("Software Engineer", PERSONA, INSTRUCTION, "contact me at a@b.com")

        assert answer.rejected is True
        assert "email" in answer.text
        claude_client.messages.create.assert_not_called()
        assert backend.messages == []
        assert backend.fingerprint == Fingerprint()

    @pytest.mark.asyncio
    async def test_failure_leaves_no_dangling_message(self, validator):
        client = SimpleNamespace(
            messages=SimpleNamespace(create=AsyncMock(side_effect=_status_error(529))),
            close=AsyncMock(),
        )
        backend = ClaudeBackend(api_key="test", validator=validator, client=client)

        with pytest.raises(BackendRequestError) as exc_info:
            await backend.prompt("Software Engineer", PERSONA, INSTRUCTION, "fix this bug")

        assert exc_info.value.status_code == 529
        assert exc_info.value.is_retryable()
        assert backend.messages == []
        assert backend.fingerprint == Fingerprint()

    @pytest.mark.asyncio
    async def test_reply_without_text(self, validator):
        client = SimpleNamespace(
            messages=SimpleNamespace(create=AsyncMock(return_value=SimpleNamespace(content=[], usage=None))),
            close=AsyncMock(),
        )
        backend = ClaudeBackend(api_key="test", validator=validator, client=client)

        with pytest.raises(MalformedResponseError):
            await backend.prompt("Software Engineer", PERSONA, INSTRUCTION, "fix this bug")
        assert backend.messages == []

    @pytest.mark.asyncio
    async def test_usage_reported(self, validator):
        backend = ClaudeBackend(api_key="test", validator=validator, client=make_claude_client("ok"))
        answer = await backend.prompt("r", "p", "i", "hello")
        assert answer.usage == {"prompt_tokens": 10, "completion_tokens": 5, "total_tokens": 15}

    @pytest.mark.asyncio
    async def test_context_manager_closes_client(self, claude_client, validator):
        async with ClaudeBackend(api_key="test", validator=validator, client=claude_client):
            pass
        claude_client.close.assert_awaited_once()

    def test_accessors(self, claude_client, validator):
        backend = ClaudeBackend(api_key="test", validator=validator, model="m", user="Gail", client=claude_client)
        assert backend.model == "m"
        assert backend.user == "Gail"
