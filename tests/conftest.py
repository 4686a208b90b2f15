"""Pytest configuration and shared fixtures."""

from types import SimpleNamespace
from unittest.mock import AsyncMock

import pytest

from gail.assistant import AssistantRegistry, Role, Session, Skill
from gail.validator import InputValidator, ValidationRule


@pytest.fixture
def validator():
    """Validator refusing e-mail addresses and phone numbers, in that order."""
    return InputValidator([
        ValidationRule(name="email", pattern=r"\S+@\S+"),
        ValidationRule(name="phone number", pattern=r"\+?\d[\d -]{7,}\d"),
    ])


@pytest.fixture
def permissive_validator():
    return InputValidator([])


@pytest.fixture
def registry():
    """Two roles; 'review' is shared, 'debug' belongs to swe only."""
    roles = [
        Role(id="swe", name="Software Engineer", persona="You are a senior software engineer"),
        Role(id="writer", name="Writer", persona="You are a technical writer"),
    ]
    skills = [
        Skill(id="default", instruction="Answer concisely", description="Default", role_ids=("swe", "writer")),
        Skill(id="review", instruction="Review the code", description="Code review", role_ids=("swe", "writer")),
        Skill(id="debug", instruction="Find the bug", description="Debugging", role_ids=("swe",)),
    ]
    return AssistantRegistry(roles, skills)


@pytest.fixture
def session(registry):
    return Session(registry)


def make_claude_client(*replies):
    """Fake AsyncAnthropic exposing messages.create() and close()."""
    responses = [
        SimpleNamespace(
            content=[SimpleNamespace(type="text", text=reply)],
            usage=SimpleNamespace(input_tokens=10, output_tokens=5),
        )
        for reply in replies
    ]
    return SimpleNamespace(
        messages=SimpleNamespace(create=AsyncMock(side_effect=responses)),
        close=AsyncMock(),
    )


def make_responses_payload(text="Try X", status="completed", outputs=2, **extra):
    """Responses API payload with a reasoning entry followed by the message."""
    output = [SimpleNamespace(type="reasoning", content=[])]
    if outputs >= 2:
        output.append(
            SimpleNamespace(type="message", content=[SimpleNamespace(type="output_text", text=text)])
        )
    return SimpleNamespace(status=status, output=output[:outputs], usage=None, **extra)


def make_responses_client(*payloads):
    """Fake AsyncOpenAI exposing responses.create() and close()."""
    return SimpleNamespace(
        responses=SimpleNamespace(create=AsyncMock(side_effect=list(payloads))),
        close=AsyncMock(),
    )


def make_assistants_client(statuses=("completed",), reply="Try X", thread_id="thread_1"):
    """Fake AsyncOpenAI exposing the beta assistants/threads namespace.

    Run polls report the given statuses in order.
    """
    message = SimpleNamespace(
        content=[SimpleNamespace(type="text", text=SimpleNamespace(value=reply))]
    )
    threads = SimpleNamespace(
        create=AsyncMock(return_value=SimpleNamespace(id=thread_id)),
        messages=SimpleNamespace(
            create=AsyncMock(return_value=SimpleNamespace(id="msg_1")),
            list=AsyncMock(return_value=SimpleNamespace(data=[message])),
        ),
        runs=SimpleNamespace(
            create=AsyncMock(return_value=SimpleNamespace(id="run_1")),
            retrieve=AsyncMock(side_effect=[SimpleNamespace(status=s) for s in statuses]),
        ),
    )
    assistants = SimpleNamespace(
        create=AsyncMock(return_value=SimpleNamespace(id="asst_1")),
    )
    return SimpleNamespace(
        beta=SimpleNamespace(threads=threads, assistants=assistants),
        close=AsyncMock(),
    )


@pytest.fixture
def claude_client():
    return make_claude_client("Try X", "Then Y", "Finally Z")


@pytest.fixture
def assistants_client():
    return make_assistants_client()
