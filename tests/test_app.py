"""Headless tests for the Textual app."""

import asyncio

import pytest

from gail.llm import Answer, BackendRequestError, LLMBackend, MalformedResponseError, RunTimeoutError
from gail.ui import GailApp, UIMode
from gail.ui.screens import RoleSelectScreen, SkillSelectScreen
from gail.ui.widgets import LogPanel, PromptInput, StatusBar, TranscriptView


class FakeBackend(LLMBackend):
    """Backend answering from a list of replies, optionally held by a gate."""

    def __init__(self, validator, replies=("Try X",), error=None, gate=None):
        super().__init__(model="fake-model", user="Gail", validator=validator)
        self.replies = list(replies)
        self.error = error
        self.gate = gate
        self.calls = []
        self.closed = False

    async def _send(self, role_name, role_persona, skill_instruction, message):
        self.calls.append((role_name, role_persona, skill_instruction, message))
        if self.gate is not None:
            await self.gate.wait()
        if self.error is not None:
            raise self.error
        return Answer(text=self.replies.pop(0))

    async def close(self):
        self.closed = True


def _app(backend, session, tmp_path):
    return GailApp(backend=backend, session=session, history_dir=tmp_path / "history")


async def _submit(app, pilot, text):
    app.query_one(PromptInput).text = text
    await pilot.press("ctrl+s")
    await app.workers.wait_for_complete()
    await pilot.pause()


class TestPrompting:
    """End to end prompt handling with a fake backend."""

    @pytest.mark.asyncio
    async def test_answer_recorded_and_saved(self, validator, session, tmp_path):
        backend = FakeBackend(validator)
        app = _app(backend, session, tmp_path)

        async with app.run_test() as pilot:
            await _submit(app, pilot, "fix this bug")

            assert app.mode is UIMode.TEXT_INPUT
            assert backend.calls == [(
                "Software Engineer",
                "You are a senior software engineer",
                "Answer concisely",
                "fix this bug",
            )]
            transcript = session.transcript()
            assert transcript.index("You: fix this bug") < transcript.index("Gail: Try X")
            assert app.query_one(PromptInput).text == ""
            assert not app.query_one(PromptInput).disabled
            assert "saved" in app.query_one(StatusBar).message

        files = list((tmp_path / "history").iterdir())
        assert len(files) == 1
        content = files[0].read_text(encoding="utf-8")
        assert "You: fix this bug" in content
        assert "Gail: Try X" in content
        assert "\x1b" not in content

    @pytest.mark.asyncio
    async def test_code_is_highlighted_on_screen_not_on_disk(self, validator, session, tmp_path):
        backend = FakeBackend(validator, replies=["Run:\n```python\nprint('hi')\n```\n"])
        app = _app(backend, session, tmp_path)

        async with app.run_test() as pilot:
            await _submit(app, pilot, "show me")
            assert "\x1b[" in session.turns[1].text

        content = next((tmp_path / "history").iterdir()).read_text(encoding="utf-8")
        assert "print('hi')" in content
        assert "\x1b" not in content

    @pytest.mark.asyncio
    async def test_rejected_input(self, validator, session, tmp_path):
        """A rejection is shown, not recorded, and the text comes back."""
        backend = FakeBackend(validator)
        app = _app(backend, session, tmp_path)

        async with app.run_test() as pilot:
            await _submit(app, pilot, "contact me at a@b.com")

            assert backend.calls == []
            assert session.turns == []
            assert "email" in app.query_one(StatusBar).message
            assert app.query_one(PromptInput).text == "contact me at a@b.com"
            assert app.mode is UIMode.TEXT_INPUT

        assert not (tmp_path / "history").exists()

    @pytest.mark.asyncio
    async def test_timeout_reported(self, validator, session, tmp_path):
        backend = FakeBackend(validator, error=RunTimeoutError(20, 4.0))
        app = _app(backend, session, tmp_path)

        async with app.run_test() as pilot:
            await _submit(app, pilot, "hello")

            status = app.query_one(StatusBar)
            assert status.message.startswith("No response in time:")
            assert status.has_class("-error")
            assert session.turns == []
            assert app.mode is UIMode.TEXT_INPUT

    @pytest.mark.asyncio
    async def test_request_error_reported(self, validator, session, tmp_path):
        backend = FakeBackend(validator, error=BackendRequestError("boom", status_code=500))
        app = _app(backend, session, tmp_path)

        async with app.run_test() as pilot:
            await _submit(app, pilot, "hello")

            assert app.query_one(StatusBar).message == "Error fetching answer: boom (ctrl+s to retry)"
            assert app.query_one(PromptInput).text == "hello"

    @pytest.mark.asyncio
    async def test_malformed_response_has_no_retry_hint(self, validator, session, tmp_path):
        backend = FakeBackend(validator, error=MalformedResponseError("no content"))
        app = _app(backend, session, tmp_path)

        async with app.run_test() as pilot:
            await _submit(app, pilot, "hello")

            assert app.query_one(StatusBar).message == "Error fetching answer: Malformed response: no content"

    @pytest.mark.asyncio
    async def test_indentation_reaches_backend(self, validator, session, tmp_path):
        backend = FakeBackend(validator)
        app = _app(backend, session, tmp_path)

        async with app.run_test() as pilot:
            await _submit(app, pilot, "    for x in xs:\n        print(x)\n")

            assert backend.calls[0][3] == "    for x in xs:\n        print(x)\n"
            assert session.turns[0].text == "    for x in xs:\n        print(x)\n"

    @pytest.mark.asyncio
    async def test_loading_blocks_input(self, validator, session, tmp_path):
        gate = asyncio.Event()
        backend = FakeBackend(validator, gate=gate)
        app = _app(backend, session, tmp_path)

        async with app.run_test() as pilot:
            app.query_one(PromptInput).text = "first"
            await pilot.press("ctrl+s")
            await pilot.pause()

            assert app.mode is UIMode.LOADING
            assert app.query_one(PromptInput).disabled
            assert app.query_one(StatusBar).has_class("-loading")

            await pilot.press("ctrl+r")
            await pilot.pause()
            assert not isinstance(app.screen, RoleSelectScreen)

            gate.set()
            await app.workers.wait_for_complete()
            await pilot.pause()
            assert app.mode is UIMode.TEXT_INPUT
            assert len(backend.calls) == 1

    @pytest.mark.asyncio
    async def test_empty_input_not_sent(self, validator, session, tmp_path):
        backend = FakeBackend(validator)
        app = _app(backend, session, tmp_path)

        async with app.run_test() as pilot:
            await _submit(app, pilot, "   ")
            assert backend.calls == []
            assert app.mode is UIMode.TEXT_INPUT


class TestPickers:
    """Role and skill selection through the modal pickers."""

    @pytest.mark.asyncio
    async def test_select_role(self, validator, session, tmp_path):
        app = _app(FakeBackend(validator), session, tmp_path)

        async with app.run_test() as pilot:
            await pilot.press("ctrl+r")
            await pilot.pause()
            assert isinstance(app.screen, RoleSelectScreen)
            assert app.mode is UIMode.ROLE_SELECT

            await pilot.press("down", "enter")
            await pilot.pause()

            assert app.mode is UIMode.TEXT_INPUT
            assert session.active_role.id == "writer"
            assert "Writer" in app.query_one(TranscriptView).border_title

    @pytest.mark.asyncio
    async def test_escape_keeps_picker_open(self, validator, session, tmp_path):
        app = _app(FakeBackend(validator), session, tmp_path)

        async with app.run_test() as pilot:
            await pilot.press("ctrl+r")
            await pilot.pause()
            await pilot.press("down", "escape")
            await pilot.pause()

            assert isinstance(app.screen, RoleSelectScreen)
            assert app.mode is UIMode.ROLE_SELECT
            assert session.active_role.id == "swe"

            await pilot.press("enter")
            await pilot.pause()
            assert app.mode is UIMode.TEXT_INPUT
            assert session.active_role.id == "writer"

    @pytest.mark.asyncio
    async def test_quit_from_picker(self, validator, session, tmp_path):
        app = _app(FakeBackend(validator), session, tmp_path)

        async with app.run_test() as pilot:
            await pilot.press("ctrl+r")
            await pilot.pause()
            await pilot.press("ctrl+q")
            await pilot.pause()

            assert app.mode is UIMode.TERMINATED

    @pytest.mark.asyncio
    async def test_skill_picker_lists_role_skills(self, validator, session, tmp_path):
        session.select_role("writer")
        app = _app(FakeBackend(validator), session, tmp_path)

        async with app.run_test() as pilot:
            await pilot.press("ctrl+e")
            await pilot.pause()
            assert isinstance(app.screen, SkillSelectScreen)
            assert app.screen.query_one("OptionList").option_count == 2

            await pilot.press("down", "enter")
            await pilot.pause()

            assert session.active_skill.id == "review"
            assert app.mode is UIMode.TEXT_INPUT

    @pytest.mark.asyncio
    async def test_no_skills_for_role(self, validator, registry, tmp_path):
        from gail.assistant import AssistantRegistry, Session

        bare = Session(AssistantRegistry(registry.roles, []))
        app = _app(FakeBackend(validator), bare, tmp_path)

        async with app.run_test() as pilot:
            await pilot.press("ctrl+e")
            await pilot.pause()

            assert not isinstance(app.screen, SkillSelectScreen)
            assert app.mode is UIMode.TEXT_INPUT
            assert app.query_one(StatusBar).message == "No skills available for role Software Engineer"

    @pytest.mark.asyncio
    async def test_selected_persona_reaches_backend(self, validator, session, tmp_path):
        backend = FakeBackend(validator)
        app = _app(backend, session, tmp_path)

        async with app.run_test() as pilot:
            await pilot.press("ctrl+r")
            await pilot.pause()
            await pilot.press("down", "enter")
            await pilot.pause()
            await _submit(app, pilot, "hello")

            assert backend.calls[0][:2] == ("Writer", "You are a technical writer")


class TestOtherKeys:
    """Save, editor, log panel and focus keys."""

    @pytest.mark.asyncio
    async def test_save(self, validator, session, tmp_path):
        session.record_exchange("hi", "hello")
        app = _app(FakeBackend(validator), session, tmp_path)

        async with app.run_test() as pilot:
            await pilot.press("ctrl+d")
            await pilot.pause()
            assert "saved" in app.query_one(StatusBar).message

        assert len(list((tmp_path / "history").iterdir())) == 1

    @pytest.mark.asyncio
    async def test_save_failure_reported(self, validator, session, tmp_path):
        blocker = tmp_path / "history"
        blocker.write_text("not a directory")
        app = _app(FakeBackend(validator), session, tmp_path)

        async with app.run_test() as pilot:
            await pilot.press("ctrl+d")
            await pilot.pause()
            status = app.query_one(StatusBar)
            assert status.message.startswith("Failed to save conversation")
            assert status.has_class("-error")

    @pytest.mark.asyncio
    async def test_editor_unavailable_headless(self, validator, session, tmp_path):
        app = _app(FakeBackend(validator), session, tmp_path)

        async with app.run_test() as pilot:
            await pilot.press("ctrl+o")
            await pilot.pause()
            assert "editor" in app.query_one(StatusBar).message

    @pytest.mark.asyncio
    async def test_toggle_log_panel(self, validator, session, tmp_path):
        app = _app(FakeBackend(validator), session, tmp_path)

        async with app.run_test() as pilot:
            panel = app.query_one(LogPanel)
            assert not panel.display
            await pilot.press("ctrl+l")
            await pilot.pause()
            assert panel.display

    @pytest.mark.asyncio
    async def test_toggle_focus(self, validator, session, tmp_path):
        app = _app(FakeBackend(validator), session, tmp_path)

        async with app.run_test() as pilot:
            assert app.focused is app.query_one(PromptInput)
            await pilot.press("shift+tab")
            await pilot.pause()
            assert app.focused is app.query_one(TranscriptView)
            await pilot.press("shift+tab")
            await pilot.pause()
            assert app.focused is app.query_one(PromptInput)

    @pytest.mark.asyncio
    async def test_quit(self, validator, session, tmp_path):
        app = _app(FakeBackend(validator), session, tmp_path)

        async with app.run_test() as pilot:
            await pilot.press("ctrl+q")
            await pilot.pause()
            assert app.mode is UIMode.TERMINATED
