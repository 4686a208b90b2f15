"""Main Textual TUI application.

Orchestrates the UI components and the conversation: keys move the UI
between modes (see state.py), prompts run in a background worker and
answers come back as messages handled on the event loop.
"""

import asyncio
import logging
import subprocess
from pathlib import Path

from textual import work
from textual.app import App, ComposeResult, SuspendNotSupported
from textual.binding import Binding
from textual.message import Message
from textual.timer import Timer

from ..assistant import Session
from ..llm import Answer, BackendError, LLMBackend, RunTimeoutError
from ..log import LOGGER_NAME
from .config import STATUS_CLEAR_SECONDS, LogLevel
from .editor import open_in_editor
from .formatting import HighlightError, highlight_answer
from .history import save_conversation
from .screens import PickerScreen, RoleSelectScreen, SkillSelectScreen
from .state import IllegalTransition, UIEvent, UIMode, can_transition, transition
from .styles import APP_CSS
from .themes import GAIL_THEME_NAME, build_theme
from .widgets import LogPanel, PanelLogHandler, PromptInput, StatusBar, TranscriptView

logger = logging.getLogger(__name__)

RETRY_HINT = " (ctrl+s to retry)"


class AnswerReady(Message):
    """Result of one prompt, posted by the worker back to the app."""

    def __init__(
        self,
        prompt: str,
        answer: Answer | None = None,
        display_text: str = "",
        error: Exception | None = None,
    ) -> None:
        super().__init__()
        self.prompt = prompt
        self.answer = answer
        self.display_text = display_text
        self.error = error


class GailApp(App):
    """Textual TUI for chatting with one LLM backend."""

    CSS = APP_CSS
    TITLE = "Gail"

    BINDINGS = [
        Binding("ctrl+q", "quit", "Quit", priority=True),
        Binding("ctrl+s", "send", "Send", priority=True),
        Binding("ctrl+r", "pick_role", "Role"),
        Binding("ctrl+e", "pick_skill", "Skill"),
        Binding("ctrl+d", "save", "Save"),
        Binding("ctrl+o", "open_editor", "Editor"),
        Binding("ctrl+l", "toggle_log", "Log"),
        Binding("shift+tab", "toggle_focus", "Focus", priority=True),
    ]

    def __init__(
        self,
        backend: LLMBackend,
        session: Session,
        history_dir: Path,
        highlight_style: str = "friendly",
        highlight_color: str = "cyan",
        editor: str | None = None,
        log_level: str | None = None,
    ) -> None:
        super().__init__()
        self._backend = backend
        self._session = session
        self._history_dir = history_dir
        self._highlight_style = highlight_style
        self._highlight_color = highlight_color
        self._editor = editor
        self._log_level = log_level
        self._mode = UIMode.TEXT_INPUT
        self._status_timer: Timer | None = None
        self._log_handler: PanelLogHandler | None = None

    @property
    def mode(self) -> UIMode:
        """Current UI mode."""
        return self._mode

    @property
    def session(self) -> Session:
        return self._session

    def compose(self) -> ComposeResult:
        yield TranscriptView(id="transcript")
        yield LogPanel(id="log-panel")
        yield PromptInput(id="prompt-input")
        yield StatusBar(id="status-bar")

    def on_mount(self) -> None:
        self.register_theme(build_theme(self._highlight_color))
        self.theme = GAIL_THEME_NAME
        self.sub_title = self._backend.model

        log_panel = self.query_one(LogPanel)
        if self._log_level is not None:
            log_panel.log_level = LogLevel.from_string(self._log_level)
        self._log_handler = PanelLogHandler(log_panel)
        logging.getLogger(LOGGER_NAME).addHandler(self._log_handler)

        self._update_border_title()
        self.query_one(PromptInput).focus()

    def on_unmount(self) -> None:
        if self._log_handler is not None:
            logging.getLogger(LOGGER_NAME).removeHandler(self._log_handler)
            self._log_handler = None

    def _apply(self, event: UIEvent) -> bool:
        """Move to the next mode; illegal events are ignored."""
        try:
            self._mode = transition(self._mode, event)
        except IllegalTransition as e:
            logger.debug("Ignored key: %s", e)
            return False
        return True

    def _update_border_title(self) -> None:
        role = self._session.active_role
        skill = self._session.active_skill
        title = f"{role.name or 'no role'} | {skill.id or 'no skill'}"
        self.query_one(TranscriptView).border_title = title

    # Status bar

    def _show_status(self, message: str, error: bool = False) -> None:
        self.query_one(StatusBar).show(message, error=error)
        self._schedule_status_reset()

    def _schedule_status_reset(self) -> None:
        if self._status_timer is not None:
            self._status_timer.stop()
        self._status_timer = self.set_timer(STATUS_CLEAR_SECONDS, self._reset_status)

    def _reset_status(self) -> None:
        self._status_timer = None
        if self._mode is not UIMode.LOADING:
            self.query_one(StatusBar).reset()

    # Prompting

    def action_send(self) -> None:
        """Send the prompt text to the backend."""
        prompt_input = self.query_one(PromptInput)
        if not can_transition(self._mode, UIEvent.SUBMIT) or not prompt_input.text.strip():
            return
        if not self._apply(UIEvent.SUBMIT):
            return

        text = prompt_input.take_text()
        prompt_input.disabled = True
        self.query_one(StatusBar).start_loading()
        logger.info("Prompt submitted (%d chars)", len(text))
        self._fetch_answer(text)

    @work(exclusive=True)
    async def _fetch_answer(self, text: str) -> None:
        role = self._session.active_role
        skill = self._session.active_skill
        try:
            answer = await self._backend.prompt(role.name, role.persona, skill.instruction, text)
            if answer.rejected:
                display_text = answer.text
            else:
                display_text = highlight_answer(answer.text, self._highlight_style)
        except (BackendError, HighlightError) as e:
            logger.error("Prompt failed: %s", e)
            self.post_message(AnswerReady(text, error=e))
            return
        self.post_message(AnswerReady(text, answer=answer, display_text=display_text))

    def on_answer_ready(self, message: AnswerReady) -> None:
        if not self._apply(UIEvent.ANSWER):
            return

        prompt_input = self.query_one(PromptInput)
        prompt_input.disabled = False
        prompt_input.focus()

        if message.error is not None:
            prefix = "No response in time" if isinstance(message.error, RunTimeoutError) else "Error fetching answer"
            prompt_input.text = message.prompt
            status = f"{prefix}: {message.error}"
            if isinstance(message.error, BackendError) and message.error.is_retryable():
                status += RETRY_HINT
            self._show_status(status, error=True)
            return

        if message.answer.rejected:
            prompt_input.text = message.prompt
            self._show_status(message.answer.text, error=True)
            self.notify(message.answer.text, title="Input rejected", severity="warning")
            return

        self._session.record_exchange(message.prompt, message.display_text)
        self.query_one(TranscriptView).render_session(self._session)
        try:
            path = save_conversation(self._session.transcript(), self._history_dir)
        except OSError as e:
            logger.error("Failed to save conversation: %s", e)
            self._show_status(f"Answer received, but saving failed: {e}", error=True)
            return
        self._show_status(f"Answer received, conversation saved to {path}")

    # Pickers

    def action_pick_role(self) -> None:
        """Open the role picker."""
        if not self._apply(UIEvent.PICK_ROLE):
            return
        screen = RoleSelectScreen(list(self._session.registry.roles), self._session.active_role.id)
        self.push_screen(screen, self._on_role_picked)

    def _on_role_picked(self, role_id: str) -> None:
        try:
            role = self._session.select_role(role_id)
        except ValueError as e:
            self._apply(UIEvent.CONFIRM)
            self._show_status(str(e), error=True)
            return
        self._apply(UIEvent.CONFIRM)
        self._update_border_title()
        self._show_status(f"Role: {role.name}")

    def action_pick_skill(self) -> None:
        """Open the skill picker for the active role."""
        if not can_transition(self._mode, UIEvent.PICK_SKILL):
            return
        skills = self._session.available_skills()
        if not skills:
            self._show_status(f"No skills available for role {self._session.active_role.name}", error=True)
            return
        if not self._apply(UIEvent.PICK_SKILL):
            return
        screen = SkillSelectScreen(skills, self._session.active_skill.id)
        self.push_screen(screen, self._on_skill_picked)

    def _on_skill_picked(self, skill_id: str) -> None:
        try:
            skill = self._session.select_skill(skill_id)
        except ValueError as e:
            self._apply(UIEvent.CONFIRM)
            self._show_status(str(e), error=True)
            return
        self._apply(UIEvent.CONFIRM)
        self._update_border_title()
        self._show_status(f"Skill: {skill.description or skill.id}")

    def on_picker_screen_rejected(self, message: PickerScreen.Rejected) -> None:
        self._apply(UIEvent.REJECT)

    # Output

    def action_save(self) -> None:
        """Save the conversation to the history directory."""
        if self._mode is not UIMode.TEXT_INPUT:
            return
        try:
            path = save_conversation(self._session.transcript(), self._history_dir)
        except OSError as e:
            logger.error("Failed to save conversation: %s", e)
            self._show_status(f"Failed to save conversation: {e}", error=True)
            return
        self._show_status(f"Conversation saved to {path}")

    def action_open_editor(self) -> None:
        """Open the conversation in the external editor."""
        if self._mode is not UIMode.TEXT_INPUT:
            return
        try:
            with self.suspend():
                returncode = open_in_editor(self._session.transcript(), self._editor)
        except SuspendNotSupported:
            self._show_status("The editor cannot be opened in this terminal", error=True)
            return
        except (OSError, subprocess.SubprocessError) as e:
            logger.error("Failed to open editor: %s", e)
            self._show_status(f"Failed to open editor: {e}", error=True)
            return
        if returncode != 0:
            self._show_status(f"Editor exited with code {returncode}", error=True)

    def action_toggle_log(self) -> None:
        """Toggle the log panel visibility."""
        is_visible = self.query_one(LogPanel).toggle()
        self.notify(f"Log panel {'shown' if is_visible else 'hidden'}", timeout=2)

    def action_toggle_focus(self) -> None:
        """Move focus between the transcript and the prompt input."""
        prompt_input = self.query_one(PromptInput)
        if prompt_input.has_focus:
            self.query_one(TranscriptView).focus()
        elif not prompt_input.disabled:
            prompt_input.focus()

    async def action_quit(self) -> None:
        self._apply(UIEvent.QUIT)
        self.exit()


async def run_gail_tui(
    backend: LLMBackend,
    session: Session,
    history_dir: Path,
    highlight_style: str = "friendly",
    highlight_color: str = "cyan",
    editor: str | None = None,
    log_level: str | None = None,
) -> None:
    """Run the Textual TUI and close the backend afterwards.

    Args:
        backend: Backend answering the prompts
        session: Conversation session with the loaded roles and skills
        history_dir: Directory conversations are saved to
        highlight_style: Pygments style for code blocks
        highlight_color: Accent colour of the theme
        editor: Editor command, None for $EDITOR
        log_level: Threshold of the log panel (debug/info/warn/error)
    """
    app = GailApp(
        backend=backend,
        session=session,
        history_dir=history_dir,
        highlight_style=highlight_style,
        highlight_color=highlight_color,
        editor=editor,
        log_level=log_level,
    )
    async with backend:
        try:
            await app.run_async()
        except (KeyboardInterrupt, asyncio.CancelledError):
            pass
