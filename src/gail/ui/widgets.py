"""Custom Textual widgets for the TUI.

Hides widget implementation details:
- Transcript rendering (labels, ANSI-highlighted answers, wrapping)
- Prompt input with history navigation
- Status bar messages and the loading spinner
- Log panel fed from the standard logging module
"""

import logging
import threading
from datetime import datetime

from rich.text import Text
from textual.events import Key
from textual.widgets import RichLog, Static, TextArea

from ..assistant import Session, Speaker
from .config import (
    DEFAULT_STATUS,
    INPUT_HISTORY_MAX_SIZE,
    LOADING_STATUS,
    LOG_MAX_MESSAGE_LENGTH,
    LOG_TIMESTAMP_FORMAT,
    LogLevel,
)

SPINNER_FRAMES = "⠋⠙⠹⠸⠼⠴⠦⠧⠇⠏"


class TranscriptView(RichLog):
    """Scrollable, word-wrapped view of the conversation."""

    BORDER_TITLE = "Conversation"

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(
            *args,
            markup=False,
            highlight=False,
            auto_scroll=True,
            wrap=True,
            **kwargs
        )

    def render_session(self, session: Session) -> None:
        """Redraw every turn of the session and scroll to the bottom."""
        self.clear()
        for turn in session.turns:
            label = session.label(turn)
            if turn.speaker is Speaker.USER:
                line = Text(f"{label}: ", style="bold magenta")
                line.append_text(Text(turn.text))
            else:
                line = Text(f"\n{label}: ", style="bold cyan")
                line.append_text(Text.from_ansi(turn.text))
                line.append("\n")
            self.write(line)
        self.border_subtitle = f"{len(session.turns) // 2} exchanges"
        self.scroll_end(animate=False)


class PromptInput(TextArea):
    """Multi-line prompt input with history.

    Up at the very start or Down at the very end of the text navigates
    previously submitted prompts.
    """

    BORDER_TITLE = "Type here..."

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, show_line_numbers=False, **kwargs)
        self._history: list[str] = []
        self._history_index: int = -1

    def on_mount(self) -> None:
        self.cursor_blink = False
        self.highlight_cursor_line = False

    def take_text(self) -> str:
        """Return the text as typed, remember it in history and clear the input.

        Blank input is returned unchanged and leaves history alone.
        """
        value = self.text
        if value.strip():
            if not self._history or self._history[-1] != value:
                self._history.append(value)
                del self._history[:-INPUT_HISTORY_MAX_SIZE]
            self._history_index = -1
            self.text = ""
        return value

    def on_key(self, event: Key) -> None:
        if event.key == "up" and self.cursor_location == (0, 0):
            self._navigate_history(-1)
            event.prevent_default()
            event.stop()
        elif event.key == "down" and self._is_cursor_at_end():
            self._navigate_history(1)
            event.prevent_default()
            event.stop()

    def _is_cursor_at_end(self) -> bool:
        lines = self.text.split("\n")
        return self.cursor_location == (len(lines) - 1, len(lines[-1]))

    def _navigate_history(self, direction: int) -> None:
        if not self._history:
            return
        if direction < 0:  # Up
            if self._history_index == -1:
                self._history_index = len(self._history) - 1
            elif self._history_index > 0:
                self._history_index -= 1
        else:  # Down
            if self._history_index == -1:
                return
            if self._history_index < len(self._history) - 1:
                self._history_index += 1
            else:
                self._history_index = -1
                self.text = ""
                return
        self.text = self._history[self._history_index]


class StatusBar(Static):
    """One-line status: help text, results, errors or a loading spinner."""

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(DEFAULT_STATUS, *args, **kwargs)
        self._message = DEFAULT_STATUS
        self._frame = 0
        self._spinner = None

    @property
    def message(self) -> str:
        """The message currently shown (without spinner)."""
        return self._message

    def show(self, message: str, error: bool = False) -> None:
        self._stop_spinner()
        self._message = message
        self.set_class(error, "-error")
        self.update(Text(message))

    def reset(self) -> None:
        self.show(DEFAULT_STATUS)

    def start_loading(self) -> None:
        self._stop_spinner()
        self._message = LOADING_STATUS
        self.set_class(False, "-error")
        self.add_class("-loading")
        self._frame = 0
        self._tick()
        self._spinner = self.set_interval(0.1, self._tick)

    def _tick(self) -> None:
        frame = SPINNER_FRAMES[self._frame % len(SPINNER_FRAMES)]
        self._frame += 1
        self.update(Text(f"{frame} {LOADING_STATUS}"))

    def _stop_spinner(self) -> None:
        if self._spinner is not None:
            self._spinner.stop()
            self._spinner = None
        self.remove_class("-loading")


class LogPanel(RichLog):
    """Log panel for real-time tracing with level filtering.

    Shows timestamped records from the 'gail' logger. Hidden by default,
    toggled with ctrl+l.
    """

    BORDER_TITLE = "Log"

    def __init__(self, *args, log_level: int = LogLevel.INFO, **kwargs) -> None:
        super().__init__(
            *args,
            markup=True,
            highlight=False,
            auto_scroll=True,
            wrap=False,
            **kwargs
        )
        self._log_level = log_level

    @property
    def log_level(self) -> int:
        """Current log level threshold."""
        return self._log_level

    @log_level.setter
    def log_level(self, level: int) -> None:
        self._log_level = level
        self._update_subtitle()

    def on_mount(self) -> None:
        """Hide by default."""
        self.display = False
        self._update_subtitle()

    def _update_subtitle(self) -> None:
        self.border_subtitle = f"Level: {LogLevel.name(self._log_level)}"

    def add_entry(self, component: str, message: str, level: int = LogLevel.INFO) -> None:
        """Add a log entry if it meets the current level threshold."""
        if level < self._log_level:
            return

        level_colors = {
            LogLevel.DEBUG: "dim white",
            LogLevel.INFO: "cyan",
            LogLevel.WARNING: "yellow",
            LogLevel.ERROR: "red",
        }
        if len(message) > LOG_MAX_MESSAGE_LENGTH:
            message = message[:LOG_MAX_MESSAGE_LENGTH] + "..."

        line = Text.assemble(
            (datetime.now().strftime(LOG_TIMESTAMP_FORMAT), "dim"),
            " ",
            (f"{LogLevel.name(level):<5}", level_colors.get(level, "white")),
            " ",
            (f"[{component}]", "magenta"),
            f" {message}",
        )
        self.write(line)

    def toggle(self) -> bool:
        """Toggle visibility. Returns new state."""
        self.display = not self.display
        return self.display


class PanelLogHandler(logging.Handler):
    """Logging handler that mirrors records into a LogPanel.

    Records emitted off the UI thread are marshalled with call_from_thread.
    """

    def __init__(self, panel: LogPanel) -> None:
        super().__init__()
        self._panel = panel

    def emit(self, record: logging.LogRecord) -> None:
        try:
            message = record.getMessage()
            component = record.name.rsplit(".", 1)[-1]
            app = self._panel.app
            if app._thread_id != threading.get_ident():
                app.call_from_thread(self._panel.add_entry, component, message, record.levelno)
            else:
                self._panel.add_entry(component, message, record.levelno)
        except Exception:
            self.handleError(record)
