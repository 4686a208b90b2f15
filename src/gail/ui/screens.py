"""Modal screens for the TUI.

This module hides the design decisions about:
- Picker dialog appearance (CSS, layout)
- How roles and skills are listed
- Keyboard shortcuts for confirming a choice

A picker dismisses only with a chosen id. Escape or a confirm with nothing
highlighted posts Rejected and keeps the dialog open.
"""

from rich.text import Text
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Vertical
from textual.message import Message
from textual.screen import ModalScreen
from textual.widgets import OptionList, Static
from textual.widgets.option_list import Option

from ..assistant import Role, Skill

NO_SELECTION_MESSAGE = "Nothing selected, pick an entry to continue"


class PickerScreen(ModalScreen[str]):
    """Modal list picker shared by the role and skill dialogs."""

    class Rejected(Message):
        """Escape or confirm was pressed without a valid selection."""

    DEFAULT_CSS = """
    PickerScreen {
        align: center middle;
        background: $background 70%;
    }

    #picker-dialog {
        width: 70;
        height: auto;
        max-height: 24;
        border: tall $accent;
        background: $surface;
        padding: 1 2;
    }

    #picker-title {
        width: 100%;
        text-align: center;
        text-style: bold;
        color: $accent;
        padding: 0 0 1 0;
    }

    #picker-options {
        height: auto;
        max-height: 16;
    }

    #picker-hint {
        width: 100%;
        text-align: center;
        color: $text-muted;
        padding: 1 0 0 0;
    }
    """

    BINDINGS = [
        Binding("enter", "confirm", "Select", show=False, priority=True),
        Binding("escape", "reject", "Reject", show=False),
    ]

    PICKER_TITLE = "Select"

    def __init__(self, options: list[Option], current: str = "") -> None:
        super().__init__()
        self._options = options
        self._current = current

    def compose(self) -> ComposeResult:
        with Vertical(id="picker-dialog"):
            yield Static(self.PICKER_TITLE, id="picker-title")
            yield OptionList(*self._options, id="picker-options")
            yield Static("enter select | ctrl+q quit", id="picker-hint")

    def on_mount(self) -> None:
        option_list = self.query_one(OptionList)
        option_list.focus()
        if not self._options:
            return
        ids = [option.id for option in self._options]
        option_list.highlighted = ids.index(self._current) if self._current in ids else 0

    def action_confirm(self) -> None:
        """Dismiss with the highlighted id, or report that nothing is chosen."""
        option_list = self.query_one(OptionList)
        index = option_list.highlighted
        if index is None or not self._options:
            self.action_reject()
            return
        self.dismiss(option_list.get_option_at_index(index).id)

    def action_reject(self) -> None:
        self.post_message(self.Rejected())
        self.notify(NO_SELECTION_MESSAGE, severity="error")

    def on_option_list_option_selected(self, event: OptionList.OptionSelected) -> None:
        event.stop()
        self.dismiss(event.option.id)


class RoleSelectScreen(PickerScreen):
    """Pick one of the configured roles."""

    PICKER_TITLE = "Select role"

    def __init__(self, roles: list[Role], current: str = "") -> None:
        options = [
            Option(Text.assemble((role.name, "bold"), "  ", (role.persona, "dim")), id=role.id)
            for role in roles
        ]
        super().__init__(options, current)


class SkillSelectScreen(PickerScreen):
    """Pick a skill applicable to the active role."""

    PICKER_TITLE = "Select skill"

    def __init__(self, skills: list[Skill], current: str = "") -> None:
        options = [
            Option(Text.assemble((skill.id, "bold"), "  ", (skill.description, "dim")), id=skill.id)
            for skill in skills
        ]
        super().__init__(options, current)
