"""Staff password entry modal screen."""

from __future__ import annotations

from textual.app import ComposeResult
from textual.containers import Container
from textual.events import Key
from textual.screen import ModalScreen
from textual.widgets import Static


class StaffGateModal(ModalScreen[str | None]):
    """Prompt for the staff password before opening the kitchen display."""

    CSS = """
    StaffGateModal {
        align: center middle;
        background: $background 60%;
    }

    #staff-gate-dialog {
        width: 48;
        height: auto;
        border: round $secondary;
        background: $panel;
        padding: 1 2;
    }

    #staff-gate-title {
        text-style: bold;
        margin-bottom: 1;
    }

    #staff-gate-value {
        border: heavy $secondary;
        padding: 0 1;
        margin-bottom: 1;
    }

    #staff-gate-help {
        color: $text-muted;
    }
    """

    def __init__(self) -> None:
        super().__init__()
        self.value = ""

    def compose(self) -> ComposeResult:
        with Container(id="staff-gate-dialog"):
            yield Static("Staff Access", id="staff-gate-title")
            yield Static(id="staff-gate-value")
            yield Static("Enter confirm. Backspace delete. Esc cancel.", id="staff-gate-help")

    def on_mount(self) -> None:
        self._refresh_content()

    def on_key(self, event: Key) -> None:
        if event.key == "escape":
            self.dismiss(None)
            event.stop()
            return

        if event.key == "enter":
            self.dismiss(self.value)
            event.stop()
            return

        if event.key == "backspace":
            self.value = self.value[:-1]
            self._refresh_content()
            event.stop()
            return

        if event.is_printable and event.character:
            self.value += event.character
            self._refresh_content()
            event.stop()

    def _refresh_content(self) -> None:
        self.query_one("#staff-gate-value", Static).update("*" * len(self.value))
