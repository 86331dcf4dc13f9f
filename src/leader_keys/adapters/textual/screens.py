"""Modal screens backing the help listing and the ``:`` command prompt."""

from __future__ import annotations

from typing import List, Optional

from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Vertical
from textual.screen import ModalScreen
from textual.widgets import Input, OptionList, Static
from textual.widgets.option_list import Option

from leader_keys.actions import CommandRegistry, InvokeAction


class HelpScreen(ModalScreen[None]):
    """Lists every mapping; any key closes it."""

    BINDINGS = [Binding("escape", "dismiss", "Close", show=False)]

    CSS = """
    HelpScreen {
        align: center middle;
    }

    #leader-help {
        width: auto;
        max-width: 80;
        height: auto;
        background: $surface;
        border: round $primary;
        padding: 1 2;
    }
    """

    def __init__(self, lines: List[str]) -> None:
        super().__init__()
        self._lines = lines

    def compose(self) -> ComposeResult:
        body = "\n".join(self._lines) if self._lines else "No mappings configured."
        yield Static(f"[b]Leader mappings[/b]\n\n{body}", id="leader-help")

    def on_key(self, event) -> None:
        event.stop()
        self.dismiss(None)


class CommandPromptScreen(ModalScreen[Optional[InvokeAction]]):
    """Searchable list of host commands; dismisses with the chosen action."""

    BINDINGS = [Binding("escape", "cancel", "Cancel", show=False)]

    CSS = """
    CommandPromptScreen {
        align: center top;
    }

    #leader-prompt {
        width: 60;
        height: auto;
        max-height: 20;
        background: $surface;
        border: round $accent;
        margin-top: 2;
    }
    """

    def __init__(self, registry: CommandRegistry) -> None:
        super().__init__()
        self._registry = registry

    def compose(self) -> ComposeResult:
        with Vertical(id="leader-prompt"):
            yield Input(placeholder="Run command…", id="prompt-input")
            yield OptionList(id="prompt-options")

    def on_mount(self) -> None:
        self._refresh("")
        self.query_one("#prompt-input", Input).focus()

    def on_input_changed(self, event: Input.Changed) -> None:
        self._refresh(event.value)

    def on_input_submitted(self, event: Input.Submitted) -> None:
        matches = self._registry.search(event.value)
        if matches:
            self._choose(matches[0].id)

    def on_option_list_option_selected(self, event: OptionList.OptionSelected) -> None:
        if event.option.id:
            self._choose(event.option.id)

    def action_cancel(self) -> None:
        self.dismiss(None)

    def _choose(self, command_id: str) -> None:
        command = self._registry.get(command_id)
        self.dismiss(InvokeAction(id=command.id, name=command.label))

    def _refresh(self, query: str) -> None:
        options = self.query_one("#prompt-options", OptionList)
        options.clear_options()
        options.add_options(
            [Option(command.label, id=command.id) for command in self._registry.search(query)]
        )


__all__ = ["CommandPromptScreen", "HelpScreen"]
