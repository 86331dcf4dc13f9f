"""Executable Textual app that hosts the leader engine."""

from __future__ import annotations

import argparse
from pathlib import Path
from typing import Callable, List, Optional, Sequence

try:  # pragma: no cover - imported only when demo is run
    from textual import events
    from textual.app import App, ComposeResult
    from textual.screen import ModalScreen
    from textual.widgets import Footer, Header, Log, Static
except ModuleNotFoundError as exc:  # pragma: no cover - friendly error for missing dep
    raise RuntimeError(
        "Install the 'textual' package to use leader_keys.adapters.textual.app"
    ) from exc

from leader_keys.actions import (
    Action,
    ActionDispatcher,
    CommandRef,
    CommandRegistry,
    InvokeAction,
)
from leader_keys.keymaps import Hotkey, Mapping, parse_hotkey
from leader_keys.modes import BusStatusReporter, DeadlineScheduler, ModeBus
from leader_keys.modes.leader_mode import LeaderStateMachine
from leader_keys.settings import (
    LeaderSettings,
    SettingsError,
    SettingsStore,
    apply_env_overrides,
)

from .controller import TERMINAL_PLATFORM, TextualLeaderAdapter, TextualUIHooks
from .screens import CommandPromptScreen, HelpScreen


def demo_mappings() -> List[Mapping]:
    """Bindings used when the settings file defines none."""

    return [
        Mapping(
            trigger=(Hotkey.of("H"),),
            actions=(InvokeAction("demo.hello", "Say hello"),),
        ),
        Mapping(
            trigger=(Hotkey.of("H"), Hotkey.of("H")),
            actions=(
                InvokeAction("demo.hello", "Say hello"),
                InvokeAction("demo.clear", "Clear log"),
            ),
        ),
        Mapping(
            trigger=(Hotkey.of("T"), Hotkey.of("D")),
            actions=(InvokeAction("demo.toggle_dark", "Toggle dark mode"),),
        ),
        Mapping(
            trigger=(Hotkey.of("Q"),),
            actions=(InvokeAction("demo.quit", "Quit"),),
        ),
    ]


class ScreenCommandPrompt:
    """Opens the command prompt as a modal screen on ``app``."""

    def __init__(self, app: "LeaderKeysApp") -> None:
        self.app = app

    def open(self, on_choose: Callable[[Action], None]) -> None:
        def _chosen(action: Optional[InvokeAction]) -> None:
            if action is not None:
                on_choose(action)

        self.app.push_screen(CommandPromptScreen(self.app.registry), _chosen)


class LeaderKeysApp(App[None]):
    """Minimal Textual UI embedding the leader engine."""

    CSS = """
	Screen {
		layout: vertical;
	}

	#event-log {
		height: 1fr;
		border: round $accent;
	}

	#status-line {
		height: 1;
		background: $surface-darken-1;
		padding: 0 1;
	}
	"""

    BINDINGS = [
        ("ctrl+c", "quit", "Quit"),
        ("ctrl+q", "quit", "Quit"),
    ]

    def __init__(self, settings: LeaderSettings, *, poll_interval: float = 0.05) -> None:
        super().__init__()
        self.settings = settings
        self.registry = CommandRegistry()
        self.scheduler = DeadlineScheduler()
        self.bus = ModeBus(logger_name="leader_keys.textual")
        self.machine: LeaderStateMachine | None = None
        self.adapter: TextualLeaderAdapter | None = None
        self._poll_interval = poll_interval
        self._status_widget: Static | None = None
        self._log_widget: Log | None = None
        self._register_commands()

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)
        self._log_widget = Log(id="event-log")
        yield self._log_widget
        self._status_widget = Static("", id="status-line")
        yield self._status_widget
        yield Footer()

    def on_mount(self) -> None:
        dispatcher = ActionDispatcher(
            invoke=self.registry.invoke,
            open_path=self._open_path,
            logger_name="leader_keys.textual",
        )
        self.machine = LeaderStateMachine(
            self.settings,
            dispatcher,
            BusStatusReporter(self.bus),
            self.scheduler,
            prompt=ScreenCommandPrompt(self),
            platform=TERMINAL_PLATFORM,
            logger_name="leader_keys.textual",
        )
        hooks = TextualUIHooks(
            update_status=self._update_status,
            show_notice=lambda message: self.notify(message),
            show_help=lambda lines: self.push_screen(HelpScreen(lines)),
            log=self._log_line,
        )
        self.adapter = TextualLeaderAdapter(self.machine, self.bus, hooks, self.scheduler)
        self.set_interval(self._poll_interval, self._process_timeouts)

    def _process_timeouts(self) -> None:
        if self.adapter:
            self.adapter.process_timeouts()

    async def on_key(self, event: events.Key) -> None:
        if not self.adapter or isinstance(self.screen, ModalScreen):
            return
        result = self.adapter.handle_textual_key(event.key, character=event.character)
        if result.consumed:
            event.prevent_default()
            event.stop()

    def _register_commands(self) -> None:
        for command in (
            CommandRef("demo.hello", lambda: self._log_line("Hello from leader!"), "Say hello"),
            CommandRef("demo.clear", self._clear_log, "Clear log"),
            CommandRef("demo.toggle_dark", self._toggle_dark, "Toggle dark mode"),
            CommandRef("demo.quit", self.exit, "Quit"),
        ):
            self.registry.register(command)

    def _toggle_dark(self) -> None:
        self.theme = "textual-light" if self.theme == "textual-dark" else "textual-dark"

    def _clear_log(self) -> None:
        if self._log_widget:
            self._log_widget.clear()

    def _open_path(self, path: str) -> None:
        target = Path(path).expanduser()
        if not target.exists():
            raise FileNotFoundError(f"No such file: {target}")
        self._log_line(f"open -> {target}")

    def _update_status(self, status: str) -> None:
        if self._status_widget:
            self._status_widget.update(status)

    def _log_line(self, line: str) -> None:
        if self._log_widget:
            self._log_widget.write_line(line)


def _parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run the leader-keys Textual demo.")
    parser.add_argument(
        "--settings",
        type=Path,
        default=None,
        help="Settings JSON file (default: $LEADER_KEYS_SETTINGS_FILE or "
        "~/.config/leader-keys/settings.json)",
    )
    parser.add_argument("--leader", help="Leader chord, e.g. 'ctrl+space'")
    parser.add_argument("--timeout", type=int, help="Idle timeout in milliseconds")
    parser.add_argument(
        "--multi-key-timeout",
        type=int,
        help="Chained command debounce in milliseconds",
    )
    return parser.parse_args(argv)


def load_settings(args: argparse.Namespace) -> LeaderSettings:
    store = SettingsStore(args.settings, logger_name="leader_keys.settings")
    settings = apply_env_overrides(store.load())
    if args.leader:
        settings.leader_key = parse_hotkey(args.leader)
    if args.timeout is not None:
        settings.timeout_ms = args.timeout
    if args.multi_key_timeout is not None:
        settings.multi_key_timeout_ms = args.multi_key_timeout
    settings.validate()
    if not len(settings.table):
        for mapping in demo_mappings():
            settings.table.add(mapping)
    store.attach(settings)
    return settings


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = _parse_args(argv)
    try:
        settings = load_settings(args)
    except (SettingsError, ValueError) as exc:
        raise SystemExit(f"leader-keys: {exc}") from exc
    LeaderKeysApp(settings).run()


if __name__ == "__main__":  # pragma: no cover - manual demo
    main()
