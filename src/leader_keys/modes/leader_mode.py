"""Leader-mode state machine: chord entry, sequence accumulation and dispatch."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from leader_keys.actions import Action, ChainReport, Dispatcher, run_chain
from leader_keys.keymaps import (
    Hotkey,
    KeySequence,
    Mapping,
    RawKeyEvent,
    SequenceResolver,
    format_hotkey,
    format_sequence,
    hotkeys_equal,
    normalize,
)
from leader_keys.runtime import telemetry
from leader_keys.settings import LeaderConfig, LeaderSettings

from .base_mode import CommandPrompt, KeyResult, StatusReporter
from .timers import TimerHandle, TimerScheduler

HELP_KEY = "?"
PROMPT_KEY = ":"


@dataclass
class LeaderSession:
    """Transient state of one leader session; reset on every entry and exit."""

    active: bool = False
    sequence: KeySequence = ()
    idle_timer: Optional[TimerHandle] = None
    chain_timer: Optional[TimerHandle] = None
    pending_match: Optional[Mapping] = None
    config: Optional[LeaderConfig] = None


class LeaderStateMachine:
    """Owns the leader session and drives every transition.

    Key events and timer callbacks must be delivered from one event loop;
    no transition runs concurrently with another.
    """

    name = "leader"

    def __init__(
        self,
        settings: LeaderSettings,
        dispatcher: Dispatcher,
        reporter: StatusReporter,
        scheduler: TimerScheduler,
        *,
        prompt: Optional[CommandPrompt] = None,
        platform: Optional[str] = None,
        logger_name: str | None = None,
    ) -> None:
        self.settings = settings
        self.dispatcher = dispatcher
        self.reporter = reporter
        self.scheduler = scheduler
        self.prompt = prompt
        self.platform = platform
        self.session = LeaderSession()
        self._logger_name = logger_name

    @property
    def active(self) -> bool:
        return self.session.active

    @property
    def sequence(self) -> KeySequence:
        return self.session.sequence

    def handle_raw(self, event: RawKeyEvent) -> KeyResult:
        hotkey = normalize(event, platform=self.platform)
        if hotkey is None:
            return KeyResult(consumed=False, status="modifier")
        return self.handle_key(hotkey)

    def handle_key(self, hotkey: Hotkey) -> KeyResult:
        with telemetry.span(
            name=f"mode::{self.name}",
            logger_name=self._logger_name,
            component=True,
            metadata={"key": format_hotkey(hotkey), "active": self.session.active},
        ) as handle:
            if not self.session.active:
                if hotkeys_equal(hotkey, self.settings.leader_key):
                    self._enter()
                    return KeyResult(consumed=True, status="leader_active")
                return KeyResult(consumed=False, status="passthrough")

            self._cancel_timers()
            if not self.session.sequence:
                if hotkey.key == HELP_KEY:
                    return self._show_help()
                if hotkey.key == PROMPT_KEY:
                    return self._open_prompt()

            session = self.session
            session.sequence = session.sequence + (hotkey,)
            self._notify("on_sequence_updated", session.sequence)

            result = SequenceResolver(
                self.settings.table, logger_name=self._logger_name
            ).resolve(session.sequence)
            handle.add_metadata("status", result.status)

            if result.status == "exact" and result.match:
                report = self._execute(result.match, reason="exact")
                return KeyResult(consumed=True, status="exact", report=report)

            if result.status == "ambiguous" and result.match:
                self._arm_chain(result.match)
                return KeyResult(consumed=True, status="ambiguous")

            if result.status == "pending":
                self._arm_idle(self._config.timeout_ms)
                return KeyResult(consumed=True, status="pending")

            message = f'Leader: No mapping for "{self._display(session.sequence)}"'
            self._notify("on_notice", message)
            self.exit(reason="miss")
            return KeyResult(consumed=True, status="miss", message=message)

    def exit(self, *, reason: str = "exit") -> None:
        """Return to idle. Safe to call any number of times."""

        was_active = self.session.active
        self._cancel_timers()
        self.session = LeaderSession()
        if was_active:
            telemetry.record_event(
                "leader.exit", data={"reason": reason}, logger_name=self._logger_name
            )
        self._notify("on_leader_inactive")

    def _enter(self) -> None:
        self._cancel_timers()
        self.session = LeaderSession(active=True, config=self.settings.snapshot())
        telemetry.record_event(
            "leader.enter",
            data={"leader": format_hotkey(self.settings.leader_key)},
            logger_name=self._logger_name,
        )
        self._arm_idle(self._config.timeout_ms)
        self._notify("on_leader_active")

    @property
    def _config(self) -> LeaderConfig:
        if self.session.config is None:
            self.session.config = self.settings.snapshot()
        return self.session.config

    def _arm_idle(self, duration_ms: int) -> None:
        self.scheduler.cancel(self.session.idle_timer)
        self.session.idle_timer = self.scheduler.arm(
            duration_ms, self._on_idle_timeout, name="leader.idle"
        )

    def _arm_chain(self, match: Mapping) -> None:
        config = self._config
        self.session.pending_match = match
        self.scheduler.cancel(self.session.chain_timer)
        self.session.chain_timer = self.scheduler.arm(
            config.multi_key_timeout_ms, self._on_chain_timeout, name="leader.chain"
        )
        # Armed after the debounce and never shorter, so the debounce fires first.
        self._arm_idle(max(config.timeout_ms, config.multi_key_timeout_ms))

    def _cancel_timers(self) -> None:
        self.scheduler.cancel(self.session.idle_timer)
        self.scheduler.cancel(self.session.chain_timer)
        self.session.idle_timer = None
        self.session.chain_timer = None

    def _on_idle_timeout(self) -> KeyResult:
        self.session.idle_timer = None
        if not self.session.active:
            return KeyResult(consumed=False, status="timeout")
        message = "Leader mode timed out."
        self._notify("on_notice", message)
        self.exit(reason="timeout")
        return KeyResult(consumed=False, status="timeout", message=message)

    def _on_chain_timeout(self) -> KeyResult:
        self.session.chain_timer = None
        match = self.session.pending_match
        if not self.session.active or match is None:
            return KeyResult(consumed=False, status="timeout")
        report = self._execute(match, reason="debounce")
        return KeyResult(consumed=False, status="exact", report=report)

    def _execute(self, mapping: Mapping, *, reason: str) -> ChainReport:
        with telemetry.span(
            "leader::execute",
            logger_name=self._logger_name,
            component="leader",
            metadata={
                "trigger": format_sequence(mapping.trigger),
                "actions": len(mapping.actions),
                "reason": reason,
            },
        ) as handle:
            report = run_chain(
                self.dispatcher,
                mapping.actions,
                reporter=self.reporter,
                logger_name=self._logger_name,
            )
            handle.add_metadata("failures", len(report.failures))
        self.exit(reason=reason)
        return report

    def _show_help(self) -> KeyResult:
        self._notify("on_help", self.settings.table.mappings)
        self.exit(reason="help")
        return KeyResult(consumed=True, status="help")

    def _open_prompt(self) -> KeyResult:
        self.exit(reason="prompt")
        if self.prompt is None:
            message = "Leader: command prompt unavailable"
            self._notify("on_notice", message)
            return KeyResult(consumed=True, status="prompt", message=message)
        self.prompt.open(self._dispatch_chosen)
        return KeyResult(consumed=True, status="prompt")

    def _dispatch_chosen(self, action: Action) -> ChainReport:
        return run_chain(
            self.dispatcher,
            (action,),
            reporter=self.reporter,
            logger_name=self._logger_name,
        )

    def _display(self, sequence: KeySequence) -> str:
        return format_sequence(sequence, platform=self.platform)

    def _notify(self, method: str, *args: object) -> None:
        try:
            getattr(self.reporter, method)(*args)
        except Exception as exc:
            telemetry.record_event(
                "leader.reporter_error",
                level="error",
                data={"method": method, "error": repr(exc)},
                logger_name=self._logger_name,
            )


__all__ = ["HELP_KEY", "PROMPT_KEY", "LeaderSession", "LeaderStateMachine"]
