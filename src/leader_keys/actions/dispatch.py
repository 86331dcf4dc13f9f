"""Action dispatch and best-effort chain execution."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, Iterable, Optional, Protocol

from leader_keys.runtime import telemetry

from .models import Action, InvokeAction, OpenAction

if TYPE_CHECKING:
    from leader_keys.modes.base_mode import StatusReporter


class DispatchError(RuntimeError):
    """Failure of a single action, carried as a value."""

    def __init__(self, action: Action, reason: str):
        super().__init__(f"{_label(action)}: {reason}")
        self.action = action
        self.reason = reason


@dataclass(frozen=True, slots=True)
class DispatchResult:
    action: Action
    error: Optional[DispatchError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True, slots=True)
class ChainReport:
    """Per-action outcomes of one chain run, in chain order."""

    results: tuple[DispatchResult, ...] = ()

    @property
    def ok(self) -> bool:
        return all(result.ok for result in self.results)

    @property
    def failures(self) -> tuple[DispatchResult, ...]:
        return tuple(result for result in self.results if not result.ok)


class Dispatcher(Protocol):
    def run(self, action: Action) -> DispatchResult:  # pragma: no cover - protocol
        ...


class ActionDispatcher:
    """Routes actions to host capabilities by kind; never raises."""

    def __init__(
        self,
        *,
        invoke: Callable[[str], object],
        open_path: Callable[[str], object],
        logger_name: str | None = None,
    ) -> None:
        self._invoke = invoke
        self._open_path = open_path
        self._logger_name = logger_name

    def run(self, action: Action) -> DispatchResult:
        with telemetry.span(
            "actions::run",
            logger_name=self._logger_name,
            component="actions",
            metadata={"kind": getattr(action, "kind", "?"), "label": _label(action)},
        ) as handle:
            try:
                if isinstance(action, InvokeAction):
                    self._invoke(action.id)
                elif isinstance(action, OpenAction):
                    self._open_path(action.path)
                else:
                    handle.add_metadata("status", "unknown_kind")
                    return DispatchResult(
                        action, DispatchError(action, "unknown action kind")
                    )
            except Exception as exc:
                handle.add_metadata("status", "error")
                return DispatchResult(action, DispatchError(action, str(exc)))
            handle.add_metadata("status", "ok")
            return DispatchResult(action)


def run_chain(
    dispatcher: Dispatcher,
    actions: Iterable[Action],
    *,
    reporter: Optional["StatusReporter"] = None,
    logger_name: str | None = None,
) -> ChainReport:
    """Run every action in order; a failure is reported and the chain continues."""

    results: list[DispatchResult] = []
    for action in actions:
        result = dispatcher.run(action)
        results.append(result)
        if result.error is None:
            continue
        telemetry.record_event(
            "leader.action_failed",
            level="warning",
            data={"action": _label(action), "reason": result.error.reason},
            logger_name=logger_name,
        )
        if reporter is None:
            continue
        try:
            reporter.on_notice(f"Leader: {result.error}")
        except Exception as exc:
            telemetry.record_event(
                "leader.reporter_error",
                level="error",
                data={"method": "on_notice", "error": repr(exc)},
                logger_name=logger_name,
            )
    return ChainReport(tuple(results))


def _label(action: object) -> str:
    return str(getattr(action, "label", action))


__all__ = [
    "ActionDispatcher",
    "ChainReport",
    "DispatchError",
    "DispatchResult",
    "Dispatcher",
    "run_chain",
]
