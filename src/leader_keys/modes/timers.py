"""Cancellable deadline timers driven by the host event loop."""

from __future__ import annotations

import itertools
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Protocol

Clock = Callable[[], float]


@dataclass(eq=False)
class TimerHandle:
    """Opaque handle identifying one armed timer."""

    name: str
    deadline: float
    duration_ms: int
    generation: int
    callback: Callable[[], Any] = field(repr=False)


class TimerScheduler(Protocol):
    def arm(
        self, duration_ms: int, callback: Callable[[], Any], *, name: str = "timer"
    ) -> TimerHandle:  # pragma: no cover - protocol
        ...

    def cancel(self, handle: TimerHandle | None) -> None:  # pragma: no cover
        ...


class DeadlineScheduler:
    """Records deadlines and fires due callbacks when polled.

    ``process_due`` is meant to be called from the same loop that delivers
    key events, so callbacks never run concurrently with a transition.
    """

    def __init__(self, clock: Clock = time.monotonic) -> None:
        self._clock = clock
        self._pending: Dict[int, TimerHandle] = {}
        self._counter = itertools.count(1)

    def arm(
        self, duration_ms: int, callback: Callable[[], Any], *, name: str = "timer"
    ) -> TimerHandle:
        if duration_ms <= 0:
            raise ValueError("duration_ms must be positive")
        handle = TimerHandle(
            name=name,
            deadline=self._clock() + duration_ms / 1000.0,
            duration_ms=duration_ms,
            generation=next(self._counter),
            callback=callback,
        )
        self._pending[handle.generation] = handle
        return handle

    def cancel(self, handle: TimerHandle | None) -> None:
        if handle is not None:
            self._pending.pop(handle.generation, None)

    def pending(self) -> List[TimerHandle]:
        return sorted(self._pending.values(), key=lambda h: (h.deadline, h.generation))

    def is_pending(self, handle: TimerHandle | None) -> bool:
        return handle is not None and handle.generation in self._pending

    def process_due(self) -> List[Any]:
        """Fire every expired timer in deadline order and return the results."""

        now = self._clock()
        results: List[Any] = []
        for handle in self.pending():
            if handle.deadline > now:
                break
            # An earlier callback may have cancelled this one.
            if self._pending.pop(handle.generation, None) is None:
                continue
            results.append(handle.callback())
        return results


class ManualClock:
    """Virtual clock for deterministic timer tests and replays."""

    def __init__(self, start: float = 0.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, ms: float) -> None:
        self.now += ms / 1000.0


__all__ = [
    "Clock",
    "DeadlineScheduler",
    "ManualClock",
    "TimerHandle",
    "TimerScheduler",
]
