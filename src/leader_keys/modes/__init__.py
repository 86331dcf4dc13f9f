"""Leader state machine, timers and collaborator protocols."""

from .base_mode import (
    BusStatusReporter,
    CommandPrompt,
    KeyResult,
    ModeBus,
    StatusReporter,
    format_help,
)
from .timers import DeadlineScheduler, ManualClock, TimerHandle, TimerScheduler
from .leader_mode import LeaderSession, LeaderStateMachine

__all__ = [
    "BusStatusReporter",
    "CommandPrompt",
    "KeyResult",
    "ModeBus",
    "StatusReporter",
    "format_help",
    "DeadlineScheduler",
    "ManualClock",
    "TimerHandle",
    "TimerScheduler",
    "LeaderSession",
    "LeaderStateMachine",
]
