"""Incremental sequence resolution against a mapping table."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Optional, Sequence

from leader_keys.runtime.telemetry import span

from .models import Hotkey, Mapping
from .sequences import format_sequence
from .table import MappingTable

ResolutionStatus = Literal["exact", "ambiguous", "pending", "miss"]


@dataclass(frozen=True, slots=True)
class ResolutionResult:
    """Outcome returned from the resolver.

    ``exact`` fires immediately, ``ambiguous`` fires after the chain
    debounce unless a longer trigger is typed, ``pending`` waits for more
    keys and ``miss`` aborts.
    """

    status: ResolutionStatus
    match: Optional[Mapping] = None
    candidates: tuple[Mapping, ...] = ()
    consumed: int = 0


class SequenceResolver:
    """Classifies the in-progress sequence against the table."""

    def __init__(self, table: MappingTable, *, logger_name: str | None = None) -> None:
        self._table = table
        self._logger_name = logger_name

    @property
    def table(self) -> MappingTable:
        return self._table

    def resolve(self, sequence: Sequence[Hotkey]) -> ResolutionResult:
        normalized = tuple(sequence)
        with span(
            "keymaps::resolve",
            logger_name=self._logger_name,
            component="keymaps",
            metadata={
                "sequence": format_sequence(normalized),
                "length": len(normalized),
            },
        ) as handle:
            candidates = tuple(self._table.find_by_prefix(normalized))
            if not candidates:
                handle.add_metadata("status", "miss")
                return ResolutionResult(status="miss", consumed=len(normalized))

            exact = self._table.find_exact(normalized)
            longer = any(len(m.trigger) > len(normalized) for m in candidates)

            if exact is not None and longer:
                status: ResolutionStatus = "ambiguous"
            elif exact is not None:
                status = "exact"
            elif longer:
                status = "pending"
            else:
                # Unreachable with correct prefix semantics.
                status = "miss"
                exact = None

            handle.add_metadata("status", status)
            handle.add_metadata("candidates", len(candidates))
            return ResolutionResult(
                status=status,
                match=exact,
                candidates=candidates if status != "miss" else (),
                consumed=len(normalized),
            )


__all__ = ["ResolutionResult", "ResolutionStatus", "SequenceResolver"]
