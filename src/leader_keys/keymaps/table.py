"""Ordered mapping table with prefix queries and conflict-checked mutation."""

from __future__ import annotations

from typing import Callable, Iterable, Iterator, List, Optional, Sequence

from leader_keys.runtime.telemetry import span

from .models import Hotkey, Mapping
from .sequences import display_sort_key, format_sequence, is_prefix, sequences_equal

ChangeListener = Callable[["MappingTable"], None]


class MappingConflictError(RuntimeError):
    """Raised when a trigger collides with another mapping's trigger."""

    def __init__(self, mapping: Mapping, existing: Mapping):
        chain = " → ".join(action.label for action in existing.actions)
        message = (
            f'Sequence "{format_sequence(mapping.trigger)}" is already mapped '
            f'to "{chain}".'
        )
        super().__init__(message)
        self.mapping = mapping
        self.existing = existing


class MappingTable:
    """Owns the trigger → action-chain entries.

    Entries stay sorted by trigger length, then display string. Matching
    scans every entry, so the order only matters for display.
    """

    def __init__(
        self,
        mappings: Iterable[Mapping] = (),
        *,
        on_change: Optional[ChangeListener] = None,
        logger_name: str | None = None,
    ) -> None:
        self._mappings: List[Mapping] = []
        self._logger_name = logger_name
        self._revision = 0
        for mapping in mappings:
            self._check_conflict(mapping, ignore=None)
            self._mappings.append(mapping)
        self._sort()
        self.on_change = on_change

    @property
    def mappings(self) -> tuple[Mapping, ...]:
        return tuple(self._mappings)

    def __len__(self) -> int:
        return len(self._mappings)

    def __iter__(self) -> Iterator[Mapping]:
        return iter(tuple(self._mappings))

    def __getitem__(self, index: int) -> Mapping:
        return self._mappings[index]

    def revision(self) -> int:
        return self._revision

    def index_of(self, mapping: Mapping) -> int:
        return self._mappings.index(mapping)

    def find_by_prefix(self, seq: Sequence[Hotkey]) -> list[Mapping]:
        return [m for m in self._mappings if is_prefix(seq, m.trigger)]

    def find_exact(self, seq: Sequence[Hotkey]) -> Optional[Mapping]:
        for mapping in self._mappings:
            if sequences_equal(seq, mapping.trigger):
                return mapping
        return None

    def find_conflict(
        self, mapping: Mapping, *, ignore: Optional[int] = None
    ) -> Optional[Mapping]:
        for index, existing in enumerate(self._mappings):
            if index == ignore:
                continue
            if sequences_equal(existing.trigger, mapping.trigger):
                return existing
        return None

    def add(self, mapping: Mapping) -> Mapping:
        with span(
            "mappings::add",
            logger_name=self._logger_name,
            component="mappings",
            metadata={"trigger": format_sequence(mapping.trigger)},
        ):
            self._check_conflict(mapping, ignore=None)
            previous = list(self._mappings)
            self._mappings.append(mapping)
            self._touch(previous)
            return mapping

    def update(self, index: int, mapping: Mapping) -> Mapping:
        with span(
            "mappings::update",
            logger_name=self._logger_name,
            component="mappings",
            metadata={"index": index, "trigger": format_sequence(mapping.trigger)},
        ):
            self._require_index(index)
            self._check_conflict(mapping, ignore=index)
            previous = list(self._mappings)
            self._mappings[index] = mapping
            self._touch(previous)
            return mapping

    def remove(self, index: int) -> Mapping:
        with span(
            "mappings::remove",
            logger_name=self._logger_name,
            component="mappings",
            metadata={"index": index},
        ):
            self._require_index(index)
            previous = list(self._mappings)
            removed = self._mappings.pop(index)
            self._touch(previous)
            return removed

    def _require_index(self, index: int) -> None:
        if not 0 <= index < len(self._mappings):
            raise IndexError(f"No mapping at index {index}")

    def _check_conflict(self, mapping: Mapping, *, ignore: Optional[int]) -> None:
        existing = self.find_conflict(mapping, ignore=ignore)
        if existing is not None:
            raise MappingConflictError(mapping, existing)

    def _sort(self) -> None:
        self._mappings.sort(key=lambda m: display_sort_key(m.trigger))

    def _touch(self, previous: List[Mapping]) -> None:
        """Commit a mutation; a failing ``on_change`` restores ``previous``."""

        self._sort()
        self._revision += 1
        if self.on_change is None:
            return
        try:
            self.on_change(self)
        except Exception:
            self._mappings = previous
            self._revision -= 1
            raise


__all__ = ["MappingConflictError", "MappingTable"]
