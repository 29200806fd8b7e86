"""Bounded calculation tape."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from typing import Iterator

HISTORY_LIMIT = 20


@dataclass(frozen=True, slots=True)
class HistoryEntry:
    expression: str
    result: str

    def to_dict(self) -> dict[str, str]:
        return {"expression": self.expression, "result": self.result}


class HistoryTape:
    """Most-recent-first log of evaluated expressions."""

    def __init__(self, limit: int = HISTORY_LIMIT) -> None:
        if limit < 1:
            raise ValueError("History limit must be at least 1")
        self._entries: deque[HistoryEntry] = deque(maxlen=limit)

    @property
    def limit(self) -> int:
        return self._entries.maxlen or HISTORY_LIMIT

    def record(self, expression: str, result: str) -> HistoryEntry:
        entry = HistoryEntry(expression=expression, result=result)
        # appendleft on a bounded deque evicts from the oldest end.
        self._entries.appendleft(entry)
        return entry

    def get(self, index: int) -> HistoryEntry:
        if index < 0 or index >= len(self._entries):
            raise IndexError(f"No history entry at position {index}")
        return self._entries[index]

    def clear(self) -> None:
        self._entries.clear()

    def __iter__(self) -> Iterator[HistoryEntry]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def to_list(self) -> list[dict[str, str]]:
        return [entry.to_dict() for entry in self._entries]


__all__ = ["HISTORY_LIMIT", "HistoryEntry", "HistoryTape"]
