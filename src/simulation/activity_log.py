from __future__ import annotations

import itertools
import logging
from collections import deque
from dataclasses import dataclass
from typing import Deque, List

logger = logging.getLogger(__name__)

DEFAULT_CAPACITY = 50


@dataclass(frozen=True)
class LogEntry:
    entry_id: int
    time: float
    message: str

    @property
    def is_separator(self) -> bool:
        return self.message == ""

    @property
    def label(self) -> str:
        minutes, seconds = divmod(self.time, 60)
        return f"[{int(minutes):02d}:{seconds:04.1f}]"


class ActivityLog:
    """Bounded, newest-first history of simulation events.

    An entry with an empty message separates groups of related events.
    """

    def __init__(self, capacity: int = DEFAULT_CAPACITY) -> None:
        if capacity < 1:
            raise ValueError(f"capacity must be positive, got {capacity}")
        self.capacity = capacity
        self._entries: Deque[LogEntry] = deque(maxlen=capacity)
        self._ids = itertools.count()

    def add(self, time: float, message: str) -> LogEntry:
        entry = LogEntry(next(self._ids), time, message)
        self._entries.appendleft(entry)
        if message:
            logger.info("%s %s", entry.label, message)
        return entry

    def separator(self, time: float) -> LogEntry:
        return self.add(time, "")

    def entries(self) -> List[LogEntry]:
        return list(self._entries)

    def messages(self) -> List[str]:
        """Non-separator messages, newest first."""
        return [entry.message for entry in self._entries if not entry.is_separator]

    def __len__(self) -> int:
        return len(self._entries)
