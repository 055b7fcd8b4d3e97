from collections import deque
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import List


class LogLevel(str, Enum):
    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


@dataclass
class LogEntry:
    time: str
    message: str
    level: LogLevel = LogLevel.INFO


class ActivityLog:
    """Most recent operator-facing events, newest first."""

    def __init__(self, max_entries: int = 10):
        self._entries: deque[LogEntry] = deque(maxlen=max_entries)

    def add(self, message: str, level: LogLevel = LogLevel.INFO) -> LogEntry:
        entry = LogEntry(datetime.now().strftime("%H:%M:%S"), message, LogLevel(level))
        self._entries.appendleft(entry)
        return entry

    def entries(self) -> List[LogEntry]:
        return list(self._entries)

    def clear(self):
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)
