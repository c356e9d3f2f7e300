"""Client-local activity history.

Most-recent-first, capped at 20 entries. Lives only in the browser session;
the backend never sees it.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

MAX_ENTRIES = 20


@dataclass
class HistoryEntry:
    type: str
    data: dict[str, Any]
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


class History:
    """Bounded, newest-first list of feature results.

    Wraps a caller-owned list so Streamlit's session_state can hold the storage.
    """

    def __init__(self, entries: list[HistoryEntry] | None = None, limit: int = MAX_ENTRIES):
        self.entries = entries if entries is not None else []
        self.limit = limit

    def add(self, entry_type: str, data: dict[str, Any]) -> HistoryEntry:
        entry = HistoryEntry(type=entry_type, data=data)
        self.entries.insert(0, entry)
        del self.entries[self.limit:]
        return entry

    def latest(self) -> HistoryEntry | None:
        return self.entries[0] if self.entries else None

    def of_type(self, entry_type: str) -> list[HistoryEntry]:
        return [e for e in self.entries if e.type == entry_type]

    def clear(self) -> None:
        self.entries.clear()

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self):
        return iter(self.entries)
