from __future__ import annotations

import threading
from collections import defaultdict
from typing import Any, Dict


class InMemoryStore:
    """Map-backed tables shared by the in-memory repositories.

    Non-persistent and local to one process; the lock only guards against
    concurrent requests inside that process.
    """

    TABLES = ("departments", "employees", "attendance_reports", "attendance_entries", "documents")

    def __init__(self):
        self.lock = threading.RLock()
        self._tables: Dict[str, Dict[int, Any]] = {name: {} for name in self.TABLES}
        self._sequences: Dict[str, int] = defaultdict(int)

    def table(self, name: str) -> Dict[int, Any]:
        return self._tables[name]

    def next_id(self, name: str) -> int:
        with self.lock:
            self._sequences[name] += 1
            return self._sequences[name]
