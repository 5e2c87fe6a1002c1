"""
Schedule Store
Keeps planned schedule entries, optionally persisted to a local JSON file.

Without a path the store is memory-only (useful for previews and tests).
"""

import json
import os
import threading
from datetime import date
from typing import Dict, List, Optional

from gradingbot.algorithms.models import ScheduleEntry


class ScheduleStore:
    """Thread-safe schedule entry store backed by a JSON file."""

    def __init__(self, path: Optional[str] = None):
        self.path = path
        self._entries: Dict[str, ScheduleEntry] = {}
        self._lock = threading.Lock()
        # Set when an existing file could not be read; save() refuses to write then
        self.load_failed = False

    def __len__(self):
        return len(self._entries)

    def load(self) -> bool:
        """
        Load entries from the JSON file.

        Returns:
            True if loaded. False if there is no file, or if the file could
            not be read; in that case the store becomes read-only.
        """
        if not self.path or not os.path.exists(self.path):
            return False
        try:
            with open(self.path, 'r') as f:
                data = json.load(f)
            entries = [ScheduleEntry.from_dict(d) for d in data.get('entries', [])]
        except (OSError, ValueError, KeyError, TypeError, AttributeError) as e:
            self.load_failed = True
            print(f"[Store] [ERROR] Failed to load schedule from {self.path}: {e}")
            print("[Store] [ERROR] Store is read-only until the file is fixed")
            return False

        with self._lock:
            self._entries = {e.entry_id: e for e in entries}
            self.load_failed = False
        print(f"[Store] Loaded {len(entries)} schedule entries from {self.path}")
        return True

    def save(self) -> bool:
        """Persist current entries. Memory-only stores always succeed."""
        if not self.path:
            return True
        if self.load_failed:
            print(f"[Store] [ERROR] Not saving: {self.path} could not be loaded")
            return False
        with self._lock:
            data = {'entries': [e.to_dict() for e in self._entries.values()]}
        try:
            os.makedirs(os.path.dirname(os.path.abspath(self.path)), exist_ok=True)
            with open(self.path, 'w') as f:
                json.dump(data, f, default=str)
            return True
        except OSError as e:
            print(f"[Store] Failed to save schedule to {self.path}: {e}")
            return False

    def create_entry(self, entry: ScheduleEntry) -> bool:
        """
        Add one entry and persist it.

        Returns:
            True if saved; False if it could not be written (the entry is not kept)
        """
        with self._lock:
            if entry.entry_id in self._entries:
                print(f"[Store] Duplicate entry id {entry.entry_id}")
                return False
            self._entries[entry.entry_id] = entry

        if self.save():
            return True

        with self._lock:
            self._entries.pop(entry.entry_id, None)
        return False

    def clear_entries_for_date(self, planning_date: date) -> int:
        """Remove every entry planned on a date. Returns the number removed."""
        if self.load_failed:
            raise OSError(f"Schedule {self.path} could not be loaded; not clearing")
        with self._lock:
            to_remove = [k for k, e in self._entries.items() if e.planning_date == planning_date]
            for key in to_remove:
                del self._entries[key]
        if to_remove:
            self.save()
        print(f"[Store] Cleared {len(to_remove)} entries for {planning_date}")
        return len(to_remove)

    def all_entries(self) -> List[ScheduleEntry]:
        with self._lock:
            entries = list(self._entries.values())
        return sorted(entries, key=lambda e: (e.start_time, e.employee_id))

    def entries_for_date(self, planning_date: date) -> List[ScheduleEntry]:
        return [e for e in self.all_entries() if e.planning_date == planning_date]

    def entries_for_employee(self, employee_id: str) -> List[ScheduleEntry]:
        return [e for e in self.all_entries() if e.employee_id == employee_id]
