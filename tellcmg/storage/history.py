"""
Structuring history repository.

Newest entry first, capped at MAX_HISTORY entries; adding past the cap drops
the oldest. Stored under the same key and shape the browser client uses.
"""

import json
import logging
from typing import List, Optional

from ..schemas.idea import HistoryEntry
from ..errors import ValidationError
from .store import KeyValueStore

logger = logging.getLogger(__name__)

HISTORY_STORAGE_KEY = "tellcmg-history"
MAX_HISTORY = 50


class HistoryRepository:
    """Loads once, rewrites the whole list on every mutation."""

    def __init__(self, store: KeyValueStore, limit: int = MAX_HISTORY):
        self.store = store
        self.limit = limit
        self._entries: Optional[List[HistoryEntry]] = None

    def load(self) -> List[HistoryEntry]:
        if self._entries is not None:
            return list(self._entries)

        raw = self.store.get(HISTORY_STORAGE_KEY)
        entries: List[HistoryEntry] = []
        if raw:
            try:
                data = json.loads(raw)
            except json.JSONDecodeError as e:
                logger.warning("Ignoring unreadable history: %s", e)
                data = []
            for item in data if isinstance(data, list) else []:
                try:
                    entries.append(HistoryEntry.from_dict(item))
                except (KeyError, TypeError, ValueError, ValidationError) as e:
                    logger.warning("Skipping malformed history entry: %s", e)
        self._entries = entries[: self.limit]
        return list(self._entries)

    def save(self, entries: List[HistoryEntry]) -> None:
        self._entries = list(entries)[: self.limit]
        self.store.set(
            HISTORY_STORAGE_KEY,
            json.dumps([e.to_dict() for e in self._entries]),
        )

    def add(self, entry: HistoryEntry) -> HistoryEntry:
        entries = self.load()
        entries.insert(0, entry)
        self.save(entries)
        return entry

    def record(self, raw_text: str, final_document: str, category_tag: str = "") -> HistoryEntry:
        """Create and store an entry. Raises ValidationError on an unfinished document."""
        return self.add(HistoryEntry(
            raw_text=raw_text.strip(),
            final_document=final_document,
            category_tag=category_tag,
        ))

    def get(self, entry_id: str) -> Optional[HistoryEntry]:
        for entry in self.load():
            if entry.id == entry_id:
                return entry
        return None

    def delete(self, entry_id: str) -> bool:
        entries = self.load()
        remaining = [e for e in entries if e.id != entry_id]
        if len(remaining) == len(entries):
            return False
        self.save(remaining)
        return True

    def clear(self) -> None:
        self.save([])
