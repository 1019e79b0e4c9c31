"""
Local persistence for history and settings.
"""

from .store import KeyValueStore, MemoryStore, JsonFileStore
from .history import HistoryRepository, HISTORY_STORAGE_KEY, MAX_HISTORY
from .settings import SavedSettings, SettingsRepository, SETTINGS_STORAGE_KEY

__all__ = [
    "KeyValueStore",
    "MemoryStore",
    "JsonFileStore",
    "HistoryRepository",
    "HISTORY_STORAGE_KEY",
    "MAX_HISTORY",
    "SavedSettings",
    "SettingsRepository",
    "SETTINGS_STORAGE_KEY",
]
