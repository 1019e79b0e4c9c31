"""
Last-used settings repository.

Older clients stored a single ``mode`` string instead of a ``modes`` list;
that field is migrated on load.
"""

import json
import logging
from dataclasses import dataclass, field

from ..schemas.idea import DetailLevel, OutputFormat
from .store import KeyValueStore

logger = logging.getLogger(__name__)

SETTINGS_STORAGE_KEY = "tellcmg-settings"


@dataclass
class SavedSettings:
    categories: list[str] = field(default_factory=list)
    detail_level: DetailLevel = DetailLevel.BALANCED
    output_format: OutputFormat = OutputFormat.STRUCTURED
    modifiers: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "modes": list(self.categories),
            "detailLevel": self.detail_level.value,
            "outputFormat": self.output_format.value,
            "modifiers": list(self.modifiers),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "SavedSettings":
        categories = data.get("modes") or data.get("categories")
        if not categories and data.get("mode"):
            categories = [data["mode"]]
        return cls(
            categories=[str(c) for c in categories or []],
            detail_level=DetailLevel.from_string(data.get("detailLevel")),
            output_format=OutputFormat.from_string(data.get("outputFormat")),
            modifiers=[str(m) for m in data.get("modifiers") or []],
        )


class SettingsRepository:
    def __init__(self, store: KeyValueStore):
        self.store = store

    def load(self) -> SavedSettings:
        raw = self.store.get(SETTINGS_STORAGE_KEY)
        if not raw:
            return SavedSettings()
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            logger.warning("Ignoring unreadable settings: %s", e)
            return SavedSettings()
        if not isinstance(data, dict):
            return SavedSettings()
        return SavedSettings.from_dict(data)

    def save(self, settings: SavedSettings) -> None:
        self.store.set(SETTINGS_STORAGE_KEY, json.dumps(settings.to_dict()))
