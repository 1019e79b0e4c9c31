"""
Tests for history and settings persistence.
"""

import json
import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from tellcmg.errors import ValidationError
from tellcmg.schemas.idea import DetailLevel, HistoryEntry, OutputFormat
from tellcmg.storage import (
    HISTORY_STORAGE_KEY,
    MAX_HISTORY,
    SETTINGS_STORAGE_KEY,
    HistoryRepository,
    JsonFileStore,
    MemoryStore,
    SavedSettings,
    SettingsRepository,
)


class TestHistory:
    def test_newest_first(self):
        history = HistoryRepository(MemoryStore())
        first = history.record("one", "# One")
        second = history.record("two", "# Two")
        assert [e.id for e in history.load()] == [second.id, first.id]

    def test_fifty_first_entry_evicts_oldest(self):
        history = HistoryRepository(MemoryStore())
        entries = [history.record(f"idea {i}", f"# Doc {i}") for i in range(MAX_HISTORY + 1)]

        stored = history.load()
        assert len(stored) == MAX_HISTORY
        assert stored[0].id == entries[-1].id
        assert entries[0].id not in [e.id for e in stored]

    def test_unfinished_document_not_recorded(self):
        store = MemoryStore()
        history = HistoryRepository(store)
        with pytest.raises(ValidationError):
            history.record("idea", "[COMPLETE]\n# Doc\n[/COMPLETE]")
        with pytest.raises(ValidationError):
            history.record("idea", "   ")
        assert store.get(HISTORY_STORAGE_KEY) is None

    def test_stored_with_browser_keys(self):
        store = MemoryStore()
        entry = HistoryRepository(store).record("idea", "# Doc", "doc-mgmt,compliance")

        data = json.loads(store.get(HISTORY_STORAGE_KEY))
        assert data == [{
            "id": entry.id,
            "timestamp": entry.created_at,
            "transcript": "idea",
            "prompt": "# Doc",
            "mode": "doc-mgmt,compliance",
        }]
        assert entry.categories == ["doc-mgmt", "compliance"]

    def test_get_delete_clear(self):
        history = HistoryRepository(MemoryStore())
        entry = history.record("idea", "# Doc")
        assert history.get(entry.id) == entry
        assert history.delete("missing") is False
        assert history.delete(entry.id) is True
        assert history.get(entry.id) is None

        history.record("again", "# Doc")
        history.clear()
        assert history.load() == []

    def test_malformed_entries_skipped(self):
        store = MemoryStore({HISTORY_STORAGE_KEY: json.dumps([
            {"id": "1", "timestamp": 1, "transcript": "ok", "prompt": "# Fine", "mode": ""},
            {"id": "2", "timestamp": 2, "transcript": "bad", "prompt": "", "mode": ""},
            {"transcript": "no id"},
            "junk",
        ])})
        assert [e.id for e in HistoryRepository(store).load()] == ["1"]

    def test_unreadable_history_loads_empty(self):
        store = MemoryStore({HISTORY_STORAGE_KEY: "{not json"})
        assert HistoryRepository(store).load() == []

    def test_entry_rejects_markers_directly(self):
        with pytest.raises(ValidationError):
            HistoryEntry(raw_text="x", final_document="Doc [/COMPLETE]")


class TestSettings:
    def test_defaults(self):
        saved = SettingsRepository(MemoryStore()).load()
        assert saved == SavedSettings()
        assert saved.detail_level == DetailLevel.BALANCED
        assert saved.output_format == OutputFormat.STRUCTURED

    def test_round_trip_keys(self):
        store = MemoryStore()
        repo = SettingsRepository(store)
        repo.save(SavedSettings(
            categories=["doc-mgmt"],
            detail_level=DetailLevel.CONCISE,
            output_format=OutputFormat.BULLET_POINTS,
            modifiers=["roi-impact"],
        ))
        assert json.loads(store.get(SETTINGS_STORAGE_KEY)) == {
            "modes": ["doc-mgmt"],
            "detailLevel": "concise",
            "outputFormat": "bullet-points",
            "modifiers": ["roi-impact"],
        }
        assert repo.load().categories == ["doc-mgmt"]

    def test_legacy_single_mode_migrated(self):
        store = MemoryStore({SETTINGS_STORAGE_KEY: json.dumps({"mode": "doc-mgmt"})})
        assert SettingsRepository(store).load().categories == ["doc-mgmt"]

    def test_corrupt_settings_load_defaults(self):
        store = MemoryStore({SETTINGS_STORAGE_KEY: "[[["})
        assert SettingsRepository(store).load() == SavedSettings()


class TestJsonFileStore:
    def test_persists_across_instances(self, tmp_path):
        HistoryRepository(JsonFileStore(tmp_path)).record("idea", "# Doc")

        assert (tmp_path / f"{HISTORY_STORAGE_KEY}.json").exists()
        reloaded = HistoryRepository(JsonFileStore(tmp_path)).load()
        assert [e.final_document for e in reloaded] == ["# Doc"]

    def test_missing_and_delete(self, tmp_path):
        store = JsonFileStore(tmp_path / "nested")
        assert store.get("k") is None
        store.set("k", "v")
        assert store.get("k") == "v"
        store.delete("k")
        store.delete("k")
        assert store.get("k") is None
