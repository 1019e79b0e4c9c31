"""
Tests for the command-line interface.

Runs against a temporary TELLCMG_HOME with no model or mail credentials.
"""

import json
import sys
from pathlib import Path
from unittest.mock import patch

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from tellcmg import cli
from tellcmg.agents.interview_dialogue import DialogueReply
from tellcmg.storage import HISTORY_STORAGE_KEY, SETTINGS_STORAGE_KEY


@pytest.fixture
def home(tmp_path, monkeypatch):
    monkeypatch.setenv("TELLCMG_HOME", str(tmp_path))
    monkeypatch.setenv("TELLCMG_LLM_PROVIDER", "none")
    for key in ("SMTP_USER", "SMTP_PASSWORD"):
        monkeypatch.delenv(key, raising=False)
    return tmp_path


def _history(home):
    return json.loads((home / f"{HISTORY_STORAGE_KEY}.json").read_text())


def test_no_command_prints_help(capsys):
    assert cli.main([]) == 1
    assert "usage:" in capsys.readouterr().out


def test_catalog(home, capsys):
    assert cli.main(["catalog"]) == 0
    out = capsys.readouterr().out
    assert "doc-mgmt" in out
    assert "roi-impact" in out


def test_generate_records_history_and_settings(home, capsys):
    code = cli.main(["generate", "Scan docs automatically", "-c", "doc-mgmt", "--detail", "concise"])

    assert code == 0
    assert "# Doc Management Idea" in capsys.readouterr().out
    entries = _history(home)
    assert entries[0]["transcript"] == "Scan docs automatically"
    assert entries[0]["mode"] == "doc-mgmt"

    saved = json.loads((home / f"{SETTINGS_STORAGE_KEY}.json").read_text())
    assert saved["modes"] == ["doc-mgmt"]
    assert saved["detailLevel"] == "concise"


def test_generate_reuses_saved_settings(home):
    cli.main(["generate", "First", "-c", "compliance"])
    cli.main(["generate", "Second"])
    assert _history(home)[0]["mode"] == "compliance"


def test_generate_empty_idea(home, capsys):
    assert cli.main(["generate", "   "]) == 2
    assert "No idea text provided" in capsys.readouterr().out


def test_generate_empty_idea_makes_no_network_calls(home):
    with patch.object(cli, "fetch_url_reference") as fetch:
        assert cli.main(["generate", "   ", "--url", "https://example.com"]) == 2
    fetch.assert_not_called()
    assert not (home / f"{SETTINGS_STORAGE_KEY}.json").exists()


def test_generate_cancel_leaves_no_history(home, capsys):
    with patch("tellcmg.inflight.InFlightCall.run", side_effect=KeyboardInterrupt):
        assert cli.main(["generate", "Idea"]) == 130
    assert "Cancelled." in capsys.readouterr().out
    assert not (home / f"{HISTORY_STORAGE_KEY}.json").exists()


def test_history_show_delete_clear(home, capsys):
    cli.main(["generate", "Idea", "-c", "doc-mgmt"])
    entry_id = _history(home)[0]["id"]

    assert cli.main(["history", "list"]) == 0
    assert entry_id in capsys.readouterr().out

    assert cli.main(["history", "show", entry_id]) == 0
    assert "Doc Management" in capsys.readouterr().out

    assert cli.main(["history", "delete", entry_id]) == 0
    assert cli.main(["history", "delete", entry_id]) == 1

    cli.main(["generate", "Another"])
    assert cli.main(["history", "clear"]) == 0
    assert _history(home) == []


def test_interview_done_command(home, capsys):
    answers = iter(["Borrowers forget uploads", "/done"])
    with patch("builtins.input", lambda prompt="": next(answers)):
        assert cli.main(["interview", "Auto reminders", "-c", "doc-mgmt"]) == 0

    out = capsys.readouterr().out
    assert "INTERVIEW COMPLETE" in out
    assert "- Borrowers forget uploads" in _history(home)[0]["prompt"]


def test_interview_fallback_note(home, capsys):
    answers = iter(["/done"])
    with patch("builtins.input", lambda prompt="": next(answers)):
        assert cli.main(["interview", "Auto reminders"]) == 0
    assert "merged into a template" in capsys.readouterr().out


def test_interview_cancel_leaves_no_history(home, capsys):
    answers = iter(["Borrowers forget uploads"])
    with patch("builtins.input", lambda prompt="": next(answers)):
        with patch("tellcmg.inflight.InFlightCall.run", side_effect=[DialogueReply(message="Hi"), KeyboardInterrupt]):
            assert cli.main(["interview", "Auto reminders"]) == 130
    assert "Cancelled." in capsys.readouterr().out
    assert not (home / f"{HISTORY_STORAGE_KEY}.json").exists()


def test_submit_unknown_entry(home, capsys):
    assert cli.main(["submit", "missing"]) == 1


def test_submit_without_mail_credentials(home, capsys):
    cli.main(["generate", "Idea"])
    entry_id = _history(home)[0]["id"]
    assert cli.main(["submit", entry_id]) == 1
    assert "Email service not configured" in capsys.readouterr().out
