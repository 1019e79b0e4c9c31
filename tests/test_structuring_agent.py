"""
Tests for the one-shot structuring flow.
"""

import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))
sys.path.insert(0, str(Path(__file__).parent))

from fakes import ScriptedLLM
from tellcmg.agents.structuring_agent import StructuringAgent
from tellcmg.errors import LLMServiceError, ValidationError
from tellcmg.prompts.assembler import PromptAssembler
from tellcmg.schemas.idea import IdeaDraft


def _draft(**overrides):
    fields = {"raw_text": "Auto-remind borrowers about missing docs", "categories": ["doc-mgmt"]}
    fields.update(overrides)
    return IdeaDraft(**fields)


def test_without_model_uses_fallback():
    result = StructuringAgent(llm=None).structure(_draft())
    assert result.used_fallback
    assert result.provider is None
    assert result.document.startswith("# Doc Management Idea\n")


def test_model_reply_returned_verbatim():
    reply = "  # Reminder Idea\n\n## Problem\nDocs go missing\n"
    llm = ScriptedLLM(replies=[reply])
    result = StructuringAgent(llm=llm).structure(_draft())

    assert result.document == reply
    assert not result.used_fallback
    assert result.provider == "fake"


def test_model_receives_assembled_prompt():
    llm = ScriptedLLM(replies=["doc"])
    draft = _draft(modifiers=["roi-impact"])
    StructuringAgent(llm=llm).structure(draft)

    assert len(llm.calls) == 1
    sent = [m.to_dict() for m in llm.calls[0]]
    expected = [m.to_dict() for m in PromptAssembler().messages(draft)]
    assert sent == expected


def test_model_failure_raises_service_error():
    llm = ScriptedLLM(error=RuntimeError("timeout"))
    with pytest.raises(LLMServiceError):
        StructuringAgent(llm=llm).structure(_draft())


def test_empty_model_reply_raises_service_error():
    llm = ScriptedLLM(replies=["   "])
    with pytest.raises(LLMServiceError):
        StructuringAgent(llm=llm).structure(_draft())


def test_empty_idea_never_reaches_model():
    llm = ScriptedLLM(replies=["doc"])
    with pytest.raises(ValidationError):
        StructuringAgent(llm=llm).structure(_draft(raw_text="  "))
    assert llm.calls == []
