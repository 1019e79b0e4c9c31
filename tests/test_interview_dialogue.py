"""
Tests for the interview dialogue state machine.

Runs with no model (scripted path) and with a scripted fake model.
"""

import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))
sys.path.insert(0, str(Path(__file__).parent))

from fakes import ScriptedLLM
from tellcmg.agents.interview_dialogue import (
    ENHANCE_QUESTIONS,
    NEW_IDEA_QUESTIONS,
    QUESTION_THRESHOLD,
    Complete,
    DialogueStage,
    InterviewDialogue,
    InterviewMode,
    MidDialogue,
    parse_completion,
)
from tellcmg.errors import DialogueFinishedError
from tellcmg.prompts.idea_prompts import INTERVIEW_ENHANCE_SYSTEM_PROMPT, INTERVIEW_NEW_SYSTEM_PROMPT


class TestParseCompletion:
    def test_plain_message(self):
        assert parse_completion("What else?") == MidDialogue(text="What else?")

    def test_marked_document(self):
        reply = "Thanks!\n[COMPLETE]\n# Idea\nBody\n[/COMPLETE]\nBye"
        assert parse_completion(reply) == Complete(document="# Idea\nBody")

    def test_first_block_only(self):
        reply = "[COMPLETE]one[/COMPLETE] [COMPLETE]two[/COMPLETE]"
        assert parse_completion(reply) == Complete(document="one")

    def test_empty_block_is_not_complete(self):
        assert isinstance(parse_completion("[COMPLETE]  [/COMPLETE]"), MidDialogue)

    def test_unclosed_block_is_not_complete(self):
        assert isinstance(parse_completion("[COMPLETE] half a document"), MidDialogue)

    def test_repeated_opening_marker_is_dropped(self):
        reply = "[COMPLETE]\n[COMPLETE]\n# Doc\n[/COMPLETE]"
        assert parse_completion(reply) == Complete(document="# Doc")

    def test_block_of_only_markers_is_not_complete(self):
        assert isinstance(parse_completion("[COMPLETE][COMPLETE] [/COMPLETE]"), MidDialogue)


class TestScriptedDialogue:
    def test_greeting_with_idea_and_category(self):
        dialogue = InterviewDialogue(original_idea="Auto reminders", category="doc-mgmt")
        reply = dialogue.start()

        assert reply.used_fallback
        assert reply.message.startswith("Great idea about doc mgmt!")
        assert dialogue.mode == InterviewMode.NEW_IDEA
        assert dialogue.stage == DialogueStage.QUESTIONING

    def test_greeting_without_idea(self):
        reply = InterviewDialogue().start()
        assert reply.message.startswith("Welcome!")

    def test_reaches_done_at_threshold(self):
        dialogue = InterviewDialogue(original_idea="Auto reminders", category="doc-mgmt")
        dialogue.start()

        second = dialogue.answer("Borrowers forget uploads")
        assert not second.is_complete
        assert second.message == NEW_IDEA_QUESTIONS[1]

        final = dialogue.answer("Processors and LOs")
        assert final.is_complete
        assert dialogue.is_done
        assert dialogue.state.assistant_turns == QUESTION_THRESHOLD
        assert "## Idea Category\nDoc Management" in final.final_document
        assert "- Borrowers forget uploads\n- Processors and LOs" in final.final_document

    def test_enhance_mode(self):
        base = "# Existing\n\nBody"
        dialogue = InterviewDialogue(base_draft_text=base)
        reply = dialogue.start()

        assert dialogue.mode == InterviewMode.ENHANCE_EXISTING
        assert dialogue.system_prompt == INTERVIEW_ENHANCE_SYSTEM_PROMPT
        assert reply.message.startswith("I see you already have an idea submission")

        assert dialogue.answer("Add a texting option").message == ENHANCE_QUESTIONS[1]
        final = dialogue.answer("High priority")
        assert final.final_document.startswith(base + "\n\n## Additional Details from Interview\n")

    def test_blank_base_draft_is_new_idea(self):
        dialogue = InterviewDialogue(base_draft_text="   ")
        assert dialogue.mode == InterviewMode.NEW_IDEA
        assert dialogue.system_prompt == INTERVIEW_NEW_SYSTEM_PROMPT

    def test_answers_quoting_markers_are_cleaned(self):
        dialogue = InterviewDialogue(original_idea="x")
        dialogue.start()
        assert not dialogue.answer("Wrap it in [COMPLETE] please").is_complete

        final = dialogue.complete()
        assert "[COMPLETE]" not in final.final_document
        assert "Wrap it in" in final.final_document

    def test_finished_dialogue_rejects_more_steps(self):
        dialogue = InterviewDialogue(original_idea="x")
        dialogue.start()
        dialogue.complete()

        with pytest.raises(DialogueFinishedError):
            dialogue.answer("one more thing")
        with pytest.raises(DialogueFinishedError):
            dialogue.complete()

    def test_start_twice_rejected(self):
        dialogue = InterviewDialogue(original_idea="x")
        dialogue.start()
        with pytest.raises(DialogueFinishedError):
            dialogue.start()


class TestModelDialogue:
    def test_full_conversation(self):
        llm = ScriptedLLM(replies=[
            "What problem does this solve?",
            "Who benefits most?",
            "Here you go:\n[COMPLETE]\n# Reminder Idea\nDetails\n[/COMPLETE]",
        ])
        dialogue = InterviewDialogue(llm=llm, original_idea="Auto reminders")

        assert dialogue.start().message == "What problem does this solve?"
        assert dialogue.answer("Missing docs").message == "Who benefits most?"
        final = dialogue.answer("Processors")

        assert final.is_complete
        assert not final.used_fallback
        assert final.final_document == "# Reminder Idea\nDetails"
        assert final.to_dict() == {"isComplete": True, "finalPrompt": "# Reminder Idea\nDetails"}

        completion_request = llm.calls[-1]
        assert completion_request[0].content == INTERVIEW_NEW_SYSTEM_PROMPT
        assert completion_request[-1].role == "user"
        assert "[COMPLETE]" in completion_request[-1].content

    def test_early_completion_accepted(self):
        llm = ScriptedLLM(replies=["Tell me more?", "[COMPLETE]Done early[/COMPLETE]"])
        dialogue = InterviewDialogue(llm=llm, original_idea="x")
        dialogue.start()

        reply = dialogue.answer("That's all")
        assert reply.final_document == "Done early"
        assert dialogue.is_done

    def test_repeated_marker_never_reaches_final_document(self):
        llm = ScriptedLLM(replies=["Q1", "[COMPLETE]\n[COMPLETE]\n# Doc\n[/COMPLETE]"])
        dialogue = InterviewDialogue(llm=llm, original_idea="x")
        dialogue.start()

        reply = dialogue.answer("a1")
        assert dialogue.stage == DialogueStage.DONE
        assert reply.final_document == "# Doc"

    def test_completion_without_markers_stays_open(self):
        llm = ScriptedLLM(replies=["Question?", "Here is your idea, no markers though."])
        dialogue = InterviewDialogue(llm=llm, original_idea="x")
        dialogue.start()

        reply = dialogue.complete()
        assert not reply.is_complete
        assert reply.message == "Here is your idea, no markers though."
        assert dialogue.stage == DialogueStage.QUESTIONING
        assert reply.to_dict() == {"message": "Here is your idea, no markers though."}

    def test_model_failure_uses_scripted_flow(self):
        llm = ScriptedLLM(error=RuntimeError("503 from upstream"))
        dialogue = InterviewDialogue(llm=llm, original_idea="Auto reminders")

        greeting = dialogue.start()
        assert greeting.used_fallback
        assert greeting.message.startswith("Great idea about improving our processes!")

        final = dialogue.complete()
        assert final.is_complete
        assert final.used_fallback
        assert "## Idea Description\nAuto reminders" in final.final_document

    def test_empty_model_reply_uses_scripted_question(self):
        llm = ScriptedLLM(replies=["Hi! What problem?", "   "])
        dialogue = InterviewDialogue(llm=llm, original_idea="x")
        dialogue.start()
        reply = dialogue.answer("Slow approvals")
        assert reply.message == NEW_IDEA_QUESTIONS[1]
        assert reply.used_fallback


class TestRestore:
    def test_restore_from_client_messages(self):
        messages = [
            {"role": "assistant", "content": "Q1"},
            {"role": "user", "content": "A1"},
            {"role": "system", "content": "ignored"},
            {"role": "assistant", "content": "Q2"},
            {"role": "user", "content": "A2"},
            "not a message",
        ]
        dialogue = InterviewDialogue.restore(messages, original_idea="x")

        assert dialogue.stage == DialogueStage.QUESTIONING
        assert dialogue.state.assistant_turns == 2
        assert dialogue.state.user_answers == ["A1", "A2"]

        reply = dialogue.advance()
        assert reply.is_complete
        assert "- A1\n- A2" in reply.final_document

    def test_restore_below_threshold_asks_next_question(self):
        dialogue = InterviewDialogue.restore(
            [{"role": "assistant", "content": "Q1"}, {"role": "user", "content": "A1"}],
            original_idea="x",
        )
        assert dialogue.advance().message == NEW_IDEA_QUESTIONS[1]

    def test_restore_with_nothing_starts_fresh(self):
        dialogue = InterviewDialogue.restore([])
        assert dialogue.stage == DialogueStage.START
