"""
Interview Dialogue for idea refinement

A short turn-based conversation that helps a loan officer flesh out an idea
before it is structured. The assistant asks one clarifying question per turn;
once it has asked QUESTION_THRESHOLD times it asks the model to merge the
conversation into a finished submission wrapped in completion markers.

Stages:
    START -> QUESTIONING -> COMPLETING -> DONE

Two modes select the interviewer's instructions:
- new_idea: ask about problem, impact, stakeholders, outcome, frequency
- enhance_existing: a submission already exists; ask what to add or change
  and merge the answers into it without throwing the original away

Without a model (or when the model call fails) the dialogue runs a scripted
question sequence and a templated merge, so it always reaches DONE.

Usage:
    dialogue = InterviewDialogue(llm=provider, original_idea="Add e-sign")
    print(dialogue.start().message)
    reply = dialogue.answer("Borrowers wait days for wet signatures")
"""

import logging
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Optional, Union

from ..errors import DialogueFinishedError
from ..llm.base import LLMProvider, Message
from ..prompts.idea_prompts import (
    INTERVIEW_ENHANCE_SYSTEM_PROMPT,
    INTERVIEW_NEW_SYSTEM_PROMPT,
    create_completion_instruction,
    create_interview_context,
    create_start_instruction,
)
from ..schemas.idea import COMPLETE_CLOSE, COMPLETE_OPEN
from .fallback_generator import FallbackGenerator

logger = logging.getLogger(__name__)


# Assistant turns (greeting included) before the final document is requested
QUESTION_THRESHOLD = 2

_COMPLETE_PATTERN = re.compile(
    re.escape(COMPLETE_OPEN) + r"([\s\S]*?)" + re.escape(COMPLETE_CLOSE)
)

NEW_IDEA_QUESTIONS = [
    "Which teams or systems would this affect the most?",
    "What does success look like? How would you measure the improvement?",
    "Is there anything else leadership should know about this idea?",
]

ENHANCE_QUESTIONS = [
    "What specific section would you like to expand or modify?",
    "Are there any edge cases or scenarios you want to add?",
    "Should we adjust the priority or scope of any part?",
]


class InterviewMode(str, Enum):
    NEW_IDEA = "new_idea"
    ENHANCE_EXISTING = "enhance_existing"


class DialogueStage(str, Enum):
    START = "start"
    QUESTIONING = "questioning"
    COMPLETING = "completing"
    DONE = "done"


class Speaker(str, Enum):
    ASSISTANT = "assistant"
    USER = "user"


@dataclass
class Turn:
    speaker: Speaker
    text: str

    def to_message(self) -> Message:
        return Message(role=self.speaker.value, content=self.text)

    def to_dict(self) -> dict:
        return {"role": self.speaker.value, "content": self.text}


@dataclass
class InterviewState:
    """Everything the dialogue knows about one interview."""
    mode: InterviewMode
    turn_log: list[Turn] = field(default_factory=list)
    base_draft_text: Optional[str] = None
    original_idea: Optional[str] = None
    category: Optional[str] = None
    stage: DialogueStage = DialogueStage.START
    final_document: Optional[str] = None

    @property
    def assistant_turns(self) -> int:
        return sum(1 for t in self.turn_log if t.speaker == Speaker.ASSISTANT)

    @property
    def user_answers(self) -> list[str]:
        return [t.text for t in self.turn_log if t.speaker == Speaker.USER]


# ---------------------------------------------------------------------------
# Completion parsing
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class MidDialogue:
    """The model replied with an ordinary conversational message."""
    text: str


@dataclass(frozen=True)
class Complete:
    """The model emitted a finished document between the markers."""
    document: str


ParsedReply = Union[MidDialogue, Complete]


def strip_markers(text: str) -> str:
    return text.replace(COMPLETE_OPEN, "").replace(COMPLETE_CLOSE, "").strip()


def parse_completion(text: str) -> ParsedReply:
    """
    Look for the first ``[COMPLETE] ... [/COMPLETE]`` block.

    The capture is non-greedy, so only the text up to the first closing
    marker counts. Stray markers inside the capture (a repeated opening
    marker, say) are dropped. A missing pair, or a pair around nothing but
    whitespace, leaves the reply as an ordinary message.
    """
    match = _COMPLETE_PATTERN.search(text or "")
    if match:
        document = strip_markers(match.group(1))
        if document:
            return Complete(document=document)
    return MidDialogue(text=text or "")


@dataclass
class DialogueReply:
    """What one dialogue step hands back to the caller."""
    message: Optional[str] = None
    final_document: Optional[str] = None
    used_fallback: bool = False

    @property
    def is_complete(self) -> bool:
        return self.final_document is not None

    def to_dict(self) -> dict:
        if self.is_complete:
            return {"isComplete": True, "finalPrompt": self.final_document}
        return {"message": self.message}


# ---------------------------------------------------------------------------
# Dialogue
# ---------------------------------------------------------------------------

class InterviewDialogue:
    """Turn-based interview that ends with a finished idea submission."""

    def __init__(
        self,
        llm: Optional[LLMProvider] = None,
        original_idea: Optional[str] = None,
        category: Optional[str] = None,
        base_draft_text: Optional[str] = None,
        fallback: Optional[FallbackGenerator] = None,
        question_threshold: int = QUESTION_THRESHOLD,
    ):
        base = (base_draft_text or "").strip() or None
        self.llm = llm
        self.fallback = fallback or FallbackGenerator()
        self.question_threshold = question_threshold
        self.state = InterviewState(
            mode=InterviewMode.ENHANCE_EXISTING if base else InterviewMode.NEW_IDEA,
            base_draft_text=base,
            original_idea=(original_idea or "").strip() or None,
            category=(category or "").strip() or None,
        )

    @classmethod
    def restore(
        cls,
        messages: Iterable[dict],
        llm: Optional[LLMProvider] = None,
        original_idea: Optional[str] = None,
        category: Optional[str] = None,
        base_draft_text: Optional[str] = None,
        **kwargs
    ) -> "InterviewDialogue":
        """Rebuild a dialogue from a client-held ``[{role, content}]`` list."""
        dialogue = cls(
            llm=llm,
            original_idea=original_idea,
            category=category,
            base_draft_text=base_draft_text,
            **kwargs
        )
        for msg in messages or []:
            if not isinstance(msg, dict):
                continue
            role = msg.get("role")
            content = str(msg.get("content") or "")
            if role in (Speaker.ASSISTANT.value, Speaker.USER.value) and content.strip():
                dialogue.state.turn_log.append(Turn(Speaker(role), content))
        if dialogue.state.turn_log:
            dialogue.state.stage = DialogueStage.QUESTIONING
        return dialogue

    # -- properties ---------------------------------------------------------

    @property
    def mode(self) -> InterviewMode:
        return self.state.mode

    @property
    def stage(self) -> DialogueStage:
        return self.state.stage

    @property
    def is_done(self) -> bool:
        return self.state.stage == DialogueStage.DONE

    @property
    def final_document(self) -> Optional[str]:
        return self.state.final_document

    @property
    def has_base_draft(self) -> bool:
        return self.state.base_draft_text is not None

    @property
    def system_prompt(self) -> str:
        if self.mode == InterviewMode.ENHANCE_EXISTING:
            return INTERVIEW_ENHANCE_SYSTEM_PROMPT
        return INTERVIEW_NEW_SYSTEM_PROMPT

    # -- steps --------------------------------------------------------------

    def start(self) -> DialogueReply:
        """Emit the opening assistant message."""
        self._ensure_open()
        if self.state.stage != DialogueStage.START:
            raise DialogueFinishedError("Interview already started")

        instruction = create_start_instruction(self.has_base_draft, bool(self.state.original_idea))
        text = self._ask_llm([
            Message(role="system", content=self.system_prompt),
            Message(role="user", content=f"{self._context()}\n\n{instruction}"),
        ])
        used_fallback = text is None
        if used_fallback:
            text = self._scripted_greeting()

        self._say(text)
        self.state.stage = DialogueStage.QUESTIONING
        return DialogueReply(message=text, used_fallback=used_fallback)

    def answer(self, text: str) -> DialogueReply:
        """Record the user's answer and take the next step."""
        self._ensure_open()
        if self.state.stage == DialogueStage.START:
            self.start()
        self.state.turn_log.append(Turn(Speaker.USER, text))
        return self.advance()

    def advance(self) -> DialogueReply:
        """Ask one more question, or request the final document at the threshold."""
        self._ensure_open()
        if self.state.assistant_turns >= self.question_threshold:
            return self.complete()

        reply = self._ask_llm(self._conversation())
        if reply is None:
            question = self._scripted_question()
            self._say(question)
            self.state.stage = DialogueStage.QUESTIONING
            return DialogueReply(message=question, used_fallback=True)

        parsed = parse_completion(reply)
        if isinstance(parsed, Complete):
            return self._finish(parsed.document)
        self._say(parsed.text)
        self.state.stage = DialogueStage.QUESTIONING
        return DialogueReply(message=parsed.text)

    def complete(self) -> DialogueReply:
        """Ask for the merged document. A reply without markers stays mid-dialogue."""
        self._ensure_open()
        self.state.stage = DialogueStage.COMPLETING

        messages = self._conversation()
        messages.append(Message(
            role="user",
            content=create_completion_instruction(self.has_base_draft),
        ))
        reply = self._ask_llm(messages)
        if reply is None:
            document = self.fallback.merge_interview(
                self.state.user_answers,
                original_idea=self.state.original_idea,
                category=self.state.category,
                base_draft_text=self.state.base_draft_text,
            )
            return self._finish(document, used_fallback=True)

        parsed = parse_completion(reply)
        if isinstance(parsed, Complete):
            return self._finish(parsed.document)

        logger.warning("Completion reply had no %s block; continuing the interview", COMPLETE_OPEN)
        self._say(parsed.text)
        self.state.stage = DialogueStage.QUESTIONING
        return DialogueReply(message=parsed.text)

    # -- internals ----------------------------------------------------------

    def _ensure_open(self) -> None:
        if self.is_done:
            raise DialogueFinishedError()

    def _say(self, text: str) -> None:
        self.state.turn_log.append(Turn(Speaker.ASSISTANT, text))

    def _finish(self, document: str, used_fallback: bool = False) -> DialogueReply:
        # Answers merged by the fallback may quote the markers too
        document = strip_markers(document)
        self.state.final_document = document
        self.state.stage = DialogueStage.DONE
        return DialogueReply(final_document=document, used_fallback=used_fallback)

    def _context(self) -> str:
        return create_interview_context(
            self.state.original_idea or "",
            self.state.category,
            self.state.base_draft_text,
        )

    def _conversation(self) -> list[Message]:
        messages = [
            Message(role="system", content=self.system_prompt),
            Message(role="user", content=self._context()),
        ]
        messages.extend(t.to_message() for t in self.state.turn_log)
        return messages

    def _ask_llm(self, messages: list[Message]) -> Optional[str]:
        """Model reply text, or None when the scripted path should be used."""
        if self.llm is None:
            return None
        try:
            text = self.llm.generate(messages)
        except Exception as e:
            logger.warning("Interview model call failed, using scripted dialogue: %s", e)
            return None
        if not text or not text.strip():
            logger.warning("Interview model returned an empty reply, using scripted dialogue")
            return None
        return text.strip()

    def _scripted_greeting(self) -> str:
        if self.has_base_draft:
            return (
                "I see you already have an idea submission. Let me help you refine it!\n\n"
                "What would you like to add, change, or clarify?"
            )
        if not self.state.original_idea:
            return (
                "Welcome! I'm here to help you brainstorm and develop an idea for CMG.\n\n"
                "What's on your mind? Tell me about a challenge, pain point, or "
                "improvement you'd like to see."
            )
        topic = self.state.category.replace("-", " ").replace(",", ", ") if self.state.category else "improving our processes"
        return (
            f"Great idea about {topic}! Let me help you flesh it out.\n\n"
            "What specific problem or pain point does this solve for you or your borrowers?"
        )

    def _scripted_question(self) -> str:
        questions = ENHANCE_QUESTIONS if self.has_base_draft else NEW_IDEA_QUESTIONS
        index = min(self.state.assistant_turns, len(questions) - 1)
        return questions[index]
