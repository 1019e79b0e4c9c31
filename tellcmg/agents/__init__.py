"""
Agent modules for the TellCMG idea assistant.
"""

from .fallback_generator import FallbackGenerator
from .interview_dialogue import (
    InterviewDialogue,
    InterviewMode,
    DialogueStage,
    DialogueReply,
    Complete,
    MidDialogue,
    QUESTION_THRESHOLD,
    parse_completion,
)
from .structuring_agent import StructuringAgent, StructuringResult

__all__ = [
    "FallbackGenerator",
    "InterviewDialogue",
    "InterviewMode",
    "DialogueStage",
    "DialogueReply",
    "Complete",
    "MidDialogue",
    "QUESTION_THRESHOLD",
    "parse_completion",
    "StructuringAgent",
    "StructuringResult",
]
