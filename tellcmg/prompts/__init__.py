"""
Prompt templates and request assembly for the TellCMG idea assistant.
"""

from .assembler import (
    PromptAssembler,
    ATTACHMENT_CHAR_LIMIT,
    URL_REFERENCE_CHAR_LIMIT,
)
from .idea_prompts import (
    STRUCTURING_SYSTEM_PROMPT,
    INTERVIEW_NEW_SYSTEM_PROMPT,
    INTERVIEW_ENHANCE_SYSTEM_PROMPT,
    detail_instruction,
    format_instruction,
)

__all__ = [
    "PromptAssembler",
    "ATTACHMENT_CHAR_LIMIT",
    "URL_REFERENCE_CHAR_LIMIT",
    "STRUCTURING_SYSTEM_PROMPT",
    "INTERVIEW_NEW_SYSTEM_PROMPT",
    "INTERVIEW_ENHANCE_SYSTEM_PROMPT",
    "detail_instruction",
    "format_instruction",
]
