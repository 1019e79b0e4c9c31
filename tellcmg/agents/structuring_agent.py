"""
One-shot structuring flow.

Assembles the instruction document for a draft, sends it to the model once,
and returns the generated submission verbatim. With no model configured the
fallback generator produces the submission instead.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from ..errors import LLMServiceError
from ..llm.base import LLMProvider
from ..prompts.assembler import PromptAssembler
from ..schemas.idea import IdeaDraft
from .fallback_generator import FallbackGenerator

logger = logging.getLogger(__name__)


@dataclass
class StructuringResult:
    document: str
    used_fallback: bool = False
    provider: Optional[str] = None


class StructuringAgent:
    """Turns a raw idea draft into a structured submission."""

    def __init__(
        self,
        llm: Optional[LLMProvider] = None,
        assembler: Optional[PromptAssembler] = None,
        fallback: Optional[FallbackGenerator] = None,
    ):
        self.llm = llm
        self.assembler = assembler or PromptAssembler()
        self.fallback = fallback or FallbackGenerator()

    def structure(self, draft: IdeaDraft) -> StructuringResult:
        """
        Structure one draft.

        Raises:
            ValidationError: the idea text is empty
            LLMServiceError: the model call failed or returned nothing
        """
        draft.validate()

        if self.llm is None:
            logger.info("No model configured; using fallback generator")
            return StructuringResult(document=self.fallback.generate(draft), used_fallback=True)

        messages = self.assembler.messages(draft)
        try:
            text = self.llm.generate(messages)
        except Exception as e:
            logger.error("Structuring call to %s failed: %s", self.llm.name, e)
            raise LLMServiceError(str(e)) from e

        if not text or not text.strip():
            logger.error("Structuring call to %s returned an empty document", self.llm.name)
            raise LLMServiceError("Model returned an empty document")

        return StructuringResult(document=text, provider=self.llm.name)
