"""
Prompt Assembler

Serializes an IdeaDraft into the single instruction document sent to the
model for one-shot structuring. Section order is fixed:

    IDEA, CATEGORIES, DETAIL, FORMAT, CONTEXT, ATTACHED FILES,
    REFERENCED URLS, REQUIREMENTS

Attachments and URL references are truncated silently so a pasted document
can never blow up the request size.
"""

from ..llm.base import Message
from ..schemas.catalog import CATEGORY_CATALOG, MODIFIER_CATALOG, CategoryCatalog, ModifierCatalog
from ..schemas.idea import IdeaDraft
from .idea_prompts import STRUCTURING_SYSTEM_PROMPT, detail_instruction, format_instruction


ATTACHMENT_CHAR_LIMIT = 10_000
URL_REFERENCE_CHAR_LIMIT = 15_000

NO_CATEGORY_PHRASE = "general improvement idea"


class PromptAssembler:
    """Builds the structuring request for an idea draft."""

    def __init__(
        self,
        categories: CategoryCatalog = CATEGORY_CATALOG,
        modifiers: ModifierCatalog = MODIFIER_CATALOG,
        system_prompt: str = STRUCTURING_SYSTEM_PROMPT,
    ):
        self.categories = categories
        self.modifiers = modifiers
        self.system_prompt = system_prompt

    def category_line(self, draft: IdeaDraft) -> str:
        if not draft.categories:
            return NO_CATEGORY_PHRASE
        return " + ".join(
            f"{c} ({self.categories.describe(c)})" for c in draft.categories
        )

    def attachment_section(self, draft: IdeaDraft) -> str:
        if not draft.attachments:
            return ""
        blocks = [
            f"--- {a.name} ---\n{a.content[:ATTACHMENT_CHAR_LIMIT]}\n"
            for a in draft.attachments
        ]
        return "\n\nATTACHED FILES:\n" + "\n".join(blocks)

    def url_section(self, draft: IdeaDraft) -> str:
        if not draft.url_references:
            return ""
        blocks = [
            f"--- {r.title} ({r.url}) ---\n{r.content[:URL_REFERENCE_CHAR_LIMIT]}\n"
            for r in draft.url_references
        ]
        return "\n\nREFERENCED URLS:\n" + "\n".join(blocks)

    def requirements_section(self, draft: IdeaDraft) -> str:
        phrases = self.modifiers.instructions(draft.modifiers)
        if not phrases:
            return ""
        return "\nREQUIREMENTS:\n- " + "\n- ".join(phrases)

    def assemble(self, draft: IdeaDraft) -> str:
        """Render the user instruction. Raises ValidationError on empty idea text."""
        draft.validate()

        context = f"\nCONTEXT: {draft.context}\n" if draft.context else ""
        return (
            "Transform this loan officer's idea into a structured submission:\n\n"
            f'IDEA: "{draft.raw_text}"\n\n'
            f"CATEGORIES: {self.category_line(draft)}\n\n"
            f"DETAIL: {detail_instruction(draft.detail_level)}\n"
            f"FORMAT: {format_instruction(draft.output_format)}\n"
            + context
            + self.attachment_section(draft)
            + self.url_section(draft)
            + self.requirements_section(draft)
            + "\n\nGenerate a detailed, well-structured idea submission."
        )

    def messages(self, draft: IdeaDraft) -> list[Message]:
        return [
            Message(role="system", content=self.system_prompt),
            Message(role="user", content=self.assemble(draft)),
        ]
