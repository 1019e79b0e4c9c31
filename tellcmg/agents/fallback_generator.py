"""
Fallback Generator

Produces a presentable idea submission without calling a model. This is the
only output a deployment without an LLM credential ever shows, so it is a
finished document, not a placeholder. Output is a pure function of the input.
"""

from typing import Optional, Sequence

from ..prompts.idea_prompts import detail_instruction
from ..schemas.catalog import CATEGORY_CATALOG, MODIFIER_CATALOG, CategoryCatalog, ModifierCatalog
from ..schemas.idea import IdeaDraft


UNKNOWN_CATEGORY_FOCUS = "improving CMG processes"
NO_CATEGORY_FOCUS = "improving CMG tools and processes"

EVALUATION_CRITERIA = (
    "- Problem/opportunity clearly stated\n"
    "- Solution is specific and actionable\n"
    "- Benefits quantified where possible"
)


class FallbackGenerator:
    """Deterministic templated submissions for the structuring and interview flows."""

    def __init__(
        self,
        categories: CategoryCatalog = CATEGORY_CATALOG,
        modifiers: ModifierCatalog = MODIFIER_CATALOG,
    ):
        self.categories = categories
        self.modifiers = modifiers

    def title_for(self, category_ids: Sequence[str]) -> str:
        if not category_ids:
            return "General"
        return self.categories.label_of(category_ids[0])

    def focus_for(self, category_ids: Sequence[str]) -> str:
        if not category_ids:
            return NO_CATEGORY_FOCUS
        phrases = []
        for cid in category_ids:
            category = self.categories.get(cid)
            phrases.append(category.description if category else UNKNOWN_CATEGORY_FOCUS)
        return "; ".join(phrases)

    def generate(self, draft: IdeaDraft) -> str:
        """Render a markdown submission for a one-shot structuring request."""
        draft.validate()

        doc = (
            f"# {self.title_for(draft.categories)} Idea\n\n"
            f"## Overview\n{draft.raw_text}\n\n"
            f"## Category\nFocused on {self.focus_for(draft.categories)}.\n\n"
        )
        if draft.context:
            doc += f"## Context\n{draft.context}\n\n"
        doc += f"## Detail Level\n{detail_instruction(draft.detail_level)}\n\n"

        requirements = self.modifiers.instructions(draft.modifiers)
        if requirements:
            doc += "## Requirements\n- " + "\n- ".join(requirements) + "\n\n"
        doc += "## Evaluation Criteria\n" + EVALUATION_CRITERIA
        return doc

    def merge_interview(
        self,
        answers: Sequence[str],
        original_idea: Optional[str] = None,
        category: Optional[str] = None,
        base_draft_text: Optional[str] = None,
    ) -> str:
        """
        Merge interview answers into a finished document.

        With a base document the answers are appended to it unchanged;
        otherwise a new submission is laid out around the original idea.
        """
        answer_lines = "\n- ".join(a.strip() for a in answers if a.strip())
        answer_lines = answer_lines or "No additional context provided"

        if base_draft_text and base_draft_text.strip():
            return f"{base_draft_text.strip()}\n\n## Additional Details from Interview\n- {answer_lines}"

        category_ids = [c.strip() for c in (category or "").split(",") if c.strip()]
        label = " + ".join(self.categories.label_of(c) for c in category_ids) or "General Improvement"
        description = (original_idea or "").strip() or (answers[0].strip() if answers else "") or "Idea submission"

        return (
            f"## Idea Category\n{label}\n\n"
            f"## Idea Description\n{description}\n\n"
            f"## Additional Context from Interview\n- {answer_lines}\n\n"
            "## Expected Benefits\n"
            "Please evaluate this idea for potential impact on efficiency, "
            "borrower experience, and business growth."
        )
