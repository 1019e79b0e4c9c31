"""
Idea Draft and History Schema

The draft is what a loan officer is composing (spoken or typed idea plus the
options they picked). A history entry is what is kept once a draft has been
turned into a finished submission.
"""

from __future__ import annotations

import time
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

from ..errors import ValidationError


COMPLETE_OPEN = "[COMPLETE]"
COMPLETE_CLOSE = "[/COMPLETE]"


class DetailLevel(str, Enum):
    CONCISE = "concise"
    BALANCED = "balanced"
    COMPREHENSIVE = "comprehensive"

    @classmethod
    def from_string(cls, value: Optional[str]) -> "DetailLevel":
        """Unknown or missing values mean balanced."""
        normalized = str(value or "").strip().lower()
        for candidate in cls:
            if candidate.value == normalized:
                return candidate
        return cls.BALANCED


class OutputFormat(str, Enum):
    STRUCTURED = "structured"
    CONVERSATIONAL = "conversational"
    BULLET_POINTS = "bullet-points"

    @classmethod
    def from_string(cls, value: Optional[str]) -> "OutputFormat":
        """Unknown or missing values mean structured."""
        normalized = str(value or "").strip().lower().replace("_", "-")
        if normalized in ("bulleted", "bullets", "bullet"):
            return cls.BULLET_POINTS
        for candidate in cls:
            if candidate.value == normalized:
                return candidate
        return cls.STRUCTURED


@dataclass(frozen=True)
class Attachment:
    """A text file the user attached as supporting context."""
    name: str
    content: str

    @classmethod
    def from_dict(cls, data: dict) -> "Attachment":
        return cls(
            name=str(data.get("name") or "attachment"),
            content=str(data.get("content") or data.get("textContent") or ""),
        )


@dataclass(frozen=True)
class UrlReference:
    """A web page or document the user referenced by URL."""
    title: str
    url: str
    content: str
    kind: str = "webpage"

    @classmethod
    def from_dict(cls, data: dict) -> "UrlReference":
        url = str(data.get("url") or "")
        return cls(
            title=str(data.get("title") or url or "Reference"),
            url=url,
            content=str(data.get("content") or data.get("textContent") or ""),
            kind=str(data.get("type") or data.get("kind") or "webpage"),
        )


def _string_list(value: Any) -> list[str]:
    """Normalize a list-ish payload field into unique, non-empty strings."""
    if value is None:
        return []
    if isinstance(value, str):
        items = value.split(",")
    elif isinstance(value, (list, tuple, set)):
        items = list(value)
    else:
        return []
    seen: list[str] = []
    for item in items:
        text = str(item).strip()
        if text and text not in seen:
            seen.append(text)
    return seen


def _dict_list(value: Any) -> list[dict]:
    if not isinstance(value, (list, tuple)):
        return []
    return [item for item in value if isinstance(item, dict)]


def category_tag_of(value: Any) -> str:
    """Comma-joined tag from a category string or list."""
    return ",".join(_string_list(value))


@dataclass
class IdeaDraft:
    """Everything the user has composed for one idea."""
    raw_text: str
    categories: list[str] = field(default_factory=list)
    detail_level: DetailLevel = DetailLevel.BALANCED
    output_format: OutputFormat = OutputFormat.STRUCTURED
    modifiers: list[str] = field(default_factory=list)
    context: str = ""
    attachments: list[Attachment] = field(default_factory=list)
    url_references: list[UrlReference] = field(default_factory=list)

    @property
    def text(self) -> str:
        return self.raw_text.strip()

    @property
    def category_tag(self) -> str:
        """Comma-joined category ids, as stored on history entries."""
        return ",".join(self.categories)

    def validate(self) -> None:
        if not self.text:
            raise ValidationError("No idea text provided")

    @classmethod
    def from_payload(cls, data: dict) -> "IdeaDraft":
        """
        Build a draft from a structuring request body.

        Accepts ``categories``, the older ``modes`` list, and the legacy single
        ``mode`` string, in that order of preference.
        """
        if data.get("categories") is not None:
            categories = _string_list(data.get("categories"))
        elif data.get("modes") is not None:
            categories = _string_list(data.get("modes"))
        else:
            categories = _string_list(data.get("mode"))

        return cls(
            raw_text=str(data.get("transcript") or ""),
            categories=categories,
            detail_level=DetailLevel.from_string(data.get("detailLevel")),
            output_format=OutputFormat.from_string(data.get("outputFormat")),
            modifiers=_string_list(data.get("modifiers")),
            context=str(data.get("contextInfo") or ""),
            attachments=[
                Attachment.from_dict(a) for a in _dict_list(data.get("attachments"))
            ],
            url_references=[
                UrlReference.from_dict(r) for r in _dict_list(data.get("urlReferences"))
            ],
        )


def _new_entry_id() -> str:
    return f"{int(time.time() * 1000)}-{uuid.uuid4().hex[:6]}"


@dataclass(frozen=True)
class HistoryEntry:
    """A finished submission kept in the local history."""
    raw_text: str
    final_document: str
    category_tag: str = ""
    id: str = field(default_factory=_new_entry_id)
    created_at: int = field(default_factory=lambda: int(time.time() * 1000))

    def __post_init__(self):
        document = self.final_document.strip()
        if not document:
            raise ValidationError("History entries need a finished document")
        if COMPLETE_OPEN in document or COMPLETE_CLOSE in document:
            raise ValidationError("Document still contains completion markers")

    @property
    def categories(self) -> list[str]:
        return _string_list(self.category_tag)

    def to_dict(self) -> dict:
        """Serialize with the same keys the browser client stores."""
        return {
            "id": self.id,
            "timestamp": self.created_at,
            "transcript": self.raw_text,
            "prompt": self.final_document,
            "mode": self.category_tag,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "HistoryEntry":
        return cls(
            id=str(data["id"]),
            created_at=int(data.get("timestamp") or data.get("created_at") or 0),
            raw_text=str(data.get("transcript") or data.get("raw_text") or ""),
            final_document=str(data.get("prompt") or data.get("final_document") or ""),
            category_tag=str(data.get("mode") or data.get("category_tag") or ""),
        )
