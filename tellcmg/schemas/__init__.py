"""
Schema definitions for the TellCMG idea assistant.
"""

from .catalog import (
    Category,
    CategoryCatalog,
    CategoryGroup,
    Modifier,
    ModifierCatalog,
    CATEGORY_CATALOG,
    MODIFIER_CATALOG,
    derive_label,
)
from .idea import (
    Attachment,
    DetailLevel,
    HistoryEntry,
    IdeaDraft,
    OutputFormat,
    UrlReference,
    COMPLETE_OPEN,
    COMPLETE_CLOSE,
)

__all__ = [
    "Category",
    "CategoryCatalog",
    "CategoryGroup",
    "Modifier",
    "ModifierCatalog",
    "CATEGORY_CATALOG",
    "MODIFIER_CATALOG",
    "derive_label",
    "Attachment",
    "DetailLevel",
    "HistoryEntry",
    "IdeaDraft",
    "OutputFormat",
    "UrlReference",
    "COMPLETE_OPEN",
    "COMPLETE_CLOSE",
]
