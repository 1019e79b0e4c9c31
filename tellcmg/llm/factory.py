"""
LLM provider selection.

Picks the hosted model service from settings. Returns ``None`` when no
credential is configured so callers can switch to the deterministic
fallback generator instead.
"""

import logging
from enum import Enum
from typing import Optional

from ..config import LLMSettings
from .base import LLMProvider

logger = logging.getLogger(__name__)


class LLMPurpose(str, Enum):
    """What a provider instance will be used for."""
    STRUCTURING = "structuring"
    INTERVIEW = "interview"


# Per-purpose sampling settings
PURPOSE_LIMITS = {
    LLMPurpose.STRUCTURING: {"temperature": 0.7, "max_tokens": 2000},
    LLMPurpose.INTERVIEW: {"temperature": 0.7, "max_tokens": 1000},
}

PROVIDER_PRIORITY = ["openrouter", "groq"]


def _select_provider_name(settings: LLMSettings) -> Optional[str]:
    if settings.provider == "none":
        return None
    if settings.provider != "auto":
        return settings.provider if settings.is_configured else None
    for name in PROVIDER_PRIORITY:
        if name == "openrouter" and settings.openrouter_api_key:
            return name
        if name == "groq" and settings.groq_api_key:
            return name
    return None


def create_llm_provider(
    settings: LLMSettings,
    purpose: LLMPurpose = LLMPurpose.STRUCTURING,
) -> Optional[LLMProvider]:
    """
    Build the provider for a purpose, or None when unconfigured.

    Args:
        settings: LLM section of the application settings
        purpose: Structuring or interview; selects model and token limits

    Returns:
        A ready provider, or None if no credential is available
    """
    name = _select_provider_name(settings)
    limits = dict(PURPOSE_LIMITS[purpose], timeout=settings.timeout)

    if name == "openrouter":
        from .openrouter_provider import OpenRouterProvider

        model = (
            settings.interview_model if purpose == LLMPurpose.INTERVIEW
            else settings.structure_model
        )
        provider = OpenRouterProvider(
            api_key=settings.openrouter_api_key,
            model=model,
            base_url=settings.openrouter_base_url,
            **limits
        )
    elif name == "groq":
        from .groq_provider import GroqProvider

        provider = GroqProvider(api_key=settings.groq_api_key, model=settings.groq_model, **limits)
    else:
        logger.info("No LLM credential configured; %s will use the fallback generator", purpose.value)
        return None

    logger.debug("Using %s (%s) for %s", provider.name, provider.model, purpose.value)
    return provider
