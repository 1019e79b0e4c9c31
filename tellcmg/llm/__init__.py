"""
LLM Provider modules for the TellCMG idea assistant.

Supports hosted providers:
- OpenRouter (primary, OpenAI-compatible API)
- Groq (alternative)
"""

from .base import LLMProvider, LLMResponse, LLMConfig, Message, ProviderStatus
from .factory import LLMPurpose, create_llm_provider

__all__ = [
    "LLMProvider",
    "LLMResponse",
    "LLMConfig",
    "Message",
    "ProviderStatus",
    "LLMPurpose",
    "create_llm_provider",
]
