"""
Base classes for LLM providers.

The idea flows only need one capability from a model service:
``generate(messages) -> text``. Providers implement ``chat`` against their
SDK; ``generate`` is a thin convenience on top.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class ProviderStatus(str, Enum):
    """Status of an LLM provider."""
    AVAILABLE = "available"
    RATE_LIMITED = "rate_limited"
    ERROR = "error"
    NOT_CONFIGURED = "not_configured"


@dataclass
class LLMConfig:
    """Configuration for an LLM provider."""
    provider_name: str
    model: str
    api_key: Optional[str] = None
    base_url: Optional[str] = None
    temperature: float = 0.7
    max_tokens: int = 2000
    timeout: int = 60
    extra_params: Dict[str, Any] = field(default_factory=dict)


@dataclass
class Message:
    """A single message in a conversation."""
    role: str  # "system", "user", "assistant"
    content: str

    def to_dict(self) -> Dict[str, str]:
        return {"role": self.role, "content": self.content}


@dataclass
class LLMResponse:
    """Response from an LLM provider."""
    content: str
    model: str
    provider: str
    usage: Dict[str, int] = field(default_factory=dict)
    finish_reason: str = "stop"


class LLMProvider(ABC):
    """
    Abstract base class for LLM providers.

    Calls are single-shot: a failure is raised to the caller, never retried.
    """

    def __init__(self, config: LLMConfig):
        self.config = config
        self._status = ProviderStatus.NOT_CONFIGURED

    @property
    def name(self) -> str:
        """Provider name."""
        return self.config.provider_name

    @property
    def model(self) -> str:
        """Current model."""
        return self.config.model

    @property
    def status(self) -> ProviderStatus:
        """Current provider status."""
        return self._status

    @abstractmethod
    def is_available(self) -> bool:
        """Check if the provider is available and configured."""

    @abstractmethod
    def chat(
        self,
        messages: List[Message],
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
        **kwargs
    ) -> LLMResponse:
        """
        Send a chat completion request.

        Args:
            messages: List of conversation messages
            temperature: Override default temperature
            max_tokens: Override default max tokens
            **kwargs: Provider-specific parameters

        Returns:
            LLMResponse with the model's response
        """

    def generate(self, messages: List[Message], **kwargs) -> str:
        """Return only the text of the model's reply."""
        return self.chat(messages, **kwargs).content

    def _record_failure(self, error: Exception) -> None:
        error_str = str(error).lower()
        if "rate" in error_str or "429" in error_str or "quota" in error_str:
            self._status = ProviderStatus.RATE_LIMITED
        else:
            self._status = ProviderStatus.ERROR
