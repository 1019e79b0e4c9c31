"""
Groq LLM Provider.

Alternative hosted model service for deployments without an OpenRouter key.
Sign up at: https://console.groq.com
"""

import logging
import os
from typing import List, Optional

from groq import Groq

from ..config import DEFAULT_GROQ_MODEL
from ..errors import LLMNotConfiguredError
from .base import LLMConfig, LLMProvider, LLMResponse, Message, ProviderStatus

logger = logging.getLogger(__name__)


class GroqProvider(LLMProvider):
    """Groq LLM provider using their Python SDK."""

    DEFAULT_MODEL = DEFAULT_GROQ_MODEL

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: str = DEFAULT_MODEL,
        **kwargs
    ):
        """
        Initialize Groq provider.

        Args:
            api_key: Groq API key (or set GROQ_API_KEY env var)
            model: Model to use (default: llama-3.3-70b-versatile)
            **kwargs: temperature, max_tokens, timeout
        """
        self.api_key = api_key or os.environ.get("GROQ_API_KEY")

        config = LLMConfig(
            provider_name="groq",
            model=model,
            api_key=self.api_key,
            base_url="https://api.groq.com/openai/v1",
            **kwargs
        )
        super().__init__(config)

        self._client: Optional[Groq] = None
        if self.api_key:
            self._client = Groq(api_key=self.api_key, timeout=self.config.timeout, max_retries=0)
            self._status = ProviderStatus.AVAILABLE

    def is_available(self) -> bool:
        """Check if Groq is available."""
        return self._client is not None

    def chat(
        self,
        messages: List[Message],
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
        **kwargs
    ) -> LLMResponse:
        """Send a chat completion request to Groq."""
        if not self.is_available():
            raise LLMNotConfiguredError(
                "Groq not available. Set GROQ_API_KEY environment variable.\n"
                "Get your free API key at: https://console.groq.com"
            )

        try:
            response = self._client.chat.completions.create(
                model=self.config.model,
                messages=[m.to_dict() for m in messages],
                temperature=temperature if temperature is not None else self.config.temperature,
                max_tokens=max_tokens or self.config.max_tokens,
                **kwargs
            )
        except Exception as e:
            self._record_failure(e)
            logger.error("Groq request failed (model=%s): %s", self.config.model, e)
            raise

        usage = {}
        if response.usage:
            usage = {
                "prompt_tokens": response.usage.prompt_tokens,
                "completion_tokens": response.usage.completion_tokens,
                "total_tokens": response.usage.total_tokens,
            }

        return LLMResponse(
            content=response.choices[0].message.content or "",
            model=response.model or self.config.model,
            provider="groq",
            usage=usage,
            finish_reason=response.choices[0].finish_reason or "stop",
        )
