"""
OpenRouter Provider for LLM operations.

OpenRouter exposes an OpenAI-compatible API, so this provider drives it with
the official OpenAI SDK pointed at a custom base URL.
"""

import logging
import os
from typing import List, Optional

from openai import OpenAI

from ..config import DEFAULT_OPENROUTER_BASE_URL, DEFAULT_STRUCTURE_MODEL
from ..errors import LLMNotConfiguredError
from .base import LLMConfig, LLMProvider, LLMResponse, Message, ProviderStatus

logger = logging.getLogger(__name__)


class OpenRouterProvider(LLMProvider):
    """OpenRouter provider using the OpenAI client."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: str = DEFAULT_STRUCTURE_MODEL,
        base_url: Optional[str] = None,
        **kwargs
    ):
        """
        Initialize OpenRouter provider.

        Args:
            api_key: OpenRouter API key (or set OPENROUTER_API_KEY env var)
            model: Model slug, e.g. anthropic/claude-opus-4
            base_url: Override the OpenRouter endpoint
            **kwargs: temperature, max_tokens, timeout
        """
        self.api_key = api_key or os.getenv("OPENROUTER_API_KEY")
        self.base_url = base_url or os.getenv("OPENROUTER_BASE_URL", DEFAULT_OPENROUTER_BASE_URL)

        config = LLMConfig(
            provider_name="openrouter",
            model=model,
            api_key=self.api_key,
            base_url=self.base_url,
            **kwargs
        )
        super().__init__(config)

        self._client: Optional[OpenAI] = None
        self._init_client()

    def _init_client(self):
        """Initialize the OpenAI client."""
        if not self.api_key:
            self._status = ProviderStatus.NOT_CONFIGURED
            return

        self._client = OpenAI(
            api_key=self.api_key,
            base_url=self.base_url,
            timeout=self.config.timeout,
            max_retries=0,
        )
        self._status = ProviderStatus.AVAILABLE

    def is_available(self) -> bool:
        """Check if OpenRouter is available and configured."""
        return self._client is not None and bool(self.api_key)

    def chat(
        self,
        messages: List[Message],
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
        **kwargs
    ) -> LLMResponse:
        """Send a chat completion request to OpenRouter."""
        if not self.is_available():
            raise LLMNotConfiguredError("OpenRouter provider is not available. Check OPENROUTER_API_KEY.")

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
            logger.error("OpenRouter request failed (model=%s): %s", self.config.model, e)
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
            provider="openrouter",
            usage=usage,
            finish_reason=response.choices[0].finish_reason or "stop",
        )
