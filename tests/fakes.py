"""
Test doubles for the model service and the mail transport.
"""

import threading
from typing import List, Optional

from tellcmg.llm.base import LLMConfig, LLMProvider, LLMResponse, Message
from tellcmg.mail.base import MailMessage, MailTransport


class ScriptedLLM(LLMProvider):
    """Replies from a fixed list; raises ``error`` instead when given one."""

    def __init__(self, replies: Optional[List[str]] = None, error: Optional[Exception] = None):
        super().__init__(LLMConfig(provider_name="fake", model="fake-model"))
        self.replies = list(replies or [])
        self.error = error
        self.calls: List[List[Message]] = []

    def is_available(self) -> bool:
        return True

    def chat(self, messages, temperature=None, max_tokens=None, **kwargs) -> LLMResponse:
        self.calls.append(list(messages))
        if self.error is not None:
            raise self.error
        content = self.replies.pop(0) if self.replies else ""
        return LLMResponse(content=content, model="fake-model", provider="fake")


class BlockingLLM(ScriptedLLM):
    """Blocks inside chat() until ``release`` is set."""

    def __init__(self, reply: str = "late reply"):
        super().__init__(replies=[reply])
        self.started = threading.Event()
        self.release = threading.Event()

    def chat(self, messages, temperature=None, max_tokens=None, **kwargs) -> LLMResponse:
        self.started.set()
        self.release.wait(5)
        return super().chat(messages, temperature, max_tokens, **kwargs)


class RecordingTransport(MailTransport):
    """Collects messages instead of sending them."""

    def __init__(self, configured: bool = True, error: Optional[Exception] = None):
        self.configured = configured
        self.error = error
        self.sent: List[MailMessage] = []

    @property
    def is_configured(self) -> bool:
        return self.configured

    def send(self, message: MailMessage) -> None:
        if self.error is not None:
            raise self.error
        self.sent.append(message)
