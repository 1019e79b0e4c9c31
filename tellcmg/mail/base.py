"""
Mail transport interface.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Dict, Optional


@dataclass
class MailMessage:
    """A rendered email ready for delivery."""
    to: str
    subject: str
    text: str
    html: str
    sender_name: str = "TellCMG"
    reply_to: Optional[str] = None
    headers: Dict[str, str] = field(default_factory=dict)


class MailTransport(ABC):
    """Delivers rendered messages. ``send`` raises on failure."""

    @property
    @abstractmethod
    def is_configured(self) -> bool:
        """True when credentials are present."""

    @abstractmethod
    def send(self, message: MailMessage) -> None:
        """
        Deliver one message.

        Raises:
            MailNotConfiguredError: credentials are missing
            MailDeliveryError: the transport failed
        """
