"""
Idea submission service.

Validates a finished document, renders it, and hands it to the mail
transport addressed to the fixed intake recipient.
"""

import logging
import re
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from ..config import IDEA_RECIPIENT
from ..errors import MailNotConfiguredError, ValidationError
from .base import MailTransport
from .formatter import IdeaEmailFormatter

logger = logging.getLogger(__name__)

_EMAIL_LIKE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


@dataclass
class Submission:
    document: str
    categories: list[str] = field(default_factory=list)
    submitter: Optional[str] = None

    @classmethod
    def from_payload(cls, data: dict) -> "Submission":
        """Accepts ``document``/``idea`` and ``submitterIdentity``/``submitterEmail``."""
        document = data.get("document")
        if document is None:
            document = data.get("idea")
        submitter = data.get("submitterIdentity") or data.get("submitterEmail")
        categories = data.get("categories") or []
        if isinstance(categories, str):
            categories = categories.split(",")
        elif not isinstance(categories, (list, tuple)):
            categories = []
        return cls(
            document=str(document or ""),
            categories=[str(c).strip() for c in categories if str(c).strip()],
            submitter=str(submitter).strip() if submitter else None,
        )

    def validate(self) -> None:
        if not self.document.strip():
            raise ValidationError("No idea content provided")
        if self.submitter and not _EMAIL_LIKE.match(self.submitter):
            raise ValidationError("Submitter must be an email address")


class SubmissionService:
    """Delivers idea submissions to the intake mailbox."""

    def __init__(
        self,
        transport: MailTransport,
        formatter: Optional[IdeaEmailFormatter] = None,
        recipient: str = IDEA_RECIPIENT,
    ):
        self.transport = transport
        self.formatter = formatter or IdeaEmailFormatter()
        self.recipient = recipient

    def submit(self, submission: Submission, submitted_at: Optional[datetime] = None) -> None:
        """
        Send one submission.

        Raises:
            ValidationError: empty document or malformed submitter
            MailNotConfiguredError: transport has no credentials
            MailDeliveryError: transport failed
        """
        submission.validate()
        if not self.transport.is_configured:
            raise MailNotConfiguredError()

        message = self.formatter.format(
            submission.document,
            submission.categories,
            recipient=self.recipient,
            submitter=submission.submitter,
            submitted_at=submitted_at,
        )
        self.transport.send(message)
        logger.info(
            "Submitted idea (%d chars, categories=%s)",
            len(submission.document), ",".join(submission.categories) or "general",
        )
