"""
Mail delivery for idea submissions.
"""

from .base import MailMessage, MailTransport
from .formatter import IdeaEmailFormatter, markdown_to_email_html
from .smtp_transport import SmtpMailTransport
from .submission import Submission, SubmissionService

__all__ = [
    "MailMessage",
    "MailTransport",
    "IdeaEmailFormatter",
    "markdown_to_email_html",
    "SmtpMailTransport",
    "Submission",
    "SubmissionService",
]
