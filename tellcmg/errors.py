"""
Error taxonomy for the TellCMG idea assistant.

Every failure that can reach a request handler or the CLI is one of these.
Handlers translate them into a structured ``{"error": ...}`` response; nothing
below is expected to escape a route as a raw exception.
"""

from typing import Optional


class TellCMGError(Exception):
    """Base class for all application errors."""

    # Message safe to show to an end user
    public_message = "Something went wrong. Please try again."

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.public_message)


class ValidationError(TellCMGError):
    """Input rejected before any collaborator was contacted."""

    public_message = "Invalid input."


class ConfigurationError(TellCMGError):
    """A collaborator is missing its credentials or settings."""

    public_message = "Service not configured. Please contact your administrator."


class LLMNotConfiguredError(ConfigurationError):
    """No language model credential is configured."""

    public_message = "Language model service not configured."


class MailNotConfiguredError(ConfigurationError):
    """SMTP credentials are missing."""

    public_message = "Email service not configured. Please contact your administrator."


class CollaboratorError(TellCMGError):
    """A network collaborator (LLM or mail) failed. Retryable by the user."""


class LLMServiceError(CollaboratorError):
    public_message = "Failed to generate idea. Please try again."


class MailDeliveryError(CollaboratorError):
    public_message = "Failed to submit idea. Please try again."


class GenerationCancelled(TellCMGError):
    """The user aborted an in-flight call. Not a failure."""

    public_message = "Generation cancelled."


class RequestInFlightError(TellCMGError):
    """A generation request is already running for the same draft."""

    public_message = "A request is already in progress for this idea."

    def __init__(self, key: str):
        self.key = key
        super().__init__(f"Request already in flight for draft '{key}'")


class DialogueFinishedError(TellCMGError):
    """A turn was submitted to an interview that already produced its document."""

    public_message = "This interview is already complete."
