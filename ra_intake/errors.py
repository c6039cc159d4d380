# ra_intake/errors.py


class IntakeError(Exception):
    """Base exception for the application intake service."""


class PayloadError(IntakeError):
    """Inbound event is missing its answers or is not a JSON object."""


class MailerError(IntakeError):
    """Gmail credentials are missing or unusable."""
