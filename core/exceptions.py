"""
Domain error taxonomy.

Every failure in the backend is scoped to a single operation. Services raise
these; the API layer turns them into ``{"message": ...}`` envelopes and the
client turns envelopes back into them.
"""

from typing import Optional


class TalentflowError(Exception):
    """Base class for all domain errors."""

    status_code: int = 500
    default_message: str = "Request failed"

    def __init__(self, message: Optional[str] = None, errors: Optional[dict[str, str]] = None):
        self.message = message or self.default_message
        self.errors = errors or {}
        super().__init__(self.message)

    def to_envelope(self) -> dict:
        """Build the JSON body sent back to the caller."""
        body: dict = {"message": self.message}
        if self.errors:
            body["errors"] = dict(self.errors)
        return body


class NotFoundError(TalentflowError):
    """Unknown id."""

    status_code = 404
    default_message = "Not found"


class ValidationFailedError(TalentflowError):
    """Missing required field, slug collision or answer-validation failure."""

    status_code = 422
    default_message = "Validation failed"


class TransientWriteFailure(TalentflowError):
    """Injected write failure. No partial write ever happened, so retrying is safe."""

    status_code = 500
    default_message = "Temporary failure"


class StaleResponseError(TalentflowError):
    """A read result superseded by a newer read for the same key."""

    status_code = 409
    default_message = "Response superseded by a newer request"


def error_for_status(
    status_code: int,
    message: Optional[str] = None,
    errors: Optional[dict[str, str]] = None,
) -> TalentflowError:
    """
    Map an error envelope back to the matching exception.

    Args:
        status_code: HTTP-like status of the response
        message: ``message`` field of the envelope
        errors: optional per-field error mapping

    Returns:
        Exception instance (not raised)
    """
    if status_code == 404:
        return NotFoundError(message, errors)
    if status_code in (400, 422):
        return ValidationFailedError(message, errors)
    if status_code >= 500:
        return TransientWriteFailure(message, errors)

    error = TalentflowError(message, errors)
    error.status_code = status_code
    return error
