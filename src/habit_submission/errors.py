"""Failure kinds of a single event submission."""
from typing import Optional


class SubmissionError(Exception):
    """Base class for terminal submission failures."""

    kind = "submission_error"


class InvalidEndpoint(SubmissionError):
    """The configured webhook URL is not a usable http(s) URL."""

    kind = "invalid_endpoint"


class SerializationError(SubmissionError):
    """The event payload could not be encoded as JSON."""

    kind = "serialization_error"


class TransportError(SubmissionError):
    """The request never produced an HTTP response."""

    kind = "transport_error"


class NonSuccessStatus(SubmissionError):
    """The webhook answered with a status other than 200."""

    kind = "non_success_status"

    def __init__(self, status_code: int, detail: Optional[str] = None):
        self.status_code = status_code
        message = f"Webhook returned status {status_code}"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)
