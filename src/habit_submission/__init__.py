"""Event Submission Module.

Best-effort delivery of logged health events to the webhook.
"""

from .client import EventSubmissionClient, SubmissionResult, SubmissionStatus
from .config import Settings, get_settings
from .errors import (
    InvalidEndpoint,
    NonSuccessStatus,
    SerializationError,
    SubmissionError,
    TransportError,
)

__all__ = [
    "EventSubmissionClient",
    "SubmissionResult",
    "SubmissionStatus",
    "Settings",
    "get_settings",
    "InvalidEndpoint",
    "NonSuccessStatus",
    "SerializationError",
    "SubmissionError",
    "TransportError",
]
