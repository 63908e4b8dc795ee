"""
Health Event Models.

Tagged-variant food, drink and toilet events and their webhook payloads.
"""

from .models import (
    DrinkEvent,
    Event,
    EventKind,
    FoodEvent,
    ToiletAction,
    ToiletEvent,
    parse_event,
)
from .payload import (
    PAYLOAD_FIELDS,
    PayloadEncodingError,
    build_payload,
    describe_timestamp,
    encode_payload,
)

__all__ = [
    "DrinkEvent",
    "Event",
    "EventKind",
    "FoodEvent",
    "ToiletAction",
    "ToiletEvent",
    "parse_event",
    "PAYLOAD_FIELDS",
    "PayloadEncodingError",
    "build_payload",
    "describe_timestamp",
    "encode_payload",
]
