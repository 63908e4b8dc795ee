"""Wire payload construction for health events."""
import json
from datetime import datetime, timezone
from typing import Dict, FrozenSet, Mapping, Union

from .models import DrinkEvent, FoodEvent, ToiletEvent

# Wire field names per event kind, ``type`` included
PAYLOAD_FIELDS: Dict[str, FrozenSet[str]] = {
    "food": frozenset({"food", "food_amount", "eatenAt", "type"}),
    "drink": frozenset({"drink", "amount", "drunkAt", "type"}),
    "toilet": frozenset({"action", "time", "type"}),
}

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S +0000"


class PayloadEncodingError(ValueError):
    """Raised when a payload mapping cannot be JSON-encoded."""


def describe_timestamp(dt: datetime) -> str:
    """
    Describe a timestamp the way the webhook receives it.

    The instant is expressed in UTC, e.g. ``2024-05-01 06:30:00 +0000``.
    Naive datetimes are taken as local time.
    """
    return dt.astimezone(timezone.utc).strftime(TIMESTAMP_FORMAT)


def build_payload(event: Union[FoodEvent, DrinkEvent, ToiletEvent]) -> Dict[str, str]:
    """
    Build the flat wire mapping for an event.

    Args:
        event: Any event variant

    Returns:
        Field name to string value, including the ``type`` discriminator
    """
    payload = event.model_dump(mode="json", by_alias=True, exclude={"occurred_at"})
    stamp_field = type(event).model_fields["occurred_at"].serialization_alias
    payload[stamp_field] = describe_timestamp(event.occurred_at)
    return {key: str(value) for key, value in payload.items()}


def encode_payload(payload: Mapping[str, str]) -> bytes:
    """
    JSON-encode a payload mapping to UTF-8 bytes.

    Raises:
        PayloadEncodingError: If the mapping holds values JSON cannot encode
    """
    try:
        return json.dumps(dict(payload), ensure_ascii=False).encode("utf-8")
    except (TypeError, ValueError) as e:
        raise PayloadEncodingError(str(e)) from e
