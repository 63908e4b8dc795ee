"""Health event models.

Each logged event is one variant of a tagged union keyed on ``kind``. The
wire names of each field are declared with ``serialization_alias`` so that
``model_dump(by_alias=True)`` yields the payload the webhook expects.
"""
from datetime import datetime
from enum import Enum
from typing import Annotated, Any, Dict, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator

EventKind = Literal["food", "drink", "toilet"]


class ToiletAction(str, Enum):
    """What happened on a toilet visit."""

    POOP = "Poop"
    PEE = "Pee"


class _BaseEvent(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)


class FoodEvent(_BaseEvent):
    """Food intake entry."""

    kind: Literal["food"] = Field("food", serialization_alias="type")
    item: str = Field("", serialization_alias="food")
    amount: str = Field("", serialization_alias="food_amount")
    occurred_at: datetime = Field(serialization_alias="eatenAt")


class DrinkEvent(_BaseEvent):
    """Drink intake entry."""

    kind: Literal["drink"] = Field("drink", serialization_alias="type")
    item: str = Field("", serialization_alias="drink")
    amount: str = Field("", serialization_alias="amount")
    occurred_at: datetime = Field(serialization_alias="drunkAt")


class ToiletEvent(_BaseEvent):
    """Toilet visit entry."""

    kind: Literal["toilet"] = Field("toilet", serialization_alias="type")
    action: ToiletAction = Field(serialization_alias="action")
    occurred_at: datetime = Field(serialization_alias="time")

    @field_validator("action", mode="before")
    @classmethod
    def _normalize_action(cls, value: Any) -> Any:
        if isinstance(value, str):
            for action in ToiletAction:
                if action.value.lower() == value.strip().lower():
                    return action
        return value


Event = Annotated[Union[FoodEvent, DrinkEvent, ToiletEvent], Field(discriminator="kind")]

_event_adapter = TypeAdapter(Event)


def parse_event(data: Dict[str, Any]) -> Union[FoodEvent, DrinkEvent, ToiletEvent]:
    """
    Build the matching event variant from a raw mapping.

    Args:
        data: Mapping with a ``kind`` key plus the fields of that kind

    Returns:
        FoodEvent, DrinkEvent or ToiletEvent

    Raises:
        pydantic.ValidationError: unknown kind, missing or extra fields
    """
    return _event_adapter.validate_python(data)
