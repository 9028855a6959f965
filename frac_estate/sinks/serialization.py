"""Shared serialization utilities for sinks."""

import uuid
from dataclasses import asdict, is_dataclass
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any

from frac_estate.models import ContractEvent, Event

EVENT_SOURCE_PREFIX = "tron://"


def to_dict(obj: Any) -> dict:
    """Convert object to dictionary."""
    if is_dataclass(obj):
        return dataclass_to_dict(obj)
    elif isinstance(obj, dict):
        return {k: serialize_value(v) for k, v in obj.items()}
    else:
        return {"value": str(obj)}


def dataclass_to_dict(obj: Any) -> dict:
    """Convert dataclass to dict with proper serialization."""
    result = {}
    for key, value in asdict(obj).items():
        result[key] = serialize_value(value)
    return result


def serialize_value(value: Any) -> Any:
    """Serialize a value for JSON output.

    Token amounts routinely exceed 2**53, so integers above that are
    written as strings to survive JSON consumers that parse to doubles.
    """
    if isinstance(value, bool):
        return value
    elif isinstance(value, int) and abs(value) > 2**53:
        return str(value)
    elif isinstance(value, Decimal):
        return str(value)
    elif isinstance(value, Enum):
        return value.value
    elif isinstance(value, datetime):
        return value.isoformat()
    elif isinstance(value, date):
        return value.isoformat()
    elif isinstance(value, dict):
        return {k: serialize_value(v) for k, v in value.items()}
    elif isinstance(value, (list, tuple)):
        return [serialize_value(v) for v in value]
    return value


def to_envelope(event: ContractEvent) -> Event:
    """Wrap a contract event in the streaming envelope."""
    event_type = event.event_type.value if isinstance(event.event_type, Enum) else str(event.event_type)
    return Event(
        event_id=uuid.uuid5(
            uuid.NAMESPACE_URL, f"{event.tx_id}:{event.contract_address}:{event_type}:{sorted(event.data.items())}"
        ).hex,
        event_type=f"fractional.{event_type}",
        event_time=event.timestamp or datetime.now(),
        source=EVENT_SOURCE_PREFIX + event.contract_address,
        subject=event.tx_id,
        data=serialize_value(event.data),
        metadata={"block_number": event.block_number},
    )
