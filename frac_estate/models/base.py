"""Base models shared across the package."""

from dataclasses import dataclass, field
from datetime import datetime


@dataclass
class Event:
    """Standard event envelope for streaming."""

    event_id: str
    event_type: str  # contract.EventName (e.g., fractional.FractionsPurchased)
    event_time: datetime
    source: str  # Contract address that emitted
    subject: str  # Transaction id
    data: dict
    metadata: dict = field(default_factory=dict)
