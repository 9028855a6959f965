"""Transaction receipts, contract events and holder projections."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from frac_estate.models.enums import EventType, TxStatus


@dataclass
class ContractEvent:
    """Log entry emitted by a contract during a transaction."""

    event_type: EventType
    contract_address: str
    data: dict[str, Any]
    tx_id: str = ""
    block_number: int = 0
    timestamp: datetime | None = None


@dataclass
class TransactionReceipt:
    """Outcome of one submitted transaction.

    Reverted transactions are recorded too: they carry the revert reason,
    no events, and leave contract state untouched.
    """

    tx_id: str
    block_number: int
    sender: str
    contract_address: str
    method: str
    args: list[Any]
    call_value: int
    status: TxStatus
    timestamp: datetime
    revert_reason: str | None = None
    return_value: Any = None
    events: list[ContractEvent] = field(default_factory=list)

    @property
    def succeeded(self) -> bool:
        return self.status is TxStatus.SUCCESS


@dataclass
class HolderPosition:
    """Fraction and dividend position of one holder."""

    address: str
    fractions: int
    claimable: int
    claimed: int = 0
