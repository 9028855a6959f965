"""Domain models for fractional property ownership."""

from frac_estate.models.account import KeyPair
from frac_estate.models.base import Event
from frac_estate.models.enums import EventType, Network, PaymentKind, TxStatus
from frac_estate.models.ledger import ContractEvent, HolderPosition, TransactionReceipt
from frac_estate.models.token import PropertyToken

__all__ = [
    "ContractEvent",
    "Event",
    "EventType",
    "HolderPosition",
    "KeyPair",
    "Network",
    "PaymentKind",
    "PropertyToken",
    "TransactionReceipt",
    "TxStatus",
]
