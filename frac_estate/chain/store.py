"""Ordered transaction log with per-address and per-contract indexes."""

from dataclasses import dataclass, field

from frac_estate.models import ContractEvent, EventType, TransactionReceipt, TxStatus


@dataclass
class TransactionStore:
    """In-memory store for receipts and events with relationship tracking."""

    transactions: list[TransactionReceipt] = field(default_factory=list)
    events: list[ContractEvent] = field(default_factory=list)

    # Relationship indexes
    _tx_index: dict[str, int] = field(default_factory=dict)
    _address_transactions: dict[str, list[int]] = field(default_factory=dict)
    _contract_events: dict[str, list[int]] = field(default_factory=dict)

    def add_receipt(self, receipt: TransactionReceipt) -> None:
        """Add a receipt and index its events."""
        idx = len(self.transactions)
        self.transactions.append(receipt)
        self._tx_index[receipt.tx_id] = idx
        self._address_transactions.setdefault(receipt.sender, []).append(idx)

        for event in receipt.events:
            event_idx = len(self.events)
            self.events.append(event)
            self._contract_events.setdefault(event.contract_address, []).append(event_idx)

    # Query methods
    def get_transaction(self, tx_id: str) -> TransactionReceipt | None:
        """Look up a receipt by transaction id."""
        idx = self._tx_index.get(tx_id)
        return self.transactions[idx] if idx is not None else None

    def get_address_transactions(self, address: str) -> list[TransactionReceipt]:
        """Get all transactions sent by an address."""
        indices = self._address_transactions.get(address, [])
        return [self.transactions[i] for i in indices]

    def get_contract_events(
        self, contract_address: str, event_type: EventType | None = None
    ) -> list[ContractEvent]:
        """Get events emitted by a contract, optionally of one type."""
        indices = self._contract_events.get(contract_address, [])
        events = [self.events[i] for i in indices]
        if event_type is not None:
            events = [e for e in events if e.event_type is event_type]
        return events

    def summary(self) -> dict[str, int]:
        """Return summary counts."""
        reverted = sum(1 for tx in self.transactions if tx.status is TxStatus.REVERTED)
        return {
            "transactions": len(self.transactions),
            "reverted": reverted,
            "events": len(self.events),
            "senders": len(self._address_transactions),
        }
