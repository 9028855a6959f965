"""Contract base class and per-call execution context."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, ClassVar

from frac_estate.exceptions import UnauthorizedError
from frac_estate.models import ContractEvent, EventType

if TYPE_CHECKING:
    from frac_estate.chain.simulator import ChainSimulator


@dataclass
class CallContext:
    """What a contract method sees while executing: caller, value, chain."""

    sender: str
    call_value: int
    contract_address: str
    chain: "ChainSimulator"
    events: list[ContractEvent] = field(default_factory=list)

    def emit(self, event_type: EventType, **data: Any) -> None:
        """Record an event; it is kept only if the transaction succeeds."""
        self.events.append(
            ContractEvent(
                event_type=event_type,
                contract_address=self.contract_address,
                data=data,
            )
        )

    def call(self, contract_address: str, method: str, *args: Any) -> Any:
        """Invoke another contract with this contract as the sender."""
        return self.chain.invoke(
            sender=self.contract_address,
            contract_address=contract_address,
            method=method,
            args=args,
            call_value=0,
            events=self.events,
        )

    def pay(self, recipient: str, amount: int) -> None:
        """Send native coin held by this contract."""
        self.chain.native.transfer(self.contract_address, recipient, amount)


class Contract(ABC):
    """Base class for simulated contracts.

    Subclasses declare their call surface as ABI name -> attribute maps.
    View attributes are called with the plain arguments; method
    attributes receive a ``CallContext`` first.
    """

    CONTRACT_NAME: ClassVar[str] = "Contract"
    VIEWS: ClassVar[dict[str, str]] = {}
    METHODS: ClassVar[dict[str, str]] = {}
    PAYABLE: ClassVar[frozenset[str]] = frozenset()

    def __init__(self, address: str, owner: str) -> None:
        self.address = address
        self.owner_address = owner

    def on_deploy(self, ctx: CallContext) -> None:
        """Hook run inside the deployment transaction."""

    def _only_owner(self, ctx: CallContext) -> None:
        if ctx.sender != self.owner_address:
            raise UnauthorizedError(f"{ctx.sender} is not the owner of {self.address}")

    @abstractmethod
    def to_state(self) -> dict[str, Any]:
        """Serialize contract storage to JSON-compatible data."""

    @classmethod
    @abstractmethod
    def from_state(cls, address: str, state: dict[str, Any]) -> "Contract":
        """Rebuild a contract from ``to_state`` output."""
