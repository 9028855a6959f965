"""Native coin (TRX) balances held by the chain."""

from dataclasses import dataclass, field

from frac_estate.exceptions import InsufficientBalanceError, InvalidAmountError
from frac_estate.units import check_uint256


@dataclass
class NativeLedger:
    """Per-address balances in sun."""

    balances: dict[str, int] = field(default_factory=dict)

    def balance_of(self, address: str) -> int:
        return self.balances.get(address, 0)

    def credit(self, address: str, amount: int) -> None:
        """Add ``amount`` sun to ``address``."""
        check_uint256(amount)
        new_balance = self.balance_of(address) + amount
        check_uint256(new_balance, "balance")
        self.balances[address] = new_balance

    def debit(self, address: str, amount: int) -> None:
        """Remove ``amount`` sun from ``address``."""
        check_uint256(amount)
        balance = self.balance_of(address)
        if balance < amount:
            raise InsufficientBalanceError(
                f"{address} holds {balance} sun, needs {amount}"
            )
        self.balances[address] = balance - amount

    def transfer(self, sender: str, recipient: str, amount: int) -> None:
        if amount < 0:
            raise InvalidAmountError(f"Negative transfer: {amount}")
        self.debit(sender, amount)
        self.credit(recipient, amount)

    def total_supply(self) -> int:
        return sum(self.balances.values())
