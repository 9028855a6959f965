"""Pro-rata dividend pool.

Deposits are split across holders by their fraction balance at the
moment of the deposit. Integer division leaves at most ``holders - 1``
units over; those go one each to the holders with the largest
remainders, so every deposit is distributed in full and nothing is
created or lost.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping

from frac_estate.exceptions import InvalidAmountError, NoHoldersError
from frac_estate.units import check_uint256


def distribute(amount: int, balances: Mapping[str, int]) -> dict[str, int]:
    """Split ``amount`` across ``balances`` using largest remainders.

    Parameters
    ----------
    amount : int
        Units to distribute.
    balances : Mapping[str, int]
        Holder address -> fraction balance. Zero balances are skipped.

    Returns
    -------
    dict[str, int]
        Holder address -> share; the shares sum to ``amount``.
    """
    check_uint256(amount)
    holders = {address: balance for address, balance in balances.items() if balance > 0}
    total = sum(holders.values())
    if total == 0:
        raise NoHoldersError("No fraction holders to distribute to")

    shares: dict[str, int] = {}
    remainders: list[tuple[int, int, str]] = []
    for address, balance in holders.items():
        share, remainder = divmod(amount * balance, total)
        shares[address] = share
        remainders.append((remainder, balance, address))

    leftover = amount - sum(shares.values())
    # Ties: larger balance first, then address order
    remainders.sort(key=lambda r: (-r[0], -r[1], r[2]))
    for _, _, address in remainders[:leftover]:
        shares[address] += 1
    return shares


@dataclass
class DividendPool:
    """Deposited rental income and what each holder may still withdraw."""

    total_deposited: int = 0
    total_claimed: int = 0
    claimable: dict[str, int] = field(default_factory=dict)
    claimed: dict[str, int] = field(default_factory=dict)

    @property
    def outstanding(self) -> int:
        """Deposited but not yet claimed."""
        return self.total_deposited - self.total_claimed

    def accrue(self, amount: int, balances: Mapping[str, int]) -> dict[str, int]:
        """Record a deposit and credit each holder's share."""
        if amount <= 0:
            raise InvalidAmountError(f"Dividend amount must be positive, got {amount}")
        shares = distribute(amount, balances)
        for address, share in shares.items():
            self.claimable[address] = self.claimable.get(address, 0) + share
        self.total_deposited = check_uint256(self.total_deposited + amount, "totalDividends")
        return shares

    def claimable_of(self, address: str) -> int:
        return self.claimable.get(address, 0)

    def claim(self, address: str) -> int:
        """Zero the holder's claimable balance and return what it was."""
        amount = self.claimable.pop(address, 0)
        if amount:
            self.claimed[address] = self.claimed.get(address, 0) + amount
            self.total_claimed += amount
        return amount

    def to_state(self) -> dict[str, Any]:
        return {
            "total_deposited": self.total_deposited,
            "total_claimed": self.total_claimed,
            "claimable": dict(self.claimable),
            "claimed": dict(self.claimed),
        }

    @classmethod
    def from_state(cls, state: dict[str, Any]) -> "DividendPool":
        return cls(
            total_deposited=state["total_deposited"],
            total_claimed=state["total_claimed"],
            claimable=dict(state["claimable"]),
            claimed=dict(state["claimed"]),
        )
