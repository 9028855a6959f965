"""Contract handles exposing the on-chain call surface as methods."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from frac_estate.models import TransactionReceipt

if TYPE_CHECKING:
    from frac_estate.client.client import TronClient


class ContractHandle:
    """A deployed contract seen through one client's identity."""

    def __init__(self, client: "TronClient", address: str) -> None:
        self.client = client
        self.address = address

    def __repr__(self) -> str:
        return f"{type(self).__name__}(address={self.address!r}, signer={self.client.address!r})"

    def call(self, method: str, *args: Any) -> Any:
        """Read-only query."""
        return self.client.call(self.address, method, *args)

    def send(self, method: str, *args: Any, call_value: int = 0) -> TransactionReceipt:
        """Transaction signed by the bound client."""
        return self.client.send(self.address, method, *args, call_value=call_value)


class FractionalTokenHandle(ContractHandle):
    """MultiPropertyFractionalAdvanced call surface."""

    def name(self) -> str:
        return self.call("name")

    def symbol(self) -> str:
        return self.call("symbol")

    def owner(self) -> str:
        return self.call("owner")

    def max_fractions(self) -> int:
        return self.call("maxFractions")

    def units_sold(self) -> int:
        return self.call("unitsSold")

    def unsold_fractions(self) -> int:
        return self.call("unsoldFractions")

    def price(self) -> int:
        """Price per fraction in the smallest payment unit."""
        return self.call("getPrice")

    def payment_token(self) -> str:
        return self.call("paymentToken")

    def balance_of(self, holder: str) -> int:
        return self.call("balanceOf", holder)

    def claimable(self, holder: str) -> int:
        return self.call("claimable", holder)

    def total_dividends(self) -> int:
        return self.call("totalDividends")

    def proceeds(self) -> int:
        return self.call("proceeds")

    def buy(self, fraction_count: int, call_value: int = 0) -> TransactionReceipt:
        return self.send("buy", fraction_count, call_value=call_value)

    def deposit_dividends(self, amount: int | None = None, call_value: int = 0) -> TransactionReceipt:
        if amount is None:
            return self.send("depositDividends", call_value=call_value)
        return self.send("depositDividends", amount, call_value=call_value)

    def claim(self) -> TransactionReceipt:
        return self.send("claim")

    def transfer(self, to: str, fraction_count: int) -> TransactionReceipt:
        return self.send("transfer", to, fraction_count)

    def withdraw_proceeds(self) -> TransactionReceipt:
        return self.send("withdrawProceeds")


class Trc20Handle(ContractHandle):
    """TRC20 call surface."""

    def symbol(self) -> str:
        return self.call("symbol")

    def decimals(self) -> int:
        return self.call("decimals")

    def total_supply(self) -> int:
        return self.call("totalSupply")

    def balance_of(self, holder: str) -> int:
        return self.call("balanceOf", holder)

    def allowance(self, holder: str, spender: str) -> int:
        return self.call("allowance", holder, spender)

    def approve(self, spender: str, amount: int) -> TransactionReceipt:
        return self.send("approve", spender, amount)

    def transfer(self, to: str, amount: int) -> TransactionReceipt:
        return self.send("transfer", to, amount)

    def transfer_from(self, holder: str, to: str, amount: int) -> TransactionReceipt:
        return self.send("transferFrom", holder, to, amount)

    def mint(self, to: str, amount: int) -> TransactionReceipt:
        return self.send("mint", to, amount)
