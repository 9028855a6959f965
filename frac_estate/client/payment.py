"""Payment assets: native coin or an allowance-based TRC20 token.

Both settle purchases and dividend deposits on a fractional property
contract; which one applies is decided by configuration (a payment
asset address present means TRC20).
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from decimal import Decimal

from frac_estate.client.client import TronClient
from frac_estate.client.contract import FractionalTokenHandle, Trc20Handle
from frac_estate.models import PaymentKind, TransactionReceipt
from frac_estate.units import from_base_units, to_base_units

logger = logging.getLogger(__name__)


class PaymentAsset(ABC):
    """How one signer pays a fractional property contract."""

    kind: PaymentKind
    symbol: str
    decimals: int

    def __init__(self, client: TronClient) -> None:
        self.client = client

    @abstractmethod
    def balance_of(self, address: str | None = None) -> int:
        """Balance in smallest units (signer's own by default)."""

    @abstractmethod
    def purchase(self, token: FractionalTokenHandle, fraction_count: int, cost: int) -> TransactionReceipt:
        """Buy fractions, paying ``cost``."""

    @abstractmethod
    def deposit(self, token: FractionalTokenHandle, amount: int) -> TransactionReceipt:
        """Deposit ``amount`` as dividends."""

    @abstractmethod
    def with_signer(self, client: TronClient) -> "PaymentAsset":
        """Same asset, paid by another signer."""

    def to_units(self, amount: int | Decimal | str) -> int:
        """Whole units -> smallest units."""
        return to_base_units(amount, self.decimals)

    def from_units(self, units: int) -> Decimal:
        return from_base_units(units, self.decimals)

    def format(self, units: int) -> str:
        return f"{self.from_units(units)} {self.symbol}"


class NativePayment(PaymentAsset):
    """TRX attached as call value."""

    kind = PaymentKind.NATIVE
    symbol = "TRX"
    decimals = 6

    def balance_of(self, address: str | None = None) -> int:
        return self.client.get_balance(address)

    def purchase(self, token: FractionalTokenHandle, fraction_count: int, cost: int) -> TransactionReceipt:
        return token.buy(fraction_count, call_value=cost)

    def deposit(self, token: FractionalTokenHandle, amount: int) -> TransactionReceipt:
        return token.deposit_dividends(call_value=amount)

    def with_signer(self, client: TronClient) -> "NativePayment":
        return NativePayment(client)


class TokenPayment(PaymentAsset):
    """TRC20 asset spent by the contract through an allowance.

    Each operation approves exactly the amount it is about to spend, then
    calls the contract without attached value.
    """

    kind = PaymentKind.TOKEN

    def __init__(self, client: TronClient, asset_address: str) -> None:
        super().__init__(client)
        self.asset: Trc20Handle = client.trc20(asset_address)
        self.symbol = self.asset.symbol()
        self.decimals = self.asset.decimals()

    @property
    def asset_address(self) -> str:
        return self.asset.address

    def balance_of(self, address: str | None = None) -> int:
        return self.asset.balance_of(address or self.client.address)

    def purchase(self, token: FractionalTokenHandle, fraction_count: int, cost: int) -> TransactionReceipt:
        approval = self.asset.approve(token.address, cost)
        logger.info("Approved %s for %s (tx %s)", token.address, self.format(cost), approval.tx_id)
        return token.buy(fraction_count)

    def deposit(self, token: FractionalTokenHandle, amount: int) -> TransactionReceipt:
        approval = self.asset.approve(token.address, amount)
        logger.info("Approved %s for %s (tx %s)", token.address, self.format(amount), approval.tx_id)
        return token.deposit_dividends(amount)

    def with_signer(self, client: TronClient) -> "TokenPayment":
        return TokenPayment(client, self.asset_address)


def payment_asset_for(client: TronClient, asset_address: str | None) -> PaymentAsset:
    """Pick the payment asset implementation from configuration."""
    if asset_address is None:
        return NativePayment(client)
    return TokenPayment(client, asset_address)
