"""Fractional ownership contract for a single tokenized property."""

from __future__ import annotations

from dataclasses import asdict
from typing import Any

from frac_estate.chain.address import ZERO_ADDRESS, validate_address
from frac_estate.chain.base import CallContext, Contract
from frac_estate.chain.dividends import DividendPool
from frac_estate.chain.trc20 import Trc20Token
from frac_estate.exceptions import (
    InsufficientBalanceError,
    InsufficientPaymentError,
    InvalidAmountError,
    InvalidTokenParametersError,
    NoHoldersError,
    NonPayableError,
    SoldOutError,
)
from frac_estate.models import EventType, HolderPosition, PaymentKind, PropertyToken
from frac_estate.units import check_uint256


class FractionalPropertyContract(Contract):
    """MultiPropertyFractionalAdvanced.

    Sells whole-unit fractions of a property at a fixed price, collects
    rental income from the owner and lets holders claim their pro-rata
    share. Payment is either native coin attached to the call or a TRC20
    asset pulled through a prior ``approve``.

    The contract keeps sale proceeds and unclaimed dividends apart: the
    owner can withdraw ``proceeds`` but never the dividend pool.
    """

    CONTRACT_NAME = "MultiPropertyFractionalAdvanced"
    VIEWS = {
        "name": "name",
        "symbol": "symbol",
        "owner": "owner",
        "maxFractions": "max_fractions",
        "unitsSold": "units_sold_view",
        "totalSupply": "units_sold_view",
        "unsoldFractions": "unsold_fractions",
        "getPrice": "get_price",
        "getPriceSun": "get_price",
        "pricePerFraction": "get_price",
        "propertyAddress": "property_address",
        "metadataURI": "metadata_uri",
        "paymentToken": "payment_token",
        "balanceOf": "balance_of",
        "claimable": "claimable",
        "totalDividends": "total_dividends",
        "totalClaimed": "total_claimed",
        "proceeds": "proceeds_view",
    }
    METHODS = {
        "buy": "buy",
        "depositDividends": "deposit_dividends",
        "claim": "claim",
        "transfer": "transfer",
        "withdrawProceeds": "withdraw_proceeds",
    }
    PAYABLE = frozenset({"buy", "depositDividends"})

    def __init__(self, address: str, owner: str, token: PropertyToken) -> None:
        super().__init__(address, owner)
        self.token = token
        self.units_sold = 0
        self.proceeds = 0
        self.balances: dict[str, int] = {}
        self.pool = DividendPool()

    @property
    def is_native(self) -> bool:
        return self.token.payment_kind is PaymentKind.NATIVE

    def on_deploy(self, ctx: CallContext) -> None:
        asset = self.token.payment_asset_address
        if asset is not None and not isinstance(ctx.chain.contracts.get(asset), Trc20Token):
            raise InvalidTokenParametersError(f"No TRC20 contract deployed at {asset}")

    # Views
    def name(self) -> str:
        return self.token.name

    def symbol(self) -> str:
        return self.token.symbol

    def owner(self) -> str:
        return self.owner_address

    def max_fractions(self) -> int:
        return self.token.max_fractions

    def units_sold_view(self) -> int:
        return self.units_sold

    def unsold_fractions(self) -> int:
        return self.token.max_fractions - self.units_sold

    def get_price(self) -> int:
        return self.token.price_per_fraction

    def property_address(self) -> str:
        return self.token.property_address

    def metadata_uri(self) -> str:
        return self.token.metadata_uri

    def payment_token(self) -> str:
        return self.token.payment_asset_address or ZERO_ADDRESS

    def balance_of(self, holder: str) -> int:
        return self.balances.get(validate_address(holder), 0)

    def claimable(self, holder: str) -> int:
        return self.pool.claimable_of(validate_address(holder))

    def total_dividends(self) -> int:
        return self.pool.total_deposited

    def total_claimed(self) -> int:
        return self.pool.total_claimed

    def proceeds_view(self) -> int:
        return self.proceeds

    def holders(self) -> list[str]:
        """Addresses currently holding at least one fraction."""
        return sorted(address for address, balance in self.balances.items() if balance > 0)

    def positions(self) -> list[HolderPosition]:
        """Fraction and dividend position for every known account."""
        addresses = set(self.balances) | set(self.pool.claimable) | set(self.pool.claimed)
        return [
            HolderPosition(
                address=address,
                fractions=self.balances.get(address, 0),
                claimable=self.pool.claimable_of(address),
                claimed=self.pool.claimed.get(address, 0),
            )
            for address in sorted(addresses)
        ]

    # Methods
    def buy(self, ctx: CallContext, fraction_count: int) -> int:
        """Buy ``fraction_count`` fractions at the fixed price.

        Native payment must attach exactly ``price * fraction_count`` sun.
        Token payment attaches nothing and pulls the cost from the buyer's
        allowance to this contract.
        """
        count = self._check_count(fraction_count)
        unsold = self.unsold_fractions()
        if count > unsold:
            raise SoldOutError(f"Only {unsold} fractions left, requested {count}")

        cost = check_uint256(self.token.cost(count), "cost")
        if self.is_native:
            if ctx.call_value != cost:
                raise InsufficientPaymentError(
                    f"Purchase of {count} fractions costs {cost} sun, got {ctx.call_value}"
                )
        else:
            if ctx.call_value:
                raise NonPayableError("buy() does not accept native value for token-priced fractions")
            ctx.call(self.token.payment_asset_address, "transferFrom", ctx.sender, self.address, cost)

        self.units_sold += count
        self.balances[ctx.sender] = self.balances.get(ctx.sender, 0) + count
        self.proceeds += cost

        ctx.emit(EventType.FRACTIONS_PURCHASED, buyer=ctx.sender, fractions=count, cost=cost)
        ctx.emit(EventType.TRANSFER, **{"from": ZERO_ADDRESS, "to": ctx.sender, "value": count})
        return count

    def deposit_dividends(self, ctx: CallContext, amount: int | None = None) -> int:
        """Deposit rental income for pro-rata distribution (owner only).

        Native payment: ``depositDividends()`` with the income as call
        value. Token payment: ``depositDividends(amount)`` after approving
        this contract for ``amount``.
        """
        self._only_owner(ctx)

        if self.is_native:
            if amount is not None:
                raise InvalidAmountError("depositDividends() takes the deposit as call value")
            value = ctx.call_value
        else:
            if ctx.call_value:
                raise NonPayableError("depositDividends(amount) does not accept native value")
            if amount is None:
                raise InvalidAmountError("depositDividends(amount) requires an amount")
            value = check_uint256(amount)

        if value <= 0:
            raise InvalidAmountError("Dividend deposit must be positive")
        if self.units_sold == 0:
            raise NoHoldersError("Cannot deposit dividends before any fraction is sold")

        if not self.is_native:
            ctx.call(self.token.payment_asset_address, "transferFrom", ctx.sender, self.address, value)

        shares = self.pool.accrue(value, self.balances)
        ctx.emit(
            EventType.DIVIDENDS_DEPOSITED,
            amount=value,
            units_sold=self.units_sold,
            holders=len(shares),
        )
        return value

    def claim(self, ctx: CallContext) -> int:
        """Pay out the caller's whole claimable balance.

        A caller with nothing to claim gets 0 back and nothing changes.
        """
        amount = self.pool.claim(ctx.sender)
        if amount == 0:
            return 0
        self._pay_out(ctx, ctx.sender, amount)
        ctx.emit(EventType.DIVIDENDS_CLAIMED, holder=ctx.sender, amount=amount)
        return amount

    def transfer(self, ctx: CallContext, to: str, fraction_count: int) -> bool:
        """Move fractions to another holder; accrued dividends stay put."""
        validate_address(to)
        count = self._check_count(fraction_count)
        balance = self.balances.get(ctx.sender, 0)
        if balance < count:
            raise InsufficientBalanceError(f"{ctx.sender} holds {balance} fractions, needs {count}")
        self.balances[ctx.sender] = balance - count
        self.balances[to] = self.balances.get(to, 0) + count
        ctx.emit(EventType.TRANSFER, **{"from": ctx.sender, "to": to, "value": count})
        return True

    def withdraw_proceeds(self, ctx: CallContext) -> int:
        """Send accumulated sale proceeds to the owner."""
        self._only_owner(ctx)
        amount = self.proceeds
        if amount == 0:
            return 0
        self.proceeds = 0
        self._pay_out(ctx, self.owner_address, amount)
        ctx.emit(EventType.PROCEEDS_WITHDRAWN, owner=self.owner_address, amount=amount)
        return amount

    def _pay_out(self, ctx: CallContext, recipient: str, amount: int) -> None:
        if self.is_native:
            ctx.pay(recipient, amount)
        else:
            ctx.call(self.token.payment_asset_address, "transfer", recipient, amount)

    @staticmethod
    def _check_count(fraction_count: int) -> int:
        check_uint256(fraction_count, "fraction count")
        if fraction_count <= 0:
            raise InvalidAmountError(f"Fraction count must be positive, got {fraction_count}")
        return fraction_count

    def to_state(self) -> dict[str, Any]:
        return {
            "owner": self.owner_address,
            "token": asdict(self.token),
            "units_sold": self.units_sold,
            "proceeds": self.proceeds,
            "balances": dict(self.balances),
            "pool": self.pool.to_state(),
        }

    @classmethod
    def from_state(cls, address: str, state: dict[str, Any]) -> "FractionalPropertyContract":
        contract = cls(address, state["owner"], PropertyToken(**state["token"]))
        contract.units_sold = state["units_sold"]
        contract.proceeds = state["proceeds"]
        contract.balances = dict(state["balances"])
        contract.pool = DividendPool.from_state(state["pool"])
        return contract
