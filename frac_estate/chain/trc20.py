"""TRC20 fungible asset, used as the mock USDT payment token."""

from __future__ import annotations

from typing import Any

from frac_estate.chain.address import ZERO_ADDRESS, validate_address
from frac_estate.chain.base import CallContext, Contract
from frac_estate.exceptions import (
    InsufficientAllowanceError,
    InsufficientBalanceError,
)
from frac_estate.models import EventType
from frac_estate.units import check_uint256


class Trc20Token(Contract):
    """Standard fungible token with owner-only minting.

    ``approve`` overwrites the previous allowance, so a spender that
    races a re-approval can spend both amounts; callers that lower an
    allowance should set it to zero first.
    """

    CONTRACT_NAME = "TRC20"
    VIEWS = {
        "name": "name",
        "symbol": "symbol",
        "decimals": "get_decimals",
        "totalSupply": "total_supply",
        "balanceOf": "balance_of",
        "allowance": "allowance",
        "owner": "owner",
    }
    METHODS = {
        "transfer": "transfer",
        "approve": "approve",
        "transferFrom": "transfer_from",
        "mint": "mint",
    }

    def __init__(
        self,
        address: str,
        owner: str,
        name: str = "Tether USD",
        symbol: str = "USDT",
        decimals: int = 6,
        initial_supply: int = 0,
    ) -> None:
        super().__init__(address, owner)
        self.token_name = name
        self.token_symbol = symbol
        self.decimals = decimals
        self.supply = 0
        self.balances: dict[str, int] = {}
        self.allowances: dict[str, dict[str, int]] = {}
        if initial_supply:
            self._mint(owner, check_uint256(initial_supply))

    # Views
    def name(self) -> str:
        return self.token_name

    def symbol(self) -> str:
        return self.token_symbol

    def get_decimals(self) -> int:
        return self.decimals

    def total_supply(self) -> int:
        return self.supply

    def owner(self) -> str:
        return self.owner_address

    def balance_of(self, account: str) -> int:
        return self.balances.get(validate_address(account), 0)

    def allowance(self, holder: str, spender: str) -> int:
        validate_address(holder)
        validate_address(spender)
        return self.allowances.get(holder, {}).get(spender, 0)

    # Methods
    def on_deploy(self, ctx: CallContext) -> None:
        if self.supply:
            ctx.emit(EventType.TRANSFER, **{"from": ZERO_ADDRESS, "to": self.owner_address, "value": self.supply})

    def transfer(self, ctx: CallContext, to: str, amount: int) -> bool:
        self._move(ctx.sender, validate_address(to), check_uint256(amount))
        ctx.emit(EventType.TRANSFER, **{"from": ctx.sender, "to": to, "value": amount})
        return True

    def approve(self, ctx: CallContext, spender: str, amount: int) -> bool:
        validate_address(spender)
        self.allowances.setdefault(ctx.sender, {})[spender] = check_uint256(amount)
        ctx.emit(EventType.APPROVAL, owner=ctx.sender, spender=spender, value=amount)
        return True

    def transfer_from(self, ctx: CallContext, holder: str, to: str, amount: int) -> bool:
        validate_address(holder)
        validate_address(to)
        check_uint256(amount)
        allowed = self.allowances.get(holder, {}).get(ctx.sender, 0)
        if allowed < amount:
            raise InsufficientAllowanceError(
                f"{ctx.sender} may spend {allowed} of {holder}'s {self.token_symbol}, needs {amount}"
            )
        self._move(holder, to, amount)
        self.allowances[holder][ctx.sender] = allowed - amount
        ctx.emit(EventType.TRANSFER, **{"from": holder, "to": to, "value": amount})
        return True

    def mint(self, ctx: CallContext, to: str, amount: int) -> bool:
        self._only_owner(ctx)
        self._mint(validate_address(to), check_uint256(amount))
        ctx.emit(EventType.TRANSFER, **{"from": ZERO_ADDRESS, "to": to, "value": amount})
        return True

    def _mint(self, to: str, amount: int) -> None:
        self.supply = check_uint256(self.supply + amount, "totalSupply")
        self.balances[to] = self.balances.get(to, 0) + amount

    def _move(self, sender: str, recipient: str, amount: int) -> None:
        balance = self.balances.get(sender, 0)
        if balance < amount:
            raise InsufficientBalanceError(
                f"{sender} holds {balance} {self.token_symbol} units, needs {amount}"
            )
        self.balances[sender] = balance - amount
        self.balances[recipient] = self.balances.get(recipient, 0) + amount

    def to_state(self) -> dict[str, Any]:
        return {
            "owner": self.owner_address,
            "name": self.token_name,
            "symbol": self.token_symbol,
            "decimals": self.decimals,
            "supply": self.supply,
            "balances": dict(self.balances),
            "allowances": {holder: dict(spenders) for holder, spenders in self.allowances.items()},
        }

    @classmethod
    def from_state(cls, address: str, state: dict[str, Any]) -> "Trc20Token":
        token = cls(
            address,
            state["owner"],
            name=state["name"],
            symbol=state["symbol"],
            decimals=state["decimals"],
        )
        token.supply = state["supply"]
        token.balances = dict(state["balances"])
        token.allowances = {holder: dict(spenders) for holder, spenders in state["allowances"].items()}
        return token
