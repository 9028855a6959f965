"""Tests for the TRC20 asset contract."""

import pytest

from frac_estate.chain.address import ZERO_ADDRESS
from frac_estate.chain.simulator import ChainSimulator
from frac_estate.chain.trc20 import Trc20Token
from frac_estate.client import TronClient
from frac_estate.exceptions import TransactionRevertedError
from frac_estate.models import EventType, TxStatus
from frac_estate.units import to_base_units


class TestTrc20Views:
    """Tests for read-only TRC20 queries."""

    def test_metadata(self, chain: ChainSimulator, usdt: str, owner: str) -> None:
        assert chain.call(usdt, "name") == "Tether USD"
        assert chain.call(usdt, "symbol") == "USDT"
        assert chain.call(usdt, "decimals") == 6
        assert chain.call(usdt, "owner") == owner

    def test_supply(self, chain: ChainSimulator, usdt: str, owner: str, buyer: str) -> None:
        minted = 2 * to_base_units(100_000, 6)
        initial = to_base_units(1_000_000, 6)

        assert chain.call(usdt, "totalSupply") == initial + minted
        assert chain.call(usdt, "balanceOf", owner) == initial
        assert chain.call(usdt, "balanceOf", buyer) == to_base_units(100_000, 6)

    def test_deploy_emits_mint_transfer(self, chain: ChainSimulator, usdt: str, owner: str) -> None:
        transfers = chain.store.get_contract_events(usdt, EventType.TRANSFER)

        assert transfers[0].data == {"from": ZERO_ADDRESS, "to": owner, "value": to_base_units(1_000_000, 6)}


class TestTrc20Transfers:
    """Tests for transfer, approve and transferFrom."""

    def test_transfer(self, chain: ChainSimulator, usdt: str, buyer_client: TronClient, other: str) -> None:
        asset = buyer_client.trc20(usdt)
        asset.transfer(other, 5)

        assert asset.balance_of(other) == to_base_units(100_000, 6) + 5

    def test_transfer_over_balance_reverts(self, chain: ChainSimulator, usdt: str, buyer_client: TronClient, other: str) -> None:
        asset = buyer_client.trc20(usdt)

        with pytest.raises(TransactionRevertedError, match="InsufficientBalanceError"):
            asset.transfer(other, to_base_units(100_001, 6))

    def test_approve_overwrites(self, usdt: str, buyer_client: TronClient, buyer: str, other: str) -> None:
        asset = buyer_client.trc20(usdt)
        asset.approve(other, 10)
        receipt = asset.approve(other, 3)

        assert asset.allowance(buyer, other) == 3
        assert receipt.events[0].event_type is EventType.APPROVAL
        assert receipt.events[0].data == {"owner": buyer, "spender": other, "value": 3}

    def test_transfer_from_consumes_allowance(
        self, usdt: str, buyer_client: TronClient, other_client: TronClient, buyer: str, other: str
    ) -> None:
        buyer_client.trc20(usdt).approve(other, 10)
        spender = other_client.trc20(usdt)
        spender.transfer_from(buyer, other, 4)

        assert spender.allowance(buyer, other) == 6
        assert spender.balance_of(other) == to_base_units(100_000, 6) + 4

    def test_transfer_from_without_allowance_reverts(
        self, chain: ChainSimulator, usdt: str, other_client: TronClient, buyer: str, other: str
    ) -> None:
        with pytest.raises(TransactionRevertedError) as exc_info:
            other_client.trc20(usdt).transfer_from(buyer, other, 1)

        receipt = exc_info.value.receipt
        assert receipt.status is TxStatus.REVERTED
        assert receipt.revert_reason.startswith("InsufficientAllowanceError")
        assert chain.call(usdt, "balanceOf", buyer) == to_base_units(100_000, 6)


class TestTrc20Mint:
    """Tests for owner-only minting."""

    def test_non_owner_cannot_mint(self, usdt: str, buyer_client: TronClient, buyer: str) -> None:
        with pytest.raises(TransactionRevertedError, match="UnauthorizedError"):
            buyer_client.trc20(usdt).mint(buyer, 1)

    def test_state_round_trip(self, chain: ChainSimulator, usdt: str, buyer: str) -> None:
        token = chain.get_contract(usdt)
        restored = Trc20Token.from_state(usdt, token.to_state())

        assert restored.balance_of(buyer) == token.balance_of(buyer)
        assert restored.total_supply() == token.total_supply()
        assert restored.owner() == token.owner()
