"""Tests for the fractional property contract."""

import pytest

from frac_estate.chain.address import ZERO_ADDRESS
from frac_estate.chain.fractional import FractionalPropertyContract
from frac_estate.chain.simulator import ChainSimulator
from frac_estate.exceptions import InvalidTokenParametersError
from frac_estate.models import EventType, PropertyToken, TxStatus
from frac_estate.pipeline.deploy import deploy_property
from frac_estate.units import to_base_units


def snapshot(chain: ChainSimulator, contract: str, *holders: str) -> tuple:
    return (
        chain.call(contract, "unitsSold"),
        chain.call(contract, "proceeds"),
        chain.call(contract, "totalDividends"),
        chain.get_balance(contract),
        tuple(chain.call(contract, "balanceOf", h) for h in holders),
        tuple(chain.call(contract, "claimable", h) for h in holders),
        tuple(chain.get_balance(h) for h in holders),
    )


class TestPropertyToken:
    """Tests for token parameter validation."""

    @pytest.mark.parametrize(
        "overrides",
        [
            {"name": ""},
            {"symbol": ""},
            {"max_fractions": 0},
            {"price_per_fraction": -1},
            {"price_per_fraction": 1.5},
            {"max_fractions": True},
            {"max_fractions": 2**256},
            {"payment_asset_address": "not-an-address"},
        ],
    )
    def test_invalid_parameters(self, native_token: PropertyToken, overrides: dict) -> None:
        params = {**native_token.__dict__, **overrides}

        with pytest.raises(InvalidTokenParametersError):
            PropertyToken(**params)

    def test_cost_and_kind(self, native_token: PropertyToken) -> None:
        assert native_token.cost(2) == 200
        assert native_token.payment_kind.value == "NATIVE"

    def test_payment_asset_must_be_deployed(
        self, chain: ChainSimulator, native_token: PropertyToken, owner_key: str, other: str
    ) -> None:
        token = PropertyToken(**{**native_token.__dict__, "payment_asset_address": other})

        with pytest.raises(InvalidTokenParametersError):
            deploy_property(chain, owner_key, token)
        assert chain.contracts == {}


class TestViews:
    """Tests for read-only queries."""

    def test_initial_state(self, chain: ChainSimulator, native_contract: str, owner: str, buyer: str) -> None:
        assert chain.call(native_contract, "name") == "Test Fractional"
        assert chain.call(native_contract, "symbol") == "TSTF"
        assert chain.call(native_contract, "owner") == owner
        assert chain.call(native_contract, "maxFractions") == 1_000
        assert chain.call(native_contract, "unitsSold") == 0
        assert chain.call(native_contract, "unsoldFractions") == 1_000
        assert chain.call(native_contract, "getPrice") == 100
        assert chain.call(native_contract, "getPriceSun") == 100
        assert chain.call(native_contract, "pricePerFraction") == 100
        assert chain.call(native_contract, "propertyAddress") == "1 Test St, Springfield IL"
        assert chain.call(native_contract, "metadataURI") == "ipfs://QmTest"
        assert chain.call(native_contract, "paymentToken") == ZERO_ADDRESS
        assert chain.call(native_contract, "balanceOf", buyer) == 0
        assert chain.call(native_contract, "claimable", buyer) == 0

    def test_token_payment_view(self, chain: ChainSimulator, token_contract: str, usdt: str) -> None:
        assert chain.call(token_contract, "paymentToken") == usdt


class TestNativePurchase:
    """Tests for buy() with TRX attached."""

    def test_buy_two_fractions(self, chain: ChainSimulator, native_contract: str, buyer: str) -> None:
        before = chain.get_balance(buyer)
        receipt = chain.send(buyer, native_contract, "buy", 2, call_value=200)

        assert receipt.status is TxStatus.SUCCESS
        assert receipt.return_value == 2
        assert chain.call(native_contract, "unitsSold") == 2
        assert chain.call(native_contract, "totalSupply") == 2
        assert chain.call(native_contract, "balanceOf", buyer) == 2
        assert chain.call(native_contract, "proceeds") == 200
        assert chain.get_balance(buyer) == before - 200
        assert chain.get_balance(native_contract) == 200

    def test_buy_emits_events(self, chain: ChainSimulator, native_contract: str, buyer: str) -> None:
        receipt = chain.send(buyer, native_contract, "buy", 3, call_value=300)
        purchased, transfer = receipt.events

        assert purchased.event_type is EventType.FRACTIONS_PURCHASED
        assert purchased.data == {"buyer": buyer, "fractions": 3, "cost": 300}
        assert transfer.event_type is EventType.TRANSFER
        assert transfer.data == {"from": ZERO_ADDRESS, "to": buyer, "value": 3}
        assert purchased.tx_id == receipt.tx_id

    @pytest.mark.parametrize("value", [199, 201, 0])
    def test_wrong_value_rejected(self, chain: ChainSimulator, native_contract: str, buyer: str, value: int) -> None:
        before = snapshot(chain, native_contract, buyer)
        receipt = chain.send(buyer, native_contract, "buy", 2, call_value=value)

        assert receipt.status is TxStatus.REVERTED
        assert receipt.revert_reason.startswith("InsufficientPaymentError")
        assert receipt.events == []
        assert snapshot(chain, native_contract, buyer) == before

    @pytest.mark.parametrize("count", [0, -1])
    def test_non_positive_count_rejected(self, chain: ChainSimulator, native_contract: str, buyer: str, count: int) -> None:
        receipt = chain.send(buyer, native_contract, "buy", count)

        assert receipt.revert_reason.startswith("InvalidAmountError")

    def test_oversell_rejected(self, chain: ChainSimulator, native_contract: str, buyer: str, other: str) -> None:
        chain.send(buyer, native_contract, "buy", 999, call_value=99_900)
        before = snapshot(chain, native_contract, buyer, other)

        receipt = chain.send(other, native_contract, "buy", 2, call_value=200)

        assert receipt.revert_reason.startswith("SoldOutError")
        assert snapshot(chain, native_contract, buyer, other) == before

    def test_sell_out_exactly(self, chain: ChainSimulator, native_contract: str, buyer: str) -> None:
        chain.send(buyer, native_contract, "buy", 1_000, call_value=100_000)

        assert chain.call(native_contract, "unsoldFractions") == 0
        assert chain.send(buyer, native_contract, "buy", 1, call_value=100).status is TxStatus.REVERTED


class TestTokenPurchase:
    """Tests for buy() paid in USDT."""

    def test_buy_with_allowance(self, chain: ChainSimulator, token_contract: str, usdt: str, buyer: str) -> None:
        cost = to_base_units(200, 6)
        chain.send(buyer, usdt, "approve", token_contract, cost)
        receipt = chain.send(buyer, token_contract, "buy", 2)

        assert receipt.status is TxStatus.SUCCESS
        assert chain.call(token_contract, "balanceOf", buyer) == 2
        assert chain.call(usdt, "balanceOf", token_contract) == cost
        assert chain.call(usdt, "allowance", buyer, token_contract) == 0
        types = [event.event_type for event in receipt.events]
        assert types == [EventType.TRANSFER, EventType.FRACTIONS_PURCHASED, EventType.TRANSFER]

    def test_missing_allowance(self, chain: ChainSimulator, token_contract: str, usdt: str, buyer: str) -> None:
        receipt = chain.send(buyer, token_contract, "buy", 2)

        assert receipt.revert_reason.startswith("InsufficientAllowanceError")
        assert chain.call(token_contract, "unitsSold") == 0

    def test_native_value_rejected(self, chain: ChainSimulator, token_contract: str, usdt: str, buyer: str) -> None:
        chain.send(buyer, usdt, "approve", token_contract, to_base_units(200, 6))
        before = chain.get_balance(buyer)

        receipt = chain.send(buyer, token_contract, "buy", 2, call_value=100)

        assert receipt.revert_reason.startswith("NonPayableError")
        assert chain.get_balance(buyer) == before
        assert chain.call(usdt, "allowance", buyer, token_contract) == to_base_units(200, 6)


class TestDividends:
    """Tests for depositDividends() and claim()."""

    def test_equal_holders_split_evenly(
        self, chain: ChainSimulator, native_contract: str, owner: str, buyer: str, other: str
    ) -> None:
        chain.send(buyer, native_contract, "buy", 5, call_value=500)
        chain.send(other, native_contract, "buy", 5, call_value=500)

        receipt = chain.send(owner, native_contract, "depositDividends", call_value=200_000_000)

        assert receipt.status is TxStatus.SUCCESS
        assert chain.call(native_contract, "claimable", buyer) == 100_000_000
        assert chain.call(native_contract, "claimable", other) == 100_000_000
        assert chain.call(native_contract, "totalDividends") == 200_000_000
        deposited = receipt.events[0]
        assert deposited.event_type is EventType.DIVIDENDS_DEPOSITED
        assert deposited.data == {"amount": 200_000_000, "units_sold": 10, "holders": 2}

    def test_non_owner_deposit_rejected(self, chain: ChainSimulator, native_contract: str, buyer: str) -> None:
        chain.send(buyer, native_contract, "buy", 1, call_value=100)
        before = snapshot(chain, native_contract, buyer)

        for value in (0, 1, 1_000_000):
            receipt = chain.send(buyer, native_contract, "depositDividends", call_value=value)
            assert receipt.revert_reason.startswith("UnauthorizedError")
        assert snapshot(chain, native_contract, buyer) == before

    def test_zero_deposit_rejected(self, chain: ChainSimulator, native_contract: str, owner: str, buyer: str) -> None:
        chain.send(buyer, native_contract, "buy", 1, call_value=100)

        receipt = chain.send(owner, native_contract, "depositDividends")

        assert receipt.revert_reason.startswith("InvalidAmountError")

    def test_deposit_without_holders(self, chain: ChainSimulator, native_contract: str, owner: str) -> None:
        before = chain.get_balance(owner)
        receipt = chain.send(owner, native_contract, "depositDividends", call_value=1_000)

        assert receipt.revert_reason.startswith("NoHoldersError")
        assert chain.get_balance(owner) == before

    def test_native_deposit_rejects_amount_argument(
        self, chain: ChainSimulator, native_contract: str, owner: str, buyer: str
    ) -> None:
        chain.send(buyer, native_contract, "buy", 1, call_value=100)

        receipt = chain.send(owner, native_contract, "depositDividends", 1_000, call_value=1_000)

        assert receipt.revert_reason.startswith("InvalidAmountError")

    def test_claim_pays_out(self, chain: ChainSimulator, native_contract: str, owner: str, buyer: str) -> None:
        chain.send(buyer, native_contract, "buy", 2, call_value=200)
        chain.send(owner, native_contract, "depositDividends", call_value=1_000)
        before = chain.get_balance(buyer)

        receipt = chain.send(buyer, native_contract, "claim")

        assert receipt.return_value == 1_000
        assert chain.get_balance(buyer) == before + 1_000
        assert chain.call(native_contract, "claimable", buyer) == 0
        assert chain.call(native_contract, "totalClaimed") == 1_000
        assert receipt.events[0].data == {"holder": buyer, "amount": 1_000}

    def test_second_claim_yields_zero(self, chain: ChainSimulator, native_contract: str, owner: str, buyer: str) -> None:
        chain.send(buyer, native_contract, "buy", 2, call_value=200)
        chain.send(owner, native_contract, "depositDividends", call_value=1_000)
        chain.send(buyer, native_contract, "claim")
        before = chain.get_balance(buyer)

        receipt = chain.send(buyer, native_contract, "claim")

        assert receipt.status is TxStatus.SUCCESS
        assert receipt.return_value == 0
        assert receipt.events == []
        assert chain.get_balance(buyer) == before

    def test_zero_claim_is_noop(self, chain: ChainSimulator, native_contract: str, other: str) -> None:
        before = snapshot(chain, native_contract, other)
        receipt = chain.send(other, native_contract, "claim")

        assert receipt.status is TxStatus.SUCCESS
        assert receipt.return_value == 0
        assert snapshot(chain, native_contract, other) == before

    def test_snapshot_at_deposit(
        self, chain: ChainSimulator, native_contract: str, owner: str, buyer: str, other: str
    ) -> None:
        chain.send(buyer, native_contract, "buy", 1, call_value=100)
        chain.send(owner, native_contract, "depositDividends", call_value=1_000)
        chain.send(other, native_contract, "buy", 3, call_value=300)
        chain.send(owner, native_contract, "depositDividends", call_value=1_000)

        assert chain.call(native_contract, "claimable", buyer) == 1_000 + 250
        assert chain.call(native_contract, "claimable", other) == 750

    def test_dividends_never_withdrawn_as_proceeds(
        self, chain: ChainSimulator, native_contract: str, owner: str, buyer: str
    ) -> None:
        chain.send(buyer, native_contract, "buy", 2, call_value=200)
        chain.send(owner, native_contract, "depositDividends", call_value=1_000)

        receipt = chain.send(owner, native_contract, "withdrawProceeds")

        assert receipt.return_value == 200
        assert chain.get_balance(native_contract) == 1_000
        assert chain.send(buyer, native_contract, "claim").return_value == 1_000

    def test_token_deposit_and_claim(
        self, chain: ChainSimulator, token_contract: str, usdt: str, owner: str, buyer: str
    ) -> None:
        chain.send(buyer, usdt, "approve", token_contract, to_base_units(100, 6))
        chain.send(buyer, token_contract, "buy", 1)
        amount = to_base_units(50, 6)
        chain.send(owner, usdt, "approve", token_contract, amount)

        receipt = chain.send(owner, token_contract, "depositDividends", amount)
        assert receipt.status is TxStatus.SUCCESS

        before = chain.call(usdt, "balanceOf", buyer)
        chain.send(buyer, token_contract, "claim")
        assert chain.call(usdt, "balanceOf", buyer) == before + amount

    def test_token_deposit_requires_amount(
        self, chain: ChainSimulator, token_contract: str, usdt: str, owner: str, buyer: str
    ) -> None:
        chain.send(buyer, usdt, "approve", token_contract, to_base_units(100, 6))
        chain.send(buyer, token_contract, "buy", 1)

        assert chain.send(owner, token_contract, "depositDividends").revert_reason.startswith("InvalidAmountError")
        assert chain.send(owner, token_contract, "depositDividends", 5, call_value=5).revert_reason.startswith(
            "NonPayableError"
        )


class TestTransfersAndProceeds:
    """Tests for fraction transfers and proceeds withdrawal."""

    def test_transfer_keeps_accrued_dividends(
        self, chain: ChainSimulator, native_contract: str, owner: str, buyer: str, other: str
    ) -> None:
        chain.send(buyer, native_contract, "buy", 4, call_value=400)
        chain.send(owner, native_contract, "depositDividends", call_value=400)

        receipt = chain.send(buyer, native_contract, "transfer", other, 3)

        assert receipt.status is TxStatus.SUCCESS
        assert chain.call(native_contract, "balanceOf", other) == 3
        assert chain.call(native_contract, "claimable", buyer) == 400
        assert chain.call(native_contract, "claimable", other) == 0

    def test_transfer_over_balance(self, chain: ChainSimulator, native_contract: str, buyer: str, other: str) -> None:
        receipt = chain.send(buyer, native_contract, "transfer", other, 1)

        assert receipt.revert_reason.startswith("InsufficientBalanceError")

    def test_transfer_to_malformed_address(self, chain: ChainSimulator, native_contract: str, buyer: str) -> None:
        chain.send(buyer, native_contract, "buy", 1, call_value=100)

        receipt = chain.send(buyer, native_contract, "transfer", "bogus", 1)

        assert receipt.revert_reason.startswith("MalformedAddressError")

    def test_withdraw_proceeds_owner_only(self, chain: ChainSimulator, native_contract: str, buyer: str) -> None:
        chain.send(buyer, native_contract, "buy", 1, call_value=100)

        receipt = chain.send(buyer, native_contract, "withdrawProceeds")

        assert receipt.revert_reason.startswith("UnauthorizedError")

    def test_withdraw_proceeds_emits_event(
        self, chain: ChainSimulator, native_contract: str, owner: str, buyer: str
    ) -> None:
        chain.send(buyer, native_contract, "buy", 1, call_value=100)
        before = chain.get_balance(owner)

        receipt = chain.send(owner, native_contract, "withdrawProceeds")

        assert chain.get_balance(owner) == before + 100
        assert receipt.events[0].event_type is EventType.PROCEEDS_WITHDRAWN
        assert chain.send(owner, native_contract, "withdrawProceeds").return_value == 0

    def test_positions(self, chain: ChainSimulator, native_contract: str, owner: str, buyer: str, other: str) -> None:
        chain.send(buyer, native_contract, "buy", 1, call_value=100)
        chain.send(other, native_contract, "buy", 1, call_value=100)
        chain.send(owner, native_contract, "depositDividends", call_value=10)
        chain.send(buyer, native_contract, "claim")

        contract = chain.get_contract(native_contract)
        positions = {p.address: p for p in contract.positions()}

        assert contract.holders() == sorted([buyer, other])
        assert positions[buyer].fractions == 1
        assert positions[buyer].claimed == 5
        assert positions[other].claimable == 5

    def test_state_round_trip(self, chain: ChainSimulator, native_contract: str, owner: str, buyer: str) -> None:
        chain.send(buyer, native_contract, "buy", 2, call_value=200)
        chain.send(owner, native_contract, "depositDividends", call_value=7)
        contract = chain.get_contract(native_contract)

        restored = FractionalPropertyContract.from_state(native_contract, contract.to_state())

        assert restored.to_state() == contract.to_state()
        assert restored.token == contract.token
