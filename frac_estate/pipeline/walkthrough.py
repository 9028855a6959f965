"""End-to-end walkthrough: buy fractions, deposit dividends, claim.

Runs against a deployed property contract with two identities: the
owner (deposits rental income) and a test buyer (buys fractions and
claims). The payment asset follows the configuration, so the same
pipeline covers TRX-priced and USDT-priced properties.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from frac_estate.chain.simulator import ChainSimulator, connect
from frac_estate.client import (
    FractionalTokenHandle,
    PaymentAsset,
    TronClient,
    payment_asset_for,
)
from frac_estate.config import ClientConfig
from frac_estate.models import TransactionReceipt
from frac_estate.pipeline.steps import Pipeline, PipelineReport

logger = logging.getLogger(__name__)


@dataclass
class WalkthroughSettings:
    """Amounts used by the walkthrough."""

    fractions_to_buy: int = 2
    dividend_amount: int = 100  # whole TRX / USDT


@dataclass
class WalkthroughState:
    """Shared state threaded through the walkthrough steps."""

    config: ClientConfig
    node: ChainSimulator
    settings: WalkthroughSettings = field(default_factory=WalkthroughSettings)
    owner: TronClient | None = None
    buyer: TronClient | None = None
    token: FractionalTokenHandle | None = None
    token_as_owner: FractionalTokenHandle | None = None
    payment: PaymentAsset | None = None
    owner_payment: PaymentAsset | None = None
    cost: int = 0
    pending: int = 0


def connect_signers(state: WalkthroughState) -> dict[str, str]:
    config = state.config
    state.owner = TronClient(state.node, config.owner_private_key)
    state.buyer = TronClient(state.node, config.test_private_key)
    state.token_as_owner = state.owner.fractional(config.contract_address)
    state.token = state.buyer.fractional(config.contract_address)
    state.payment = payment_asset_for(state.buyer, config.payment_asset_address)
    state.owner_payment = state.payment.with_signer(state.owner)

    logger.info("Owner address : %s", state.owner.address)
    logger.info("Test  address : %s", state.buyer.address)
    logger.info("Contract      : %s", config.contract_address)
    logger.info("RPC node      : %s", config.full_node)
    logger.info("Payment asset : %s", state.payment.symbol)
    return {
        "owner": state.owner.address,
        "buyer": state.buyer.address,
        "contract": config.contract_address,
    }


def read_token_name(state: WalkthroughState) -> str:
    name = state.token.name()
    logger.info("Token name    : %s", name)
    return name


def read_sale_state(state: WalkthroughState) -> dict[str, int]:
    unsold = state.token.unsold_fractions()
    price = state.token.price()
    state.cost = price * state.settings.fractions_to_buy
    logger.info("Unsold fractions: %d, price: %s", unsold, state.payment.format(price))
    return {"unsold": unsold, "price": price, "cost": state.cost}


def buy_fractions(state: WalkthroughState) -> TransactionReceipt:
    count = state.settings.fractions_to_buy
    logger.info("Buying %d fractions for %s", count, state.payment.format(state.cost))
    receipt = state.payment.purchase(state.token, count, state.cost)
    logger.info("   buy()     tx id: %s", receipt.tx_id)
    return receipt


def deposit_dividends(state: WalkthroughState) -> TransactionReceipt:
    amount = state.owner_payment.to_units(state.settings.dividend_amount)
    logger.info("Depositing %s rental income as owner", state.owner_payment.format(amount))
    receipt = state.owner_payment.deposit(state.token_as_owner, amount)
    logger.info("   deposit   tx id: %s", receipt.tx_id)
    return receipt


def query_claimable(state: WalkthroughState) -> int:
    state.pending = state.token.claimable(state.buyer.address)
    logger.info("Claimable for test address: %s", state.payment.format(state.pending))
    return state.pending


def claim_dividends(state: WalkthroughState) -> TransactionReceipt | None:
    if state.pending <= 0:
        logger.info("   nothing to claim")
        return None
    receipt = state.token.claim()
    logger.info("   claim()   tx id: %s", receipt.tx_id)
    return receipt


def report_balances(state: WalkthroughState) -> dict[str, Any]:
    fractions = state.token.balance_of(state.buyer.address)
    wallet = state.payment.balance_of()
    logger.info("Final fraction balance : %d fractions", fractions)
    logger.info("Wallet balance         : %s", state.payment.format(wallet))
    return {"fractions": fractions, "wallet": wallet, "native": state.buyer.get_balance()}


def build_walkthrough() -> Pipeline[WalkthroughState]:
    """Assemble the walkthrough steps in order."""
    return (
        Pipeline("walkthrough")
        .add("connect", connect_signers)
        .add("token_name", read_token_name)
        .add("sale_state", read_sale_state)
        .add("buy", buy_fractions)
        .add("deposit_dividends", deposit_dividends)
        .add("claimable", query_claimable)
        .add("claim", claim_dividends)
        .add("final_balances", report_balances)
    )


def run_walkthrough(
    config: ClientConfig,
    node: ChainSimulator | None = None,
    settings: WalkthroughSettings | None = None,
) -> PipelineReport:
    """Validate configuration, then run the walkthrough.

    Raises
    ------
    ConfigurationError
        Before any chain call, if required configuration is missing.
    """
    config.validate()
    if node is None:
        node = connect(config.full_node)
    state = WalkthroughState(
        config=config,
        node=node,
        settings=settings or WalkthroughSettings(),
    )
    return build_walkthrough().run(state)
