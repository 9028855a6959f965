"""Market scenario: a property sale with rental income and claims."""

import logging
import random
from typing import Any

from frac_estate.chain.fractional import FractionalPropertyContract
from frac_estate.chain.simulator import ChainSimulator
from frac_estate.client import FractionalTokenHandle, PaymentAsset, TronClient, payment_asset_for
from frac_estate.config import MarketConfig
from frac_estate.generators.account import AccountGenerator
from frac_estate.generators.property import PropertyTokenGenerator
from frac_estate.models import ContractEvent, KeyPair, TxStatus
from frac_estate.pipeline.deploy import deploy_mock_usdt, deploy_property
from frac_estate.units import sun, to_base_units

logger = logging.getLogger(__name__)


class MarketScenario:
    """Simulate the life of one tokenized property on a local chain.

    This scenario creates:
    - A property owner and a fractional property contract
    - A mock USDT asset when the property is priced in tokens
    - Buyers purchasing fractions until the target sell-through
    - Owner dividend deposits interleaved with purchases
    - Holder claims after each deposit and a final claim round
    """

    # Whole coins per dividend deposit
    DEPOSIT_RANGE = (50, 5_000)

    def __init__(
        self,
        num_buyers: int = 25,
        num_deposits: int = 4,
        sell_through: float = 0.6,
        claim_rate: float = 0.5,
        use_token_payment: bool = False,
        seed: int | None = None,
        *,
        config: MarketConfig | None = None,
    ) -> None:
        """Initialize market scenario.

        Parameters
        ----------
        num_buyers : int
            Number of distinct buyers.
        num_deposits : int
            Number of owner dividend deposits.
        sell_through : float
            Fraction of the supply to sell (0-1].
        claim_rate : float
            Probability that a holder claims after each deposit.
        use_token_payment : bool
            Price the property in a mock USDT instead of TRX.
        seed : int | None
            Random seed for reproducibility.
        config : MarketConfig | None
            Overrides the sizing arguments when given.
        """
        if config is not None:
            num_buyers = config.num_buyers
            num_deposits = config.num_deposits
            sell_through = config.sell_through
            claim_rate = config.claim_rate
            use_token_payment = config.use_token_payment

        self.num_buyers = num_buyers
        self.num_deposits = num_deposits
        self.sell_through = sell_through
        self.claim_rate = claim_rate
        self.use_token_payment = use_token_payment
        self.seed = seed

        if seed is not None:
            random.seed(seed)

        self.chain = ChainSimulator()
        self._account_gen = AccountGenerator(seed=seed)
        self._token_gen = PropertyTokenGenerator(seed=seed)

        self.owner: KeyPair | None = None
        self.buyers: list[KeyPair] = []
        self.contract_address: str | None = None
        self.usdt_address: str | None = None
        # Per deposit: amount and total credited to claimables
        self.deposits: list[dict[str, int]] = []
        self._clients: dict[str, TronClient] = {}
        self._payments: dict[str, PaymentAsset] = {}

    def generate(self) -> ChainSimulator:
        """Run the whole market.

        Returns
        -------
        ChainSimulator
            Chain holding the contracts, balances and transaction log.
        """
        logger.info(
            "Starting market scenario: %d buyers, %d deposits, %s payment",
            self.num_buyers,
            self.num_deposits,
            "token" if self.use_token_payment else "native",
        )

        self._deploy()
        contract = self.contract
        purchases = self._plan_purchases(contract.token.max_fractions)
        self._fund_buyers(purchases)

        deposit_points = set()
        if purchases:
            deposit_points = set(
                random.sample(range(1, len(purchases) + 1), k=min(self.num_deposits, len(purchases)))
            )

        for step, (buyer, count) in enumerate(purchases, start=1):
            cost = contract.token.cost(count)
            self._payments[buyer.address].purchase(self._handle(buyer), count, cost)
            if step in deposit_points:
                self._deposit()
                self._claim_round(self.claim_rate)

        self._claim_round(self.claim_rate)

        logger.info(
            "Market complete: %d/%d fractions sold, %d holders, %d deposits, %d transactions",
            contract.units_sold,
            contract.token.max_fractions,
            len(contract.holders()),
            len(self.deposits),
            len(self.chain.store.transactions),
        )
        return self.chain

    @property
    def contract(self) -> FractionalPropertyContract:
        return self.chain.get_contract(self.contract_address)

    def _deploy(self) -> None:
        """Create the owner, the payment asset and the property contract."""
        self.owner = self._account_gen.generate()
        self.buyers = list(self._account_gen.generate_batch(self.num_buyers))

        if self.use_token_payment:
            self.usdt_address = deploy_mock_usdt(self.chain, self.owner.private_key)
        else:
            self.chain.fund(self.owner.address, sun(self.num_deposits * self.DEPOSIT_RANGE[1]))

        token = self._token_gen.generate(payment_asset_address=self.usdt_address, decimals=6)
        self.contract_address = deploy_property(self.chain, self.owner.private_key, token)

        for keys in [self.owner, *self.buyers]:
            client = TronClient(self.chain, keys.private_key)
            self._clients[keys.address] = client
            self._payments[keys.address] = payment_asset_for(client, self.usdt_address)

        logger.info("Deployed %s (%s) at %s", token.name, token.symbol, self.contract_address)

    def _plan_purchases(self, max_fractions: int) -> list[tuple[KeyPair, int]]:
        """Random (buyer, count) orders that stop at the sell-through target."""
        target = min(max_fractions, max(1, int(max_fractions * self.sell_through)))
        largest = max(1, 2 * target // max(1, self.num_buyers))

        purchases: list[tuple[KeyPair, int]] = []
        sold = 0
        while sold < target and self.buyers:
            buyer = random.choice(self.buyers)
            count = min(random.randint(1, largest), target - sold)
            purchases.append((buyer, count))
            sold += count
        return purchases

    def _fund_buyers(self, purchases: list[tuple[KeyPair, int]]) -> None:
        """Give every buyer exactly what their planned purchases cost."""
        contract = self.contract
        budgets: dict[str, int] = {}
        for buyer, count in purchases:
            budgets[buyer.address] = budgets.get(buyer.address, 0) + contract.token.cost(count)

        if self.use_token_payment:
            usdt = self._clients[self.owner.address].trc20(self.usdt_address)
            for address, budget in budgets.items():
                usdt.mint(address, budget)
        else:
            for address, budget in budgets.items():
                self.chain.fund(address, budget)

    def _handle(self, keys: KeyPair) -> FractionalTokenHandle:
        return self._clients[keys.address].fractional(self.contract_address)

    def _deposit(self) -> None:
        """Owner deposits a random amount of rental income."""
        contract = self.contract
        payment = self._payments[self.owner.address]
        amount = to_base_units(random.randint(*self.DEPOSIT_RANGE), payment.decimals)

        before = dict(contract.pool.claimable)
        payment.deposit(self._handle(self.owner), amount)
        credited = sum(
            value - before.get(address, 0) for address, value in contract.pool.claimable.items()
        )
        self.deposits.append({"amount": amount, "credited": credited})
        logger.debug("Deposited %s across %d holders", payment.format(amount), len(contract.holders()))

    def _claim_round(self, rate: float) -> None:
        """Each holder with something pending claims with probability ``rate``."""
        contract = self.contract
        for buyer in self.buyers:
            if contract.pool.claimable_of(buyer.address) > 0 and random.random() < rate:
                self._handle(buyer).claim()

    def check_invariants(self) -> list[str]:
        """Check the ledger for consistency.

        Returns
        -------
        list[str]
            Violations found; empty when the ledger is consistent.
        """
        contract = self.contract
        violations = []

        if contract.units_sold > contract.token.max_fractions:
            violations.append(
                f"units sold {contract.units_sold} exceeds cap {contract.token.max_fractions}"
            )

        held = sum(contract.balances.values())
        if held != contract.units_sold:
            violations.append(f"balances sum to {held}, units sold is {contract.units_sold}")

        pending = sum(contract.pool.claimable.values())
        if pending != contract.pool.outstanding:
            violations.append(f"claimables sum to {pending}, outstanding is {contract.pool.outstanding}")

        custody = self._custody()
        required = contract.proceeds + contract.pool.outstanding
        if custody < required:
            violations.append(f"contract holds {custody}, owes {required}")

        for index, deposit in enumerate(self.deposits):
            if deposit["credited"] != deposit["amount"]:
                violations.append(
                    f"deposit {index} of {deposit['amount']} credited {deposit['credited']}"
                )

        return violations

    def _custody(self) -> int:
        if self.usdt_address is None:
            return self.chain.get_balance(self.contract_address)
        return self.chain.call(self.usdt_address, "balanceOf", self.contract_address)

    def events(self) -> list[ContractEvent]:
        """Events emitted by confirmed transactions, in order."""
        return list(self.chain.store.events)

    def get_summary(self) -> dict[str, Any]:
        """Get summary statistics for the simulated market.

        Returns
        -------
        dict[str, Any]
            Summary statistics.
        """
        contract = self.contract
        receipts = self.chain.store.transactions
        return {
            "contract_address": self.contract_address,
            "payment_kind": contract.token.payment_kind.value,
            "max_fractions": contract.token.max_fractions,
            "units_sold": contract.units_sold,
            "sell_through_actual": contract.units_sold / contract.token.max_fractions,
            "holders": len(contract.holders()),
            "deposits": len(self.deposits),
            "total_dividends": contract.pool.total_deposited,
            "total_claimed": contract.pool.total_claimed,
            "outstanding": contract.pool.outstanding,
            "proceeds": contract.proceeds,
            "transactions": len(receipts),
            "reverted": sum(1 for r in receipts if r.status is TxStatus.REVERTED),
            "events": len(self.chain.store.events),
        }
