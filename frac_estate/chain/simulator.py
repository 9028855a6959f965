"""In-process TRON-style node hosting contracts and native balances.

Every mutating call is one atomic transaction: the call value moves to
the contract, the method runs, and any contract rejection rolls all
state back and is recorded as a reverted receipt. Any other error
also rolls back, then propagates without a receipt. Transactions are
serialized by a lock and each one closes its own block.
"""

from __future__ import annotations

import copy
import hashlib
import json
import logging
import threading
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Sequence

from frac_estate.chain.address import validate_address
from frac_estate.chain.address import contract_address as derive_contract_address
from frac_estate.chain.base import CallContext, Contract
from frac_estate.chain.fractional import FractionalPropertyContract
from frac_estate.chain.ledger import NativeLedger
from frac_estate.chain.store import TransactionStore
from frac_estate.chain.trc20 import Trc20Token
from frac_estate.exceptions import (
    ConfigurationError,
    ContractError,
    MalformedAddressError,
    NonPayableError,
    UnknownContractError,
    UnknownMethodError,
)
from frac_estate.logging import tx_context
from frac_estate.models import ContractEvent, EventType, TransactionReceipt, TxStatus
from frac_estate.units import check_uint256

logger = logging.getLogger(__name__)

CONTRACT_TYPES: dict[str, type[Contract]] = {
    FractionalPropertyContract.CONTRACT_NAME: FractionalPropertyContract,
    Trc20Token.CONTRACT_NAME: Trc20Token,
}

STATE_VERSION = 1


class ChainSimulator:
    """Local development chain.

    Parameters
    ----------
    state_path : Path | None
        When set, state is written to this JSON file after every
        confirmed transaction so other processes can pick it up.
    """

    def __init__(self, state_path: Path | None = None) -> None:
        self.native = NativeLedger()
        self.contracts: dict[str, Contract] = {}
        self.store = TransactionStore()
        self.block_number = 0
        self.state_path = Path(state_path) if state_path is not None else None
        self._nonces: dict[str, int] = {}
        self._lock = threading.RLock()

    # Accounts
    def fund(self, address: str, amount: int) -> None:
        """Credit native coin to an account (faucet)."""
        validate_address(address)
        with self._lock:
            self.native.credit(address, amount)
            self._persist()
        logger.debug("Funded %s with %d sun", address, amount)

    def get_balance(self, address: str) -> int:
        """Native balance in sun."""
        validate_address(address)
        with self._lock:
            return self.native.balance_of(address)

    def get_contract(self, address: str) -> Contract:
        contract = self.contracts.get(address)
        if contract is None:
            raise UnknownContractError(f"No contract deployed at {address}")
        return contract

    def is_contract(self, address: str) -> bool:
        return address in self.contracts

    # Transactions
    def deploy(self, deployer: str, contract_cls: type[Contract], *args: Any, **kwargs: Any) -> TransactionReceipt:
        """Create a contract owned by ``deployer``.

        Constructor errors propagate to the caller; nothing is recorded.

        Returns
        -------
        TransactionReceipt
            Receipt whose ``contract_address`` is the new contract.
        """
        validate_address(deployer)
        with self._lock:
            nonce = self._next_nonce(deployer)
            address = derive_contract_address(deployer, nonce)
            snapshot = self._snapshot()
            ctx = CallContext(sender=deployer, call_value=0, contract_address=address, chain=self)
            try:
                contract = contract_cls(address, deployer, *args, **kwargs)
                self.contracts[address] = contract
                contract.on_deploy(ctx)
            except Exception:
                self._restore(snapshot)
                self._nonces[deployer] = nonce
                raise

            ctx.emit(EventType.CONTRACT_DEPLOYED, contract=contract_cls.CONTRACT_NAME, owner=deployer)
            receipt = self._record(
                sender=deployer,
                contract_address=address,
                method="constructor",
                args=list(args),
                call_value=0,
                nonce=nonce,
                status=TxStatus.SUCCESS,
                events=ctx.events,
            )
        logger.info("Deployed %s at %s", contract_cls.CONTRACT_NAME, address, extra=tx_context(receipt))
        return receipt

    def call(self, contract_address: str, method: str, *args: Any, sender: str | None = None) -> Any:
        """Run a read-only view; no transaction is created.

        Views hold the lock so they never observe a transaction half
        applied or a revert half restored.
        """
        with self._lock:
            contract = self.get_contract(contract_address)
            attr = contract.VIEWS.get(method)
            if attr is None:
                raise UnknownMethodError(f"{contract.CONTRACT_NAME} has no view {method!r}")
            return getattr(contract, attr)(*args)

    def send(
        self,
        sender: str,
        contract_address: str,
        method: str,
        *args: Any,
        call_value: int = 0,
    ) -> TransactionReceipt:
        """Submit a state-changing call and wait for it to be confirmed.

        Contract rejections do not raise: the receipt comes back with
        ``status=REVERTED`` and the reason.
        """
        validate_address(sender)
        self.get_contract(contract_address)
        check_uint256(call_value, "call value")

        with self._lock:
            nonce = self._next_nonce(sender)
            snapshot = self._snapshot()
            events: list[ContractEvent] = []
            try:
                if call_value:
                    self.native.transfer(sender, contract_address, call_value)
                result = self.invoke(
                    sender=sender,
                    contract_address=contract_address,
                    method=method,
                    args=args,
                    call_value=call_value,
                    events=events,
                )
            except (ContractError, MalformedAddressError) as exc:
                self._restore(snapshot)
                receipt = self._record(
                    sender=sender,
                    contract_address=contract_address,
                    method=method,
                    args=list(args),
                    call_value=call_value,
                    nonce=nonce,
                    status=TxStatus.REVERTED,
                    revert_reason=f"{type(exc).__name__}: {exc}",
                )
                logger.warning(
                    "%s.%s reverted: %s",
                    contract_address,
                    method,
                    receipt.revert_reason,
                    extra=tx_context(receipt),
                )
                return receipt
            except Exception:
                # Not a contract rejection: undo everything, including the nonce, and surface it
                self._restore(snapshot)
                self._nonces[sender] = nonce
                logger.exception("%s.%s failed outside the contract", contract_address, method)
                raise

            receipt = self._record(
                sender=sender,
                contract_address=contract_address,
                method=method,
                args=list(args),
                call_value=call_value,
                nonce=nonce,
                status=TxStatus.SUCCESS,
                return_value=result,
                events=events,
            )
        logger.debug(
            "%s.%s confirmed in block %d",
            contract_address,
            method,
            receipt.block_number,
            extra=tx_context(receipt),
        )
        return receipt

    def invoke(
        self,
        sender: str,
        contract_address: str,
        method: str,
        args: Sequence[Any],
        call_value: int,
        events: list[ContractEvent],
    ) -> Any:
        """Execute a contract method inside the current transaction."""
        contract = self.get_contract(contract_address)
        attr = contract.METHODS.get(method)
        if attr is None:
            raise UnknownMethodError(f"{contract.CONTRACT_NAME} has no method {method!r}")
        if call_value and method not in contract.PAYABLE:
            raise NonPayableError(f"{method}() is not payable")

        ctx = CallContext(
            sender=sender,
            call_value=call_value,
            contract_address=contract_address,
            chain=self,
            events=events,
        )
        return getattr(contract, attr)(ctx, *args)

    def _next_nonce(self, sender: str) -> int:
        nonce = self._nonces.get(sender, 0)
        self._nonces[sender] = nonce + 1
        return nonce

    def _record(
        self,
        sender: str,
        contract_address: str,
        method: str,
        args: list[Any],
        call_value: int,
        nonce: int,
        status: TxStatus,
        revert_reason: str | None = None,
        return_value: Any = None,
        events: list[ContractEvent] | None = None,
    ) -> TransactionReceipt:
        self.block_number += 1
        timestamp = datetime.now(timezone.utc)
        digest = hashlib.sha256(
            json.dumps(
                [sender, contract_address, method, args, call_value, nonce, self.block_number],
                default=str,
            ).encode("utf-8")
        ).hexdigest()

        events = events or []
        for event in events:
            event.tx_id = digest
            event.block_number = self.block_number
            event.timestamp = timestamp

        receipt = TransactionReceipt(
            tx_id=digest,
            block_number=self.block_number,
            sender=sender,
            contract_address=contract_address,
            method=method,
            args=args,
            call_value=call_value,
            status=status,
            timestamp=timestamp,
            revert_reason=revert_reason,
            return_value=return_value,
            events=events,
        )
        self.store.add_receipt(receipt)
        if status is TxStatus.SUCCESS:
            self._persist()
        return receipt

    def _snapshot(self) -> tuple[dict[str, int], dict[str, Contract]]:
        return copy.deepcopy((self.native.balances, self.contracts))

    def _restore(self, snapshot: tuple[dict[str, int], dict[str, Contract]]) -> None:
        # In place, so contract objects held by callers stay current
        balances, contracts = snapshot
        self.native.balances = balances
        for address in list(self.contracts):
            if address not in contracts:
                del self.contracts[address]
        for address, saved in contracts.items():
            live = self.contracts.get(address)
            if live is None:
                self.contracts[address] = saved
            else:
                live.__dict__.clear()
                live.__dict__.update(saved.__dict__)

    # Persistence
    def to_state(self) -> dict[str, Any]:
        """Serialize balances, contracts and counters (not the tx history)."""
        return {
            "version": STATE_VERSION,
            "block_number": self.block_number,
            "nonces": dict(self._nonces),
            "balances": dict(self.native.balances),
            "contracts": {
                address: {"type": contract.CONTRACT_NAME, "state": contract.to_state()}
                for address, contract in self.contracts.items()
            },
        }

    def save(self, path: Path | str | None = None) -> Path:
        """Write state to ``path`` (default: ``state_path``)."""
        target = Path(path) if path is not None else self.state_path
        if target is None:
            raise ConfigurationError("No state path configured for this chain")
        target.parent.mkdir(parents=True, exist_ok=True)
        with open(target, "w", encoding="utf-8") as f:
            json.dump(self.to_state(), f, indent=2)
        return target

    @classmethod
    def load(cls, path: Path | str) -> "ChainSimulator":
        """Restore a chain saved with ``save``; it keeps persisting to ``path``."""
        path = Path(path)
        with open(path, encoding="utf-8") as f:
            state = json.load(f)
        if state.get("version") != STATE_VERSION:
            raise ConfigurationError(f"Unsupported chain state version in {path}")

        chain = cls(state_path=path)
        chain.block_number = state["block_number"]
        chain._nonces = dict(state["nonces"])
        chain.native.balances = dict(state["balances"])
        for address, entry in state["contracts"].items():
            contract_cls = CONTRACT_TYPES.get(entry["type"])
            if contract_cls is None:
                raise ConfigurationError(f"Unknown contract type {entry['type']!r} in {path}")
            chain.contracts[address] = contract_cls.from_state(address, entry["state"])
        logger.info("Loaded chain state from %s at block %d", path, chain.block_number)
        return chain

    def _persist(self) -> None:
        if self.state_path is not None:
            self.save()


def connect(full_node: str) -> ChainSimulator:
    """Open the node behind a ``full_node`` endpoint.

    ``memory://`` starts an empty in-process chain; ``sim://<path>``
    opens (or creates) a chain persisted to the JSON file at ``<path>``.
    """
    if full_node.startswith("memory://"):
        return ChainSimulator()
    if full_node.startswith("sim://"):
        path = Path(full_node[len("sim://"):])
        if not path.name:
            raise ConfigurationError(f"sim:// endpoint needs a file path: {full_node!r}")
        if path.exists():
            return ChainSimulator.load(path)
        return ChainSimulator(state_path=path)
    raise ConfigurationError(
        f"Unsupported node endpoint {full_node!r}; use memory:// or sim://<state-file>"
    )
