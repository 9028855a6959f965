"""Client bound to one signing identity on a node."""

from __future__ import annotations

import logging
from typing import Any

from frac_estate.chain.address import (
    address_from_private_key,
    normalize_private_key,
    validate_address,
)
from frac_estate.chain.fractional import FractionalPropertyContract
from frac_estate.chain.simulator import ChainSimulator
from frac_estate.chain.trc20 import Trc20Token
from frac_estate.client.contract import ContractHandle, FractionalTokenHandle, Trc20Handle
from frac_estate.exceptions import TransactionRevertedError, UnknownContractError
from frac_estate.models import TransactionReceipt

logger = logging.getLogger(__name__)


class TronClient:
    """Submit transactions and queries as the owner of ``private_key``.

    Parameters
    ----------
    node : ChainSimulator
        Node to talk to.
    private_key : str
        64 hex characters; the address is derived from it.
    """

    def __init__(self, node: ChainSimulator, private_key: str) -> None:
        self.node = node
        self._private_key = normalize_private_key(private_key)
        self.address = address_from_private_key(self._private_key)

    def __repr__(self) -> str:
        return f"TronClient(address={self.address!r})"

    def contract(self, address: str) -> ContractHandle:
        """Bind to a deployed contract."""
        self._require_contract(address)
        return ContractHandle(self, address)

    def fractional(self, address: str) -> FractionalTokenHandle:
        """Bind to a fractional property contract."""
        if not isinstance(self._require_contract(address), FractionalPropertyContract):
            raise UnknownContractError(f"{address} is not a fractional property contract")
        return FractionalTokenHandle(self, address)

    def trc20(self, address: str) -> Trc20Handle:
        """Bind to a TRC20 asset contract."""
        if not isinstance(self._require_contract(address), Trc20Token):
            raise UnknownContractError(f"{address} is not a TRC20 contract")
        return Trc20Handle(self, address)

    def get_balance(self, address: str | None = None) -> int:
        """Native balance in sun (own address by default)."""
        return self.node.get_balance(address or self.address)

    def call(self, contract_address: str, method: str, *args: Any) -> Any:
        return self.node.call(contract_address, method, *args, sender=self.address)

    def send(
        self, contract_address: str, method: str, *args: Any, call_value: int = 0
    ) -> TransactionReceipt:
        """Submit a transaction and block until it is confirmed.

        Raises
        ------
        TransactionRevertedError
            If the contract rejected the call.
        """
        receipt = self.node.send(self.address, contract_address, method, *args, call_value=call_value)
        if not receipt.succeeded:
            raise TransactionRevertedError(
                f"{method}() reverted: {receipt.revert_reason}", receipt=receipt
            )
        logger.debug("%s %s() tx %s", self.address, method, receipt.tx_id)
        return receipt

    def _require_contract(self, address: str):
        validate_address(address)
        return self.node.get_contract(address)
