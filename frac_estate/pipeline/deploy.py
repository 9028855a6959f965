"""Deployment presets and migrations for property contracts."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from frac_estate.chain.address import address_from_private_key
from frac_estate.chain.fractional import FractionalPropertyContract
from frac_estate.chain.simulator import ChainSimulator
from frac_estate.chain.trc20 import Trc20Token
from frac_estate.client import TronClient
from frac_estate.exceptions import ConfigurationError
from frac_estate.models import PaymentKind, PropertyToken, TransactionReceipt
from frac_estate.units import sun, to_base_units

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DeploymentPreset:
    """Property parameters for one migration."""

    name: str
    symbol: str
    max_fractions: int
    price_per_fraction: int  # smallest payment unit
    property_address: str
    metadata_uri: str
    payment_kind: PaymentKind = PaymentKind.NATIVE

    def to_token(self, payment_asset_address: str | None = None) -> PropertyToken:
        """Build the token parameters, checking the payment asset is set when required."""
        if self.payment_kind is PaymentKind.TOKEN:
            if not payment_asset_address:
                raise ConfigurationError(
                    f"USDT_ADDRESS missing: preset {self.symbol} is priced in a TRC20 asset"
                )
        else:
            payment_asset_address = None
        return PropertyToken(
            name=self.name,
            symbol=self.symbol,
            max_fractions=self.max_fractions,
            price_per_fraction=self.price_per_fraction,
            property_address=self.property_address,
            metadata_uri=self.metadata_uri,
            payment_asset_address=payment_asset_address,
        )


PRESETS: dict[str, DeploymentPreset] = {
    "citycenter": DeploymentPreset(
        name="CityCenter Condo Fraction",
        symbol="CCCF",
        max_fractions=1_000,
        price_per_fraction=sun(50),
        property_address="456 CityCenter Blvd, Chicago IL",
        metadata_uri="ipfs://QmYourJson",
    ),
    "lakeview": DeploymentPreset(
        name="Lakeview Fractional",
        symbol="LVF",
        max_fractions=1_000,
        price_per_fraction=to_base_units(100, 6),  # 100 USDT
        property_address="123 Lakeview Dr, Austin TX",
        metadata_uri="ipfs://Qm…",
        payment_kind=PaymentKind.TOKEN,
    ),
}


def get_preset(name: str) -> DeploymentPreset:
    try:
        return PRESETS[name]
    except KeyError as exc:
        raise ConfigurationError(f"Unknown preset {name!r} (known: {', '.join(PRESETS)})") from exc


def deploy_property(
    node: ChainSimulator,
    deployer_key: str,
    token: PropertyToken,
) -> str:
    """Deploy a fractional property contract and return its address."""
    deployer = address_from_private_key(deployer_key)
    receipt = node.deploy(deployer, FractionalPropertyContract, token)
    logger.info("%s deployed at: %s", FractionalPropertyContract.CONTRACT_NAME, receipt.contract_address)
    return receipt.contract_address


def deploy_preset(
    node: ChainSimulator,
    deployer_key: str,
    preset: DeploymentPreset | str,
    usdt_address: str | None = None,
) -> str:
    """Deploy one of the named presets."""
    if isinstance(preset, str):
        preset = get_preset(preset)
    return deploy_property(node, deployer_key, preset.to_token(usdt_address))


def deploy_mock_usdt(
    node: ChainSimulator,
    owner_key: str,
    initial_supply: int = to_base_units(1_000_000, 6),
) -> str:
    """Deploy a 6-decimal mock USDT with the supply minted to the owner."""
    owner = address_from_private_key(owner_key)
    receipt = node.deploy(owner, Trc20Token, "Tether USD", "USDT", 6, initial_supply)
    logger.info("Mock USDT deployed at: %s", receipt.contract_address)
    return receipt.contract_address


def fund_usdt(
    node: ChainSimulator,
    owner_key: str,
    usdt_address: str,
    recipient: str,
    amount: int,
) -> TransactionReceipt:
    """Transfer ``amount`` USDT units from the owner's supply to ``recipient``.

    Raises
    ------
    TransactionRevertedError
        If the owner does not hold ``amount``.
    """
    receipt = TronClient(node, owner_key).trc20(usdt_address).transfer(recipient, amount)
    logger.info("Transferred %d USDT units to %s", amount, recipient)
    return receipt

