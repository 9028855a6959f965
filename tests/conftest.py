"""Pytest configuration and fixtures."""

import pytest

from frac_estate.chain.address import address_from_private_key
from frac_estate.chain.simulator import ChainSimulator
from frac_estate.client import TronClient
from frac_estate.models import PropertyToken
from frac_estate.pipeline.deploy import deploy_mock_usdt, deploy_property
from frac_estate.units import sun, to_base_units

OWNER_KEY = "11" * 32
BUYER_KEY = "22" * 32
OTHER_KEY = "33" * 32


@pytest.fixture
def seed() -> int:
    """Fixed seed for reproducible tests."""
    return 42


@pytest.fixture
def owner_key() -> str:
    return OWNER_KEY


@pytest.fixture
def buyer_key() -> str:
    return BUYER_KEY


@pytest.fixture
def other_key() -> str:
    return OTHER_KEY


@pytest.fixture
def owner() -> str:
    return address_from_private_key(OWNER_KEY)


@pytest.fixture
def buyer() -> str:
    return address_from_private_key(BUYER_KEY)


@pytest.fixture
def other() -> str:
    return address_from_private_key(OTHER_KEY)


@pytest.fixture
def chain(owner: str, buyer: str, other: str) -> ChainSimulator:
    """Fresh chain with the three test accounts funded."""
    node = ChainSimulator()
    for address in (owner, buyer, other):
        node.fund(address, sun(1_000_000))
    return node


@pytest.fixture
def native_token() -> PropertyToken:
    """TRX-priced property: 1000 fractions at 100 sun."""
    return PropertyToken(
        name="Test Fractional",
        symbol="TSTF",
        max_fractions=1_000,
        price_per_fraction=100,
        property_address="1 Test St, Springfield IL",
        metadata_uri="ipfs://QmTest",
    )


@pytest.fixture
def native_contract(chain: ChainSimulator, native_token: PropertyToken) -> str:
    """Address of a deployed TRX-priced property."""
    return deploy_property(chain, OWNER_KEY, native_token)


@pytest.fixture
def usdt(chain: ChainSimulator, buyer: str, other: str) -> str:
    """Mock USDT owned by the owner, with balances minted to both buyers."""
    address = deploy_mock_usdt(chain, OWNER_KEY)
    minter = TronClient(chain, OWNER_KEY).trc20(address)
    minter.mint(buyer, to_base_units(100_000, 6))
    minter.mint(other, to_base_units(100_000, 6))
    return address


@pytest.fixture
def token_contract(chain: ChainSimulator, usdt: str) -> str:
    """Address of a deployed USDT-priced property: 1000 fractions at 100 USDT."""
    token = PropertyToken(
        name="Lakeview Fractional",
        symbol="LVF",
        max_fractions=1_000,
        price_per_fraction=to_base_units(100, 6),
        property_address="123 Lakeview Dr, Austin TX",
        metadata_uri="ipfs://QmLake",
        payment_asset_address=usdt,
    )
    return deploy_property(chain, OWNER_KEY, token)


@pytest.fixture
def owner_client(chain: ChainSimulator) -> TronClient:
    return TronClient(chain, OWNER_KEY)


@pytest.fixture
def buyer_client(chain: ChainSimulator) -> TronClient:
    return TronClient(chain, BUYER_KEY)


@pytest.fixture
def other_client(chain: ChainSimulator) -> TronClient:
    return TronClient(chain, OTHER_KEY)
