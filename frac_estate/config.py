"""Configuration management for frac-estate."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping

from dotenv import load_dotenv

from frac_estate.chain.address import is_address, normalize_private_key
from frac_estate.exceptions import ConfigurationError, MalformedAddressError
from frac_estate.models.enums import Network


@dataclass
class NetworkConfig:
    """Connection profile for one TRON network."""

    name: Network
    full_host: str | None
    private_key_env: str
    fee_limit: int  # sun
    user_fee_percentage: int
    network_id: str = "*"

    def private_key(self, env: Mapping[str, str] | None = None) -> str | None:
        """Look up the deployer key for this network."""
        env = os.environ if env is None else env
        return env.get(self.private_key_env)


NETWORKS: dict[Network, NetworkConfig] = {
    Network.MAINNET: NetworkConfig(
        name=Network.MAINNET,
        full_host="https://api.trongrid.io",
        private_key_env="PRIVATE_KEY_MAINNET",
        fee_limit=1000 * 1_000_000,
        user_fee_percentage=100,
        network_id="1",
    ),
    Network.SHASTA: NetworkConfig(
        name=Network.SHASTA,
        full_host="https://api.shasta.trongrid.io",
        private_key_env="PRIVATE_KEY_SHASTA",
        fee_limit=1000 * 1_000_000,
        user_fee_percentage=50,
        network_id="2",
    ),
    Network.NILE: NetworkConfig(
        name=Network.NILE,
        full_host="https://nile.trongrid.io",
        private_key_env="PRIVATE_KEY_NILE",
        fee_limit=1_000_000_000,
        user_fee_percentage=50,
    ),
    Network.DEVELOPMENT: NetworkConfig(
        name=Network.DEVELOPMENT,
        full_host=None,  # FULL_NODE_DEVELOPMENT
        private_key_env="PRIVATE_KEY_DEVELOPMENT",
        fee_limit=1_000_000_000,
        user_fee_percentage=100,
    ),
}


def get_network(name: str | Network, env: Mapping[str, str] | None = None) -> NetworkConfig:
    """Resolve a network profile by name.

    The development profile takes its host from ``FULL_NODE_DEVELOPMENT``.
    """
    try:
        network = Network(name)
    except ValueError as exc:
        known = ", ".join(n.value for n in Network)
        raise ConfigurationError(f"Unknown network {name!r} (known: {known})") from exc

    profile = NETWORKS[network]
    if network is Network.DEVELOPMENT:
        env = os.environ if env is None else env
        return NetworkConfig(
            name=profile.name,
            full_host=env.get("FULL_NODE_DEVELOPMENT"),
            private_key_env=profile.private_key_env,
            fee_limit=profile.fee_limit,
            user_fee_percentage=profile.user_fee_percentage,
            network_id=profile.network_id,
        )
    return profile


@dataclass
class ClientConfig:
    """Identity and endpoint configuration for the walkthrough client.

    Built once at startup (usually via ``from_env``), validated, then
    passed explicitly to everything that needs it.
    """

    full_node: str | None = None
    owner_private_key: str | None = None
    test_private_key: str | None = None
    contract_address: str | None = None
    payment_asset_address: str | None = None

    ENV_NAMES = {
        "full_node": "FULL_NODE_DEVELOPMENT",
        "owner_private_key": "OWNER_PRIVATE_KEY",
        "test_private_key": "TEST_PRIVATE_KEY",
        "contract_address": "CONTRACT_ADDRESS",
        "payment_asset_address": "USDT_ADDRESS",
    }
    REQUIRED = ("full_node", "owner_private_key", "test_private_key", "contract_address")

    @classmethod
    def from_env(cls, env: Mapping[str, str] | None = None) -> "ClientConfig":
        """Create config from environment variables (and ``.env``)."""
        if env is None:
            load_dotenv()
            env = os.environ
        values = {attr: env.get(name) or None for attr, name in cls.ENV_NAMES.items()}
        return cls(**values)

    @property
    def uses_token_payment(self) -> bool:
        """Whether purchases and dividends settle in a TRC20 asset."""
        return self.payment_asset_address is not None

    def validate(self, require_contract: bool = True) -> "ClientConfig":
        """Check that every required value is present and well formed.

        Raises
        ------
        ConfigurationError
            Listing every missing or malformed value.
        """
        required = self.REQUIRED if require_contract else self.REQUIRED[:3]
        missing = [self.ENV_NAMES[attr] for attr in required if not getattr(self, attr)]
        if missing:
            raise ConfigurationError(f"Missing required configuration: {', '.join(missing)}")

        problems = []
        for attr in ("owner_private_key", "test_private_key"):
            try:
                normalize_private_key(getattr(self, attr))
            except MalformedAddressError as exc:
                problems.append(f"{self.ENV_NAMES[attr]}: {exc}")
        for attr in ("contract_address", "payment_asset_address"):
            value = getattr(self, attr)
            if value is not None and not is_address(value):
                problems.append(f"{self.ENV_NAMES[attr]}: not a valid address")
        if problems:
            raise ConfigurationError("Invalid configuration: " + "; ".join(problems))
        return self


@dataclass
class KafkaConfig:
    """Kafka producer configuration."""

    bootstrap_servers: str = "localhost:9092"
    acks: str = "all"
    batch_size: int = 16384
    linger_ms: int = 5
    compression: str = "snappy"
    retries: int = 3

    def to_dict(self) -> dict[str, Any]:
        """Convert to confluent-kafka config dict."""
        return {
            "bootstrap.servers": self.bootstrap_servers,
            "acks": self.acks,
            "batch.size": self.batch_size,
            "linger.ms": self.linger_ms,
            "compression.type": self.compression,
            "retries": self.retries,
        }


@dataclass
class OutputConfig:
    """Output configuration."""

    json_output_dir: Path = field(default_factory=lambda: Path("output"))
    pretty_json: bool = False
    topic_prefix: str = "dev.fractional"


@dataclass
class MarketConfig:
    """Sizing for the market simulation scenario."""

    num_buyers: int = 25
    num_deposits: int = 4
    sell_through: float = 0.6
    claim_rate: float = 0.5
    use_token_payment: bool = False


@dataclass
class FracEstateConfig:
    """Main configuration for frac-estate."""

    client: ClientConfig = field(default_factory=ClientConfig)
    kafka: KafkaConfig = field(default_factory=KafkaConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    market: MarketConfig = field(default_factory=MarketConfig)
    network: Network = Network.DEVELOPMENT
    seed: int | None = None
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, env: Mapping[str, str] | None = None) -> "FracEstateConfig":
        """Create config from environment variables."""
        if env is None:
            load_dotenv()
            env = os.environ

        kafka = KafkaConfig(
            bootstrap_servers=env.get("KAFKA_BOOTSTRAP_SERVERS", "localhost:9092"),
            acks=env.get("KAFKA_ACKS", "all"),
        )

        output = OutputConfig(
            json_output_dir=Path(env.get("OUTPUT_DIR", "output")),
            pretty_json=env.get("PRETTY_JSON", "false").lower() == "true",
            topic_prefix=env.get("TOPIC_PREFIX", "dev.fractional"),
        )

        try:
            network = Network(env.get("TRON_NETWORK", Network.DEVELOPMENT.value))
        except ValueError as exc:
            raise ConfigurationError(f"Unknown TRON_NETWORK {env.get('TRON_NETWORK')!r}") from exc

        return cls(
            client=ClientConfig.from_env(env),
            kafka=kafka,
            output=output,
            network=network,
            seed=int(env["SEED"]) if env.get("SEED") else None,
            log_level=env.get("LOG_LEVEL", "INFO"),
        )
