"""Property token parameters fixed at deployment."""

from dataclasses import dataclass

from frac_estate.chain.address import is_address
from frac_estate.exceptions import InvalidTokenParametersError
from frac_estate.models.enums import PaymentKind
from frac_estate.units import UINT256_MAX


@dataclass(frozen=True)
class PropertyToken:
    """Immutable description of a tokenized property.

    ``price_per_fraction`` is expressed in the smallest unit of the
    payment asset: sun when ``payment_asset_address`` is ``None``,
    otherwise the asset's base unit (micro-USDT for a 6-decimal token).
    """

    name: str
    symbol: str
    max_fractions: int
    price_per_fraction: int
    property_address: str
    metadata_uri: str
    payment_asset_address: str | None = None

    def __post_init__(self) -> None:
        if not self.name or not self.symbol:
            raise InvalidTokenParametersError("Token name and symbol are required")
        for label in ("max_fractions", "price_per_fraction"):
            value = getattr(self, label)
            if isinstance(value, bool) or not isinstance(value, int):
                raise InvalidTokenParametersError(f"{label} must be an integer, got {value!r}")
            if value <= 0:
                raise InvalidTokenParametersError(f"{label} must be positive, got {value}")
            if value > UINT256_MAX:
                raise InvalidTokenParametersError(f"{label} exceeds uint256")
        if self.payment_asset_address is not None and not is_address(self.payment_asset_address):
            raise InvalidTokenParametersError(
                f"Payment asset address is malformed: {self.payment_asset_address!r}"
            )

    @property
    def payment_kind(self) -> PaymentKind:
        """Native coin or TRC20 asset."""
        if self.payment_asset_address is None:
            return PaymentKind.NATIVE
        return PaymentKind.TOKEN

    def cost(self, fraction_count: int) -> int:
        """Price of ``fraction_count`` fractions in smallest payment units."""
        return self.price_per_fraction * fraction_count
