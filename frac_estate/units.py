"""Denomination helpers for native coin and 6-decimal assets."""

from decimal import Decimal

from frac_estate.exceptions import InvalidAmountError

SUN_PER_TRX = 1_000_000
USDT_DECIMALS = 6
UINT256_MAX = 2**256 - 1


def sun(amount: int | Decimal | str) -> int:
    """Convert whole TRX (or a decimal string) to sun."""
    return to_base_units(amount, 6)


def trx(amount_sun: int) -> Decimal:
    """Convert sun to TRX."""
    return from_base_units(amount_sun, 6)


def to_base_units(amount: int | Decimal | str, decimals: int) -> int:
    """Scale a human amount to the smallest unit of an asset.

    Parameters
    ----------
    amount : int | Decimal | str
        Amount in whole units (``"1.5"`` is accepted).
    decimals : int
        Number of decimals of the asset.

    Returns
    -------
    int
        Amount in smallest units.
    """
    scaled = Decimal(str(amount)) * (Decimal(10) ** decimals)
    if scaled != scaled.to_integral_value():
        raise InvalidAmountError(f"{amount} has more than {decimals} decimals")
    return int(scaled)


def from_base_units(amount: int, decimals: int) -> Decimal:
    """Scale an amount in smallest units back to whole units."""
    return Decimal(amount) / (Decimal(10) ** decimals)


def check_uint256(value: int, label: str = "amount") -> int:
    """Validate that ``value`` is an integer in the uint256 range."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidAmountError(f"{label} must be an integer, got {value!r}")
    if value < 0 or value > UINT256_MAX:
        raise InvalidAmountError(f"{label} out of uint256 range: {value}")
    return value
