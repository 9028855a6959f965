"""Signer-bound client, contract handles and payment assets."""

from frac_estate.client.client import TronClient
from frac_estate.client.contract import ContractHandle, FractionalTokenHandle, Trc20Handle
from frac_estate.client.payment import (
    NativePayment,
    PaymentAsset,
    TokenPayment,
    payment_asset_for,
)

__all__ = [
    "ContractHandle",
    "FractionalTokenHandle",
    "NativePayment",
    "PaymentAsset",
    "TokenPayment",
    "Trc20Handle",
    "TronClient",
    "payment_asset_for",
]
