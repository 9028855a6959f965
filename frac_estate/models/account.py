"""Signing identity model."""

from dataclasses import dataclass


@dataclass(frozen=True)
class KeyPair:
    """Private key with its derived address and a display label."""

    private_key: str
    address: str
    label: str = ""
