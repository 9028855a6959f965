"""Account identities: private keys, base58check addresses, hex forms.

Addresses use the TRON layout: a ``0x41`` prefix byte followed by the
20-byte account hash (last 20 bytes of the keccak-256 of the secp256k1
public key, the same hash an Ethereum address carries), encoded with
base58check so that every address starts with ``T``.
"""

from __future__ import annotations

import random

import base58
from eth_account import Account
from eth_utils import keccak

from frac_estate.exceptions import MalformedAddressError

ADDRESS_PREFIX = b"\x41"
ADDRESS_LENGTH = 21  # prefix + 20-byte hash
PRIVATE_KEY_HEX_LENGTH = 64
SECP256K1_ORDER = 0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEBAAEDCE6AF48A03BBFD25E8CD0364141


def _encode(payload: bytes) -> str:
    return base58.b58encode_check(payload).decode("ascii")


ZERO_ADDRESS = _encode(ADDRESS_PREFIX + bytes(20))


def normalize_private_key(private_key: str) -> str:
    """Return the private key as 64 lowercase hex characters.

    Raises
    ------
    MalformedAddressError
        If the key is not 32 bytes of hex or is outside the secp256k1 range.
    """
    if not isinstance(private_key, str):
        raise MalformedAddressError("Private key must be a hex string")
    key = private_key.strip().lower()
    if key.startswith("0x"):
        key = key[2:]
    if len(key) != PRIVATE_KEY_HEX_LENGTH:
        raise MalformedAddressError(
            f"Private key must be {PRIVATE_KEY_HEX_LENGTH} hex characters, got {len(key)}"
        )
    try:
        value = int.from_bytes(bytes.fromhex(key), "big")
    except ValueError as exc:
        raise MalformedAddressError("Private key is not valid hex") from exc
    if not 0 < value < SECP256K1_ORDER:
        raise MalformedAddressError("Private key is outside the secp256k1 range")
    return key


def generate_private_key(rng: random.Random | None = None) -> str:
    """Generate a fresh private key.

    Parameters
    ----------
    rng : random.Random | None
        Source for reproducible keys; ``Account.create`` is used when omitted.
    """
    if rng is None:
        return normalize_private_key(Account.create().key.hex())
    while True:
        value = rng.getrandbits(256)
        if 0 < value < SECP256K1_ORDER:
            return f"{value:064x}"


def address_from_private_key(private_key: str) -> str:
    """Derive the base58check address owned by ``private_key``."""
    key = normalize_private_key(private_key)
    account = Account.from_key(bytes.fromhex(key))
    return _encode(ADDRESS_PREFIX + bytes.fromhex(account.address[2:]))


def contract_address(deployer: str, nonce: int) -> str:
    """Deterministic address of the ``nonce``-th contract created by ``deployer``."""
    seed = from_base58(deployer) + nonce.to_bytes(8, "big")
    return _encode(ADDRESS_PREFIX + keccak(seed)[-20:])


def from_base58(address: str) -> bytes:
    """Return the 21 raw bytes of a base58check address."""
    if not isinstance(address, str) or not address or address != address.strip():
        raise MalformedAddressError(f"Address must be a non-empty string, got {address!r}")
    try:
        payload = base58.b58decode_check(address)
    except ValueError as exc:
        raise MalformedAddressError(f"Invalid base58check address {address!r}: {exc}") from exc
    if len(payload) != ADDRESS_LENGTH or payload[:1] != ADDRESS_PREFIX:
        raise MalformedAddressError(f"Not a TRON address: {address!r}")
    return payload


def validate_address(address: str) -> str:
    """Return ``address`` unchanged if it is well formed, raise otherwise."""
    from_base58(address)
    return address


def is_address(address: object) -> bool:
    """Check whether ``address`` is a well-formed base58check address."""
    if not isinstance(address, str):
        return False
    try:
        from_base58(address)
    except MalformedAddressError:
        return False
    return True


def to_hex(address: str) -> str:
    """Convert a base58 address to its ``41``-prefixed hex form."""
    return from_base58(address).hex()


def from_hex(hex_address: str) -> str:
    """Convert a ``41``-prefixed (or ``0x``) hex address to base58."""
    value = hex_address.lower()
    if value.startswith("0x"):
        value = "41" + value[2:]
    try:
        payload = bytes.fromhex(value)
    except ValueError as exc:
        raise MalformedAddressError(f"Not a hex address: {hex_address!r}") from exc
    if len(payload) != ADDRESS_LENGTH or payload[:1] != ADDRESS_PREFIX:
        raise MalformedAddressError(f"Not a TRON hex address: {hex_address!r}")
    return _encode(payload)
