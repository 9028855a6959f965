"""Property token generator."""

from __future__ import annotations

import hashlib
import random

import base58

from frac_estate.generators.base import BaseGenerator
from frac_estate.models import PropertyToken
from frac_estate.units import sun, to_base_units


class PropertyTokenGenerator(BaseGenerator):
    """Generate realistic property token parameters."""

    NAME_SUFFIXES = ["Fractional", "Residences", "Lofts", "Condo Fraction", "Commons"]
    FRACTION_CAPS = [100, 250, 500, 1_000, 2_000, 5_000, 10_000]
    # Whole coins per fraction
    PRICE_RANGE = (10, 500)

    def generate(self, payment_asset_address: str | None = None, decimals: int = 6) -> PropertyToken:
        """Generate a property token.

        Parameters
        ----------
        payment_asset_address : str | None
            TRC20 payment asset; ``None`` prices the token in TRX.
        decimals : int
            Decimals of the payment asset.

        Returns
        -------
        PropertyToken
            Generated token parameters.
        """
        street = self.fake.street_name()
        name = f"{street} {random.choice(self.NAME_SUFFIXES)}"
        whole_price = random.randint(*self.PRICE_RANGE)
        if payment_asset_address is None:
            price = sun(whole_price)
        else:
            price = to_base_units(whole_price, decimals)

        return PropertyToken(
            name=name,
            symbol=self._symbol_for(name),
            max_fractions=random.choice(self.FRACTION_CAPS),
            price_per_fraction=price,
            property_address=(
                f"{self.fake.building_number()} {street}, "
                f"{self.fake.city()} {self.fake.state_abbr()}"
            ),
            metadata_uri=self._metadata_uri(),
            payment_asset_address=payment_asset_address,
        )

    @staticmethod
    def _symbol_for(name: str) -> str:
        """Initials of the name, padded to at least three letters."""
        letters = "".join(word[0] for word in name.split() if word[:1].isalpha()).upper()
        if len(letters) < 3:
            letters = (letters + name.replace(" ", "").upper())[:3]
        return letters[:5]

    def _metadata_uri(self) -> str:
        # CIDv0: multihash (sha2-256, 32 bytes) in base58, always "Qm..."
        digest = hashlib.sha256(self.fake.uuid4().encode("utf-8")).digest()
        return "ipfs://" + base58.b58encode(b"\x12\x20" + digest).decode("ascii")
