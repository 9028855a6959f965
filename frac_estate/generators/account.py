"""Signing identity generator."""

from __future__ import annotations

from typing import Iterator

from frac_estate.chain.address import SECP256K1_ORDER, address_from_private_key
from frac_estate.generators.base import BaseGenerator
from frac_estate.models import KeyPair


class AccountGenerator(BaseGenerator):
    """Generate private keys with derived addresses and human labels."""

    def generate(self) -> KeyPair:
        """Generate a single identity.

        Returns
        -------
        KeyPair
            Key, address and a display name.
        """
        private_key = self.fake.sha256()
        while not 0 < int(private_key, 16) < SECP256K1_ORDER:
            private_key = self.fake.sha256()
        return KeyPair(
            private_key=private_key,
            address=address_from_private_key(private_key),
            label=self.fake.name(),
        )

    def generate_batch(self, count: int) -> Iterator[KeyPair]:
        """Generate ``count`` identities.

        Parameters
        ----------
        count : int
            Number of identities to generate.

        Yields
        ------
        KeyPair
            Generated identities.
        """
        for _ in range(count):
            yield self.generate()
