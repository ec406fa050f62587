"""
Immutable wallet session state.

A session bundles the active network, the seed phrase and the current UTXO
snapshot. Every change returns a new session; nothing is mutated in place.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from functools import cached_property

from vaultwallet.constants import DUST_THRESHOLD
from vaultwallet.errors import InvalidPhraseError
from vaultwallet.models import NetworkType
from vaultwallet.wallet.address import validate_address
from vaultwallet.wallet.keys import WalletKey, validate_phrase
from vaultwallet.wallet.models import EMPTY_UTXO_SET, UTXOSet


@dataclass(frozen=True)
class WalletSession:
    network: NetworkType = NetworkType.TESTNET
    phrase: str = field(default="", repr=False)
    utxos: UTXOSet = EMPTY_UTXO_SET
    dust_threshold: int = DUST_THRESHOLD

    def with_phrase(self, phrase: str) -> WalletSession:
        """
        Switch to another phrase. An empty phrase purges the session.

        The UTXO set belongs to the previous key, so it is dropped whenever
        the phrase actually changes.

        Raises:
            InvalidPhraseError: if a non-empty phrase fails BIP39 validation
        """
        if not phrase:
            return self.purge()
        if not validate_phrase(phrase):
            raise InvalidPhraseError("Invalid BIP39 phrase")
        if phrase == self.phrase:
            return self
        return replace(self, phrase=phrase, utxos=EMPTY_UTXO_SET)

    def with_network(self, network: NetworkType | str) -> WalletSession:
        return replace(self, network=NetworkType(network))

    def with_utxos(self, utxos: UTXOSet) -> WalletSession:
        return replace(self, utxos=utxos)

    def purge(self) -> WalletSession:
        """Clear the phrase and the UTXO set together."""
        return replace(self, phrase="", utxos=EMPTY_UTXO_SET)

    @property
    def has_phrase(self) -> bool:
        return bool(self.phrase)

    @cached_property
    def key(self) -> WalletKey:
        if not self.phrase:
            raise InvalidPhraseError("Phrase not set")
        return WalletKey.from_phrase(self.phrase, self.network)

    @property
    def address(self) -> str:
        return self.key.get_address()

    def validate_address(self, address: str) -> bool:
        return validate_address(address, self.network)

    def balance(self) -> int:
        return self.utxos.balance()
