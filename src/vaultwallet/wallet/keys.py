"""
Single-key derivation from a BIP39 phrase.

The wallet holds one key: the first 32 bytes of the BIP39 seed are used
directly as the secp256k1 private key. There is no BIP32 hierarchy.
"""

from __future__ import annotations

import base58
from coincurve import PrivateKey, PublicKey
from mnemonic import Mnemonic

from vaultwallet.errors import InvalidPhraseError
from vaultwallet.models import NetworkType, get_network_params
from vaultwallet.wallet.address import pubkey_to_p2wpkh_address, pubkey_to_p2wpkh_script

# secp256k1 curve order
SECP256K1_N = int("FFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEBAAEDCE6AF48A03BBFD25E8CD0364141", 16)

_MNEMONIC = Mnemonic("english")


def generate_phrase(strength: int = 128) -> str:
    """Generate a BIP39 mnemonic (128 bits of entropy = 12 words)."""
    return _MNEMONIC.generate(strength=strength)


def validate_phrase(phrase: str) -> bool:
    """Check a phrase against the English wordlist and its checksum."""
    if not phrase:
        return False
    try:
        return _MNEMONIC.check(phrase)
    except (ValueError, LookupError):
        return False


class WalletKey:
    """
    Network-bound key pair for the wallet's single address.
    """

    def __init__(self, private_key: PrivateKey, network: NetworkType | str):
        self._private_key = private_key
        self._public_key = private_key.public_key
        self.network = NetworkType(network)

    @property
    def private_key(self) -> PrivateKey:
        """Return the coincurve PrivateKey instance."""
        return self._private_key

    @property
    def public_key(self) -> PublicKey:
        """Return the coincurve PublicKey instance."""
        return self._public_key

    @classmethod
    def from_phrase(cls, phrase: str, network: NetworkType | str) -> WalletKey:
        """
        Derive the wallet key from a seed phrase.

        Raises:
            InvalidPhraseError: if the phrase is empty or fails BIP39 validation
        """
        if not validate_phrase(phrase):
            raise InvalidPhraseError("Invalid BIP39 phrase")

        seed = Mnemonic.to_seed(phrase)
        key_bytes = seed[:32]

        key_int = int.from_bytes(key_bytes, "big")
        if key_int == 0 or key_int >= SECP256K1_N:
            raise InvalidPhraseError("Seed does not yield a valid secp256k1 key")

        return cls(PrivateKey(key_bytes), network)

    def get_public_key_bytes(self) -> bytes:
        """Get compressed public key bytes"""
        return self._public_key.format(compressed=True)

    def get_address(self) -> str:
        """Get P2WPKH (Native SegWit) address for this key"""
        return pubkey_to_p2wpkh_address(self.get_public_key_bytes(), self.network)

    def get_scriptpubkey(self) -> bytes:
        return pubkey_to_p2wpkh_script(self.get_public_key_bytes())

    def to_wif(self) -> str:
        """Export as compressed WIF using the network's version byte."""
        version = get_network_params(self.network).wif_version
        payload = bytes([version]) + self._private_key.secret + b"\x01"
        return base58.b58encode_check(payload).decode("ascii")


def derive_address(phrase: str, network: NetworkType | str) -> str:
    """Deterministic P2WPKH address for a phrase on a network."""
    return WalletKey.from_phrase(phrase, network).get_address()
