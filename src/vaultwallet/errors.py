"""
Wallet error taxonomy.

Provider-specific failures (httpx errors, malformed responses) are wrapped
into these types at the backend boundary so callers never see them directly.
"""

from __future__ import annotations


class WalletError(Exception):
    pass


class InvalidPhraseError(WalletError):
    """Seed phrase missing or not a valid BIP39 mnemonic."""


class InvalidAddressError(WalletError):
    """Address does not decode to a locking script on the active network."""


class NoUtxosError(WalletError):
    """The wallet has no spendable outputs."""


class InsufficientBalanceError(WalletError):
    def __init__(self, needed: int, available: int):
        super().__init__(f"Insufficient balance: need {needed} sats, have {available} sats")
        self.needed = needed
        self.available = available


class ProviderError(WalletError):
    """Chain data provider could not be reached or returned garbage."""


class ScanFailedError(WalletError):
    """A UTXO scan aborted on the first provider failure."""


class SigningFailedError(WalletError):
    """An input could not be signed or finalized."""


class BuildStateError(WalletError):
    """A draft transaction was driven out of stage order."""
