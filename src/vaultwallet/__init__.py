"""
vaultwallet - Single-address Bitcoin wallet engine

Tracks the UTXOs of one P2WPKH address, estimates fees and builds, signs and
broadcasts plain and memo-carrying (OP_RETURN) transactions.
"""

__version__ = "0.1.0"

from vaultwallet.config import WalletSettings, get_settings, setup_logging
from vaultwallet.errors import (
    BuildStateError,
    InsufficientBalanceError,
    InvalidAddressError,
    InvalidPhraseError,
    NoUtxosError,
    ProviderError,
    ScanFailedError,
    SigningFailedError,
    WalletError,
)
from vaultwallet.models import NetworkType
from vaultwallet.wallet.models import (
    FeeQuote,
    FeeSchedule,
    MemoOutput,
    OutputSpec,
    RegularOutput,
    UnspentOutput,
    UTXOSet,
)
from vaultwallet.wallet.service import VaultWallet
from vaultwallet.wallet.session import WalletSession

__all__ = [
    "BuildStateError",
    "FeeQuote",
    "FeeSchedule",
    "InsufficientBalanceError",
    "InvalidAddressError",
    "InvalidPhraseError",
    "MemoOutput",
    "NetworkType",
    "NoUtxosError",
    "OutputSpec",
    "ProviderError",
    "RegularOutput",
    "ScanFailedError",
    "SigningFailedError",
    "UTXOSet",
    "UnspentOutput",
    "VaultWallet",
    "WalletError",
    "WalletSession",
    "WalletSettings",
    "get_settings",
    "setup_logging",
]
