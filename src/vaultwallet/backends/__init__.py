"""
Chain data provider implementations.

Available backends:
- EsploraBackend: Esplora/electrs REST API (blockstream.info, mempool.space, self-hosted)
"""

from vaultwallet.backends.base import (
    AddressStats,
    AddressUTXO,
    ChainBackend,
    TransactionInfo,
    TxOutputInfo,
)
from vaultwallet.backends.esplora import EsploraBackend

__all__ = [
    "AddressStats",
    "AddressUTXO",
    "ChainBackend",
    "EsploraBackend",
    "TransactionInfo",
    "TxOutputInfo",
]
