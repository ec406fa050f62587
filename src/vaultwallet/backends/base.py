"""
Base chain data provider interface.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any


@dataclass
class AddressUTXO:
    """Unspent output as listed for an address, before its script is known"""

    txid: str
    vout: int
    value: int
    confirmed: bool = False
    block_height: int | None = None


@dataclass
class TxOutputInfo:
    scriptpubkey: str
    value: int
    scriptpubkey_type: str = ""
    address: str | None = None


@dataclass
class TransactionInfo:
    txid: str
    outputs: list[TxOutputInfo] = field(default_factory=list)
    confirmed: bool = False
    block_height: int | None = None
    fee: int | None = None


@dataclass
class AddressStats:
    """Aggregate confirmed funded/spent totals for an address"""

    address: str
    funded_txo_sum: int
    spent_txo_sum: int
    tx_count: int = 0

    @property
    def balance(self) -> int:
        return self.funded_txo_sum - self.spent_txo_sum


class ChainBackend(ABC):
    """
    Abstract chain data provider.

    Implementations must raise vaultwallet.errors.ProviderError for any
    transport or decoding failure rather than leaking client exceptions.
    """

    @abstractmethod
    async def get_address_utxos(self, address: str) -> list[AddressUTXO]:
        """List confirmed and unconfirmed unspent outputs for an address"""

    @abstractmethod
    async def get_transaction(self, txid: str) -> TransactionInfo:
        """Get a transaction's output details"""

    @abstractmethod
    async def get_address_stats(self, address: str) -> AddressStats:
        """Get funded/spent totals for an address"""

    @abstractmethod
    async def get_address_transactions(self, address: str) -> list[dict[str, Any]]:
        """Get transaction history for an address"""

    @abstractmethod
    async def get_fee_estimates(self) -> dict[str, float]:
        """Get fee rate (sat/vbyte) keyed by confirmation target in blocks"""

    @abstractmethod
    async def broadcast_transaction(self, tx_hex: str) -> str:
        """Broadcast transaction, returns txid"""

    @abstractmethod
    def set_base_url(self, base_url: str) -> None:
        """Point the backend at another endpoint"""

    async def close(self) -> None:
        """Close backend connection"""
        pass
