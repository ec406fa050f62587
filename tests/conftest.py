"""
Test configuration for vaultwallet tests.
"""

from __future__ import annotations

from typing import Any

import pytest

from vaultwallet.backends.base import (
    AddressStats,
    AddressUTXO,
    ChainBackend,
    TransactionInfo,
    TxOutputInfo,
)
from vaultwallet.errors import ProviderError
from vaultwallet.models import NetworkType
from vaultwallet.wallet.keys import WalletKey
from vaultwallet.wallet.models import UnspentOutput, UTXOSet
from vaultwallet.wallet.session import WalletSession


class StubBackend(ChainBackend):
    """In-memory chain backend that records broadcasts."""

    def __init__(self) -> None:
        self.utxos: dict[str, list[AddressUTXO]] = {}
        self.transactions: dict[str, TransactionInfo] = {}
        self.stats: dict[str, AddressStats] = {}
        self.history: dict[str, list[dict[str, Any]]] = {}
        self.fee_estimates: dict[str, float] = {"1": 10.0, "6": 4.0}
        self.broadcasts: list[str] = []
        self.broadcast_txid = "ab" * 32
        self.base_url = ""
        self.closed = False
        self.fail_on_txid: str | None = None

    def add_utxo(self, address: str, txid: str, vout: int, value: int, script: bytes) -> None:
        self.utxos.setdefault(address, []).append(AddressUTXO(txid=txid, vout=vout, value=value))
        tx = self.transactions.setdefault(txid, TransactionInfo(txid=txid))
        while len(tx.outputs) <= vout:
            tx.outputs.append(TxOutputInfo(scriptpubkey="", value=0))
        tx.outputs[vout] = TxOutputInfo(scriptpubkey=script.hex(), value=value)

    async def get_address_utxos(self, address: str) -> list[AddressUTXO]:
        return list(self.utxos.get(address, []))

    async def get_transaction(self, txid: str) -> TransactionInfo:
        if txid == self.fail_on_txid or txid not in self.transactions:
            raise ProviderError(f"GET tx/{txid} returned 404: Transaction not found")
        return self.transactions[txid]

    async def get_address_stats(self, address: str) -> AddressStats:
        return self.stats.get(address, AddressStats(address, 0, 0))

    async def get_address_transactions(self, address: str) -> list[dict[str, Any]]:
        return self.history.get(address, [])

    async def get_fee_estimates(self) -> dict[str, float]:
        return dict(self.fee_estimates)

    async def broadcast_transaction(self, tx_hex: str) -> str:
        self.broadcasts.append(tx_hex)
        return self.broadcast_txid

    def set_base_url(self, base_url: str) -> None:
        self.base_url = base_url

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def mainnet_address() -> str:
    """BIP173 mainnet P2WPKH test vector."""
    return "bc1qw508d6qejxtdg4y5r3zarvary0c5xw7kv8f3t4"


@pytest.fixture
def testnet_address() -> str:
    """BIP173 testnet P2WPKH test vector."""
    return "tb1qw508d6qejxtdg4y5r3zarvary0c5xw7kxpjzsx"


@pytest.fixture
def sample_mnemonic() -> str:
    """Test mnemonic (not for production use!)."""
    return (
        "abandon abandon abandon abandon abandon abandon "
        "abandon abandon abandon abandon abandon about"
    )


@pytest.fixture
def other_mnemonic() -> str:
    return "legal winner thank year wave sausage worth useful legal winner thank yellow"


@pytest.fixture
def wallet_key(sample_mnemonic: str) -> WalletKey:
    return WalletKey.from_phrase(sample_mnemonic, NetworkType.TESTNET)


@pytest.fixture
def make_utxo(wallet_key: WalletKey):
    """Factory for UTXOs locked to the test wallet's own script."""

    def _make(value: int, index: int = 0, script: bytes | None = None) -> UnspentOutput:
        return UnspentOutput(
            txid=f"{index:02x}" * 32,
            vout=index % 4,
            value=value,
            scriptpubkey=script if script is not None else wallet_key.get_scriptpubkey(),
        )

    return _make


@pytest.fixture
def funded_session(sample_mnemonic: str, make_utxo) -> WalletSession:
    """Testnet session holding a single 100,000 sat UTXO."""
    session = WalletSession(network=NetworkType.TESTNET).with_phrase(sample_mnemonic)
    return session.with_utxos(UTXOSet([make_utxo(100_000)]))


@pytest.fixture
def stub_backend() -> StubBackend:
    return StubBackend()
