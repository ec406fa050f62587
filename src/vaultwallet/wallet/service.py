"""
Single-address wallet service.
"""

from __future__ import annotations

import asyncio
from typing import Any

from loguru import logger

from vaultwallet.backends.base import ChainBackend
from vaultwallet.backends.esplora import EsploraBackend
from vaultwallet.config import WalletSettings
from vaultwallet.constants import DEFAULT_FEE_RATE, DUST_THRESHOLD
from vaultwallet.errors import NoUtxosError
from vaultwallet.models import NetworkType
from vaultwallet.wallet import keys
from vaultwallet.wallet.fees import FeeRate, quote_fees
from vaultwallet.wallet.models import EMPTY_UTXO_SET, FeeSchedule
from vaultwallet.wallet.session import WalletSession
from vaultwallet.wallet.tx_builder import build_normal_transaction, build_vault_transaction
from vaultwallet.wallet.utxo import CoinSelector, balance_of, scan_utxos, transaction_history


class VaultWallet:
    """
    Wallet handle owning one WalletSession and one chain backend.

    Scans and transaction builds are serialized with a lock, so a scan can
    never swap the UTXO set out from under a build on the same handle.
    """

    def __init__(
        self,
        backend: ChainBackend | None = None,
        network: NetworkType | str = NetworkType.TESTNET,
        phrase: str | None = None,
        base_url: str = "",
        dust_threshold: int = DUST_THRESHOLD,
        default_fee_rate: FeeRate = DEFAULT_FEE_RATE,
        selector: CoinSelector | None = None,
    ):
        self.backend = backend or EsploraBackend(base_url=base_url)
        if backend is not None and base_url:
            self.backend.set_base_url(base_url)
        self.default_fee_rate = default_fee_rate
        self.selector = selector

        self._session = WalletSession(
            network=NetworkType(network), dust_threshold=dust_threshold
        )
        if phrase:
            self._session = self._session.with_phrase(phrase)

        self._lock = asyncio.Lock()

        logger.info(f"Initialized wallet on {self._session.network.value}")

    @classmethod
    def from_settings(cls, settings: WalletSettings, phrase: str | None = None) -> VaultWallet:
        backend = EsploraBackend(base_url=settings.esplora_url, timeout=settings.request_timeout)
        return cls(
            backend=backend,
            network=settings.network,
            phrase=phrase,
            dust_threshold=settings.dust_threshold,
            default_fee_rate=settings.default_fee_rate,
        )

    @property
    def session(self) -> WalletSession:
        """Current immutable session snapshot"""
        return self._session

    @staticmethod
    def generate_phrase() -> str:
        return keys.generate_phrase()

    @staticmethod
    def validate_phrase(phrase: str) -> bool:
        return keys.validate_phrase(phrase)

    def set_phrase(self, phrase: str | None = None) -> None:
        """Set the active phrase. An empty phrase purges the wallet."""
        self._session = self._session.with_phrase(phrase or "")

    def purge(self) -> None:
        self._session = self._session.purge()

    def set_network(self, network: NetworkType | str) -> None:
        self._session = self._session.with_network(network)

    def get_network(self) -> NetworkType:
        return self._session.network

    def set_base_url(self, endpoint: str) -> None:
        self.backend.set_base_url(endpoint)

    def get_address(self) -> str:
        return self._session.address

    def validate_address(self, address: str) -> bool:
        return self._session.validate_address(address)

    async def scan_utxos(self, address: str | None = None) -> None:
        """
        Replace the UTXO set with a fresh scan.

        The set is cleared before scanning, so a failed scan leaves the
        wallet with no UTXOs rather than the previous ones. A missing phrase
        is reported before anything is cleared.
        """
        async with self._lock:
            target = address or self._session.address
            self._session = self._session.with_utxos(EMPTY_UTXO_SET)
            utxos = await scan_utxos(self.backend, target)
            self._session = self._session.with_utxos(utxos)

    def get_balance(self) -> int:
        return self._session.balance()

    async def get_balance_for_address(self, address: str) -> int:
        return await balance_of(self.backend, address, self._session.network)

    async def get_transactions(self, address: str) -> list[dict[str, Any]]:
        return await transaction_history(self.backend, address, self._session.network)

    async def calc_fees(self, memo: str | None = None) -> FeeSchedule:
        """Fee schedule for spending the current UTXO set."""
        utxos = self._session.utxos
        if not utxos:
            raise NoUtxosError("No utxos to send")
        estimates = await self.backend.get_fee_estimates()
        return quote_fees(utxos, memo, estimates, self.default_fee_rate)

    async def vault_tx(
        self, vault_address: str, value: int, memo: str, fee_rate: FeeRate
    ) -> str:
        async with self._lock:
            return await build_vault_transaction(
                self._session, self.backend, vault_address, value, memo, fee_rate, self.selector
            )

    async def normal_tx(self, destination: str, value: int, fee_rate: FeeRate) -> str:
        async with self._lock:
            return await build_normal_transaction(
                self._session, self.backend, destination, value, fee_rate, self.selector
            )

    async def close(self) -> None:
        """Close backend connection"""
        await self.backend.close()

    async def __aenter__(self) -> VaultWallet:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()
