"""
UTXO scanning, balance queries and coin selection.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from loguru import logger

from vaultwallet.backends.base import ChainBackend
from vaultwallet.errors import InvalidAddressError, ProviderError, ScanFailedError
from vaultwallet.models import NetworkType
from vaultwallet.wallet.address import validate_address
from vaultwallet.wallet.models import UnspentOutput, UTXOSet


async def scan_utxos(backend: ChainBackend, address: str) -> UTXOSet:
    """
    Fetch every unspent output of an address with its locking script.

    Transactions are fetched one at a time in the order the provider lists
    the outputs. The first failure aborts the whole scan; nothing fetched
    before it is returned.

    Raises:
        ScanFailedError: wrapping the first provider error
    """
    logger.info(f"Scanning UTXOs for {address}")
    utxos: list[UnspentOutput] = []

    try:
        listed = await backend.get_address_utxos(address)

        for entry in listed:
            tx = await backend.get_transaction(entry.txid)
            if entry.vout >= len(tx.outputs):
                raise ProviderError(
                    f"Transaction {entry.txid} has no output {entry.vout} "
                    f"({len(tx.outputs)} outputs)"
                )
            script_hex = tx.outputs[entry.vout].scriptpubkey
            utxo = UnspentOutput(
                txid=entry.txid,
                vout=entry.vout,
                value=entry.value,
                scriptpubkey=bytes.fromhex(script_hex),
            )
            logger.debug(f"Found UTXO {utxo.txid}:{utxo.vout} = {utxo.value} sats")
            utxos.append(utxo)

    except ProviderError as e:
        logger.error(f"UTXO scan for {address} failed: {e}")
        raise ScanFailedError(f"UTXO scan failed: {e}") from e
    except ValueError as e:
        logger.error(f"UTXO scan for {address} got malformed data: {e}")
        raise ScanFailedError(f"UTXO scan failed: {e}") from e

    result = UTXOSet(utxos)
    logger.info(f"Scan complete: {len(result)} UTXOs, {result.balance():,} sats")
    return result


async def balance_of(backend: ChainBackend, address: str, network: NetworkType | str) -> int:
    """
    Provider-reported balance (funded minus spent) of any address.

    Raises:
        InvalidAddressError: if the address is not valid on the network
    """
    if not validate_address(address, network):
        raise InvalidAddressError(f"Invalid address: {address}")
    stats = await backend.get_address_stats(address)
    return stats.balance


async def transaction_history(
    backend: ChainBackend, address: str, network: NetworkType | str
) -> list[dict[str, Any]]:
    """Provider transaction list for an address."""
    if not validate_address(address, network):
        raise InvalidAddressError(f"Invalid address: {address}")
    return await backend.get_address_transactions(address)


class CoinSelector(ABC):
    """Chooses which of the wallet's outputs fund a transaction."""

    @abstractmethod
    def select(self, utxos: UTXOSet, target: int) -> UTXOSet:
        """Return the outputs to spend for a payment of `target` sats"""


class SpendAll(CoinSelector):
    """Spend every tracked output, in set order, regardless of target."""

    def select(self, utxos: UTXOSet, target: int) -> UTXOSet:
        return utxos
