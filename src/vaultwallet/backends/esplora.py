"""
Esplora REST API chain backend.

Works against any Esplora-compatible server (electrs, blockstream.info,
mempool.space). Endpoints used:

- GET  /address/{address}/utxo
- GET  /address/{address}
- GET  /address/{address}/txs
- GET  /tx/{txid}
- GET  /fee-estimates
- POST /tx            (raw hex body, returns txid as text)
"""

from __future__ import annotations

from typing import Any

import httpx
from loguru import logger

from vaultwallet.backends.base import (
    AddressStats,
    AddressUTXO,
    ChainBackend,
    TransactionInfo,
    TxOutputInfo,
)
from vaultwallet.errors import ProviderError

DEFAULT_TIMEOUT = 30.0


class EsploraBackend(ChainBackend):
    """
    Chain data provider backed by an Esplora HTTP API.

    No retries are attempted; every failure surfaces as ProviderError.
    """

    def __init__(
        self,
        base_url: str = "",
        timeout: float = DEFAULT_TIMEOUT,
        client: httpx.AsyncClient | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.client = client or httpx.AsyncClient(timeout=timeout)

    def set_base_url(self, base_url: str) -> None:
        self.base_url = base_url.rstrip("/")

    async def _api_call(
        self,
        method: str,
        endpoint: str,
        content: str | None = None,
        expect_json: bool = True,
    ) -> Any:
        """Make an API call to the Esplora server."""
        if not self.base_url:
            raise ProviderError("Esplora endpoint not configured")

        if method not in ("GET", "POST"):
            raise ValueError(f"Unsupported HTTP method: {method}")

        url = f"{self.base_url}/{endpoint}"

        try:
            if method == "GET":
                response = await self.client.get(url)
            else:
                response = await self.client.post(url, content=content)

            response.raise_for_status()
            return response.json() if expect_json else response.text

        except httpx.HTTPStatusError as e:
            logger.error(f"Esplora API call failed: {endpoint} - {e}")
            raise ProviderError(
                f"{method} {endpoint} returned {e.response.status_code}: {e.response.text}"
            ) from e
        except httpx.HTTPError as e:
            logger.error(f"Esplora API call failed: {endpoint} - {e}")
            raise ProviderError(f"{method} {endpoint} failed: {e}") from e
        except httpx.InvalidURL as e:
            logger.error(f"Esplora API call failed: {endpoint} - {e}")
            raise ProviderError(f"{method} {endpoint} has an invalid URL: {e}") from e
        except ValueError as e:
            logger.error(f"Esplora returned malformed data: {endpoint} - {e}")
            raise ProviderError(f"{method} {endpoint} returned malformed data") from e

    async def get_address_utxos(self, address: str) -> list[AddressUTXO]:
        data = await self._api_call("GET", f"address/{address}/utxo")
        try:
            return [
                AddressUTXO(
                    txid=item["txid"],
                    vout=int(item["vout"]),
                    value=int(item["value"]),
                    confirmed=(item.get("status") or {}).get("confirmed", False),
                    block_height=(item.get("status") or {}).get("block_height"),
                )
                for item in data
            ]
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            raise ProviderError(f"Unexpected UTXO listing for {address}: {e}") from e

    async def get_transaction(self, txid: str) -> TransactionInfo:
        data = await self._api_call("GET", f"tx/{txid}")
        try:
            status = data.get("status") or {}
            return TransactionInfo(
                txid=data["txid"],
                outputs=[
                    TxOutputInfo(
                        scriptpubkey=out["scriptpubkey"],
                        value=int(out["value"]),
                        scriptpubkey_type=out.get("scriptpubkey_type", ""),
                        address=out.get("scriptpubkey_address"),
                    )
                    for out in data["vout"]
                ],
                confirmed=status.get("confirmed", False),
                block_height=status.get("block_height"),
                fee=data.get("fee"),
            )
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            raise ProviderError(f"Unexpected transaction data for {txid}: {e}") from e

    async def get_address_stats(self, address: str) -> AddressStats:
        data = await self._api_call("GET", f"address/{address}")
        try:
            chain_stats = data["chain_stats"]
            return AddressStats(
                address=data.get("address", address),
                funded_txo_sum=int(chain_stats["funded_txo_sum"]),
                spent_txo_sum=int(chain_stats["spent_txo_sum"]),
                tx_count=int(chain_stats.get("tx_count", 0)),
            )
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            raise ProviderError(f"Unexpected address data for {address}: {e}") from e

    async def get_address_transactions(self, address: str) -> list[dict[str, Any]]:
        data = await self._api_call("GET", f"address/{address}/txs")
        if not isinstance(data, list):
            raise ProviderError(f"Unexpected transaction list for {address}")
        return data

    async def get_fee_estimates(self) -> dict[str, float]:
        data = await self._api_call("GET", "fee-estimates")
        if not isinstance(data, dict):
            raise ProviderError("Unexpected fee estimates response")
        try:
            return {str(target): float(rate) for target, rate in data.items()}
        except (TypeError, ValueError) as e:
            raise ProviderError(f"Unexpected fee estimates response: {e}") from e

    async def broadcast_transaction(self, tx_hex: str) -> str:
        txid = await self._api_call("POST", "tx", content=tx_hex, expect_json=False)
        txid = txid.strip()
        logger.info(f"Broadcast transaction {txid}")
        return txid

    async def close(self) -> None:
        await self.client.aclose()
