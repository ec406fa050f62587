"""
Size-based fee estimation.

Transaction size is estimated from a fixed model rather than measured from a
signed transaction:

    size = overhead + inputs * 148 + outputs * 34 [+ memo output]

The per-input and per-output costs are the legacy P2PKH figures, which
overestimate the vsize of the P2WPKH transactions this wallet builds.
"""

from __future__ import annotations

import math
from collections.abc import Collection, Mapping
from decimal import ROUND_HALF_UP, Decimal

from loguru import logger

from vaultwallet.constants import (
    DEFAULT_FEE_RATE,
    FEE_TIER_MULTIPLIERS,
    TX_EMPTY_SIZE,
    TX_INPUT_SIZE,
    TX_OUTPUT_BASE,
    TX_OUTPUT_SIZE,
)
from vaultwallet.errors import NoUtxosError
from vaultwallet.wallet.memo import compile_memo, null_data_script
from vaultwallet.wallet.models import FeeQuote, FeeSchedule, UnspentOutput

FeeRate = int | float | Decimal


def _to_decimal(fee_rate: FeeRate) -> Decimal:
    rate = fee_rate if isinstance(fee_rate, Decimal) else Decimal(str(fee_rate))
    if not rate.is_finite() or rate < 0:
        raise ValueError(f"Fee rate must be a non-negative number, got {fee_rate}")
    return rate


def round_fee_rate(fee_rate: FeeRate) -> int:
    """Round a fee rate to a whole sat/vbyte, halves rounding up."""
    return int(_to_decimal(fee_rate).quantize(Decimal(1), rounding=ROUND_HALF_UP))


def normal_tx_size(input_count: int) -> int:
    """Estimated size of a transaction with a destination and a change output."""
    return TX_EMPTY_SIZE + input_count * TX_INPUT_SIZE + 2 * TX_OUTPUT_SIZE


def vault_tx_size(input_count: int, memo_payload: bytes) -> int:
    """Estimated size of a normal transaction plus one null-data output."""
    memo_output = TX_OUTPUT_BASE + len(null_data_script(memo_payload))
    return normal_tx_size(input_count) + memo_output


def fee_for_size(size: int, fee_rate: FeeRate) -> int:
    return math.ceil(_to_decimal(fee_rate) * size)


def normal_fee(utxos: Collection[UnspentOutput], fee_rate: FeeRate) -> int:
    return fee_for_size(normal_tx_size(len(utxos)), fee_rate)


def vault_fee(utxos: Collection[UnspentOutput], memo_payload: bytes, fee_rate: FeeRate) -> int:
    return fee_for_size(vault_tx_size(len(utxos), memo_payload), fee_rate)


def quote_fees(
    utxos: Collection[UnspentOutput],
    memo: str | None,
    estimates: Mapping[str, float],
    default_fee_rate: FeeRate = DEFAULT_FEE_RATE,
) -> FeeSchedule:
    """
    Build the fast/regular/slow fee schedule.

    Tier rates are the next-block estimate (key "1") times fixed multipliers.
    They are not rounded here, while building a transaction rounds the rate
    first, so a quoted total can differ slightly from the fee actually paid.

    Args:
        utxos: Outputs that would be spent
        memo: Optional memo text; selects the memo-carrying size model
        estimates: Fee rate by confirmation target, as returned by the provider
        default_fee_rate: Used when there is no next-block estimate

    Returns:
        Mapping of tier name to FeeQuote

    Raises:
        NoUtxosError: if there is nothing to spend
    """
    if not utxos:
        raise NoUtxosError("No utxos to send")

    next_block_rate = _to_decimal(estimates.get("1") or default_fee_rate)
    memo_payload = compile_memo(memo) if memo else None

    schedule: FeeSchedule = {}
    for tier, multiplier in FEE_TIER_MULTIPLIERS.items():
        fee_rate = next_block_rate * _to_decimal(multiplier)
        if memo_payload is not None:
            fee_total = vault_fee(utxos, memo_payload, fee_rate)
        else:
            fee_total = normal_fee(utxos, fee_rate)
        schedule[tier] = FeeQuote(fee_rate=fee_rate, fee_total=fee_total)

    logger.debug(
        f"Fee schedule for {len(utxos)} inputs (next block {next_block_rate} sat/vB): "
        + ", ".join(f"{tier}={quote.fee_total}" for tier, quote in schedule.items())
    )
    return schedule
