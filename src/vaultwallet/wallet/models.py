"""
Wallet data models.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from decimal import Decimal

from loguru import logger


@dataclass(frozen=True)
class UnspentOutput:
    """A spendable output owned by the wallet's address"""

    txid: str
    vout: int
    value: int
    scriptpubkey: bytes

    def __post_init__(self) -> None:
        if self.vout < 0:
            raise ValueError(f"Output index must be non-negative, got {self.vout}")
        if self.value < 0:
            raise ValueError(f"Output value must be non-negative, got {self.value}")

    @property
    def outpoint(self) -> tuple[str, int]:
        return self.txid, self.vout


class UTXOSet:
    """
    Immutable snapshot of the wallet's spendable outputs.

    Order is discovery order. Outputs repeating an already seen (txid, vout)
    are dropped so they cannot double-count the balance.
    """

    __slots__ = ("_utxos",)

    def __init__(self, utxos: Iterable[UnspentOutput] = ()):
        seen: set[tuple[str, int]] = set()
        unique: list[UnspentOutput] = []
        for utxo in utxos:
            if utxo.outpoint in seen:
                logger.warning(f"Dropping duplicate UTXO {utxo.txid}:{utxo.vout}")
                continue
            seen.add(utxo.outpoint)
            unique.append(utxo)
        self._utxos: tuple[UnspentOutput, ...] = tuple(unique)

    def __iter__(self) -> Iterator[UnspentOutput]:
        return iter(self._utxos)

    def __len__(self) -> int:
        return len(self._utxos)

    def __bool__(self) -> bool:
        return bool(self._utxos)

    def __getitem__(self, index: int) -> UnspentOutput:
        return self._utxos[index]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, UTXOSet):
            return NotImplemented
        return self._utxos == other._utxos

    def __hash__(self) -> int:
        return hash(self._utxos)

    def __repr__(self) -> str:
        return f"UTXOSet({len(self._utxos)} utxos, balance={self.balance()})"

    def balance(self) -> int:
        return sum(utxo.value for utxo in self._utxos)


EMPTY_UTXO_SET = UTXOSet()


@dataclass(frozen=True)
class FeeQuote:
    """Fee rate (sat/vbyte) and resulting total fee for one speed tier"""

    fee_rate: Decimal
    fee_total: int


FeeSchedule = dict[str, FeeQuote]


@dataclass(frozen=True)
class RegularOutput:
    address: str
    value: int


@dataclass(frozen=True)
class MemoOutput:
    payload: bytes

    @property
    def value(self) -> int:
        return 0


OutputSpec = RegularOutput | MemoOutput
