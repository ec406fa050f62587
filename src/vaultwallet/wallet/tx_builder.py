"""
Transaction builder for plain and memo-carrying (vault) transactions.

Builds a transaction from:
- The session's UTXOs (all of them, via the SpendAll selector)
- A destination output, an optional change output and an optional memo output
- A fee from the size-based fee model

Both entry points share one pipeline. A draft moves strictly forward through
DRAFT -> INPUTS_BOUND -> OUTPUTS_BOUND -> SIGNED -> FINALIZED -> SERIALIZED
-> BROADCAST.
"""

from __future__ import annotations

import math
import struct
from collections.abc import Sequence
from dataclasses import dataclass
from enum import IntEnum

from loguru import logger

from vaultwallet.backends.base import ChainBackend
from vaultwallet.constants import SIGHASH_ALL, TX_VERSION
from vaultwallet.errors import (
    BuildStateError,
    InsufficientBalanceError,
    InvalidAddressError,
    InvalidPhraseError,
    NoUtxosError,
    SigningFailedError,
)
from vaultwallet.models import NetworkType
from vaultwallet.wallet.address import address_to_scriptpubkey
from vaultwallet.wallet.fees import (
    FeeRate,
    normal_fee,
    normal_tx_size,
    round_fee_rate,
    vault_fee,
    vault_tx_size,
)
from vaultwallet.wallet.keys import WalletKey
from vaultwallet.wallet.memo import compile_memo, null_data_script
from vaultwallet.wallet.models import MemoOutput, OutputSpec, RegularOutput, UTXOSet
from vaultwallet.wallet.session import WalletSession
from vaultwallet.wallet.signing import (
    TxInput,
    TxOutput,
    compute_sighash_segwit,
    create_p2wpkh_script_code,
    create_witness_stack,
    encode_varint,
    hash256,
    serialize_outpoint,
    serialize_output,
    sign_sighash,
    verify_signature,
)
from vaultwallet.wallet.utxo import CoinSelector, SpendAll


class BuildStage(IntEnum):
    DRAFT = 0
    INPUTS_BOUND = 1
    OUTPUTS_BOUND = 2
    SIGNED = 3
    FINALIZED = 4
    SERIALIZED = 5
    BROADCAST = 6


def output_spec_to_txout(spec: OutputSpec, network: NetworkType | str) -> TxOutput:
    """Resolve an output spec to a value and locking script."""
    if isinstance(spec, MemoOutput):
        return TxOutput(value=0, scriptpubkey=null_data_script(spec.payload))
    return TxOutput(value=spec.value, scriptpubkey=address_to_scriptpubkey(spec.address, network))


class DraftTransaction:
    """
    A transaction under construction, signed with a single wallet key.
    """

    def __init__(self, key: WalletKey, version: int = TX_VERSION, locktime: int = 0):
        self.key = key
        self.network = key.network
        self.version = version
        self.locktime = locktime
        self.stage = BuildStage.DRAFT

        self.inputs: list[TxInput] = []
        self.outputs: list[TxOutput] = []
        self._sighashes: list[bytes] = []
        self._signatures: list[bytes] = []
        self.witnesses: list[list[bytes]] = []
        self.raw: bytes = b""

    def _advance(self, expected: BuildStage, target: BuildStage) -> None:
        if self.stage != expected:
            raise BuildStateError(
                f"Cannot move to {target.name}: draft is {self.stage.name}, "
                f"expected {expected.name}"
            )
        self.stage = target

    def bind_inputs(self, utxos: UTXOSet) -> None:
        self._advance(BuildStage.DRAFT, BuildStage.INPUTS_BOUND)
        self.inputs = [
            TxInput(txid=u.txid, vout=u.vout, value=u.value, scriptpubkey=u.scriptpubkey)
            for u in utxos
        ]

    def bind_outputs(self, specs: Sequence[OutputSpec]) -> None:
        self._advance(BuildStage.INPUTS_BOUND, BuildStage.OUTPUTS_BOUND)
        self.outputs = [output_spec_to_txout(spec, self.network) for spec in specs]

    def sign(self) -> None:
        """Sign every input with the wallet key (SIGHASH_ALL)."""
        self._advance(BuildStage.OUTPUTS_BOUND, BuildStage.SIGNED)

        pubkey = self.key.get_public_key_bytes()
        script_code = create_p2wpkh_script_code(pubkey)

        for index in range(len(self.inputs)):
            sighash = compute_sighash_segwit(
                self.version, self.inputs, self.outputs, self.locktime, index, script_code
            )
            try:
                signature = sign_sighash(sighash, self.key.private_key, SIGHASH_ALL)
            except ValueError as e:
                raise SigningFailedError(f"Failed to sign input {index}: {e}") from e
            self._sighashes.append(sighash)
            self._signatures.append(signature)

    def finalize(self) -> None:
        """
        Turn signatures into witnesses.

        Every input must be locked to the wallet's own P2WPKH script and carry
        a signature that verifies, otherwise the whole draft is rejected.
        """
        self._advance(BuildStage.SIGNED, BuildStage.FINALIZED)

        pubkey = self.key.get_public_key_bytes()
        own_script = self.key.get_scriptpubkey()
        witnesses: list[list[bytes]] = []

        for index, inp in enumerate(self.inputs):
            if inp.scriptpubkey != own_script:
                raise SigningFailedError(
                    f"Cannot finalize input {index} ({inp.txid}:{inp.vout}): "
                    f"script {inp.scriptpubkey.hex()} is not spendable by the wallet key"
                )
            if not verify_signature(self._sighashes[index], self._signatures[index], pubkey):
                raise SigningFailedError(f"Signature for input {index} does not verify")
            witnesses.append(create_witness_stack(self._signatures[index], pubkey))

        self.witnesses = witnesses

    def serialize(self) -> str:
        """Encode the finalized transaction (segwit format) as hex."""
        self._advance(BuildStage.FINALIZED, BuildStage.SERIALIZED)
        self.raw = self._serialize(with_witness=True)
        return self.raw.hex()

    def mark_broadcast(self) -> None:
        self._advance(BuildStage.SERIALIZED, BuildStage.BROADCAST)

    def _serialize(self, with_witness: bool) -> bytes:
        result = struct.pack("<I", self.version)
        if with_witness:
            result += bytes([0x00, 0x01])  # SegWit marker and flag

        result += encode_varint(len(self.inputs))
        for inp in self.inputs:
            result += serialize_outpoint(inp.txid, inp.vout)
            result += bytes([0x00])  # empty scriptSig
            result += struct.pack("<I", inp.sequence)

        result += encode_varint(len(self.outputs))
        for out in self.outputs:
            result += serialize_output(out)

        if with_witness:
            for witness in self.witnesses:
                result += encode_varint(len(witness))
                for item in witness:
                    result += encode_varint(len(item))
                    result += item

        result += struct.pack("<I", self.locktime)
        return result

    @property
    def txid(self) -> str:
        """Double SHA256 of the non-witness serialization, display order."""
        return hash256(self._serialize(with_witness=False))[::-1].hex()

    @property
    def vsize(self) -> int:
        base = len(self._serialize(with_witness=False))
        total = len(self._serialize(with_witness=True))
        return math.ceil((base * 3 + total) / 4)


@dataclass(frozen=True)
class TransactionPlan:
    """Validated inputs, ordered outputs and fee for one transaction."""

    inputs: UTXOSet
    outputs: tuple[OutputSpec, ...]
    fee_rate: int
    fee: int
    change: int
    estimated_size: int

    @property
    def input_total(self) -> int:
        return self.inputs.balance()

    @property
    def output_total(self) -> int:
        return sum(spec.value for spec in self.outputs)

    @property
    def fee_paid(self) -> int:
        """Fee actually paid, including any change absorbed as dust."""
        return self.input_total - self.output_total


def plan_transaction(
    session: WalletSession,
    destination: str,
    value: int,
    fee_rate: FeeRate,
    memo: str | None = None,
    selector: CoinSelector | None = None,
) -> TransactionPlan:
    """
    Check preconditions and lay out a transaction without touching any state.

    With `memo` set (even to an empty string) the plan carries a memo output
    and uses the memo fee model.

    Raises:
        NoUtxosError: the session has no UTXOs
        InvalidAddressError: destination is not valid on the session's network
        InvalidPhraseError: the session has no phrase to sign with
        InsufficientBalanceError: value plus fee exceeds the balance
    """
    if not session.utxos:
        raise NoUtxosError("No utxos to send")
    if not session.validate_address(destination):
        raise InvalidAddressError(f"Invalid address: {destination}")
    if not session.has_phrase:
        raise InvalidPhraseError("Phrase not set")
    if value < 0:
        raise ValueError(f"Output value must be non-negative, got {value}")

    selector = selector or SpendAll()
    inputs = selector.select(session.utxos, value)
    balance = inputs.balance()

    whole_rate = round_fee_rate(fee_rate)
    memo_payload = compile_memo(memo) if memo is not None else None
    if memo_payload is not None:
        fee = vault_fee(inputs, memo_payload, whole_rate)
        estimated_size = vault_tx_size(len(inputs), memo_payload)
    else:
        fee = normal_fee(inputs, whole_rate)
        estimated_size = normal_tx_size(len(inputs))

    if fee + value > balance:
        raise InsufficientBalanceError(needed=fee + value, available=balance)

    remainder = balance - (value + fee)
    change = remainder if remainder > session.dust_threshold else 0

    outputs: list[OutputSpec] = [RegularOutput(address=destination, value=value)]
    if change > 0:
        outputs.append(RegularOutput(address=session.address, value=change))
    elif remainder > 0:
        logger.debug(f"Change of {remainder} sats is dust, adding it to the fee")
    if memo_payload is not None:
        outputs.append(MemoOutput(payload=memo_payload))

    plan = TransactionPlan(
        inputs=inputs,
        outputs=tuple(outputs),
        fee_rate=whole_rate,
        fee=fee,
        change=change,
        estimated_size=estimated_size,
    )
    logger.debug(
        f"Planned tx: {len(inputs)} inputs, {len(outputs)} outputs, "
        f"fee {plan.fee_paid} sats at {whole_rate} sat/vB (estimated {estimated_size} bytes)"
    )
    return plan


def sign_plan(session: WalletSession, plan: TransactionPlan) -> DraftTransaction:
    """Bind, sign and finalize a plan, returning a draft ready to serialize."""
    draft = DraftTransaction(session.key)
    draft.bind_inputs(plan.inputs)
    draft.bind_outputs(plan.outputs)
    draft.sign()
    draft.finalize()
    return draft


def build_transaction_hex(
    session: WalletSession,
    destination: str,
    value: int,
    fee_rate: FeeRate,
    memo: str | None = None,
    selector: CoinSelector | None = None,
) -> tuple[str, TransactionPlan]:
    """Build and sign a transaction without broadcasting it."""
    plan = plan_transaction(session, destination, value, fee_rate, memo, selector)
    draft = sign_plan(session, plan)
    tx_hex = draft.serialize()
    logger.debug(
        f"Signed tx {draft.txid}: vsize {draft.vsize}, estimated size {plan.estimated_size}"
    )
    return tx_hex, plan


async def _build_and_broadcast(
    session: WalletSession,
    backend: ChainBackend,
    destination: str,
    value: int,
    fee_rate: FeeRate,
    memo: str | None,
    selector: CoinSelector | None,
) -> str:
    plan = plan_transaction(session, destination, value, fee_rate, memo, selector)
    draft = sign_plan(session, plan)
    tx_hex = draft.serialize()

    logger.info(f"Broadcasting {draft.txid}: {value:,} sats to {destination}, fee {plan.fee_paid}")
    txid = await backend.broadcast_transaction(tx_hex)
    draft.mark_broadcast()
    return txid


async def build_vault_transaction(
    session: WalletSession,
    backend: ChainBackend,
    vault_address: str,
    value: int,
    memo: str,
    fee_rate: FeeRate,
    selector: CoinSelector | None = None,
) -> str:
    """Send `value` to a vault address with an OP_RETURN memo. Returns the txid."""
    return await _build_and_broadcast(
        session, backend, vault_address, value, fee_rate, memo, selector
    )


async def build_normal_transaction(
    session: WalletSession,
    backend: ChainBackend,
    destination: str,
    value: int,
    fee_rate: FeeRate,
    selector: CoinSelector | None = None,
) -> str:
    """Send `value` to an address. Returns the txid."""
    return await _build_and_broadcast(
        session, backend, destination, value, fee_rate, None, selector
    )
