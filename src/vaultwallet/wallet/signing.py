"""
Bitcoin transaction signing utilities for P2WPKH inputs.
"""

from __future__ import annotations

import hashlib
import struct
from collections.abc import Sequence
from dataclasses import dataclass

from coincurve import PrivateKey, PublicKey

from vaultwallet.constants import (
    OP_CHECKSIG,
    OP_DUP,
    OP_EQUALVERIFY,
    OP_HASH160,
    SEQUENCE_FINAL,
    SIGHASH_ALL,
)
from vaultwallet.errors import SigningFailedError
from vaultwallet.wallet.address import hash160


@dataclass
class TxInput:
    """Transaction input with the prevout data needed for BIP143 signing."""

    txid: str
    vout: int
    value: int
    scriptpubkey: bytes
    sequence: int = SEQUENCE_FINAL


@dataclass
class TxOutput:
    value: int
    scriptpubkey: bytes


def hash256(data: bytes) -> bytes:
    return hashlib.sha256(hashlib.sha256(data).digest()).digest()


def encode_varint(value: int) -> bytes:
    if value < 0xFD:
        return bytes([value])
    if value <= 0xFFFF:
        return b"\xfd" + value.to_bytes(2, "little")
    if value <= 0xFFFFFFFF:
        return b"\xfe" + value.to_bytes(4, "little")
    return b"\xff" + value.to_bytes(8, "little")


def serialize_outpoint(txid: str, vout: int) -> bytes:
    """Serialize outpoint (txid:vout)."""
    # txid is in display format (big-endian), raw tx wants little-endian
    return bytes.fromhex(txid)[::-1] + struct.pack("<I", vout)


def serialize_output(out: TxOutput) -> bytes:
    return struct.pack("<Q", out.value) + encode_varint(len(out.scriptpubkey)) + out.scriptpubkey


def compute_sighash_segwit(
    version: int,
    inputs: Sequence[TxInput],
    outputs: Sequence[TxOutput],
    locktime: int,
    input_index: int,
    script_code: bytes,
    sighash_type: int = SIGHASH_ALL,
) -> bytes:
    """BIP143 signature hash for one input."""
    if input_index >= len(inputs):
        raise SigningFailedError(f"Input index {input_index} out of range")

    try:
        hash_prevouts = hash256(b"".join(serialize_outpoint(i.txid, i.vout) for i in inputs))
        hash_sequence = hash256(b"".join(struct.pack("<I", i.sequence) for i in inputs))
        hash_outputs = hash256(b"".join(serialize_output(o) for o in outputs))

        target = inputs[input_index]

        preimage = (
            struct.pack("<I", version)
            + hash_prevouts
            + hash_sequence
            + serialize_outpoint(target.txid, target.vout)
            + encode_varint(len(script_code))
            + script_code
            + struct.pack("<Q", target.value)
            + struct.pack("<I", target.sequence)
            + hash_outputs
            + struct.pack("<I", locktime)
            + struct.pack("<I", sighash_type)
        )
    except (ValueError, struct.error) as e:
        raise SigningFailedError(f"Failed to compute sighash: {e}") from e

    return hash256(preimage)


def create_p2wpkh_script_code(pubkey_bytes: bytes) -> bytes:
    """Create the scriptCode for P2WPKH signing (BIP 143).

    For P2WPKH, the scriptCode is the P2PKH script:
    OP_DUP OP_HASH160 <20-byte-pubkeyhash> OP_EQUALVERIFY OP_CHECKSIG
    """
    pubkey_hash = hash160(pubkey_bytes)
    return bytes([OP_DUP, OP_HASH160, 0x14]) + pubkey_hash + bytes([OP_EQUALVERIFY, OP_CHECKSIG])


def sign_sighash(
    sighash: bytes, private_key: PrivateKey, sighash_type: int = SIGHASH_ALL
) -> bytes:
    """
    Sign a precomputed sighash.

    Returns:
        DER-encoded signature with sighash type byte appended
    """
    # sighash is already SHA256d, hasher=None skips hashing
    signature = private_key.sign(sighash, hasher=None)
    return signature + bytes([sighash_type])


def verify_signature(sighash: bytes, signature: bytes, pubkey_bytes: bytes) -> bool:
    """Verify a DER signature (sighash byte stripped) against a pubkey."""
    try:
        return PublicKey(pubkey_bytes).verify(signature[:-1], sighash, hasher=None)
    except ValueError:
        return False


def create_witness_stack(signature: bytes, pubkey_bytes: bytes) -> list[bytes]:
    return [signature, pubkey_bytes]
