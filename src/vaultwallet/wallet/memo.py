"""
Memo compilation for null-data (OP_RETURN) outputs.

No size limit is enforced here. A memo too large for the network's
standardness rules is rejected by the provider at broadcast time.
"""

from __future__ import annotations

import struct

from vaultwallet.constants import OP_PUSHDATA1, OP_PUSHDATA2, OP_PUSHDATA4, OP_RETURN


def compile_memo(text: str) -> bytes:
    """Encode memo text as its UTF-8 payload."""
    return text.encode("utf-8")


def push_data(data: bytes) -> bytes:
    """Minimal script push of arbitrary data."""
    length = len(data)
    if length <= 0x4B:
        return bytes([length]) + data
    if length <= 0xFF:
        return bytes([OP_PUSHDATA1, length]) + data
    if length <= 0xFFFF:
        return bytes([OP_PUSHDATA2]) + struct.pack("<H", length) + data
    return bytes([OP_PUSHDATA4]) + struct.pack("<I", length) + data


def null_data_script(payload: bytes) -> bytes:
    """Wrap a payload in a provably unspendable OP_RETURN locking script."""
    return bytes([OP_RETURN]) + push_data(payload)
