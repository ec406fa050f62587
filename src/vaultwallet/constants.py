"""
Bitcoin constants used by the fee model and the transaction builder.
"""

from __future__ import annotations

# Change at or below this value is folded into the fee instead of creating
# an output. Higher than the 546 sat relay dust limit.
DUST_THRESHOLD = 1000  # satoshis

# Used when the provider has no estimate for a next-block confirmation
DEFAULT_FEE_RATE = 20  # sat/vbyte

# Multipliers applied to the next-block fee rate
FEE_TIER_MULTIPLIERS: dict[str, float] = {
    "fast": 5,
    "regular": 1,
    "slow": 0.5,
}

# Size model (bytes)
TX_EMPTY_SIZE = 4 + 1 + 1 + 4  # version + input count + output count + locktime
TX_INPUT_BASE = 32 + 4 + 1 + 4  # outpoint + script length + sequence
TX_INPUT_PUBKEYHASH = 107  # signature + pubkey
TX_INPUT_SIZE = TX_INPUT_BASE + TX_INPUT_PUBKEYHASH  # 148
TX_OUTPUT_BASE = 8 + 1  # value + script length
TX_OUTPUT_PUBKEYHASH = 25
TX_OUTPUT_SIZE = TX_OUTPUT_BASE + TX_OUTPUT_PUBKEYHASH  # 34

SIGHASH_ALL = 1
TX_VERSION = 2
SEQUENCE_FINAL = 0xFFFFFFFF

# Script opcodes
OP_0 = 0x00
OP_PUSHDATA1 = 0x4C
OP_PUSHDATA2 = 0x4D
OP_PUSHDATA4 = 0x4E
OP_1 = 0x51
OP_RETURN = 0x6A
OP_DUP = 0x76
OP_EQUAL = 0x87
OP_EQUALVERIFY = 0x88
OP_HASH160 = 0xA9
OP_CHECKSIG = 0xAC
