"""
Bitcoin address encoding and validation.

Addresses are checked against a single network: a mainnet address is not
valid while the wallet runs on testnet and vice versa.
"""

from __future__ import annotations

import hashlib

import base58
import bech32

from vaultwallet.constants import (
    OP_0,
    OP_1,
    OP_CHECKSIG,
    OP_DUP,
    OP_EQUAL,
    OP_EQUALVERIFY,
    OP_HASH160,
)
from vaultwallet.errors import InvalidAddressError
from vaultwallet.models import NetworkType, get_network_params


def hash160(data: bytes) -> bytes:
    """RIPEMD160(SHA256(data))"""
    h = hashlib.new("ripemd160")
    h.update(hashlib.sha256(data).digest())
    return h.digest()


def pubkey_to_p2wpkh_script(pubkey: bytes) -> bytes:
    """Create P2WPKH scriptPubKey (OP_0 <20-byte-hash>)"""
    return bytes([OP_0, 0x14]) + hash160(pubkey)


def pubkey_to_p2wpkh_address(pubkey: bytes, network: NetworkType | str) -> str:
    """
    Convert compressed public key to P2WPKH (native segwit) address.
    BIP173 bech32 encoding.
    """
    if len(pubkey) != 33:
        raise ValueError(f"Invalid compressed pubkey length: {len(pubkey)}")

    hrp = get_network_params(network).bech32_hrp
    address = bech32.encode(hrp, 0, hash160(pubkey))
    if address is None:
        raise ValueError(f"Failed to encode P2WPKH address for {pubkey.hex()}")
    return address


def address_to_scriptpubkey(address: str, network: NetworkType | str) -> bytes:
    """
    Convert an address to its scriptPubKey under the given network's rules.

    Supports:
    - P2WPKH / P2WSH (bech32, witness v0)
    - P2TR (bech32m, witness v1)
    - P2PKH / P2SH (base58check)

    Raises:
        InvalidAddressError: if the address does not decode for this network
    """
    params = get_network_params(network)

    if not address:
        raise InvalidAddressError("Empty address")

    if address.lower().startswith(params.bech32_hrp + "1"):
        witver, witprog = bech32.decode(params.bech32_hrp, address)
        if witver is None or witprog is None:
            raise InvalidAddressError(f"Invalid bech32 address: {address}")

        program = bytes(witprog)
        if witver == 0 and len(program) in (20, 32):
            # P2WPKH: OP_0 <20 bytes>, P2WSH: OP_0 <32 bytes>
            return bytes([OP_0, len(program)]) + program
        if witver == 1 and len(program) == 32:
            return bytes([OP_1, 0x20]) + program
        raise InvalidAddressError(f"Unsupported witness program v{witver} in {address}")

    try:
        decoded = base58.b58decode_check(address)
    except ValueError as e:
        raise InvalidAddressError(f"Invalid address {address}: {e}") from e

    if len(decoded) != 21:
        raise InvalidAddressError(f"Invalid base58 payload length: {len(decoded)}")

    version, payload = decoded[0], decoded[1:]
    if version == params.p2pkh_version:
        return bytes([OP_DUP, OP_HASH160, 0x14]) + payload + bytes([OP_EQUALVERIFY, OP_CHECKSIG])
    if version == params.p2sh_version:
        return bytes([OP_HASH160, 0x14]) + payload + bytes([OP_EQUAL])

    raise InvalidAddressError(f"Address version {version} not valid on {params.name.value}")


def validate_address(address: str, network: NetworkType | str) -> bool:
    """Return True if the address decodes to a locking script on this network."""
    try:
        address_to_scriptpubkey(address, network)
    except InvalidAddressError:
        return False
    return True
