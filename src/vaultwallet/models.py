"""
Network models using Pydantic for validation.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field


class NetworkType(str, Enum):
    MAINNET = "mainnet"
    TESTNET = "testnet"


class NetworkParams(BaseModel):
    """Address and key encoding parameters for one network."""

    name: NetworkType
    bech32_hrp: str = Field(..., min_length=1)
    p2pkh_version: int = Field(..., ge=0, le=255)
    p2sh_version: int = Field(..., ge=0, le=255)
    wif_version: int = Field(..., ge=0, le=255)

    model_config = {"frozen": True}


MAINNET_PARAMS = NetworkParams(
    name=NetworkType.MAINNET,
    bech32_hrp="bc",
    p2pkh_version=0x00,
    p2sh_version=0x05,
    wif_version=0x80,
)

TESTNET_PARAMS = NetworkParams(
    name=NetworkType.TESTNET,
    bech32_hrp="tb",
    p2pkh_version=0x6F,
    p2sh_version=0xC4,
    wif_version=0xEF,
)


def get_network_params(network: NetworkType | str) -> NetworkParams:
    """Look up encoding parameters, accepting either the enum or its value."""
    if NetworkType(network) == NetworkType.MAINNET:
        return MAINNET_PARAMS
    return TESTNET_PARAMS
