"""
Configuration management using pydantic-settings.
"""

from __future__ import annotations

import sys

from loguru import logger
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from vaultwallet.constants import DEFAULT_FEE_RATE, DUST_THRESHOLD
from vaultwallet.models import NetworkType


class WalletSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="VAULTWALLET_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    network: NetworkType = NetworkType.TESTNET
    esplora_url: str = "https://blockstream.info/testnet/api"
    request_timeout: float = Field(default=30.0, gt=0)

    dust_threshold: int = Field(default=DUST_THRESHOLD, ge=0)
    default_fee_rate: int = Field(default=DEFAULT_FEE_RATE, ge=0)

    log_level: str = "INFO"


def get_settings() -> WalletSettings:
    return WalletSettings()


def setup_logging(level: str = "INFO") -> None:
    """Configure loguru logging."""
    logger.remove()
    logger.add(
        sys.stderr,
        level=level.upper(),
        format="<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | {message}",
    )
