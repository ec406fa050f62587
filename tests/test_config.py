"""
Tests for settings and logging setup.
"""

import pytest
from loguru import logger
from pydantic import ValidationError

from vaultwallet.config import WalletSettings, get_settings, setup_logging
from vaultwallet.constants import DEFAULT_FEE_RATE, DUST_THRESHOLD
from vaultwallet.models import NetworkType, get_network_params


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    for name in ("NETWORK", "ESPLORA_URL", "REQUEST_TIMEOUT", "DUST_THRESHOLD", "LOG_LEVEL"):
        monkeypatch.delenv(f"VAULTWALLET_{name}", raising=False)


def test_defaults() -> None:
    settings = WalletSettings()
    assert settings.network == NetworkType.TESTNET
    assert settings.dust_threshold == DUST_THRESHOLD
    assert settings.default_fee_rate == DEFAULT_FEE_RATE
    assert settings.request_timeout == 30.0


def test_env_override(monkeypatch) -> None:
    monkeypatch.setenv("VAULTWALLET_NETWORK", "mainnet")
    monkeypatch.setenv("VAULTWALLET_ESPLORA_URL", "https://blockstream.info/api")
    monkeypatch.setenv("VAULTWALLET_DUST_THRESHOLD", "546")

    settings = get_settings()

    assert settings.network == NetworkType.MAINNET
    assert settings.esplora_url == "https://blockstream.info/api"
    assert settings.dust_threshold == 546


def test_env_file(tmp_path) -> None:
    (tmp_path / ".env").write_text("VAULTWALLET_LOG_LEVEL=DEBUG\n")
    assert WalletSettings().log_level == "DEBUG"


def test_invalid_network() -> None:
    with pytest.raises(ValidationError):
        WalletSettings(network="signet")


def test_negative_dust_threshold() -> None:
    with pytest.raises(ValidationError):
        WalletSettings(dust_threshold=-1)


def test_zero_timeout() -> None:
    with pytest.raises(ValidationError):
        WalletSettings(request_timeout=0)


def test_network_params() -> None:
    assert get_network_params(NetworkType.MAINNET).bech32_hrp == "bc"
    assert get_network_params("testnet").bech32_hrp == "tb"


def test_setup_logging_sets_level() -> None:
    messages: list[str] = []
    setup_logging("warning")
    sink_id = logger.add(messages.append, level="WARNING", format="{message}")
    try:
        logger.info("hidden")
        logger.warning("shown")
    finally:
        logger.remove(sink_id)
    assert [m.strip() for m in messages] == ["shown"]
