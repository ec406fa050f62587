"""
Tests for seed phrase handling and single-key derivation.
"""

from __future__ import annotations

import base58
import pytest

from vaultwallet.errors import InvalidPhraseError
from vaultwallet.models import NetworkType
from vaultwallet.wallet.address import validate_address
from vaultwallet.wallet.keys import WalletKey, derive_address, generate_phrase, validate_phrase

# BIP39 seed of "abandon ... about" with an empty passphrase
ABANDON_SEED_PREFIX = "5eb00bbddcf069084889a8ab9155568165f5c453ccb85e70811aaed6f6da5fc1"


class TestPhrase:
    def test_generate_is_valid(self) -> None:
        phrase = generate_phrase()
        assert len(phrase.split()) == 12
        assert validate_phrase(phrase)

    def test_generate_24_words(self) -> None:
        assert len(generate_phrase(strength=256).split()) == 24

    def test_validate_known_phrase(self, sample_mnemonic: str) -> None:
        assert validate_phrase(sample_mnemonic) is True

    def test_validate_bad_checksum(self) -> None:
        assert validate_phrase(" ".join(["abandon"] * 12)) is False

    def test_validate_unknown_word(self) -> None:
        assert validate_phrase("notaword " * 11 + "about") is False

    def test_validate_empty(self) -> None:
        assert validate_phrase("") is False


class TestWalletKey:
    def test_private_key_is_seed_prefix(self, wallet_key: WalletKey) -> None:
        assert wallet_key.private_key.secret.hex() == ABANDON_SEED_PREFIX

    def test_invalid_phrase(self) -> None:
        with pytest.raises(InvalidPhraseError):
            WalletKey.from_phrase("this is not a valid phrase", NetworkType.TESTNET)

    def test_empty_phrase(self) -> None:
        with pytest.raises(InvalidPhraseError):
            WalletKey.from_phrase("", NetworkType.TESTNET)

    def test_testnet_address(self, wallet_key: WalletKey) -> None:
        address = wallet_key.get_address()
        assert address.startswith("tb1q")
        assert len(address) == 42
        assert validate_address(address, NetworkType.TESTNET)

    def test_mainnet_address(self, sample_mnemonic: str) -> None:
        address = derive_address(sample_mnemonic, NetworkType.MAINNET)
        assert address.startswith("bc1q")
        assert validate_address(address, NetworkType.MAINNET)
        assert not validate_address(address, NetworkType.TESTNET)

    def test_deterministic(self, sample_mnemonic: str) -> None:
        assert derive_address(sample_mnemonic, "testnet") == derive_address(
            sample_mnemonic, NetworkType.TESTNET
        )

    def test_different_phrases_differ(self, sample_mnemonic: str, other_mnemonic: str) -> None:
        assert derive_address(sample_mnemonic, "testnet") != derive_address(
            other_mnemonic, "testnet"
        )

    def test_same_script_on_both_networks(self, sample_mnemonic: str) -> None:
        main = WalletKey.from_phrase(sample_mnemonic, NetworkType.MAINNET)
        test = WalletKey.from_phrase(sample_mnemonic, NetworkType.TESTNET)
        assert main.get_scriptpubkey() == test.get_scriptpubkey()
        assert main.get_address() != test.get_address()

    def test_scriptpubkey_is_p2wpkh(self, wallet_key: WalletKey) -> None:
        script = wallet_key.get_scriptpubkey()
        assert script[:2] == bytes([0x00, 0x14])
        assert len(script) == 22

    @pytest.mark.parametrize(
        "network,version",
        [(NetworkType.MAINNET, 0x80), (NetworkType.TESTNET, 0xEF)],
    )
    def test_wif(self, sample_mnemonic: str, network: NetworkType, version: int) -> None:
        key = WalletKey.from_phrase(sample_mnemonic, network)
        decoded = base58.b58decode_check(key.to_wif())
        assert decoded[0] == version
        assert decoded[1:33] == key.private_key.secret
        assert decoded[33] == 0x01
