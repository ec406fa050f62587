"""
Tests for memo compilation.
"""

from __future__ import annotations

import pytest

from vaultwallet.wallet.memo import compile_memo, null_data_script, push_data


class TestCompileMemo:
    def test_ascii(self) -> None:
        assert compile_memo("SWAP:BNB.BNB") == b"SWAP:BNB.BNB"

    def test_utf8(self) -> None:
        assert compile_memo("€") == b"\xe2\x82\xac"

    def test_empty(self) -> None:
        assert compile_memo("") == b""

    def test_no_length_limit(self) -> None:
        assert len(compile_memo("x" * 10_000)) == 10_000


class TestNullDataScript:
    def test_short_payload(self) -> None:
        assert null_data_script(b"hello") == bytes([0x6A, 0x05]) + b"hello"

    def test_empty_payload(self) -> None:
        assert null_data_script(b"") == bytes([0x6A, 0x00])

    def test_max_direct_push(self) -> None:
        script = null_data_script(b"a" * 75)
        assert script[:2] == bytes([0x6A, 75])
        assert len(script) == 77

    @pytest.mark.parametrize(
        "length,prefix",
        [
            (76, bytes([0x4C, 76])),
            (80, bytes([0x4C, 80])),
            (255, bytes([0x4C, 0xFF])),
            (256, bytes([0x4D, 0x00, 0x01])),
            (70_000, bytes([0x4E]) + (70_000).to_bytes(4, "little")),
        ],
    )
    def test_pushdata_opcodes(self, length: int, prefix: bytes) -> None:
        data = b"\x01" * length
        assert push_data(data) == prefix + data
