"""
Tests — Decoder
================
Strict decoding for the two user-selectable encodings.
"""

from __future__ import annotations

import codecs

import pytest

from address_latlon.decoder import SUPPORTED_ENCODINGS, decode, normalize_encoding
from shared.python.exceptions import DecodeError, InputValidationError


class TestNormalizeEncoding:
    @pytest.mark.parametrize("label", ["UTF-8", "utf8", "utf-8", " Utf_8 "])
    def test_utf8_aliases(self, label: str) -> None:
        assert normalize_encoding(label) == "UTF-8"

    @pytest.mark.parametrize("label", ["Shift_JIS", "shift-jis", "SJIS", "cp932"])
    def test_shift_jis_aliases(self, label: str) -> None:
        assert normalize_encoding(label) == "Shift_JIS"

    def test_unsupported_raises(self) -> None:
        with pytest.raises(DecodeError) as info:
            normalize_encoding("EUC-JP")
        assert "unsupported" in info.value.message

    def test_supported_list(self) -> None:
        assert SUPPORTED_ENCODINGS == ("UTF-8", "Shift_JIS")


class TestDecode:
    def test_utf8(self) -> None:
        assert decode("住所\n東京都".encode("utf-8"), "UTF-8") == "住所\n東京都"

    def test_utf8_bom_is_dropped(self) -> None:
        data = codecs.BOM_UTF8 + "address\n".encode("utf-8")
        assert decode(data, "UTF-8") == "address\n"

    def test_shift_jis(self) -> None:
        data = "住所,名前\n大阪府,城\n".encode("shift_jis")
        assert decode(data, "Shift_JIS") == "住所,名前\n大阪府,城\n"

    def test_shift_jis_vendor_extensions(self) -> None:
        # NEC special characters only exist in the Windows-31J variant
        data = "①㈱".encode("cp932")
        assert decode(data, "Shift_JIS") == "①㈱"

    def test_invalid_utf8_raises(self) -> None:
        data = "住所".encode("shift_jis")
        with pytest.raises(DecodeError) as info:
            decode(data, "UTF-8")
        assert info.value.encoding == "UTF-8"
        assert isinstance(info.value, InputValidationError)

    def test_truncated_shift_jis_raises(self) -> None:
        with pytest.raises(DecodeError):
            decode(b"\x81", "Shift_JIS")

    def test_unsupported_encoding_raises(self) -> None:
        with pytest.raises(DecodeError):
            decode(b"abc", "latin-1")

    def test_decoding_is_repeatable(self) -> None:
        data = "名前\nA\n".encode("utf-8")
        assert decode(data, "UTF-8") == decode(data, "utf8")
