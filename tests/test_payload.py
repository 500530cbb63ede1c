"""Tests for payload normalization and field filtering."""

from __future__ import annotations

import pytest

from hmac_validator.payload import decode_form, filter_fields, normalize_payload


class TestDecodeForm:
    def test_pairs(self):
        assert decode_form("a=1&b=2") == {"a": "1", "b": "2"}

    def test_percent_decoding(self):
        assert decode_form("na%20me=v%26l") == {"na me": "v&l"}

    def test_plus_is_space(self):
        assert decode_form("q=a+b") == {"q": "a b"}

    def test_blank_values_kept(self):
        assert decode_form("a=&b") == {"a": "", "b": ""}

    def test_last_duplicate_wins(self):
        assert decode_form("a=1&a=2") == {"a": "2"}

    def test_invalid_escape_left_alone(self):
        assert decode_form("time%stamp=1") == {"time%stamp": "1"}


class TestNormalizePayload:
    def test_string_decoded(self):
        assert normalize_payload("x=1") == {"x": "1"}

    def test_mapping_used_as_is(self):
        fields = {"x": "a%20b"}
        result = normalize_payload(fields)
        assert result == {"x": "a%20b"}
        assert result is not fields

    def test_non_string_value(self):
        with pytest.raises(TypeError):
            normalize_payload({"x": 1})  # type: ignore[dict-item]

    def test_non_string_name(self):
        with pytest.raises(TypeError):
            normalize_payload({1: "x"})  # type: ignore[dict-item]

    @pytest.mark.parametrize("payload", [b"x=1", ["x", "1"], 42])
    def test_unsupported_shape(self, payload):
        with pytest.raises(TypeError):
            normalize_payload(payload)


class TestFilterFields:
    def test_excluded_removed(self):
        fields = {"a": "1", "signature": "s", "b": "2"}
        assert filter_fields(fields, {"signature"}) == {"a": "1", "b": "2"}

    def test_order_preserved(self):
        fields = {"z": "1", "a": "2", "m": "3"}
        assert list(filter_fields(fields, frozenset())) == ["z", "a", "m"]
