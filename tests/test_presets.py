"""Tests for provider presets against published signature examples."""

from __future__ import annotations

from urllib.parse import parse_qs, urlsplit

import pytest

from hmac_validator import ConfigError
from hmac_validator.presets import PRESETS, preset, pusher_auth_message


class TestShopify:
    def test_oauth_callback(self):
        request_url = (
            "/?shop=some-shop.myshopify.com&timestamp=1337178173"
            "&signature=6e39a2ea9e497af6cb806720da1f1bf3"
            "&hmac=c2812f39f84c32c2edaded339a1388abc9829babf351b684ab797f04cd94d4c7"
        )
        query = urlsplit(request_url).query
        assert preset("shopify")("hush", None, query) is True

    def test_tampered_field(self):
        query = (
            "shop=other-shop.myshopify.com&timestamp=1337178173"
            "&hmac=c2812f39f84c32c2edaded339a1388abc9829babf351b684ab797f04cd94d4c7"
        )
        assert preset("shopify")("hush", None, query) is False


class TestTwilio:
    def test_voice_callback(self):
        body = {
            "Digits": "1234",
            "To": "+18005551212",
            "From": "+14158675309",
            "Caller": "+14158675309",
            "CallSid": "CA1234567890ABCDE",
        }
        url = "https://mycompany.com/myapp.php?foo=1&bar=2"
        digest = "RSOYDt4T1cUTdK1PDd93/VVr8B8="
        assert preset("twilio")("12345", url, body, digest) is True

    def test_message_concatenates_without_separators(self):
        message = preset("twilio").message("https://x/", {"b": "2", "a": "1"})
        assert message == "https://x/a1b2"


class TestPusher:
    def test_channel_auth(self):
        query = parse_qs(urlsplit("/pusher/auth?channel_name=presence-foobar&socket_id=1234.1234").query)
        body = '{"user_id":10,"user_info":{"name":"Mr. Pusher"}}'
        message = pusher_auth_message(query["socket_id"][0], query["channel_name"][0], body)
        digest = "afaed3695da2ffd16931f457e338e6c9f2921fa133ce7dac49f529792be6304c"
        assert preset("pusher")("7ad3773142a6692b25b8", message, None, digest) is True

    def test_message_without_body(self):
        assert pusher_auth_message("1234.1234", "private-foobar") == "1234.1234:private-foobar"


class TestPresetLookup:
    def test_known_names(self):
        assert set(PRESETS) == {"shopify", "twilio", "pusher"}

    def test_case_insensitive(self):
        assert preset("Shopify").compiled.digest_field_name == "hmac"

    def test_unknown(self):
        with pytest.raises(ConfigError, match="Unknown preset"):
            preset("stripe")
