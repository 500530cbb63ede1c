"""Ready-made configurations for common webhook providers."""

from __future__ import annotations

from .config import ConfigError
from .settings import ReplacementRules, ValidatorConfig
from .validator import Validator, create_validator

# OAuth/app-proxy callbacks: sorted query pairs, the ``hmac`` field carries
# the digest and the legacy ``signature`` field is never signed.
SHOPIFY = ValidatorConfig(
    algorithm="sha256",
    output_encoding="hex",
    excluded_fields=frozenset({"signature", "hmac"}),
    replacement_rules=ReplacementRules(
        both={"&": "%26", "%": "%25"},
        keys={"=": "%3D"},
    ),
    digest_field_name="hmac",
)

# Full request URL as prefix, then POST params sorted and concatenated.
TWILIO = ValidatorConfig(
    algorithm="sha1",
    output_encoding="base64",
    key_value_separator="",
    pair_separator="",
)

# Channel auth: the whole message goes in as prefix, see pusher_auth_message.
PUSHER = ValidatorConfig(
    algorithm="sha256",
    output_encoding="hex",
)

PRESETS: dict[str, ValidatorConfig] = {
    "shopify": SHOPIFY,
    "twilio": TWILIO,
    "pusher": PUSHER,
}


def pusher_auth_message(socket_id: str, channel_name: str, body: str | None = None) -> str:
    """``socket_id:channel_name[:body]`` as signed for channel authorization."""
    message = f"{socket_id}:{channel_name}"
    if body is not None:
        message = f"{message}:{body}"
    return message


def preset(name: str) -> Validator:
    try:
        config = PRESETS[name.lower()]
    except KeyError:
        known = ", ".join(sorted(PRESETS))
        raise ConfigError(f"Unknown preset {name!r} (available: {known}).") from None
    return create_validator(config)
