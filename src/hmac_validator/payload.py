"""Payload normalization and field filtering."""

from __future__ import annotations

from collections.abc import Collection, Mapping
from urllib.parse import parse_qsl

Payload = str | Mapping[str, str]


def decode_form(payload: str) -> dict[str, str]:
    """Decode ``name=value&...`` with form-encoding rules.

    Names and values are percent-decoded and ``+`` becomes a space. When a
    name repeats, the last occurrence wins.
    """
    return dict(parse_qsl(payload, keep_blank_values=True))


def normalize_payload(payload: Payload) -> dict[str, str]:
    if isinstance(payload, str):
        return decode_form(payload)
    if isinstance(payload, Mapping):
        fields: dict[str, str] = {}
        for name, value in payload.items():
            if not isinstance(name, str) or not isinstance(value, str):
                raise TypeError(
                    "payload mapping must contain only str names and values, "
                    f"got {type(name).__name__}: {type(value).__name__}"
                )
            fields[name] = value
        return fields
    raise TypeError(
        f"payload must be a str or a mapping, got {type(payload).__name__}"
    )


def filter_fields(
    fields: Mapping[str, str], excluded: Collection[str]
) -> dict[str, str]:
    return {name: value for name, value in fields.items() if name not in excluded}
