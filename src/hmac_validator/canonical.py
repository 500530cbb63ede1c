"""Canonical message assembly."""

from __future__ import annotations

from collections.abc import Mapping


def build_message(
    fields: Mapping[str, str],
    prefix: str | None = None,
    key_value_separator: str = "=",
    pair_separator: str = "&",
) -> str:
    """Render ``prefix`` followed by the sorted ``name<sep>value`` pairs.

    The prefix is used verbatim. With no fields the message is just the
    prefix, or ``""`` when there is no prefix either.
    """
    pairs = pair_separator.join(
        f"{name}{key_value_separator}{fields[name]}" for name in sorted(fields)
    )
    return f"{prefix or ''}{pairs}"
