"""Character substitution tables applied to field names and values."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType

from .settings import ReplacementRules


@dataclass(frozen=True, slots=True)
class CompiledReplacements:
    keys: Mapping[str, str]
    values: Mapping[str, str]


def compile_replacements(rules: ReplacementRules | None) -> CompiledReplacements | None:
    """Merge the ``both`` table into the name and value tables.

    Returns ``None`` when no table is configured at all. Entries from the
    ``keys``/``values`` tables take precedence over ``both`` for the same
    character.
    """
    if rules is None:
        return None
    if rules.keys is None and rules.values is None and rules.both is None:
        return None
    both = rules.both or {}
    return CompiledReplacements(
        keys=MappingProxyType({**both, **(rules.keys or {})}),
        values=MappingProxyType({**both, **(rules.values or {})}),
    )


def substitute(text: str, table: Mapping[str, str]) -> str:
    # Single pass: replacement output is never rescanned.
    if not table:
        return text
    return "".join(table.get(char, char) for char in text)


def apply_replacements(
    fields: Mapping[str, str], compiled: CompiledReplacements
) -> dict[str, str]:
    result: dict[str, str] = {}
    for name, value in fields.items():
        result[substitute(name, compiled.keys)] = substitute(value, compiled.values)
    return result
