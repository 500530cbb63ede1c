"""Validator factory: compile a config once, verify signatures many times."""

from __future__ import annotations

import base64
import hmac
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from .canonical import build_message
from .logging import get_logger
from .payload import Payload, filter_fields, normalize_payload
from .rules import CompiledReplacements, apply_replacements, compile_replacements
from .settings import ValidatorConfig, parse_validator_config

logger = get_logger(__name__)


class DigestMissingError(RuntimeError):
    pass


class SecretMissingError(RuntimeError):
    pass


@dataclass(frozen=True, slots=True)
class CompiledConfig:
    algorithm: str
    output_encoding: str
    excluded_fields: frozenset[str]
    replacements: CompiledReplacements | None
    key_value_separator: str
    pair_separator: str
    digest_field_name: str | None
    message_encoding: str


def compile_config(config: ValidatorConfig | Mapping[str, Any]) -> CompiledConfig:
    """Validate ``config`` and precompute everything verification needs.

    Raises ``ConfigError`` for a missing algorithm or output encoding and for
    replacement table keys that are not exactly one character.
    """
    if not isinstance(config, ValidatorConfig):
        config = parse_validator_config(config)

    excluded = config.excluded_fields
    if config.digest_field_name is not None:
        excluded = excluded | {config.digest_field_name}

    return CompiledConfig(
        algorithm=config.algorithm,
        output_encoding=config.output_encoding,
        excluded_fields=frozenset(excluded),
        replacements=compile_replacements(config.replacement_rules),
        key_value_separator=config.key_value_separator,
        pair_separator=config.pair_separator,
        digest_field_name=config.digest_field_name,
        message_encoding=config.message_encoding,
    )


def compute_digest(
    message: str,
    secret: str,
    *,
    algorithm: str,
    output_encoding: str,
    message_encoding: str = "utf-8",
) -> str:
    """Keyed hash of ``message`` rendered as hex, base64 or base64url."""
    mac = hmac.new(
        secret.encode("utf-8", "surrogatepass"),
        message.encode(message_encoding, "surrogatepass"),
        algorithm,
    )
    if output_encoding == "hex":
        return mac.hexdigest()
    if output_encoding == "base64":
        return base64.b64encode(mac.digest()).decode("ascii")
    if output_encoding == "base64url":
        return base64.urlsafe_b64encode(mac.digest()).decode("ascii")
    raise ValueError(f"unsupported output encoding {output_encoding!r}")


def _require_secret(secret: str | None) -> str:
    if not secret:
        raise SecretMissingError("A non-empty secret is required to verify a digest.")
    return secret


class Validator:
    """Reusable signature check closed over one compiled configuration.

    Instances hold no mutable state, so one validator can serve concurrent
    requests.
    """

    __slots__ = ("_compiled",)

    def __init__(self, compiled: CompiledConfig) -> None:
        self._compiled = compiled

    @property
    def compiled(self) -> CompiledConfig:
        return self._compiled

    def __call__(
        self,
        secret: str | None,
        prefix: str | None = None,
        payload: Payload | None = None,
        digest: str | None = None,
    ) -> bool:
        secret = _require_secret(secret)
        message, expected = self._resolve(prefix, payload, digest)
        if expected is None:
            return False
        computed = self._digest(message, secret)
        return hmac.compare_digest(
            computed.encode("utf-8"), expected.encode("utf-8", "surrogatepass")
        )

    def message(self, prefix: str | None = None, payload: Payload | None = None) -> str:
        """Canonical message for ``prefix`` and ``payload``, without hashing."""
        if payload is None:
            return prefix or ""
        return self._canonicalize(prefix, normalize_payload(payload))

    def sign(
        self,
        secret: str | None,
        prefix: str | None = None,
        payload: Payload | None = None,
    ) -> str:
        """Digest a sender would attach for ``prefix`` and ``payload``."""
        secret = _require_secret(secret)
        return self._digest(self.message(prefix, payload), secret)

    def _resolve(
        self,
        prefix: str | None,
        payload: Payload | None,
        digest: str | None,
    ) -> tuple[str, str | None]:
        if payload is None:
            return prefix or "", digest or None

        fields = normalize_payload(payload)
        if not fields:
            return prefix or "", digest or None
        if not digest:
            field_name = self._compiled.digest_field_name
            if field_name is None:
                raise DigestMissingError(
                    "A digest must be provided because no digest field is configured."
                )
            digest = fields.get(field_name)
            if digest is None:
                logger.warning("validator.digest.field_missing", field=field_name)
        return self._canonicalize(prefix, fields), digest

    def _canonicalize(self, prefix: str | None, fields: Mapping[str, str]) -> str:
        compiled = self._compiled
        fields = filter_fields(fields, compiled.excluded_fields)
        if compiled.replacements is not None:
            fields = apply_replacements(fields, compiled.replacements)
        return build_message(
            fields,
            prefix,
            key_value_separator=compiled.key_value_separator,
            pair_separator=compiled.pair_separator,
        )

    def _digest(self, message: str, secret: str) -> str:
        compiled = self._compiled
        return compute_digest(
            message,
            secret,
            algorithm=compiled.algorithm,
            output_encoding=compiled.output_encoding,
            message_encoding=compiled.message_encoding,
        )


def create_validator(config: ValidatorConfig | Mapping[str, Any]) -> Validator:
    """Build a ``Validator`` from a ``ValidatorConfig`` or a raw mapping."""
    compiled = compile_config(config)
    logger.debug(
        "validator.created",
        algorithm=compiled.algorithm,
        output_encoding=compiled.output_encoding,
        excluded_fields=sorted(compiled.excluded_fields),
        replacements=compiled.replacements is not None,
    )
    return Validator(compiled)
