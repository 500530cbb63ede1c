"""Keyed-hash signature validation for webhook and callback payloads."""

from __future__ import annotations

from .config import ConfigError
from .settings import ReplacementRules, ValidatorConfig, ValidatorsSettings
from .validator import (
    DigestMissingError,
    SecretMissingError,
    Validator,
    create_validator,
)

__all__ = [
    "ConfigError",
    "DigestMissingError",
    "ReplacementRules",
    "SecretMissingError",
    "Validator",
    "ValidatorConfig",
    "ValidatorsSettings",
    "create_validator",
]
