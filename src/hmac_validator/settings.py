"""Pydantic models for validator configuration."""

from __future__ import annotations

import os
import tomllib
from collections.abc import Mapping
from pathlib import Path
from typing import TYPE_CHECKING, Any, Literal

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
    model_validator,
)
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic_settings.sources import TomlConfigSettingsSource

from .config import CONFIG_PATH_ENV, HOME_CONFIG_PATH, ConfigError

if TYPE_CHECKING:
    from .validator import Validator

HashAlgorithm = Literal[
    "md5",
    "sha1",
    "sha224",
    "sha256",
    "sha384",
    "sha512",
    "sha3_224",
    "sha3_256",
    "sha3_384",
    "sha3_512",
    "blake2b",
    "blake2s",
]
OutputEncoding = Literal["hex", "base64", "base64url"]
# Codecs able to encode any str (lone surrogates included via "surrogatepass").
MessageEncoding = Literal["utf-8", "utf-16-le", "utf-16-be", "utf-32-le", "utf-32-be"]

DEFAULT_KEY_VALUE_SEPARATOR = "="
DEFAULT_PAIR_SEPARATOR = "&"


class _ConfigModel(BaseModel):
    """Models whose construction errors surface as ``ConfigError``."""

    def __init__(self, /, **data: Any) -> None:
        try:
            super().__init__(**data)
        except ValidationError as exc:
            raise ConfigError(f"Invalid {type(self).__name__}: {exc}") from exc


class ReplacementRules(_ConfigModel):
    """Per-character substitution tables.

    ``keys`` applies to field names, ``values`` to field values and ``both``
    to either. Every table key must be exactly one character.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    keys: dict[str, str] | None = None
    values: dict[str, str] | None = None
    both: dict[str, str] | None = None

    @field_validator("keys", "values", "both")
    @classmethod
    def _single_char_keys(cls, v: dict[str, str] | None) -> dict[str, str] | None:
        if v is None:
            return v
        for char in v:
            if len(char) != 1:
                raise ValueError(
                    "replacement table keys must be exactly 1 character, "
                    f"got {char!r}"
                )
        return v


class ValidatorConfig(_ConfigModel):
    """Canonicalization and digest settings for one signing convention."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    algorithm: HashAlgorithm
    output_encoding: OutputEncoding
    excluded_fields: frozenset[str] = frozenset()
    replacement_rules: ReplacementRules | None = None
    key_value_separator: str = DEFAULT_KEY_VALUE_SEPARATOR
    pair_separator: str = DEFAULT_PAIR_SEPARATOR
    digest_field_name: str | None = None
    message_encoding: MessageEncoding = "utf-8"

    @field_validator("key_value_separator", mode="before")
    @classmethod
    def _default_key_value_separator(cls, v: Any) -> Any:
        return v if isinstance(v, str) else DEFAULT_KEY_VALUE_SEPARATOR

    @field_validator("pair_separator", mode="before")
    @classmethod
    def _default_pair_separator(cls, v: Any) -> Any:
        return v if isinstance(v, str) else DEFAULT_PAIR_SEPARATOR

    @field_validator("digest_field_name", mode="before")
    @classmethod
    def _empty_digest_field_is_unset(cls, v: Any) -> Any:
        return v or None


def parse_validator_config(raw: Mapping[str, Any]) -> ValidatorConfig:
    """Validate a raw config mapping, reporting problems as ``ConfigError``."""
    if not isinstance(raw, Mapping):
        raise ConfigError(
            f"Validator config must be a mapping, got {type(raw).__name__}."
        )
    try:
        return ValidatorConfig.model_validate(dict(raw))
    except ValidationError as exc:
        raise ConfigError(f"Invalid validator config: {exc}") from exc


class ValidatorsSettings(BaseSettings):
    """Named validator configurations loaded from TOML and the environment."""

    model_config = SettingsConfigDict(
        extra="forbid",
        env_prefix="HMAC_VALIDATOR__",
        env_nested_delimiter="__",
    )

    validators: dict[str, ValidatorConfig] = Field(default_factory=dict)

    @model_validator(mode="after")
    def _non_empty_names(self) -> ValidatorsSettings:
        if any(not name.strip() for name in self.validators):
            raise ValueError("validator names must not be empty")
        return self

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls,
        init_settings,
        env_settings,
        dotenv_settings,
        file_secret_settings,
    ):
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            TomlConfigSettingsSource(settings_cls),
            file_secret_settings,
        )

    def build(self, name: str) -> Validator:
        from .validator import create_validator

        try:
            config = self.validators[name]
        except KeyError:
            known = ", ".join(sorted(self.validators)) or "none"
            raise ConfigError(
                f"Unknown validator {name!r} (configured: {known})."
            ) from None
        return create_validator(config)


def load_settings(path: str | Path | None = None) -> tuple[ValidatorsSettings, Path]:
    cfg_path = _resolve_config_path(path)
    _ensure_config_file(cfg_path)
    return _load_settings_from_path(cfg_path), cfg_path


def _resolve_config_path(path: str | Path | None) -> Path:
    if path:
        return Path(path).expanduser()
    env_path = os.environ.get(CONFIG_PATH_ENV)
    if env_path:
        return Path(env_path).expanduser()
    return HOME_CONFIG_PATH


def _ensure_config_file(cfg_path: Path) -> None:
    if cfg_path.exists() and not cfg_path.is_file():
        raise ConfigError(f"Config path {cfg_path} exists but is not a file.")
    if not cfg_path.exists():
        raise ConfigError(f"Missing config file {cfg_path}.")


def _check_toml(cfg_path: Path) -> None:
    try:
        tomllib.loads(cfg_path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise ConfigError(f"Failed to read config file {cfg_path}: {exc}") from exc
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"Malformed TOML in {cfg_path}: {exc}") from exc


def _load_settings_from_path(cfg_path: Path) -> ValidatorsSettings:
    _check_toml(cfg_path)
    cfg = dict(ValidatorsSettings.model_config)
    cfg["toml_file"] = cfg_path
    Bound = type(
        "ValidatorsSettingsBound",
        (ValidatorsSettings,),
        {"model_config": SettingsConfigDict(**cfg)},
    )
    try:
        return Bound()
    except ValidationError as exc:
        raise ConfigError(f"Invalid config in {cfg_path}: {exc}") from exc
