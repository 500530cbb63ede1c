from __future__ import annotations

from pathlib import Path

HOME_CONFIG_PATH = Path.home() / ".hmac-validator" / "validators.toml"
CONFIG_PATH_ENV = "HMAC_VALIDATOR_CONFIG_PATH"


class ConfigError(RuntimeError):
    pass
