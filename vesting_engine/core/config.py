"""Configuration management for the vesting engine.

Settings are resolved in order: built-in defaults, an optional YAML file,
then environment variables. Later sources win.
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

import yaml

from .exceptions import ConfigurationError
from .types import RevocationMode

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = "vesting.yaml"

ENV_VARS = {
    "revocation_mode": "VESTING_REVOCATION_MODE",
    "data_dir": "VESTING_DATA_DIR",
    "authority": "VESTING_AUTHORITY",
    "log_level": "VESTING_LOG_LEVEL",
}


@dataclass
class EngineConfig:
    """Engine configuration."""

    # Behaviour of vested() after revocation, stamped onto each new schedule
    revocation_mode: RevocationMode = RevocationMode.FREEZE

    # Directory holding one JSON file per schedule
    data_dir: Path = field(default_factory=lambda: Path("data") / "schedules")

    # Designated creator identity (hex); the only caller allowed to create schedules
    authority: Optional[str] = None

    log_level: str = "INFO"

    def __post_init__(self) -> None:
        try:
            self.revocation_mode = RevocationMode(self.revocation_mode)
        except ValueError:
            valid = ", ".join(m.value for m in RevocationMode)
            raise ConfigurationError(
                "revocation_mode", f"unknown mode {self.revocation_mode!r} (valid: {valid})"
            ) from None

        self.data_dir = Path(self.data_dir)

        if self.authority is not None:
            try:
                bytes.fromhex(self.authority.removeprefix("0x"))
            except ValueError:
                raise ConfigurationError("authority", "must be a hex-encoded identity") from None

        level = str(self.log_level).upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ConfigurationError("log_level", f"unknown log level {self.log_level!r}")
        self.log_level = level

    @property
    def authority_id(self) -> bytes | None:
        """Designated creator identity as raw bytes."""
        if self.authority is None:
            return None
        return bytes.fromhex(self.authority.removeprefix("0x"))

    @classmethod
    def from_mapping(cls, data: dict[str, Any]) -> "EngineConfig":
        """Build a config from a plain mapping, ignoring unknown keys."""
        known = {k: v for k, v in data.items() if k in ENV_VARS}
        unknown = sorted(set(data) - set(known))
        if unknown:
            logger.warning(f"Ignoring unknown config keys: {', '.join(unknown)}")
        return cls(**known)

    @classmethod
    def load(cls, config_file: Optional[Path] = None) -> "EngineConfig":
        """
        Load configuration from a YAML file and environment variables.

        Args:
            config_file: Optional path to a YAML file. If not provided,
                         looks for vesting.yaml in the working directory.

        Returns:
            EngineConfig instance with loaded values
        """
        data: dict[str, Any] = {}

        path = Path(config_file) if config_file else Path(DEFAULT_CONFIG_FILE)
        if path.exists():
            try:
                with open(path, "r", encoding="utf-8") as f:
                    data = yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                raise ConfigurationError("config_file", f"cannot parse {path}: {e}") from e
            if not isinstance(data, dict):
                raise ConfigurationError("config_file", f"{path} must contain a mapping")
            logger.debug(f"Loaded config from {path}")
        elif config_file:
            raise ConfigurationError("config_file", f"file not found: {path}")

        for key, env_var in ENV_VARS.items():
            value = os.getenv(env_var)
            if value:
                data[key] = value

        return cls.from_mapping(data)


# Global config instance (lazy loaded)
_config: Optional[EngineConfig] = None


def get_config() -> EngineConfig:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = EngineConfig.load()
    return _config


def reload_config(config_file: Optional[Path] = None) -> EngineConfig:
    """Reload configuration from file and environment."""
    global _config
    _config = EngineConfig.load(config_file)
    return _config
