"""
Configuration management for shelf-steam.

Loads configuration from multiple sources in order of priority:
1. Environment variables (SHELF_STEAM_*)
2. File named by SHELF_STEAM_CONFIG
3. User config (~/.config/shelf-steam/config.toml)
4. System config (/etc/shelf-steam/config.toml)
5. Default config (bundled with package)
"""

import os
import sys
from pathlib import Path
from typing import Any, Literal, Optional

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib
from pydantic import BaseModel, Field, ValidationError

from .errors import ConfigurationError


class ShellConfig(BaseModel):
    """REPL configuration."""
    prompt: str = Field(default="shelf-steam> ", description="Prompt printed before each read")
    error_message: str = Field(
        default="An error has occurred",
        description="The single line reported for every failure"
    )


class ProbeConfig(BaseModel):
    """Description probe configuration."""
    help_flag: str = Field(default="--help", description="Argument passed to entries when listing")
    empty_description: str = Field(default="(empty)", description="Sentinel for entries without a description")
    timeout: Optional[float] = Field(
        default=None,
        gt=0,
        description="Seconds to wait for a probed entry (None waits forever)"
    )


class LoggingConfig(BaseModel):
    """Logging configuration."""
    level: Literal["debug", "info", "warning", "error"] = Field(default="warning", description="Log level")
    path: Optional[str] = Field(default=None, description="Optional log file path")


class SessionConfig(BaseModel):
    """Interactive session configuration."""
    save_history: bool = Field(default=False, description="Persist prompt history between sessions")
    history_path: str = Field(default="~/.config/shelf-steam/history", description="History file location")
    complete_while_typing: bool = Field(default=False, description="Show completions without pressing Tab")


class ShelfSteamConfig(BaseModel):
    """Main shelf-steam configuration."""
    shell: ShellConfig = Field(default_factory=ShellConfig)
    probe: ProbeConfig = Field(default_factory=ProbeConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    session: SessionConfig = Field(default_factory=SessionConfig)


def get_config_paths() -> list[Path]:
    """Get configuration file paths in order of priority."""
    paths = []

    explicit = os.environ.get("SHELF_STEAM_CONFIG")
    if explicit:
        paths.append(Path(explicit).expanduser())

    paths.append(Path.home() / ".config" / "shelf-steam" / "config.toml")
    paths.append(Path("/etc/shelf-steam/config.toml"))
    paths.append(Path(__file__).parent / "data" / "default.toml")

    return paths


def load_toml_config(path: Path) -> dict[str, Any]:
    """Load configuration from a TOML file."""
    if not path.exists():
        return {}
    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        raise ConfigurationError(f"Cannot read config file {path}: {e}") from e


def merge_configs(base: dict, override: dict) -> dict:
    """Deep merge two configuration dictionaries."""
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = merge_configs(result[key], value)
        else:
            result[key] = value
    return result


def load_env_overrides() -> dict[str, Any]:
    """Load configuration overrides from environment variables."""
    overrides: dict[str, Any] = {}

    if os.environ.get("SHELF_STEAM_DEBUG"):
        overrides.setdefault("logging", {})["level"] = "debug"

    help_flag = os.environ.get("SHELF_STEAM_HELP_FLAG")
    if help_flag:
        overrides.setdefault("probe", {})["help_flag"] = help_flag

    timeout = os.environ.get("SHELF_STEAM_PROBE_TIMEOUT")
    if timeout:
        overrides.setdefault("probe", {})["timeout"] = timeout

    return overrides


def load_config() -> ShelfSteamConfig:
    """Load configuration from all sources."""
    config_data: dict[str, Any] = {}

    # Load from files (lowest to highest priority)
    for path in reversed(get_config_paths()):
        file_config = load_toml_config(path)
        config_data = merge_configs(config_data, file_config)

    config_data = merge_configs(config_data, load_env_overrides())

    try:
        return ShelfSteamConfig(**config_data)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid configuration: {e}") from e


# Global config instance
_config: Optional[ShelfSteamConfig] = None


def get_config() -> ShelfSteamConfig:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = load_config()
    return _config


def reset_config() -> None:
    """Reset the global configuration (useful for testing)."""
    global _config
    _config = None
