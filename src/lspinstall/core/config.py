"""lspinstall configuration: Pydantic model, load, and save."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, field_validator

from lspinstall.core.constants import (
    CONFIG_DIR_NAME,
    CONFIG_FILENAME,
    DEFAULT_INSTALL_ROOT,
    DEFAULT_LOG_DIR,
    DEFAULT_MAX_CONCURRENT,
    DEFAULT_WINDOW_WIDTH,
    LOG_FILENAME,
    MAX_CONCURRENT_LIMIT,
)
from lspinstall.core.exceptions import ConfigError, ConfigNotFoundError


def config_dir() -> Path:
    """Return the lspinstall config directory (respects XDG_CONFIG_HOME)."""
    base = os.environ.get("XDG_CONFIG_HOME") or str(Path.home() / ".config")
    return Path(base) / CONFIG_DIR_NAME


# ---------------------------------------------------------------------------
# Sub-models
# ---------------------------------------------------------------------------


class QueueConfig(BaseModel):
    max_concurrent: int = DEFAULT_MAX_CONCURRENT

    @field_validator("max_concurrent")
    @classmethod
    def validate_max_concurrent(cls, v: int) -> int:
        if not (1 <= v <= MAX_CONCURRENT_LIMIT):
            raise ValueError(f"max_concurrent must be between 1 and {MAX_CONCURRENT_LIMIT}")
        return v


class UIConfig(BaseModel):
    width: int = DEFAULT_WINDOW_WIDTH

    @field_validator("width")
    @classmethod
    def validate_width(cls, v: int) -> int:
        if not (40 <= v <= 400):
            raise ValueError("width must be between 40 and 400")
        return v


class LoggingConfig(BaseModel):
    level: str = "INFO"
    format: str = "text"  # "text" | "json"
    path: str = ""  # empty → use default

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        allowed = {"DEBUG", "INFO", "WARNING", "ERROR"}
        if v.upper() not in allowed:
            raise ValueError(f"Log level must be one of: {allowed}")
        return v.upper()

    @field_validator("format")
    @classmethod
    def validate_format(cls, v: str) -> str:
        if v not in ("text", "json"):
            raise ValueError("Log format must be 'text' or 'json'")
        return v


# ---------------------------------------------------------------------------
# Root config
# ---------------------------------------------------------------------------


class LspInstallConfig(BaseModel):
    """Root lspinstall configuration model."""

    install_root: str = DEFAULT_INSTALL_ROOT
    queue: QueueConfig = Field(default_factory=QueueConfig)
    ui: UIConfig = Field(default_factory=UIConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @property
    def install_root_path(self) -> Path:
        return Path(self.install_root).expanduser()

    @property
    def log_path(self) -> Path:
        if self.logging.path:
            return Path(self.logging.path).expanduser()
        return Path(DEFAULT_LOG_DIR).expanduser() / LOG_FILENAME


# ---------------------------------------------------------------------------
# Load / save
# ---------------------------------------------------------------------------


def _config_file_path() -> Path:
    if env_path := os.environ.get("LSPINSTALL_CONFIG"):
        return Path(env_path)
    return config_dir() / CONFIG_FILENAME


def _apply_env_overrides(data: dict[str, Any]) -> None:
    """Overlay LSPINSTALL_* environment variables onto the parsed TOML data."""
    if root := os.environ.get("LSPINSTALL_INSTALL_ROOT"):
        data["install_root"] = root
    if max_concurrent := os.environ.get("LSPINSTALL_MAX_CONCURRENT"):
        try:
            data.setdefault("queue", {})["max_concurrent"] = int(max_concurrent)
        except ValueError as exc:
            raise ConfigError(
                f"LSPINSTALL_MAX_CONCURRENT must be an integer, got {max_concurrent!r}"
            ) from exc
    if level := os.environ.get("LSPINSTALL_LOG_LEVEL"):
        data.setdefault("logging", {})["level"] = level


def _validate(data: dict[str, Any], source: str) -> LspInstallConfig:
    _apply_env_overrides(data)
    try:
        return LspInstallConfig.model_validate(data)
    except Exception as exc:
        raise ConfigError(f"Invalid config at {source}: {exc}") from exc


def load_config(path: Path | None = None) -> LspInstallConfig:
    """
    Load LspInstallConfig from a TOML file, overlaid with environment variables.

    Priority (highest to lowest):
      1. Environment variables (LSPINSTALL_*)
      2. Config file (~/.config/lspinstall/config.toml)
    """
    import tomllib

    cfg_path = path or _config_file_path()

    if not cfg_path.exists():
        raise ConfigNotFoundError(f"Config file not found: {cfg_path}")

    try:
        with open(cfg_path, "rb") as f:
            data = tomllib.load(f)
    except Exception as exc:
        raise ConfigError(f"Cannot read config file {cfg_path}: {exc}") from exc

    return _validate(data, str(cfg_path))


def load_config_or_default(path: Path | None = None) -> LspInstallConfig:
    """Like load_config(), but a missing file yields the defaults (plus env overrides)."""
    try:
        return load_config(path)
    except ConfigNotFoundError:
        return _validate({}, "<defaults>")


def save_config(config_data: dict[str, Any], path: Path | None = None) -> Path:
    """Write config dict to a TOML file atomically."""
    import tomli_w

    cfg_path = path or _config_file_path()
    cfg_path.parent.mkdir(parents=True, exist_ok=True)

    tmp_path = cfg_path.with_suffix(".tmp")
    try:
        with open(tmp_path, "wb") as f:
            tomli_w.dump(config_data, f)
        tmp_path.rename(cfg_path)
    except Exception as exc:
        tmp_path.unlink(missing_ok=True)
        raise ConfigError(f"Cannot write config to {cfg_path}: {exc}") from exc

    return cfg_path
