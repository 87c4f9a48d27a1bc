"""lspinstall exception hierarchy."""

from __future__ import annotations


class LspInstallError(Exception):
    """Base exception for all lspinstall errors."""


class ConfigError(LspInstallError):
    """Raised when the configuration is invalid or cannot be read."""


class ConfigNotFoundError(ConfigError):
    """Raised when the configuration file does not exist."""


class ServerNotFoundError(LspInstallError):
    """Raised when a server name is not in the registry."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Unknown server: {name!r}")
        self.name = name


class InstallerError(LspInstallError):
    """Raised when an installer step fails (non-zero exit, missing tool)."""
