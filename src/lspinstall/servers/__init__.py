"""
Server registry.

Usage::

    registry = ServerRegistry(config.install_root_path)
    server = registry.get_server("pyright")
    for server in registry.get_available_servers():
        print(server.name, server.is_installed())
"""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path

from lspinstall.core.exceptions import ServerNotFoundError
from lspinstall.servers.definitions import BUILTIN_SERVERS, ServerFactory
from lspinstall.servers.server import Server, UninstallResult


class ServerRegistry:
    """Lazily builds Server objects rooted at ``<install_root>/<name>``."""

    def __init__(
        self,
        install_root: Path,
        factories: Mapping[str, ServerFactory] | None = None,
    ) -> None:
        self._install_root = install_root
        self._factories = dict(factories if factories is not None else BUILTIN_SERVERS)
        self._cache: dict[str, Server] = {}

    @property
    def install_root(self) -> Path:
        return self._install_root

    def names(self) -> list[str]:
        return sorted(self._factories)

    def get_server(self, name: str) -> Server:
        if name not in self._factories:
            raise ServerNotFoundError(name)
        if name not in self._cache:
            self._cache[name] = self._factories[name](name, self._install_root / name)
        return self._cache[name]

    def get_available_servers(self) -> list[Server]:
        return [self.get_server(name) for name in self.names()]


__all__ = ["Server", "ServerRegistry", "UninstallResult"]
