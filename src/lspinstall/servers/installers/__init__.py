"""
Installers: async callables that populate a server's root directory.

An installer receives the server's root directory and a StdioSink, and raises
InstallerError when a step fails. Package listing is a separate, best-effort
read of what an installer left on disk.
"""

from __future__ import annotations

from collections.abc import Awaitable
from pathlib import Path
from typing import Protocol

from lspinstall.servers.installers.process import StdioSink

PackageList = list[tuple[str, str]]


class Installer(Protocol):
    def __call__(self, root_dir: Path, sink: StdioSink) -> Awaitable[None]: ...

    def installed_packages(self, root_dir: Path) -> PackageList | None: ...


__all__ = ["Installer", "PackageList", "StdioSink"]
