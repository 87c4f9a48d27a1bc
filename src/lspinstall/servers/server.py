"""
Server: one installable language server.

This is the adapter the status window drives. Every fallible step reports
failure as data: install_attached() resolves to a bool, uninstall() returns an
UninstallResult, and the probes return None/False instead of raising.
"""

from __future__ import annotations

import asyncio
import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import structlog

from lspinstall.core.exceptions import InstallerError
from lspinstall.servers.installers import Installer, PackageList
from lspinstall.servers.installers.process import StdioSink

logger = structlog.get_logger()

INSTALL_RECEIPT = ".lspinstall-receipt"


@dataclass(frozen=True)
class UninstallResult:
    ok: bool
    error: str | None = None

    @classmethod
    def success(cls) -> UninstallResult:
        return cls(ok=True)

    @classmethod
    def failure(cls, error: str) -> UninstallResult:
        return cls(ok=False, error=error)


@dataclass
class Server:
    name: str
    root_dir: Path
    installer: Installer
    homepage: str | None = None
    default_options: dict[str, Any] = field(default_factory=dict)

    def is_installed(self) -> bool:
        """A server counts as installed once its installer finished and left a receipt."""
        return (self.root_dir / INSTALL_RECEIPT).is_file()

    async def install_attached(self, sink: StdioSink) -> bool:
        """Run the installer, streaming its output into *sink*. Never raises."""
        log = logger.bind(server=self.name)
        log.info("install_started", root_dir=str(self.root_dir))
        try:
            await self.installer(self.root_dir, sink)
            (self.root_dir / INSTALL_RECEIPT).write_text(self.name, encoding="utf-8")
        except InstallerError as exc:
            log.warning("install_failed", error=str(exc))
            sink.stderr(f"Installation failed: {exc}")
            return False
        except Exception as exc:  # noqa: BLE001
            log.exception("install_crashed")
            sink.stderr(f"Installation failed unexpectedly: {exc}")
            return False
        log.info("install_succeeded")
        return True

    def uninstall(self) -> UninstallResult:
        if not self.root_dir.exists():
            return UninstallResult.success()
        try:
            shutil.rmtree(self.root_dir)
        except OSError as exc:
            logger.warning("uninstall_failed", server=self.name, error=str(exc))
            return UninstallResult.failure(str(exc))
        logger.info("uninstall_succeeded", server=self.name)
        return UninstallResult.success()

    def install_time(self) -> int | None:
        """mtime of the root directory in epoch seconds, or None if it can't be stat'ed."""
        try:
            return int(self.root_dir.stat().st_mtime)
        except OSError:
            return None

    async def get_installed_packages(self) -> PackageList | None:
        try:
            return await asyncio.to_thread(self.installer.installed_packages, self.root_dir)
        except OSError as exc:
            logger.debug("installed_packages_unavailable", server=self.name, error=str(exc))
            return None
