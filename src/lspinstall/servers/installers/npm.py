"""npm installer: installs packages into a server-local node_modules."""

from __future__ import annotations

import json
import shutil
from collections.abc import Sequence
from pathlib import Path

import structlog

from lspinstall.core.exceptions import InstallerError
from lspinstall.servers.installers import PackageList
from lspinstall.servers.installers.process import StdioSink, spawn

logger = structlog.get_logger()


def npm_command() -> str:
    return "npm.cmd" if shutil.which("npm.cmd") else "npm"


def executable(root_dir: Path, name: str) -> str:
    """Path of an npm package binary installed under *root_dir*."""
    return str(root_dir / "node_modules" / ".bin" / name)


class NpmPackages:
    """Installs *packages* with ``npm install`` inside the server root."""

    def __init__(self, packages: Sequence[str]) -> None:
        if not packages:
            raise ValueError("NpmPackages needs at least one package")
        self.packages = list(packages)

    async def __call__(self, root_dir: Path, sink: StdioSink) -> None:
        npm = npm_command()
        if not shutil.which(npm):
            raise InstallerError("npm not found on PATH")
        root_dir.mkdir(parents=True, exist_ok=True)
        if not (root_dir / "package.json").exists():
            await spawn([npm, "init", "--yes", "--scope=lspinstall"], cwd=root_dir, sink=sink)
        await spawn([npm, "install", *self.packages], cwd=root_dir, sink=sink)

    def installed_packages(self, root_dir: Path) -> PackageList | None:
        result: PackageList = []
        for name in self.packages:
            manifest = root_dir / "node_modules" / name / "package.json"
            try:
                version = json.loads(manifest.read_text(encoding="utf-8")).get("version", "?")
            except (OSError, json.JSONDecodeError) as exc:
                logger.debug("npm_manifest_unreadable", package=name, error=str(exc))
                continue
            result.append((name, str(version)))
        return result or None


def packages(names: Sequence[str]) -> NpmPackages:
    return NpmPackages(names)
