"""pip installer: installs packages into a server-local virtualenv."""

from __future__ import annotations

import re
import sys
from collections.abc import Sequence
from pathlib import Path

from lspinstall.servers.installers import PackageList
from lspinstall.servers.installers.process import StdioSink, spawn

VENV_DIR = "venv"

_DIST_INFO = re.compile(r"^(?P<name>.+?)-(?P<version>[^-]+)\.dist-info$")


def _bin_dir(root_dir: Path) -> Path:
    return root_dir / VENV_DIR / ("Scripts" if sys.platform == "win32" else "bin")


def executable(root_dir: Path, name: str) -> str:
    """Path of a console script installed in the server's virtualenv."""
    return str(_bin_dir(root_dir) / name)


def _normalize(name: str) -> str:
    return re.sub(r"[-_.]+", "_", name).lower()


class PipPackages:
    """Creates ``<root>/venv`` and pip-installs *packages* into it."""

    def __init__(self, packages: Sequence[str]) -> None:
        if not packages:
            raise ValueError("PipPackages needs at least one package")
        self.packages = list(packages)

    async def __call__(self, root_dir: Path, sink: StdioSink) -> None:
        root_dir.mkdir(parents=True, exist_ok=True)
        await spawn([sys.executable, "-m", "venv", VENV_DIR], cwd=root_dir, sink=sink)
        python = executable(root_dir, "python")
        await spawn(
            [python, "-m", "pip", "install", "--upgrade", *self.packages],
            cwd=root_dir,
            sink=sink,
        )

    def installed_packages(self, root_dir: Path) -> PackageList | None:
        wanted = {_normalize(p): p for p in self.packages}
        result: PackageList = []
        for dist_info in sorted((root_dir / VENV_DIR).glob("lib*/**/*.dist-info")):
            match = _DIST_INFO.match(dist_info.name)
            if match and _normalize(match["name"]) in wanted:
                result.append((wanted[_normalize(match["name"])], match["version"]))
        return result or None


def packages(names: Sequence[str]) -> PipPackages:
    return PipPackages(names)
