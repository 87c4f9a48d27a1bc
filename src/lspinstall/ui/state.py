"""
UI state types — pure Python dataclasses, no Textual imports.

These can be constructed and tested without a running Textual app.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Protocol


class ServerLike(Protocol):
    """The parts of a Server that the status window records."""

    name: str
    homepage: str | None

    @property
    def root_dir(self) -> object: ...

    def is_installed(self) -> bool: ...


@dataclass
class ServerMetadata:
    install_dir: str
    creation_time: int | None = None
    installed_packages: list[tuple[str, str]] | None = None
    homepage: str | None = None


@dataclass
class InstallerState:
    is_queued: bool = False
    is_running: bool = False
    has_run: bool = False
    tailed_output: list[str] = field(default_factory=list)


@dataclass
class UninstallerState:
    has_run: bool = False
    error: str | None = None


@dataclass
class ServerRecord:
    """Per-server UI state. Replaced wholesale at the start of every install/uninstall."""

    name: str
    is_installed: bool
    metadata: ServerMetadata
    is_expanded: bool = False
    installer: InstallerState = field(default_factory=InstallerState)
    uninstaller: UninstallerState = field(default_factory=UninstallerState)

    @property
    def is_busy(self) -> bool:
        return self.installer.is_queued or self.installer.is_running


@dataclass
class StatusState:
    servers: dict[str, ServerRecord] = field(default_factory=dict)


def create_server_state(server: ServerLike) -> ServerRecord:
    """Fresh record for *server*; is_installed is probed from the server itself."""
    return ServerRecord(
        name=server.name,
        is_installed=server.is_installed(),
        metadata=ServerMetadata(
            install_dir=str(server.root_dir),
            homepage=server.homepage,
        ),
    )


# ---------------------------------------------------------------------------
# Lifecycle classification
# ---------------------------------------------------------------------------


class Category(Enum):
    INSTALLING = "installing"
    QUEUED = "queued"
    UNINSTALL_FAILED = "uninstall_failed"
    SESSION_UNINSTALLED = "session_uninstalled"
    SESSION_INSTALLED = "session_installed"
    INSTALLED = "installed"
    INSTALL_FAILED = "install_failed"
    UNINSTALLED = "uninstalled"


def classify(record: ServerRecord) -> Category:
    """Map a record to exactly one Category. Order of the checks is significant."""
    if record.installer.is_running:
        return Category.INSTALLING
    if record.installer.is_queued:
        return Category.QUEUED
    if record.uninstaller.has_run:
        if record.uninstaller.error:
            return Category.UNINSTALL_FAILED
        return Category.SESSION_UNINSTALLED
    if record.is_installed:
        if record.installer.has_run:
            return Category.SESSION_INSTALLED
        return Category.INSTALLED
    if record.installer.has_run:
        return Category.INSTALL_FAILED
    return Category.UNINSTALLED


@dataclass(frozen=True)
class GroupSpec:
    key: str
    title: str
    categories: tuple[Category, ...]
    hide_when_empty: bool = False


SERVER_GROUPS: tuple[GroupSpec, ...] = (
    GroupSpec(
        key="installed",
        title="Installed servers",
        categories=(Category.SESSION_INSTALLED, Category.INSTALLED),
    ),
    GroupSpec(
        key="pending",
        title="Pending servers",
        categories=(
            Category.INSTALLING,
            Category.QUEUED,
            Category.INSTALL_FAILED,
            Category.UNINSTALL_FAILED,
        ),
        hide_when_empty=True,
    ),
    GroupSpec(
        key="available",
        title="Available servers",
        categories=(Category.SESSION_UNINSTALLED, Category.UNINSTALLED),
    ),
)


def group_servers(servers: Mapping[str, ServerRecord] | Iterable[ServerRecord]) -> dict[Category, list[ServerRecord]]:
    """Bucket records by category. Every category is present; buckets are sorted by name."""
    records = servers.values() if isinstance(servers, Mapping) else servers
    grouped: dict[Category, list[ServerRecord]] = {category: [] for category in Category}
    for record in sorted(records, key=lambda r: r.name):
        grouped[classify(record)].append(record)
    return grouped


__all__ = [
    "Category",
    "GroupSpec",
    "InstallerState",
    "SERVER_GROUPS",
    "ServerLike",
    "ServerMetadata",
    "ServerRecord",
    "StatusState",
    "UninstallerState",
    "classify",
    "create_server_state",
    "group_servers",
]
