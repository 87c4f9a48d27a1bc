"""
Status view: pure function from a StatusState snapshot to a view tree.

Layout::

    lspinstall                       (centered header + link)
    https://...

    Installed servers (N)
      ◍ name                         enter: expand, X: uninstall
        Installation date  today     (only when expanded)
        ...
    Pending servers (N)              (hidden when empty)
      ◍ name (running) <last line>
    Available servers (N)
      ◍ name (just uninstalled)      i: install

Nothing here reads the clock or the filesystem; *now* is passed in so the
same snapshot always produces the same tree.
"""

from __future__ import annotations

from collections.abc import Sequence

from lspinstall.core.constants import PROJECT_NAME, PROJECT_URL
from lspinstall.ui import tree
from lspinstall.ui.state import (
    SERVER_GROUPS,
    Category,
    GroupSpec,
    ServerRecord,
    StatusState,
    group_servers,
)
from lspinstall.ui.tree import ViewNode

EXPAND_SERVER = "EXPAND_SERVER"
INSTALL_SERVER = "INSTALL_SERVER"
UNINSTALL_SERVER = "UNINSTALL_SERVER"

LIST_ICON = "◍"
EXPANDED_ICON = "⏣"

# Style name → rich style definition, handed to the display runtime.
HIGHLIGHT_GROUPS: dict[str, str] = {
    "Header": "bold #ebcb8b",
    "ServerExpanded": "italic",
    "Link": "#888888",
    "Heading": "bold",
    "Green": "#a3be8c",
    "Orange": "#ebcb8b",
    "Gray": "#888888",
    "Error": "#f44747",
    "Comment": "dim",
}


class Seconds:
    DAY = 86400  # 60 * 60 * 24
    WEEK = 604800  # 60 * 60 * 24 * 7
    MONTH = 2419200  # 60 * 60 * 24 * 7 * 4
    YEAR = 29030400  # 60 * 60 * 24 * 7 * 4 * 12


def get_relative_install_time(time: int | None, now: int) -> str:
    if time is None:
        return "unknown"
    delta = max(now - time, 0)
    if delta < Seconds.DAY:
        return "today"
    if delta < Seconds.WEEK:
        return "this week"
    if delta < Seconds.MONTH:
        return "this month"
    if delta < Seconds.MONTH * 2:
        return "last month"
    if delta < Seconds.YEAR:
        return f"{int(delta / Seconds.MONTH + 0.5)} months ago"
    return "more than a year ago"


def get_last_non_empty_line(output: Sequence[str]) -> str:
    for line in reversed(output):
        if line:
            return line
    return ""


# ---------------------------------------------------------------------------
# Components
# ---------------------------------------------------------------------------


def header() -> ViewNode:
    return tree.centered(
        [
            tree.hl_text(
                [
                    [(PROJECT_NAME, "Header")],
                    [(PROJECT_URL, "Link")],
                ]
            )
        ]
    )


def server_group_heading(title: str, count: int) -> ViewNode:
    return tree.hl_text([[(title, "Heading"), (f" ({count})", "Comment")]])


def installed_server_metadata(server: ServerRecord, now: int) -> ViewNode:
    meta = server.metadata
    installed_packages = None
    if meta.installed_packages:
        installed_packages = ", ".join(f"{name}@{version}" for name, version in meta.installed_packages)

    return tree.table(
        [
            (("Installation date", "Gray"), (get_relative_install_time(meta.creation_time, now), "")),
            (("Installed packages", "Gray"), (installed_packages, "")) if installed_packages else None,
            (("Install directory", "Gray"), (meta.install_dir, "")),
            (("Homepage", "Gray"), (meta.homepage, "")) if meta.homepage else None,
        ]
    )


def installed_servers(servers: Sequence[ServerRecord], now: int) -> ViewNode:
    rows: list[ViewNode] = []
    for server in servers:
        rows.append(
            tree.node(
                [
                    tree.hl_text(
                        [
                            [
                                (EXPANDED_ICON if server.is_expanded else LIST_ICON, "Green"),
                                (" " + server.name, "ServerExpanded" if server.is_expanded else ""),
                            ]
                        ]
                    ),
                    tree.keybind("enter", EXPAND_SERVER, [server.name]),
                    tree.keybind("X", UNINSTALL_SERVER, [server.name]),
                    tree.when(
                        server.is_expanded,
                        tree.indent([installed_server_metadata(server, now)]),
                    ),
                ]
            )
        )
    return tree.node(rows)


def tailed_output(server: ServerRecord) -> ViewNode:
    return tree.hl_text([[(line, "Gray")] for line in server.installer.tailed_output])


def pending_servers(servers: Sequence[ServerRecord], now: int) -> ViewNode:
    rows: list[ViewNode] = []
    for server in servers:
        has_failed = server.installer.has_run or server.uninstaller.has_run
        if has_failed:
            note = "(failed)"
        elif server.installer.is_queued:
            note = "(queued)"
        else:
            note = "(running)"
        last_line = "" if has_failed else " " + get_last_non_empty_line(server.installer.tailed_output)
        rows.append(
            tree.node(
                [
                    tree.hl_text(
                        [
                            [
                                (LIST_ICON, "Error" if has_failed else "Orange"),
                                (" " + server.name, "" if server.installer.is_running else "Gray"),
                                (" " + note, "Comment"),
                                (last_line, "Comment"),
                            ]
                        ]
                    ),
                    tree.when(has_failed, tree.keybind("i", INSTALL_SERVER, [server.name])),
                    tree.when(has_failed, tree.indent([tree.indent([tailed_output(server)])])),
                    tree.when(
                        server.uninstaller.error,
                        tree.indent([tree.text(server.uninstaller.error or "", "Comment")]),
                    ),
                ]
            )
        )
    return tree.node(rows)


def uninstalled_servers(servers: Sequence[ServerRecord], now: int) -> ViewNode:
    rows: list[ViewNode] = []
    for server in servers:
        rows.append(
            tree.node(
                [
                    tree.hl_text(
                        [
                            [
                                (LIST_ICON, "Gray"),
                                (" " + server.name, "Comment"),
                                (" (just uninstalled)" if server.uninstaller.has_run else "", "Comment"),
                            ]
                        ]
                    ),
                    tree.keybind("i", INSTALL_SERVER, [server.name]),
                ]
            )
        )
    return tree.node(rows)


_RENDERERS = {
    "installed": installed_servers,
    "pending": pending_servers,
    "available": uninstalled_servers,
}


def server_group(
    spec: GroupSpec,
    grouped: dict[Category, list[ServerRecord]],
    now: int,
) -> ViewNode:
    chunks = [grouped[category] for category in spec.categories]
    total = sum(len(chunk) for chunk in chunks)
    renderer = _RENDERERS[spec.key]
    return tree.when(
        total > 0 or not spec.hide_when_empty,
        tree.node(
            [
                tree.EmptyLine(),
                server_group_heading(spec.title, total),
                tree.indent([renderer(chunk, now) for chunk in chunks]),
            ]
        ),
    )


def build_status_view(state: StatusState, now: int) -> ViewNode:
    grouped = group_servers(state.servers)
    return tree.node(
        [
            header(),
            tree.node([server_group(spec, grouped, now) for spec in SERVER_GROUPS]),
        ]
    )
