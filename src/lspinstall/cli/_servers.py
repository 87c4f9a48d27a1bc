"""lspinstall ui / install / uninstall / list — server lifecycle commands."""

from __future__ import annotations

import asyncio
import sys
from collections.abc import Sequence

import click
from rich.console import Console
from rich.table import Table
from rich.text import Text

from lspinstall.core.config import LspInstallConfig
from lspinstall.core.constants import ExitCode
from lspinstall.core.exceptions import ServerNotFoundError
from lspinstall.servers import Server, ServerRegistry
from lspinstall.ui.state import Category, classify
from lspinstall.ui.status_window import StatusWindow, StatusWindowOwner

console = Console()

_CATEGORY_STYLE = {
    Category.INSTALLED: "green",
    Category.SESSION_INSTALLED: "green",
    Category.INSTALLING: "yellow",
    Category.QUEUED: "yellow",
    Category.INSTALL_FAILED: "red",
    Category.UNINSTALL_FAILED: "red",
    Category.SESSION_UNINSTALLED: "dim",
    Category.UNINSTALLED: "dim",
}


def _owner(config: LspInstallConfig) -> StatusWindowOwner:
    registry = ServerRegistry(config.install_root_path)
    return StatusWindowOwner(
        lambda: StatusWindow(
            registry.get_available_servers(),
            max_concurrent=config.queue.max_concurrent,
            width=config.ui.width,
        )
    )


def _resolve(window: StatusWindow, names: Sequence[str]) -> list[Server]:
    try:
        return [window.get_server(name) for name in names]
    except ServerNotFoundError as exc:
        console.print(f"[red]Error:[/red] {exc}")
        sys.exit(ExitCode.ERROR)


def _run_ui(window: StatusWindow, to_install: Sequence[Server]) -> None:
    async def main() -> None:
        app = window.open()
        for server in to_install:
            window.install_server(server)
        await app.run_async()

    asyncio.run(main())


def _print_status(window: StatusWindow, names: Sequence[str] | None = None) -> None:
    state = window.get_state()
    table = Table(title="Language servers", show_lines=False)
    table.add_column("Server", style="bold", no_wrap=True)
    table.add_column("Status", no_wrap=True)
    table.add_column("Install directory", overflow="fold")
    for name in sorted(names or state.servers):
        record = state.servers[name]
        category = classify(record)
        status = f"[{_CATEGORY_STYLE[category]}]{category.value}[/{_CATEGORY_STYLE[category]}]"
        table.add_row(record.name, status, record.metadata.install_dir)
    console.print(table)


@click.command("ui")
@click.pass_obj
def ui_cmd(config: LspInstallConfig) -> None:
    """Open the interactive status window."""
    _run_ui(_owner(config).get(), [])


@click.command("install")
@click.argument("names", nargs=-1, required=True)
@click.option("--headless", is_flag=True, help="Install without the status window and print a summary")
@click.pass_obj
def install_cmd(config: LspInstallConfig, names: tuple[str, ...], headless: bool) -> None:
    """Install one or more servers."""
    window = _owner(config).get()
    servers = _resolve(window, names)

    if not headless:
        _run_ui(window, servers)
        return

    async def main() -> None:
        for server in servers:
            window.install_server(server)
        await window.wait_idle()

    asyncio.run(main())

    state = window.get_state()
    _print_status(window, names)
    failed = [name for name in names if classify(state.servers[name]) is Category.INSTALL_FAILED]
    for name in failed:
        console.print(f"\n[red]{name} failed:[/red]")
        for line in state.servers[name].installer.tailed_output:
            console.print(Text(f"  {line}", style="dim"))
    if failed:
        sys.exit(ExitCode.ERROR)


@click.command("uninstall")
@click.argument("names", nargs=-1, required=True)
@click.pass_obj
def uninstall_cmd(config: LspInstallConfig, names: tuple[str, ...]) -> None:
    """Uninstall one or more servers."""
    window = _owner(config).get()
    for server in _resolve(window, names):
        window.uninstall_server(server)

    state = window.get_state()
    failed = False
    for name in names:
        uninstaller = state.servers[name].uninstaller
        if uninstaller.error:
            failed = True
            console.print(f"[red]Failed to uninstall {name}:[/red] {uninstaller.error}")
        else:
            console.print(f"[yellow]Uninstalled:[/yellow] {name}")
    if failed:
        sys.exit(ExitCode.ERROR)


@click.command("list")
@click.pass_obj
def list_cmd(config: LspInstallConfig) -> None:
    """List servers and their status."""
    _print_status(_owner(config).get())
