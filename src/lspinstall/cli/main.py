"""lspinstall command-line entry point."""

from __future__ import annotations

import sys
from pathlib import Path

import click
from rich.console import Console

from lspinstall import __version__
from lspinstall.cli._servers import install_cmd, list_cmd, ui_cmd, uninstall_cmd
from lspinstall.core.config import LspInstallConfig, load_config, load_config_or_default
from lspinstall.core.constants import ExitCode
from lspinstall.core.exceptions import ConfigError
from lspinstall.core.logging import configure_logging

console = Console()


@click.group()
@click.version_option(__version__, prog_name="lspinstall")
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Path to config.toml (default: ~/.config/lspinstall/config.toml)",
)
@click.pass_context
def cli(ctx: click.Context, config_path: Path | None) -> None:
    """Install, uninstall and inspect language servers."""
    try:
        config: LspInstallConfig = (
            load_config(config_path) if config_path else load_config_or_default()
        )
    except ConfigError as exc:
        console.print(f"[red]Config error:[/red] {exc}")
        sys.exit(ExitCode.CONFIG_ERROR)
    configure_logging(config)
    ctx.obj = config


cli.add_command(ui_cmd)
cli.add_command(install_cmd)
cli.add_command(uninstall_cmd)
cli.add_command(list_cmd)
