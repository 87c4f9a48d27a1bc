"""Built-in server definitions. Each factory takes (name, root_dir) and returns a Server."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

from lspinstall.servers.installers import npm, pip3
from lspinstall.servers.server import Server

ServerFactory = Callable[[str, Path], Server]


def bashls(name: str, root_dir: Path) -> Server:
    return Server(
        name=name,
        root_dir=root_dir,
        homepage="https://github.com/bash-lsp/bash-language-server",
        installer=npm.packages(["bash-language-server"]),
        default_options={"cmd": [npm.executable(root_dir, "bash-language-server"), "start"]},
    )


def pylsp(name: str, root_dir: Path) -> Server:
    return Server(
        name=name,
        root_dir=root_dir,
        homepage="https://github.com/python-lsp/python-lsp-server",
        installer=pip3.packages(["python-lsp-server"]),
        default_options={"cmd": [pip3.executable(root_dir, "pylsp")]},
    )


def pyright(name: str, root_dir: Path) -> Server:
    return Server(
        name=name,
        root_dir=root_dir,
        homepage="https://github.com/microsoft/pyright",
        installer=npm.packages(["pyright"]),
        default_options={"cmd": [npm.executable(root_dir, "pyright-langserver"), "--stdio"]},
    )


def stylelint_lsp(name: str, root_dir: Path) -> Server:
    return Server(
        name=name,
        root_dir=root_dir,
        installer=npm.packages(["stylelint-lsp"]),
        default_options={"cmd": [npm.executable(root_dir, "stylelint-lsp"), "--stdio"]},
    )


def vimls(name: str, root_dir: Path) -> Server:
    return Server(
        name=name,
        root_dir=root_dir,
        installer=npm.packages(["vim-language-server"]),
        default_options={"cmd": [npm.executable(root_dir, "vim-language-server"), "--stdio"]},
    )


BUILTIN_SERVERS: dict[str, ServerFactory] = {
    "bashls": bashls,
    "pylsp": pylsp,
    "pyright": pyright,
    "stylelint_lsp": stylelint_lsp,
    "vimls": vimls,
}
