"""lspinstall constants: filesystem layout, defaults, and limits."""

from __future__ import annotations

from enum import IntEnum

# ---------------------------------------------------------------------------
# Exit codes
# ---------------------------------------------------------------------------


class ExitCode(IntEnum):
    SUCCESS = 0
    ERROR = 1
    CONFIG_ERROR = 2


# ---------------------------------------------------------------------------
# Filesystem layout
# ---------------------------------------------------------------------------

CONFIG_DIR_NAME = "lspinstall"
CONFIG_FILENAME = "config.toml"
LOG_FILENAME = "lspinstall.log"
DEFAULT_INSTALL_ROOT = "~/.local/share/lspinstall/servers"
DEFAULT_LOG_DIR = "~/.local/state/lspinstall"

# ---------------------------------------------------------------------------
# Queue and window
# ---------------------------------------------------------------------------

DEFAULT_MAX_CONCURRENT = 2
MAX_CONCURRENT_LIMIT = 16
DEFAULT_WINDOW_WIDTH = 95

WINDOW_TITLE = "LSP servers"
PROJECT_NAME = "lspinstall"
PROJECT_URL = "https://github.com/lspinstall/lspinstall"
