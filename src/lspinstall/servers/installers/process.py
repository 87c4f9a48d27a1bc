"""Subprocess spawning with line-by-line output streaming."""

from __future__ import annotations

import asyncio
import os
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from pathlib import Path

import structlog

from lspinstall.core.exceptions import InstallerError

logger = structlog.get_logger()

LineCallback = Callable[[str], None]


@dataclass(frozen=True)
class StdioSink:
    """Receives an installer's output, one decoded line at a time."""

    stdout: LineCallback
    stderr: LineCallback


async def _pump(stream: asyncio.StreamReader | None, callback: LineCallback) -> None:
    if stream is None:
        return
    while True:
        raw = await stream.readline()
        if not raw:
            return
        callback(raw.decode("utf-8", errors="replace").rstrip("\r\n"))


async def spawn(
    cmd: Sequence[str],
    *,
    cwd: Path,
    sink: StdioSink,
    env: dict[str, str] | None = None,
) -> None:
    """Run *cmd* in *cwd*, streaming output into *sink*.

    Raises InstallerError if the executable is missing or exits non-zero.
    """
    logger.debug("spawn", cmd=list(cmd), cwd=str(cwd))
    try:
        proc = await asyncio.create_subprocess_exec(
            *cmd,
            cwd=str(cwd),
            stdin=asyncio.subprocess.DEVNULL,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            env={**os.environ, **env} if env else None,
        )
    except FileNotFoundError as exc:
        raise InstallerError(f"{cmd[0]}: executable not found") from exc

    await asyncio.gather(_pump(proc.stdout, sink.stdout), _pump(proc.stderr, sink.stderr))
    code = await proc.wait()
    if code != 0:
        raise InstallerError(f"{cmd[0]} exited with code {code}")
