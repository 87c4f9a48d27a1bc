"""
Status window — wires the server records, the install queue and the view together.

Public operations: open(), install_server(server), uninstall_server(server).
Every state change goes through mutate_state(); the display re-renders after
each one.

There is at most one window per process. A StatusWindowOwner owns it; nothing
else keeps module-level state.
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import Callable, Iterable
from functools import partial
from typing import TYPE_CHECKING

import structlog

from lspinstall.core.constants import DEFAULT_MAX_CONCURRENT, DEFAULT_WINDOW_WIDTH, WINDOW_TITLE
from lspinstall.core.exceptions import ServerNotFoundError
from lspinstall.servers import Server
from lspinstall.servers.installers.process import StdioSink
from lspinstall.ui.display import DisplayHandle, DisplayOptions, EffectEvent, create_view
from lspinstall.ui.queue import InstallQueue
from lspinstall.ui.state import StatusState, create_server_state
from lspinstall.ui.status_view import (
    EXPAND_SERVER,
    HIGHLIGHT_GROUPS,
    INSTALL_SERVER,
    UNINSTALL_SERVER,
    build_status_view,
)

if TYPE_CHECKING:
    from lspinstall.ui.app import StatusApp

logger = structlog.get_logger()

Clock = Callable[[], float]


class StatusWindow:
    def __init__(
        self,
        servers: Iterable[Server],
        *,
        max_concurrent: int = DEFAULT_MAX_CONCURRENT,
        width: int = DEFAULT_WINDOW_WIDTH,
        clock: Clock = time.time,
    ) -> None:
        self._servers = {server.name: server for server in servers}
        self._clock = clock
        self._width = width
        self._background: set[asyncio.Task[None]] = set()

        self.display: DisplayHandle[StatusState] = create_view(WINDOW_TITLE)
        self.display.view(lambda state: build_status_view(state, now=int(self._clock())))
        self.mutate_state, self.get_state = self.display.init(
            StatusState(servers={name: create_server_state(s) for name, s in self._servers.items()})
        )
        self.queue: InstallQueue[Server] = InstallQueue(
            self._start_install,
            max_concurrent=max_concurrent,
            key=lambda server: server.name,
        )

    # ------------------------------------------------------------------
    # Public operations
    # ------------------------------------------------------------------

    def open(self) -> StatusApp:
        return self.display.open(
            DisplayOptions(
                width=self._width,
                highlight_groups=HIGHLIGHT_GROUPS,
                effects={
                    EXPAND_SERVER: self._on_expand_server,
                    INSTALL_SERVER: self._on_install_server,
                    UNINSTALL_SERVER: self._on_uninstall_server,
                },
            )
        )

    def install_server(self, server: Server) -> None:
        logger.debug("install_requested", server=server.name)
        if self._is_busy(server.name):
            logger.debug("installer_already_active", server=server.name)
            return
        self._servers.setdefault(server.name, server)

        def reset(state: StatusState) -> None:
            record = create_server_state(server)
            record.installer.is_queued = True
            state.servers[server.name] = record

        self.mutate_state(reset)
        self.queue.enqueue(server)

    def uninstall_server(self, server: Server) -> None:
        logger.debug("uninstall_requested", server=server.name)
        if self._is_busy(server.name):
            logger.debug("installer_already_active", server=server.name)
            return
        self._servers.setdefault(server.name, server)

        try:
            result = server.uninstall()
            ok, error = result.ok, result.error
        except Exception as exc:  # noqa: BLE001
            logger.exception("uninstall_crashed", server=server.name)
            ok, error = False, str(exc) or exc.__class__.__name__
        if not ok and not error:
            error = "Uninstall failed"

        def record_result(state: StatusState) -> None:
            record = create_server_state(server)
            if ok:
                record.is_installed = False
            record.uninstaller.has_run = True
            record.uninstaller.error = error
            state.servers[server.name] = record

        self.mutate_state(record_result)

    def get_server(self, name: str) -> Server:
        server = self._servers.get(name)
        if server is None:
            raise ServerNotFoundError(name)
        return server

    async def wait_idle(self) -> None:
        """Wait for queued installs and background metadata lookups to finish."""
        await self.queue.join()
        while self._background:
            await asyncio.gather(*list(self._background))

    # ------------------------------------------------------------------
    # Install lifecycle
    # ------------------------------------------------------------------

    def _is_busy(self, name: str) -> bool:
        record = self.get_state().servers.get(name)
        return record is not None and record.is_busy

    def _append_output(self, name: str, line: str) -> None:
        def append(state: StatusState) -> None:
            state.servers[name].installer.tailed_output.append(line)

        self.mutate_state(append)

    async def _start_install(self, server: Server) -> None:
        name = server.name

        def mark_running(state: StatusState) -> None:
            state.servers[name].installer.is_queued = False
            state.servers[name].installer.is_running = True

        self.mutate_state(mark_running)

        sink = StdioSink(
            stdout=partial(self._append_output, name),
            stderr=partial(self._append_output, name),
        )
        try:
            success = await server.install_attached(sink)
        except Exception as exc:  # noqa: BLE001
            logger.exception("install_attached_crashed", server=name)
            self._append_output(name, f"Installation failed unexpectedly: {exc}")
            success = False

        def complete(state: StatusState) -> None:
            record = state.servers[name]
            if success:
                record.installer.tailed_output = []
            record.is_installed = success
            record.is_expanded = True
            record.metadata.creation_time = int(self._clock())
            record.installer.is_running = False
            record.installer.has_run = True

        self.mutate_state(complete)
        logger.info("install_finished", server=name, success=success)

    # ------------------------------------------------------------------
    # Effects
    # ------------------------------------------------------------------

    def _lookup(self, event: EffectEvent) -> Server | None:
        name = event.payload[0] if event.payload else ""
        server = self._servers.get(name)
        if server is None:
            logger.warning("effect_unknown_server", server=name)
        return server

    def _on_expand_server(self, event: EffectEvent) -> None:
        server = self._lookup(event)
        if server is None:
            return
        name = server.name
        expanding = not self.get_state().servers[name].is_expanded

        def toggle(state: StatusState) -> None:
            record = state.servers[name]
            if expanding:
                creation_time = server.install_time()
                if creation_time is not None:
                    record.metadata.creation_time = creation_time
            record.is_expanded = expanding

        self.mutate_state(toggle)
        if expanding:
            self._spawn(self._load_installed_packages(server))

    async def _load_installed_packages(self, server: Server) -> None:
        packages = await server.get_installed_packages()

        def store(state: StatusState) -> None:
            state.servers[server.name].metadata.installed_packages = packages

        self.mutate_state(store)

    def _spawn(self, coro) -> None:
        task = asyncio.get_running_loop().create_task(coro)
        self._background.add(task)
        task.add_done_callback(self._background.discard)

    def _on_install_server(self, event: EffectEvent) -> None:
        server = self._lookup(event)
        if server is not None:
            self.install_server(server)

    def _on_uninstall_server(self, event: EffectEvent) -> None:
        server = self._lookup(event)
        if server is not None:
            self.uninstall_server(server)


# ---------------------------------------------------------------------------
# Owned singleton
# ---------------------------------------------------------------------------

_WindowFactory = Callable[[], StatusWindow]


class StatusWindowOwner:
    """Lazily creates the single StatusWindow and hands out the same one afterwards."""

    def __init__(self, factory: _WindowFactory) -> None:
        self._factory = factory
        self._window: StatusWindow | None = None

    def get(self) -> StatusWindow:
        if self._window is None:
            self._window = self._factory()
        return self._window

