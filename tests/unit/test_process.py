"""Unit tests for subprocess output streaming."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

from lspinstall.core.exceptions import InstallerError
from lspinstall.servers.installers.process import StdioSink, spawn


class _Collector:
    def __init__(self) -> None:
        self.stdout: list[str] = []
        self.stderr: list[str] = []

    def sink(self) -> StdioSink:
        return StdioSink(stdout=self.stdout.append, stderr=self.stderr.append)


SCRIPT = "import sys; print('one'); print('two'); print('oops', file=sys.stderr)"


class TestSpawn:
    @pytest.mark.asyncio()
    async def test_streams_lines(self, tmp_path: Path) -> None:
        out = _Collector()
        await spawn([sys.executable, "-c", SCRIPT], cwd=tmp_path, sink=out.sink())
        assert out.stdout == ["one", "two"]
        assert out.stderr == ["oops"]

    @pytest.mark.asyncio()
    async def test_runs_in_cwd(self, tmp_path: Path) -> None:
        out = _Collector()
        await spawn([sys.executable, "-c", "import os; print(os.getcwd())"], cwd=tmp_path, sink=out.sink())
        assert Path(out.stdout[0]).resolve() == tmp_path.resolve()

    @pytest.mark.asyncio()
    async def test_env_is_merged(self, tmp_path: Path) -> None:
        out = _Collector()
        await spawn(
            [sys.executable, "-c", "import os; print(os.environ['LSPINSTALL_TEST'])"],
            cwd=tmp_path,
            sink=out.sink(),
            env={"LSPINSTALL_TEST": "yes"},
        )
        assert out.stdout == ["yes"]

    @pytest.mark.asyncio()
    async def test_non_zero_exit(self, tmp_path: Path) -> None:
        out = _Collector()
        with pytest.raises(InstallerError, match="exited with code 3"):
            await spawn(
                [sys.executable, "-c", "import sys; print('partial'); sys.exit(3)"],
                cwd=tmp_path,
                sink=out.sink(),
            )
        assert out.stdout == ["partial"]

    @pytest.mark.asyncio()
    async def test_missing_executable(self, tmp_path: Path) -> None:
        with pytest.raises(InstallerError, match="executable not found"):
            await spawn(["lspinstall-no-such-binary"], cwd=tmp_path, sink=_Collector().sink())
