"""Unit tests for lspinstall.ui.state — records, classification, grouping."""

from __future__ import annotations

from lspinstall.ui.state import (
    SERVER_GROUPS,
    Category,
    ServerMetadata,
    ServerRecord,
    classify,
    create_server_state,
    group_servers,
)
from tests.fakes import FakeServer


def _record(name: str = "pyright", **overrides) -> ServerRecord:
    record = ServerRecord(name=name, is_installed=False, metadata=ServerMetadata(install_dir=f"/tmp/{name}"))
    for key, value in overrides.items():
        target, _, attr = key.partition("__")
        if attr:
            setattr(getattr(record, target), attr, value)
        else:
            setattr(record, key, value)
    return record


class TestCreateServerState:
    def test_default_shape(self) -> None:
        record = create_server_state(FakeServer("vimls"))
        assert record.name == "vimls"
        assert record.is_expanded is False
        assert record.installer.is_queued is False
        assert record.installer.is_running is False
        assert record.installer.has_run is False
        assert record.installer.tailed_output == []
        assert record.uninstaller.has_run is False
        assert record.uninstaller.error is None

    def test_is_installed_probed_from_server(self) -> None:
        assert create_server_state(FakeServer("vimls", installed=True)).is_installed is True
        assert create_server_state(FakeServer("vimls", installed=False)).is_installed is False

    def test_metadata_from_server(self) -> None:
        record = create_server_state(FakeServer("bashls"))
        assert record.metadata.install_dir.endswith("bashls")
        assert record.metadata.homepage == "https://example.com/bashls"
        assert record.metadata.creation_time is None
        assert record.metadata.installed_packages is None

    def test_fresh_records_do_not_share_output(self) -> None:
        server = FakeServer("vimls")
        a = create_server_state(server)
        b = create_server_state(server)
        a.installer.tailed_output.append("line")
        assert b.installer.tailed_output == []


class TestClassify:
    def test_uninstalled(self) -> None:
        assert classify(_record()) is Category.UNINSTALLED

    def test_installed(self) -> None:
        assert classify(_record(is_installed=True)) is Category.INSTALLED

    def test_session_installed(self) -> None:
        assert classify(_record(is_installed=True, installer__has_run=True)) is Category.SESSION_INSTALLED

    def test_install_failed(self) -> None:
        assert classify(_record(installer__has_run=True)) is Category.INSTALL_FAILED

    def test_running_beats_everything(self) -> None:
        record = _record(
            is_installed=True,
            installer__is_running=True,
            installer__has_run=True,
            uninstaller__has_run=True,
            uninstaller__error="boom",
        )
        assert classify(record) is Category.INSTALLING

    def test_queued_beats_uninstall_outcome(self) -> None:
        record = _record(installer__is_queued=True, uninstaller__has_run=True)
        assert classify(record) is Category.QUEUED

    def test_uninstall_outcome_beats_installed(self) -> None:
        assert classify(_record(is_installed=True, uninstaller__has_run=True)) is Category.SESSION_UNINSTALLED

    def test_uninstall_failed(self) -> None:
        record = _record(is_installed=True, uninstaller__has_run=True, uninstaller__error="EACCES")
        assert classify(record) is Category.UNINSTALL_FAILED

    def test_empty_error_is_not_a_failure(self) -> None:
        record = _record(uninstaller__has_run=True, uninstaller__error="")
        assert classify(record) is Category.SESSION_UNINSTALLED


class TestGroupServers:
    def test_every_category_present(self) -> None:
        grouped = group_servers({})
        assert set(grouped) == set(Category)
        assert all(bucket == [] for bucket in grouped.values())

    def test_buckets_sorted_by_name(self) -> None:
        servers = {name: _record(name) for name in ("vimls", "bashls", "pyright")}
        grouped = group_servers(servers)
        assert [r.name for r in grouped[Category.UNINSTALLED]] == ["bashls", "pyright", "vimls"]

    def test_accepts_iterable(self) -> None:
        grouped = group_servers([_record("a", is_installed=True), _record("b")])
        assert [r.name for r in grouped[Category.INSTALLED]] == ["a"]
        assert [r.name for r in grouped[Category.UNINSTALLED]] == ["b"]

    def test_groups_cover_all_categories_once(self) -> None:
        seen = [category for spec in SERVER_GROUPS for category in spec.categories]
        assert sorted(seen, key=lambda c: c.value) == sorted(Category, key=lambda c: c.value)

    def test_group_order_and_visibility(self) -> None:
        assert [spec.title for spec in SERVER_GROUPS] == [
            "Installed servers",
            "Pending servers",
            "Available servers",
        ]
        assert [spec.hide_when_empty for spec in SERVER_GROUPS] == [False, True, False]
