# SPDX-License-Identifier: LGPL-3.0-or-later
"""HiveStore over a fake hivex handle, plus the hive file checks."""
from __future__ import annotations

from pathlib import Path

import pytest

from fakes.fake_hivex import FakeHivex
from urischeme.scheme.record import IconRef, PositionalArgs
from urischeme.scheme.registrar import SchemeRegistrar
from urischeme.scheme.scope import RegistrationScope, resolve_root
from urischeme.store.base import HKCU, HKLM
from urischeme.store.hive import HiveStore
from urischeme.store.hive.encoding import _decode_reg_sz, _is_probably_regf, _open_hive_local, _reg_sz


@pytest.fixture
def hives():
    return {HKCU: FakeHivex(), HKLM: FakeHivex()}


@pytest.fixture
def store(hives):
    paths = {HKCU: "/img/NTUSER.DAT", HKLM: "/img/SOFTWARE"}
    by_path = {Path(paths[k]): v for k, v in hives.items()}
    opened = []

    def opener(path, *, write):
        opened.append((path, write))
        return by_path[path]

    s = HiveStore(paths, opener=opener)
    s.opened_files = opened
    return s


@pytest.mark.unit
class TestEncoding:
    def test_reg_sz(self):
        assert _reg_sz("ab") == b"a\x00b\x00\x00\x00"
        assert _decode_reg_sz(_reg_sz("URL:demo Protocol")) == "URL:demo Protocol"
        assert _decode_reg_sz(_reg_sz("")) == ""

    def test_regf_check(self, tmp_path):
        good = tmp_path / "good"
        good.write_bytes(b"regf" + b"\x00" * 8188)
        bad = tmp_path / "bad"
        bad.write_bytes(b"\x00" * 8192)
        assert _is_probably_regf(good)
        assert not _is_probably_regf(bad)
        assert not _is_probably_regf(tmp_path / "missing")

    def test_open_rejects_missing_file(self, tmp_path, monkeypatch):
        monkeypatch.setattr("urischeme.store.hive.encoding.require_hivex", lambda: None)
        with pytest.raises(FileNotFoundError):
            _open_hive_local(tmp_path / "NTUSER.DAT", write=True)

    def test_open_rejects_non_hive(self, tmp_path, monkeypatch):
        monkeypatch.setattr("urischeme.store.hive.encoding.require_hivex", lambda: None)
        small = tmp_path / "small"
        small.write_bytes(b"regf")
        with pytest.raises(RuntimeError):
            _open_hive_local(small, write=False)
        junk = tmp_path / "junk"
        junk.write_bytes(b"\x00" * 8192)
        with pytest.raises(RuntimeError):
            _open_hive_local(junk, write=False)


@pytest.mark.unit
class TestHiveStore:
    def test_user_keys_live_under_software_classes(self, store, hives):
        root = resolve_root(RegistrationScope.CURRENT_USER)
        with store.created(root, "demo") as h:
            store.set_value(h, "", "URL:demo Protocol")
        assert hives[HKCU].path_exists("Software", "Classes", "demo")
        assert store.read_value(root, "demo") == "URL:demo Protocol"

    def test_machine_keys_drop_software_prefix(self, store, hives):
        root = resolve_root(RegistrationScope.MACHINE)
        with store.created(root, "demo") as h:
            store.set_value(h, "URL Protocol", "")
        assert hives[HKLM].path_exists("Classes", "demo")
        assert not hives[HKLM].path_exists("Software")
        assert store.read_value(root, "demo", "URL Protocol") == ""
        assert store.read_value(root, "demo") is None

    def test_open_missing(self, store, hives):
        assert store.open_key(resolve_root(RegistrationScope.CURRENT_USER), "demo") is None
        assert hives[HKCU].nodes.keys() == {hives[HKCU].root()}

    def test_hives_open_lazily_once(self, store):
        root = resolve_root(RegistrationScope.CURRENT_USER)
        store.open_key(root, "a")
        store.open_key(root, "b")
        assert store.opened_files == [(Path("/img/NTUSER.DAT"), True)]

    def test_unconfigured_hive(self, hives):
        s = HiveStore({HKCU: "/img/NTUSER.DAT"}, opener=lambda p, write: hives[HKCU])
        with pytest.raises(FileNotFoundError):
            s.open_key(resolve_root(RegistrationScope.MACHINE), "demo")

    def test_delete_tree(self, store, hives):
        root = resolve_root(RegistrationScope.CURRENT_USER)
        store.create_key(root, "demo\\shell\\open\\command")
        store.create_key(root, "keep")
        store.delete_tree(root, "demo")
        assert not hives[HKCU].path_exists("Software", "Classes", "demo")
        assert hives[HKCU].path_exists("Software", "Classes", "keep")
        with pytest.raises(FileNotFoundError):
            store.delete_tree(root, "demo")

    def test_flush_commits_only_dirty_hives(self, store, hives):
        user = resolve_root(RegistrationScope.CURRENT_USER)
        machine = resolve_root(RegistrationScope.MACHINE)
        store.flush(user)
        assert hives[HKCU].commits == 0
        store.create_key(user, "demo")
        store.flush(user)
        store.flush(user)
        store.flush(machine)
        assert hives[HKCU].commits == 1
        assert hives[HKLM].commits == 0

    def test_close_releases_hives(self, store, hives):
        store.open_key(resolve_root(RegistrationScope.CURRENT_USER), "demo")
        store.close()
        assert hives[HKCU].closed
        assert not hives[HKLM].closed

    def test_closed_handle_rejected(self, store):
        root = resolve_root(RegistrationScope.CURRENT_USER)
        h = store.create_key(root, "demo")
        store.close_key(h)
        with pytest.raises(ValueError):
            store.query_value(h)

    def test_registration_round_trip(self, store, hives):
        reg = SchemeRegistrar(store, file_exists=lambda p: True)
        reg.register("demo", "C:\\Apps\\demo.exe", RegistrationScope.MACHINE, PositionalArgs(1), IconRef("C:\\Apps\\demo.exe"))
        assert reg.exists("demo", "demo", RegistrationScope.MACHINE)
        assert hives[HKLM].commits == 1
        rec = reg.read_back("demo", RegistrationScope.MACHINE)
        assert rec.command_value == 'C:\\Apps\\demo.exe "%1"'
        assert rec.icon == IconRef("C:\\Apps\\demo.exe", 0)
        reg.unregister("demo", "demo", RegistrationScope.MACHINE)
        assert not hives[HKLM].path_exists("Classes", "demo")
