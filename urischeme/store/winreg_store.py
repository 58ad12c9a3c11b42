# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# urischeme/store/winreg_store.py
"""
Live Windows registry store backed by the stdlib winreg module.
"""
from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Iterator, List, Optional

from ..core.optional_imports import require_winreg, winreg
from .base import KeyBusyError, RegistryStore, RootLocation

# ERROR_INVALID_HANDLE, ERROR_SHARING_VIOLATION, ERROR_LOCK_VIOLATION, ERROR_BUSY
_BUSY_WINERRORS = frozenset({6, 32, 33, 170})


@contextmanager
def _translated(what: str) -> Iterator[None]:
    """Re-raise "in use" winerrors as KeyBusyError; leave everything else alone."""
    try:
        yield
    except (FileNotFoundError, PermissionError):
        raise
    except OSError as e:
        if getattr(e, "winerror", None) in _BUSY_WINERRORS:
            raise KeyBusyError(f"{what}: registry key is in use ({e})") from e
        raise


class WinRegStore(RegistryStore):
    name = "winreg"

    def __init__(self, logger: Optional[logging.Logger] = None, *, api: Any = None) -> None:
        super().__init__(logger)
        if api is None:
            require_winreg()
            api = winreg
        self.api = api

    def _hkey(self, root: RootLocation) -> Any:
        hkey = getattr(self.api, root.hive, None)
        if hkey is None:
            raise ValueError(f"unknown registry hive: {root.hive}")
        return hkey

    def open_key(self, root: RootLocation, path: str) -> Optional[Any]:
        full = root.full_path(path)
        with _translated(f"open {root.hive}\\{full}"):
            try:
                return self.api.OpenKey(self._hkey(root), full, 0, self.api.KEY_READ)
            except FileNotFoundError:
                return None

    def create_key(self, root: RootLocation, path: str) -> Any:
        full = root.full_path(path)
        with _translated(f"create {root.hive}\\{full}"):
            return self.api.CreateKeyEx(self._hkey(root), full, 0, self.api.KEY_ALL_ACCESS)

    def close_key(self, handle: Any) -> None:
        self.api.CloseKey(handle)

    def query_value(self, handle: Any, name: str = "") -> Optional[str]:
        with _translated(f"query {name!r}"):
            try:
                value, _typ = self.api.QueryValueEx(handle, name)
            except FileNotFoundError:
                return None
        return None if value is None else str(value)

    def set_value(self, handle: Any, name: str, data: str) -> None:
        with _translated(f"set {name!r}"):
            self.api.SetValueEx(handle, name, 0, self.api.REG_SZ, data)

    def _subkey_names(self, handle: Any) -> List[str]:
        count, _values, _mtime = self.api.QueryInfoKey(handle)
        return [self.api.EnumKey(handle, i) for i in range(count)]

    def delete_tree(self, root: RootLocation, path: str) -> None:
        full = root.full_path(path)
        hkey = self._hkey(root)
        with _translated(f"delete {root.hive}\\{full}"):
            self._delete_recursive(hkey, full)
        self.logger.debug("Deleted %s\\%s", root.hive, full)

    def _delete_recursive(self, hkey: Any, full: str) -> None:
        # DeleteKey refuses keys with children, so delete bottom-up.
        handle = self.api.OpenKey(hkey, full, 0, self.api.KEY_ALL_ACCESS)
        try:
            children = self._subkey_names(handle)
        finally:
            self.api.CloseKey(handle)
        for child in children:
            self._delete_recursive(hkey, f"{full}\\{child}")
        self.api.DeleteKey(hkey, full)
