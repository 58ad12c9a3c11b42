# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# urischeme/store/hive/store.py
"""
Offline registry store: edits NTUSER.DAT / SOFTWARE hive files with hivex.

Used to stage a scheme registration into a Windows image before first boot.
Hive roots map to registry roots like this:

    HKEY_CURRENT_USER   -> NTUSER.DAT root
    HKEY_LOCAL_MACHINE  -> SOFTWARE root  (== HKLM\\Software, so the leading
                                           "Software" path component is dropped)

Changes are committed on flush() and hives are released on close().
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, List, Mapping, Optional, Union

from ..base import HKCU, HKLM, RegistryStore, RootLocation, join_path, split_path
from .encoding import (
    _close_best_effort,
    _commit,
    _delete_node,
    _node_id,
    _node_ok,
    _open_hive_local,
    _read_sz,
    _set_sz,
    _walk,
)

# Path component a hive file's root already stands for.
_MOUNT_PREFIX: Dict[str, str] = {HKLM: "Software"}

HiveOpener = Callable[..., Any]


@dataclass
class _HiveHandle:
    hive: str
    node: int
    path: str
    closed: bool = False


class HiveStore(RegistryStore):
    name = "hive"

    def __init__(
        self,
        hives: Mapping[str, Union[str, Path]],
        logger: Optional[logging.Logger] = None,
        *,
        opener: Optional[HiveOpener] = None,
    ) -> None:
        super().__init__(logger)
        self.hive_files: Dict[str, Path] = {k: Path(v).expanduser() for k, v in hives.items() if v}
        self._opener = opener or _open_hive_local
        self._open: Dict[str, Any] = {}
        self._dirty: Dict[str, bool] = {}

    @classmethod
    def from_files(
        cls,
        *,
        user_hive: Optional[Union[str, Path]] = None,
        software_hive: Optional[Union[str, Path]] = None,
        logger: Optional[logging.Logger] = None,
    ) -> "HiveStore":
        return cls({HKCU: user_hive, HKLM: software_hive}, logger=logger)  # type: ignore[dict-item]

    def _hive(self, hive: str) -> Any:
        h = self._open.get(hive)
        if h is not None:
            return h
        path = self.hive_files.get(hive)
        if path is None:
            raise FileNotFoundError(f"no hive file configured for {hive}")
        self.logger.info("Opening hive %s for %s", path, hive)
        h = self._opener(path, write=True)
        self._open[hive] = h
        return h

    def _parts(self, root: RootLocation, path: str) -> List[str]:
        parts = split_path(root.full_path(path))
        prefix = _MOUNT_PREFIX.get(root.hive)
        if prefix and parts and parts[0].lower() == prefix.lower():
            parts = parts[1:]
        return parts

    def _handle(self, hive: str, node: int, root: RootLocation, path: str) -> _HiveHandle:
        return _HiveHandle(hive=hive, node=node, path=join_path(root.hive, root.full_path(path)))

    def _checked(self, handle: _HiveHandle) -> Any:
        if handle.closed:
            raise ValueError(f"registry handle already closed: {handle.path}")
        return self._hive(handle.hive)

    def open_key(self, root: RootLocation, path: str) -> Optional[_HiveHandle]:
        h = self._hive(root.hive)
        node = _walk(h, h.root(), self._parts(root, path), create=False)
        if not _node_ok(node):
            return None
        return self._handle(root.hive, node, root, path)

    def create_key(self, root: RootLocation, path: str) -> _HiveHandle:
        h = self._hive(root.hive)
        node = _walk(h, h.root(), self._parts(root, path), create=True)
        self._dirty[root.hive] = True
        return self._handle(root.hive, node, root, path)

    def close_key(self, handle: _HiveHandle) -> None:
        # Hive nodes are plain offsets; only the hive itself holds resources.
        handle.closed = True

    def query_value(self, handle: _HiveHandle, name: str = "") -> Optional[str]:
        return _read_sz(self._checked(handle), handle.node, name)

    def set_value(self, handle: _HiveHandle, name: str, data: str) -> None:
        _set_sz(self._checked(handle), handle.node, name, data)
        self._dirty[handle.hive] = True

    def delete_tree(self, root: RootLocation, path: str) -> None:
        parts = self._parts(root, path)
        if not parts:
            raise ValueError("refusing to delete a hive root")
        h = self._hive(root.hive)
        node = _walk(h, h.root(), parts, create=False)
        if not _node_ok(node):
            raise FileNotFoundError(f"registry key not found: {root.hive}\\{root.full_path(path)}")
        _delete_node(h, _node_id(node), logger=self.logger)
        self._dirty[root.hive] = True

    def flush(self, root: RootLocation) -> None:
        if not self._dirty.get(root.hive):
            return
        _commit(self._hive(root.hive))
        self._dirty[root.hive] = False
        self.logger.info("Committed hive %s", self.hive_files.get(root.hive))

    def close(self) -> None:
        for hive, h in list(self._open.items()):
            if self._dirty.get(hive):
                self.logger.warning("Closing hive %s with uncommitted changes", self.hive_files.get(hive))
            _close_best_effort(h, logger=self.logger)
        self._open.clear()
        self._dirty.clear()
