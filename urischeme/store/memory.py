# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# urischeme/store/memory.py
"""
In-memory registry store, optionally persisted as JSON.

Key names are matched case-insensitively and keep the case they were created
with, like the Windows registry.
"""
from __future__ import annotations

import copy
import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Union

from ..core.utils import U
from .base import RegistryStore, RootLocation, join_path, split_path


@dataclass
class _Node:
    name: str
    values: Dict[str, str] = field(default_factory=dict)
    children: Dict[str, "_Node"] = field(default_factory=dict)  # lower-case name -> node

    def child(self, name: str) -> Optional["_Node"]:
        return self.children.get(name.lower())

    def ensure_child(self, name: str) -> "_Node":
        node = self.child(name)
        if node is None:
            node = _Node(name=name)
            self.children[name.lower()] = node
        return node

    def to_jsonable(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "values": dict(self.values),
            "children": [c.to_jsonable() for c in self.children.values()],
        }

    @classmethod
    def from_jsonable(cls, d: Dict[str, Any]) -> "_Node":
        node = cls(name=str(d.get("name", "")), values={str(k): str(v) for k, v in (d.get("values") or {}).items()})
        for ch in d.get("children") or []:
            c = cls.from_jsonable(ch)
            node.children[c.name.lower()] = c
        return node


@dataclass
class _Handle:
    node: _Node
    path: str
    closed: bool = False


class MemoryStore(RegistryStore):
    name = "memory"

    def __init__(self, logger: Optional[logging.Logger] = None) -> None:
        super().__init__(logger)
        self._hives: Dict[str, _Node] = {}
        self.open_handles = 0

    def _hive(self, hive: str) -> _Node:
        return self._hives.setdefault(hive, _Node(name=hive))

    def _walk(self, root: RootLocation, path: str, *, create: bool) -> Optional[_Node]:
        node = self._hive(root.hive) if create else self._hives.get(root.hive)
        if node is None:
            return None
        for part in split_path(root.full_path(path)):
            nxt = node.ensure_child(part) if create else node.child(part)
            if nxt is None:
                return None
            node = nxt
        return node

    def _checked(self, handle: _Handle) -> _Node:
        if handle.closed:
            raise ValueError(f"registry handle already closed: {handle.path}")
        return handle.node

    def open_key(self, root: RootLocation, path: str) -> Optional[_Handle]:
        node = self._walk(root, path, create=False)
        if node is None:
            return None
        self.open_handles += 1
        return _Handle(node=node, path=join_path(root.hive, root.full_path(path)))

    def create_key(self, root: RootLocation, path: str) -> _Handle:
        node = self._walk(root, path, create=True)
        assert node is not None
        self.open_handles += 1
        self.logger.debug("create_key %s\\%s", root, path)
        return _Handle(node=node, path=join_path(root.hive, root.full_path(path)))

    def close_key(self, handle: _Handle) -> None:
        if not handle.closed:
            handle.closed = True
            self.open_handles -= 1

    def query_value(self, handle: _Handle, name: str = "") -> Optional[str]:
        return self._checked(handle).values.get(name)

    def set_value(self, handle: _Handle, name: str, data: str) -> None:
        self._checked(handle).values[name] = str(data)

    def delete_tree(self, root: RootLocation, path: str) -> None:
        parts = split_path(root.full_path(path))
        if not parts:
            raise ValueError("refusing to delete a hive root")
        parent: Optional[_Node] = self._hives.get(root.hive)
        if parent is None:
            raise FileNotFoundError(f"registry hive not found: {root.hive}")
        for part in parts[:-1]:
            parent = parent.child(part)
            if parent is None:
                raise FileNotFoundError(f"registry key not found: {root.hive}\\{join_path(*parts)}")
        if parent.children.pop(parts[-1].lower(), None) is None:
            raise FileNotFoundError(f"registry key not found: {root.hive}\\{join_path(*parts)}")
        self.logger.debug("delete_tree %s\\%s", root, path)

    # -- inspection / persistence -------------------------------------------

    def snapshot(self) -> Dict[str, Any]:
        """Deep copy of the whole store as plain data (stable for comparisons)."""
        return copy.deepcopy({h: n.to_jsonable() for h, n in sorted(self._hives.items())})

    def dump(self) -> str:
        return U.json_dump(self.snapshot())

    def load_snapshot(self, data: Dict[str, Any]) -> None:
        self._hives = {str(h): _Node.from_jsonable(d) for h, d in (data or {}).items()}


class FileStore(MemoryStore):
    """
    MemoryStore backed by a JSON file: loaded on construction, written on
    flush() and close(). Useful for dry runs and for staging registrations
    on machines without a registry.
    """

    name = "file"

    def __init__(self, path: Union[str, Path], logger: Optional[logging.Logger] = None) -> None:
        super().__init__(logger)
        self.path = Path(path).expanduser()
        self._dirty = False
        if self.path.exists():
            raw = self.path.read_text(encoding="utf-8")
            if raw.strip():
                self.load_snapshot(json.loads(raw))
            self.logger.debug("Loaded store file %s", self.path)

    def create_key(self, root: RootLocation, path: str) -> _Handle:
        self._dirty = True
        return super().create_key(root, path)

    def set_value(self, handle: _Handle, name: str, data: str) -> None:
        self._dirty = True
        super().set_value(handle, name, data)

    def delete_tree(self, root: RootLocation, path: str) -> None:
        super().delete_tree(root, path)
        self._dirty = True

    def flush(self, root: RootLocation) -> None:
        self._save()

    def close(self) -> None:
        self._save()

    def _save(self) -> None:
        if not self._dirty:
            return
        U.atomic_write_text(self.path, self.dump() + "\n")
        self._dirty = False
        self.logger.debug("Wrote store file %s", self.path)
