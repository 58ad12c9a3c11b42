# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# urischeme/store/base.py
"""
Capability interface over a registry-like hierarchical key/value store.

Keys are addressed by a RootLocation (hive + base path) plus a relative
backslash-separated path. Handles returned by open_key/create_key are opaque
to callers and must be released with close_key; opened()/created() do that
on every exit path.
"""
from __future__ import annotations

import abc
import logging
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Iterator, List, Optional

HKCU = "HKEY_CURRENT_USER"
HKLM = "HKEY_LOCAL_MACHINE"

DEFAULT_VALUE = ""  # the key's unnamed "(default)" value


class KeyBusyError(OSError):
    """The store reports the key or handle as in use by another caller."""


def split_path(path: str) -> List[str]:
    return [p for p in path.replace("/", "\\").split("\\") if p]


def join_path(*parts: str) -> str:
    out: List[str] = []
    for p in parts:
        out.extend(split_path(p or ""))
    return "\\".join(out)


@dataclass(frozen=True)
class RootLocation:
    hive: str
    path: str

    def full_path(self, relative: str = "") -> str:
        return join_path(self.path, relative)

    def __str__(self) -> str:
        return join_path(self.hive, self.path)


class RegistryStore(abc.ABC):
    """
    Minimal store adapter used by the registrar.

    Implementations raise PermissionError for access failures, KeyBusyError
    for "in use" conditions and any other exception for everything else;
    the registrar classifies them.
    """

    name = "store"

    def __init__(self, logger: Optional[logging.Logger] = None) -> None:
        self.logger = logger or logging.getLogger(f"urischeme.store.{self.name}")

    # -- primitives ---------------------------------------------------------

    @abc.abstractmethod
    def open_key(self, root: RootLocation, path: str) -> Optional[Any]:
        """Open an existing key for read/write, or return None if it is absent."""

    @abc.abstractmethod
    def create_key(self, root: RootLocation, path: str) -> Any:
        """Open the key, creating it (and missing parents) if needed."""

    @abc.abstractmethod
    def close_key(self, handle: Any) -> None:
        ...

    @abc.abstractmethod
    def query_value(self, handle: Any, name: str = DEFAULT_VALUE) -> Optional[str]:
        """Return a string value, or None when the value is not set."""

    @abc.abstractmethod
    def set_value(self, handle: Any, name: str, data: str) -> None:
        ...

    @abc.abstractmethod
    def delete_tree(self, root: RootLocation, path: str) -> None:
        """Delete the key and every subkey below it."""

    def flush(self, root: RootLocation) -> None:
        """Persist pending writes for `root`. No-op for stores that write through."""

    def close(self) -> None:
        """Release store-wide resources."""

    # -- scoped helpers -----------------------------------------------------

    @contextmanager
    def opened(self, root: RootLocation, path: str) -> Iterator[Optional[Any]]:
        handle = self.open_key(root, path)
        try:
            yield handle
        finally:
            if handle is not None:
                self.close_key(handle)

    @contextmanager
    def created(self, root: RootLocation, path: str) -> Iterator[Any]:
        handle = self.create_key(root, path)
        try:
            yield handle
        finally:
            self.close_key(handle)

    def read_value(self, root: RootLocation, path: str, name: str = DEFAULT_VALUE) -> Optional[str]:
        with self.opened(root, path) as h:
            if h is None:
                return None
            return self.query_value(h, name)

    def __enter__(self) -> "RegistryStore":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
