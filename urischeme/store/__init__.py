# SPDX-License-Identifier: LGPL-3.0-or-later
# urischeme/store/__init__.py
from .base import HKCU, HKLM, KeyBusyError, RegistryStore, RootLocation
from .memory import FileStore, MemoryStore

__all__ = [
    "HKCU",
    "HKLM",
    "FileStore",
    "KeyBusyError",
    "MemoryStore",
    "RegistryStore",
    "RootLocation",
]
