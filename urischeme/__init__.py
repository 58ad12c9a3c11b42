# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# urischeme/__init__.py
"""
urischeme - custom URI scheme handler registration for Windows

Registers, updates, checks and removes protocol handlers such as myapp://
under Software\\Classes, either in the live registry (winreg), in offline
hive files (hivex) or in a JSON/in-memory store.

Usage as a library:

    from urischeme import SchemeRegistrar, RegistrationScope, PositionalArgs
    from urischeme.store.winreg_store import WinRegStore

    registrar = SchemeRegistrar(WinRegStore())
    registrar.register("myapp", r"C:\\Apps\\myapp.exe", RegistrationScope.CURRENT_USER, PositionalArgs(1))
    registrar.exists("myapp", "myapp")
"""

__version__ = "0.1.0"

from .core.exceptions import (
    AlreadyRegisteredError,
    ConcurrentAccessError,
    Fatal,
    InternalInconsistencyError,
    InvalidArgumentError,
    InvalidConfigurationError,
    MalformedSchemeError,
    NotFoundError,
    NotRegisteredError,
    PermissionDeniedError,
    StoreFailureError,
    UriSchemeError,
)
from .scheme import (
    IconRef,
    LiteralArgs,
    NoArgs,
    PositionalArgs,
    RegistrationScope,
    SchemeRecord,
    SchemeRegistrar,
    UriSchemeManager,
    parse_uri,
    parse_uris,
)
from .store import FileStore, MemoryStore, RegistryStore

__all__ = [
    "__version__",
    "AlreadyRegisteredError",
    "ConcurrentAccessError",
    "Fatal",
    "FileStore",
    "IconRef",
    "InternalInconsistencyError",
    "InvalidArgumentError",
    "InvalidConfigurationError",
    "LiteralArgs",
    "MalformedSchemeError",
    "MemoryStore",
    "NoArgs",
    "NotFoundError",
    "NotRegisteredError",
    "PermissionDeniedError",
    "PositionalArgs",
    "RegistrationScope",
    "RegistryStore",
    "SchemeRecord",
    "SchemeRegistrar",
    "StoreFailureError",
    "UriSchemeError",
    "UriSchemeManager",
    "parse_uri",
    "parse_uris",
]
