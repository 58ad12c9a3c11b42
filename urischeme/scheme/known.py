# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# urischeme/scheme/known.py
"""
Schemes the URI-handling layer already owns.

Registering a handler for one of these is refused: it would hijack links the
OS or the Python URL machinery already routes somewhere.
"""
from __future__ import annotations

from typing import FrozenSet, Iterable
from urllib.parse import uses_netloc, uses_params, uses_relative

# Reserved by the host even where urllib has no special handling for them.
RESERVED_SCHEMES: FrozenSet[str] = frozenset(
    {
        "file",
        "ftp",
        "gopher",
        "http",
        "https",
        "ldap",
        "mailto",
        "net.pipe",
        "net.tcp",
        "news",
        "nntp",
        "telnet",
        "uuid",
        "ws",
        "wss",
    }
)


def _urllib_schemes() -> FrozenSet[str]:
    return frozenset(s for s in (*uses_relative, *uses_netloc, *uses_params) if s)


def known_schemes(extra: Iterable[str] = ()) -> FrozenSet[str]:
    return _urllib_schemes() | RESERVED_SCHEMES | frozenset(s.lower() for s in extra if s)


def is_known_scheme(scheme: str) -> bool:
    """Case-insensitive: scheme names are case-insensitive in URIs."""
    return bool(scheme) and scheme.lower() in known_schemes()
