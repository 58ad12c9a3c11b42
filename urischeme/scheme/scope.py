# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# urischeme/scheme/scope.py
from __future__ import annotations

import enum
from typing import Any

from ..core.exceptions import InvalidConfigurationError
from ..store.base import HKCU, HKLM, RootLocation

CLASSES_PATH = r"Software\Classes"


class RegistrationScope(enum.Enum):
    """Where a registration lives: the current user's classes or the machine's."""

    CURRENT_USER = 0x20
    MACHINE = 0x40

    @classmethod
    def parse(cls, value: Any) -> "RegistrationScope":
        if isinstance(value, cls):
            return value
        key = str(value or "").strip().lower().replace("-", "_")
        scope = _ALIASES.get(key)
        if scope is None:
            raise InvalidConfigurationError(
                msg=f"Invalid registration scope: {value!r} (expected 'user' or 'machine')",
                context={"scope": value},
            )
        return scope


_ALIASES = {
    "user": RegistrationScope.CURRENT_USER,
    "current_user": RegistrationScope.CURRENT_USER,
    "currentuser": RegistrationScope.CURRENT_USER,
    "hkcu": RegistrationScope.CURRENT_USER,
    "machine": RegistrationScope.MACHINE,
    "local_machine": RegistrationScope.MACHINE,
    "localmachine": RegistrationScope.MACHINE,
    "hklm": RegistrationScope.MACHINE,
}

_ROOTS = {
    RegistrationScope.CURRENT_USER: RootLocation(hive=HKCU, path=CLASSES_PATH),
    RegistrationScope.MACHINE: RootLocation(hive=HKLM, path=CLASSES_PATH),
}


def resolve_root(scope: Any) -> RootLocation:
    """Map a scope to its classes root. Never defaults."""
    if not isinstance(scope, RegistrationScope):
        raise InvalidConfigurationError(
            msg=f"Invalid registration scope: {scope!r}",
            context={"scope": scope},
        )
    return _ROOTS[scope]


def scope_label(scope: RegistrationScope) -> str:
    """Wording used in permission errors."""
    if scope is RegistrationScope.MACHINE:
        return "on the local machine"
    return "on current user"
