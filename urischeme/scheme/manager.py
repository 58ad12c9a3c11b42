# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# urischeme/scheme/manager.py
"""
Caller-facing facade over SchemeRegistrar.

With throw_errors=False every project error is logged as a warning and turned
into a falsy return value, which suits scripts that only want a yes/no answer.
Anything that is not a UriSchemeError still propagates.
"""
from __future__ import annotations

import logging
from typing import Any, Callable, Optional, TypeVar

from ..core.exceptions import UriSchemeError
from ..core.logger import Log
from .record import ArgumentSpec, IconRef, SchemeRecord
from .registrar import SchemeRegistrar
from .scope import RegistrationScope

T = TypeVar("T")


class UriSchemeManager:
    def __init__(
        self,
        registrar: SchemeRegistrar,
        throw_errors: bool = True,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.registrar = registrar
        self.throw_errors = bool(throw_errors)
        self.logger = logger or logging.getLogger("urischeme.manager")

    def _call(self, what: str, fallback: T, fn: Callable[..., T], *args: Any, **kwargs: Any) -> T:
        try:
            return fn(*args, **kwargs)
        except UriSchemeError as e:
            if self.throw_errors:
                raise
            Log.warn(self.logger, f"{what} failed: {e.user_message()}", code=e.code, error=type(e).__name__)
            return fallback

    def _mutate(self, what: str, fn: Callable[..., Any], *args: Any, **kwargs: Any) -> bool:
        def run() -> bool:
            fn(*args, **kwargs)
            return True

        return self._call(what, False, run)

    def register(
        self,
        protocol: str,
        path: str,
        scope: RegistrationScope = RegistrationScope.CURRENT_USER,
        arguments: Optional[ArgumentSpec] = None,
        icon: Optional[IconRef] = None,
        *,
        handler_name: Optional[str] = None,
    ) -> bool:
        return self._mutate(
            "register",
            self.registrar.register,
            protocol,
            path,
            scope,
            arguments,
            icon,
            handler_name=handler_name,
        )

    def register_networked(
        self,
        protocol: str,
        path: str,
        port: int,
        handler_name: str,
        arguments: Optional[ArgumentSpec] = None,
        icon: Optional[IconRef] = None,
        scope: RegistrationScope = RegistrationScope.CURRENT_USER,
    ) -> bool:
        return self._mutate(
            "register_networked",
            self.registrar.register_networked,
            protocol,
            path,
            port,
            handler_name,
            arguments,
            icon,
            scope,
        )

    def unregister(
        self,
        protocol: str,
        handler_name: str,
        scope: RegistrationScope = RegistrationScope.CURRENT_USER,
        *,
        port: Optional[int] = None,
    ) -> bool:
        return self._mutate("unregister", self.registrar.unregister, protocol, handler_name, scope, port=port)

    def update(
        self,
        protocol: str,
        handler_name: str,
        scope: RegistrationScope = RegistrationScope.CURRENT_USER,
        *,
        path: Optional[str] = None,
        arguments: Optional[ArgumentSpec] = None,
        icon: Optional[IconRef] = None,
        port: Optional[int] = None,
    ) -> bool:
        return self._mutate(
            "update",
            self.registrar.update,
            protocol,
            handler_name,
            scope,
            path=path,
            arguments=arguments,
            icon=icon,
            port=port,
        )

    def exists(
        self,
        protocol: str,
        handler_name: str,
        scope: RegistrationScope = RegistrationScope.CURRENT_USER,
        *,
        port: Optional[int] = None,
    ) -> bool:
        return self._call("exists", False, self.registrar.exists, protocol, handler_name, scope, port=port)

    def read_back(
        self,
        handler_name: str,
        scope: RegistrationScope = RegistrationScope.CURRENT_USER,
    ) -> Optional[SchemeRecord]:
        return self._call("read_back", None, self.registrar.read_back, handler_name, scope)
