# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# urischeme/scheme/registrar.py
"""
Scheme registration engine.

Registers, updates, checks and removes custom URI scheme handlers in a
RegistryStore under a scope's classes root:

    <root>\\<handler>\\(default)                     = "URL:<scheme> Protocol"
    <root>\\<handler>\\URL Protocol                  = ""
    <root>\\<handler>\\DefaultIcon\\(default)         = "<file>,<index>"   (optional)
    <root>\\<handler>\\shell\\open\\command\\(default) = "<path><suffix>"

All validation runs before the first store write. Store errors are mapped to
PermissionDeniedError / ConcurrentAccessError / StoreFailureError; nothing is
rolled back.
"""
from __future__ import annotations

import logging
import os
from contextlib import contextmanager
from typing import Any, Callable, Dict, Iterator, Optional

from ..core.exceptions import (
    AlreadyRegisteredError,
    InternalInconsistencyError,
    InvalidArgumentError,
    MalformedSchemeError,
    NotFoundError,
    NotRegisteredError,
    UriSchemeError,
    wrap_concurrent,
    wrap_permission,
    wrap_store_failure,
)
from ..core.logger import Log
from ..core.logging_utils import log_step, safe_logger
from ..store.base import DEFAULT_VALUE, KeyBusyError, RegistryStore, RootLocation, join_path
from .known import is_known_scheme
from .record import (
    COMMAND_KEY,
    DEFAULT_ICON_KEY,
    URL_PROTOCOL_VALUE,
    ArgumentSpec,
    IconRef,
    LiteralArgs,
    NoArgs,
    PositionalArgs,
    SchemeRecord,
    is_valid_scheme,
    normalize_scheme,
    parse_command_value,
    scheme_from_default_value,
)
from .scope import RegistrationScope, resolve_root, scope_label


class SchemeRegistrar:
    """
    Engine over one RegistryStore. Holds no state between calls besides the
    store, a logger and two predicates (known scheme, file exists), both
    injectable for tests.
    """

    def __init__(
        self,
        store: RegistryStore,
        *,
        logger: Optional[logging.Logger] = None,
        known_scheme: Callable[[str], bool] = is_known_scheme,
        file_exists: Callable[[str], bool] = os.path.isfile,
    ) -> None:
        self.store = store
        self.logger = logger or logging.getLogger("urischeme.registrar")
        self.known_scheme = known_scheme
        self.file_exists = file_exists

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def register(
        self,
        protocol: str,
        path: str,
        scope: RegistrationScope = RegistrationScope.CURRENT_USER,
        arguments: Optional[ArgumentSpec] = None,
        icon: Optional[IconRef] = None,
        *,
        handler_name: Optional[str] = None,
        port: Optional[int] = None,
    ) -> SchemeRecord:
        """
        Register `protocol` to launch `path`. The handler name defaults to the
        normalized scheme token.
        """
        if handler_name is None:
            handler_name = normalize_scheme(protocol)
        record = SchemeRecord(
            scheme=protocol,
            executable_path=path,
            port=port,
            arguments=NoArgs() if arguments is None else arguments,
            icon=icon,
        )
        return self.register_record(record, handler_name, scope)

    def register_networked(
        self,
        protocol: str,
        path: str,
        port: int,
        handler_name: str,
        arguments: Optional[ArgumentSpec] = None,
        icon: Optional[IconRef] = None,
        scope: RegistrationScope = RegistrationScope.CURRENT_USER,
    ) -> SchemeRecord:
        if port is None:
            raise InvalidArgumentError(msg="A networked scheme needs a port", context={"scheme": protocol})
        return self.register(protocol, path, scope, arguments, icon, handler_name=handler_name, port=port)

    def register_record(
        self,
        record: SchemeRecord,
        handler_name: str,
        scope: RegistrationScope = RegistrationScope.CURRENT_USER,
    ) -> SchemeRecord:
        record = self._validate(record, handler_name, scope)
        root = resolve_root(scope)

        self._ensure_not_registered(record.scheme, handler_name, scope, root)
        self._check_icon(record.icon)

        with log_step(
            self.logger,
            f"Registering scheme {record.scheme!r} as {handler_name!r} {scope_label(scope)}",
            **self._step_ctx(handler_name, scope),
        ):
            self._write(record, handler_name, scope, root)
        return record

    def exists(
        self,
        protocol: str,
        handler_name: str,
        scope: RegistrationScope = RegistrationScope.CURRENT_USER,
        *,
        port: Optional[int] = None,
    ) -> bool:
        self._require_text(protocol, "scheme")
        self._require_text(handler_name, "handler name")
        self._check_port(port)
        root = resolve_root(scope)
        scheme = self._normalized(protocol)
        if self.known_scheme(scheme):
            return True
        stored = self._stored_scheme(handler_name, scope, root)
        return stored is not None and stored == scheme

    def unregister(
        self,
        protocol: str,
        handler_name: str,
        scope: RegistrationScope = RegistrationScope.CURRENT_USER,
        *,
        port: Optional[int] = None,
    ) -> None:
        if not self.exists(protocol, handler_name, scope, port=port):
            raise NotRegisteredError(
                msg=f"Scheme {normalize_scheme(protocol)!r} is not registered as {handler_name!r} {scope_label(scope)}",
                context={"scheme": normalize_scheme(protocol), "handler": handler_name},
            )
        root = resolve_root(scope)
        scheme = normalize_scheme(protocol)
        if self._stored_scheme(handler_name, scope, root) != scheme:
            # Reserved schemes "exist" without a key of ours to delete.
            raise NotRegisteredError(
                msg=f"Scheme {scheme!r} is reserved by the system and has no handler {handler_name!r} to remove",
                context={"scheme": scheme, "handler": handler_name, "reserved": True},
            )
        with log_step(
            self.logger, f"Unregistering {handler_name!r} {scope_label(scope)}", **self._step_ctx(handler_name, scope)
        ):
            with self._store_errors("delete", scope, handler_name):
                self.store.delete_tree(root, handler_name)
                self.store.flush(root)

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
    ) -> SchemeRecord:
        """
        Replace the supplied fields of an existing registration; None keeps
        the stored value. Implemented as unregister + register, which is not
        atomic.
        """
        if not self.exists(protocol, handler_name, scope, port=port):
            raise NotRegisteredError(
                msg=f"Cannot update {handler_name!r}: scheme {normalize_scheme(protocol)!r} is not registered "
                f"{scope_label(scope)}",
                context={"scheme": normalize_scheme(protocol), "handler": handler_name},
            )
        current = self.read_back(handler_name, scope)
        if current is None:
            raise InternalInconsistencyError(
                msg=f"{handler_name!r} reported as registered but could not be read back",
                context={"handler": handler_name},
            )

        merged = current.with_changes(
            scheme=self._normalized(protocol),
            executable_path=path,
            arguments=arguments,
            icon=icon,
            port=port,
        )
        merged = self._validate(merged, handler_name, scope)
        if self.known_scheme(merged.scheme):
            raise AlreadyRegisteredError(
                msg=f"Scheme {merged.scheme!r} is reserved by the system",
                context={"scheme": merged.scheme},
            )
        self._check_icon(merged.icon)

        self.logger.debug("Updating %r: delete-then-register is not atomic", handler_name)
        self.unregister(protocol, handler_name, scope, port=port)
        return self.register_record(merged, handler_name, scope)

    def read_back(
        self,
        handler_name: str,
        scope: RegistrationScope = RegistrationScope.CURRENT_USER,
    ) -> Optional[SchemeRecord]:
        """Reconstruct the stored record, or None when nothing valid is stored."""
        self._require_text(handler_name, "handler name")
        root = resolve_root(scope)
        with self._store_errors("read", scope, handler_name):
            default = self.store.read_value(root, handler_name, DEFAULT_VALUE)
            if default is None:
                return None
            command = self.store.read_value(root, join_path(handler_name, COMMAND_KEY), DEFAULT_VALUE)
            icon_value = self.store.read_value(root, join_path(handler_name, DEFAULT_ICON_KEY), DEFAULT_VALUE)

        path, spec = parse_command_value(command, path_exists=self.file_exists)
        return SchemeRecord(
            scheme=scheme_from_default_value(default) or "",
            executable_path=path,
            arguments=spec,
            icon=IconRef.from_value(icon_value),
        )

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    @staticmethod
    def _require_text(value: Optional[str], what: str) -> None:
        if value is None or not str(value).strip():
            raise InvalidArgumentError(msg=f"The {what} must not be empty", context={"field": what})

    @staticmethod
    def _check_port(port: Optional[int]) -> None:
        if port is None:
            return
        if isinstance(port, bool) or not isinstance(port, int) or not 1 <= port <= 65535:
            raise InvalidArgumentError(msg=f"Port out of range (1..65535): {port!r}", context={"port": port})

    @staticmethod
    def _check_arguments(spec: ArgumentSpec) -> None:
        if isinstance(spec, PositionalArgs):
            if spec.count < 0:
                raise InvalidArgumentError(
                    msg=f"Positional argument count must not be negative: {spec.count}",
                    context={"count": spec.count},
                )
        elif isinstance(spec, LiteralArgs):
            if not spec.text or not spec.text.strip():
                raise InvalidArgumentError(msg="Literal arguments must not be empty")
        elif not isinstance(spec, NoArgs):
            raise InvalidArgumentError(msg=f"Unsupported argument spec: {spec!r}")

    @staticmethod
    def _normalized(protocol: str) -> str:
        scheme = normalize_scheme(protocol)
        if not is_valid_scheme(scheme):
            raise MalformedSchemeError(
                msg=f"Malformed scheme: {protocol!r}",
                context={"scheme": protocol, "normalized": scheme},
            )
        return scheme

    def _validate(self, record: SchemeRecord, handler_name: str, scope: Any) -> SchemeRecord:
        """Steps shared by register and update; returns the record with its scheme normalized."""
        if not record.executable_path or not self.file_exists(record.executable_path):
            raise NotFoundError(
                msg=f"Executable not found: {record.executable_path!r}",
                context={"path": record.executable_path},
            )
        self._require_text(record.scheme, "scheme")
        if handler_name is None:
            raise InvalidArgumentError(msg="The handler name must not be empty", context={"field": "handler name"})
        self._require_text(handler_name, "handler name")
        self._check_port(record.port)
        self._check_arguments(record.arguments)
        resolve_root(scope)
        return record.with_changes(scheme=self._normalized(record.scheme))

    def _check_icon(self, icon: Optional[IconRef]) -> None:
        if icon is not None and not self.file_exists(icon.file):
            raise NotFoundError(msg=f"Icon file not found: {icon.file!r}", context={"icon": icon.file})

    def _ensure_not_registered(
        self, scheme: str, handler_name: str, scope: RegistrationScope, root: RootLocation
    ) -> None:
        known = self.known_scheme(scheme)
        stored = self._stored_scheme(handler_name, scope, root)
        if known or stored == scheme:
            raise AlreadyRegisteredError(
                msg=f"Scheme {scheme!r} is already registered"
                + ("" if known else f" as {handler_name!r} {scope_label(scope)}"),
                context={"scheme": scheme, "handler": handler_name, "reserved": known},
            )
        if stored is not None:
            raise AlreadyRegisteredError(
                msg=f"Handler {handler_name!r} already belongs to scheme {stored!r} {scope_label(scope)}",
                context={"scheme": scheme, "handler": handler_name, "owner": stored},
            )

    # ------------------------------------------------------------------
    # Store access
    # ------------------------------------------------------------------

    def _stored_scheme(self, handler_name: str, scope: RegistrationScope, root: RootLocation) -> Optional[str]:
        with self._store_errors("read", scope, handler_name):
            value = self.store.read_value(root, handler_name, DEFAULT_VALUE)
        return scheme_from_default_value(value)

    def _write(self, record: SchemeRecord, handler_name: str, scope: RegistrationScope, root: RootLocation) -> None:
        state = {"written": 0}

        def put(subkey: str, name: str, data: str) -> None:
            with self.store.created(root, join_path(handler_name, subkey)) as h:
                self.store.set_value(h, name, data)
            state["written"] += 1

        try:
            with self._store_errors("write", scope, handler_name):
                self._clear_leftover(handler_name, root)
                put(COMMAND_KEY, DEFAULT_VALUE, record.command_value)
                if record.icon is not None:
                    put(DEFAULT_ICON_KEY, DEFAULT_VALUE, record.icon.to_value())
                put("", URL_PROTOCOL_VALUE, "")
                # Last: exists() keys off this value.
                put("", DEFAULT_VALUE, record.default_value)
                self.store.flush(root)
        except UriSchemeError as e:
            if state["written"]:
                Log.warn(
                    self.logger,
                    f"Registration of {handler_name!r} interrupted; a partial key may remain",
                    written=state["written"],
                )
                e.with_context(partial=True)
            raise

    def _step_ctx(self, handler_name: str, scope: RegistrationScope) -> Dict[str, str]:
        return {"handler": handler_name, "scope": scope.name.lower(), "store": self.store.name}

    def _clear_leftover(self, handler_name: str, root: RootLocation) -> None:
        # Only called once _ensure_not_registered found no default value, so an
        # existing key is what an interrupted registration left behind.
        with self.store.opened(root, handler_name) as h:
            if h is None:
                return
        Log.warn(self.logger, f"Removing incomplete key {handler_name!r} before registering", root=str(root))
        self.store.delete_tree(root, handler_name)

    @contextmanager
    def _store_errors(self, op: str, scope: RegistrationScope, handler_name: str) -> Iterator[None]:
        try:
            yield
        except UriSchemeError:
            raise
        except PermissionError as e:
            raise wrap_permission(
                f"Permission denied to {op} {handler_name!r} {scope_label(scope)}", e, handler=handler_name
            ) from e
        except KeyBusyError as e:
            raise wrap_concurrent(
                f"Registry key {handler_name!r} is in use {scope_label(scope)}", e, handler=handler_name
            ) from e
        except Exception as e:
            safe_logger(self).debug("Store %s failed for %r: %r", op, handler_name, e)
            raise wrap_store_failure(
                f"Registry {op} failed for {handler_name!r} {scope_label(scope)}: {e}",
                e,
                handler=handler_name,
                store=self.store.name,
            ) from e
