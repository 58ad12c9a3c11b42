# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# urischeme/cli/runner.py
"""
Executes one CLI operation: builds the store, the registrar and the facade
from parsed args, dispatches on `cmd` and returns the process exit code.
"""
from __future__ import annotations

import argparse
import logging
from typing import Any, Callable, Dict, List, Optional

from ..core.exceptions import InvalidConfigurationError
from ..core.logger import Log
from ..core.optional_imports import Console, Table, require_rich
from ..core.utils import U
from ..scheme.manager import UriSchemeManager
from ..scheme.parser import parse_uris, query_arguments
from ..scheme.record import ArgumentSpec, IconRef, LiteralArgs, PositionalArgs, SchemeRecord, normalize_scheme
from ..scheme.registrar import SchemeRegistrar
from ..scheme.scope import RegistrationScope, resolve_root
from ..store.base import RegistryStore
from .args.helpers import _merged_cmd, _merged_get, _merged_store, _require


def build_store(args: argparse.Namespace, conf: Dict[str, Any], logger: logging.Logger) -> RegistryStore:
    kind = _merged_store(args, conf)
    store_logger = logger.getChild("store")
    if kind == "memory":
        from ..store.memory import MemoryStore

        return MemoryStore(store_logger)
    if kind == "file":
        from ..store.memory import FileStore

        return FileStore(str(_merged_get(args, conf, "store_file")), store_logger)
    if kind == "winreg":
        from ..store.winreg_store import WinRegStore

        return WinRegStore(store_logger)
    if kind == "hive":
        from ..store.hive import HiveStore

        return HiveStore.from_files(
            user_hive=_merged_get(args, conf, "user_hive"),
            software_hive=_merged_get(args, conf, "software_hive"),
            logger=store_logger,
        )
    raise InvalidConfigurationError(msg=f"Unknown store: {kind!r}", context={"store": kind})


class Runner:
    def __init__(self, logger: logging.Logger, args: argparse.Namespace, conf: Optional[Dict[str, Any]] = None) -> None:
        self.logger = logger
        self.args = args
        self.conf = conf or {}

    # -- inputs -------------------------------------------------------------

    def _get(self, key: str) -> Any:
        return _merged_get(self.args, self.conf, key)

    def _scope(self) -> RegistrationScope:
        return RegistrationScope.parse(self._get("scope") or "user")

    def _scheme(self) -> str:
        return str(self._get("scheme") or "")

    def _name(self) -> str:
        name = self._get("name")
        return str(name) if _require(name) else normalize_scheme(self._scheme())

    def _arguments(self) -> Optional[ArgumentSpec]:
        n = self._get("args")
        if n is not None:
            return PositionalArgs(int(n))
        text = self._get("arguments")
        if text is not None:
            return LiteralArgs(str(text))
        return None

    def _icon(self) -> Optional[IconRef]:
        icon = self._get("icon")
        if not _require(icon):
            return None
        return IconRef(file=str(icon), index=int(self._get("icon_index") or 0))

    def _port(self) -> Optional[int]:
        port = self._get("port")
        return None if port is None else int(port)

    def _emit(self, payload: Any, text: str) -> None:
        if getattr(self.args, "json", False):
            print(U.json_dump(payload))
        else:
            print(text)

    # -- dispatch -----------------------------------------------------------

    def run(self) -> int:
        cmd = _merged_cmd(self.args, self.conf)
        if cmd == "parse":
            return self._cmd_parse()

        handlers: Dict[str, Callable[[UriSchemeManager], int]] = {
            "register": self._cmd_register,
            "update": self._cmd_update,
            "unregister": self._cmd_unregister,
            "exists": self._cmd_exists,
            "show": self._cmd_show,
        }
        fn = handlers.get(str(cmd))
        if fn is None:
            U.die(self.logger, f"Unknown cmd={cmd!r}", 2)

        with build_store(self.args, self.conf, self.logger) as store:
            registrar = SchemeRegistrar(store, logger=self.logger.getChild("registrar"))
            manager = UriSchemeManager(
                registrar,
                throw_errors=not bool(self._get("no_throw")),
                logger=self.logger.getChild("manager"),
            )
            Log.step(self.logger, f"{cmd} via {store.name} store", scope=self._scope().name.lower())
            return fn(manager)  # type: ignore[misc]

    def _cmd_register(self, m: UriSchemeManager) -> int:
        scope = self._scope()
        port = self._port()
        args = self._arguments()
        if port is not None:
            ok = m.register_networked(self._scheme(), str(self._get("path")), port, self._name(), args, self._icon(), scope)
        else:
            ok = m.register(
                self._scheme(),
                str(self._get("path")),
                scope,
                args,
                self._icon(),
                handler_name=self._get("name") or None,
            )
        if ok:
            Log.ok(self.logger, f"Registered {normalize_scheme(self._scheme())!r} as {self._name()!r}")
        return 0 if ok else 1

    def _cmd_update(self, m: UriSchemeManager) -> int:
        path = self._get("path")
        ok = m.update(
            self._scheme(),
            self._name(),
            self._scope(),
            path=str(path) if _require(path) else None,
            arguments=self._arguments(),
            icon=self._icon(),
            port=self._port(),
        )
        if ok:
            Log.ok(self.logger, f"Updated {self._name()!r}")
        return 0 if ok else 1

    def _cmd_unregister(self, m: UriSchemeManager) -> int:
        ok = m.unregister(self._scheme(), self._name(), self._scope(), port=self._port())
        if ok:
            Log.ok(self.logger, f"Unregistered {self._name()!r}")
        return 0 if ok else 1

    def _cmd_exists(self, m: UriSchemeManager) -> int:
        scheme = normalize_scheme(self._scheme())
        found = m.exists(self._scheme(), self._name(), self._scope(), port=self._port())
        self._emit(
            {"scheme": scheme, "name": self._name(), "scope": self._scope().name.lower(), "exists": found},
            f"{scheme}: {'registered' if found else 'not registered'}",
        )
        return 0 if found else 1

    def _cmd_show(self, m: UriSchemeManager) -> int:
        scope = self._scope()
        rec = m.read_back(self._name(), scope)
        if rec is None:
            self.logger.warning("No registration named %r %s", self._name(), scope.name.lower())
            return 1
        if getattr(self.args, "json", False):
            print(U.json_dump({"name": self._name(), "scope": scope.name.lower(), **rec.to_dict()}))
            return 0
        self._render_table(rec, scope)
        return 0

    def _render_table(self, rec: SchemeRecord, scope: RegistrationScope) -> None:
        require_rich()
        table = Table(title=f"{resolve_root(scope)}\\{self._name()}", show_header=True, header_style="bold cyan")
        table.add_column("Field", style="bold")
        table.add_column("Value")
        table.add_row("scheme", rec.scheme)
        table.add_row("executable", rec.executable_path)
        table.add_row("arguments", rec.arguments.kind)
        table.add_row("command", rec.command_value)
        table.add_row("icon", rec.icon.to_value() if rec.icon else "-")
        Console().print(table)

    def _cmd_parse(self) -> int:
        uris: List[str] = list(getattr(self.args, "uris", None) or self.conf.get("uris") or [])
        records = parse_uris(uris)
        if len(records) < len(uris):
            self.logger.warning("Skipped %d unparsable URI(s)", len(uris) - len(records))
        print(U.json_dump([{**r.to_dict(), "parameters": query_arguments(r)} for r in records]))
        return 0 if records else 1
