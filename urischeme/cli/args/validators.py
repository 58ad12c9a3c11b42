# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# urischeme/cli/args/validators.py
from __future__ import annotations

import argparse
from typing import Any, Dict

from .groups import COMMANDS
from .helpers import _merged_cmd, _merged_get, _merged_store, _require


def _need(args: argparse.Namespace, conf: Dict[str, Any], key: str, cmd: str, flag: str) -> None:
    if not _require(_merged_get(args, conf, key)):
        raise SystemExit(f"cmd={cmd}: missing required `{key}:` (YAML) or CLI {flag}")


def _validate_cmd_register(args: argparse.Namespace, conf: Dict[str, Any]) -> None:
    _need(args, conf, "scheme", "register", "--scheme")
    _need(args, conf, "path", "register", "--path")


def _validate_cmd_update(args: argparse.Namespace, conf: Dict[str, Any]) -> None:
    _need(args, conf, "scheme", "update", "--scheme")
    changes = ("path", "args", "arguments", "icon", "port")
    if not any(_require(_merged_get(args, conf, k)) for k in changes):
        raise SystemExit("cmd=update: nothing to change (set --path, --args, --arguments, --icon or --port)")


def _validate_cmd_scheme_only(cmd: str):
    def _check(args: argparse.Namespace, conf: Dict[str, Any]) -> None:
        _need(args, conf, "scheme", cmd, "--scheme")

    return _check


def _validate_cmd_show(args: argparse.Namespace, conf: Dict[str, Any]) -> None:
    if not (_require(_merged_get(args, conf, "name")) or _require(_merged_get(args, conf, "scheme"))):
        raise SystemExit("cmd=show: missing required `name:` or `scheme:` (YAML) or CLI --name/--scheme")


def _validate_cmd_parse(args: argparse.Namespace, conf: Dict[str, Any]) -> None:
    if not (getattr(args, "uris", None) or conf.get("uris")):
        raise SystemExit("cmd=parse: pass one or more URIs (positional) or `uris:` (YAML)")


def _validate_store(args: argparse.Namespace, conf: Dict[str, Any]) -> None:
    store = _merged_store(args, conf)
    if store is None:
        raise SystemExit("No registry store available on this platform; pass --store file|hive|memory")
    if store == "file":
        if not _require(_merged_get(args, conf, "store_file")):
            raise SystemExit("store=file: missing required `store_file:` (YAML) or CLI --store-file")
    elif store == "hive":
        if not (_require(_merged_get(args, conf, "user_hive")) or _require(_merged_get(args, conf, "software_hive"))):
            raise SystemExit("store=hive: set --user-hive and/or --software-hive")


def validate_args(args: argparse.Namespace, conf: Dict[str, Any]) -> None:
    """
    YAML drives the operation (`cmd:`), the CLI can override it.
    Only checks presence of inputs; value validation happens in the registrar.
    """
    cmd = _merged_cmd(args, conf)
    if not _require(cmd):
        raise SystemExit(f"Missing required YAML key `cmd:` or CLI --cmd. One of: {', '.join(COMMANDS)}.")

    validators = {
        "register": _validate_cmd_register,
        "update": _validate_cmd_update,
        "unregister": _validate_cmd_scheme_only("unregister"),
        "exists": _validate_cmd_scheme_only("exists"),
        "show": _validate_cmd_show,
        "parse": _validate_cmd_parse,
    }
    fn = validators.get(str(cmd))
    if fn is None:
        raise SystemExit(f"Unknown cmd={cmd!r}. Set YAML `cmd:` to one of: {', '.join(COMMANDS)}.")
    fn(args, conf)

    if cmd != "parse":
        _validate_store(args, conf)
