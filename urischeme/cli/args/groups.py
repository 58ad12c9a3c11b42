# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# urischeme/cli/args/groups.py
from __future__ import annotations

import argparse

COMMANDS = ("register", "unregister", "update", "exists", "show", "parse")
STORES = ("winreg", "hive", "file", "memory")


def _add_global_config_logging(p: argparse.ArgumentParser) -> None:
    # ------------------------------------------------------------------
    # Global config/logging (two-phase parse relies on these)
    # ------------------------------------------------------------------
    from ... import __version__

    p.add_argument(
        "--config",
        action="append",
        default=[],
        help="YAML/JSON config file (repeatable; later overrides earlier).",
    )
    p.add_argument("--dump-config", action="store_true", help="Print merged normalized config and exit.")
    p.add_argument("--dump-args", action="store_true", help="Print final parsed args and exit.")
    p.add_argument("--version", action="version", version=__version__)
    p.add_argument("-v", "--verbose", action="count", default=0, help="Verbosity: -v, -vv, -vvv")
    p.add_argument("-q", "--quiet", action="count", default=0, help="Less output: -q warnings only, -qq errors only.")
    p.add_argument("--log-file", dest="log_file", default=None, help="Write logs to file.")
    p.add_argument("--json-logs", dest="json_logs", action="store_true", help="Emit logs as NDJSON.")


def _add_project_control(p: argparse.ArgumentParser) -> None:
    # ------------------------------------------------------------------
    # Operation: YAML-driven (no subcommands)
    # ------------------------------------------------------------------
    p.add_argument(
        "--cmd",
        dest="cmd",
        default=None,
        help=f"Operation (normally from YAML `cmd:`). One of: {', '.join(COMMANDS)}",
    )
    p.add_argument(
        "--no-throw",
        dest="no_throw",
        action="store_true",
        help="Report errors as warnings and a non-zero exit instead of failing (register/update/unregister/exists/show).",
    )
    p.add_argument("--json", dest="json", action="store_true", help="Print results as JSON.")


def _add_scheme_identity(p: argparse.ArgumentParser) -> None:
    # ------------------------------------------------------------------
    # Which registration
    # ------------------------------------------------------------------
    p.add_argument("--scheme", dest="scheme", default=None, help="URI scheme, e.g. myapp (myapp:// and myapp: are accepted).")
    p.add_argument(
        "--name",
        dest="name",
        default=None,
        help="Handler key name under Software\\Classes (default: the scheme).",
    )
    p.add_argument(
        "--scope",
        dest="scope",
        default="user",
        help="user (HKEY_CURRENT_USER) or machine (HKEY_LOCAL_MACHINE).",
    )
    p.add_argument("--port", dest="port", type=int, default=None, help="Port for networked schemes (1-65535).")


def _add_handler_command(p: argparse.ArgumentParser) -> None:
    # ------------------------------------------------------------------
    # What the handler runs
    # ------------------------------------------------------------------
    p.add_argument("--path", dest="path", default=None, help="Handler executable (must exist).")
    g = p.add_mutually_exclusive_group()
    g.add_argument(
        "--args",
        dest="args",
        type=int,
        default=None,
        metavar="N",
        help='Append N quoted placeholders: "%%1" ... "%%N".',
    )
    g.add_argument(
        "--arguments",
        dest="arguments",
        default=None,
        metavar="TEXT",
        help="Append TEXT verbatim after the executable path.",
    )
    p.add_argument("--icon", dest="icon", default=None, help="Icon file (must exist).")
    p.add_argument("--icon-index", dest="icon_index", type=int, default=0, help="Icon resource index.")


def _add_store_selection(p: argparse.ArgumentParser) -> None:
    # ------------------------------------------------------------------
    # Backing store
    # ------------------------------------------------------------------
    p.add_argument(
        "--store",
        dest="store",
        default=None,
        choices=list(STORES),
        help="Registry backend (default: winreg on Windows, otherwise required).",
    )
    p.add_argument("--store-file", dest="store_file", default=None, help="JSON file for --store file.")
    p.add_argument("--user-hive", dest="user_hive", default=None, help="NTUSER.DAT for --store hive --scope user.")
    p.add_argument("--software-hive", dest="software_hive", default=None, help="SOFTWARE hive for --store hive --scope machine.")


def _add_parse_inputs(p: argparse.ArgumentParser) -> None:
    p.add_argument("uris", nargs="*", default=[], help="URIs for --cmd parse.")
