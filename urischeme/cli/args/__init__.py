# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# urischeme/cli/args/__init__.py
"""
Argument parsing for the urischeme CLI, split by concern:

- builder: help formatter and epilog
- groups: argparse option groups
- helpers: CLI/config merge helpers
- validators: per-command input checks
- parser: the two-phase parse entry point
"""
from __future__ import annotations

from .builder import HelpFormatter, _build_epilog
from .groups import COMMANDS, STORES
from .helpers import _merged_cmd, _merged_get, _merged_store, _require
from .parser import _build_preparser, _load_merged_config, build_parser, parse_args_with_config
from .validators import validate_args

__all__ = [
    "COMMANDS",
    "STORES",
    "HelpFormatter",
    "_build_epilog",
    "_build_preparser",
    "_load_merged_config",
    "_merged_cmd",
    "_merged_get",
    "_merged_store",
    "_require",
    "build_parser",
    "parse_args_with_config",
    "validate_args",
]
