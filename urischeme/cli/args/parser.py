# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# urischeme/cli/args/parser.py
from __future__ import annotations

import argparse
import logging
import sys
from typing import Any, Dict, Optional, Sequence, Tuple

from ...config.config_loader import Config
from ...core.logger import Log, c
from ...core.utils import U
from .builder import HelpFormatter, _build_epilog
from .groups import (
    _add_global_config_logging,
    _add_handler_command,
    _add_parse_inputs,
    _add_project_control,
    _add_scheme_identity,
    _add_store_selection,
)
from .validators import validate_args


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="urischeme",
        description=c("urischeme: register custom URI scheme handlers in the Windows registry", "green", ["bold"]),
        formatter_class=HelpFormatter,
        epilog=_build_epilog(),
    )

    _add_global_config_logging(p)
    _add_project_control(p)
    _add_scheme_identity(p)
    _add_handler_command(p)
    _add_store_selection(p)
    _add_parse_inputs(p)
    return p


def _build_preparser() -> argparse.ArgumentParser:
    # No abbreviations: "--json" must not be read as "--json-logs".
    pre = argparse.ArgumentParser(add_help=False, allow_abbrev=False)
    pre.add_argument("--config", action="append", default=[])
    pre.add_argument("-v", "--verbose", action="count", default=0)
    pre.add_argument("-q", "--quiet", action="count", default=0)
    pre.add_argument("--log-file", dest="log_file", default=None)
    pre.add_argument("--json-logs", dest="json_logs", action="store_true")
    pre.add_argument("--dump-config", action="store_true")
    pre.add_argument("--dump-args", action="store_true")
    return pre


def _load_merged_config(logger: logging.Logger, cfgs: Sequence[str]) -> Dict[str, Any]:
    files = Config.expand_configs(logger, list(cfgs)) if cfgs else []
    return Config.load_many(logger, files) if files else {}


def parse_args_with_config(
    argv: Optional[Sequence[str]] = None,
    logger: Optional[logging.Logger] = None,
) -> Tuple[argparse.Namespace, Dict[str, Any], logging.Logger]:
    """
    Parse the command line in two passes.

    The first pass only looks at --config and the logging flags so logging
    is up before any config file is read. The merged config then becomes the
    parser's defaults, which lets every CLI flag override its YAML key, and
    the second pass parses everything. `cmd` may come from either side.

    Returns (args, merged config, logger). --dump-config / --dump-args print
    and exit 0; validation errors exit via SystemExit(message).
    """
    argv = list(sys.argv[1:] if argv is None else argv)
    early, _ = _build_preparser().parse_known_args(argv)

    if logger is None:
        logger = Log.setup(early.verbose, early.log_file, quiet=early.quiet, json_logs=early.json_logs)

    conf = _load_merged_config(logger, early.config)
    if early.dump_config:
        print(U.json_dump(conf))
        raise SystemExit(0)

    parser = build_parser()
    Config.apply_as_defaults(logger, parser, conf)
    args = parser.parse_args(argv)

    if early.dump_args:
        print(U.json_dump(vars(args)))
        raise SystemExit(0)

    validate_args(args, conf)
    return args, conf, logger
