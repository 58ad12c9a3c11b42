# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# urischeme/config/config_loader.py
"""
Config file loading for the two-phase CLI parse.

Config files are YAML (PyYAML) or JSON mappings. Several files can be given;
they are deep-merged in order, so later files override earlier ones. The
merged mapping is then applied as argparse defaults, which lets the command
line override anything a config file sets.

Example (register.yaml):

    cmd: register
    scheme: myapp
    path: C:\\Program Files\\MyApp\\myapp.exe
    name: MyApp
    scope: user
    args: 1
"""
from __future__ import annotations

import argparse
import glob
import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Sequence

from ..core.optional_imports import require_yaml, yaml
from ..core.utils import U

_YAML_SUFFIXES = (".yaml", ".yml")


def _deep_merge(base: Dict[str, Any], over: Dict[str, Any]) -> Dict[str, Any]:
    out = dict(base)
    for k, v in over.items():
        if isinstance(v, dict) and isinstance(out.get(k), dict):
            out[k] = _deep_merge(out[k], v)
        else:
            out[k] = v
    return out


def _norm_key(k: Any) -> str:
    return str(k).strip().replace("-", "_")


class Config:
    @staticmethod
    def expand_configs(logger: logging.Logger, paths: Sequence[str]) -> List[str]:
        """Expand ~ and globs; keep order, drop duplicates. A pattern that matches nothing is kept verbatim."""
        out: List[str] = []
        seen = set()
        for raw in paths:
            if not raw:
                continue
            p = os.path.expanduser(os.path.expandvars(str(raw)))
            matches = sorted(glob.glob(p)) if glob.has_magic(p) else [p]
            if not matches:
                logger.warning("Config pattern matched nothing: %s", raw)
                continue
            for m in matches:
                if m not in seen:
                    seen.add(m)
                    out.append(m)
        logger.debug("Config files: %s", out)
        return out

    @staticmethod
    def load_one(logger: logging.Logger, path: str) -> Dict[str, Any]:
        p = Path(path)
        if not p.is_file():
            U.die(logger, f"Config file not found: {path}", 1)
        text = p.read_text(encoding="utf-8")
        try:
            if p.suffix.lower() in _YAML_SUFFIXES:
                require_yaml()
                data = yaml.safe_load(text)
            elif p.suffix.lower() == ".json":
                data = json.loads(text) if text.strip() else None
            else:
                # Unknown suffix: JSON is valid YAML, so YAML covers both.
                require_yaml()
                data = yaml.safe_load(text)
        except ImportError as e:
            U.die(logger, f"Cannot read {path}: {e}", 1)
        except Exception as e:
            U.die(logger, f"Failed to parse config {path}: {e}", 1)

        if data is None:
            logger.debug("Config %s is empty", path)
            return {}
        if not isinstance(data, dict):
            U.die(logger, f"Config {path}: top level must be a mapping, got {type(data).__name__}", 1)
        return {_norm_key(k): v for k, v in data.items()}

    @staticmethod
    def load_many(logger: logging.Logger, paths: Sequence[str]) -> Dict[str, Any]:
        conf: Dict[str, Any] = {}
        for path in paths:
            conf = _deep_merge(conf, Config.load_one(logger, path))
            logger.debug("Merged config %s", path)
        return conf

    @staticmethod
    def apply_as_defaults(logger: logging.Logger, parser: argparse.ArgumentParser, conf: Dict[str, Any]) -> None:
        """Set parser defaults from config keys that name a parser dest; report the rest at debug level."""
        dests = {a.dest for a in parser._actions if a.dest and a.dest != argparse.SUPPRESS}
        defaults: Dict[str, Any] = {}
        for k, v in (conf or {}).items():
            key = _norm_key(k)
            if key in dests:
                defaults[key] = v
            else:
                logger.debug("Config key %r is not a CLI option; ignored", k)
        if defaults:
            parser.set_defaults(**defaults)
            logger.debug("Applied config defaults: %s", sorted(defaults))
