# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# urischeme/cli/args/builder.py
from __future__ import annotations

import argparse

from ...core.logger import c
from ..help_texts import CLI_EXAMPLES, FEATURE_SUMMARY, YAML_EXAMPLE


class HelpFormatter(argparse.RawDescriptionHelpFormatter, argparse.ArgumentDefaultsHelpFormatter):
    """Raw description formatting plus default values in help."""


def _build_epilog() -> str:
    return (
        c("Feature summary:\n", "cyan", ["bold"])
        + c(FEATURE_SUMMARY, "cyan")
        + "\n"
        + c(CLI_EXAMPLES, "cyan")
        + "\n"
        + c("YAML examples:\n", "cyan", ["bold"])
        + c(YAML_EXAMPLE, "cyan")
    )
