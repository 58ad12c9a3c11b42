# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# urischeme/core/optional_imports.py
"""
Centralized optional imports.

Store backends and output helpers import from here instead of carrying their
own try/except import guards. Platform-only modules (winreg) and native
bindings (hivex) are optional; everything that uses them calls the matching
require_*() first so a missing dependency fails with an install hint.
"""

from __future__ import annotations

# Rich library (tables, console formatting)
try:
    from rich.console import Console
    from rich.table import Table

    RICH_AVAILABLE = True
except Exception:
    Console = None  # type: ignore
    Table = None  # type: ignore
    RICH_AVAILABLE = False

# PyYAML (config files)
try:
    import yaml

    YAML_AVAILABLE = True
except Exception:
    yaml = None  # type: ignore
    YAML_AVAILABLE = False

# python-hivex (offline registry hive editing)
try:
    import hivex  # type: ignore

    HIVEX_AVAILABLE = True
except Exception:
    hivex = None  # type: ignore
    HIVEX_AVAILABLE = False

# winreg (live Windows registry; stdlib on Windows only)
try:
    import winreg  # type: ignore

    WINREG_AVAILABLE = True
except Exception:
    winreg = None  # type: ignore
    WINREG_AVAILABLE = False


def require_rich() -> None:
    """Raise ImportError if Rich is not available."""
    if not RICH_AVAILABLE:
        raise ImportError(
            "Rich library is required but not installed. "
            "Install with: pip install rich"
        )


def require_yaml() -> None:
    """Raise ImportError if PyYAML is not available."""
    if not YAML_AVAILABLE:
        raise ImportError(
            "PyYAML is required to read YAML config files. "
            "Install with: pip install pyyaml"
        )


def require_hivex() -> None:
    """Raise ImportError if python-hivex is not available."""
    if not HIVEX_AVAILABLE:
        raise ImportError(
            "python-hivex is required for offline hive editing but not installed. "
            "Install with: pip install 'urischeme[hive]' (needs libhivex)"
        )


def require_winreg() -> None:
    """Raise ImportError if the winreg module is not available (non-Windows)."""
    if not WINREG_AVAILABLE:
        raise ImportError(
            "winreg is only available on Windows. "
            "Use --store file or --store hive on other platforms."
        )
