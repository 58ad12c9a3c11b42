# SPDX-License-Identifier: LGPL-3.0-or-later
# urischeme/store/hive/__init__.py
"""
Offline registry hive editing (hivex).

- encoding: REG_SZ encoding and hivex node helpers
- store: HiveStore, a RegistryStore over NTUSER.DAT / SOFTWARE files
"""
from .store import HiveStore

__all__ = ["HiveStore"]
