# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# urischeme/store/hive/encoding.py
"""
hivex plumbing for HiveStore.

python-hivex hands out plain integers for nodes and values, 0 meaning
"no such node". Scheme registrations only ever need REG_SZ values, stored
as NUL-terminated UTF-16LE.
"""
from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Iterable, Optional

from ...core.optional_imports import hivex, require_hivex

REG_SZ = 1

# Smallest valid hive: a 4 KiB base block plus one hbin.
_MIN_HIVE_SIZE = 4096
_REGF_MAGIC = b"regf"


def _is_probably_regf(path: Path) -> bool:
    try:
        with open(path, "rb") as f:
            return f.read(len(_REGF_MAGIC)) == _REGF_MAGIC
    except OSError:
        return False


def _node_id(n: Any) -> int:
    try:
        return int(n or 0)
    except (TypeError, ValueError):
        return 0


def _node_ok(n: Any) -> bool:
    return _node_id(n) != 0


def _reg_sz(s: str) -> bytes:
    return f"{s}\0".encode("utf-16le", errors="ignore")


def _decode_reg_sz(raw: bytes) -> str:
    # Odd byte counts cannot be UTF-16; some third-party writers store UTF-8.
    codec = "utf-16le" if len(raw) % 2 == 0 else "utf-8"
    return raw.decode(codec, errors="ignore").rstrip("\0")


def _set_sz(h: Any, node: Any, name: str, text: str) -> None:
    nid = _node_id(node)
    if not nid:
        raise RuntimeError(f"cannot set {name!r}: no such hive node")
    h.node_set_value(nid, {"key": name, "t": REG_SZ, "value": _reg_sz(text)})


def _read_sz(h: Any, node: Any, name: str) -> Optional[str]:
    """String value `name` of `node`; None when absent, "" stays ""."""
    nid = _node_id(node)
    vid = _node_id(h.node_get_value(nid, name)) if nid else 0
    if not vid:
        return None
    _type, raw = h.value_value(vid)
    if raw is None:
        return None
    return _decode_reg_sz(bytes(raw)) if isinstance(raw, (bytes, bytearray)) else str(raw)


def _walk(h: Any, start: Any, parts: Iterable[str], *, create: bool) -> int:
    """Follow `parts` below `start`; with create=True missing keys are added."""
    node = _node_id(start)
    for part in parts:
        child = _node_id(h.node_get_child(node, part))
        if not child and create:
            child = _node_id(h.node_add_child(node, part))
            if not child:
                raise RuntimeError(f"hivex refused to create key {part!r}")
        if not child:
            return 0
        node = child
    return node


def _delete_node(h: Any, node: Any, *, logger: Optional[logging.Logger] = None) -> None:
    # hivex removes the whole subtree with the node.
    nid = _node_id(node)
    if not nid:
        raise RuntimeError("cannot delete: no such hive node")
    h.node_delete_child(nid)
    if logger is not None:
        logger.debug("Removed hive node %d and its subkeys", nid)


def _open_hive_local(path: Path, *, write: bool) -> Any:
    """hivex.Hivex for a local hive file, after basic sanity checks."""
    require_hivex()
    path = Path(path)
    if not path.is_file():
        raise FileNotFoundError(f"hive file missing: {path}")
    size = path.stat().st_size
    if size < _MIN_HIVE_SIZE or not _is_probably_regf(path):
        raise RuntimeError(f"not a registry hive ({size} bytes, no regf header): {path}")
    if write and not os.access(path, os.W_OK):
        raise PermissionError(f"hive file is not writable: {path}")
    return hivex.Hivex(str(path), write=write)


def _binding_call(h: Any, names: Iterable[str]) -> Any:
    # Older python-hivex builds only expose the hivex_* spellings.
    for name in names:
        fn = getattr(h, name, None)
        if callable(fn):
            return fn
    return None


def _commit(h: Any) -> None:
    fn = _binding_call(h, ("commit", "hivex_commit"))
    if fn is None:
        raise RuntimeError("python-hivex handle has no commit method")
    try:
        fn(None)  # None: write back to the file it was opened from
    except TypeError:
        fn()


def _close_best_effort(h: Optional[Any], *, logger: Optional[logging.Logger] = None) -> None:
    fn = _binding_call(h, ("close", "hivex_close")) if h is not None else None
    if fn is None:
        return
    try:
        fn()
    except (RuntimeError, OSError) as e:
        if logger is not None:
            logger.debug("Ignoring hive close failure: %s", e)
