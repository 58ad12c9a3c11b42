# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# urischeme/scheme/parser.py
"""
Turn URIs received on a handler's command line back into SchemeRecords.

When the OS launches a registered handler it passes the clicked URI as an
argument ("%1"). parse_uri() maps such a URI onto the record model:

    myapp://host/some/path?x=1&y=2
      scheme          -> "myapp"
      executable_path -> "host/some/path"
      arguments       -> LiteralArgs("x=1&y=2")
"""
from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Optional
from urllib.parse import parse_qs, urlsplit

from ..core.exceptions import InvalidArgumentError
from .record import IconRef, LiteralArgs, NoArgs, SchemeRecord, is_valid_scheme

logger = logging.getLogger("urischeme.parser")


def parse_uri(arg: Optional[str]) -> Optional[SchemeRecord]:
    """Parse one URI; None when it has no usable scheme or a bad port."""
    if arg is None or not str(arg).strip():
        raise InvalidArgumentError(msg="URI argument must not be empty")

    text = str(arg).strip()
    try:
        parts = urlsplit(text)
        port = parts.port
    except ValueError as e:
        logger.debug("Unparsable URI %r: %s", text, e)
        return None

    if not is_valid_scheme(parts.scheme):
        logger.debug("URI %r has no valid scheme", text)
        return None
    if port is not None and not 1 <= port <= 65535:
        logger.debug("URI %r has an invalid port", text)
        return None

    local_path = f"{parts.netloc}{parts.path}"

    return SchemeRecord(
        scheme=parts.scheme,
        executable_path=local_path,
        port=port,
        arguments=LiteralArgs(parts.query) if parts.query else NoArgs(),
        icon=IconRef(file=local_path, index=0) if local_path else None,
    )


def parse_uris(args: Iterable[Optional[str]]) -> List[SchemeRecord]:
    """Best effort: entries that do not parse are skipped."""
    out: List[SchemeRecord] = []
    for arg in args or ():
        try:
            rec = parse_uri(arg)
        except InvalidArgumentError:
            continue
        if rec is not None:
            out.append(rec)
    return out


def query_arguments(record: SchemeRecord) -> Dict[str, List[str]]:
    """Query parameters carried by a parsed record (empty when there are none)."""
    if not isinstance(record.arguments, LiteralArgs):
        return {}
    return parse_qs(record.arguments.text, keep_blank_values=True)
