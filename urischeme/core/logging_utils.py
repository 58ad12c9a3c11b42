# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# urischeme/core/logging_utils.py
"""
Helpers for logging registry operations: every engine mutation runs inside
log_step(), which reports start, duration and outcome with the handler /
scope context attached to each record.
"""
from __future__ import annotations

import logging
import time
from contextlib import contextmanager
from typing import Any, Dict, Iterator, Optional, Union

AnyLogger = Union[logging.Logger, logging.LoggerAdapter]

_LEVEL_MARKS = ((logging.ERROR, "❌"), (logging.WARNING, "⚠️"), (logging.INFO, "✅"))


def safe_logger(instance: Any, default_name: str = "urischeme") -> AnyLogger:
    """`instance.logger` when it is a usable logger, else logging.getLogger(default_name)."""
    lg = getattr(instance, "logger", None)
    if isinstance(lg, (logging.Logger, logging.LoggerAdapter)):
        return lg
    return logging.getLogger(default_name)


def emoji_for_level(level: int) -> str:
    for floor, mark in _LEVEL_MARKS:
        if level >= floor:
            return mark
    return "🔍"


def log_with_emoji(logger: Any, level: int, msg: str, *args: Any, ctx: Optional[Dict[str, Any]] = None) -> None:
    logger.log(level, f"{emoji_for_level(level)} {msg}", *args, extra={"ctx": ctx} if ctx else None)


def _error_kind(e: BaseException) -> str:
    # Project errors carry an exit code; show it so logs match the CLI status.
    code = getattr(e, "code", None)
    return f"{type(e).__name__}[{code}]" if isinstance(code, int) else type(e).__name__


@contextmanager
def log_step(
    logger: Any,
    description: str,
    *,
    level: int = logging.INFO,
    start_level: int = logging.DEBUG,
    **ctx: Any,
) -> Iterator[None]:
    """
    Wrap one registry operation:

        with log_step(logger, "Registering 'myapp'", handler="MyApp", scope="user"):
            ...store writes...

    Start is logged at `start_level`, success at `level` with the elapsed
    time. A failure is logged at ERROR with the exception type and re-raised
    untouched.
    """
    t0 = time.monotonic()
    log_with_emoji(logger, start_level, "%s ...", description, ctx=ctx)
    try:
        yield
    except Exception as e:
        log_with_emoji(
            logger,
            logging.ERROR,
            "%s failed after %.2fs: %s: %s",
            description,
            time.monotonic() - t0,
            _error_kind(e),
            e,
            ctx=ctx,
        )
        raise
    log_with_emoji(logger, level, "%s done (%.2fs)", description, time.monotonic() - t0, ctx=ctx)
