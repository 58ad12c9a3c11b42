# SPDX-License-Identifier: LGPL-3.0-or-later
# urischeme/core/logger.py
"""
Logging for urischeme.

Everything logs under the "urischeme" logger tree. Log.setup() installs the
handlers once per process (CLI), library users may configure logging
themselves and simply never call it.

Records may carry a `ctx` dict (via Log.bind() or the Log.step/ok/warn/fail
helpers); both formatters render it: as trailing key=value pairs on the
console, as a nested object in NDJSON.
"""
from __future__ import annotations

import datetime as _dt
import json
import logging
import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Set, Tuple, Union

from termcolor import colored as _colored

TRACE = 5
if logging.getLevelName(TRACE) != "TRACE":
    logging.addLevelName(TRACE, "TRACE")

# levelname -> (emoji, termcolor colour)
_LEVELS: Dict[str, Tuple[str, str]] = {
    "TRACE": ("🧬", "cyan"),
    "DEBUG": ("🔍", "blue"),
    "INFO": ("✅", "green"),
    "WARNING": ("⚠️", "yellow"),
    "ERROR": ("💥", "red"),
    "CRITICAL": ("🧨", "red"),
}


def c(text: str, color: Optional[str] = None, attrs: Optional[list] = None, *, enable: bool = True) -> str:
    """termcolor.colored(), or the plain text when colouring is off."""
    if not (enable and color):
        return text
    try:
        return _colored(text, color=color, attrs=attrs or [])
    except (KeyError, ValueError):
        return text


def _stream_is_tty(stream: Any) -> bool:
    isatty = getattr(stream, "isatty", None)
    try:
        return bool(isatty and isatty())
    except ValueError:  # closed stream
        return False


def _emoji_ok(stream: Any = None) -> bool:
    enc = getattr(stream or sys.stderr, "encoding", None) or "utf-8"
    try:
        "✅".encode(enc)
    except (LookupError, UnicodeEncodeError):
        return False
    return True


def _short(v: Any, limit: int = 200) -> str:
    s = str(v).replace("\r", "\\r").replace("\n", "\\n")
    return s if len(s) <= limit else s[: limit - 1] + "…"


def _kv(ctx: Optional[Mapping[str, Any]]) -> str:
    if not ctx:
        return ""
    return "".join(f" {_short(k, 60)}={_short(ctx[k])}" for k in sorted(ctx, key=str))


class ContextLoggerAdapter(logging.LoggerAdapter):
    """
    Adapter that stamps a fixed context onto every record:

      log = Log.bind(logger, scheme="myapp", scope="user")
      log.info("Writing command")          # ... scheme=myapp scope=user
      log.bind(handler="MyApp").debug("x")  # ... handler=MyApp scheme=myapp scope=user
    """

    def __init__(self, logger: logging.Logger, ctx: Optional[Mapping[str, Any]] = None) -> None:
        super().__init__(logger, {"ctx": dict(ctx or {})})

    def process(self, msg: Any, kwargs: Dict[str, Any]) -> Tuple[Any, Dict[str, Any]]:
        extra = dict(kwargs.get("extra") or {})
        extra["ctx"] = {**self.extra["ctx"], **(extra.get("ctx") or {})}
        kwargs["extra"] = extra
        return msg, kwargs

    def bind(self, **ctx: Any) -> "ContextLoggerAdapter":
        return ContextLoggerAdapter(self.logger, {**self.extra["ctx"], **ctx})


@dataclass(frozen=True)
class LogStyle:
    color: bool = True
    unicode: bool = True
    show_ms: bool = False
    show_logger: bool = False
    show_src: bool = False
    level_width: int = 8


class EmojiFormatter(logging.Formatter):
    """HH:MM:SS <emoji> LEVEL [logger file:line] message key=value..."""

    def __init__(self, style: LogStyle) -> None:
        super().__init__()
        self.style = style

    def format(self, record: logging.LogRecord) -> str:
        st = self.style
        emoji, colour = _LEVELS.get(record.levelname, ("•", ""))
        colour_on = st.color and _stream_is_tty(sys.stderr)

        when = _dt.datetime.fromtimestamp(record.created)
        ts = when.strftime("%H:%M:%S.%f")[:-3] if st.show_ms else when.strftime("%H:%M:%S")

        level = c(f"{record.levelname:<{st.level_width}}", colour, enable=colour_on)
        msg = record.getMessage()
        if record.levelno >= logging.WARNING:
            msg = c(msg, colour, ["bold"], enable=colour_on)

        where = [record.name] if st.show_logger else []
        if st.show_src:
            where.append(f"{record.module}:{record.lineno}")
        where_s = f"[{' '.join(where)}] " if where else ""

        line = f"{ts} {emoji if st.unicode else '·'} {level}{where_s}{msg}{_kv(getattr(record, 'ctx', None))}"
        if record.exc_info:
            tb = "\n".join("  " + ln for ln in self.formatException(record.exc_info).splitlines())
            line += "\n" + c(tb, "red", enable=colour_on)
        return line


class JsonFormatter(logging.Formatter):
    """One JSON object per line, for --json-logs and log shippers."""

    def __init__(self, *, utc: bool = True) -> None:
        super().__init__()
        self.utc = utc

    def format(self, record: logging.LogRecord) -> str:
        tz = _dt.timezone.utc if self.utc else None
        obj: Dict[str, Any] = {
            "ts": _dt.datetime.fromtimestamp(record.created, tz=tz).isoformat(timespec="milliseconds"),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
            "src": f"{record.module}:{record.lineno}",
        }
        ctx = getattr(record, "ctx", None)
        if ctx:
            obj["ctx"] = dict(ctx)
        if record.exc_info and record.exc_info[0] is not None:
            obj["exc_type"] = record.exc_info[0].__name__
            obj["traceback"] = self.formatException(record.exc_info)
        return json.dumps(obj, ensure_ascii=False, default=_short)


_warned: Set[str] = set()


class Log:
    @staticmethod
    def _level_from_flags(verbose: int, quiet: int) -> int:
        # -q / -qq beat any -v.  -v alone stays at INFO.
        if quiet:
            return logging.ERROR if quiet >= 2 else logging.WARNING
        if verbose >= 3:
            return TRACE
        return logging.DEBUG if verbose == 2 else logging.INFO

    @staticmethod
    def bind(logger: logging.Logger, **ctx: Any) -> ContextLoggerAdapter:
        return ContextLoggerAdapter(logger, ctx)

    @staticmethod
    def _emit(logger: logging.Logger, level: int, mark: str, msg: str, ctx: Dict[str, Any]) -> None:
        logger.log(level, "%s %s", mark, msg, extra={"ctx": ctx} if ctx else None)

    @staticmethod
    def step(logger: logging.Logger, msg: str, **ctx: Any) -> None:
        Log._emit(logger, logging.INFO, "➡️ ", msg, ctx)

    @staticmethod
    def ok(logger: logging.Logger, msg: str, **ctx: Any) -> None:
        Log._emit(logger, logging.INFO, "✅", msg, ctx)

    @staticmethod
    def warn(logger: logging.Logger, msg: str, **ctx: Any) -> None:
        Log._emit(logger, logging.WARNING, "⚠️ ", msg, ctx)

    @staticmethod
    def fail(logger: logging.Logger, msg: str, **ctx: Any) -> None:
        Log._emit(logger, logging.ERROR, "💥", msg, ctx)

    @staticmethod
    def warn_once(logger: logging.Logger, key: Union[str, Tuple[Any, ...]], msg: str, **ctx: Any) -> bool:
        """Warn once per process for `key`; True when the warning was emitted."""
        k = key if isinstance(key, str) else "|".join(map(str, key))
        if k in _warned:
            return False
        _warned.add(k)
        Log.warn(logger, msg, **ctx)
        return True

    @staticmethod
    def setup(
        verbose: int = 0,
        log_file: Optional[str] = None,
        *,
        quiet: int = 0,
        color: bool = True,
        logger_name: str = "urischeme",
        json_logs: bool = False,
    ) -> logging.Logger:
        """
        (Re)configure `logger_name`: one stderr handler plus an optional
        log file. Calling it again replaces the previous handlers.

        The file always gets full detail (ms timestamps, logger, source
        line, no colours) unless json_logs is set, in which case both
        handlers write NDJSON.
        """
        logger = logging.getLogger(logger_name)
        logger.propagate = False
        level = Log._level_from_flags(verbose, quiet)
        logger.setLevel(level)

        for old in list(logger.handlers):
            logger.removeHandler(old)
            old.close()

        unicode_ok = _emoji_ok()
        handlers = []

        console = logging.StreamHandler(sys.stderr)
        console.setFormatter(
            JsonFormatter()
            if json_logs
            else EmojiFormatter(
                LogStyle(
                    color=color,
                    unicode=unicode_ok,
                    show_ms=verbose >= 3,
                    show_logger=verbose >= 2,
                    show_src=verbose >= 3,
                )
            )
        )
        handlers.append(console)

        if log_file:
            path = Path(log_file).expanduser().resolve()
            path.parent.mkdir(parents=True, exist_ok=True)
            fh = logging.FileHandler(path, encoding="utf-8")
            fh.setFormatter(
                JsonFormatter()
                if json_logs
                else EmojiFormatter(LogStyle(color=False, unicode=unicode_ok, show_ms=True, show_logger=True, show_src=True))
            )
            handlers.append(fh)

        for h in handlers:
            h.setLevel(level)
            logger.addHandler(h)

        logger.debug("Logging configured: level=%s pid=%d", logging.getLevelName(level), os.getpid())
        return logger
