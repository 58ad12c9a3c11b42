# SPDX-License-Identifier: LGPL-3.0-or-later
# urischeme/core/exceptions.py
"""
Error types raised by urischeme.

Every error carries an exit `code` (used by the CLI), a one-line `msg`, the
underlying `cause` (usually an OSError from the registry store) and a
`context` dict (scheme, handler, scope, store ...). Context values whose key
looks like a credential are masked in to_dict() and in CLI output.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Dict, Optional

REDACTED = "***REDACTED***"

_SECRETISH = re.compile(r"pass|secret|token|api_?key|auth|cookie|session|bearer|private", re.IGNORECASE)


def _exit_code(value: Any) -> int:
    try:
        code = int(value)
    except (TypeError, ValueError):
        return 1
    if code < 0:
        return 1
    return min(code, 255)


def _flatten(text: Any, limit: int = 600) -> str:
    s = " ".join(str(text or "").split())
    return s if len(s) <= limit else s[: limit - 3] + "..."


def _is_secret_key(key: Any) -> bool:
    return bool(_SECRETISH.search(str(key)))


def _redact(obj: Any) -> Any:
    if isinstance(obj, dict):
        return {k: REDACTED if _is_secret_key(k) else _redact(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [_redact(v) for v in obj]
    return obj


@dataclass(eq=False)
class UriSchemeError(Exception):
    """Base class; `str(err)` is the flattened message only."""

    code: int = 1
    msg: str = "error"
    cause: Optional[BaseException] = None
    context: Optional[Dict[str, Any]] = None

    def __post_init__(self) -> None:
        self.code = _exit_code(self.code)
        self.msg = _flatten(self.msg) or type(self).__name__
        self.context = dict(self.context or {})
        super().__init__(self.msg)

    def with_context(self, **ctx: Any) -> "UriSchemeError":
        self.context.update(ctx)
        return self

    def user_message(self, *, include_context: bool = False, include_cause: bool = False) -> str:
        out = self.msg
        if include_context and self.context:
            shown = (
                f"{k}=<redacted>" if _is_secret_key(k) else f"{k}={self.context[k]!r}"
                for k in sorted(self.context, key=str)
            )
            out += f" [{_flatten(', '.join(shown))}]"
        if include_cause and self.cause is not None:
            out += f" (cause: {type(self.cause).__name__}: {_flatten(self.cause)})"
        return out

    def __str__(self) -> str:
        return self.msg

    def to_dict(self, *, include_cause: bool = False) -> Dict[str, Any]:
        d: Dict[str, Any] = {
            "type": type(self).__name__,
            "code": self.code,
            "message": self.msg,
            "context": _redact(self.context),
        }
        if include_cause and self.cause is not None:
            d["cause"] = {"type": type(self.cause).__name__, "message": _flatten(self.cause)}
        return d


class Fatal(UriSchemeError):
    """Abort the CLI with `code` (configuration and usage problems)."""


@dataclass(eq=False)
class InvalidArgumentError(UriSchemeError):
    """A required argument is missing or out of range."""
    code: int = 2


@dataclass(eq=False)
class MalformedSchemeError(InvalidArgumentError):
    """Scheme text does not match the URI scheme grammar after normalization."""
    code: int = 3


@dataclass(eq=False)
class NotFoundError(UriSchemeError):
    """Executable or icon file is missing."""
    code: int = 4


@dataclass(eq=False)
class AlreadyRegisteredError(UriSchemeError):
    code: int = 5


@dataclass(eq=False)
class NotRegisteredError(UriSchemeError):
    code: int = 6


@dataclass(eq=False)
class InvalidConfigurationError(UriSchemeError):
    """Scope (or another enumerated setting) has a value outside its domain."""
    code: int = 7


@dataclass(eq=False)
class PermissionDeniedError(UriSchemeError):
    code: int = 8


@dataclass(eq=False)
class ConcurrentAccessError(UriSchemeError):
    """
    The store reported the key/handle as in use by another call.
    Not retried here; callers that want resilience retry at a higher level.
    """
    code: int = 9


@dataclass(eq=False)
class InternalInconsistencyError(UriSchemeError):
    code: int = 10


@dataclass(eq=False)
class StoreFailureError(UriSchemeError):
    """Catch-all for unexpected store errors (original exception kept in `cause`)."""
    code: int = 11


def wrap_fatal(msg: str, exc: Optional[BaseException] = None, code: int = 1, **context: Any) -> Fatal:
    return Fatal(code=code, msg=msg, cause=exc, context=context or None)


def wrap_permission(msg: str, exc: Optional[BaseException] = None, **context: Any) -> PermissionDeniedError:
    return PermissionDeniedError(msg=msg, cause=exc, context=context or None)


def wrap_concurrent(msg: str, exc: Optional[BaseException] = None, **context: Any) -> ConcurrentAccessError:
    return ConcurrentAccessError(msg=msg, cause=exc, context=context or None)


def wrap_store_failure(msg: str, exc: Optional[BaseException] = None, **context: Any) -> StoreFailureError:
    return StoreFailureError(msg=msg, cause=exc, context=context or None)


def format_exception_for_cli(e: BaseException, *, verbose: int = 0) -> str:
    """
    One-liner output for CLI.

    verbose=0: just message
    verbose=1: message + compact context (if any)
    verbose>=2: message + context + cause
    """
    if isinstance(e, UriSchemeError):
        return e.user_message(
            include_context=(verbose >= 1),
            include_cause=(verbose >= 2),
        )

    if verbose >= 2:
        return f"{type(e).__name__}: {_flatten(str(e))}"
    return _flatten(str(e)) or type(e).__name__
