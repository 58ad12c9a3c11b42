# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# urischeme/scheme/record.py
"""
Scheme record value types and the text formats stored in the registry.

A registration is written as:

    <handler>\\(default)                  = "URL:<scheme> Protocol"
    <handler>\\URL Protocol               = ""
    <handler>\\DefaultIcon\\(default)      = "<file>,<index>"
    <handler>\\shell\\open\\command\\(default) = "<path><suffix>"

This module owns every one of those string formats, both directions.
"""
from __future__ import annotations

import os
import re
from dataclasses import asdict, dataclass, field, replace
from typing import Any, Callable, Dict, List, Optional, Tuple, Union

SCHEME_RE = re.compile(r"^[A-Za-z][A-Za-z0-9+.\-]*$")
_SCHEME_CUT_RE = re.compile(r"[:/]")
_PLACEHOLDERS_RE = re.compile(r'^(?P<head>.*?)(?P<tail>(?:\s+"%\d+")+)\s*$', re.DOTALL)

URL_PREFIX = "URL:"
URL_SUFFIX = "Protocol"
URL_PROTOCOL_VALUE = "URL Protocol"
DEFAULT_ICON_KEY = "DefaultIcon"
COMMAND_KEY = r"shell\open\command"


# ---------------------------------------------------------------------------
# Argument spec (tagged variant)
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class NoArgs:
    """Bare executable path, nothing appended."""

    kind: str = field(default="none", init=False)


@dataclass(frozen=True)
class PositionalArgs:
    """`count` quoted placeholders: "%1" "%2" ... "%n"."""

    count: int
    kind: str = field(default="positional", init=False)


@dataclass(frozen=True)
class LiteralArgs:
    """A single space followed by `text` verbatim."""

    text: str
    kind: str = field(default="literal", init=False)


ArgumentSpec = Union[NoArgs, PositionalArgs, LiteralArgs]


def render_arguments(spec: ArgumentSpec) -> str:
    if isinstance(spec, PositionalArgs):
        return "".join(f' "%{i}"' for i in range(1, spec.count + 1))
    if isinstance(spec, LiteralArgs):
        return f" {spec.text}"
    return ""


def arguments_to_dict(spec: ArgumentSpec) -> Dict[str, Any]:
    return asdict(spec)


# ---------------------------------------------------------------------------
# Icon
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class IconRef:
    file: str
    index: int = 0

    def to_value(self) -> str:
        return f"{self.file},{self.index}"

    @classmethod
    def from_value(cls, value: Optional[str]) -> Optional["IconRef"]:
        """
        Parse "<file>,<index>". A trailing integer after the last comma is the
        index; anything else is part of the file name.
        """
        if not value or not value.strip():
            return None
        text = value.strip()
        head, sep, tail = text.rpartition(",")
        if sep:
            try:
                return cls(file=head.strip(), index=int(tail.strip()))
            except ValueError:
                pass
        return cls(file=text, index=0)


# ---------------------------------------------------------------------------
# Scheme text
# ---------------------------------------------------------------------------


def normalize_scheme(text: Optional[str]) -> str:
    """
    Reduce caller-supplied protocol text to the bare token:
    "myapp://", "myapp:" and "myapp://host/x" all become "myapp".
    """
    if text is None:
        return ""
    return _SCHEME_CUT_RE.split(text.strip(), 1)[0].strip()


def is_valid_scheme(token: str) -> bool:
    return bool(token) and SCHEME_RE.match(token) is not None


def format_default_value(scheme: str) -> str:
    return f"{URL_PREFIX}{scheme} {URL_SUFFIX}"


def scheme_from_default_value(value: Optional[str]) -> Optional[str]:
    """Inverse of format_default_value; None when nothing is stored."""
    if value is None:
        return None
    s = value.strip()
    if s.startswith(URL_PREFIX):
        s = s[len(URL_PREFIX):]
    if s.endswith(URL_SUFFIX):
        s = s[: -len(URL_SUFFIX)]
    return s.strip()


# ---------------------------------------------------------------------------
# Command value
# ---------------------------------------------------------------------------


def format_command_value(path: str, spec: ArgumentSpec) -> str:
    return f"{path}{render_arguments(spec)}"


def _existing_prefix(words: List[str], path_exists: Callable[[str], bool]) -> int:
    """Word count of the longest prefix naming an existing file (0: none)."""
    for cut in range(len(words), 0, -1):
        if path_exists(" ".join(words[:cut])):
            return cut
    return 0


def parse_command_value(
    value: Optional[str],
    *,
    path_exists: Callable[[str], bool] = os.path.isfile,
) -> Tuple[str, ArgumentSpec]:
    """
    Split a stored command back into (executable path, argument spec).

    The stored form is a plain concatenation, so it is ambiguous:
    `/bin/demo --url "%1"` is a LiteralArgs command, `/bin/demo "%1"` a
    PositionalArgs one. Trailing "%N" placeholders count as PositionalArgs
    only when everything before them is the path: a quoted path, an
    existing file, or (when no prefix names a file) text without an
    option-looking word.
    Otherwise a quoted head, then the longest existing prefix, then the
    first token is the path and the remainder is LiteralArgs.
    """
    if value is None or not value.strip():
        return "", NoArgs()

    text = value.strip()
    words = text.split(" ")
    cut = _existing_prefix(words, path_exists)

    m = _PLACEHOLDERS_RE.match(text)
    if m:
        head = m.group("head").strip()
        quoted = len(head) >= 2 and head[0] == head[-1] == '"' and '"' not in head[1:-1]
        if quoted:
            head = head[1:-1]
        # With nothing on disk to go by, an option-looking word ends the path.
        looks_like_path = not cut and not any(w.startswith("-") for w in head.split(" ")[1:])
        if quoted or path_exists(head) or looks_like_path:
            return head, PositionalArgs(len(re.findall(r'"%\d+"', m.group("tail"))))

    if text.startswith('"'):
        end = text.find('"', 1)
        if end > 0:
            path = text[1:end]
            rest = text[end + 1:].strip()
            return path, (LiteralArgs(rest) if rest else NoArgs())

    cut = cut or 1
    rest = " ".join(words[cut:]).strip()
    return " ".join(words[:cut]), (LiteralArgs(rest) if rest else NoArgs())


# ---------------------------------------------------------------------------
# Record
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class SchemeRecord:
    """
    Everything one registration is made of.

    `port` is only set for networked schemes; it travels with the record but
    has no slot in the persisted layout.
    """

    scheme: str
    executable_path: str
    port: Optional[int] = None
    arguments: ArgumentSpec = field(default_factory=NoArgs)
    icon: Optional[IconRef] = None

    @property
    def command_value(self) -> str:
        return format_command_value(self.executable_path, self.arguments)

    @property
    def default_value(self) -> str:
        return format_default_value(self.scheme)

    def with_changes(self, **changes: Any) -> "SchemeRecord":
        """Copy with the given fields replaced; None values are ignored."""
        return replace(self, **{k: v for k, v in changes.items() if v is not None})

    def to_dict(self) -> Dict[str, Any]:
        return {
            "scheme": self.scheme,
            "executable_path": self.executable_path,
            "port": self.port,
            "arguments": arguments_to_dict(self.arguments),
            "icon": asdict(self.icon) if self.icon else None,
            "command": self.command_value,
        }
