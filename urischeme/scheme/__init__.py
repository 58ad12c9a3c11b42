# SPDX-License-Identifier: LGPL-3.0-or-later
# urischeme/scheme/__init__.py
from .known import RESERVED_SCHEMES, is_known_scheme, known_schemes
from .manager import UriSchemeManager
from .parser import parse_uri, parse_uris, query_arguments
from .record import (
    ArgumentSpec,
    IconRef,
    LiteralArgs,
    NoArgs,
    PositionalArgs,
    SchemeRecord,
    format_command_value,
    normalize_scheme,
    parse_command_value,
)
from .registrar import SchemeRegistrar
from .scope import RegistrationScope, resolve_root

__all__ = [
    "RESERVED_SCHEMES",
    "ArgumentSpec",
    "IconRef",
    "LiteralArgs",
    "NoArgs",
    "PositionalArgs",
    "RegistrationScope",
    "SchemeRecord",
    "SchemeRegistrar",
    "UriSchemeManager",
    "format_command_value",
    "is_known_scheme",
    "known_schemes",
    "normalize_scheme",
    "parse_command_value",
    "parse_uri",
    "parse_uris",
    "query_arguments",
    "resolve_root",
]
