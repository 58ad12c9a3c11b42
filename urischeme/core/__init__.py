# urischeme/core/__init__.py
from .exceptions import (
    AlreadyRegisteredError,
    ConcurrentAccessError,
    Fatal,
    InternalInconsistencyError,
    InvalidArgumentError,
    InvalidConfigurationError,
    MalformedSchemeError,
    NotFoundError,
    NotRegisteredError,
    PermissionDeniedError,
    StoreFailureError,
    UriSchemeError,
)

__all__ = [
    "AlreadyRegisteredError",
    "ConcurrentAccessError",
    "Fatal",
    "InternalInconsistencyError",
    "InvalidArgumentError",
    "InvalidConfigurationError",
    "MalformedSchemeError",
    "NotFoundError",
    "NotRegisteredError",
    "PermissionDeniedError",
    "StoreFailureError",
    "UriSchemeError",
]
