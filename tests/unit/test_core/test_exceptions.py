# SPDX-License-Identifier: LGPL-3.0-or-later
"""Tests for exception handling and secret redaction."""
from __future__ import annotations

import pytest
from urischeme.core.exceptions import (
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
    format_exception_for_cli,
    wrap_concurrent,
    wrap_permission,
    wrap_store_failure,
)


@pytest.mark.unit
class TestExceptionHierarchy:
    """Test exception class hierarchy and basic functionality."""

    def test_base_exception_creation(self):
        err = UriSchemeError(code=1, msg="Test error")

        assert err.code == 1
        assert err.msg == "Test error"
        assert err.cause is None
        assert err.context == {}

    def test_fatal_keeps_given_code(self):
        err = Fatal(code=42, msg="Fatal error")

        assert isinstance(err, UriSchemeError)
        assert err.code == 42

    @pytest.mark.parametrize(
        "cls,code",
        [
            (InvalidArgumentError, 2),
            (MalformedSchemeError, 3),
            (NotFoundError, 4),
            (AlreadyRegisteredError, 5),
            (NotRegisteredError, 6),
            (InvalidConfigurationError, 7),
            (PermissionDeniedError, 8),
            (ConcurrentAccessError, 9),
            (InternalInconsistencyError, 10),
            (StoreFailureError, 11),
        ],
    )
    def test_error_kinds_have_distinct_exit_codes(self, cls, code):
        err = cls(msg="boom")
        assert err.code == code
        assert isinstance(err, UriSchemeError)

    def test_malformed_scheme_is_an_invalid_argument(self):
        with pytest.raises(InvalidArgumentError):
            raise MalformedSchemeError(msg="bad scheme")

    def test_exception_with_context(self):
        err = UriSchemeError(code=1, msg="Error").with_context(handler="MyApp", scope="user")

        assert err.context["handler"] == "MyApp"
        assert err.context["scope"] == "user"

    def test_message_is_single_line(self):
        err = UriSchemeError(msg="line one\nline two")
        assert str(err) == "line one line two"


@pytest.mark.security
class TestSecretRedaction:
    """Test that secrets are redacted from error contexts."""

    def test_password_redacted_in_context(self):
        err = UriSchemeError(code=1, msg="Auth failed").with_context(
            username="admin",
            password="super_secret_123",
            host="build01",
        )

        err_dict = err.to_dict()

        assert err_dict["context"]["password"] == "***REDACTED***"
        assert err_dict["context"]["username"] == "admin"
        assert err_dict["context"]["host"] == "build01"

    def test_secret_in_nested_context(self):
        err = UriSchemeError(code=1, msg="Error").with_context(
            credentials={"token": "abc", "username": "admin"},
        )

        err_dict = err.to_dict()

        assert err_dict["context"]["credentials"]["token"] == "***REDACTED***"
        assert err_dict["context"]["credentials"]["username"] == "admin"

    def test_cli_context_redacts_secrets(self):
        err = UriSchemeError(msg="failed").with_context(api_key="k", handler="MyApp")
        line = format_exception_for_cli(err, verbose=1)
        assert "api_key=<redacted>" in line
        assert "handler='MyApp'" in line


@pytest.mark.unit
class TestExceptionExitCodes:
    """Exit codes are clamped into 0..255."""

    def test_valid_exit_codes(self):
        for code in [0, 1, 2, 127, 255]:
            assert UriSchemeError(code=code, msg="Test").code == code

    def test_out_of_range_codes_are_clamped(self):
        assert UriSchemeError(code=256, msg="Too high").code == 255
        assert UriSchemeError(code=-1, msg="Negative").code == 1

    def test_non_numeric_code_falls_back(self):
        assert UriSchemeError(code="nope", msg="x").code == 1  # type: ignore[arg-type]


@pytest.mark.unit
class TestWrappers:
    def test_wrap_keeps_cause_and_context(self):
        cause = PermissionError("denied")
        err = wrap_permission("Permission denied on current user", cause, handler="MyApp")

        assert isinstance(err, PermissionDeniedError)
        assert err.cause is cause
        assert err.context == {"handler": "MyApp"}

    def test_wrap_without_context(self):
        assert wrap_concurrent("busy").context == {}
        assert wrap_store_failure("broken", RuntimeError("x")).code == 11

    def test_cli_format_levels(self):
        err = wrap_store_failure("Registry write failed", RuntimeError("disk full"), handler="h")

        assert format_exception_for_cli(err) == "Registry write failed"
        assert "[handler='h']" in format_exception_for_cli(err, verbose=1)
        assert "cause: RuntimeError: disk full" in format_exception_for_cli(err, verbose=2)

    def test_cli_format_foreign_exception(self):
        assert format_exception_for_cli(ValueError("bad")) == "bad"
        assert format_exception_for_cli(ValueError("bad"), verbose=2) == "ValueError: bad"


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
