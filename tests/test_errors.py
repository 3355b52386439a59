"""Unit tests for core.errors."""

from __future__ import annotations

import httpx

from core.errors import (
    CertificateError,
    ErrorCode,
    HttperError,
    InvalidUrlError,
    ResponseBodyError,
    SendRequestError,
)


def test_base_error_carries_code() -> None:
    """Test base error carries code."""
    err = HttperError("test", code=ErrorCode.EMPTY_REQUEST)
    assert err.code == ErrorCode.EMPTY_REQUEST
    assert str(err) == "test"


def test_transport_errors_wrap_cause() -> None:
    """Test send/body errors embed the underlying message."""
    cause = httpx.ConnectError("connection refused")
    assert str(SendRequestError(cause)) == "Error sending request: connection refused"
    assert str(ResponseBodyError(cause)) == "Error reading response: connection refused"
    assert SendRequestError(cause).code == ErrorCode.SEND_REQUEST


def test_invalid_url_message() -> None:
    """Test invalid url message names url and reason."""
    err = InvalidUrlError("ftp://x", "unsupported scheme 'ftp'")
    assert str(err) == "Invalid url 'ftp://x': unsupported scheme 'ftp'"
    assert isinstance(err, HttperError)


def test_error_codes_are_strings() -> None:
    """Test codes compare equal to their string values."""
    assert ErrorCode.CERTIFICATE == "certificate"
    assert CertificateError("x").code == "certificate"
