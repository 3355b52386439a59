"""Error types shared by the parser, the request runner and the echo server.

Contract:
- Every failure the tool reports to the user is an `HttperError` subclass.
- Each error carries a machine-readable `ErrorCode` so callers (CLI, tests)
  can branch without matching on message text.
"""

from __future__ import annotations

from enum import StrEnum


class ErrorCode(StrEnum):
    """Machine-readable classification for httper failures."""

    SEND_REQUEST = "send_request"
    RESPONSE_BODY = "response_body"
    INVALID_HEADER = "invalid_header"
    INVALID_METHOD = "invalid_method"
    INVALID_URL = "invalid_url"
    EMPTY_REQUEST = "empty_request"
    NO_REQUEST_LINE = "no_request_line"
    NOT_ENOUGH_PARTS = "not_enough_parts"
    UNDEFINED_VARIABLE = "undefined_variable"
    BODY_FILE = "body_file"
    CERTIFICATE = "certificate"


class HttperError(Exception):
    """Base error carrying an ErrorCode."""

    code: ErrorCode

    def __init__(self, message: str, *, code: ErrorCode) -> None:
        super().__init__(message)
        self.code = code


class SendRequestError(HttperError):
    def __init__(self, cause: Exception) -> None:
        super().__init__(f"Error sending request: {cause}", code=ErrorCode.SEND_REQUEST)


class ResponseBodyError(HttperError):
    def __init__(self, cause: Exception) -> None:
        super().__init__(f"Error reading response: {cause}", code=ErrorCode.RESPONSE_BODY)


class InvalidHeaderError(HttperError):
    def __init__(self, line: str) -> None:
        super().__init__(f"Invalid header: {line}", code=ErrorCode.INVALID_HEADER)
        self.line = line


class InvalidMethodError(HttperError):
    def __init__(self, method: str) -> None:
        super().__init__(f"Invalid method: {method}", code=ErrorCode.INVALID_METHOD)
        self.method = method


class InvalidUrlError(HttperError):
    def __init__(self, url: str, reason: str) -> None:
        super().__init__(f"Invalid url '{url}': {reason}", code=ErrorCode.INVALID_URL)
        self.url = url
        self.reason = reason


class EmptyRequestError(HttperError):
    def __init__(self) -> None:
        super().__init__("Empty request file", code=ErrorCode.EMPTY_REQUEST)


class NoRequestLineError(HttperError):
    def __init__(self) -> None:
        super().__init__("No request line found", code=ErrorCode.NO_REQUEST_LINE)


class NotEnoughPartsError(HttperError):
    def __init__(self, line: str) -> None:
        super().__init__(
            f"Not enough parts in request line: {line}",
            code=ErrorCode.NOT_ENOUGH_PARTS,
        )
        self.line = line


class UndefinedVariableError(HttperError):
    def __init__(self, name: str) -> None:
        super().__init__(f"Undefined variable: {name}", code=ErrorCode.UNDEFINED_VARIABLE)
        self.name = name


class BodyFileError(HttperError):
    def __init__(self, path: str, cause: Exception) -> None:
        super().__init__(f"Cannot read body file '{path}': {cause}", code=ErrorCode.BODY_FILE)
        self.path = path


class CertificateError(HttperError):
    def __init__(self, detail: str) -> None:
        super().__init__(f"TLS certificate error: {detail}", code=ErrorCode.CERTIFICATE)
