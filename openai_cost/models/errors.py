"""Error taxonomy for the costs client.

Every failure the client can produce is an :class:`OpenAICostError` tagged
with one :class:`ErrorKind`. Callers branch on ``error.kind``; the set of
kinds is closed.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    MISSING_CREDENTIAL = "missing_credential"
    INVALID_REQUEST_CONSTRUCTION = "invalid_request_construction"
    TRANSPORT_FAILURE = "transport_failure"
    SERVER_ERROR = "server_error"
    INVALID_REQUEST = "invalid_request_error"
    QUOTA_EXCEEDED = "insufficient_quota"
    API_ERROR = "api_error"
    OTHER_ERROR = "other_error"
    DECODE_FAILURE = "decode_failure"


HTTP_FAILURE_KINDS = frozenset(
    {
        ErrorKind.SERVER_ERROR,
        ErrorKind.INVALID_REQUEST,
        ErrorKind.QUOTA_EXCEEDED,
        ErrorKind.API_ERROR,
        ErrorKind.OTHER_ERROR,
    }
)

# Server-reported ``error.type`` values with a dedicated kind.
API_ERROR_TYPES = {
    "server_error": ErrorKind.SERVER_ERROR,
    "invalid_request_error": ErrorKind.INVALID_REQUEST,
    "insufficient_quota": ErrorKind.QUOTA_EXCEEDED,
    "api_error": ErrorKind.API_ERROR,
}


class OpenAICostError(Exception):
    """A failed costs request.

    ``error_type`` is the server's ``error.type`` string for HTTP failures; for
    ``OTHER_ERROR`` built from an undecodable body it holds the status code.
    ``raw_body`` is kept for decode failures and unclassifiable error bodies.
    """

    def __init__(
        self,
        kind: ErrorKind,
        message: str,
        *,
        error_type: Optional[str] = None,
        status_code: Optional[int] = None,
        code: Optional[str] = None,
        param: Optional[str] = None,
        raw_body: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.error_type = error_type if error_type is not None else kind.value
        self.status_code = status_code
        self.code = code
        self.param = param
        self.raw_body = raw_body

    # ------------------------------------------------------------------
    # Constructors, one per kind family
    # ------------------------------------------------------------------
    @classmethod
    def missing_credential(cls, env_var: str) -> "OpenAICostError":
        return cls(
            ErrorKind.MISSING_CREDENTIAL,
            f"Missing API key. Set the {env_var} environment variable.",
        )

    @classmethod
    def invalid_request_construction(cls, message: str) -> "OpenAICostError":
        return cls(ErrorKind.INVALID_REQUEST_CONSTRUCTION, message)

    @classmethod
    def transport_failure(cls, message: str) -> "OpenAICostError":
        return cls(ErrorKind.TRANSPORT_FAILURE, message)

    @classmethod
    def decode_failure(cls, message: str, raw_body: str) -> "OpenAICostError":
        return cls(ErrorKind.DECODE_FAILURE, message, raw_body=raw_body)

    @classmethod
    def from_api_error(
        cls,
        error_type: str,
        message: str,
        *,
        status_code: Optional[int] = None,
        code: Optional[str] = None,
        param: Optional[str] = None,
    ) -> "OpenAICostError":
        kind = API_ERROR_TYPES.get(error_type, ErrorKind.OTHER_ERROR)
        return cls(
            kind,
            message,
            error_type=error_type,
            status_code=status_code,
            code=code,
            param=param,
        )

    @classmethod
    def other(
        cls, error_type: str, message: str, *, status_code: Optional[int] = None, raw_body: Optional[str] = None
    ) -> "OpenAICostError":
        return cls(
            ErrorKind.OTHER_ERROR,
            message,
            error_type=error_type,
            status_code=status_code,
            raw_body=raw_body,
        )

    # ------------------------------------------------------------------
    @property
    def is_http_failure(self) -> bool:
        return self.kind in HTTP_FAILURE_KINDS

    def describe(self) -> str:
        """User-facing one-line description."""
        kind = self.kind
        if kind is ErrorKind.MISSING_CREDENTIAL:
            return self.message
        if kind is ErrorKind.INVALID_REQUEST_CONSTRUCTION:
            return f"Invalid request: {self.message}"
        if kind is ErrorKind.TRANSPORT_FAILURE:
            return f"Network Error: {self.message}"
        if kind is ErrorKind.DECODE_FAILURE:
            return f"Decoding Error: {self.message}"
        if kind is ErrorKind.OTHER_ERROR:
            return f"API Error (Type/Status: {self.error_type}): {self.message}"

        label = {
            ErrorKind.SERVER_ERROR: "Server Error",
            ErrorKind.INVALID_REQUEST: "Invalid Request",
            ErrorKind.QUOTA_EXCEEDED: "Quota Error",
            ErrorKind.API_ERROR: "API Error",
        }[kind]
        extras = []
        if self.code:
            extras.append(f"code: {self.code}")
        if self.param:
            extras.append(f"param: {self.param}")
        suffix = f" ({', '.join(extras)})" if extras else ""
        return f"{label}: {self.message}{suffix}"

    def __repr__(self) -> str:
        return f"OpenAICostError(kind={self.kind.name}, error_type={self.error_type!r}, message={self.message!r})"


__all__ = [
    "ErrorKind",
    "OpenAICostError",
    "HTTP_FAILURE_KINDS",
    "API_ERROR_TYPES",
]
