"""
Error taxonomy shared by the router, the services and the transport.

Every failure a caller can observe is a :class:`ProcedureError` with a
``code`` taken from :class:`ErrorCode`.  Services raise the domain
kinds (``NOT_FOUND``, ``CONFLICT``), the router raises ``BAD_REQUEST``
for input that fails its schema and ``INTERNAL_SERVER_ERROR`` for
everything else.  The transport renders the error with
:func:`error_payload` and picks the HTTP status from ``HTTP_STATUS``.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Union

from fastapi import status


class ErrorCode(str, Enum):
    BAD_REQUEST = "BAD_REQUEST"
    NOT_FOUND = "NOT_FOUND"
    CONFLICT = "CONFLICT"
    METHOD_NOT_SUPPORTED = "METHOD_NOT_SUPPORTED"
    INTERNAL_SERVER_ERROR = "INTERNAL_SERVER_ERROR"


HTTP_STATUS: Dict[ErrorCode, int] = {
    ErrorCode.BAD_REQUEST: status.HTTP_400_BAD_REQUEST,
    ErrorCode.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.CONFLICT: status.HTTP_409_CONFLICT,
    ErrorCode.METHOD_NOT_SUPPORTED: status.HTTP_405_METHOD_NOT_ALLOWED,
    ErrorCode.INTERNAL_SERVER_ERROR: status.HTTP_500_INTERNAL_SERVER_ERROR,
}

GENERIC_INTERNAL_MESSAGE = "Internal server error"

Details = Union[Mapping[str, Any], List[Any]]


class ProcedureError(Exception):
    """A failure carrying a taxonomy code, a message and optional details."""

    code: ErrorCode = ErrorCode.INTERNAL_SERVER_ERROR

    def __init__(
        self,
        message: str,
        *,
        code: Optional[ErrorCode] = None,
        details: Optional[Details] = None,
    ) -> None:
        super().__init__(message)
        if code is not None:
            self.code = ErrorCode(code)
        self.message = message
        self.details = details

    def __str__(self) -> str:
        return self.message

    def __repr__(self) -> str:
        return f"{type(self).__name__}(code={self.code.value!r}, message={self.message!r})"

    @property
    def http_status(self) -> int:
        return HTTP_STATUS[self.code]

    def to_dict(self, *, expose_internal: bool = False) -> Dict[str, Any]:
        return error_payload(self, expose_internal=expose_internal)


class BadInputError(ProcedureError):
    """Input failed schema validation; ``details`` lists the issues."""

    code = ErrorCode.BAD_REQUEST


class NotFoundError(ProcedureError):
    code = ErrorCode.NOT_FOUND


class ConflictError(ProcedureError):
    code = ErrorCode.CONFLICT


class MethodNotSupportedError(ProcedureError):
    code = ErrorCode.METHOD_NOT_SUPPORTED


class InternalError(ProcedureError):
    code = ErrorCode.INTERNAL_SERVER_ERROR


def error_payload(error: ProcedureError, *, expose_internal: bool = False) -> Dict[str, Any]:
    """Build the error envelope sent to callers.

    Internal errors only reveal their message and details when
    ``expose_internal`` is set (development mode); every other code is
    rendered as is so clients can discriminate on ``code``.
    """
    if error.code is ErrorCode.INTERNAL_SERVER_ERROR and not expose_internal:
        return {"code": error.code.value, "message": GENERIC_INTERNAL_MESSAGE}

    payload: Dict[str, Any] = {
        "code": error.code.value,
        "message": error.message,
    }
    if error.details:
        payload["details"] = error.details if isinstance(error.details, list) else dict(error.details)
    return payload
