from __future__ import annotations

from todo_rpc_api.app.core.errors import (
    GENERIC_INTERNAL_MESSAGE,
    BadInputError,
    ConflictError,
    ErrorCode,
    InternalError,
    NotFoundError,
    ProcedureError,
    error_payload,
)


def test_domain_errors_keep_their_code() -> None:
    assert NotFoundError("missing").code is ErrorCode.NOT_FOUND
    assert ConflictError("taken").code is ErrorCode.CONFLICT
    assert NotFoundError("missing").http_status == 404
    assert ConflictError("taken").http_status == 409


def test_explicit_code_overrides_class_default() -> None:
    error = ProcedureError("gone", code=ErrorCode.NOT_FOUND)

    assert error.code is ErrorCode.NOT_FOUND
    assert error.to_dict() == {"code": "NOT_FOUND", "message": "gone"}


def test_bad_input_payload_carries_details() -> None:
    issues = [{"path": "name", "message": "too short", "type": "string_too_short", "input": "A"}]

    payload = error_payload(BadInputError("Input validation failed", details=issues))

    assert payload == {"code": "BAD_REQUEST", "message": "Input validation failed", "details": issues}


def test_internal_message_hidden_outside_development() -> None:
    error = InternalError("database exploded", details={"table": "users"})

    assert error_payload(error) == {"code": "INTERNAL_SERVER_ERROR", "message": GENERIC_INTERNAL_MESSAGE}
    assert error_payload(error, expose_internal=True) == {
        "code": "INTERNAL_SERVER_ERROR",
        "message": "database exploded",
        "details": {"table": "users"},
    }
