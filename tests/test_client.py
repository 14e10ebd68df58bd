from __future__ import annotations

import json
from typing import Any, Dict, List, Optional

import requests

from todo_rpc_api.app.schemas.todo import TodoRead
from todo_rpc_api.app.schemas.user import UserRead
from todo_rpc_client import INVALID_RESPONSE, NETWORK_ERROR, ProcedureClient


def _response(status_code: int, payload: Any = None) -> requests.Response:
    response = requests.Response()
    response.status_code = status_code
    response._content = json.dumps(payload).encode("utf-8") if payload is not None else b""
    return response


class FakeSession:
    """Records requests and answers from a queue of prepared responses."""

    def __init__(self, *responses: Any) -> None:
        self.responses: List[Any] = list(responses)
        self.requests: List[Dict[str, Any]] = []

    def request(self, method: str, url: str, **kwargs: Any) -> requests.Response:
        self.requests.append({"method": method, "url": url, **kwargs})
        answer = self.responses.pop(0)
        if isinstance(answer, Exception):
            raise answer
        return answer


def _client(session: FakeSession, identity: Optional[str] = None) -> ProcedureClient:
    return ProcedureClient(base_url="http://api.test/", identity=identity, session=session)  # type: ignore[arg-type]


def test_query_sends_json_encoded_input_over_get() -> None:
    session = FakeSession(_response(200, {"id": "1", "name": "Alice", "email": "alice@example.com"}))

    user, error = _client(session, identity="Bearer t").get_user_by_id("1")

    assert error is None
    assert user == UserRead(id="1", name="Alice", email="alice@example.com")
    sent = session.requests[0]
    assert sent["method"] == "GET"
    assert sent["url"] == "http://api.test/trpc/getUserById"
    assert sent["params"] == {"input": '"1"'}
    assert sent["headers"] == {"Authorization": "Bearer t"}


def test_mutation_posts_json_body() -> None:
    session = FakeSession(_response(200, {"id": "3", "title": "t", "description": None, "completed": True}))

    todo, error = _client(session).update_todo("3", {"completed": True})

    assert error is None
    assert todo == TodoRead(id="3", title="t", completed=True)
    sent = session.requests[0]
    assert sent["method"] == "POST"
    assert sent["url"] == "http://api.test/trpc/todo.updateTodo"
    assert sent["json"] == {"id": "3", "data": {"completed": True}}
    assert sent["headers"] == {}


def test_error_envelope_is_returned_with_code() -> None:
    session = FakeSession(_response(409, {"code": "CONFLICT", "message": "User with this email already exists"}))

    user, error = _client(session).create_user("Bo", "a@b.com")

    assert user is None
    assert error == {
        "status_code": 409,
        "code": "CONFLICT",
        "message": "User with this email already exists",
    }


def test_bad_input_details_are_kept() -> None:
    details = [{"path": "name", "message": "too short", "type": "string_too_short", "input": "B"}]
    session = FakeSession(_response(400, {"code": "BAD_REQUEST", "message": "Input validation failed", "details": details}))

    _, error = _client(session).create_user("B", "b@example.com")

    assert error["code"] == "BAD_REQUEST"
    assert error["details"] == details


def test_network_failure() -> None:
    session = FakeSession(requests.ConnectionError("refused"))

    todos, error = _client(session).get_all_todos()

    assert todos == []
    assert error["code"] == NETWORK_ERROR
    assert error["status_code"] is None


def test_unexpected_response_shape_is_reported() -> None:
    session = FakeSession(_response(200, [{"id": "1"}]))

    users, error = _client(session).get_users()

    assert users == []
    assert error["code"] == INVALID_RESPONSE
    assert error["details"][0]["path"] == "0.name"


def test_delete_returns_bool() -> None:
    session = FakeSession(_response(200, True), _response(200, False))
    client = _client(session)

    assert client.delete_todo("1") == (True, None)
    assert client.delete_todo("1") == (False, None)


def test_user_update_and_delete_helpers() -> None:
    session = FakeSession(
        _response(200, {"id": "2", "name": "Bob", "email": "bobby@example.com"}),
        _response(200, True),
    )
    client = _client(session)

    user, error = client.update_user("2", {"email": "bobby@example.com"})
    deleted, delete_error = client.delete_user("2")

    assert error is None and delete_error is None
    assert user == UserRead(id="2", name="Bob", email="bobby@example.com")
    assert deleted is True
    assert [(sent["url"], sent["json"]) for sent in session.requests] == [
        ("http://api.test/trpc/updateUser", {"id": "2", "data": {"email": "bobby@example.com"}}),
        ("http://api.test/trpc/deleteUser", {"id": "2"}),
    ]
