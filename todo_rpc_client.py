"""Todo RPC API client.

A thin wrapper around the procedure transport using the ``requests``
library.  Queries are sent as ``GET <prefix>/<name>?input=<json>`` and
mutations as ``POST <prefix>/<name>`` with a JSON body, mirroring the
server's transport.

Every call returns a tuple ``(data, error)``.  On success ``error`` is
``None``; on failure ``data`` is ``None`` (``False`` for deletes) and
``error`` is a dictionary with ``status_code``, ``code``, ``message``
and, for input errors, ``details``.  ``code`` is the server's error
code (``BAD_REQUEST``, ``NOT_FOUND``, ``CONFLICT`` ...) so callers can
branch on it; transport failures use the code ``NETWORK_ERROR``.

When a procedure's output schema is known the client validates the
response with it and returns typed models:

* :meth:`get_users` / :meth:`get_user_by_id` / :meth:`create_user`
* :meth:`update_user` / :meth:`delete_user`
* :meth:`get_all_todos` / :meth:`get_todo_by_id` / :meth:`create_todo`
* :meth:`update_todo` / :meth:`delete_todo`

The identity passed as ``identity`` is sent in the ``Authorization``
header on every request.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, List, Optional, Tuple

import requests

from todo_rpc_api.app.rpc.schema import Schema, SchemaValidationError
from todo_rpc_api.app.schemas.todo import TodoRead
from todo_rpc_api.app.schemas.user import UserRead

logger = logging.getLogger(__name__)

NETWORK_ERROR = "NETWORK_ERROR"
INVALID_RESPONSE = "INVALID_RESPONSE"

_USER = Schema(UserRead)
_USERS = Schema(List[UserRead])
_TODO = Schema(TodoRead)
_TODOS = Schema(List[TodoRead])
_BOOL = Schema(bool)

Result = Tuple[Any, Optional[Dict[str, Any]]]


class ProcedureClient:
    """Client for calling procedures of a Todo RPC API server."""

    def __init__(
        self,
        *,
        base_url: str,
        prefix: str = "/trpc",
        identity: Optional[str] = None,
        session: Optional[requests.Session] = None,
        timeout: float = 15,
    ) -> None:
        """Initialise the client.

        Args:
            base_url: Server URL, e.g. ``http://localhost:4000``.
            prefix: URL prefix the procedures are mounted under.
            identity: Optional token sent in the ``Authorization`` header.
            session: Optional requests session.  If not supplied a
                session will be created automatically.
            timeout: Per-request timeout in seconds.
        """
        self.base_url = base_url.rstrip("/")
        self.prefix = "/" + prefix.strip("/")
        self.identity = identity
        self.session = session or requests.Session()
        self.timeout = timeout

    # ------------------------------------------------------------------
    # Low level helpers
    # ------------------------------------------------------------------
    def _url(self, path: str) -> str:
        return f"{self.base_url}{self.prefix}/{path}"

    def _headers(self) -> Dict[str, str]:
        headers: Dict[str, str] = {}
        if self.identity:
            headers["Authorization"] = self.identity
        return headers

    def _send(self, method: str, path: str, **kwargs: Any) -> Result:
        url = self._url(path)
        try:
            logger.debug("Sending %s request to %s", method, url)
            response = self.session.request(
                method=method,
                url=url,
                headers=self._headers(),
                timeout=self.timeout,
                **kwargs,
            )
        except requests.RequestException as exc:
            logger.error("Procedure %s failed: %s", path, exc)
            return None, {"status_code": None, "code": NETWORK_ERROR, "message": str(exc)}

        try:
            payload = response.json() if response.content else None
        except ValueError:
            payload = None

        if response.ok:
            return payload, None

        error: Dict[str, Any] = {"status_code": response.status_code}
        if isinstance(payload, dict) and "code" in payload:
            error["code"] = payload["code"]
            error["message"] = payload.get("message", "")
            if "details" in payload:
                error["details"] = payload["details"]
        else:
            error["code"] = INVALID_RESPONSE
            error["message"] = response.text or response.reason or ""
        logger.error("Procedure %s failed (%s): %s", path, error["code"], error["message"])
        return None, error

    def query(self, path: str, input: Any = None, *, output: Optional[Schema] = None) -> Result:
        """Call the query procedure ``path``."""
        params = {"input": json.dumps(input)} if input is not None else None
        data, error = self._send("GET", path, params=params)
        return self._checked(path, data, error, output)

    def mutation(self, path: str, input: Any = None, *, output: Optional[Schema] = None) -> Result:
        """Call the mutation procedure ``path``."""
        data, error = self._send("POST", path, json=input)
        return self._checked(path, data, error, output)

    @staticmethod
    def _checked(path: str, data: Any, error: Optional[Dict[str, Any]], output: Optional[Schema]) -> Result:
        if error or output is None:
            return data, error
        try:
            return output.validate(data), None
        except SchemaValidationError as exc:
            logger.error("Procedure %s returned an unexpected shape: %s", path, exc)
            return None, {
                "status_code": None,
                "code": INVALID_RESPONSE,
                "message": str(exc),
                "details": exc.issues,
            }

    # ------------------------------------------------------------------
    # User procedures
    # ------------------------------------------------------------------
    def get_users(self) -> Tuple[List[UserRead], Optional[Dict[str, Any]]]:
        users, error = self.query("getUsers", output=_USERS)
        return (users or []), error

    def get_user_by_id(self, user_id: str) -> Tuple[Optional[UserRead], Optional[Dict[str, Any]]]:
        return self.query("getUserById", user_id, output=_USER)

    def create_user(self, name: str, email: str) -> Tuple[Optional[UserRead], Optional[Dict[str, Any]]]:
        return self.mutation("createUser", {"name": name, "email": email}, output=_USER)

    def update_user(self, user_id: str, changes: Dict[str, Any]) -> Tuple[Optional[UserRead], Optional[Dict[str, Any]]]:
        """Send only ``changes``; fields left out keep their value."""
        return self.mutation("updateUser", {"id": user_id, "data": changes}, output=_USER)

    def delete_user(self, user_id: str) -> Tuple[bool, Optional[Dict[str, Any]]]:
        deleted, error = self.mutation("deleteUser", {"id": user_id}, output=_BOOL)
        return bool(deleted), error

    # ------------------------------------------------------------------
    # Todo procedures
    # ------------------------------------------------------------------
    def get_all_todos(self) -> Tuple[List[TodoRead], Optional[Dict[str, Any]]]:
        todos, error = self.query("todo.getAllTodos", output=_TODOS)
        return (todos or []), error

    def get_todo_by_id(self, todo_id: str) -> Tuple[Optional[TodoRead], Optional[Dict[str, Any]]]:
        return self.query("todo.getTodoById", {"id": todo_id}, output=_TODO)

    def create_todo(self, payload: Dict[str, Any]) -> Tuple[Optional[TodoRead], Optional[Dict[str, Any]]]:
        return self.mutation("todo.createTodo", payload, output=_TODO)

    def update_todo(self, todo_id: str, changes: Dict[str, Any]) -> Tuple[Optional[TodoRead], Optional[Dict[str, Any]]]:
        """Send only ``changes``; fields left out keep their value."""
        return self.mutation("todo.updateTodo", {"id": todo_id, "data": changes}, output=_TODO)

    def delete_todo(self, todo_id: str) -> Tuple[bool, Optional[Dict[str, Any]]]:
        deleted, error = self.mutation("todo.deleteTodo", {"id": todo_id}, output=_BOOL)
        return bool(deleted), error
