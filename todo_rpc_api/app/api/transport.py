"""
HTTP binding of the procedure router.

``build_transport`` returns a FastAPI ``APIRouter`` that the
application mounts under the RPC prefix (``/trpc`` by default):

* ``GET  <prefix>/<name>?input=<json>`` runs a query;
* ``POST <prefix>/<name>`` with a JSON body runs a mutation;
* ``GET  <prefix>/`` lists the registered procedures.

A successful call answers ``200`` with the output value exactly as its
schema dumps it.  Failures answer with the error envelope
``{"code", "message", "details"?}`` and the status matching the code.
"""

import json
import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Request
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from todo_rpc_api.app.core.context import DEFAULT_IDENTITY_HEADER, create_context
from todo_rpc_api.app.core.errors import (
    BadInputError,
    ErrorCode,
    MethodNotSupportedError,
    ProcedureError,
    error_payload,
)
from todo_rpc_api.app.rpc import ProcedureKind, ProcedureRouter

logger = logging.getLogger(__name__)

_VERB_FOR_KIND = {
    ProcedureKind.QUERY: "GET",
    ProcedureKind.MUTATION: "POST",
}


def error_response(error: ProcedureError, *, expose_internal: bool = False) -> JSONResponse:
    """Render ``error`` as a JSON error envelope."""
    headers: Optional[Dict[str, str]] = None
    if error.code is ErrorCode.METHOD_NOT_SUPPORTED and isinstance(error.details, dict):
        allowed = error.details.get("allowed")
        if allowed:
            headers = {"Allow": allowed}
    return JSONResponse(
        status_code=error.http_status,
        content=jsonable_encoder(error_payload(error, expose_internal=expose_internal)),
        headers=headers,
    )


def _decode_input(raw: Optional[str]) -> Any:
    if raw is None or not raw.strip():
        return None
    try:
        return json.loads(raw)
    except json.JSONDecodeError as exc:
        raise BadInputError(
            "Malformed JSON input",
            details=[{"path": "", "message": exc.msg, "type": "json_invalid", "input": raw}],
        ) from exc


def _decode_body(body: bytes) -> str:
    try:
        return body.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise BadInputError(
            "Malformed JSON input",
            details=[{"path": "", "message": str(exc), "type": "utf8_invalid", "input": None}],
        ) from exc


def build_transport(
    rpc_router: ProcedureRouter,
    *,
    identity_header: str = DEFAULT_IDENTITY_HEADER,
    expose_internal: bool = False,
) -> APIRouter:
    """Expose ``rpc_router`` over HTTP."""
    router = APIRouter()

    async def dispatch(request: Request, path: str, kind: ProcedureKind, raw_input: Any) -> JSONResponse:
        try:
            procedure = rpc_router.resolve(path)
            if procedure.kind is not kind:
                allowed = _VERB_FOR_KIND[procedure.kind]
                raise MethodNotSupportedError(
                    f'Unsupported {request.method} request to {procedure.kind.value} procedure "{path}"',
                    details={"allowed": allowed},
                )
            context = create_context(request.headers, identity_header=identity_header)
            result = await rpc_router.invoke(path, raw_input, context)
        except ProcedureError as exc:
            return error_response(exc, expose_internal=expose_internal)
        return JSONResponse(content=procedure.output_schema.dump(result))

    @router.get("/", include_in_schema=False)
    async def list_procedures() -> List[Dict[str, Any]]:
        """Describe every registered procedure."""
        return rpc_router.describe()

    @router.get("/{path:path}")
    async def call_query(path: str, request: Request) -> JSONResponse:
        try:
            raw_input = _decode_input(request.query_params.get("input"))
        except BadInputError as exc:
            return error_response(exc, expose_internal=expose_internal)
        return await dispatch(request, path, ProcedureKind.QUERY, raw_input)

    @router.post("/{path:path}")
    async def call_mutation(path: str, request: Request) -> JSONResponse:
        body = await request.body()
        try:
            raw_input = _decode_input(_decode_body(body))
        except BadInputError as exc:
            return error_response(exc, expose_internal=expose_internal)
        return await dispatch(request, path, ProcedureKind.MUTATION, raw_input)

    return router
