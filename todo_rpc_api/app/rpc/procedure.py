"""
Procedure declarations.

A :class:`Procedure` is an immutable record binding a kind, optional
input schema, mandatory output schema, visibility and handler.  The
helpers :func:`query` and :func:`mutation` are the intended way to
declare one; they accept plain annotations and wrap them in
:class:`~todo_rpc_api.app.rpc.schema.Schema` objects.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Awaitable, Callable, Optional, Union

from todo_rpc_api.app.core.context import Context

from .schema import Schema

Handler = Callable[[Context, Any], Union[Any, Awaitable[Any]]]


class ProcedureKind(str, Enum):
    # Side-effect free, safe to retry and to expose over GET.
    QUERY = "query"
    # Changes state, only reachable through POST.
    MUTATION = "mutation"


class Visibility(str, Enum):
    PUBLIC = "public"


@dataclass(frozen=True)
class Procedure:
    kind: ProcedureKind
    output_schema: Schema
    handler: Handler
    input_schema: Optional[Schema] = None
    visibility: Visibility = Visibility.PUBLIC
    description: Optional[str] = None

    @property
    def takes_input(self) -> bool:
        return self.input_schema is not None


def _as_schema(value: Any) -> Schema:
    return value if isinstance(value, Schema) else Schema(value)


def _declare(
    kind: ProcedureKind,
    handler: Handler,
    output: Any,
    input: Any,
    description: Optional[str],
) -> Procedure:
    if output is None:
        raise ValueError("every procedure must declare an output schema")
    return Procedure(
        kind=kind,
        output_schema=_as_schema(output),
        input_schema=_as_schema(input) if input is not None else None,
        handler=handler,
        visibility=Visibility.PUBLIC,
        description=description or (handler.__doc__ or "").strip() or None,
    )


def query(
    handler: Handler,
    *,
    output: Any,
    input: Any = None,
    description: Optional[str] = None,
) -> Procedure:
    """Declare a read-only procedure."""
    return _declare(ProcedureKind.QUERY, handler, output, input, description)


def mutation(
    handler: Handler,
    *,
    output: Any,
    input: Any = None,
    description: Optional[str] = None,
) -> Procedure:
    """Declare a state-changing procedure."""
    return _declare(ProcedureKind.MUTATION, handler, output, input, description)
