"""
The procedure router.

:class:`ProcedureRouter` turns a mapping of names to procedures (and
nested routers) into a flat, read-only registry keyed by fully
qualified name, e.g. ``"todo.getAllTodos"``.  The registry is built
once at construction and never changes afterwards; dispatch is a
single exact-name lookup.

:meth:`ProcedureRouter.invoke` runs the invocation pipeline:

1. validate the raw input against the input schema (``BAD_REQUEST``
   on failure, the handler is not called);
2. call the handler with ``(context, validated_input)``;
3. let :class:`ProcedureError` raised by the handler through as is;
4. turn any other exception into ``INTERNAL_SERVER_ERROR``;
5. validate the result against the output schema, a mismatch being
   an ``INTERNAL_SERVER_ERROR`` since the handler broke its contract.
"""

from __future__ import annotations

import inspect
import logging
from types import MappingProxyType
from typing import Any, Callable, Dict, Iterator, List, Mapping, Optional, Union

from todo_rpc_api.app.core.context import Context, create_context
from todo_rpc_api.app.core.errors import (
    BadInputError,
    ErrorCode,
    InternalError,
    NotFoundError,
    ProcedureError,
)

from .procedure import Procedure
from .schema import SchemaValidationError

logger = logging.getLogger(__name__)

PATH_SEPARATOR = "."

ContextFactory = Callable[[Mapping[str, str]], Context]


class ProcedureRouter:
    """An immutable registry of procedures addressable by name."""

    def __init__(self, procedures: Mapping[str, Union[Procedure, "ProcedureRouter"]]) -> None:
        # A nested router is mounted under its key, e.g. {"todo": todo_router}.
        table: Dict[str, Procedure] = {}
        for name, entry in procedures.items():
            if not name or PATH_SEPARATOR in name:
                raise ValueError(f"invalid procedure name {name!r}")
            if isinstance(entry, ProcedureRouter):
                for sub_name, procedure in entry.procedures().items():
                    self._register(table, f"{name}{PATH_SEPARATOR}{sub_name}", procedure)
            elif isinstance(entry, Procedure):
                self._register(table, name, entry)
            else:
                raise TypeError(f"{name!r} is neither a Procedure nor a ProcedureRouter")
        self._table: Mapping[str, Procedure] = MappingProxyType(table)

    @staticmethod
    def _register(table: Dict[str, Procedure], path: str, procedure: Procedure) -> None:
        if path in table:
            raise ValueError(f"procedure {path!r} is declared twice")
        table[path] = procedure

    def __contains__(self, path: object) -> bool:
        return path in self._table

    def __iter__(self) -> Iterator[str]:
        return iter(self._table)

    def __len__(self) -> int:
        return len(self._table)

    def procedures(self) -> Mapping[str, Procedure]:
        """Read-only view of ``fully.qualified.name -> Procedure``."""
        return self._table

    def resolve(self, path: str) -> Procedure:
        procedure = self._table.get(path)
        if procedure is None:
            raise NotFoundError(f'No procedure found on path "{path}"')
        return procedure

    def describe(self) -> List[Dict[str, Any]]:
        """Summarise every procedure, including its JSON schemas."""
        described = []
        for path, procedure in self._table.items():
            described.append(
                {
                    "path": path,
                    "kind": procedure.kind.value,
                    "visibility": procedure.visibility.value,
                    "description": procedure.description,
                    "input": procedure.input_schema.json_schema() if procedure.input_schema else None,
                    "output": procedure.output_schema.json_schema(),
                }
            )
        return described

    async def invoke(self, path: str, raw_input: Any, context: Context) -> Any:
        """Run ``path`` with ``raw_input`` and return the validated output."""
        procedure = self.resolve(path)
        try:
            return await self._run(path, procedure, raw_input, context)
        except ProcedureError as exc:
            if exc.code is ErrorCode.INTERNAL_SERVER_ERROR:
                logger.error("procedure %s failed: %s", path, exc.message)
            else:
                logger.warning("procedure %s failed with %s: %s", path, exc.code.value, exc.message)
            raise

    async def _run(self, path: str, procedure: Procedure, raw_input: Any, context: Context) -> Any:
        validated_input = None
        if procedure.input_schema is not None:
            try:
                validated_input = procedure.input_schema.validate(raw_input)
            except SchemaValidationError as exc:
                raise BadInputError("Input validation failed", details=exc.issues) from exc

        try:
            result = procedure.handler(context, validated_input)
            if inspect.isawaitable(result):
                result = await result
        except ProcedureError:
            raise
        except Exception as exc:
            logger.exception("unexpected error in procedure %s", path)
            raise InternalError(str(exc) or type(exc).__name__) from exc

        try:
            return procedure.output_schema.validate(result)
        except SchemaValidationError as exc:
            logger.error("procedure %s returned output not matching its schema: %s", path, exc.issues)
            raise InternalError(
                f"Output of {path} does not match its declared schema",
                details=exc.issues,
            ) from exc

    def create_caller(
        self,
        metadata: Optional[Mapping[str, str]] = None,
        *,
        context_factory: ContextFactory = create_context,
    ) -> "ProcedureCaller":
        return ProcedureCaller(self, metadata or {}, context_factory)


class ProcedureCaller:
    """Invokes procedures in process, building a new context per call."""

    def __init__(
        self,
        router: ProcedureRouter,
        metadata: Mapping[str, str],
        context_factory: ContextFactory,
    ) -> None:
        self._router = router
        self._metadata = dict(metadata)
        self._context_factory = context_factory

    async def call(self, path: str, raw_input: Any = None) -> Any:
        context = self._context_factory(self._metadata)
        return await self._router.invoke(path, raw_input, context)
