"""
Typed remote-procedure layer.

Procedures are declared with :func:`query` / :func:`mutation`, grouped
in a :class:`ProcedureRouter` and invoked through
:meth:`ProcedureRouter.invoke` (or a :class:`ProcedureCaller`).  The
HTTP binding lives in ``api.transport``; nothing in this package knows
about HTTP.
"""

from .procedure import Procedure, ProcedureKind, Visibility, mutation, query
from .router import ProcedureCaller, ProcedureRouter
from .schema import Schema, SchemaValidationError, partial

__all__ = [
    "Procedure",
    "ProcedureKind",
    "Visibility",
    "mutation",
    "query",
    "ProcedureCaller",
    "ProcedureRouter",
    "Schema",
    "SchemaValidationError",
    "partial",
]
