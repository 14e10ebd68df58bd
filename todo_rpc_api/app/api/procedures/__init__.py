"""
Procedure tables, one module per resource kind.

Each module exposes a ``build_*_router`` function returning a
:class:`~todo_rpc_api.app.rpc.ProcedureRouter`; ``api.router`` mounts
them into the application router.
"""
