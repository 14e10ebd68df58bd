"""
Top-level package for the Todo RPC API.

All functionality lives in submodules under ``app``; import the ASGI
application from ``todo_rpc_api.app.main``.
"""

__all__ = []
