"""
Top-level procedure router of the application.

User procedures sit at the root; every other resource kind is mounted
under its alias.  When a new resource kind is added, build its router
in ``procedures`` and mount it here.
"""

from todo_rpc_api.app.rpc import ProcedureRouter
from todo_rpc_api.app.services import TodoService, UserService

from .procedures import todos, users


def build_app_router(user_service: UserService, todo_service: TodoService) -> ProcedureRouter:
    user_router = users.build_user_router(user_service)
    todo_router = todos.build_todo_router(todo_service)
    return ProcedureRouter(
        {
            **user_router.procedures(),
            todos.ALIAS: todo_router,
        }
    )
