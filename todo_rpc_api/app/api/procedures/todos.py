"""
Todo procedures, mounted under the ``todo`` alias.

Full CRUD; the logic lives in :class:`TodoService`.
"""

from typing import Any, List

from todo_rpc_api.app.core.context import Context
from todo_rpc_api.app.rpc import ProcedureRouter, mutation, query
from todo_rpc_api.app.schemas.todo import TodoCreate, TodoIdInput, TodoRead, TodoUpdateInput
from todo_rpc_api.app.services.todo_service import TodoService

ALIAS = "todo"


def build_todo_router(service: TodoService) -> ProcedureRouter:
    async def get_todo_by_id(ctx: Context, data: TodoIdInput) -> TodoRead:
        return await service.get_by_id(data.id)

    async def get_all_todos(ctx: Context, _: Any) -> List[TodoRead]:
        return await service.get_all()

    async def create_todo(ctx: Context, data: TodoCreate) -> TodoRead:
        return await service.create(data)

    async def update_todo(ctx: Context, data: TodoUpdateInput) -> TodoRead:
        # Only the fields the caller sent; an empty ``data`` changes nothing.
        return await service.update(data.id, data.data.model_dump(exclude_unset=True))

    async def delete_todo(ctx: Context, data: TodoIdInput) -> bool:
        return await service.delete(data.id)

    return ProcedureRouter(
        {
            "getTodoById": query(get_todo_by_id, input=TodoIdInput, output=TodoRead),
            "getAllTodos": query(get_all_todos, output=List[TodoRead]),
            "createTodo": mutation(create_todo, input=TodoCreate, output=TodoRead),
            "updateTodo": mutation(update_todo, input=TodoUpdateInput, output=TodoRead),
            "deleteTodo": mutation(delete_todo, input=TodoIdInput, output=bool),
        }
    )
