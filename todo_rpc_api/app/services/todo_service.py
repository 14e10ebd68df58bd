"""
Service layer for todo items.

Inputs arrive already validated by the procedure schemas, so the
service only deals with existence: unknown ids raise ``NotFoundError``
on read and update, while delete reports ``False`` instead of failing.
"""

import logging
from typing import Any, Dict, List

from todo_rpc_api.app.core.errors import NotFoundError
from todo_rpc_api.app.repositories import EntityNotFoundError, Repository

from ..schemas.todo import TodoCreate, TodoRead

logger = logging.getLogger(__name__)


class TodoService:
    def __init__(self, repository: Repository[TodoRead]) -> None:
        self.repository = repository

    async def get_all(self) -> List[TodoRead]:
        return self.repository.find_all()

    async def get_by_id(self, todo_id: str) -> TodoRead:
        todo = self.repository.find_by_id(todo_id)
        if todo is None:
            raise NotFoundError(f"Todo with id {todo_id} not found")
        return todo

    async def create(self, data: TodoCreate) -> TodoRead:
        with self.repository.transaction():
            todo = TodoRead(id=self.repository.next_id(), **data.model_dump())
            self.repository.insert(todo)
        logger.info("Created todo %s", todo.id)
        return todo

    async def update(self, todo_id: str, fields: Dict[str, Any]) -> TodoRead:
        """Merge ``fields`` onto the todo.

        An empty ``fields`` mapping is a no-op that returns the todo
        unchanged.
        """
        try:
            todo = self.repository.update_partial(todo_id, fields)
        except EntityNotFoundError:
            raise NotFoundError(f"Todo with id {todo_id} not found") from None
        if fields:
            logger.info("Updated todo %s (%s)", todo_id, ", ".join(sorted(fields)))
        return todo

    async def delete(self, todo_id: str) -> bool:
        deleted = self.repository.delete(todo_id)
        if deleted:
            logger.info("Deleted todo %s", todo_id)
        return deleted
