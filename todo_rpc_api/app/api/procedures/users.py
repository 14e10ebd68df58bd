"""
User procedures.

These are mounted at the root of the application router, so they are
addressed without an alias (``getUsers``, ``createUser`` ...).  All of
them are public: the context identity is carried but not checked.
"""

from typing import Any, List

from todo_rpc_api.app.core.context import Context
from todo_rpc_api.app.rpc import ProcedureRouter, mutation, query
from todo_rpc_api.app.schemas.user import UserCreate, UserIdInput, UserRead, UserUpdateInput
from todo_rpc_api.app.services.user_service import UserService


def build_user_router(service: UserService) -> ProcedureRouter:
    """Declare the user procedures against ``service``."""

    async def get_users(ctx: Context, _: Any) -> List[UserRead]:
        """List every user."""
        return await service.get_all()

    async def get_user_by_id(ctx: Context, user_id: str) -> UserRead:
        """Fetch one user by id."""
        return await service.get_by_id(user_id)

    async def create_user(ctx: Context, data: UserCreate) -> UserRead:
        """Register a user; the e-mail address must be unused."""
        return await service.create(data)

    async def update_user(ctx: Context, data: UserUpdateInput) -> UserRead:
        """Change the supplied fields of a user."""
        return await service.update(data.id, data.data.model_dump(exclude_unset=True))

    async def delete_user(ctx: Context, data: UserIdInput) -> bool:
        """Delete a user; ``false`` when it did not exist."""
        return await service.delete(data.id)

    return ProcedureRouter(
        {
            "getUsers": query(get_users, output=List[UserRead]),
            "getUserById": query(get_user_by_id, input=str, output=UserRead),
            "createUser": mutation(create_user, input=UserCreate, output=UserRead),
            "updateUser": mutation(update_user, input=UserUpdateInput, output=UserRead),
            "deleteUser": mutation(delete_user, input=UserIdInput, output=bool),
        }
    )
