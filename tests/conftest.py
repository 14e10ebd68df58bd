from __future__ import annotations

import pytest

from todo_rpc_api.app.api.router import build_app_router
from todo_rpc_api.app.core.config import Settings
from todo_rpc_api.app.repositories import InMemoryRepository
from todo_rpc_api.app.rpc import ProcedureRouter
from todo_rpc_api.app.schemas.todo import TodoRead
from todo_rpc_api.app.schemas.user import UserRead
from todo_rpc_api.app.services import TodoService, UserService


@pytest.fixture
def user_service() -> UserService:
    return UserService(InMemoryRepository(UserRead))


@pytest.fixture
def todo_service() -> TodoService:
    return TodoService(InMemoryRepository(TodoRead))


@pytest.fixture
def app_router(user_service: UserService, todo_service: TodoService) -> ProcedureRouter:
    return build_app_router(user_service, todo_service)


@pytest.fixture
def caller(app_router: ProcedureRouter):
    return app_router.create_caller({"Authorization": "Bearer test-token"})


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        environment="test",
        seed_demo_data=False,
        database_url=str(tmp_path / "todo_rpc.db"),
        cors_origins=[],
    )
