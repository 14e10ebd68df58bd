"""
Storage for the resource kinds.

``create_repository`` picks the backend named by the settings; services
only ever see the :class:`Repository` contract.
"""

from typing import Type

from todo_rpc_api.app.core.config import Settings
from todo_rpc_api.app.core.db import get_database_path

from .base import (
    DuplicateEntityError,
    EntityNotFoundError,
    EntityT,
    InMemoryRepository,
    Repository,
    RepositoryError,
)
from .sqlite import SqliteRepository


def create_repository(model: Type[EntityT], kind: str, settings: Settings) -> Repository[EntityT]:
    """Return the repository for ``kind`` on the configured backend."""
    if settings.storage_backend == "sqlite":
        return SqliteRepository(
            model,
            kind=kind,
            database_path=get_database_path(settings.database_url),
        )
    return InMemoryRepository(model)


__all__ = [
    "DuplicateEntityError",
    "EntityNotFoundError",
    "InMemoryRepository",
    "Repository",
    "RepositoryError",
    "SqliteRepository",
    "create_repository",
]
