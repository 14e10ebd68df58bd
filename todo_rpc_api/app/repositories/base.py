"""
Repository contract and the in-memory implementation.

A repository exclusively owns the collection of one resource kind.
Entities are pydantic models with a string ``id``.  Every operation
takes the repository lock, and :meth:`Repository.transaction` exposes
the same (re-entrant) lock so a service can make a check-then-act
sequence atomic::

    with repository.transaction():
        if repository.find_by(lambda u: u.email == email) is None:
            repository.insert(user)

Ids come from :meth:`Repository.next_id`, a counter that is never
decremented, so an id is not handed out twice even after deletes.
"""

from __future__ import annotations

import threading
from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import Any, Callable, Dict, Generic, Iterator, List, Mapping, Optional, Type, TypeVar

from pydantic import BaseModel

EntityT = TypeVar("EntityT", bound=BaseModel)


class RepositoryError(Exception):
    """Base class for storage level failures."""


class EntityNotFoundError(RepositoryError, LookupError):
    def __init__(self, entity_id: str) -> None:
        super().__init__(f"entity {entity_id!r} does not exist")
        self.entity_id = entity_id


class DuplicateEntityError(RepositoryError, ValueError):
    def __init__(self, entity_id: str) -> None:
        super().__init__(f"entity {entity_id!r} already exists")
        self.entity_id = entity_id


class Repository(ABC, Generic[EntityT]):
    """Storage for one resource kind."""

    def __init__(self, model: Type[EntityT]) -> None:
        self.model = model
        self._lock = threading.RLock()

    @contextmanager
    def transaction(self) -> Iterator["Repository[EntityT]"]:
        """Hold the repository lock for a multi-step operation."""
        with self._lock:
            yield self

    @abstractmethod
    def find_by_id(self, entity_id: str) -> Optional[EntityT]: ...

    @abstractmethod
    def find_all(self) -> List[EntityT]: ...

    def find_by(self, predicate: Callable[[EntityT], bool]) -> Optional[EntityT]:
        """Return the first entity (in insertion order) matching ``predicate``."""
        with self._lock:
            for entity in self.find_all():
                if predicate(entity):
                    return entity
            return None

    @abstractmethod
    def insert(self, entity: EntityT) -> EntityT: ...

    @abstractmethod
    def update_partial(self, entity_id: str, fields: Mapping[str, Any]) -> EntityT: ...

    @abstractmethod
    def delete(self, entity_id: str) -> bool: ...

    @abstractmethod
    def next_id(self) -> str: ...

    def count(self) -> int:
        return len(self.find_all())

    def _merge(self, entity: EntityT, fields: Mapping[str, Any]) -> EntityT:
        # The id is owned by the repository and cannot be patched.
        changes = {key: value for key, value in fields.items() if key != "id"}
        if not changes:
            return entity
        return self.model.model_validate({**entity.model_dump(), **changes})


class InMemoryRepository(Repository[EntityT]):
    """Keeps entities in an insertion ordered dict for the process lifetime."""

    def __init__(self, model: Type[EntityT]) -> None:
        super().__init__(model)
        self._entities: Dict[str, EntityT] = {}
        self._last_id = 0

    def find_by_id(self, entity_id: str) -> Optional[EntityT]:
        with self._lock:
            return self._entities.get(entity_id)

    def find_all(self) -> List[EntityT]:
        with self._lock:
            return list(self._entities.values())

    def insert(self, entity: EntityT) -> EntityT:
        with self._lock:
            entity_id = getattr(entity, "id")
            if entity_id in self._entities:
                raise DuplicateEntityError(entity_id)
            self._entities[entity_id] = entity
            return entity

    def update_partial(self, entity_id: str, fields: Mapping[str, Any]) -> EntityT:
        with self._lock:
            current = self._entities.get(entity_id)
            if current is None:
                raise EntityNotFoundError(entity_id)
            updated = self._merge(current, fields)
            self._entities[entity_id] = updated
            return updated

    def delete(self, entity_id: str) -> bool:
        with self._lock:
            return self._entities.pop(entity_id, None) is not None

    def next_id(self) -> str:
        with self._lock:
            self._last_id += 1
            # Skip ids inserted by hand (seed data, imports).
            while str(self._last_id) in self._entities:
                self._last_id += 1
            return str(self._last_id)

    def count(self) -> int:
        with self._lock:
            return len(self._entities)
