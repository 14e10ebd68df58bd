"""
SQLite backed repository.

Entities are stored as JSON in the shared ``entities`` table, scoped by
``kind``.  Every call opens its own connection, which keeps the
repository usable from any thread; the repository lock still
serialises mutations so check-then-act sequences stay atomic within
one process.
"""

from __future__ import annotations

import json
import logging
from typing import Any, List, Mapping, Optional, Type

from todo_rpc_api.app.core.db import get_cursor, init_db

from .base import DuplicateEntityError, EntityNotFoundError, EntityT, Repository

logger = logging.getLogger(__name__)


class SqliteRepository(Repository[EntityT]):
    def __init__(self, model: Type[EntityT], *, kind: str, database_path: str) -> None:
        super().__init__(model)
        self.kind = kind
        self.database_path = database_path
        init_db(database_path)
        logger.debug("Using SQLite store %s for %s", database_path, kind)

    def _to_entity(self, payload: str) -> EntityT:
        return self.model.model_validate_json(payload)

    def find_by_id(self, entity_id: str) -> Optional[EntityT]:
        with self._lock, get_cursor(self.database_path) as cursor:
            row = cursor.execute(
                "SELECT payload FROM entities WHERE kind = ? AND id = ?",
                (self.kind, entity_id),
            ).fetchone()
        return self._to_entity(row["payload"]) if row else None

    def find_all(self) -> List[EntityT]:
        with self._lock, get_cursor(self.database_path) as cursor:
            rows = cursor.execute(
                "SELECT payload FROM entities WHERE kind = ? ORDER BY seq ASC",
                (self.kind,),
            ).fetchall()
        return [self._to_entity(row["payload"]) for row in rows]

    def insert(self, entity: EntityT) -> EntityT:
        entity_id = getattr(entity, "id")
        with self._lock, get_cursor(self.database_path) as cursor:
            exists = cursor.execute(
                "SELECT 1 FROM entities WHERE kind = ? AND id = ?",
                (self.kind, entity_id),
            ).fetchone()
            if exists:
                raise DuplicateEntityError(entity_id)
            cursor.execute(
                """
                INSERT INTO entities (kind, id, seq, payload)
                VALUES (?, ?, (SELECT COALESCE(MAX(seq), 0) + 1 FROM entities WHERE kind = ?), ?)
                """,
                (self.kind, entity_id, self.kind, entity.model_dump_json()),
            )
        return entity

    def update_partial(self, entity_id: str, fields: Mapping[str, Any]) -> EntityT:
        with self._lock:
            current = self.find_by_id(entity_id)
            if current is None:
                raise EntityNotFoundError(entity_id)
            updated = self._merge(current, fields)
            with get_cursor(self.database_path) as cursor:
                cursor.execute(
                    "UPDATE entities SET payload = ? WHERE kind = ? AND id = ?",
                    (updated.model_dump_json(), self.kind, entity_id),
                )
            return updated

    def delete(self, entity_id: str) -> bool:
        with self._lock, get_cursor(self.database_path) as cursor:
            cursor.execute(
                "DELETE FROM entities WHERE kind = ? AND id = ?",
                (self.kind, entity_id),
            )
            return cursor.rowcount > 0

    def next_id(self) -> str:
        with self._lock, get_cursor(self.database_path) as cursor:
            cursor.execute(
                "INSERT OR IGNORE INTO sequences (kind, value) VALUES (?, 0)",
                (self.kind,),
            )
            while True:
                cursor.execute(
                    "UPDATE sequences SET value = value + 1 WHERE kind = ?",
                    (self.kind,),
                )
                value = cursor.execute(
                    "SELECT value FROM sequences WHERE kind = ?",
                    (self.kind,),
                ).fetchone()["value"]
                candidate = str(value)
                taken = cursor.execute(
                    "SELECT 1 FROM entities WHERE kind = ? AND id = ?",
                    (self.kind, candidate),
                ).fetchone()
                if not taken:
                    return candidate

    def count(self) -> int:
        with self._lock, get_cursor(self.database_path) as cursor:
            row = cursor.execute(
                "SELECT COUNT(*) AS count FROM entities WHERE kind = ?",
                (self.kind,),
            ).fetchone()
        return int(row["count"])
