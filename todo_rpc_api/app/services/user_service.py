"""
Business logic for users.

``UserService`` enforces the user invariants on top of its repository:
ids are assigned here (never by the caller) and an e-mail address may
belong to one user only.  Uniqueness checks and the write that follows
run inside ``repository.transaction()`` so two concurrent registrations
with the same address cannot both succeed.
"""

import logging
from typing import List

from todo_rpc_api.app.core.errors import ConflictError, NotFoundError
from todo_rpc_api.app.repositories import Repository

from ..schemas.user import UserCreate, UserRead

logger = logging.getLogger(__name__)

DEMO_USERS = (
    ("Alice", "alice@example.com"),
    ("Bob", "bob@example.com"),
    ("Charlie", "charlie@example.com"),
)


class UserService:
    """Service for user records."""

    def __init__(self, repository: Repository[UserRead]) -> None:
        self.repository = repository

    async def get_all(self) -> List[UserRead]:
        """Return every user in registration order."""
        return self.repository.find_all()

    async def get_by_id(self, user_id: str) -> UserRead:
        user = self.repository.find_by_id(user_id)
        if user is None:
            raise NotFoundError(f"User with id {user_id} not found")
        return user

    async def create(self, data: UserCreate) -> UserRead:
        """Register a new user.

        Raises ``ConflictError`` when the e-mail address is taken.
        """
        with self.repository.transaction():
            if self.repository.find_by(lambda u: u.email == data.email) is not None:
                raise ConflictError("User with this email already exists")
            user = UserRead(id=self.repository.next_id(), **data.model_dump())
            self.repository.insert(user)
        logger.info("Registered user %s", user.id)
        return user

    async def update(self, user_id: str, fields: dict) -> UserRead:
        """Apply the supplied ``fields``; omitted ones are left untouched."""
        with self.repository.transaction():
            if self.repository.find_by_id(user_id) is None:
                raise NotFoundError(f"User with id {user_id} not found")
            email = fields.get("email")
            if email is not None:
                owner = self.repository.find_by(lambda u: u.email == email)
                if owner is not None and owner.id != user_id:
                    raise ConflictError("User with this email already exists")
            user = self.repository.update_partial(user_id, fields)
        if fields:
            logger.info("Updated user %s (%s)", user_id, ", ".join(sorted(fields)))
        return user

    async def delete(self, user_id: str) -> bool:
        """Delete a user; returns ``False`` if there was nothing to delete."""
        deleted = self.repository.delete(user_id)
        if deleted:
            logger.info("Deleted user %s", user_id)
        return deleted

    def seed_demo_users(self) -> None:
        """Insert the demo users unless their addresses are already present."""
        for name, email in DEMO_USERS:
            with self.repository.transaction():
                if self.repository.find_by(lambda u: u.email == email) is not None:
                    continue
                self.repository.insert(UserRead(id=self.repository.next_id(), name=name, email=email))
        logger.debug("Demo users seeded")
