"""
Service layer abstraction.

Each service encapsulates the business rules of one resource kind and
receives its repository at construction, so the storage backend can
be swapped (or replaced in tests) without touching the procedures.
"""

from .todo_service import TodoService
from .user_service import UserService

__all__ = ["TodoService", "UserService"]
