"""
Pydantic schemas for todo items.

``TodoCreate`` is the configurable part of a todo: the router and the
service only rely on it being a model, and ``TodoUpdate`` is derived
from it with :func:`partial`, so adding a field here is enough to make
it creatable and updatable.
"""

from typing import Optional

from pydantic import BaseModel, Field

from todo_rpc_api.app.rpc.schema import partial


class TodoCreate(BaseModel):
    """Schema for creating a new todo."""

    title: str = Field(..., min_length=1, max_length=200, description="Short summary of the task")
    description: Optional[str] = Field(None, max_length=2000, description="Free-form details")
    completed: bool = Field(False, description="Whether the task is done")


# All fields optional; only the supplied ones are applied on update.
TodoUpdate = partial(TodoCreate, name="TodoUpdate")


class TodoRead(TodoCreate):
    """Schema for reading a todo."""

    id: str


class TodoIdInput(BaseModel):
    id: str


class TodoUpdateInput(BaseModel):
    id: str
    data: TodoUpdate  # type: ignore[valid-type]
