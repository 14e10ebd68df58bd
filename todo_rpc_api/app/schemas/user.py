"""
Pydantic models for user data.

``UserCreate`` is the input of ``createUser``; ``UserRead`` is what
every user procedure returns.  The id is always assigned by the
service, so it never appears in an input model.
"""

from pydantic import BaseModel, EmailStr, Field

from todo_rpc_api.app.rpc.schema import partial


class UserCreate(BaseModel):
    """Schema for registering a user."""

    name: str = Field(..., min_length=2, examples=["Alice"])
    email: EmailStr = Field(..., examples=["alice@example.com"])


UserUpdate = partial(UserCreate, name="UserUpdate")


class UserRead(UserCreate):
    """Schema for reading a user from the API."""

    id: str = Field(..., examples=["1"])


class UserUpdateInput(BaseModel):
    id: str
    data: UserUpdate  # type: ignore[valid-type]


class UserIdInput(BaseModel):
    id: str
