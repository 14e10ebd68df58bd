from __future__ import annotations

import asyncio
import threading

import pytest

from todo_rpc_api.app.core.errors import ConflictError, NotFoundError
from todo_rpc_api.app.repositories import InMemoryRepository
from todo_rpc_api.app.schemas.user import UserCreate, UserRead
from todo_rpc_api.app.services import UserService


@pytest.mark.asyncio
async def test_create_then_get_returns_input_with_new_id(user_service: UserService) -> None:
    created = await user_service.create(UserCreate(name="Al", email="a@b.com"))

    fetched = await user_service.get_by_id(created.id)

    assert fetched == created
    assert fetched.model_dump(exclude={"id"}) == {"name": "Al", "email": "a@b.com"}
    assert created.id == "1"


@pytest.mark.asyncio
async def test_ids_are_fresh_after_deletes(user_service: UserService) -> None:
    first = await user_service.create(UserCreate(name="Al", email="al@example.com"))
    second = await user_service.create(UserCreate(name="Bo", email="bo@example.com"))
    await user_service.delete(first.id)

    third = await user_service.create(UserCreate(name="Cy", email="cy@example.com"))

    assert third.id not in {first.id, second.id}
    assert [user.id for user in await user_service.get_all()] == [second.id, third.id]


@pytest.mark.asyncio
async def test_duplicate_email_conflicts_and_adds_nothing(user_service: UserService) -> None:
    await user_service.create(UserCreate(name="Al", email="a@b.com"))

    with pytest.raises(ConflictError) as excinfo:
        await user_service.create(UserCreate(name="Bo", email="a@b.com"))

    assert excinfo.value.message == "User with this email already exists"
    assert len(await user_service.get_all()) == 1


@pytest.mark.asyncio
async def test_get_by_id_missing_raises_not_found(user_service: UserService) -> None:
    with pytest.raises(NotFoundError) as excinfo:
        await user_service.get_by_id("42")

    assert excinfo.value.message == "User with id 42 not found"


@pytest.mark.asyncio
async def test_update_merges_supplied_fields(user_service: UserService) -> None:
    user = await user_service.create(UserCreate(name="Al", email="a@b.com"))

    updated = await user_service.update(user.id, {"name": "Alan"})

    assert updated == UserRead(id=user.id, name="Alan", email="a@b.com")


@pytest.mark.asyncio
async def test_update_to_taken_email_conflicts(user_service: UserService) -> None:
    await user_service.create(UserCreate(name="Al", email="al@example.com"))
    bo = await user_service.create(UserCreate(name="Bo", email="bo@example.com"))

    with pytest.raises(ConflictError):
        await user_service.update(bo.id, {"email": "al@example.com"})
    # Keeping one's own address is not a conflict.
    assert (await user_service.update(bo.id, {"email": "bo@example.com"})).email == "bo@example.com"


@pytest.mark.asyncio
async def test_update_missing_raises_not_found(user_service: UserService) -> None:
    with pytest.raises(NotFoundError):
        await user_service.update("9", {"name": "Ghost"})


@pytest.mark.asyncio
async def test_delete_is_idempotent(user_service: UserService) -> None:
    user = await user_service.create(UserCreate(name="Al", email="a@b.com"))

    assert await user_service.delete(user.id) is True
    assert await user_service.delete(user.id) is False
    assert await user_service.delete("never-existed") is False


def test_seed_demo_users_is_repeatable() -> None:
    service = UserService(InMemoryRepository(UserRead))

    service.seed_demo_users()
    service.seed_demo_users()

    users = asyncio.run(service.get_all())
    assert [user.name for user in users] == ["Alice", "Bob", "Charlie"]
    assert [user.id for user in users] == ["1", "2", "3"]


def test_concurrent_creates_with_same_email_admit_one() -> None:
    service = UserService(InMemoryRepository(UserRead))
    start = threading.Barrier(8)
    outcomes = []
    outcomes_lock = threading.Lock()

    def register(index: int) -> None:
        start.wait()
        try:
            asyncio.run(service.create(UserCreate(name=f"User{index}", email="same@example.com")))
            result = "created"
        except ConflictError:
            result = "conflict"
        with outcomes_lock:
            outcomes.append(result)

    threads = [threading.Thread(target=register, args=(i,)) for i in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join(timeout=10)

    assert outcomes.count("created") == 1
    assert outcomes.count("conflict") == 7
    assert service.repository.count() == 1
