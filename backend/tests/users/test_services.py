from datetime import datetime, timedelta
from uuid import uuid4

import bcrypt
import pytest

from conftest import insert_user
from users.application.dto import CreateUserModel
from users.application.services import UserService
from users.domain.entities import UpdateUserDto, User, UserFilterParams, UserRole
from users.infrastructure.unit_of_work import SqlAlchemyUnitOfWork


@pytest.fixture
def service(db):
    return UserService(SqlAlchemyUnitOfWork(db))


def _user(**overrides) -> User:
    values = {
        "id": uuid4(),
        "email": "alice@example.com",
        "password_hash": "$2b$12$hash",
        "first_name": "Alice",
        "created_at": datetime(2024, 1, 1),
    }
    values.update(overrides)
    return User(**values)


async def test_convert_to_dto_hides_password(service):
    dto = service.convert_to_dto(_user())
    assert dto.password_hash is None
    assert "passwordHash" not in dto.model_dump(by_alias=True, exclude_none=True)
    assert dto.first_name == "Alice"
    assert dto.role == UserRole.USER


async def test_convert_to_dto_includes_password_on_request(service):
    dto = service.convert_to_dto(_user(), include_password=True)
    assert dto.password_hash == "$2b$12$hash"
    assert dto.model_dump(by_alias=True)["passwordHash"] == "$2b$12$hash"


async def test_convert_to_dto_without_stored_password(service):
    dto = service.convert_to_dto(_user(password_hash=None), include_password=True)
    assert dto.password_hash is None


async def test_create_hashes_password(service):
    dto = await service.create(
        CreateUserModel(email="alice@example.com", password="secret123", first_name="Alice"),
        UserRole.ADMIN,
    )
    assert dto.role == UserRole.ADMIN
    assert dto.password_hash is None

    stored = await service.find_by_email("alice@example.com", include_password=True)
    assert bcrypt.checkpw(b"secret123", stored.password_hash.encode())


async def test_create_without_password(service):
    dto = await service.create(CreateUserModel(email="bob@example.com"))
    assert dto.role == UserRole.USER
    stored = await service.find_by_email("bob@example.com", include_password=True)
    assert stored.password_hash is None


async def test_find_by_email_forwards_include_password(service, db):
    await insert_user(db, "alice@example.com", password="secret123")

    hidden = await service.find_by_email("ALICE@example.com")
    shown = await service.find_by_email("ALICE@example.com", include_password=True)
    assert hidden.password_hash is None
    assert shown.password_hash is not None


async def test_missing_users_return_none(service):
    missing = uuid4()
    assert await service.find_by_id(missing) is None
    assert await service.find_by_email("nobody@example.com") is None
    assert await service.update(missing, UpdateUserDto(first_name="X")) is None
    assert await service.delete(missing) is None
    assert await service.update_password(missing, "hash") is None
    assert await service.update_role(missing, UserRole.ADMIN) is None


async def test_update_and_delete(service, db):
    model = await insert_user(db, "alice@example.com", password="secret123", first_name="Alice")

    updated = await service.update(model.id, UpdateUserDto(last_name="Smith"))
    assert updated.last_name == "Smith"
    assert updated.first_name == "Alice"
    assert updated.password_hash is None

    deleted = await service.delete(model.id)
    assert deleted.id == model.id
    assert deleted.password_hash is None
    assert await service.find_by_id(model.id) is None


async def test_find_all_converts_page(service, db):
    for i in range(25):
        await insert_user(db, f"user{i:02d}@example.com")

    result = await service.find_all(UserFilterParams(search="user"), page=2, limit=10)
    assert len(result.users) == 10
    assert result.total == 25
    assert result.total_pages == 3
    assert all(u.password_hash is None for u in result.users)


async def test_find_by_date_range_converts_page(service, db):
    base = datetime(2024, 3, 1)
    await insert_user(db, "old@example.com", created_at=base - timedelta(days=30))
    await insert_user(db, "new@example.com", created_at=base)

    result = await service.find_by_date_range(base - timedelta(days=1), base + timedelta(days=1))
    assert [u.email for u in result.users] == ["new@example.com"]
    assert result.total_pages == 1


async def test_count_by_role(service, db):
    await insert_user(db, "a@example.com")
    await insert_user(db, "b@example.com", role=UserRole.ADMIN)

    counts = await service.count_by_role()
    assert {(c.role, c.count) for c in counts} == {(UserRole.USER, 1), (UserRole.ADMIN, 1)}
