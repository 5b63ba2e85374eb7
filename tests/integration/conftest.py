"""Integration fixtures: a real PostgreSQL database.

Set TEST_DATABASE_URL (postgresql+asyncpg://...) to run these tests; they
are skipped otherwise. Tables are created from the ORM metadata and dropped
after each test.
"""

import os
from datetime import UTC, datetime

import pytest
from uuid_extensions import uuid7

import src.infrastructure.persistence.models  # noqa: F401  (registers tables)
from src.domain.entities import User
from src.infrastructure.persistence.database import Database
from src.infrastructure.persistence.repositories import SQLAlchemyUserRepository

TEST_DATABASE_URL = os.environ.get("TEST_DATABASE_URL")


def pytest_collection_modifyitems(config, items):
    if TEST_DATABASE_URL:
        return
    skip = pytest.mark.skip(reason="TEST_DATABASE_URL not set")
    for item in items:
        if "integration" in item.keywords:
            item.add_marker(skip)


@pytest.fixture
async def test_database():
    """Fresh schema per test."""
    database = Database(TEST_DATABASE_URL, pool_size=2)
    await database.drop_all()
    await database.create_all()
    yield database
    await database.drop_all()
    await database.close()


@pytest.fixture
async def stored_user(test_database) -> User:
    now = datetime.now(UTC)
    user = User(
        id=uuid7(),
        email="ana@example.com",
        password_hash="$2b$04$placeholderplaceholderplaceholderplaceholderplacehol",
        first_name="Ana",
        last_name="Pérez",
        is_email_verified=True,
        email_verified_at=now,
        backup_code_hashes=["a" * 64, "b" * 64],
    )
    async with test_database.get_session() as session:
        await SQLAlchemyUserRepository(session).save(user)
    return user
