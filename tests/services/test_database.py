"""Database Session Manager: SQLAlchemy failures leave as DatabaseError.

Tests cover:
    - Each SQLAlchemy failure kind maps to its DatabaseError operation
    - A failing statement inside a session rolls back and raises DatabaseError
    - Domain errors raised inside a session pass through unchanged
"""

import pytest
from sqlalchemy import text
from sqlalchemy.exc import IntegrityError, OperationalError, SQLAlchemyError

from order_admission.core.errors import DatabaseError, ResourceNotFoundError
from order_admission.infrastructure.database import (
    DatabaseSessionManager, to_database_error,
)


@pytest.fixture
async def manager():
    m = DatabaseSessionManager("sqlite+aiosqlite:///:memory:")
    yield m
    await m.dispose()


def test_failure_kinds_map_to_operations():
    integrity = IntegrityError("INSERT", {}, Exception("unique"))
    operational = OperationalError("SELECT", {}, Exception("gone"))
    assert to_database_error(integrity).operation == "commit"
    assert to_database_error(operational).operation == "execute"
    assert to_database_error(SQLAlchemyError("boom")).operation == "unknown"
    assert to_database_error(integrity).http_status == 503


async def test_failing_statement_becomes_database_error(manager):
    with pytest.raises(DatabaseError) as exc:
        async with manager.session() as db:
            await db.execute(text("SELECT * FROM no_such_table"))
    assert exc.value.code == "DATABASE_ERROR"
    assert isinstance(exc.value.__cause__, OperationalError)


async def test_domain_errors_pass_through(manager):
    with pytest.raises(ResourceNotFoundError):
        async with manager.session():
            raise ResourceNotFoundError("product", "P9")


async def test_health_check_round_trips(manager):
    assert await manager.health_check() is True
