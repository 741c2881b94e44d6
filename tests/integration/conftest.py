from __future__ import annotations

import pytest

import classduel.db.models  # noqa: F401
from classduel.core.integration_db_safety import assert_safe_integration_db
from classduel.db.models.base import Base
from classduel.db.session import engine


@pytest.fixture(scope="session", autouse=True)
def guard_integration_db_target() -> None:
    assert_safe_integration_db(str(engine.url))


@pytest.fixture(autouse=True)
async def reset_schema() -> None:
    # Dispose pooled connections between tests to avoid cross-event-loop reuse;
    # for in-memory SQLite this also discards the previous database.
    await engine.dispose()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)

    yield

    await engine.dispose()
