from __future__ import annotations

from sqlalchemy import event
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from classduel.core.config import get_settings

SQLITE_MEMORY_NAMES = {"", ":memory:"}


def _serialize_sqlite_writers(engine: AsyncEngine) -> None:
    # SQLite ignores FOR UPDATE; take the database write lock when the transaction opens.
    @event.listens_for(engine.sync_engine, "connect")
    def _disable_driver_begin(dbapi_connection, connection_record) -> None:
        dbapi_connection.isolation_level = None

    @event.listens_for(engine.sync_engine, "begin")
    def _begin_immediate(conn) -> None:
        conn.exec_driver_sql("BEGIN IMMEDIATE")


def create_engine_for_url(database_url: str) -> AsyncEngine:
    url = make_url(database_url)
    if url.get_backend_name() != "sqlite":
        return create_async_engine(database_url, pool_pre_ping=True)
    if (url.database or "") in SQLITE_MEMORY_NAMES:
        # One shared connection, otherwise every checkout sees an empty database.
        return create_async_engine(
            database_url,
            poolclass=StaticPool,
            connect_args={"check_same_thread": False},
        )

    sqlite_engine = create_async_engine(database_url, connect_args={"timeout": 30})
    _serialize_sqlite_writers(sqlite_engine)
    return sqlite_engine


engine = create_engine_for_url(get_settings().database_url)

SessionLocal: async_sessionmaker[AsyncSession] = async_sessionmaker(
    engine,
    expire_on_commit=False,
)
