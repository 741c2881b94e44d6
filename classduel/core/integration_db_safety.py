from __future__ import annotations

import re
from dataclasses import dataclass

from sqlalchemy.engine import make_url

TEST_DB_NAME_RE = re.compile(r"test", re.IGNORECASE)
SQLITE_MEMORY_NAMES = {"", ":memory:"}
ALLOWED_LOCAL_HOSTS = {
    "localhost",
    "127.0.0.1",
    "::1",
    "postgres",
    "classduel_postgres",
}


@dataclass(frozen=True, slots=True)
class IntegrationDbSafetyResult:
    is_safe: bool
    reason: str
    backend: str
    database_name: str
    host: str


def assess_integration_db_safety(database_url: str) -> IntegrationDbSafetyResult:
    """Integration tests drop and recreate every table, so only throwaway targets pass."""
    parsed = make_url(database_url)
    backend = parsed.get_backend_name()
    db_name = (parsed.database or "").strip()
    host = (parsed.host or "").strip().lower()

    def _result(is_safe: bool, reason: str) -> IntegrationDbSafetyResult:
        return IntegrationDbSafetyResult(
            is_safe=is_safe,
            reason=reason,
            backend=backend,
            database_name=db_name,
            host=host,
        )

    if backend == "sqlite":
        if db_name in SQLITE_MEMORY_NAMES:
            return _result(True, "ok")
        if TEST_DB_NAME_RE.search(db_name) is None:
            return _result(False, "SQLite file name must clearly indicate a test database.")
        return _result(True, "ok")

    if backend != "postgresql":
        return _result(False, "Integration tests support only SQLite or PostgreSQL test databases.")
    if not db_name:
        return _result(False, "Database name is empty.")
    if TEST_DB_NAME_RE.search(db_name) is None:
        return _result(False, "Database name must clearly indicate a test database (contain 'test').")
    if host not in ALLOWED_LOCAL_HOSTS:
        return _result(False, "Host is not in allowed local integration-test hosts.")
    return _result(True, "ok")


def assert_safe_integration_db(database_url: str) -> None:
    result = assess_integration_db_safety(database_url)
    if result.is_safe:
        return

    raise RuntimeError(
        "Refusing to run integration tests that drop and recreate the schema.\n"
        f"Reason: {result.reason}\n"
        f"Resolved DB: backend='{result.backend}' name='{result.database_name}' host='{result.host}'\n"
        "Required: an in-memory SQLite database or a dedicated local test DB, e.g. 'classduel_test'."
    )
