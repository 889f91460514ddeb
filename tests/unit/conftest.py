"""Unit test environment helpers."""

from contextlib import asynccontextmanager
from typing import Any, Callable, List, Optional

import pytest

from dal.mysql.query_target import MysqlQueryTargetDatabase
from table_schema import ColumnDef, TableDef


class FakeMysqlConnection:
    """Records every statement and answers from a responder callable."""

    def __init__(self, responder: Callable[[str], Any]) -> None:
        self._responder = responder
        self.statements: List[str] = []
        self.last_truncated = False

    def _answer(self, sql: str) -> Any:
        self.statements.append(sql)
        result = self._responder(sql)
        if isinstance(result, Exception):
            raise result
        return result

    async def fetch(self, sql: str) -> list:
        return list(self._answer(sql) or [])

    async def fetchrow(self, sql: str) -> Optional[dict]:
        rows = await self.fetch(sql)
        return rows[0] if rows else None

    async def execute_update(self, sql: str) -> int:
        return self._answer(sql)

    async def execute(self, sql: str) -> Any:
        return self._answer(sql)

    async def use_database(self, name: str) -> None:
        self.statements.append(f"USE `{name}`")


class FakeConnectionPool:
    """Mimics MysqlQueryTargetDatabase.get_connection over one fake connection."""

    def __init__(self, responder: Callable[[str], Any]) -> None:
        self.connection = FakeMysqlConnection(responder)

    @property
    def statements(self) -> List[str]:
        return self.connection.statements

    @asynccontextmanager
    async def get_connection(self):
        yield self.connection


@pytest.fixture(autouse=True)
def _reset_pool_state():
    """Reset class-level MySQL pool state after each test."""
    original_pool = MysqlQueryTargetDatabase._pool
    original_host = MysqlQueryTargetDatabase._host
    original_db_name = MysqlQueryTargetDatabase._db_name
    original_max_rows = MysqlQueryTargetDatabase._max_rows

    yield

    MysqlQueryTargetDatabase._pool = original_pool
    MysqlQueryTargetDatabase._host = original_host
    MysqlQueryTargetDatabase._db_name = original_db_name
    MysqlQueryTargetDatabase._max_rows = original_max_rows


@pytest.fixture
def users_table() -> TableDef:
    """A two-column table with an auto-generated integer key."""
    return TableDef(
        name="users",
        columns=[
            ColumnDef(
                name="id",
                data_type="int",
                column_type="int(11)",
                column_key="PRI",
                is_primary_key=True,
                is_nullable=False,
                ordinal_position=1,
            ),
            ColumnDef(
                name="label",
                data_type="varchar",
                column_type="varchar(255)",
                is_nullable=True,
                default=None,
                ordinal_position=2,
            ),
        ],
    )


@pytest.fixture
def memberships_table() -> TableDef:
    """A table keyed by (tenant_id, id)."""
    return TableDef(
        name="memberships",
        columns=[
            ColumnDef(
                name="tenant_id",
                data_type="varchar",
                is_primary_key=True,
                is_nullable=False,
                ordinal_position=1,
            ),
            ColumnDef(
                name="id",
                data_type="bigint",
                is_primary_key=True,
                is_nullable=False,
                ordinal_position=2,
            ),
            ColumnDef(
                name="role",
                data_type="enum",
                is_nullable=False,
                default="member",
                ordinal_position=3,
            ),
            ColumnDef(
                name="score",
                data_type="decimal",
                is_nullable=True,
                ordinal_position=4,
            ),
        ],
    )


@pytest.fixture
def fake_pool() -> Callable[[Callable[[str], Any]], FakeConnectionPool]:
    """Build a fake connection pool answering statements with ``responder``."""
    return FakeConnectionPool
