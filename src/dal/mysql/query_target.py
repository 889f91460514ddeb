import datetime
import logging
from contextlib import asynccontextmanager
from decimal import Decimal
from typing import (
    Any,
    Awaitable,
    Callable,
    Dict,
    FrozenSet,
    List,
    Optional,
    Sequence,
    TypeVar,
    Union,
)

import aiomysql
from pymysql.constants import FIELD_TYPE

from dal.error_classification import log_classified_error
from dal.mysql.config import MysqlConfig
from dal.mysql.quoting import quote_identifier
from dal.tracing import trace_query_operation
from dal.util.row_limits import resolve_max_rows, truncate_rows
from table_schema.row import Row, RowValue

logger = logging.getLogger(__name__)

T = TypeVar("T")


class MysqlQueryTargetDatabase:
    """MySQL server connection pool using aiomysql."""

    _host: Optional[str] = None
    _port: int = 3306
    _db_name: Optional[str] = None
    _user: Optional[str] = None
    _password: Optional[str] = None
    _pool: Optional[aiomysql.Pool] = None
    _max_rows: int = 0

    @classmethod
    async def init(
        cls,
        host: Optional[str],
        port: int,
        db_name: Optional[str],
        user: Optional[str],
        password: Optional[str],
        max_rows: Optional[int] = None,
        connect_timeout: int = 10,
    ) -> None:
        """Initialize the connection pool."""
        cls._host = host
        cls._port = port
        cls._db_name = db_name
        cls._user = user
        cls._password = password
        cls._max_rows = resolve_max_rows(max_rows)

        missing = [name for name, value in {"DB_HOST": host, "DB_USER": user}.items() if not value]
        if missing:
            missing_list = ", ".join(missing)
            raise ValueError(
                f"MySQL connection missing required config: {missing_list}. "
                "Set DB_HOST and DB_USER."
            )
        if cls._pool is None:
            kwargs: Dict[str, Any] = {
                "host": cls._host,
                "port": cls._port,
                "user": cls._user,
                "password": cls._password or "",
                "autocommit": True,
                "connect_timeout": connect_timeout,
                "cursorclass": aiomysql.DictCursor,
            }
            if cls._db_name:
                kwargs["db"] = cls._db_name
            cls._pool = await aiomysql.create_pool(**kwargs)
            logger.info("Connected to MySQL server %s:%s", cls._host, cls._port)

    @classmethod
    async def init_from_config(cls, config: MysqlConfig, max_rows: Optional[int] = None) -> None:
        await cls.init(
            host=config.host,
            port=config.port,
            db_name=config.db_name,
            user=config.user,
            password=config.password,
            max_rows=max_rows,
            connect_timeout=config.connect_timeout_seconds,
        )

    @classmethod
    async def close(cls) -> None:
        """Close the pool."""
        if cls._pool is not None:
            cls._pool.close()
            await cls._pool.wait_closed()
            cls._pool = None

    @classmethod
    @asynccontextmanager
    async def get_connection(cls):
        """Yield a connection wrapper from the pool."""
        if cls._pool is None:
            raise RuntimeError("MySQL pool not initialized. Call MysqlQueryTargetDatabase.init().")

        async with cls._pool.acquire() as conn:
            yield MysqlConnection(conn, max_rows=cls._max_rows)


class MysqlConnection:
    """Raw SQL executor over an aiomysql connection.

    Statements are sent verbatim; there is no parameter binding.
    """

    def __init__(self, conn: aiomysql.Connection, max_rows: int = 0) -> None:
        self._conn = conn
        self._max_rows = max_rows
        self._last_truncated = False

    @property
    def last_truncated(self) -> bool:
        """Return True when the last fetch was truncated by row limits."""
        return self._last_truncated

    async def _run(self, operation: str, sql: str, work: Callable[[], Awaitable[T]]) -> T:
        try:
            return await trace_query_operation(
                f"dal.query.{operation}", provider="mysql", sql=sql, operation=work()
            )
        except Exception as exc:
            log_classified_error(operation, exc)
            raise

    def _cap(self, rows: List[Dict[str, Any]], description: Optional[Sequence]) -> List[Row]:
        capped, truncated = truncate_rows(list(rows), self._max_rows)
        self._last_truncated = truncated
        bit_columns = bit_column_names(description)
        return [normalize_row(row, bit_columns) for row in capped]

    async def fetch(self, sql: str) -> List[Row]:
        """Run a statement that returns rows."""

        async def _work():
            async with self._conn.cursor() as cursor:
                await cursor.execute(sql)
                return self._cap(await cursor.fetchall() or [], cursor.description)

        return await self._run("fetch", sql, _work)

    async def fetchrow(self, sql: str) -> Optional[Row]:
        rows = await self.fetch(sql)
        return rows[0] if rows else None

    async def execute_update(self, sql: str) -> int:
        """Run a data-modifying statement and return the affected-row count."""

        async def _work():
            async with self._conn.cursor() as cursor:
                await cursor.execute(sql)
                return cursor.rowcount

        return await self._run("execute_update", sql, _work)

    async def execute(self, sql: str) -> Union[List[Row], int]:
        """Run any statement: rows when it yields a result set, else affected rows."""

        async def _work():
            async with self._conn.cursor() as cursor:
                await cursor.execute(sql)
                if cursor.description is not None:
                    return self._cap(await cursor.fetchall() or [], cursor.description)
                self._last_truncated = False
                return cursor.rowcount

        return await self._run("execute", sql, _work)

    async def use_database(self, name: str) -> None:
        await self.execute(f"USE {quote_identifier(name)}")


def bit_column_names(description: Optional[Sequence]) -> FrozenSet[str]:
    """Return the result columns typed BIT in a cursor description."""
    return frozenset(
        entry[0] for entry in description or () if len(entry) > 1 and entry[1] == FIELD_TYPE.BIT
    )


def normalize_value(value: Any, is_bit: bool = False) -> RowValue:
    """Map a driver value into the row value domain.

    BIT values become integers; any other binary value is kept as bytes.
    """
    if value is None or isinstance(value, (str, int, float, Decimal)):
        if isinstance(value, bool):
            return int(value)
        return value
    if isinstance(value, datetime.datetime):
        return value.isoformat(sep=" ")
    if isinstance(value, (datetime.date, datetime.time)):
        return value.isoformat()
    if isinstance(value, datetime.timedelta):
        return _format_timedelta(value)
    if isinstance(value, (bytes, bytearray)):
        return int.from_bytes(value, "big") if is_bit else bytes(value)
    if isinstance(value, (set, frozenset)):
        return ",".join(sorted(str(item) for item in value))
    return str(value)


def normalize_row(row: Dict[str, Any], bit_columns: FrozenSet[str] = frozenset()) -> Row:
    return {name: normalize_value(value, name in bit_columns) for name, value in row.items()}


def _format_timedelta(value: datetime.timedelta) -> str:
    # MySQL TIME values arrive as timedelta and may be negative or exceed 24h.
    total = int(value.total_seconds())
    sign = "-" if total < 0 else ""
    total = abs(total)
    hours, remainder = divmod(total, 3600)
    minutes, seconds = divmod(remainder, 60)
    return f"{sign}{hours:02d}:{minutes:02d}:{seconds:02d}"
