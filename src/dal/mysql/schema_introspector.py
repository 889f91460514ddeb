from typing import Any, Dict, List, Mapping, Optional

from dal.mysql.query_target import MysqlQueryTargetDatabase
from dal.mysql.quoting import quote_identifier, sql_literal
from table_schema import ColumnDef, TableDef
from table_schema.column_def import PRIMARY_KEY_MARKER

_COLUMNS_QUERY = """
    SELECT
        COLUMN_NAME AS column_name,
        COLUMN_KEY AS column_key,
        COLUMN_COMMENT AS column_comment,
        COLUMN_DEFAULT AS column_default,
        COLUMN_TYPE AS column_type,
        DATA_TYPE AS data_type,
        IS_NULLABLE AS is_nullable,
        ORDINAL_POSITION AS ordinal_position,
        CHARACTER_MAXIMUM_LENGTH AS character_maximum_length,
        CHARACTER_OCTET_LENGTH AS character_octet_length
    FROM INFORMATION_SCHEMA.COLUMNS
    WHERE TABLE_SCHEMA = {database}
    AND TABLE_NAME = {table}
    ORDER BY ORDINAL_POSITION ASC
"""


class MysqlSchemaIntrospector:
    """Reads databases, tables and column schemas from the MySQL catalog."""

    def __init__(self, database=MysqlQueryTargetDatabase) -> None:
        self._database = database

    async def list_databases(self) -> List[str]:
        """List the databases visible to the connected user."""
        async with self._database.get_connection() as conn:
            rows = await conn.fetch("SHOW DATABASES")
        return [_first_value(row) for row in rows]

    async def list_table_names(self, database: str) -> List[str]:
        """List the tables of ``database``."""
        async with self._database.get_connection() as conn:
            rows = await conn.fetch(f"SHOW TABLES FROM {quote_identifier(database)}")
        return [_first_value(row) for row in rows]

    async def get_table_def(self, database: str, table_name: str) -> TableDef:
        """Load the ordered column schema of ``database.table_name``."""
        query = _COLUMNS_QUERY.format(
            database=sql_literal(database), table=sql_literal(table_name)
        )
        async with self._database.get_connection() as conn:
            rows = await conn.fetch(query)
        return table_def_from_catalog_rows(table_name, rows, database=database)


def table_def_from_catalog_rows(
    table_name: str, rows: List[Mapping[str, Any]], database: Optional[str] = None
) -> TableDef:
    return TableDef(
        name=table_name,
        database=database,
        columns=[column_from_catalog_row(row) for row in rows],
    )


def column_from_catalog_row(row: Mapping[str, Any]) -> ColumnDef:
    """Normalize one INFORMATION_SCHEMA.COLUMNS row into a ColumnDef."""
    fields = _lower_keys(row)
    column_key = fields.get("column_key") or ""
    return ColumnDef(
        name=fields["column_name"],
        data_type=fields.get("data_type") or "",
        column_type=fields.get("column_type"),
        column_key=column_key,
        is_primary_key=column_key == PRIMARY_KEY_MARKER,
        is_nullable=parse_nullable(fields.get("is_nullable")),
        default=parse_column_default(fields.get("column_default")),
        ordinal_position=parse_optional_int(fields.get("ordinal_position")),
        comment=fields.get("column_comment") or None,
        character_maximum_length=parse_optional_int(fields.get("character_maximum_length")),
        character_octet_length=parse_optional_int(fields.get("character_octet_length")),
    )


def parse_column_default(value: Optional[str]) -> Optional[str]:
    """Normalize a catalog COLUMN_DEFAULT.

    ``NULL`` becomes None and one surrounding quote character is stripped from
    each end; empty and missing values pass through unchanged.
    """
    if not value or not isinstance(value, str):
        return value
    if value == "NULL":
        return None
    if value[0] in ("'", '"'):
        value = value[1:]
    if value and value[-1] in ("'", '"'):
        value = value[:-1]
    return value


def parse_nullable(value: Optional[str]) -> bool:
    return (value or "").lower() == "yes"


def parse_optional_int(value: Any) -> Optional[int]:
    if value is None or value == "":
        return None
    return int(value)


def _lower_keys(row: Mapping[str, Any]) -> Dict[str, Any]:
    return {str(key).lower(): value for key, value in row.items()}


def _first_value(row: Mapping[str, Any]) -> Any:
    return next(iter(row.values()))
