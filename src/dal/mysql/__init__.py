"""MySQL-backed DAL components."""

from .config import MysqlConfig
from .query_target import MysqlConnection, MysqlQueryTargetDatabase
from .quoting import escape_string, quote_identifier, quote_table_name, sql_literal
from .schema_introspector import MysqlSchemaIntrospector

__all__ = [
    "MysqlConfig",
    "MysqlConnection",
    "MysqlQueryTargetDatabase",
    "MysqlSchemaIntrospector",
    "escape_string",
    "quote_identifier",
    "quote_table_name",
    "sql_literal",
]
