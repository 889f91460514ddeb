import pytest

from dal.mysql.schema_introspector import (
    MysqlSchemaIntrospector,
    column_from_catalog_row,
    parse_column_default,
    parse_nullable,
    parse_optional_int,
)

USERS_CATALOG_ROWS = [
    {
        "COLUMN_NAME": "label",
        "COLUMN_KEY": "",
        "COLUMN_COMMENT": "Display label",
        "COLUMN_DEFAULT": "NULL",
        "COLUMN_TYPE": "varchar(255)",
        "DATA_TYPE": "varchar",
        "IS_NULLABLE": "YES",
        "ORDINAL_POSITION": "2",
        "CHARACTER_MAXIMUM_LENGTH": "255",
        "CHARACTER_OCTET_LENGTH": "1020",
    },
    {
        "COLUMN_NAME": "id",
        "COLUMN_KEY": "PRI",
        "COLUMN_COMMENT": "",
        "COLUMN_DEFAULT": None,
        "COLUMN_TYPE": "int(11)",
        "DATA_TYPE": "int",
        "IS_NULLABLE": "NO",
        "ORDINAL_POSITION": 1,
        "CHARACTER_MAXIMUM_LENGTH": None,
        "CHARACTER_OCTET_LENGTH": None,
    },
]


@pytest.mark.parametrize(
    "raw,expected",
    [
        (None, None),
        ("", ""),
        ("NULL", None),
        ("'abc'", "abc"),
        ('"abc"', "abc"),
        ("'", ""),
        ("0", "0"),
        ("CURRENT_TIMESTAMP", "CURRENT_TIMESTAMP"),
    ],
)
def test_parse_column_default(raw, expected):
    """Catalog defaults: NULL becomes None and one quote is stripped per side."""
    assert parse_column_default(raw) == expected


def test_parse_nullable_is_case_insensitive():
    """Only a yes flag marks a column nullable."""
    assert parse_nullable("YES") is True
    assert parse_nullable("yes") is True
    assert parse_nullable("NO") is False
    assert parse_nullable(None) is False


def test_parse_optional_int():
    """Textual integers are parsed; missing values stay None."""
    assert parse_optional_int("12") == 12
    assert parse_optional_int(7) == 7
    assert parse_optional_int("") is None
    assert parse_optional_int(None) is None


def test_column_from_catalog_row_reads_upper_case_headers():
    """MySQL 8 upper-case catalog headers are accepted."""
    column = column_from_catalog_row(USERS_CATALOG_ROWS[0])
    assert column.name == "label"
    assert column.data_type == "varchar"
    assert column.column_type == "varchar(255)"
    assert column.is_nullable is True
    assert column.default is None
    assert column.is_primary_key is False
    assert column.ordinal_position == 2
    assert column.character_maximum_length == 255
    assert column.comment == "Display label"


@pytest.mark.asyncio
async def test_get_table_def_orders_columns_and_flags_keys(fake_pool):
    """Validate catalog rows map to an ordered schema with primary keys."""
    pool = fake_pool(lambda sql: USERS_CATALOG_ROWS)
    introspector = MysqlSchemaIntrospector(pool)

    table_def = await introspector.get_table_def("shop", "users")

    assert table_def.name == "users"
    assert table_def.database == "shop"
    assert table_def.column_names == ["id", "label"]
    assert table_def.primary_keys == ["id"]
    sql = pool.statements[0]
    assert "INFORMATION_SCHEMA.COLUMNS" in sql
    assert "TABLE_SCHEMA = 'shop'" in sql
    assert "TABLE_NAME = 'users'" in sql
    assert "ORDER BY ORDINAL_POSITION ASC" in sql


@pytest.mark.asyncio
async def test_get_table_def_escapes_names(fake_pool):
    """Database and table names are embedded as escaped literals."""
    pool = fake_pool(lambda sql: [])
    introspector = MysqlSchemaIntrospector(pool)

    table_def = await introspector.get_table_def("o'shop", "users")

    assert table_def.columns == []
    assert "TABLE_SCHEMA = 'o\\'shop'" in pool.statements[0]


@pytest.mark.asyncio
async def test_list_databases_and_tables(fake_pool):
    """SHOW statements are reduced to plain name lists."""

    def responder(sql):
        if sql == "SHOW DATABASES":
            return [{"Database": "information_schema"}, {"Database": "shop"}]
        if sql == "SHOW TABLES FROM `shop`":
            return [{"Tables_in_shop": "orders"}, {"Tables_in_shop": "users"}]
        raise AssertionError(f"Unexpected SQL: {sql}")

    introspector = MysqlSchemaIntrospector(fake_pool(responder))

    assert await introspector.list_databases() == ["information_schema", "shop"]
    assert await introspector.list_table_names("shop") == ["orders", "users"]
