from table_schema import Row, TableDef


def build_default_row(table_def: TableDef) -> Row:
    """Return the initial values for a brand-new row of ``table_def``.

    Nullable columns without a default start as NULL; every other column starts
    from its default, or an empty string when it has none.
    """
    row: Row = {}
    for column in table_def.columns:
        if column.default is None and column.is_nullable:
            row[column.name] = None
        else:
            row[column.name] = column.default if column.default is not None else ""
    return row
