"""Structural analysis of user-typed SQL using sqlglot.

Only three facts are read from the parse tree: the statement kind, the single
table the statement reads from (if any) and the projected column names.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional

import sqlglot
from sqlglot import exp
from sqlglot.errors import ParseError, TokenError

from common.sql.dialect import get_configured_dialect, normalize_sqlglot_dialect

logger = logging.getLogger(__name__)

STATEMENT_SELECT = "select"
STATEMENT_INSERT = "insert"
STATEMENT_UPDATE = "update"
STATEMENT_DELETE = "delete"
STATEMENT_OTHER = "other"
STATEMENT_UNKNOWN = "unknown"


@dataclass(frozen=True)
class QueryShape:
    """What the editing layer needs to know about a parsed statement."""

    statement_kind: str
    target_table: Optional[str] = None
    target_database: Optional[str] = None
    projected_columns: List[str] = field(default_factory=list)
    is_wildcard: bool = False
    # Output names bound to something other than the column of that name.
    shadowed_columns: List[str] = field(default_factory=list)

    @property
    def parsed(self) -> bool:
        return self.statement_kind != STATEMENT_UNKNOWN


UNPARSED = QueryShape(statement_kind=STATEMENT_UNKNOWN)


def parse_sql(sql: str, dialect: Optional[str] = None) -> Optional[exp.Expression]:
    """Parse SQL string into AST expression.

    Returns None if parsing fails. When the text holds several statements only
    the first one is returned.
    """
    read = normalize_sqlglot_dialect(dialect) if dialect else get_configured_dialect()
    if not isinstance(sql, str) or not sql.strip():
        return None
    try:
        expressions = sqlglot.parse(sql, read=read)
    except (ParseError, TokenError) as exc:
        logger.debug("SQL could not be parsed: %s", exc)
        return None
    for expression in expressions:
        if expression is not None:
            return expression
    return None


def statement_kind(ast: exp.Expression) -> str:
    if isinstance(ast, (exp.Select, exp.Union, exp.Intersect, exp.Except)):
        return STATEMENT_SELECT
    if isinstance(ast, exp.Insert):
        return STATEMENT_INSERT
    if isinstance(ast, exp.Update):
        return STATEMENT_UPDATE
    if isinstance(ast, exp.Delete):
        return STATEMENT_DELETE
    return STATEMENT_OTHER


def single_source_table(ast: exp.Expression) -> Optional[exp.Table]:
    """Return the only table a plain SELECT reads from, or None.

    Joins, comma joins, subqueries over other tables and CTEs all count as
    more than one source.
    """
    if not isinstance(ast, exp.Select):
        return None
    if ast.find(exp.With) is not None:
        return None
    tables = list(ast.find_all(exp.Table))
    if len(tables) != 1:
        return None
    table = tables[0]
    from_clause = table.parent
    if not isinstance(from_clause, exp.From) or from_clause.parent is not ast:
        return None
    if not table.name:
        return None
    return table


def projected_columns(ast: exp.Expression) -> tuple[List[str], bool, List[str]]:
    """Return the source columns a SELECT shows under their own name.

    Also returns whether it selects ``*`` and the output names that do not
    carry the column they are named after: aliases that rename a column or
    label a computed expression. Unaliased computed expressions are ignored.
    """
    if not isinstance(ast, exp.Select):
        return [], False, []
    names: List[str] = []
    shadowed: List[str] = []
    wildcard = False
    for projection in ast.expressions:
        if projection.is_star:
            wildcard = True
        elif isinstance(projection, exp.Column):
            names.append(projection.name)
        elif isinstance(projection, exp.Alias):
            source = projection.this
            if isinstance(source, exp.Column) and source.name == projection.alias:
                names.append(projection.alias)
            else:
                shadowed.append(projection.alias)
    return names, wildcard, shadowed


def analyze_ast(ast: Optional[exp.Expression]) -> QueryShape:
    if ast is None:
        return UNPARSED
    kind = statement_kind(ast)
    if kind != STATEMENT_SELECT:
        return QueryShape(statement_kind=kind)

    table = single_source_table(ast)
    columns, wildcard, shadowed = projected_columns(ast)
    return QueryShape(
        statement_kind=kind,
        target_table=table.name if table is not None else None,
        target_database=(table.db or None) if table is not None else None,
        projected_columns=columns,
        is_wildcard=wildcard,
        shadowed_columns=shadowed,
    )


def analyze_query(sql: str, dialect: Optional[str] = None) -> QueryShape:
    """Parse ``sql`` and extract its editing-relevant shape.

    Malformed SQL yields a shape with statement kind ``unknown``.
    """
    return analyze_ast(parse_sql(sql, dialect=dialect))
