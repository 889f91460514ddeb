"""Query and row-edit workflows on top of the DAL.

``RowEditor`` runs ad-hoc queries, decides whether their rows are editable and
opens single-use ``EditSession`` objects that turn form submissions into
INSERT/UPDATE/DELETE statements.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from dal.mysql.query_target import MysqlQueryTargetDatabase
from dal.mysql.schema_introspector import MysqlSchemaIntrospector
from row_editing.coercion import coerce_row, input_mode
from row_editing.defaults import build_default_row
from row_editing.editability import EditabilityDecision, check_editable, target_table
from row_editing.mutation import INSERT_ACTIONS, MutationAction, MutationIntent, has_changes
from row_editing.reconcile import complete_row, fetch_row_by_primary_key
from row_editing.sql_ast import QueryShape, analyze_query
from table_schema import Row, TableDef

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class QueryOutcome:
    """Result of running a user-typed statement."""

    sql: str
    shape: QueryShape
    rows: Optional[List[Row]] = None
    affected_rows: Optional[int] = None
    table_def: Optional[TableDef] = None
    editability: EditabilityDecision = field(default_factory=lambda: EditabilityDecision(False))
    truncated: bool = False

    @property
    def is_result_set(self) -> bool:
        return self.rows is not None

    @property
    def editable(self) -> bool:
        return self.editability.editable


@dataclass(frozen=True)
class MutationResult:
    """A statement that was executed successfully."""

    action: MutationAction
    sql: str
    affected_rows: int


@dataclass(frozen=True)
class FormField:
    name: str
    label: str
    input_mode: str
    helper_text: Optional[str]
    initial_value: object


class EditSession:
    """One open row editor. It can be submitted (or used to delete) only once."""

    def __init__(
        self,
        editor: "RowEditor",
        action: MutationAction,
        table_def: TableDef,
        initial_values: Row,
    ) -> None:
        self._editor = editor
        self.action = MutationAction(action)
        self.table_def = table_def
        self.initial_values: Row = dict(initial_values)
        self._consumed = False

    @property
    def consumed(self) -> bool:
        return self._consumed

    def fields(self) -> List[FormField]:
        """Describe the form fields, one per schema column."""
        return [
            FormField(
                name=column.name,
                label=column.label,
                input_mode=input_mode(column.data_type),
                helper_text=column.comment,
                initial_value=self.initial_values.get(column.name),
            )
            for column in self.table_def.columns
        ]

    def has_changes(self, edited_values: Row) -> bool:
        return has_changes(self.initial_values, coerce_row(self.table_def, edited_values))

    def intent(self, edited_values: Row, action: Optional[MutationAction] = None) -> MutationIntent:
        return MutationIntent(
            action=action or self.action,
            table_name=self.table_def.name,
            initial_values=self.initial_values,
            edited_values=coerce_row(self.table_def, edited_values),
            database=self.table_def.database,
        )

    def _consume(self) -> None:
        if self._consumed:
            raise RuntimeError("Edit session was already submitted")
        self._consumed = True

    async def submit(self, edited_values: Row) -> MutationResult:
        """Apply the edited values with the session's action."""
        intent = self.intent(edited_values)
        if intent.action is MutationAction.EDIT and not intent.changes:
            raise ValueError("No column was changed; nothing to update")
        sql = intent.to_sql(self.table_def)
        self._consume()
        return await self._editor.execute_mutation(intent.action, sql)

    async def delete(self) -> MutationResult:
        """Delete the row this edit session was opened on."""
        if self.action in INSERT_ACTIONS:
            raise ValueError(f"Cannot delete from a '{self.action.value}' session")
        intent = self.intent({}, action=MutationAction.DELETE)
        sql = intent.to_sql(self.table_def)
        self._consume()
        return await self._editor.execute_mutation(intent.action, sql)


class RowEditor:
    """Entry point for querying a database and editing its rows."""

    def __init__(
        self,
        database: str,
        connections=MysqlQueryTargetDatabase,
        introspector: Optional[MysqlSchemaIntrospector] = None,
        dialect: Optional[str] = None,
    ) -> None:
        self.database = database
        self._connections = connections
        self._introspector = introspector or MysqlSchemaIntrospector(connections)
        self._dialect = dialect

    async def load_table(self, table_name: str, database: Optional[str] = None) -> TableDef:
        return await self._introspector.get_table_def(database or self.database, table_name)

    async def run_query(self, sql: str) -> QueryOutcome:
        """Execute ``sql`` in the editor's database and work out editability."""
        shape = analyze_query(sql, dialect=self._dialect)
        async with self._connections.get_connection() as conn:
            await conn.use_database(self.database)
            result = await conn.execute(sql)
            truncated = conn.last_truncated

        if not isinstance(result, list):
            logger.info("Statement affected %s row(s)", result)
            return QueryOutcome(sql=sql, shape=shape, affected_rows=result)

        table_def = None
        table_name = target_table(shape)
        if table_name is not None:
            table_def = await self.load_table(table_name, shape.target_database)
        decision = check_editable(shape, table_def)
        if not decision.editable:
            logger.debug("Query result is read-only: %s", decision.reason)
        return QueryOutcome(
            sql=sql,
            shape=shape,
            rows=result,
            table_def=table_def,
            editability=decision,
            truncated=truncated,
        )

    async def open_new(self, table_name: str, database: Optional[str] = None) -> EditSession:
        table_def = await self.load_table(table_name, database)
        initial = coerce_row(table_def, build_default_row(table_def))
        return EditSession(self, MutationAction.NEW, table_def, initial)

    async def open_edit(
        self, table_name: str, display_row: Row, database: Optional[str] = None
    ) -> EditSession:
        """Open an edit session, fetching the full row when the result was partial."""
        return await self._open_existing(MutationAction.EDIT, table_name, display_row, database)

    async def open_clone(
        self, table_name: str, display_row: Row, database: Optional[str] = None
    ) -> EditSession:
        return await self._open_existing(MutationAction.CLONE, table_name, display_row, database)

    async def _open_existing(
        self,
        action: MutationAction,
        table_name: str,
        display_row: Row,
        database: Optional[str],
    ) -> EditSession:
        table_def = await self.load_table(table_name, database)

        async def _fetch(keys):
            async with self._connections.get_connection() as conn:
                return await fetch_row_by_primary_key(
                    conn, table_def.name, keys, database=table_def.database
                )

        complete = await complete_row(display_row, table_def, _fetch)
        projected = {name: complete[name] for name in table_def.column_names}
        return EditSession(self, action, table_def, coerce_row(table_def, projected))

    async def execute_mutation(self, action: MutationAction, sql: str) -> MutationResult:
        async with self._connections.get_connection() as conn:
            affected = await conn.execute_update(sql)
        logger.info("%s applied, %s row(s) affected", action.value, affected)
        return MutationResult(action=action, sql=sql, affected_rows=affected)
