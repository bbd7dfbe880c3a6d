"""Migration action compiler -- turn column drift into column actions.

Builds the ordered list of column actions an external migration executor
needs to bring a foreign table back in line with its distant table.  All
``CREATE`` actions come before any ``DROP`` action.

Nothing here touches a database: ``to_sql()`` only renders a preview of
the statement an executor would run.

Usage:
    from remote_table_sync.schema.actions import compile_migration_actions

    actions = compile_migration_actions(foreign_columns, distant_columns)
    for action in actions:
        print(action.to_sql("workspace_abc", "people"))
"""

from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum

from remote_table_sync.schema.comparator import diff_columns
from remote_table_sync.schema.models import DistantColumn, ForeignColumn
from remote_table_sync.schema.naming import (
    CollisionPolicy,
    ColumnNameNormalizer,
    to_foreign_column_name,
)


class MigrationColumnActionType(str, Enum):
    """Tag of a column migration action."""

    CREATE = "CREATE"
    DROP = "DROP"


def _quote_ident(name: str) -> str:
    """Double-quote a SQL identifier."""
    return '"' + name.replace('"', '""') + '"'


# ------------------------------------------------------------------
# Action data classes
# ------------------------------------------------------------------


@dataclass(frozen=True)
class MigrationColumnCreate:
    """A column to be added to the foreign table.

    Example:
        action = MigrationColumnCreate(column_name="newCol", column_type="text")
        action.to_sql("workspace_abc", "people")
        # 'ALTER FOREIGN TABLE "workspace_abc"."people" ADD COLUMN "newCol" text;'
    """

    column_name: str
    column_type: str

    @property
    def action(self) -> MigrationColumnActionType:
        return MigrationColumnActionType.CREATE

    def to_sql(self, schema_name: str, table_name: str) -> str:
        """Render the ALTER FOREIGN TABLE ADD COLUMN statement."""
        return (
            f"ALTER FOREIGN TABLE {_quote_ident(schema_name)}.{_quote_ident(table_name)} "
            f"ADD COLUMN {_quote_ident(self.column_name)} {self.column_type};"
        )


@dataclass(frozen=True)
class MigrationColumnDrop:
    """A column to be removed from the foreign table."""

    column_name: str

    @property
    def action(self) -> MigrationColumnActionType:
        return MigrationColumnActionType.DROP

    def to_sql(self, schema_name: str, table_name: str) -> str:
        """Render the ALTER FOREIGN TABLE DROP COLUMN statement."""
        return (
            f"ALTER FOREIGN TABLE {_quote_ident(schema_name)}.{_quote_ident(table_name)} "
            f"DROP COLUMN {_quote_ident(self.column_name)};"
        )


MigrationColumnAction = MigrationColumnCreate | MigrationColumnDrop


# ------------------------------------------------------------------
# Compilation
# ------------------------------------------------------------------


def compile_migration_actions(
    foreign_columns: Sequence[ForeignColumn],
    distant_columns: Sequence[DistantColumn],
    normalize: ColumnNameNormalizer = to_foreign_column_name,
    on_collision: CollisionPolicy = CollisionPolicy.REJECT,
) -> list[MigrationColumnAction]:
    """Compile the column actions that align a foreign table with its distant table.

    Pure function -- runs the column diff once and maps each added column
    to a ``MigrationColumnCreate`` and each deleted column to a
    ``MigrationColumnDrop``.  Creates always precede drops; executors may
    rely on that order.

    Args:
        foreign_columns: Columns currently exposed by the foreign table.
        distant_columns: Columns of the distant table, with raw names.
        normalize: Raw distant name -> local name function.
        on_collision: Policy for distant names that normalize to the same name.

    Returns:
        Ordered list of actions; empty when the tables already match.

    Example:
        actions = compile_migration_actions(foreign_columns, distant_columns)
        # [MigrationColumnCreate(column_name='newCol', column_type='text'),
        #  MigrationColumnDrop(column_name='oldCol')]
    """
    diff = diff_columns(foreign_columns, distant_columns, normalize, on_collision)

    creates: list[MigrationColumnAction] = [
        MigrationColumnCreate(column_name=column.name, column_type=column.type)
        for column in diff.added
    ]
    drops: list[MigrationColumnAction] = [
        MigrationColumnDrop(column_name=name) for name in diff.deleted
    ]

    return [*creates, *drops]
