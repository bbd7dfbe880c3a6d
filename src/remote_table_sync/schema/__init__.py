"""Remote table schema comparison, classification, and reporting.

Provides column name normalization (``to_foreign_column_name``), column
comparison (``diff_columns``), migration action compilation
(``compile_migration_actions``), per-table update classification
(``classify_table_updates``), report building
(``build_synchronization_report``), distant schema introspection
(``DistantSchemaIntrospector``), and profile-based checks
(``check_remote_tables``, ``plan_table_migration``).

Usage:
    from remote_table_sync.schema import diff_columns, compile_migration_actions
    from remote_table_sync.schema import build_synchronization_report
    from remote_table_sync.schema import check_remote_tables
"""

from remote_table_sync.schema.models import (
    ColumnsDiff,
    DistantColumn,
    DistantTables,
    ForeignColumn,
    NormalizedColumn,
    RegisteredTable,
    SyncReportEntry,
    TableSyncStatus,
    UpdateMarker,
)
from remote_table_sync.schema.naming import (
    CollisionPolicy,
    NormalizationCollisionError,
    normalize_distant_columns,
    to_foreign_column_name,
)
from remote_table_sync.schema.comparator import diff_columns
from remote_table_sync.schema.actions import (
    MigrationColumnAction,
    MigrationColumnActionType,
    MigrationColumnCreate,
    MigrationColumnDrop,
    compile_migration_actions,
)
from remote_table_sync.schema.classifier import (
    ColumnFetchError,
    FetchFailurePolicy,
    classify_table_updates,
)
from remote_table_sync.schema.report import (
    build_report_from_updates,
    build_synchronization_report,
)
from remote_table_sync.schema.introspector import DistantSchemaIntrospector
from remote_table_sync.schema.sync import (
    SyncRunResult,
    check_remote_tables,
    plan_table_migration,
)

__all__ = [
    "ColumnsDiff",
    "DistantColumn",
    "DistantTables",
    "ForeignColumn",
    "NormalizedColumn",
    "RegisteredTable",
    "SyncReportEntry",
    "TableSyncStatus",
    "UpdateMarker",
    "CollisionPolicy",
    "NormalizationCollisionError",
    "normalize_distant_columns",
    "to_foreign_column_name",
    "diff_columns",
    "MigrationColumnAction",
    "MigrationColumnActionType",
    "MigrationColumnCreate",
    "MigrationColumnDrop",
    "compile_migration_actions",
    "ColumnFetchError",
    "FetchFailurePolicy",
    "classify_table_updates",
    "build_report_from_updates",
    "build_synchronization_report",
    "DistantSchemaIntrospector",
    "SyncRunResult",
    "check_remote_tables",
    "plan_table_migration",
]
