"""remote-table-sync: keep mirrored foreign tables in line with their distant tables.

Diffs live foreign table columns against the remote schema, classifies the
pending updates of every registered table, builds a per-table
synchronization report, and compiles ordered column migration actions for
an external executor.

Usage:
    from remote_table_sync import build_synchronization_report, compile_migration_actions
    from remote_table_sync import RegisteredTable, DistantColumn, ForeignColumn
    from remote_table_sync import AsyncPostgresColumnFetcher, load_sync_config
"""

__version__ = "0.1.0"

# Adapters
from remote_table_sync.adapters.base import ColumnFetcher
from remote_table_sync.adapters.postgres import AsyncPostgresColumnFetcher

# Config
from remote_table_sync.config.loader import load_registered_tables, load_sync_config
from remote_table_sync.config.models import DatabaseProfile, SyncConfig, SyncSettings

# Factory
from remote_table_sync.factory import (
    ProfileNotFoundError,
    create_column_fetcher,
    create_introspector,
    resolve_url,
)

# Schema
from remote_table_sync.schema.actions import (
    MigrationColumnCreate,
    MigrationColumnDrop,
    compile_migration_actions,
)
from remote_table_sync.schema.classifier import (
    ColumnFetchError,
    FetchFailurePolicy,
    classify_table_updates,
)
from remote_table_sync.schema.comparator import diff_columns
from remote_table_sync.schema.models import (
    DistantColumn,
    ForeignColumn,
    RegisteredTable,
    SyncReportEntry,
    TableSyncStatus,
    UpdateMarker,
)
from remote_table_sync.schema.naming import CollisionPolicy, to_foreign_column_name
from remote_table_sync.schema.report import build_synchronization_report
from remote_table_sync.schema.sync import check_remote_tables, plan_table_migration

__all__ = [
    # Adapters
    "ColumnFetcher",
    "AsyncPostgresColumnFetcher",
    # Config
    "load_sync_config",
    "load_registered_tables",
    "DatabaseProfile",
    "SyncConfig",
    "SyncSettings",
    # Factory
    "ProfileNotFoundError",
    "create_column_fetcher",
    "create_introspector",
    "resolve_url",
    # Schema
    "MigrationColumnCreate",
    "MigrationColumnDrop",
    "compile_migration_actions",
    "ColumnFetchError",
    "FetchFailurePolicy",
    "classify_table_updates",
    "diff_columns",
    "DistantColumn",
    "ForeignColumn",
    "RegisteredTable",
    "SyncReportEntry",
    "TableSyncStatus",
    "UpdateMarker",
    "CollisionPolicy",
    "to_foreign_column_name",
    "build_synchronization_report",
    "check_remote_tables",
    "plan_table_migration",
]
