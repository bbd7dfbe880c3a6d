"""Column fetcher adapters package.

Provides the ``ColumnFetcher`` Protocol and the async PostgreSQL
implementation used to read live foreign table columns.

Usage:
    from remote_table_sync.adapters import ColumnFetcher, AsyncPostgresColumnFetcher
"""

from remote_table_sync.adapters.base import ColumnFetcher
from remote_table_sync.adapters.postgres import (
    AsyncPostgresColumnFetcher,
    get_workspace_schema_name,
)

__all__ = [
    "ColumnFetcher",
    "AsyncPostgresColumnFetcher",
    "get_workspace_schema_name",
]
