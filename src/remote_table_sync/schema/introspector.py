"""Distant schema introspection via information_schema (async).

Reads the whole schema of the remote source in one pass and returns it as
a ``DistantTables`` snapshot (table name -> ordered columns).

Uses psycopg (v3) ``AsyncConnection`` for PostgreSQL connections.

Usage:
    async with DistantSchemaIntrospector(database_url) as introspector:
        distant_tables = await introspector.get_distant_tables("public")
"""

import logging

import psycopg
from psycopg import AsyncConnection

from remote_table_sync.schema.models import DistantColumn, DistantTables

logger = logging.getLogger(__name__)


class DistantSchemaIntrospector:
    """Introspects the schema of a remote PostgreSQL source.

    Tables, views and foreign tables are all treated as distant tables.

    Usage:
        async with DistantSchemaIntrospector(database_url) as introspector:
            tables = await introspector.get_distant_tables()
    """

    # Tables to exclude from introspection (system tables)
    DEFAULT_EXCLUDED_TABLES = frozenset(
        {
            "schema_migrations",
            "pg_stat_statements",
            "spatial_ref_sys",
        }
    )

    COLUMNS_QUERY = """
        SELECT c.table_name, c.column_name, c.data_type
        FROM information_schema.columns c
        JOIN information_schema.tables t
            ON t.table_schema = c.table_schema
            AND t.table_name = c.table_name
        WHERE c.table_schema = %s
          AND t.table_type IN ('BASE TABLE', 'VIEW', 'FOREIGN')
        ORDER BY c.table_name, c.ordinal_position
    """

    def __init__(
        self,
        database_url: str,
        excluded_tables: set[str] | None = None,
        connect_timeout: int = 10,
    ) -> None:
        """Initialize with database connection URL.

        Args:
            database_url: PostgreSQL connection URL of the remote source.
            excluded_tables: Table names to skip.  Defaults to
                ``DEFAULT_EXCLUDED_TABLES``.
            connect_timeout: Seconds to wait for the connection.
        """
        self._database_url = database_url
        self._excluded_tables = (
            frozenset(excluded_tables)
            if excluded_tables is not None
            else self.DEFAULT_EXCLUDED_TABLES
        )
        self._connect_timeout = connect_timeout
        self._conn: AsyncConnection | None = None

    async def __aenter__(self) -> "DistantSchemaIntrospector":
        """Async context manager entry - opens connection."""
        self._conn = await psycopg.AsyncConnection.connect(
            self._database_url, connect_timeout=self._connect_timeout
        )
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Async context manager exit - closes connection."""
        if self._conn:
            await self._conn.close()
            self._conn = None

    async def test_connection(self) -> bool:
        """Run ``SELECT 1`` against the remote source."""
        if not self._conn:
            raise RuntimeError("Introspector not connected. Use async with statement.")

        async with self._conn.cursor() as cur:
            await cur.execute("SELECT 1")
            row = await cur.fetchone()
            return row is not None and row[0] == 1

    async def get_distant_tables(self, schema_name: str = "public") -> DistantTables:
        """Snapshot every table of a remote schema with its columns.

        Args:
            schema_name: Remote schema to read (default: public).

        Returns:
            Dict mapping table name to its columns in ordinal order.
        """
        if not self._conn:
            raise RuntimeError("Introspector not connected. Use async with statement.")

        tables: DistantTables = {}
        async with self._conn.cursor() as cur:
            await cur.execute(self.COLUMNS_QUERY, (schema_name,))
            for table_name, column_name, data_type in await cur.fetchall():
                if table_name in self._excluded_tables:
                    continue
                tables.setdefault(table_name, []).append(
                    DistantColumn(column_name=column_name, data_type=data_type)
                )

        logger.debug(f"Introspected {len(tables)} distant tables in schema '{schema_name}'")
        return tables
