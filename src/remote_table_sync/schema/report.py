"""Synchronization report builder.

Combines the distant schema's table list, the registry of mirrored tables,
and the per-table update markers into one status row per table.

Row order:

1. One row per distant table, in distant schema order: ``SYNCED`` when a
   registered table mirrors it, ``NOT_SYNCED`` otherwise.
2. One extra row per registered table whose distant table is gone
   (``TABLE_DELETED``).  These rows keep ``status=SYNCED``.

Usage:
    from remote_table_sync.schema.report import build_synchronization_report

    entries = await build_synchronization_report(
        "public", workspace_id, registered_tables, distant_tables, fetcher,
    )
    for entry in entries:
        print(entry.name, entry.status.value, entry.pending_updates)
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING, Any

from remote_table_sync.schema.classifier import classify_table_updates
from remote_table_sync.schema.models import (
    DistantTables,
    RegisteredTable,
    SyncReportEntry,
    TableSyncStatus,
    UpdateMarker,
)

if TYPE_CHECKING:
    from remote_table_sync.adapters.base import ColumnFetcher


def build_report_from_updates(
    remote_server_schema: str,
    registered_tables: Sequence[RegisteredTable],
    distant_tables: DistantTables,
    updates: Mapping[str, Sequence[UpdateMarker]],
) -> list[SyncReportEntry]:
    """Assemble report rows from a precomputed update map.

    Pure logic -- no fetches.

    Args:
        remote_server_schema: Name of the remote schema, copied onto each row.
        registered_tables: Registry records of mirrored tables.
        distant_tables: Distant schema snapshot (table -> columns).
        updates: Distant table name -> update markers, as returned by
            ``classify_table_updates()``.

    Returns:
        Distant table rows followed by deleted table rows.

    Examples:
        >>> entries = build_report_from_updates(
        ...     "public", [], {"orders": []}, {},
        ... )
        >>> entries[0].status
        <TableSyncStatus.NOT_SYNCED: 'NOT_SYNCED'>
    """
    mirrored_names: set[str] = {table.distant_table_name for table in registered_tables}

    distant_rows = [
        SyncReportEntry(
            name=table_name,
            schema_name=remote_server_schema,
            status=(
                TableSyncStatus.SYNCED
                if table_name in mirrored_names
                else TableSyncStatus.NOT_SYNCED
            ),
            pending_updates=list(updates.get(table_name, [])),
        )
        for table_name in distant_tables
    ]

    # TODO: confirm with report consumers whether deleted tables should get
    # a dedicated status instead of SYNCED
    deleted_rows = [
        SyncReportEntry(
            name=table_name,
            schema_name=remote_server_schema,
            status=TableSyncStatus.SYNCED,
            pending_updates=list(markers),
        )
        for table_name, markers in updates.items()
        if UpdateMarker.TABLE_DELETED in markers
    ]

    return [*distant_rows, *deleted_rows]


async def build_synchronization_report(
    remote_server_schema: str,
    workspace_id: str,
    registered_tables: Sequence[RegisteredTable],
    distant_tables: DistantTables,
    fetcher: ColumnFetcher,
    **classifier_options: Any,
) -> list[SyncReportEntry]:
    """Build the synchronization report for one remote schema.

    Read-only: classifies pending updates with ``classify_table_updates()``
    and assembles rows with ``build_report_from_updates()``.

    Args:
        remote_server_schema: Name of the remote schema.
        workspace_id: Tenant owning the foreign tables.
        registered_tables: Registry records of mirrored tables.
        distant_tables: Distant schema snapshot (table -> columns).
        fetcher: Reads live foreign table columns.
        **classifier_options: Forwarded to ``classify_table_updates()``
            (``failure_policy``, ``max_concurrency``, ``normalize``,
            ``on_collision``).

    Returns:
        List of ``SyncReportEntry``.

    Raises:
        ColumnFetchError: On a fetch failure under the fail-fast policy.
        NormalizationCollisionError: On a name collision under ``REJECT``.
    """
    updates = await classify_table_updates(
        workspace_id,
        registered_tables,
        distant_tables,
        fetcher,
        **classifier_options,
    )
    return build_report_from_updates(
        remote_server_schema, registered_tables, distant_tables, updates
    )
