"""End-to-end remote table checks between a local and a remote profile (async).

Opens the remote database to snapshot the distant schema, opens the local
database to read live foreign table columns, and runs the report builder
or the action compiler with the policies configured in sync.toml.

Connections are always closed before returning.  Nothing is written to
either database.

Usage:
    from remote_table_sync.schema.sync import check_remote_tables, plan_table_migration

    result = await check_remote_tables(workspace_id, registered_tables)
    if result.success:
        print(result.format_report())

    actions = await plan_table_migration(registered_tables[0])
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, Field

from remote_table_sync.schema.actions import (
    MigrationColumnAction,
    compile_migration_actions,
)
from remote_table_sync.schema.models import (
    RegisteredTable,
    SyncReportEntry,
    TableSyncStatus,
)
from remote_table_sync.schema.report import build_synchronization_report

if TYPE_CHECKING:
    from remote_table_sync.config.models import SyncConfig

logger = logging.getLogger(__name__)


class SyncRunResult(BaseModel):
    """Result of a remote table check.

    Attributes:
        success: Whether the check completed.
        remote_schema: Remote schema that was compared.
        workspace_id: Tenant owning the foreign tables.
        entries: Report rows (see ``build_synchronization_report``).
        errors: Error messages encountered during the check.
    """

    success: bool = False
    remote_schema: str = ""
    workspace_id: str = ""
    entries: list[SyncReportEntry] = Field(default_factory=list)
    errors: list[str] = Field(default_factory=list)

    @property
    def pending_count(self) -> int:
        """Number of rows with at least one pending update."""
        return sum(1 for entry in self.entries if entry.pending_updates)

    @property
    def not_synced(self) -> list[str]:
        """Distant tables not mirrored by any registered table."""
        return [
            entry.name
            for entry in self.entries
            if entry.status == TableSyncStatus.NOT_SYNCED
        ]

    def format_report(self) -> str:
        """Format the check result as a human-readable report."""
        if not self.success:
            return "Remote table check failed:\n" + "\n".join(
                f"  - {error}" for error in self.errors
            )

        if self.pending_count == 0 and not self.not_synced:
            return f"All remote tables in '{self.remote_schema}' are in sync"

        lines = [f"Remote tables in '{self.remote_schema}':"]
        for entry in self.entries:
            updates = ", ".join(marker.value for marker in entry.pending_updates)
            suffix = f" ({updates})" if updates else ""
            lines.append(f"  - {entry.name}: {entry.status.value}{suffix}")
        return "\n".join(lines)


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _resolve_config(config: SyncConfig | None) -> SyncConfig:
    """Return *config*, loading sync.toml when None."""
    if config is not None:
        return config

    from remote_table_sync.config.loader import load_sync_config

    return load_sync_config()


def _classifier_options(config: SyncConfig) -> dict[str, Any]:
    """Classifier keyword arguments from the ``[sync]`` settings."""
    return {
        "failure_policy": config.sync.failure_policy,
        "max_concurrency": config.sync.max_concurrency,
        "on_collision": config.sync.collision_policy,
    }


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


async def check_remote_tables(
    workspace_id: str,
    registered_tables: Sequence[RegisteredTable],
    *,
    config: SyncConfig | None = None,
    remote_schema: str | None = None,
    local_profile: str | None = None,
    remote_profile: str | None = None,
) -> SyncRunResult:
    """Compare the registered foreign tables of a workspace with the remote schema.

    Errors (missing profile, connection failure, fetch failure under the
    fail-fast policy) are reported in ``errors`` rather than raised.
    Registered distant tables are always introspected, even when listed in
    ``[sync] excluded_tables``.

    Args:
        workspace_id: Tenant owning the foreign tables.
        registered_tables: Registry records of mirrored tables.
        config: Sync configuration; loads sync.toml when None.
        remote_schema: Remote schema; defaults to ``[sync] remote_schema``.
        local_profile: Local profile; defaults to ``[sync] local_profile``.
        remote_profile: Remote profile; defaults to ``[sync] remote_profile``.

    Returns:
        ``SyncRunResult`` with the report rows.

    Example:
        >>> result = await check_remote_tables("ws-1", registered_tables)
        >>> result.not_synced
        ['orders']
    """
    from remote_table_sync.factory import create_column_fetcher, create_introspector

    result = SyncRunResult(workspace_id=workspace_id)

    try:
        config = _resolve_config(config)
        schema_name = remote_schema or config.sync.remote_schema
        result.remote_schema = schema_name
        introspector = create_introspector(
            config,
            profile_name=remote_profile,
            required_tables={t.distant_table_name for t in registered_tables},
        )
        fetcher = create_column_fetcher(config, profile_name=local_profile)
    except Exception as e:
        result.errors.append(f"Failed to prepare remote table check: {e}")
        return result

    try:
        async with introspector:
            distant_tables = await introspector.get_distant_tables(schema_name)

        result.entries = await build_synchronization_report(
            schema_name,
            workspace_id,
            registered_tables,
            distant_tables,
            fetcher,
            **_classifier_options(config),
        )
        result.success = True
        logger.info(
            f"Checked {len(result.entries)} remote tables in '{schema_name}': "
            f"{result.pending_count} with pending updates"
        )

    except Exception as e:
        result.errors.append(f"Failed to check remote tables: {e}")

    finally:
        await fetcher.close()

    return result


async def plan_table_migration(
    registered_table: RegisteredTable,
    *,
    config: SyncConfig | None = None,
    remote_schema: str | None = None,
    local_profile: str | None = None,
    remote_profile: str | None = None,
) -> list[MigrationColumnAction]:
    """Compile the column actions for one registered table.

    Reads the live foreign columns and the distant columns, then runs
    ``compile_migration_actions()``.  The actions are returned, never
    applied.

    Args:
        registered_table: The mirrored table to plan for.
        config: Sync configuration; loads sync.toml when None.
        remote_schema: Remote schema; defaults to ``[sync] remote_schema``.
        local_profile: Local profile; defaults to ``[sync] local_profile``.
        remote_profile: Remote profile; defaults to ``[sync] remote_profile``.

    Returns:
        Ordered actions (creates before drops).

    Raises:
        KeyError: If the distant table no longer exists.
        ProfileNotFoundError: If a profile is not configured.
    """
    from remote_table_sync.factory import create_column_fetcher, create_introspector

    config = _resolve_config(config)
    schema_name = remote_schema or config.sync.remote_schema

    async with create_introspector(
        config,
        profile_name=remote_profile,
        required_tables=[registered_table.distant_table_name],
    ) as introspector:
        distant_tables = await introspector.get_distant_tables(schema_name)

    if registered_table.distant_table_name not in distant_tables:
        raise KeyError(
            f"Distant table '{registered_table.distant_table_name}' "
            f"not found in schema '{schema_name}'"
        )

    fetcher = create_column_fetcher(config, profile_name=local_profile)
    try:
        foreign_columns = await fetcher.fetch_columns(
            registered_table.workspace_id, registered_table.local_table_name
        )
    finally:
        await fetcher.close()

    return compile_migration_actions(
        foreign_columns,
        distant_tables[registered_table.distant_table_name],
        on_collision=config.sync.collision_policy,
    )
