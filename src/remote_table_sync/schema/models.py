"""Pydantic models for remote table schema comparison.

This module contains schema-domain models:
- Column models: DistantColumn, ForeignColumn, NormalizedColumn
- Registry model: RegisteredTable
- Comparison models: ColumnsDiff, UpdateMarker
- Report models: TableSyncStatus, SyncReportEntry

Configuration models (DatabaseProfile, SyncSettings, SyncConfig) live in
remote_table_sync.config.models.
"""

from enum import Enum

from pydantic import BaseModel, Field


# ============================================================================
# Enumerations
# ============================================================================


class UpdateMarker(str, Enum):
    """Kind of pending change detected for a mirrored table."""

    COLUMNS_ADDED = "COLUMNS_ADDED"
    COLUMNS_DELETED = "COLUMNS_DELETED"
    TABLE_DELETED = "TABLE_DELETED"
    FETCH_FAILED = "FETCH_FAILED"  # isolate policy only


class TableSyncStatus(str, Enum):
    """Whether a distant table is mirrored by a registered table."""

    SYNCED = "SYNCED"
    NOT_SYNCED = "NOT_SYNCED"


# ============================================================================
# Column Models
# ============================================================================


class DistantColumn(BaseModel):
    """A column as defined on the remote (distant) table.

    Example:
        >>> col = DistantColumn(column_name="first_name", data_type="text")
        >>> col.data_type
        'text'
    """

    column_name: str
    data_type: str


class ForeignColumn(BaseModel):
    """A column as currently exposed by the local foreign table."""

    column_name: str
    data_type: str


class NormalizedColumn(BaseModel):
    """A distant column renamed into the local naming convention."""

    name: str
    type: str


# Whole remote schema snapshot: table name -> ordered columns
DistantTables = dict[str, list[DistantColumn]]


# ============================================================================
# Registry Model
# ============================================================================


class RegisteredTable(BaseModel):
    """Declares that a local foreign table mirrors a distant table.

    ``distant_table_name`` is the join key against the distant schema.

    Example:
        >>> table = RegisteredTable(
        ...     workspace_id="ws-1",
        ...     local_table_name="people_remote",
        ...     distant_table_name="people",
        ... )
        >>> table.distant_table_name
        'people'
    """

    workspace_id: str
    local_table_name: str
    distant_table_name: str


# ============================================================================
# Comparison Result
# ============================================================================


class ColumnsDiff(BaseModel):
    """Columns added on and deleted from the distant side.

    ``added`` carries normalized distant columns missing locally;
    ``deleted`` carries local column names missing remotely.
    """

    added: list[NormalizedColumn] = Field(default_factory=list)
    deleted: list[str] = Field(default_factory=list)

    @property
    def has_changes(self) -> bool:
        """True if any column was added or deleted."""
        return bool(self.added or self.deleted)


# ============================================================================
# Report Model
# ============================================================================


class SyncReportEntry(BaseModel):
    """One row of a synchronization report.

    ``schema_name`` serializes as ``schema``.

    Example:
        >>> entry = SyncReportEntry(
        ...     name="orders", schema_name="public", status=TableSyncStatus.NOT_SYNCED
        ... )
        >>> entry.pending_updates
        []
    """

    name: str
    schema_name: str = Field(serialization_alias="schema")
    status: TableSyncStatus
    pending_updates: list[UpdateMarker] = Field(default_factory=list)
