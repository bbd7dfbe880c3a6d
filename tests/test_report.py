"""Tests for the synchronization report builder.

Verifies row order, SYNCED / NOT_SYNCED status, deleted-table rows, and
serialization of report entries.
"""

from unittest.mock import AsyncMock

import pytest

from remote_table_sync.schema.classifier import FetchFailurePolicy
from remote_table_sync.schema.models import (
    DistantColumn,
    ForeignColumn,
    RegisteredTable,
    SyncReportEntry,
    TableSyncStatus,
    UpdateMarker,
)
from remote_table_sync.schema.report import (
    build_report_from_updates,
    build_synchronization_report,
)

WORKSPACE_ID = "20202020-1c25-4d02-bf25-6aeccf7ea419"


def _registered(distant: str, local: str) -> RegisteredTable:
    return RegisteredTable(
        workspace_id=WORKSPACE_ID,
        local_table_name=local,
        distant_table_name=distant,
    )


def _columns(*names: str) -> list[DistantColumn]:
    return [DistantColumn(column_name=n, data_type="text") for n in names]


# ============================================================================
# Pure row assembly
# ============================================================================


class TestBuildReportFromUpdates:
    """Verify build_report_from_updates() row assembly."""

    def test_distant_rows_in_distant_order(self) -> None:
        """One row per distant table, following the snapshot order."""
        entries = build_report_from_updates(
            "public",
            [_registered("people", "t1")],
            {"orders": _columns("id"), "people": _columns("id")},
            {},
        )

        assert [e.name for e in entries] == ["orders", "people"]
        assert [e.status for e in entries] == [
            TableSyncStatus.NOT_SYNCED,
            TableSyncStatus.SYNCED,
        ]

    def test_schema_copied_onto_rows(self) -> None:
        """Every row carries the remote schema name."""
        entries = build_report_from_updates(
            "crm", [], {"a": [], "b": []}, {}
        )

        assert {e.schema_name for e in entries} == {"crm"}

    def test_pending_updates_attached(self) -> None:
        """Markers from the update map land on the matching row."""
        entries = build_report_from_updates(
            "public",
            [_registered("people", "t1")],
            {"people": _columns("id")},
            {"people": [UpdateMarker.COLUMNS_ADDED]},
        )

        assert entries == [
            SyncReportEntry(
                name="people",
                schema_name="public",
                status=TableSyncStatus.SYNCED,
                pending_updates=[UpdateMarker.COLUMNS_ADDED],
            )
        ]

    def test_deleted_rows_appended(self) -> None:
        """Registered tables gone remotely follow the distant rows."""
        entries = build_report_from_updates(
            "public",
            [_registered("people", "t1"), _registered("legacy", "t2")],
            {"people": _columns("id")},
            {"legacy": [UpdateMarker.TABLE_DELETED]},
        )

        assert [e.name for e in entries] == ["people", "legacy"]
        deleted = entries[1]
        assert deleted.status == TableSyncStatus.SYNCED
        assert deleted.pending_updates == [UpdateMarker.TABLE_DELETED]

    def test_empty_inputs(self) -> None:
        """No distant tables and no updates give an empty report."""
        assert build_report_from_updates("public", [], {}, {}) == []

    def test_unregistered_table_without_updates(self) -> None:
        """An unmirrored distant table is NOT_SYNCED with no markers."""
        entries = build_report_from_updates("public", [], {"orders": []}, {})

        assert entries[0].status == TableSyncStatus.NOT_SYNCED
        assert entries[0].pending_updates == []


class TestSyncReportEntrySerialization:
    """Verify report rows serialize for consumers."""

    def test_schema_alias(self) -> None:
        """schema_name is dumped as 'schema'."""
        entry = SyncReportEntry(
            name="orders", schema_name="public", status=TableSyncStatus.NOT_SYNCED
        )

        dumped = entry.model_dump(by_alias=True, mode="json")

        assert dumped == {
            "name": "orders",
            "schema": "public",
            "status": "NOT_SYNCED",
            "pending_updates": [],
        }


# ============================================================================
# End-to-end report (async)
# ============================================================================


class TestBuildSynchronizationReport:
    """Verify build_synchronization_report() with a mocked fetcher."""

    @pytest.mark.asyncio
    async def test_mixed_report(self) -> None:
        """Synced, unsynced and deleted tables all appear."""
        fetcher = AsyncMock()
        fetcher.fetch_columns = AsyncMock(
            return_value=[ForeignColumn(column_name="id", data_type="uuid")]
        )

        entries = await build_synchronization_report(
            "public",
            WORKSPACE_ID,
            [_registered("people", "t1"), _registered("notes", "t2")],
            {"people": _columns("id", "email"), "orders": _columns("id")},
            fetcher,
        )

        assert [(e.name, e.status, e.pending_updates) for e in entries] == [
            ("people", TableSyncStatus.SYNCED, [UpdateMarker.COLUMNS_ADDED]),
            ("orders", TableSyncStatus.NOT_SYNCED, []),
            ("notes", TableSyncStatus.SYNCED, [UpdateMarker.TABLE_DELETED]),
        ]
        fetcher.fetch_columns.assert_awaited_once_with(WORKSPACE_ID, "t1")

    @pytest.mark.asyncio
    async def test_empty_distant_schema(self) -> None:
        """With no distant tables every registered table is reported deleted."""
        fetcher = AsyncMock()
        fetcher.fetch_columns = AsyncMock(return_value=[])

        entries = await build_synchronization_report(
            "public",
            WORKSPACE_ID,
            [_registered("people", "t1"), _registered("notes", "t2")],
            {},
            fetcher,
        )

        assert [(e.name, e.schema_name, e.status, e.pending_updates) for e in entries] == [
            ("people", "public", TableSyncStatus.SYNCED, [UpdateMarker.TABLE_DELETED]),
            ("notes", "public", TableSyncStatus.SYNCED, [UpdateMarker.TABLE_DELETED]),
        ]
        fetcher.fetch_columns.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_in_sync_report(self) -> None:
        """A fully mirrored schema has no pending updates."""
        fetcher = AsyncMock()
        fetcher.fetch_columns = AsyncMock(
            return_value=[ForeignColumn(column_name="id", data_type="uuid")]
        )

        entries = await build_synchronization_report(
            "public",
            WORKSPACE_ID,
            [_registered("people", "t1")],
            {"people": _columns("id")},
            fetcher,
        )

        assert entries == [
            SyncReportEntry(
                name="people", schema_name="public", status=TableSyncStatus.SYNCED
            )
        ]

    @pytest.mark.asyncio
    async def test_classifier_options_forwarded(self) -> None:
        """Classifier options reach classify_table_updates()."""
        fetcher = AsyncMock()
        fetcher.fetch_columns = AsyncMock(side_effect=RuntimeError("timeout"))

        entries = await build_synchronization_report(
            "public",
            WORKSPACE_ID,
            [_registered("people", "t1")],
            {"people": _columns("id")},
            fetcher,
            failure_policy=FetchFailurePolicy.ISOLATE,
        )

        assert entries[0].pending_updates == [UpdateMarker.FETCH_FAILED]
