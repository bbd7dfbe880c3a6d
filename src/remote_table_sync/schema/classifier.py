"""Per-table update classification (async).

For every registered table, compares the live foreign columns against the
distant schema snapshot and records which kinds of change are pending.
Live columns are read through a ``ColumnFetcher``; a table missing from the
distant schema is marked ``TABLE_DELETED`` without any fetch.

Fetch failures follow an explicit policy:

1. **fail_fast** (default): the first failure aborts the whole pass as a
   ``ColumnFetchError``; fetches still in flight are cancelled.
2. **isolate**: the failing table is marked ``FETCH_FAILED`` and the other
   tables proceed.

Usage:
    from remote_table_sync.schema.classifier import (
        FetchFailurePolicy,
        classify_table_updates,
    )

    updates = await classify_table_updates(
        workspace_id,
        registered_tables,
        distant_tables,
        fetcher,
        failure_policy=FetchFailurePolicy.ISOLATE,
        max_concurrency=4,
    )
    # {"people": [UpdateMarker.COLUMNS_ADDED], "notes": [UpdateMarker.TABLE_DELETED]}
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence
from enum import Enum
from typing import TYPE_CHECKING

from remote_table_sync.schema.comparator import diff_columns
from remote_table_sync.schema.models import (
    DistantTables,
    ForeignColumn,
    RegisteredTable,
    UpdateMarker,
)
from remote_table_sync.schema.naming import (
    CollisionPolicy,
    ColumnNameNormalizer,
    to_foreign_column_name,
)

if TYPE_CHECKING:
    from remote_table_sync.adapters.base import ColumnFetcher

logger = logging.getLogger(__name__)


class FetchFailurePolicy(str, Enum):
    """How a failed live column fetch affects the classification pass."""

    FAIL_FAST = "fail_fast"
    ISOLATE = "isolate"


class ColumnFetchError(Exception):
    """Raised when the live columns of a foreign table cannot be fetched."""

    def __init__(self, distant_table_name: str, local_table_name: str) -> None:
        self.distant_table_name = distant_table_name
        self.local_table_name = local_table_name
        super().__init__(
            f"Failed to fetch columns of foreign table '{local_table_name}' "
            f"(distant table '{distant_table_name}')"
        )


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _markers_for_diff(
    foreign_columns: Sequence[ForeignColumn],
    registered_table: RegisteredTable,
    distant_tables: DistantTables,
    normalize: ColumnNameNormalizer,
    on_collision: CollisionPolicy,
) -> tuple[UpdateMarker, ...]:
    """Markers for one table whose distant counterpart still exists."""
    diff = diff_columns(
        foreign_columns,
        distant_tables[registered_table.distant_table_name],
        normalize,
        on_collision,
    )

    markers: tuple[UpdateMarker, ...] = ()
    if diff.added:
        markers += (UpdateMarker.COLUMNS_ADDED,)
    if diff.deleted:
        markers += (UpdateMarker.COLUMNS_DELETED,)
    return markers


async def _fetch_all(
    workspace_id: str,
    tables: Sequence[RegisteredTable],
    fetcher: ColumnFetcher,
    failure_policy: FetchFailurePolicy,
    max_concurrency: int,
) -> list[list[ForeignColumn] | None]:
    """Fetch live columns for *tables*, results aligned with the input.

    ``None`` stands for an isolated failure.
    """
    semaphore = asyncio.Semaphore(max_concurrency)

    async def fetch_one(table: RegisteredTable) -> list[ForeignColumn]:
        async with semaphore:
            logger.debug(
                f"Fetching live columns of '{table.local_table_name}' "
                f"(distant '{table.distant_table_name}')"
            )
            try:
                return await fetcher.fetch_columns(workspace_id, table.local_table_name)
            except Exception as e:
                raise ColumnFetchError(
                    table.distant_table_name, table.local_table_name
                ) from e

    tasks = [asyncio.ensure_future(fetch_one(table)) for table in tables]

    if failure_policy == FetchFailurePolicy.FAIL_FAST:
        try:
            return list(await asyncio.gather(*tasks))
        except BaseException:
            for task in tasks:
                task.cancel()
            # Let cancelled tasks settle before propagating
            await asyncio.gather(*tasks, return_exceptions=True)
            raise

    outcomes = await asyncio.gather(*tasks, return_exceptions=True)
    results: list[list[ForeignColumn] | None] = []
    for outcome in outcomes:
        if isinstance(outcome, ColumnFetchError):
            logger.warning(f"{outcome}: {outcome.__cause__}")
            results.append(None)
        elif isinstance(outcome, BaseException):
            raise outcome
        else:
            results.append(outcome)
    return results


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


async def classify_table_updates(
    workspace_id: str,
    registered_tables: Sequence[RegisteredTable],
    distant_tables: DistantTables,
    fetcher: ColumnFetcher,
    *,
    failure_policy: FetchFailurePolicy = FetchFailurePolicy.FAIL_FAST,
    max_concurrency: int = 1,
    normalize: ColumnNameNormalizer = to_foreign_column_name,
    on_collision: CollisionPolicy = CollisionPolicy.REJECT,
) -> dict[str, list[UpdateMarker]]:
    """Classify pending schema updates for each registered table.

    For each registered table:

    - Distant table missing: ``[TABLE_DELETED]``, no fetch.
    - Otherwise the live foreign columns are fetched and diffed;
      ``COLUMNS_ADDED`` and/or ``COLUMNS_DELETED`` are recorded.
    - Tables without changes get no entry.

    The result is folded from per-table outcomes once all fetches are
    done; no map is shared between concurrent fetches.

    Args:
        workspace_id: Tenant owning the foreign tables.
        registered_tables: Registry records of mirrored tables.
        distant_tables: Distant schema snapshot (table -> columns).
        fetcher: Reads live foreign table columns.
        failure_policy: ``FAIL_FAST`` (default) or ``ISOLATE``.
        max_concurrency: Maximum fetches in flight.  ``1`` fetches
            sequentially.
        normalize: Raw distant name -> local name function.
        on_collision: Policy for distant names that normalize to the same name.

    Returns:
        Dict mapping distant table name to its update markers.

    Raises:
        ValueError: If *max_concurrency* is below 1.
        ColumnFetchError: On a fetch failure under ``FAIL_FAST``.
        NormalizationCollisionError: On a name collision under ``REJECT``.

    Example:
        >>> updates = await classify_table_updates(
        ...     "ws-1", registered_tables, {"people": columns}, fetcher,
        ... )
        >>> updates
        {'people': [<UpdateMarker.COLUMNS_ADDED: 'COLUMNS_ADDED'>]}
    """
    if max_concurrency < 1:
        raise ValueError(f"max_concurrency must be at least 1, got {max_concurrency}")

    deleted = [t for t in registered_tables if t.distant_table_name not in distant_tables]
    present = [t for t in registered_tables if t.distant_table_name in distant_tables]

    live_columns = await _fetch_all(
        workspace_id, present, fetcher, failure_policy, max_concurrency
    )

    outcomes: list[tuple[str, tuple[UpdateMarker, ...]]] = [
        (table.distant_table_name, (UpdateMarker.TABLE_DELETED,)) for table in deleted
    ]
    for table, columns in zip(present, live_columns):
        if columns is None:
            markers: tuple[UpdateMarker, ...] = (UpdateMarker.FETCH_FAILED,)
        else:
            markers = _markers_for_diff(
                columns, table, distant_tables, normalize, on_collision
            )
        outcomes.append((table.distant_table_name, markers))

    # Duplicate distant names: the last registered table wins
    updates = {name: list(markers) for name, markers in dict(outcomes).items() if markers}

    logger.info(
        f"Classified {len(registered_tables)} registered tables: "
        f"{len(updates)} with pending updates"
    )
    return updates
