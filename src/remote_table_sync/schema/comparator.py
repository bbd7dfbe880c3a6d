"""Column comparison between a foreign table and its distant table.

Compares live foreign columns against distant columns after name
normalization.  Pure logic -- no I/O, no database connections.

Usage:
    from remote_table_sync.schema.comparator import diff_columns

    diff = diff_columns(foreign_columns, distant_columns)
    if diff.has_changes:
        print([c.name for c in diff.added], diff.deleted)
"""

from collections.abc import Sequence

from remote_table_sync.schema.models import (
    ColumnsDiff,
    DistantColumn,
    ForeignColumn,
)
from remote_table_sync.schema.naming import (
    CollisionPolicy,
    ColumnNameNormalizer,
    normalize_distant_columns,
    to_foreign_column_name,
)


def diff_columns(
    foreign_columns: Sequence[ForeignColumn],
    distant_columns: Sequence[DistantColumn],
    normalize: ColumnNameNormalizer = to_foreign_column_name,
    on_collision: CollisionPolicy = CollisionPolicy.REJECT,
) -> ColumnsDiff:
    """Find columns added on and deleted from the distant table.

    Performs set operations on column names:
    - Added: normalized distant columns whose name is not a foreign column
    - Deleted: foreign column names absent from the normalized distant names

    Comparison is by name only; a data type change on an existing column is
    not reported.

    Args:
        foreign_columns: Columns currently exposed by the local foreign table.
        distant_columns: Columns of the distant table, with raw names.
        normalize: Raw distant name -> local name function.
        on_collision: Policy for distant names that normalize to the same name.

    Returns:
        ``ColumnsDiff`` with ``added`` in distant order and ``deleted`` in
        foreign order.

    Examples:
        >>> diff = diff_columns(
        ...     [ForeignColumn(column_name="id", data_type="uuid"),
        ...      ForeignColumn(column_name="oldCol", data_type="text")],
        ...     [DistantColumn(column_name="id", data_type="uuid"),
        ...      DistantColumn(column_name="new_col", data_type="text")],
        ... )
        >>> [c.name for c in diff.added]
        ['newCol']
        >>> diff.deleted
        ['oldCol']
    """
    foreign_names: list[str] = list(
        dict.fromkeys(column.column_name for column in foreign_columns)
    )
    foreign_name_set: set[str] = set(foreign_names)

    normalized = normalize_distant_columns(distant_columns, normalize, on_collision)
    distant_name_set: set[str] = {column.name for column in normalized}

    added = [column for column in normalized if column.name not in foreign_name_set]
    deleted = [name for name in foreign_names if name not in distant_name_set]

    return ColumnsDiff(added=added, deleted=deleted)
