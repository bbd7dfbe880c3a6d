"""Column fetcher protocol definition.

Defines the ``ColumnFetcher`` Protocol that the classifier uses to read the
live columns of a local foreign table.  All methods are ``async def``.

Usage:
    from remote_table_sync.adapters.base import ColumnFetcher

    async def count_columns(fetcher: ColumnFetcher) -> int:
        columns = await fetcher.fetch_columns("ws-1", "people")
        await fetcher.close()
        return len(columns)
"""

from typing import Protocol

from remote_table_sync.schema.models import ForeignColumn


class ColumnFetcher(Protocol):
    """Reads the live column set of a local foreign table.

    Implementations may hit the database on every call; callers should not
    assume any caching.
    """

    async def fetch_columns(
        self,
        workspace_id: str,
        local_table_name: str,
    ) -> list[ForeignColumn]:
        """Fetch the columns of a foreign table in a workspace.

        Args:
            workspace_id: Tenant identifier owning the foreign table.
            local_table_name: Name of the local foreign table.

        Returns:
            Columns in table order.  Empty list if the table has none.

        Raises:
            Exception: Any data-access error; retry policy belongs to the
                caller.

        Example:
            columns = await fetcher.fetch_columns("ws-1", "people")
        """
        ...

    async def close(self) -> None:
        """Release connections held by the fetcher."""
        ...
