"""Connection factory for the local and remote databases.

Resolves named profiles from sync.toml into connection URLs and builds the
two collaborators of a sync run:

1. ``AsyncPostgresColumnFetcher`` on the local database (foreign tables)
2. ``DistantSchemaIntrospector`` on the remote database (distant tables)

An explicit ``database_url`` always wins over a profile.
"""

import logging
from collections.abc import Iterable
from urllib.parse import quote

from remote_table_sync.adapters.postgres import AsyncPostgresColumnFetcher
from remote_table_sync.config.models import DatabaseProfile, SyncConfig
from remote_table_sync.schema.introspector import DistantSchemaIntrospector

logger = logging.getLogger(__name__)


class ProfileNotFoundError(Exception):
    """Raised when a database profile is not configured."""

    pass


def resolve_url(profile: DatabaseProfile) -> str:
    """Resolve profile URL with password substitution.

    Args:
        profile: Database profile from config

    Returns:
        Connection URL with password substituted
    """
    url = profile.url
    if profile.db_password and "[YOUR-PASSWORD]" in url:
        url = url.replace("[YOUR-PASSWORD]", quote(profile.db_password, safe=""))
    return url


def get_profile(config: SyncConfig, profile_name: str | None) -> DatabaseProfile:
    """Look up a profile by name.

    Args:
        config: Loaded sync configuration.
        profile_name: Profile name from sync.toml.

    Returns:
        The matching ``DatabaseProfile``.

    Raises:
        ProfileNotFoundError: If *profile_name* is None or not configured.
    """
    available = ", ".join(config.profiles.keys()) or "(none)"
    if profile_name is None:
        raise ProfileNotFoundError(
            f"No database profile selected.\nAvailable profiles: {available}"
        )
    if profile_name not in config.profiles:
        raise ProfileNotFoundError(
            f"Profile '{profile_name}' not found in sync.toml.\n"
            f"Available profiles: {available}"
        )
    return config.profiles[profile_name]


def create_column_fetcher(
    config: SyncConfig,
    profile_name: str | None = None,
    database_url: str | None = None,
) -> AsyncPostgresColumnFetcher:
    """Create a column fetcher on the local database.

    Args:
        config: Loaded sync configuration.
        profile_name: Local profile; defaults to ``[sync] local_profile``.
        database_url: Explicit URL, bypasses profile resolution.

    Returns:
        A new ``AsyncPostgresColumnFetcher`` (caller must ``close()`` it).

    Raises:
        ProfileNotFoundError: If no usable profile is configured.
    """
    if database_url is None:
        profile_name = profile_name or config.sync.local_profile
        database_url = resolve_url(get_profile(config, profile_name))
        logger.debug(f"Local database from profile '{profile_name}'")
    return AsyncPostgresColumnFetcher(database_url=database_url)


def create_introspector(
    config: SyncConfig,
    profile_name: str | None = None,
    database_url: str | None = None,
    required_tables: Iterable[str] = (),
) -> DistantSchemaIntrospector:
    """Create a distant schema introspector on the remote database.

    Args:
        config: Loaded sync configuration.
        profile_name: Remote profile; defaults to ``[sync] remote_profile``.
        database_url: Explicit URL, bypasses profile resolution.
        required_tables: Distant tables that are never excluded, even when
            listed in ``[sync] excluded_tables`` or the introspector defaults.

    Returns:
        A ``DistantSchemaIntrospector`` to be used with ``async with``.

    Raises:
        ProfileNotFoundError: If no usable profile is configured.
    """
    if database_url is None:
        profile_name = profile_name or config.sync.remote_profile
        database_url = resolve_url(get_profile(config, profile_name))
        logger.debug(f"Remote database from profile '{profile_name}'")

    excluded = config.sync.excluded_tables
    excluded_tables = set(
        excluded if excluded is not None else DistantSchemaIntrospector.DEFAULT_EXCLUDED_TABLES
    )
    kept = excluded_tables & set(required_tables)
    if kept:
        logger.debug(f"Keeping registered tables despite exclusion: {sorted(kept)}")
    return DistantSchemaIntrospector(database_url, excluded_tables=excluded_tables - kept)
