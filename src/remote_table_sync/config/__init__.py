"""Configuration management: profiles, TOML loading, and config models.

Usage:
    >>> from remote_table_sync.config import load_sync_config, SyncConfig
"""

from remote_table_sync.config.loader import load_registered_tables, load_sync_config
from remote_table_sync.config.models import DatabaseProfile, SyncConfig, SyncSettings

__all__ = [
    "load_sync_config",
    "load_registered_tables",
    "DatabaseProfile",
    "SyncConfig",
    "SyncSettings",
]
