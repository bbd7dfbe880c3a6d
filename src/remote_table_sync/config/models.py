"""Pydantic models for sync configuration."""

from pydantic import BaseModel, Field

from remote_table_sync.schema.classifier import FetchFailurePolicy
from remote_table_sync.schema.naming import CollisionPolicy


# ============================================================================
# Configuration Models
# ============================================================================


class DatabaseProfile(BaseModel):
    """Database connection profile from sync.toml."""

    url: str
    description: str = ""
    db_password: str | None = None  # For [YOUR-PASSWORD] placeholder substitution
    provider: str = "postgres"


class SyncSettings(BaseModel):
    """The ``[sync]`` table of sync.toml."""

    local_profile: str | None = None   # holds the foreign tables
    remote_profile: str | None = None  # owns the distant tables
    remote_schema: str = "public"
    failure_policy: FetchFailurePolicy = FetchFailurePolicy.FAIL_FAST
    max_concurrency: int = Field(default=1, ge=1)
    collision_policy: CollisionPolicy = CollisionPolicy.REJECT
    excluded_tables: list[str] | None = None


class SyncConfig(BaseModel):
    """Complete configuration from sync.toml."""

    profiles: dict[str, DatabaseProfile] = Field(default_factory=dict)
    sync: SyncSettings = Field(default_factory=SyncSettings)
