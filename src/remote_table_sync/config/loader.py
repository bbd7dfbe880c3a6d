"""Configuration and registry loading.

``load_sync_config()`` reads profiles and sync settings from a TOML file;
``load_registered_tables()`` reads the registry of mirrored tables from a
JSON file.
"""

import json
import tomllib
from pathlib import Path

from remote_table_sync.config.models import DatabaseProfile, SyncConfig, SyncSettings
from remote_table_sync.schema.models import RegisteredTable


def load_sync_config(config_path: Path | None = None) -> SyncConfig:
    """Load sync configuration from TOML file.

    Args:
        config_path: Path to sync.toml (default: ``sync.toml`` in the
            current working directory).

    Returns:
        SyncConfig with all profiles and sync settings

    Raises:
        FileNotFoundError: If config file doesn't exist
        pydantic.ValidationError: If config values are invalid
    """
    if config_path is None:
        config_path = Path.cwd() / "sync.toml"

    if not config_path.exists():
        raise FileNotFoundError(
            f"Sync config not found: {config_path}\n"
            f"Create sync.toml with [profiles.<name>] and [sync] tables."
        )

    with open(config_path, "rb") as f:
        data = tomllib.load(f)

    # Parse profiles
    profiles = {}
    for name, profile_data in data.get("profiles", {}).items():
        profiles[name] = DatabaseProfile(**profile_data)

    return SyncConfig(
        profiles=profiles,
        sync=SyncSettings(**data.get("sync", {})),
    )


def load_registered_tables(
    registry_path: str | Path,
    workspace_id: str | None = None,
) -> list[RegisteredTable]:
    """Load registered tables from a JSON registry file.

    The file holds a list of objects with ``local_table_name``,
    ``distant_table_name`` and optionally ``workspace_id``.

    Args:
        registry_path: Path to the JSON registry.
        workspace_id: Fills in records without a ``workspace_id``.

    Returns:
        List of ``RegisteredTable``.

    Raises:
        FileNotFoundError: If the registry file does not exist.
        ValueError: If the payload is not a JSON list.

    Example:
        [
            {"local_table_name": "people_remote", "distant_table_name": "people"}
        ]
    """
    path = Path(registry_path)
    if not path.exists():
        raise FileNotFoundError(f"Registry file not found: {path}")

    payload = json.loads(path.read_text())
    if not isinstance(payload, list):
        raise ValueError(f"Registry {path.name} must contain a JSON list of tables")

    tables: list[RegisteredTable] = []
    for record in payload:
        if workspace_id is not None:
            record = {"workspace_id": workspace_id, **record}
        tables.append(RegisteredTable(**record))
    return tables
