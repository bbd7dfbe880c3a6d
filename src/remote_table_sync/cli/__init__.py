"""CLI module for remote table synchronization checks.

Provides commands to list profiles, report the synchronization status of
registered foreign tables, and preview the column actions for one table.

Usage:
    remote-table-sync profiles
    remote-table-sync report --workspace-id <uuid> --registry registry.json
    remote-table-sync plan --workspace-id <uuid> --registry registry.json --table people

Commands:
    profiles  - List available profiles
    report    - Report sync status and pending updates of every remote table
    plan      - Show the column actions that would align one foreign table
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from remote_table_sync.config.loader import load_registered_tables, load_sync_config
from remote_table_sync.config.models import SyncConfig
from remote_table_sync.factory import ProfileNotFoundError
from remote_table_sync.schema.models import RegisteredTable, TableSyncStatus
from remote_table_sync.schema.sync import check_remote_tables, plan_table_migration

console = Console()


# ============================================================================
# Shared helpers
# ============================================================================


def _load_inputs(
    args: argparse.Namespace,
) -> tuple[SyncConfig, list[RegisteredTable]] | None:
    """Load config and registry, printing errors.

    Returns:
        ``(config, registered_tables)`` or None if either failed to load.
    """
    try:
        config = load_sync_config(Path(args.config) if args.config else None)
        registered_tables = load_registered_tables(
            args.registry, workspace_id=args.workspace_id
        )
    except (FileNotFoundError, ValueError) as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        return None
    return config, registered_tables


# ============================================================================
# Async command implementations
# ============================================================================


async def _async_report(args: argparse.Namespace) -> int:
    """Async implementation for report command.

    Args:
        args: Parsed arguments with config, workspace_id, registry, schema.

    Returns:
        0 on success, 1 on failure.
    """
    inputs = _load_inputs(args)
    if inputs is None:
        return 1
    config, registered_tables = inputs

    console.print("Checking remote tables...", style="dim")

    result = await check_remote_tables(
        args.workspace_id,
        registered_tables,
        config=config,
        remote_schema=args.schema,
    )

    if not result.success:
        console.print()
        for error in result.errors:
            console.print(f"[bold red]x[/bold red] {escape(error)}")
        return 1

    console.print()
    table = Table(
        title=f"Remote Tables ({result.remote_schema})",
        show_header=True,
        header_style="bold",
    )
    table.add_column("Table")
    table.add_column("Status")
    table.add_column("Pending updates")

    for entry in result.entries:
        status_style = "green" if entry.status == TableSyncStatus.SYNCED else "yellow"
        updates = ", ".join(marker.value for marker in entry.pending_updates)
        table.add_row(
            entry.name,
            f"[{status_style}]{entry.status.value}[/{status_style}]",
            f"[bold yellow]{updates}[/bold yellow]" if updates else "-",
        )

    console.print(table)

    if result.pending_count:
        console.print(
            f"\n[bold yellow]{result.pending_count}[/bold yellow] "
            f"table(s) with pending updates."
        )
    else:
        console.print("\n[bold green]v[/bold green] No pending updates")

    return 0


async def _async_plan(args: argparse.Namespace) -> int:
    """Async implementation for plan command.

    Args:
        args: Parsed arguments with config, workspace_id, registry, schema,
            and table.

    Returns:
        0 on success, 1 on failure.
    """
    inputs = _load_inputs(args)
    if inputs is None:
        return 1
    config, registered_tables = inputs

    matches = [t for t in registered_tables if t.distant_table_name == args.table]
    if not matches:
        console.print(
            f"[red]Error: Table '{args.table}' is not in the registry.[/red]"
        )
        return 1
    registered_table = matches[-1]

    try:
        actions = await plan_table_migration(
            registered_table, config=config, remote_schema=args.schema
        )
    except KeyError as e:
        console.print(f"[red]Error: {escape(str(e.args[0]))}[/red]")
        return 1
    except ProfileNotFoundError as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        return 1
    except Exception as e:
        console.print(f"\n[bold red]Error:[/bold red] Planning failed: {escape(str(e))}")
        return 1

    if not actions:
        console.print(
            f"[bold green]v[/bold green] Foreign table "
            f"[cyan]{registered_table.local_table_name}[/cyan] is up to date"
        )
        return 0

    from remote_table_sync.adapters.postgres import get_workspace_schema_name

    schema_name = get_workspace_schema_name(registered_table.workspace_id)

    console.print()
    console.print("[bold]Column actions:[/bold]")
    for step, action in enumerate(actions, start=1):
        console.print(
            f"  {step}. {action.action.value} [cyan]{action.column_name}[/cyan]"
        )
        console.print(
            f"     [dim]{action.to_sql(schema_name, registered_table.local_table_name)}[/dim]",
            highlight=False,
            soft_wrap=True,
        )

    return 0


# ============================================================================
# Command wrappers
# ============================================================================


def cmd_profiles(args: argparse.Namespace) -> int:
    """List available profiles from sync.toml.

    Reads only local TOML config -- no database calls.

    Args:
        args: Parsed CLI arguments.

    Returns:
        0 on success, 1 if sync.toml is missing or invalid.
    """
    try:
        config = load_sync_config(Path(args.config) if args.config else None)
    except (FileNotFoundError, ValueError) as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        return 1

    roles = {
        config.sync.local_profile: "local",
        config.sync.remote_profile: "remote",
    }

    table = Table(title="Database Profiles", show_header=True, header_style="bold")
    table.add_column("Profile")
    table.add_column("Role")
    table.add_column("Provider")
    table.add_column("Description")

    for name, profile in config.profiles.items():
        table.add_row(
            f"[bold cyan]{name}[/bold cyan]" if name in roles else name,
            roles.get(name, ""),
            profile.provider,
            profile.description or "",
        )

    console.print(table)
    return 0


def cmd_report(args: argparse.Namespace) -> int:
    """Report sync status of remote tables.

    Wraps the async implementation with ``asyncio.run()``.
    """
    return asyncio.run(_async_report(args))


def cmd_plan(args: argparse.Namespace) -> int:
    """Show column actions for one table.

    Wraps the async implementation with ``asyncio.run()``.
    """
    return asyncio.run(_async_plan(args))


# ============================================================================
# Main entry point
# ============================================================================


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point.

    Parses command line arguments and dispatches to appropriate handler.

    Returns:
        Exit code (0 for success, non-zero for errors).
    """
    parser = argparse.ArgumentParser(
        prog="remote-table-sync",
        description="Remote table schema synchronization checks",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Path to sync.toml (default: ./sync.toml)",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: WARNING)",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    # profiles command
    p_profiles = subparsers.add_parser(
        "profiles",
        help="List available profiles",
    )
    p_profiles.set_defaults(func=cmd_profiles)

    # report and plan share the registry options
    for name, help_text, func in (
        ("report", "Report sync status and pending updates of remote tables", cmd_report),
        ("plan", "Show column actions that would align one foreign table", cmd_plan),
    ):
        p_cmd = subparsers.add_parser(name, help=help_text)
        p_cmd.add_argument(
            "--workspace-id",
            required=True,
            help="Workspace owning the foreign tables",
        )
        p_cmd.add_argument(
            "--registry",
            required=True,
            help="Path to JSON list of registered tables",
        )
        p_cmd.add_argument(
            "--schema",
            default=None,
            help="Remote schema (default: [sync] remote_schema)",
        )
        p_cmd.set_defaults(func=func)

    p_plan = subparsers.choices["plan"]
    p_plan.add_argument(
        "--table",
        required=True,
        help="Distant table name of the registered table",
    )

    args = parser.parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
