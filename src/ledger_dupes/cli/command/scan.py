from __future__ import annotations

"""
CLI command to scan a user's ledger for duplicate transactions.

Read-only: prints the groups a review session would walk through, ranked by
confidence. Use `ledger-dupes review` to act on them.
"""

import json

import typer

from ledger_dupes.cli.command.util import (
    build_scan_service,
    console,
    group_caption,
    group_table,
    open_store,
)
from ledger_dupes.errors import ConfigurationError, ScanFailure
from ledger_dupes.model.duplicate import failure_response
from ledger_dupes.workspace import Workspace


def run(
    workspace: Workspace,
    user_id: str,
    min_confidence: int = 0,
    as_json: bool = False,
) -> int:
    """Scan for duplicate groups and print them. Returns an exit code."""
    store = open_store(workspace)
    if store is None:
        return 1

    try:
        service = build_scan_service(workspace, store)
        result = service.scan(user_id).with_min_confidence(min_confidence)
    except (ConfigurationError, ScanFailure) as exc:
        if as_json:
            typer.echo(json.dumps(failure_response(str(exc)), indent=2))
        else:
            console.print(f"[red]Error:[/red] {exc}")
        return 1

    if as_json:
        typer.echo(json.dumps(result.to_response(), indent=2))
        return 0

    if result.is_empty:
        console.print(
            f"[green]No duplicates found![/green] "
            f"[dim]({result.scanned_transactions} transactions scanned)[/dim]"
        )
        return 0

    total = len(result.duplicate_groups)
    for i, group in enumerate(result.duplicate_groups, 1):
        console.print(group_table(group, title=f"Group {i}/{total}"))
        console.print(group_caption(group))
        console.print()

    console.print("[cyan]Summary:[/cyan]")
    console.print(f"  Transactions scanned: {result.scanned_transactions}")
    console.print(f"  Duplicate groups: {total}")
    console.print(f"  Suspected duplicate transactions: {result.total_duplicates_found}")
    return 0


__all__ = ["run"]
