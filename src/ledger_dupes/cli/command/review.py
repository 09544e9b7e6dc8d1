from __future__ import annotations

"""
CLI command to review duplicate groups interactively and delete duplicates.

Drives a ReviewSession: scan once, then walk the groups one at a time. For each
group the user toggles members by number and then deletes the selection, keeps
every member, or steps back. Deletions are permanent and happen as each group
is resolved, so quitting midway keeps earlier deletions.

Errors (scan or deletion) are reported and the user may retry; the current
group stays active after a failed deletion.
"""

from rich.prompt import Confirm, Prompt

from ledger_dupes.cli.command.util import (
    build_scan_service,
    console,
    group_caption,
    group_table,
    open_store,
)
from ledger_dupes.errors import (
    ConfigurationError,
    DeletionFailure,
    InvalidTransition,
    InvariantViolation,
    ScanFailure,
)
from ledger_dupes.services.deletion_service import DeletionExecutor
from ledger_dupes.services.duplicate_review_service import (
    Complete,
    Reviewing,
    ReviewSession,
    ReviewSummary,
)
from ledger_dupes.workspace import Workspace

ACTIONS_HELP = "[dim]numbers toggle selection · d delete selected · k keep all · p previous · q quit[/dim]"


def _start(session: ReviewSession) -> bool:
    """Run the scan, offering retries on failure. Returns False if the user gives up."""
    while True:
        console.print("[yellow]Scanning for duplicates...[/yellow]")
        try:
            session.start_scan()
            return True
        except ScanFailure as exc:
            console.print(f"[red]Scan failed:[/red] {exc}")
            if not Confirm.ask("Retry?", default=True):
                return False


def _show_group(state: Reviewing) -> None:
    group = state.current_group
    console.print()
    console.print(
        group_table(
            group,
            title=f"Group {state.index + 1} of {len(state.groups)}",
            selected=state.selection,
            deleted=state.deleted_ids,
        )
    )
    console.print(group_caption(group))
    console.print(ACTIONS_HELP)


def _toggle_numbers(session: ReviewSession, state: Reviewing, answer: str) -> None:
    members = state.current_group.transactions
    for token in answer.replace(",", " ").split():
        n = int(token)
        if not 1 <= n <= len(members):
            console.print(f"[red]No member #{n}[/red]")
            continue
        member = members[n - 1]
        if member.id in state.deleted_ids:
            console.print(f"[dim]#{n} was already deleted[/dim]")
            continue
        session.toggle(member.id)


def _handle(session: ReviewSession, state: Reviewing, answer: str) -> bool:
    """Apply one user answer. Returns False when the user quits."""
    choice = answer.strip().lower()
    if choice == "q":
        return False
    try:
        if choice == "k":
            session.keep_all()
        elif choice == "p":
            session.previous()
        elif choice == "d":
            count = len(state.selection)
            session.delete_selected_and_advance()
            console.print(f"[green]✓ Deleted {count} transaction(s)[/green]")
        elif choice.replace(",", " ").replace(" ", "").isdecimal():
            _toggle_numbers(session, state, choice)
        else:
            console.print(f"[red]Unknown action:[/red] {answer}")
    except (InvariantViolation, InvalidTransition) as exc:
        console.print(f"[yellow]{exc}[/yellow]")
    except DeletionFailure as exc:
        console.print(f"[red]Deletion failed:[/red] {exc}")
        console.print("[dim]Nothing was deleted. Try again or keep all.[/dim]")
    return True


def _display_summary(summary: ReviewSummary) -> None:
    console.print()
    console.print("[cyan]Summary:[/cyan]")
    console.print(f"  Transactions scanned: {summary.scanned_transactions}")
    console.print(f"  Groups reviewed: {summary.groups_resolved}/{summary.total_groups}")
    console.print(f"  Duplicates deleted: {summary.transactions_deleted}")


def run(workspace: Workspace, user_id: str, min_confidence: int = 0) -> int:
    """Interactive duplicate review. Returns an exit code."""
    store = open_store(workspace)
    if store is None:
        return 1

    try:
        scan_service = build_scan_service(workspace, store)
    except ConfigurationError as exc:
        console.print(f"[red]Error:[/red] {exc}")
        return 1

    session = ReviewSession(
        scan_service=scan_service,
        executor=DeletionExecutor(store),
        user_id=user_id,
        min_confidence=min_confidence,
    )
    if not _start(session):
        return 1

    try:
        while isinstance(session.state, Reviewing):
            state = session.state
            _show_group(state)
            answer = Prompt.ask("Action")
            if not _handle(session, state, answer):
                break
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted by user[/yellow]")

    state = session.state
    if isinstance(state, Complete):
        summary = session.acknowledge()
        if summary.total_groups == 0:
            console.print(
                f"[green]No duplicates found![/green] "
                f"[dim]({summary.scanned_transactions} transactions scanned)[/dim]"
            )
        else:
            console.print("[green]✓ Review complete[/green]")
            _display_summary(summary)
        return 0

    if isinstance(state, Reviewing):
        console.print("[yellow]Review stopped early[/yellow]")
        _display_summary(
            ReviewSummary(
                total_groups=len(state.groups),
                groups_resolved=state.groups_resolved,
                transactions_deleted=state.transactions_deleted,
                scanned_transactions=state.scanned_transactions,
            )
        )
    session.discard()
    return 0


__all__ = ["run"]
