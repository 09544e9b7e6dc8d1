from __future__ import annotations

from decimal import Decimal

from rich.console import Console
from rich.table import Table
from rich.text import Text

from ledger_dupes.config import load_detection_settings
from ledger_dupes.detection.confidence import ConfidenceLevel
from ledger_dupes.detection.duplicate_detector import DuplicateDetector
from ledger_dupes.model.duplicate import DuplicateCandidateGroup
from ledger_dupes.services.scan_service import DuplicateScanService
from ledger_dupes.storage.ledger_store import SqliteLedgerStore
from ledger_dupes.workspace import Workspace

console = Console()

CONFIDENCE_STYLES = {
    ConfidenceLevel.HIGH: "bold green",
    ConfidenceLevel.MEDIUM: "bold yellow",
    ConfidenceLevel.LOW: "bold dark_orange",
}


def open_store(workspace: Workspace) -> SqliteLedgerStore | None:
    """Open the workspace ledger, or print an error and return None."""
    if not workspace.ledger_path.exists():
        console.print(f"[red]Error:[/red] Ledger database not found: {workspace.ledger_path}")
        return None
    return SqliteLedgerStore(workspace.ledger_path)


def build_scan_service(workspace: Workspace, store: SqliteLedgerStore) -> DuplicateScanService:
    settings = load_detection_settings(workspace.duplicates_config)
    return DuplicateScanService(store=store, detector=DuplicateDetector(settings=settings))


def fmt_amount(amt: Decimal) -> Text:
    s = f"{amt:,.2f}"
    if amt < 0:
        return Text(s, style="bold red")
    elif amt > 0:
        return Text(s, style="bold green")
    return Text(s)


def fmt_confidence(confidence: int) -> Text:
    level = ConfidenceLevel.for_score(confidence)
    return Text(f"{confidence}%", style=CONFIDENCE_STYLES[level])


def group_table(
    group: DuplicateCandidateGroup,
    title: str,
    selected: frozenset[str] = frozenset(),
    deleted: frozenset[str] = frozenset(),
) -> Table:
    """Render one duplicate group; members are numbered from 1."""
    table = Table(title=title, show_header=True, show_lines=False)
    table.add_column("#", justify="right", style="cyan")
    table.add_column("Del", justify="center")
    table.add_column("Date")
    table.add_column("ID", style="dim")
    table.add_column("Description")
    table.add_column("Amount", justify="right")
    table.add_column("Category", style="dim")
    table.add_column("Counterparty", style="dim")

    for n, member in enumerate(group.transactions, 1):
        if member.id in deleted:
            mark = "[dim]gone[/dim]"
        elif member.id in selected:
            mark = "[red]x[/red]"
        else:
            mark = ""
        table.add_row(
            str(n),
            mark,
            member.event_date.isoformat(),
            member.id[:8],
            member.description,
            fmt_amount(member.amount),
            member.category_name or "",
            member.counterparty_name or "",
        )
    return table


def group_caption(group: DuplicateCandidateGroup) -> Text:
    caption = Text()
    caption.append(f"{group.account_name}  ")
    caption.append("Confidence: ")
    caption.append_text(fmt_confidence(group.confidence))
    caption.append(f"  {group.days_apart} day(s) apart")
    return caption
