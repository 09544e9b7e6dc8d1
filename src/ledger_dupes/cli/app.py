from __future__ import annotations

"""
Ledger Dupes CLI (Typer + Rich)

Finds and resolves duplicate transactions in a personal-finance ledger.

All paths are resolved from a single workspace root:
  --data-dir / LEDGER_DUPES_DATA env var / current working directory

The reviewing user is always explicit: --user / LEDGER_DUPES_USER.
"""

import logging
from pathlib import Path
from typing import Optional

import typer

from ledger_dupes.workspace import Workspace

APP_HELP = "Find and resolve duplicate ledger transactions"
HELP_USER = "User whose ledger is scanned (e.g., user-123)"
HELP_MIN_CONFIDENCE = "Only show groups with at least this confidence (0-100)"

app = typer.Typer(no_args_is_help=True, add_completion=False, help=APP_HELP)


@app.callback()
def main(
    ctx: typer.Context,
    data_dir: Optional[Path] = typer.Option(
        None,
        "--data-dir",
        envvar="LEDGER_DUPES_DATA",
        help="Workspace root directory (default: current directory)",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log scan and deletion details"),
):
    """Ledger Dupes CLI — all paths resolved from a single workspace root."""
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    ctx.ensure_object(dict)
    ctx.obj["workspace"] = Workspace.resolve(data_dir)


def _ws(ctx: typer.Context) -> Workspace:
    return ctx.obj["workspace"]


@app.command()
def scan(
    ctx: typer.Context,
    user: str = typer.Option(..., "--user", "-u", envvar="LEDGER_DUPES_USER", help=HELP_USER),
    min_confidence: int = typer.Option(0, "--min-confidence", "-c", min=0, max=100, help=HELP_MIN_CONFIDENCE),
    as_json: bool = typer.Option(False, "--json", help="Print the raw scan response as JSON"),
):
    """Scan the ledger for duplicate transaction groups (read-only).

    Examples:
      ledger-dupes scan --user user-123
      ledger-dupes scan -u user-123 --min-confidence 60
      ledger-dupes scan -u user-123 --json
    """
    from ledger_dupes.cli.command import scan as cmd_scan

    code = cmd_scan.run(
        workspace=_ws(ctx),
        user_id=user,
        min_confidence=min_confidence,
        as_json=as_json,
    )
    raise typer.Exit(code=code)


@app.command()
def review(
    ctx: typer.Context,
    user: str = typer.Option(..., "--user", "-u", envvar="LEDGER_DUPES_USER", help=HELP_USER),
    min_confidence: int = typer.Option(0, "--min-confidence", "-c", min=0, max=100, help=HELP_MIN_CONFIDENCE),
):
    """Review duplicate groups one at a time and delete the copies you pick.

    For each group: enter member numbers to toggle selection, then
      d) delete selected and continue   k) keep all
      p) previous group                 q) quit

    At least one transaction in every group is always kept.
    Deletions are permanent.

    Examples:
      ledger-dupes review --user user-123
    """
    from ledger_dupes.cli.command import review as cmd_review

    code = cmd_review.run(
        workspace=_ws(ctx),
        user_id=user,
        min_confidence=min_confidence,
    )
    raise typer.Exit(code=code)


if __name__ == "__main__":
    app()
