from __future__ import annotations

# Command implementations for the ledger-dupes CLI.
# Each command module exposes a `run(...)` function that performs the action
# and prints to the console. Typer wrappers in ledger_dupes.cli.app delegate here.

__all__ = [
    "scan",
    "review",
]
