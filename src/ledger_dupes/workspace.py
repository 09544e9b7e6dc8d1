"""
Workspace - centralized data path resolution.

A Workspace represents the root directory holding the ledger database and
configuration. All paths are computed relative to this root.

Resolution priority:
1. Explicit path (--data-dir CLI option)
2. LEDGER_DUPES_DATA environment variable
3. Current working directory
"""
from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

ENV_VAR = "LEDGER_DUPES_DATA"


@dataclass
class Workspace:
    """Root directory for ledger and configuration paths."""

    root: Path

    @classmethod
    def resolve(cls, explicit: Path | None = None) -> Workspace:
        """Resolve workspace root from explicit path, env var, or CWD."""
        if explicit is not None:
            return cls(root=explicit)
        env = os.environ.get(ENV_VAR)
        if env:
            return cls(root=Path(env))
        return cls(root=Path.cwd())

    @property
    def ledger_path(self) -> Path:
        return self.root / "data" / "ledger.db"

    @property
    def duplicates_config(self) -> Path:
        return self.root / "config" / "duplicates.yml"


__all__ = ["Workspace"]
