"""
Central configuration for duplicate detection.

Module constants hold the scoring weights and matching thresholds. Tunable
matching settings (tolerance, window, clustering strategy) live in
DetectionSettings and may be overridden per workspace from
config/duplicates.yml.

Path resolution lives in ledger_dupes.workspace.Workspace:
  1. Explicit --data-dir CLI option
  2. LEDGER_DUPES_DATA environment variable
  3. Current working directory
"""
from __future__ import annotations

from decimal import Decimal
from pathlib import Path
from typing import Literal

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from ledger_dupes.errors import ConfigurationError

# Matching thresholds
AMOUNT_TOLERANCE = Decimal("0.01")
MAX_DAYS_APART = 30

# Confidence weights
DESCRIPTION_WEIGHT = 0.2
DATE_SCORE_CEILING = 40
CATEGORY_BONUS = 20
COUNTERPARTY_BONUS = 20
MAX_CONFIDENCE = 100

# Display bands for confidence
HIGH_CONFIDENCE_THRESHOLD = 80
MEDIUM_CONFIDENCE_THRESHOLD = 60

DEFAULT_ACCOUNT_NAME = "Unknown account"

ClusteringName = Literal["seed", "transitive"]


class DetectionSettings(BaseModel):
    """Matching settings for one scan.

    clustering selects how candidates are grouped within an account:
    - "seed": each candidate is compared to the cluster's first member only
    - "transitive": union-find over the same pairwise predicate
    """

    amount_tolerance: Decimal = Field(default=AMOUNT_TOLERANCE, ge=0)
    max_days_apart: int = Field(default=MAX_DAYS_APART, ge=0)
    clustering: ClusteringName = "seed"

    @field_validator("amount_tolerance", mode="before")
    @classmethod
    def parse_tolerance(cls, value):
        """Read floats through str so 0.01 stays exactly 0.01."""
        if isinstance(value, float):
            return Decimal(str(value))
        return value


def load_detection_settings(path: Path) -> DetectionSettings:
    """Load detection settings from YAML (safe loader).

    A missing file yields defaults. Invalid content raises ConfigurationError.
    """
    if not path.exists():
        return DetectionSettings()

    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"Cannot parse {path}: {exc}") from exc

    if not isinstance(data, dict):
        raise ConfigurationError(f"Expected a mapping in {path}")

    try:
        return DetectionSettings.model_validate(data.get("detection", data))
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid detection settings in {path}: {exc}") from exc


__all__ = [
    "AMOUNT_TOLERANCE",
    "MAX_DAYS_APART",
    "DESCRIPTION_WEIGHT",
    "DATE_SCORE_CEILING",
    "CATEGORY_BONUS",
    "COUNTERPARTY_BONUS",
    "MAX_CONFIDENCE",
    "HIGH_CONFIDENCE_THRESHOLD",
    "MEDIUM_CONFIDENCE_THRESHOLD",
    "DEFAULT_ACCOUNT_NAME",
    "DetectionSettings",
    "load_detection_settings",
]
