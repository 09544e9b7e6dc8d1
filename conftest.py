# Make src/ importable for the specs without installing ledger-dupes first.
from pathlib import Path
import sys

SRC = Path(__file__).resolve().parent / "src"
if SRC.exists():
    sys.path.insert(0, str(SRC))
