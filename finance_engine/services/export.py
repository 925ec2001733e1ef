"""
Snapshot Export

Serializes every stored record into one JSON document:

    {"financialGoals": [...], "transactions": [...], "budgets": [...]}

Records are written verbatim (camelCase field names, amounts as strings).
No engine computation is applied; this is a pass-through.
"""

import json
from pathlib import Path
from typing import Union

from finance_engine.models.records import Snapshot


EXPORT_KEYS = ("financialGoals", "transactions", "budgets")


def export_snapshot(snapshot: Snapshot) -> dict:
    """Convert a snapshot to a JSON-safe export document."""
    return snapshot.model_dump(mode="json", by_alias=True)


def import_snapshot(document: dict) -> Snapshot:
    """Rebuild a snapshot from an export document (missing keys are empty)."""
    return Snapshot.model_validate(
        {key: document.get(key) or [] for key in EXPORT_KEYS}
    )


def snapshot_counts(snapshot: Snapshot) -> dict[str, int]:
    return {
        "financialGoals": len(snapshot.financial_goals),
        "transactions": len(snapshot.transactions),
        "budgets": len(snapshot.budgets),
    }


def write_export(snapshot: Snapshot, path: Union[str, Path]) -> Path:
    """Write the export document to `path` and return the path."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(
        json.dumps(export_snapshot(snapshot), indent=2),
        encoding="utf-8",
    )
    return path
