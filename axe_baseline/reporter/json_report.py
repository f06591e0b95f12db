"""JSON report output."""

from __future__ import annotations

import json
from pathlib import Path

from .view_model import ReportViewModel


def generate_json_report(view_model: ReportViewModel, output_path: Path) -> None:
    """Write a machine-readable JSON report."""
    report = view_model.model_dump()
    report["total_violations"] = view_model.total_violations

    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, "w") as f:
        json.dump(report, f, indent=2, default=str)
