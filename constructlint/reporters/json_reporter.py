"""
JSON lint report generator.
"""
import json
from datetime import datetime, timezone
from typing import List

from constructlint import __version__
from constructlint.models.diagnostic import Diagnostic, DiagnosticLevel


def _count_by_level(diagnostics: List[Diagnostic]) -> dict:
    counts = {lvl.value: 0 for lvl in DiagnosticLevel}
    for d in diagnostics:
        counts[d.level.value] += 1
    return counts


def build_report(diagnostics: List[Diagnostic], source_path: str) -> str:
    report = {
        "meta": {
            "generated": datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ"),
            "source": source_path,
            "tool": "constructlint",
            "version": __version__,
        },
        "summary": _count_by_level(diagnostics),
        "diagnostics": [d.to_dict() for d in diagnostics],
    }
    return json.dumps(report, indent=2)
