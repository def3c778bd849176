"""
SARIF (Static Analysis Results Interchange Format) reporter.
Only warnings and errors become results; successes and skips are dropped.
"""
import json
from typing import List

from constructlint import __version__
from constructlint.models.diagnostic import Diagnostic, DiagnosticLevel

_LEVEL_MAP = {
    DiagnosticLevel.ERROR: "error",
    DiagnosticLevel.WARNING: "warning",
}


def build_report(diagnostics: List[Diagnostic], source_path: str) -> str:
    sarif = {
        "$schema": "https://raw.githubusercontent.com/oasis-tcs/sarif-spec/master/Schemata/sarif-schema-2.1.0.json",
        "version": "2.1.0",
        "runs": [
            {
                "tool": {
                    "driver": {
                        "name": "constructlint",
                        "semanticVersion": __version__,
                        "rules": []
                    }
                },
                "results": []
            }
        ]
    }

    rules = {}
    results = []

    for d in diagnostics:
        level = _LEVEL_MAP.get(d.level)
        if level is None:
            continue
        if d.rule not in rules:
            rules[d.rule] = {
                "id": d.rule,
                "shortDescription": {"text": d.rule},
            }

        results.append({
            "ruleId": d.rule,
            "message": {"text": f"{d.scope}: {d.message}"},
            "level": level,
            "locations": [
                {
                    "physicalLocation": {
                        "artifactLocation": {"uri": source_path},
                    },
                    "logicalLocations": [{"fullyQualifiedName": d.scope}],
                }
            ]
        })

    sarif["runs"][0]["tool"]["driver"]["rules"] = list(rules.values())
    sarif["runs"][0]["results"] = results

    return json.dumps(sarif, indent=2)
