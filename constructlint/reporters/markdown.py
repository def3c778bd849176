"""
Markdown lint report generator.
"""
from datetime import datetime, timezone
from typing import Dict, List

from jinja2 import Environment

from constructlint import __version__
from constructlint.models.diagnostic import Diagnostic, DiagnosticLevel

_LEVEL_ICON = {
    "error": "🔴",
    "warning": "🟡",
    "success": "🟢",
    "skipped": "⚪",
}


def _count_by_level(diagnostics: List[Diagnostic]) -> Dict[str, int]:
    counts: Dict[str, int] = {lvl.value: 0 for lvl in DiagnosticLevel}
    for d in diagnostics:
        counts[d.level.value] += 1
    return counts


_TEMPLATE = """\
# Construct Lint Report

**Generated:** {{ generated }}
**Source:** {{ source }}
**Tool:** constructlint v{{ version }}

---

## Summary
{% for lvl in ["error", "warning", "success", "skipped"] %}
- **{{ lvl }}**: {{ counts[lvl] }}{% endfor %}

{% if findings %}
## Findings

| Level | Rule | Scope | Message |
|-------|------|-------|---------|
{% for d in findings %}| {{ icon[d.level.value] }} {{ d.level.value }} | `{{ d.rule }}` | `{{ d.scope }}` | {{ d.message }} |
{% endfor %}
{% else %}
No warnings or errors were reported.
{% endif %}
"""


def build_report(diagnostics: List[Diagnostic], source_path: str) -> str:
    findings = [
        d for d in diagnostics
        if d.level in (DiagnosticLevel.ERROR, DiagnosticLevel.WARNING)
    ]

    env = Environment(autoescape=False)
    template = env.from_string(_TEMPLATE)

    return template.render(
        generated=datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M UTC"),
        source=source_path,
        version=__version__,
        counts=_count_by_level(diagnostics),
        findings=findings,
        icon=_LEVEL_ICON,
    )
