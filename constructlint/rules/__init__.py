from typing import List, Optional

from constructlint.config import LintConfig
from constructlint.linter import Linter
from constructlint.models.diagnostic import Diagnostic
from constructlint.models.reflect import Assembly
from constructlint.rules import cfn_resource
from constructlint.rules.cfn_resource import CfnResourceIndex
from constructlint.rules.core_types import CoreTypes

_LEVEL_ORDER = {"error": 0, "warning": 1, "success": 2, "skipped": 3}


def build_linters(config: Optional[LintConfig] = None, index: Optional[CfnResourceIndex] = None) -> List[Linter]:
    """Assemble every linter with one shared Cfn resource index."""
    config = config or LintConfig()
    index = index if index is not None else CfnResourceIndex()
    core = CoreTypes(config.cfn_resource_bases, config.resource_bases)
    return [cfn_resource.build_linter(index, core)]


def run(
    assembly: Assembly,
    config: Optional[LintConfig] = None,
    linters: Optional[List[Linter]] = None,
) -> List[Diagnostic]:
    """
    Evaluate all linters against ``assembly``.
    Diagnostics are ordered errors first, then warnings, successes, skips.
    """
    config = config or LintConfig()
    if linters is None:
        linters = build_linters(config)

    diagnostics: List[Diagnostic] = []
    for linter in linters:
        diagnostics.extend(linter.eval(assembly, config.include, config.exclude))

    diagnostics.sort(key=lambda d: (_LEVEL_ORDER.get(d.level.value, 99), d.rule, d.scope))
    return diagnostics
