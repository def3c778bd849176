"""
Rule engine: a Linter enumerates contexts from an assembly and runs each
registered rule against every context, collecting Diagnostics.
"""
from dataclasses import dataclass
from fnmatch import fnmatchcase
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence

from constructlint.models.diagnostic import Diagnostic, DiagnosticLevel
from constructlint.models.reflect import Assembly


@dataclass
class Rule:
    code: str
    message: str
    eval: Callable[["Evaluation"], None]
    warning: bool = False


def _pattern_matches(pattern: str, code: str, scope: str) -> bool:
    """
    Patterns are "code" or "code:scope", both parts accepting shell wildcards:
      resource-class                  → every scope of the rule
      resource-class:AWS::S3::*       → S3 resources only
    """
    rule_pat, sep, scope_pat = pattern.partition(":")
    if not fnmatchcase(code, rule_pat):
        return False
    return not sep or fnmatchcase(scope, scope_pat)


def should_evaluate(
    code: str,
    scope: str,
    include: Sequence[str] = (),
    exclude: Sequence[str] = (),
) -> bool:
    if include and not any(_pattern_matches(p, code, scope) for p in include):
        return False
    return not any(_pattern_matches(p, code, scope) for p in exclude)


class Evaluation:
    """Handed to a rule's eval callback; ``ctx`` is the object under test."""

    def __init__(
        self,
        ctx: Any,
        rule: Rule,
        diagnostics: List[Diagnostic],
        include: Sequence[str] = (),
        exclude: Sequence[str] = (),
    ) -> None:
        self.ctx = ctx
        self.rule = rule
        self._diagnostics = diagnostics
        self._include = include
        self._exclude = exclude

    def assert_(self, condition: Any, scope: str, *message_args: Any) -> bool:
        """Record the outcome of a check. Returns the truthiness of ``condition``."""
        rule = self.rule
        message = rule.message % message_args if message_args else rule.message

        if not should_evaluate(rule.code, scope, self._include, self._exclude):
            self._diagnostics.append(
                Diagnostic(DiagnosticLevel.SKIPPED, rule.code, scope, message)
            )
            return True

        if condition:
            level = DiagnosticLevel.SUCCESS
        else:
            level = DiagnosticLevel.WARNING if rule.warning else DiagnosticLevel.ERROR
        self._diagnostics.append(Diagnostic(level, rule.code, scope, message))
        return bool(condition)


class Linter:
    def __init__(self, name: str, init: Callable[[Assembly], Iterable[Any]]) -> None:
        self.name = name
        self._init = init
        self._rules: Dict[str, Rule] = {}

    @property
    def rules(self) -> List[Rule]:
        return list(self._rules.values())

    def add(
        self,
        code: str,
        message: str,
        eval: Callable[[Evaluation], None],
        warning: bool = False,
    ) -> Rule:
        if code in self._rules:
            raise ValueError(f"rule '{code}' is already registered")
        rule = Rule(code=code, message=message, eval=eval, warning=warning)
        self._rules[code] = rule
        return rule

    def eval(
        self,
        assembly: Assembly,
        include: Optional[Sequence[str]] = None,
        exclude: Optional[Sequence[str]] = None,
    ) -> List[Diagnostic]:
        diagnostics: List[Diagnostic] = []
        for ctx in self._init(assembly):
            for rule in self._rules.values():
                rule.eval(Evaluation(ctx, rule, diagnostics, include or (), exclude or ()))
        return diagnostics
