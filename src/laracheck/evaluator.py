"""Rule evaluator — matches project files against the applicable rules."""

from __future__ import annotations

import fnmatch
import logging
import time
from collections.abc import Iterable
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass

from laracheck.errors import ScanLimitError
from laracheck.rules.checks import Check, get_check
from laracheck.rules.models import Rule, RuleSet, Severity
from laracheck.scanner.models import ProjectFile

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Violation:
    """A mismatch between one project file and one rule."""

    rule: Rule
    file: ProjectFile
    line: int
    symbol: str
    message: str

    @property
    def rule_id(self) -> str:
        return self.rule.id

    @property
    def severity(self) -> Severity:
        return self.rule.severity

    @property
    def path(self) -> str:
        return self.file.relative_path

    @property
    def sort_key(self) -> tuple[int, str, str, int, str, str]:
        return (
            self.severity.rank,
            self.path,
            self.rule_id,
            self.line,
            self.symbol,
            self.message,
        )


@dataclass(frozen=True)
class _CompiledRule:
    """A rule paired with its resolved predicate."""

    rule: Rule
    check: Check


class RuleEvaluator:
    """Evaluates files against a rule set. Pure: no state survives a call."""

    def __init__(self, ruleset: RuleSet | Iterable[Rule]) -> None:
        self._compiled = [
            _CompiledRule(rule=rule, check=get_check(rule.check)) for rule in ruleset
        ]

    def applicable_rules(self, file: ProjectFile) -> list[Rule]:
        return [cr.rule for cr in self._compiled if _applies(cr.rule, file)]

    def evaluate_file(self, file: ProjectFile) -> list[Violation]:
        """Run every applicable rule against a single file."""
        violations: list[Violation] = []
        for cr in self._compiled:
            if not _applies(cr.rule, file):
                continue
            for hit in cr.check(cr.rule, file):
                violations.append(
                    Violation(
                        rule=cr.rule,
                        file=file,
                        line=hit.line,
                        symbol=hit.symbol,
                        message=hit.message or cr.rule.message or cr.rule.description,
                    )
                )
        return violations

    def evaluate(
        self,
        files: Iterable[ProjectFile],
        workers: int = 1,
        deadline: float | None = None,
    ) -> list[Violation]:
        """Evaluate all files and return violations in canonical order.

        The result does not depend on the order of *files*. With
        ``workers > 1`` files are matched on a thread pool; rules and files
        are immutable so no locking is needed.
        """
        results: list[Violation] = []

        if workers > 1:
            with ThreadPoolExecutor(max_workers=workers) as pool:
                for violations in pool.map(self.evaluate_file, files):
                    _check_deadline(deadline)
                    results.extend(violations)
        else:
            for file in files:
                _check_deadline(deadline)
                results.extend(self.evaluate_file(file))

        logger.debug("%d violation(s)", len(results))
        return sorted(results, key=lambda v: v.sort_key)


def evaluate(
    files: Iterable[ProjectFile],
    rules: RuleSet | Iterable[Rule],
) -> list[Violation]:
    """Evaluate *files* against *rules*; see RuleEvaluator.evaluate."""
    return RuleEvaluator(rules).evaluate(files)


def _applies(rule: Rule, file: ProjectFile) -> bool:
    if not rule.is_role_agnostic:
        if file.role.target is not rule.target:
            return False
        if rule.roles and file.role not in rule.roles:
            return False
    if rule.paths:
        return any(fnmatch.fnmatch(file.relative_path, p) for p in rule.paths)
    return True


def _check_deadline(deadline: float | None) -> None:
    if deadline is not None and time.monotonic() > deadline:
        raise ScanLimitError("Evaluation aborted: time limit exceeded")
