"""One stateless check run: rules, scan, evaluate."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from pathlib import Path

from laracheck.config import LaraCheckConfig
from laracheck.evaluator import RuleEvaluator, Violation
from laracheck.rules.loader import load_rules
from laracheck.rules.models import RuleSet, Severity
from laracheck.scanner.engine import ProjectScanner
from laracheck.scanner.models import ScanWarning

logger = logging.getLogger(__name__)


@dataclass
class CheckResult:
    """Aggregate result of a single check run."""

    root: str
    ruleset_name: str
    violations: list[Violation] = field(default_factory=list)
    warnings: list[ScanWarning] = field(default_factory=list)
    files_scanned: int = 0
    rules_evaluated: int = 0
    duration: float = 0.0

    @property
    def has_blocking(self) -> bool:
        return any(v.severity is Severity.BLOCKING for v in self.violations)


def run_check(
    root: str | Path,
    ruleset: RuleSet | None = None,
    config: LaraCheckConfig | None = None,
    exclude: list[str] | tuple[str, ...] = (),
) -> CheckResult:
    """Check one project root.

    Raises RuleConfigError for malformed rules (before anything is read),
    ProjectRootError for a missing or unreadable root and ScanLimitError
    when the file-count or time ceiling is hit.
    """
    config = config or LaraCheckConfig()
    start = time.monotonic()
    deadline = start + config.timeout

    if ruleset is None:
        ruleset = load_rules(config.rules_path)
    evaluator = RuleEvaluator(ruleset)

    scanner = ProjectScanner(
        exclude_patterns=list(exclude),
        max_file_size=config.max_file_size,
        max_files=config.max_files,
        deadline=deadline,
    )
    scan = scanner.scan(root)
    logger.debug("Checking %s with %d rule(s)", scan.root, len(ruleset))

    violations = evaluator.evaluate(scan, workers=config.workers, deadline=deadline)

    return CheckResult(
        root=str(scan.root),
        ruleset_name=ruleset.name,
        violations=violations,
        warnings=list(scan.warnings),
        files_scanned=scan.files_scanned,
        rules_evaluated=len(ruleset),
        duration=time.monotonic() - start,
    )


def exit_code(result: CheckResult) -> int:
    """0 when nothing blocks, 1 when at least one blocking violation exists."""
    return 1 if result.has_blocking else 0
