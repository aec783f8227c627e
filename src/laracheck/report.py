"""Render violations as plain text or JSON.

Output is a pure function of its input: no timestamps, no durations, and a
fixed ordering (severity, then file path, then rule id, then line), so
rendering an unchanged result twice yields byte-identical text.
"""

from __future__ import annotations

import json
from collections.abc import Iterable, Sequence
from itertools import groupby

from laracheck.evaluator import Violation
from laracheck.rules.models import Severity
from laracheck.scanner.models import ScanWarning

FORMATS = ("text", "json")


def render(
    violations: Iterable[Violation],
    fmt: str = "text",
    warnings: Iterable[ScanWarning] = (),
) -> str:
    """Format violations (and any soft scan warnings) for humans or CI."""
    ordered = sorted(violations, key=lambda v: v.sort_key)
    ordered_warnings = sorted(set(warnings), key=lambda w: (w.path, w.reason))

    if fmt == "text":
        return _render_text(ordered, ordered_warnings)
    if fmt == "json":
        return _render_json(ordered, ordered_warnings)
    raise ValueError(f"Unknown report format: {fmt!r} (expected one of {FORMATS})")


def filter_severity(
    violations: Iterable[Violation],
    minimum: Severity,
) -> list[Violation]:
    """Keep violations at or above *minimum* (blocking ranks above advisory)."""
    return [v for v in violations if v.severity.rank <= minimum.rank]


def summarize(violations: Sequence[Violation]) -> dict[str, int]:
    blocking = sum(1 for v in violations if v.severity is Severity.BLOCKING)
    return {
        "total": len(violations),
        "blocking": blocking,
        "advisory": len(violations) - blocking,
        "files": len({v.path for v in violations}),
    }


def _render_text(
    violations: list[Violation],
    warnings: list[ScanWarning],
) -> str:
    lines: list[str] = []

    for severity, by_severity in groupby(violations, key=lambda v: v.severity):
        lines.append(severity.value.upper())
        for path, by_file in groupby(by_severity, key=lambda v: v.path):
            lines.append(f"  {path}")
            for v in by_file:
                location = f"{v.line:>5}"
                lines.append(f"  {location}  {v.rule_id}  {v.message}")
        lines.append("")

    counts = summarize(violations)
    if counts["total"]:
        lines.append(
            f"{counts['total']} violation(s) in {counts['files']} file(s): "
            f"{counts['blocking']} blocking, {counts['advisory']} advisory"
        )
    else:
        lines.append("No violations found.")

    if warnings:
        lines.append("")
        lines.append(f"{len(warnings)} warning(s):")
        for w in warnings:
            lines.append(f"  {w.path}: {w.reason}")

    return "\n".join(lines) + "\n"


def _render_json(
    violations: list[Violation],
    warnings: list[ScanWarning],
) -> str:
    summary = summarize(violations)
    summary["warnings"] = len(warnings)
    payload = {
        "summary": summary,
        "violations": [
            {
                "rule": v.rule_id,
                "severity": v.severity.value,
                "path": v.path,
                "line": v.line,
                "symbol": v.symbol,
                "message": v.message,
            }
            for v in violations
        ],
        "warnings": [{"path": w.path, "reason": w.reason} for w in warnings],
    }
    return json.dumps(payload, indent=2, sort_keys=True) + "\n"
