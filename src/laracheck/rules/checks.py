"""Built-in detection predicates, looked up by the ``check`` name of a rule."""

from __future__ import annotations

import functools
import re
from collections.abc import Callable, Iterator
from dataclasses import dataclass

from laracheck.rules.models import Rule
from laracheck.scanner.models import ProjectFile


@dataclass(frozen=True)
class Hit:
    """A location where a predicate fired. Turned into a Violation by the evaluator."""

    line: int
    symbol: str = ""
    message: str = ""


Check = Callable[[Rule, ProjectFile], Iterator[Hit]]

_COMMENT_PREFIXES = ("//", "#", "*", "/*", "<!--")


@functools.lru_cache(maxsize=256)
def compile_pattern(pattern: str, ignore_case: bool = False) -> re.Pattern[str]:
    return re.compile(pattern, re.IGNORECASE if ignore_case else 0)


def _is_comment(line: str) -> bool:
    return line.lstrip().startswith(_COMMENT_PREFIXES)


def check_pattern(rule: Rule, file: ProjectFile) -> Iterator[Hit]:
    """One hit per non-comment line matching ``rule.pattern``."""
    regex = compile_pattern(rule.pattern, rule.ignore_case)
    allow = compile_pattern(rule.allow) if rule.allow else None

    for line_num, line in enumerate(file.lines(), start=1):
        if _is_comment(line):
            continue
        match = regex.search(line)
        if not match:
            continue
        if allow and allow.search(line):
            continue
        yield Hit(line=line_num, symbol=match.group(0).strip()[:60])


# Controller code that belongs in a service: raw queries, transactions,
# Eloquent writes and outbound side effects.
_BUSINESS_LOGIC = [
    re.compile(r"\bDB::"),
    re.compile(
        r"\b[A-Z]\w*::(?:create|insert|upsert|updateOrCreate|firstOrCreate|where\w*|query)\s*\("
    ),
    re.compile(r"->(?:save|increment|decrement|sync|attach|detach|forceFill)\s*\("),
    re.compile(r"\b(?:Mail|Http|Storage)::"),
]

_SERVICE_DELEGATION = [
    re.compile(r"^\s*use\s+App\\Services\\", re.MULTILINE),
    re.compile(r"\b\w+Service\s+\$\w+"),
]


def check_thin_controller(rule: Rule, file: ProjectFile) -> Iterator[Hit]:
    """At most one hit: the first line of inline business logic in a controller
    that never delegates to a service class."""
    if any(p.search(file.content) for p in _SERVICE_DELEGATION):
        return

    for line_num, line in enumerate(file.lines(), start=1):
        if _is_comment(line):
            continue
        for pattern in _BUSINESS_LOGIC:
            match = pattern.search(line)
            if match:
                yield Hit(
                    line=line_num,
                    symbol=match.group(0).rstrip("( "),
                    message=(
                        f"Controller performs inline business logic "
                        f"({match.group(0).rstrip('( ')}); move it into a service class"
                    ),
                )
                return


_STRICT_TYPES = re.compile(r"declare\s*\(\s*strict_types\s*=\s*1\s*\)\s*;")


def check_strict_types(rule: Rule, file: ProjectFile) -> Iterator[Hit]:
    if not _STRICT_TYPES.search(file.content):
        yield Hit(line=1, symbol="declare(strict_types=1)")


REST_ACTIONS = frozenset(
    {
        "index",
        "show",
        "create",
        "store",
        "edit",
        "update",
        "destroy",
        "__construct",
        "__invoke",
    }
)

_PUBLIC_METHOD = re.compile(r"^\s*public\s+(?:static\s+)?function\s+(\w+)\s*\(")


def check_rest_actions(rule: Rule, file: ProjectFile) -> Iterator[Hit]:
    """One hit per public controller method outside the resource actions."""
    for line_num, line in enumerate(file.lines(), start=1):
        match = _PUBLIC_METHOD.match(line)
        if match and match.group(1) not in REST_ACTIONS:
            name = match.group(1)
            yield Hit(
                line=line_num,
                symbol=name,
                message=(
                    f"Public method '{name}' is not a resource action; "
                    "use index/show/create/store/edit/update/destroy"
                ),
            )


_V_HTML = re.compile(r"""v-html\s*=\s*(?:"([^"]*)"|'([^']*)')""")
_SANITIZER = re.compile(r"\b(?:sanitize\w*|DOMPurify|purify\w*)\b", re.IGNORECASE)


def check_unsanitized_v_html(rule: Rule, file: ProjectFile) -> Iterator[Hit]:
    """One hit per ``v-html`` binding that does not go through a sanitizer."""
    content = file.content
    # Bound expressions may span several lines
    for match in _V_HTML.finditer(content):
        raw = match.group(1) if match.group(1) is not None else match.group(2)
        expr = " ".join(raw.split())
        if _SANITIZER.search(expr):
            continue
        yield Hit(
            line=content.count("\n", 0, match.start()) + 1,
            symbol="v-html",
            message=f"v-html binds unsanitized expression '{expr}'",
        )


_SCRIPT_TAG = re.compile(r"<script\b([^>]*)>")
_LANG_TS = re.compile(r"""\blang\s*=\s*["']ts["']""")


def check_script_setup_ts(rule: Rule, file: ProjectFile) -> Iterator[Hit]:
    """A single-file component with script blocks needs ``<script setup lang="ts">``."""
    tags = list(_SCRIPT_TAG.finditer(file.content))
    if not tags:
        return
    for tag in tags:
        attrs = tag.group(1)
        if re.search(r"\bsetup\b", attrs) and _LANG_TS.search(attrs):
            return
    line = file.content.count("\n", 0, tags[0].start()) + 1
    yield Hit(line=line, symbol='<script setup lang="ts">')


CHECKS: dict[str, Check] = {
    "pattern": check_pattern,
    "thin_controller": check_thin_controller,
    "strict_types": check_strict_types,
    "rest_actions": check_rest_actions,
    "unsanitized_v_html": check_unsanitized_v_html,
    "script_setup_ts": check_script_setup_ts,
}


def get_check(name: str) -> Check:
    """Return the predicate registered under *name*. Raises KeyError if unknown."""
    return CHECKS[name]
