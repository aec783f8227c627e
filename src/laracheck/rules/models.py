"""Rule data models — immutable dataclasses shared by the loader and evaluator."""

from __future__ import annotations

import enum
from collections.abc import Iterator
from dataclasses import dataclass


class Severity(enum.Enum):
    """How a violation of a rule affects the exit status."""

    BLOCKING = "blocking"
    ADVISORY = "advisory"

    @property
    def rank(self) -> int:
        """Sort rank, blocking first."""
        return 0 if self is Severity.BLOCKING else 1


class Target(enum.Enum):
    """Which class of project file a rule is written for."""

    BACKEND = "backend"
    FRONTEND = "frontend"
    ANY = "any"


class FileRole(enum.Enum):
    """Role of a project file, detected from its path."""

    CONTROLLER = "controller"
    REQUEST = "request"
    RESOURCE = "resource"
    MODEL = "model"
    SERVICE = "service"
    PAGE = "page"
    COMPONENT = "component"
    SCRIPT = "script"
    UNKNOWN = "unknown"

    @property
    def target(self) -> Target | None:
        if self in _BACKEND_ROLES:
            return Target.BACKEND
        if self in _FRONTEND_ROLES:
            return Target.FRONTEND
        return None


_BACKEND_ROLES = frozenset(
    {
        FileRole.CONTROLLER,
        FileRole.REQUEST,
        FileRole.RESOURCE,
        FileRole.MODEL,
        FileRole.SERVICE,
    }
)
_FRONTEND_ROLES = frozenset({FileRole.PAGE, FileRole.COMPONENT, FileRole.SCRIPT})


@dataclass(frozen=True)
class Rule:
    """A single named convention check."""

    id: str
    description: str
    target: Target
    severity: Severity
    check: str = "pattern"
    roles: tuple[FileRole, ...] = ()
    pattern: str = ""
    ignore_case: bool = False
    allow: str = ""
    paths: tuple[str, ...] = ()
    message: str = ""

    @property
    def is_role_agnostic(self) -> bool:
        return self.target is Target.ANY


@dataclass(frozen=True)
class RuleSet:
    """A complete, resolved set of rules, sorted by id."""

    name: str
    rules: tuple[Rule, ...] = ()
    description: str = ""
    inherit: tuple[str, ...] = ()

    def __iter__(self) -> Iterator[Rule]:
        return iter(self.rules)

    def __len__(self) -> int:
        return len(self.rules)

    @property
    def ids(self) -> tuple[str, ...]:
        return tuple(r.id for r in self.rules)

    def get(self, rule_id: str) -> Rule | None:
        for rule in self.rules:
            if rule.id == rule_id:
                return rule
        return None
