"""Shared test fixtures."""

from __future__ import annotations

import shutil
from pathlib import Path

import pytest

from laracheck.rules.loader import load_rules
from laracheck.rules.models import FileRole, Rule, RuleSet, Severity, Target
from laracheck.scanner.models import ProjectFile


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Keep the developer's own rule files and limits out of the tests."""
    for name in (
        "RULES_PATH",
        "LARACHECK_MAX_FILES",
        "LARACHECK_TIMEOUT",
        "LARACHECK_MAX_FILE_SIZE",
        "LARACHECK_WORKERS",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg-config"))


@pytest.fixture
def fixtures_dir() -> Path:
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def simple_rules_path(fixtures_dir: Path) -> Path:
    return fixtures_dir / "rules" / "simple_rules.yaml"


@pytest.fixture
def extends_default_path(fixtures_dir: Path) -> Path:
    return fixtures_dir / "rules" / "extends_default.yaml"


@pytest.fixture
def project(fixtures_dir: Path, tmp_path: Path) -> Path:
    """A writable copy of the sample Laravel + Vue project."""
    dest = tmp_path / "project"
    shutil.copytree(fixtures_dir / "project", dest)
    return dest


@pytest.fixture
def default_rules() -> RuleSet:
    return load_rules()


@pytest.fixture
def simple_ruleset() -> RuleSet:
    return RuleSet(
        name="test",
        rules=(
            Rule(
                id="no-dd",
                description="No dd() calls.",
                target=Target.BACKEND,
                severity=Severity.BLOCKING,
                pattern=r"\bdd\s*\(",
            ),
            Rule(
                id="no-inline-styles",
                description="No inline styles.",
                target=Target.ANY,
                severity=Severity.ADVISORY,
                pattern=r'style="',
            ),
            Rule(
                id="controller-only",
                description="Flags TODO markers in controllers.",
                target=Target.BACKEND,
                severity=Severity.ADVISORY,
                roles=(FileRole.CONTROLLER,),
                pattern=r"TODO",
            ),
        ),
    )


def make_file(relative_path: str, content: str, role: FileRole) -> ProjectFile:
    return ProjectFile(
        path=f"/project/{relative_path}",
        relative_path=relative_path,
        role=role,
        content=content,
    )


@pytest.fixture
def file_factory():
    return make_file
