"""Tests for rule evaluation against project files."""

from __future__ import annotations

import itertools
from pathlib import Path

from laracheck.evaluator import RuleEvaluator, evaluate
from laracheck.rules.models import FileRole, RuleSet, Severity
from laracheck.scanner.engine import ProjectScanner


class TestApplicability:
    def test_backend_rule_skips_frontend_files(self, simple_ruleset: RuleSet, file_factory):
        vue = file_factory(
            "resources/js/Components/Debug.vue", "{{ dd(x) }}", FileRole.COMPONENT
        )
        assert evaluate([vue], simple_ruleset) == []

    def test_role_restriction(self, simple_ruleset: RuleSet, file_factory):
        model = file_factory("app/Models/Post.php", "// ok\n$x = 1; // TODO", FileRole.MODEL)
        controller = file_factory(
            "app/Http/Controllers/PostController.php",
            "$x = 1; // TODO",
            FileRole.CONTROLLER,
        )
        ids = [v.rule_id for v in evaluate([model, controller], simple_ruleset)]
        assert ids == ["controller-only"]

    def test_unknown_files_only_see_role_agnostic_rules(
        self, simple_ruleset: RuleSet, file_factory
    ):
        blade = file_factory(
            "resources/views/welcome.blade.php",
            '<div style="color: red">{{ dd($user) }}</div>',
            FileRole.UNKNOWN,
        )
        violations = evaluate([blade], simple_ruleset)
        assert [v.rule_id for v in violations] == ["no-inline-styles"]

    def test_paths_restrict_rules(self, default_rules: RuleSet, file_factory):
        ts = file_factory(
            "resources/js/app.ts", 'el.setAttribute("style", x); const s = \'style="a"\'',
            FileRole.SCRIPT,
        )
        assert "no-inline-styles" not in [v.rule_id for v in evaluate([ts], default_rules)]

    def test_applicable_rules(self, default_rules: RuleSet, file_factory):
        evaluator = RuleEvaluator(default_rules)
        unknown = file_factory("routes/web.php", "<?php", FileRole.UNKNOWN)
        assert evaluator.applicable_rules(unknown) == []
        page = file_factory("resources/js/Pages/Home.vue", "", FileRole.PAGE)
        ids = {r.id for r in evaluator.applicable_rules(page)}
        assert {"v-html-sanitized", "no-inline-styles", "semantic-colors"} <= ids
        assert "thin-controller" not in ids


class TestViolations:
    def test_violation_references_rule_and_file(self, default_rules: RuleSet, file_factory):
        bio = file_factory(
            "resources/js/Components/Bio.vue",
            '<script setup lang="ts"></script>\n<div v-html="bio"></div>\n',
            FileRole.COMPONENT,
        )
        [violation] = evaluate([bio], default_rules)
        assert violation.rule is default_rules.get("v-html-sanitized")
        assert violation.file is bio
        assert violation.severity == Severity.BLOCKING
        assert violation.line == 2
        assert violation.path == "resources/js/Components/Bio.vue"

    def test_message_falls_back_to_rule(self, default_rules: RuleSet, file_factory):
        model = file_factory("app/Models/Post.php", "<?php\nclass Post {}\n", FileRole.MODEL)
        [violation] = evaluate([model], default_rules)
        assert violation.rule_id == "strict-types"
        assert violation.message == "Missing declare(strict_types=1);"

    def test_thin_controller_scenario(self, project: Path, default_rules: RuleSet):
        scan = ProjectScanner().scan(project)
        violations = evaluate(scan, default_rules)
        post = [v for v in violations if v.path.endswith("PostController.php")]
        assert [v.rule_id for v in post] == ["thin-controller"]

    def test_fixture_project(self, project: Path, default_rules: RuleSet):
        violations = evaluate(ProjectScanner().scan(project), default_rules)
        assert [(v.severity, v.rule_id) for v in violations] == [
            (Severity.BLOCKING, "v-html-sanitized"),
            (Severity.ADVISORY, "thin-controller"),
        ]

    def test_empty_input(self, default_rules: RuleSet):
        assert evaluate([], default_rules) == []


class TestOrderIndependence:
    def test_permutations_give_same_result(self, project: Path, default_rules: RuleSet):
        files = list(ProjectScanner().scan(project))
        expected = evaluate(files, default_rules)
        assert expected
        for perm in itertools.permutations(files[:4]):
            ordered = list(perm) + files[4:]
            assert evaluate(ordered, default_rules) == expected

    def test_reverse_order(self, project: Path, default_rules: RuleSet):
        files = list(ProjectScanner().scan(project))
        assert evaluate(files, default_rules) == evaluate(reversed(files), default_rules)

    def test_thread_pool_matches_serial(self, project: Path, default_rules: RuleSet):
        files = list(ProjectScanner().scan(project))
        evaluator = RuleEvaluator(default_rules)
        assert evaluator.evaluate(files, workers=4) == evaluator.evaluate(files)
