"""Load, validate and resolve RuleSet objects from YAML files."""

from __future__ import annotations

import importlib.resources
import logging
import re
from pathlib import Path

import yaml

from laracheck.errors import RuleConfigError
from laracheck.rules.checks import CHECKS
from laracheck.rules.models import FileRole, Rule, RuleSet, Severity, Target

logger = logging.getLogger(__name__)

_PRESET_PREFIX = "preset:"
DEFAULT_PRESET = "default"

_REQUIRED_KEYS = ("id", "description", "target", "severity")


def load_rules(path: str | Path | None = None) -> RuleSet:
    """Load a rule set from a YAML file, or the packaged default preset."""
    if path is None:
        return _load_preset(DEFAULT_PRESET, set())
    return _load_file(Path(path), set())


def load_rules_from_string(text: str) -> RuleSet:
    """Parse a YAML string into a RuleSet, resolving inheritance."""
    return _build_ruleset(_parse_yaml(text, "<string>"), "<string>", set())


def _load_file(path: Path, _resolved: set[str]) -> RuleSet:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise RuleConfigError(f"Cannot read rules file {path}: {e}") from e
    logger.debug("Loading rules from %s", path)
    return _build_ruleset(_parse_yaml(text, str(path)), str(path.resolve()), _resolved)


def _parse_yaml(text: str, source: str) -> dict:
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise RuleConfigError(f"Invalid YAML in {source}: {e}") from e
    if not isinstance(data, dict):
        raise RuleConfigError(f"Rules YAML must be a mapping ({source})")
    return data


def _build_ruleset(data: dict, source: str, _resolved: set[str]) -> RuleSet:
    # Ancestors are tracked by origin (file path or preset), not display name
    name = str(data.get("name", "unnamed"))

    if source in _resolved:
        raise RuleConfigError(f"Circular rule inheritance detected: {source}")
    _resolved.add(source)
    try:
        return _resolve(data, name, _resolved)
    finally:
        # Only ancestors count as a cycle; siblings may share a parent.
        _resolved.discard(source)


def _resolve(data: dict, name: str, _resolved: set[str]) -> RuleSet:
    own_rules = _parse_rules(data.get("rules") or [], name)

    inherit_list = data.get("inherit") or []
    if isinstance(inherit_list, str):
        inherit_list = [inherit_list]

    merged: dict[str, Rule] = {}
    for ref in inherit_list:
        parent = _load_ref(str(ref), _resolved)
        merged.update({r.id: r for r in parent.rules})

    # Own rules override inherited ones with the same id
    merged.update({r.id: r for r in own_rules})

    disable = data.get("disable") or []
    if isinstance(disable, str):
        disable = [disable]
    for rule_id in disable:
        if rule_id not in merged:
            raise RuleConfigError(f"Cannot disable unknown rule '{rule_id}' in {name}")
        del merged[rule_id]

    return RuleSet(
        name=name,
        rules=tuple(sorted(merged.values(), key=lambda r: r.id)),
        description=str(data.get("description", "")),
        inherit=tuple(str(ref) for ref in inherit_list),
    )


def _parse_rules(rules_data: object, source: str) -> list[Rule]:
    if not isinstance(rules_data, list):
        raise RuleConfigError(f"'rules' must be a list in {source}")

    rules: list[Rule] = []
    seen: set[str] = set()
    for index, r in enumerate(rules_data):
        if not isinstance(r, dict):
            raise RuleConfigError(f"Rule #{index} in {source} must be a mapping")
        rule = _parse_rule(r, f"{source} rule #{index}")
        if rule.id in seen:
            raise RuleConfigError(f"Duplicate rule id '{rule.id}' in {source}")
        seen.add(rule.id)
        rules.append(rule)
    return rules


def _parse_rule(r: dict, where: str) -> Rule:
    for key in _REQUIRED_KEYS:
        if key not in r:
            raise RuleConfigError(f"{where} is missing required key '{key}'")

    rule_id = str(r["id"]).strip()
    if not rule_id:
        raise RuleConfigError(f"{where} has an empty id")
    where = f"rule '{rule_id}'"

    target = _enum(Target, r["target"], "target", where)
    severity = _enum(Severity, r["severity"], "severity", where)

    roles_raw = r.get("roles") or ()
    if isinstance(roles_raw, str):
        roles_raw = (roles_raw,)
    roles = tuple(_enum(FileRole, role, "role", where) for role in roles_raw)
    if roles and target is Target.ANY:
        raise RuleConfigError(f"{where}: role-agnostic rules cannot restrict roles")
    for role in roles:
        if role.target is not target:
            raise RuleConfigError(
                f"{where}: role '{role.value}' does not belong to target '{target.value}'"
            )

    check = str(r.get("check", "pattern"))
    if check not in CHECKS:
        raise RuleConfigError(f"{where}: unknown check '{check}'")

    pattern = str(r.get("pattern", ""))
    ignore_case = bool(r.get("ignore_case", False))
    if check == "pattern" and not pattern:
        raise RuleConfigError(f"{where}: the 'pattern' check needs a pattern")
    _validate_regex(pattern, "pattern", where)

    allow = str(r.get("allow", ""))
    _validate_regex(allow, "allow", where)

    paths_raw = r.get("paths") or ()
    if isinstance(paths_raw, str):
        paths_raw = (paths_raw,)

    return Rule(
        id=rule_id,
        description=str(r["description"]),
        target=target,
        severity=severity,
        check=check,
        roles=roles,
        pattern=pattern,
        ignore_case=ignore_case,
        allow=allow,
        paths=tuple(str(p) for p in paths_raw),
        message=str(r.get("message", "")),
    )


def _enum(enum_cls, value: object, label: str, where: str):
    try:
        return enum_cls(str(value).lower())
    except ValueError:
        choices = ", ".join(m.value for m in enum_cls)
        raise RuleConfigError(
            f"{where}: invalid {label} '{value}' (expected one of: {choices})"
        ) from None


def _validate_regex(pattern: str, label: str, where: str) -> None:
    if not pattern:
        return
    try:
        re.compile(pattern)
    except re.error as e:
        raise RuleConfigError(f"{where}: invalid {label} regex: {e}") from e


def _load_ref(ref: str, _resolved: set[str]) -> RuleSet:
    if ref.startswith(_PRESET_PREFIX):
        return _load_preset(ref[len(_PRESET_PREFIX) :], _resolved)
    # Treat as file path
    return _load_file(Path(ref), _resolved)


def _load_preset(name: str, _resolved: set[str]) -> RuleSet:
    pkg = importlib.resources.files("laracheck.rules.presets")
    resource = pkg.joinpath(f"{name}.yaml")
    if not resource.is_file():
        raise RuleConfigError(f"Unknown rule preset: {name}")
    text = resource.read_text(encoding="utf-8")
    source = f"{_PRESET_PREFIX}{name}"
    return _build_ruleset(_parse_yaml(text, source), source, _resolved)


def export_yaml(ruleset: RuleSet) -> str:
    """Dump a resolved rule set as a standalone YAML rule file."""
    data: dict = {
        "name": ruleset.name,
        "description": ruleset.description,
        "rules": [],
    }

    for rule in ruleset.rules:
        entry: dict = {
            "id": rule.id,
            "description": rule.description,
            "target": rule.target.value,
            "severity": rule.severity.value,
            "check": rule.check,
        }
        if rule.roles:
            entry["roles"] = [role.value for role in rule.roles]
        if rule.pattern:
            entry["pattern"] = rule.pattern
        if rule.ignore_case:
            entry["ignore_case"] = True
        if rule.allow:
            entry["allow"] = rule.allow
        if rule.paths:
            entry["paths"] = list(rule.paths)
        if rule.message:
            entry["message"] = rule.message
        data["rules"].append(entry)

    result: str = yaml.safe_dump(data, default_flow_style=False, sort_keys=False)
    return result
