"""package.json dependency rules."""

from __future__ import annotations

import os

from spo_cli.project import PACKAGE_JSON, Project, normalize_version
from spo_cli.rules.base import SEVERITY_OPTIONAL, SEVERITY_REQUIRED, Finding, Rule, RuleKind

PACKAGE_JSON_FILE = f"./{PACKAGE_JSON}"


def dependency_set(
    rule_id: str,
    package: str,
    version: str,
    *,
    dev: bool = False,
    optional: bool = False,
) -> Rule:
    """Rule requiring ``package`` to be installed at exactly ``version``.

    Optional rules only fire for projects that already depend on the package.
    """
    kind_label = "SharePoint Framework dev dependency" if dev else "SharePoint Framework dependency"
    return Rule(
        rule_id=rule_id,
        kind=RuleKind.DEPENDENCY_SET,
        file=PACKAGE_JSON_FILE,
        title=package,
        description=f"Upgrade {kind_label} package {package}",
        resolution=f"npm i {package}@{version} -{'D' if dev else 'S'}E",
        severity=SEVERITY_OPTIONAL if optional else SEVERITY_REQUIRED,
        package=package,
        version=version,
        dev=dev,
        optional=optional,
    )


def dependency_remove(rule_id: str, package: str, *, dev: bool = False) -> Rule:
    """Rule requiring ``package`` to be removed from package.json."""
    kind_label = "dev dependency" if dev else "dependency"
    return Rule(
        rule_id=rule_id,
        kind=RuleKind.DEPENDENCY_REMOVE,
        file=PACKAGE_JSON_FILE,
        title=package,
        description=f"Remove SharePoint Framework {kind_label} package {package}",
        resolution=f"npm un {package} -{'D' if dev else 'S'}",
        package=package,
        dev=dev,
    )


def check_dependency_set(rule: Rule, project: Project) -> Finding | None:
    if rule.package is None or rule.version is None:
        raise ValueError(f"Rule {rule.rule_id} needs a package and a version")
    declared = project.dependency_version(rule.package, dev=rule.dev)
    if declared is None:
        if rule.optional:
            return None
        return _finding(rule, project)
    if normalize_version(declared) != rule.version:
        return _finding(rule, project)
    return None


def check_dependency_remove(rule: Rule, project: Project) -> Finding | None:
    if rule.package is None:
        raise ValueError(f"Rule {rule.rule_id} needs a package")
    if project.dependency_version(rule.package, dev=rule.dev) is None:
        return None
    return _finding(rule, project)


def _finding(rule: Rule, project: Project) -> Finding:
    return Finding.from_rule(rule, target=os.path.join(project.path, PACKAGE_JSON))
