"""Upgrade runner: evaluate the rule catalog against a project."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field

from spo_cli.project import Project
from spo_cli.rules import build_rules, latest_version
from spo_cli.rules.base import Diagnostic, Finding, Rule, RuleCheckError, RuleKind
from spo_cli.rules.dependencies import check_dependency_remove, check_dependency_set
from spo_cli.rules.files import check_file_rule

log = logging.getLogger(__name__)

RuleCheck = Callable[[Rule, Project], Finding | None]

_CHECKS: dict[RuleKind, RuleCheck] = {
    RuleKind.FILE_ADD: check_file_rule,
    RuleKind.FILE_REMOVE: check_file_rule,
    RuleKind.DEPENDENCY_SET: check_dependency_set,
    RuleKind.DEPENDENCY_REMOVE: check_dependency_remove,
}


@dataclass(slots=True)
class UpgradeReport:
    """Findings and diagnostics gathered for one project."""

    project_path: str
    from_version: str | None
    to_version: str
    findings: list[Finding] = field(default_factory=list)
    diagnostics: list[Diagnostic] = field(default_factory=list)


def check_rule(rule: Rule, project: Project) -> Finding | None:
    """Evaluate one rule and return its finding, if the project does not comply."""
    return _CHECKS[rule.kind](rule, project)


def visit(rule: Rule, project: Project, findings: list[Finding]) -> None:
    """Append the finding for ``rule`` to ``findings`` when the project does not comply."""
    finding = check_rule(rule, project)
    if finding is not None:
        findings.append(finding)


def check_project(
    project: Project,
    rules: list[Rule],
    *,
    to_version: str | None = None,
) -> UpgradeReport:
    """Run ``rules`` sequentially, recording failed checks as diagnostics."""
    report = UpgradeReport(
        project_path=project.path,
        from_version=project.version,
        to_version=to_version or latest_version(),
    )
    for rule in rules:
        try:
            finding = check_rule(rule, project)
        except RuleCheckError as exc:
            log.warning("Rule %s could not be checked: %s", rule.rule_id, exc)
            report.diagnostics.append(
                Diagnostic(rule_id=rule.rule_id, file=rule.file, message=str(exc))
            )
            continue
        if finding is not None:
            log.debug("Rule %s: %s", rule.rule_id, finding.description)
            report.findings.append(finding)
    log.info(
        "Checked %d rules: %d findings, %d diagnostics",
        len(rules),
        len(report.findings),
        len(report.diagnostics),
    )
    return report


def upgrade_project(
    project: Project,
    *,
    to_version: str | None = None,
    enabled_rule_ids: list[str] | None = None,
    disabled_rule_ids: list[str] | None = None,
) -> UpgradeReport:
    """Check what is needed to upgrade ``project`` to ``to_version`` (latest by default)."""
    if project.version is None:
        raise ValueError(
            f"Unable to determine the SharePoint Framework version of the project in {project.path}"
        )
    target = to_version or latest_version()
    rules = build_rules(
        from_version=project.version,
        to_version=target,
        enabled_rule_ids=enabled_rule_ids,
        disabled_rule_ids=disabled_rule_ids,
    )
    log.info("Upgrading project from %s to %s using %d rules", project.version, target, len(rules))
    return check_project(project, rules, to_version=target)
