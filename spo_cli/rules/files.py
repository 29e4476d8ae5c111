"""File presence rules: a file that must be added or removed."""

from __future__ import annotations

import os

from spo_cli.project import Project
from spo_cli.rules.base import Finding, Rule, RuleKind, path_exists


def file_add(rule_id: str, file_path: str, contents: str | None = None) -> Rule:
    """Rule requiring ``file_path`` to exist, remediated by writing ``contents``."""
    return _file_rule(rule_id, file_path, add=True, contents=contents)


def file_remove(rule_id: str, file_path: str) -> Rule:
    """Rule requiring ``file_path`` to be absent."""
    return _file_rule(rule_id, file_path, add=False, contents=None)


def check_file_rule(rule: Rule, project: Project) -> Finding | None:
    """Evaluate a FILE_ADD or FILE_REMOVE rule against ``project``."""
    target = os.path.join(project.path, rule.file)
    exists = path_exists(target)
    add = rule.kind is RuleKind.FILE_ADD
    if add != exists:
        return Finding.from_rule(rule, target=target)
    return None


def render_file_resolution(file_path: str, *, add: bool, contents: str | None) -> str:
    """Shell command creating or deleting ``file_path``."""
    if add:
        return f"cat > {file_path} << EOF\n{contents or ''}\nEOF"
    return f"rm {file_path}"


def _file_rule(rule_id: str, file_path: str, *, add: bool, contents: str | None) -> Rule:
    return Rule(
        rule_id=rule_id,
        kind=RuleKind.FILE_ADD if add else RuleKind.FILE_REMOVE,
        file=file_path,
        title=file_path,
        description=f"{'Add' if add else 'Remove'} file {file_path}",
        resolution=render_file_resolution(file_path, add=add, contents=contents),
        contents=contents,
    )
