"""Rule variants, findings and the filesystem probe shared by rule checks."""

from __future__ import annotations

import os
from dataclasses import dataclass
from enum import Enum

RESOLUTION_TYPE_CMD = "cmd"
SEVERITY_REQUIRED = "Required"
SEVERITY_OPTIONAL = "Optional"


class RuleKind(str, Enum):
    """Closed set of rule variants understood by the upgrade runner."""

    FILE_ADD = "file_add"
    FILE_REMOVE = "file_remove"
    DEPENDENCY_SET = "dependency_set"
    DEPENDENCY_REMOVE = "dependency_remove"


class RuleCheckError(OSError):
    """Raised when a rule cannot determine the state it checks."""


@dataclass(frozen=True, slots=True)
class Rule:
    """A single upgrade check.

    Metadata is rendered once by the factory functions in
    ``spo_cli.rules.files`` and ``spo_cli.rules.dependencies`` and never
    changes afterwards. Variant parameters that do not apply to ``kind`` stay
    at their defaults.
    """

    rule_id: str
    kind: RuleKind
    file: str
    title: str
    description: str
    resolution: str
    resolution_type: str = RESOLUTION_TYPE_CMD
    severity: str = SEVERITY_REQUIRED
    contents: str | None = None
    package: str | None = None
    version: str | None = None
    dev: bool = False
    optional: bool = False


@dataclass(frozen=True, slots=True)
class Finding:
    """A rule that failed its check, with the remediation to apply."""

    rule_id: str
    kind: RuleKind
    title: str
    description: str
    resolution: str
    resolution_type: str
    severity: str
    file: str
    target: str

    @classmethod
    def from_rule(cls, rule: Rule, *, target: str) -> Finding:
        return cls(
            rule_id=rule.rule_id,
            kind=rule.kind,
            title=rule.title,
            description=rule.description,
            resolution=rule.resolution,
            resolution_type=rule.resolution_type,
            severity=rule.severity,
            file=rule.file,
            target=target,
        )


@dataclass(frozen=True, slots=True)
class Diagnostic:
    """A rule whose check could not be completed."""

    rule_id: str
    file: str
    message: str


def path_exists(path: str) -> bool:
    """Return whether ``path`` exists, following symlinks.

    Only "not found" answers count as absent. Any other ``OSError`` (permission
    denied, name too long, ...) is raised as :class:`RuleCheckError`.
    """
    try:
        os.stat(path)
    except (FileNotFoundError, NotADirectoryError):
        return False
    except OSError as exc:
        raise RuleCheckError(f"Cannot check {path}: {exc}") from exc
    return True
