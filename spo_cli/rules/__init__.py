"""Rules package: the per-version upgrade rule catalog."""

from dataclasses import dataclass

from spo_cli.rules import v1_1_0, v1_2_0, v1_3_0, v1_4_0, v1_4_1
from spo_cli.rules.base import Diagnostic, Finding, Rule, RuleCheckError, RuleKind

__all__ = [
    "Diagnostic",
    "Finding",
    "Rule",
    "RuleCheckError",
    "RuleKind",
    "SUPPORTED_VERSIONS",
    "RuleInfo",
    "build_rules",
    "latest_version",
    "list_rule_info",
    "parse_version",
]

SUPPORTED_VERSIONS: tuple[str, ...] = (
    "1.0.0",
    "1.0.1",
    "1.0.2",
    "1.1.0",
    "1.1.1",
    "1.1.3",
    "1.2.0",
    "1.3.0",
    "1.3.1",
    "1.3.2",
    "1.3.4",
    "1.4.0",
    "1.4.1",
)

_VERSION_RULES: dict[str, tuple[Rule, ...]] = {
    v1_1_0.VERSION: v1_1_0.RULES,
    v1_2_0.VERSION: v1_2_0.RULES,
    v1_3_0.VERSION: v1_3_0.RULES,
    v1_4_0.VERSION: v1_4_0.RULES,
    v1_4_1.VERSION: v1_4_1.RULES,
}


@dataclass(frozen=True, slots=True)
class RuleInfo:
    """Rule metadata for listing and selection."""

    rule_id: str
    kind: str
    title: str
    description: str
    severity: str
    file: str
    versions: tuple[str, ...]


def latest_version() -> str:
    return SUPPORTED_VERSIONS[-1]


def parse_version(value: str) -> tuple[int, ...]:
    """Parse a dotted version into a comparable tuple."""
    try:
        return tuple(int(part) for part in value.split("."))
    except ValueError as exc:
        raise ValueError(f"Invalid version '{value}'") from exc


def build_rules(
    *,
    from_version: str,
    to_version: str,
    enabled_rule_ids: list[str] | None = None,
    disabled_rule_ids: list[str] | None = None,
) -> list[Rule]:
    """Collect the rules for every version step after ``from_version`` up to ``to_version``.

    A rule registered again by a later version replaces the earlier one in
    place, so the result keeps registration order without duplicates.
    """
    steps = _version_steps(from_version, to_version)
    known_ids = _known_rule_ids()
    requested = set(enabled_rule_ids or []) | set(disabled_rule_ids or [])
    unknown = [rule_id for rule_id in requested if rule_id not in known_ids]
    if unknown:
        joined = ", ".join(sorted(unknown))
        raise ValueError(f"Unknown rule ids: {joined}")

    selected: dict[str, Rule] = {}
    for version in steps:
        for rule in _VERSION_RULES.get(version, ()):
            selected[rule.rule_id] = rule

    enabled_set = set(enabled_rule_ids) if enabled_rule_ids is not None else None
    disabled_set = set(disabled_rule_ids or [])
    return [
        rule
        for rule_id, rule in selected.items()
        if (enabled_set is None or rule_id in enabled_set) and rule_id not in disabled_set
    ]


def list_rule_info(
    *,
    from_version: str | None = None,
    to_version: str | None = None,
) -> list[RuleInfo]:
    """Return metadata for catalog rules, optionally limited to a version range."""
    steps = _version_steps(
        from_version or SUPPORTED_VERSIONS[0],
        to_version or latest_version(),
    )
    versions_by_id: dict[str, list[str]] = {}
    latest_by_id: dict[str, Rule] = {}
    for version in steps:
        for rule in _VERSION_RULES.get(version, ()):
            versions_by_id.setdefault(rule.rule_id, []).append(version)
            latest_by_id[rule.rule_id] = rule

    info: list[RuleInfo] = []
    for rule_id, rule in latest_by_id.items():
        info.append(
            RuleInfo(
                rule_id=rule_id,
                kind=rule.kind.value,
                title=rule.title,
                description=rule.description,
                severity=rule.severity,
                file=rule.file,
                versions=tuple(versions_by_id[rule_id]),
            )
        )
    return info


def _version_steps(from_version: str, to_version: str) -> list[str]:
    _validate_supported(from_version, "from")
    _validate_supported(to_version, "to")
    start = parse_version(from_version)
    end = parse_version(to_version)
    if end < start:
        raise ValueError(
            f"Cannot downgrade project from version {from_version} to {to_version}"
        )
    return [
        version
        for version in SUPPORTED_VERSIONS
        if start < parse_version(version) <= end
    ]


def _validate_supported(version: str, label: str) -> None:
    if version not in SUPPORTED_VERSIONS:
        choices = ", ".join(SUPPORTED_VERSIONS)
        raise ValueError(
            f"Unsupported {label} version '{version}'. Expected one of: {choices}"
        )


def _known_rule_ids() -> set[str]:
    return {rule.rule_id for rules in _VERSION_RULES.values() for rule in rules}
