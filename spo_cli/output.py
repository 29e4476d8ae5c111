"""Output rendering."""

from __future__ import annotations

import json
from datetime import UTC, datetime
from typing import Any

import click

from spo_cli import __version__
from spo_cli.rules.base import RESOLUTION_TYPE_CMD, Diagnostic, Finding
from spo_cli.upgrade import UpgradeReport


def render_text(report: UpgradeReport) -> str:
    """Render a compact colorized summary."""
    header = (
        f"Upgrade {report.project_path} from {report.from_version or 'unknown'} "
        f"to {report.to_version}"
    )
    lines: list[str] = [click.style(header, bold=True)]

    if not report.findings and not report.diagnostics:
        lines.append(click.style("Project is up to date.", fg="green"))
        return "\n".join(lines)

    if report.findings:
        lines.append(
            click.style(f"Findings ({len(report.findings)}):", fg="yellow", bold=True)
        )
        for index, finding in enumerate(report.findings, start=1):
            lines.append(f"{index}. [{finding.rule_id}] {finding.description} ({finding.severity})")
            lines.append(f"   file: {finding.file}")
            resolution_lines = finding.resolution.splitlines() or [""]
            lines.append(f"   resolution: {resolution_lines[0]}")
            lines.extend(f"   {line}" for line in resolution_lines[1:])

    if report.diagnostics:
        lines.append(
            click.style(f"Diagnostics ({len(report.diagnostics)}):", fg="red", bold=True)
        )
        for diagnostic in report.diagnostics:
            lines.append(f"- [{diagnostic.rule_id}] {diagnostic.file}: {diagnostic.message}")
    return "\n".join(lines)


def render_json(report: UpgradeReport) -> str:
    """Render stable JSON output for CI and automation."""
    return json.dumps(build_json_payload(report), sort_keys=True)


def build_json_payload(report: UpgradeReport) -> dict[str, Any]:
    """Build stable JSON payload for CI and automation."""
    return {
        "findings": [_serialize_finding(item) for item in report.findings],
        "diagnostics": [_serialize_diagnostic(item) for item in report.diagnostics],
        "meta": {
            "generated_at": datetime.now(tz=UTC)
            .replace(microsecond=0)
            .isoformat()
            .replace("+00:00", "Z"),
            "project_path": report.project_path,
            "from_version": report.from_version,
            "to_version": report.to_version,
            "version": __version__,
        },
    }


def render_markdown(report: UpgradeReport) -> str:
    """Render a Markdown upgrade report with a combined remediation script."""
    lines: list[str] = [
        f"# Upgrade project {report.project_path} to v{report.to_version}",
        "",
        f"Date: {datetime.now(tz=UTC).date().isoformat()}",
        "",
        "## Findings",
        "",
    ]
    if not report.findings:
        lines.extend(["No findings.", ""])
    else:
        lines.extend(
            [
                "Following is the list of steps required to upgrade your project to "
                f"SharePoint Framework version {report.to_version}.",
                "",
                "Rule|Description|Severity|File",
                "----|-----------|--------|----",
            ]
        )
        for finding in report.findings:
            lines.append(
                f"{finding.rule_id}|{finding.description}|{finding.severity}|{finding.file}"
            )
        lines.append("")

        script = [
            item.resolution
            for item in report.findings
            if item.resolution_type == RESOLUTION_TYPE_CMD
        ]
        if script:
            lines.extend(["### Summary", "", "#### Execute script", ""])
            lines.extend(["```sh", *script, "```", ""])

        for finding in report.findings:
            lines.extend(
                [
                    f"### {finding.rule_id} {finding.title} | {finding.severity}",
                    "",
                    finding.description,
                    "",
                    f"Execute the following {_resolution_label(finding)}:",
                    "",
                    f"```{_fence_language(finding)}",
                    finding.resolution,
                    "```",
                    "",
                    f"File: [{finding.file}]({finding.file})",
                    "",
                ]
            )

    if report.diagnostics:
        lines.extend(["## Diagnostics", ""])
        for diagnostic in report.diagnostics:
            lines.append(f"- **{diagnostic.rule_id}** `{diagnostic.file}`: {diagnostic.message}")
        lines.append("")
    return "\n".join(lines)


def render_columns_text(columns: list[dict[str, Any]]) -> str:
    """Render page column information as an aligned table."""
    if not columns:
        return ""
    headers = ["order", "factor", "controls"]
    rows = [[str(column.get(header, "")) for header in headers] for column in columns]
    widths = [
        max(len(header), *(len(row[index]) for row in rows)) for index, header in enumerate(headers)
    ]
    lines = [
        "  ".join(header.ljust(widths[index]) for index, header in enumerate(headers)),
        "  ".join("-" * width for width in widths),
    ]
    for row in rows:
        lines.append("  ".join(cell.ljust(widths[index]) for index, cell in enumerate(row)))
    return "\n".join(line.rstrip() for line in lines)


def _serialize_finding(finding: Finding) -> dict[str, Any]:
    return {
        "rule_id": finding.rule_id,
        "kind": finding.kind.value,
        "title": finding.title,
        "description": finding.description,
        "resolution": finding.resolution,
        "resolution_type": finding.resolution_type,
        "severity": finding.severity,
        "file": finding.file,
    }


def _serialize_diagnostic(diagnostic: Diagnostic) -> dict[str, Any]:
    return {
        "rule_id": diagnostic.rule_id,
        "file": diagnostic.file,
        "message": diagnostic.message,
    }


def _resolution_label(finding: Finding) -> str:
    return "command" if finding.resolution_type == RESOLUTION_TYPE_CMD else "change"


def _fence_language(finding: Finding) -> str:
    return "sh" if finding.resolution_type == RESOLUTION_TYPE_CMD else ""
