"""Report rendering tests."""

from __future__ import annotations

import json

from spo_cli.output import render_columns_text, render_json, render_markdown, render_text
from spo_cli.rules.base import Diagnostic, Finding
from spo_cli.rules.dependencies import dependency_set
from spo_cli.rules.files import file_add
from spo_cli.upgrade import UpgradeReport


def test_render_json_has_stable_schema_keys() -> None:
    payload = json.loads(render_json(_report()))

    assert set(payload.keys()) == {"findings", "diagnostics", "meta"}
    assert set(payload["meta"].keys()) == {
        "generated_at",
        "project_path",
        "from_version",
        "to_version",
        "version",
    }
    assert payload["meta"]["from_version"] == "1.4.0"
    first = payload["findings"][0]
    assert set(first.keys()) == {
        "rule_id",
        "kind",
        "title",
        "description",
        "resolution",
        "resolution_type",
        "severity",
        "file",
    }
    assert first["kind"] == "dependency_set"
    assert payload["diagnostics"] == [
        {"rule_id": "FN015001", "file": "./typings/tsd.d.ts", "message": "Permission denied"}
    ]


def test_render_markdown_lists_findings_and_combined_script() -> None:
    output = render_markdown(_report())

    assert "# Upgrade project /work/webpart to v1.4.1" in output
    assert "FN001001|Upgrade SharePoint Framework dependency package" in output
    script = "```sh\nnpm i @microsoft/sp-core-library@1.4.1 -SE\ncat > ./src/index.ts << EOF"
    assert script in output
    assert "### FN015004 ./src/index.ts | Required" in output
    assert "## Diagnostics" in output


def test_render_text_shows_findings_and_diagnostics() -> None:
    output = render_text(_report())

    assert "Findings (2):" in output
    assert "1. [FN001001]" in output
    assert "resolution: cat > ./src/index.ts << EOF" in output
    assert "   // index" in output
    assert "Diagnostics (1):" in output


def test_render_text_for_up_to_date_project() -> None:
    report = UpgradeReport(project_path="/work/webpart", from_version="1.4.1", to_version="1.4.1")

    assert "Project is up to date." in render_text(report)
    assert "No findings." in render_markdown(report)


def test_render_columns_text_aligns_table() -> None:
    output = render_columns_text(
        [{"order": 1, "factor": 8, "controls": 2}, {"order": 2, "factor": 4, "controls": 0}]
    )

    assert output.splitlines() == [
        "order  factor  controls",
        "-----  ------  --------",
        "1      8       2",
        "2      4       0",
    ]


def _report() -> UpgradeReport:
    rules = [
        dependency_set("FN001001", "@microsoft/sp-core-library", "1.4.1"),
        file_add("FN015004", "./src/index.ts", "// index"),
    ]
    return UpgradeReport(
        project_path="/work/webpart",
        from_version="1.4.0",
        to_version="1.4.1",
        findings=[Finding.from_rule(rule, target=f"/work/webpart/{rule.file}") for rule in rules],
        diagnostics=[
            Diagnostic(rule_id="FN015001", file="./typings/tsd.d.ts", message="Permission denied")
        ],
    )
