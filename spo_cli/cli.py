"""CLI entrypoint for spo-cli."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Annotated, Any

import typer

from spo_cli import __version__
from spo_cli.config import OUTPUT_FORMATS, AppConfig, default_config_template, load_app_config
from spo_cli.log import configure_logging
from spo_cli.output import render_columns_text, render_json, render_markdown, render_text
from spo_cli.project import Project, ProjectError, load_project
from spo_cli.rules import build_rules, latest_version, list_rule_info
from spo_cli.spo import SpoClient, SpoError, column_information, validate_sharepoint_url
from spo_cli.upgrade import UpgradeReport, upgrade_project

log = logging.getLogger(__name__)

app = typer.Typer(
    name="spo-cli",
    no_args_is_help=True,
    help="Upgrade SharePoint Framework projects and inspect SharePoint Online pages.",
)


def version_callback(value: bool) -> None:
    """Print version and exit when --version is provided."""
    if value:
        typer.echo(__version__)
        raise typer.Exit()


@app.callback()
def main_callback(
    version: Annotated[
        bool,
        typer.Option("--version", help="Show version and exit.", callback=version_callback),
    ] = False,
    verbose: Annotated[bool, typer.Option("--verbose", help="Log progress to stderr.")] = False,
    debug: Annotated[bool, typer.Option("--debug", help="Log debug details to stderr.")] = False,
) -> None:
    """Root command callback."""
    _ = version
    configure_logging(verbose=verbose, debug=debug)


@app.command("project-upgrade")
def project_upgrade_command(
    project_path: Annotated[
        Path, typer.Option("--project-path", help="SharePoint Framework project directory.")
    ] = Path("."),
    to_version: Annotated[
        str | None,
        typer.Option(
            "--to-version",
            help="Target SharePoint Framework version.",
            show_default="latest",
        ),
    ] = None,
    format: Annotated[
        str | None, typer.Option(help="Output format: text|json|md.", show_default="text")
    ] = None,
    fail_on_findings: Annotated[
        bool | None,
        typer.Option(
            "--fail-on-findings/--no-fail-on-findings",
            help="Exit nonzero when the project needs upgrade steps.",
        ),
    ] = None,
    config_file: Annotated[
        Path | None,
        typer.Option("--config", help="Path to config TOML file."),
    ] = None,
) -> None:
    """Report the steps required to upgrade a project to a SharePoint Framework version."""
    app_config = _load_config_or_raise(project_path, config_file)
    output_format = _format_or_raise(format or app_config.format, OUTPUT_FORMATS)
    project = _load_project_or_raise(project_path)
    report = _upgrade_or_raise(
        project,
        to_version=to_version or app_config.to_version,
        app_config=app_config,
    )

    if output_format == "json":
        typer.echo(render_json(report))
    elif output_format == "md":
        typer.echo(render_markdown(report))
    else:
        typer.echo(render_text(report))

    if report.diagnostics:
        raise typer.Exit(code=2)
    should_fail = fail_on_findings if fail_on_findings is not None else app_config.fail_on_findings
    if should_fail and report.findings:
        raise typer.Exit(code=1)


@app.command("rules")
def rules_command(
    from_version: Annotated[
        str | None, typer.Option("--from-version", help="Only rules after this version.")
    ] = None,
    to_version: Annotated[
        str | None, typer.Option("--to-version", help="Only rules up to this version.")
    ] = None,
    format: Annotated[str, typer.Option(help="Output format: text|json.")] = "text",
) -> None:
    """List the upgrade rules in the catalog."""
    output_format = _format_or_raise(format, ("text", "json"))
    try:
        rule_info = list_rule_info(from_version=from_version, to_version=to_version)
    except ValueError as exc:
        raise typer.BadParameter(str(exc), param_hint="--from-version/--to-version") from exc

    if output_format == "json":
        payload = {
            "rules": [
                {
                    "rule_id": item.rule_id,
                    "kind": item.kind,
                    "title": item.title,
                    "description": item.description,
                    "severity": item.severity,
                    "file": item.file,
                    "versions": list(item.versions),
                }
                for item in rule_info
            ],
            "meta": {"latest_version": latest_version()},
        }
        typer.echo(json.dumps(payload, sort_keys=True))
        return

    lines = ["Available rules:"]
    for item in rule_info:
        versions = ", ".join(item.versions)
        lines.append(f"- {item.rule_id} [{item.severity}] {item.description} ({versions})")
    typer.echo("\n".join(lines))


@app.command("config")
def config_command(
    project_path: Annotated[
        Path, typer.Option("--project-path", help="SharePoint Framework project directory.")
    ] = Path("."),
    format: Annotated[str, typer.Option(help="Output format: text|json.")] = "text",
    config_file: Annotated[
        Path | None,
        typer.Option("--config", help="Path to config TOML file."),
    ] = None,
) -> None:
    """Show resolved configuration."""
    output_format = _format_or_raise(format, ("text", "json"))
    app_config = _load_config_or_raise(project_path, config_file)
    payload = app_config.to_dict()
    _validate_rule_selection_or_raise(app_config)

    if output_format == "json":
        typer.echo(json.dumps(payload, sort_keys=True))
        return

    lines = [
        "Resolved configuration:",
        f"- source: {payload['source'] or 'defaults'}",
        f"- format: {payload['format']}",
        f"- to_version: {payload['to_version'] or latest_version()}",
        f"- fail_on_findings: {payload['fail_on_findings']}",
        f"- rules.enable: {payload['rules']['enable']}",
        f"- rules.disable: {payload['rules']['disable']}",
        f"- spo.timeout: {payload['spo']['timeout']}",
    ]
    typer.echo("\n".join(lines))


@app.command("config-init")
def config_init_command(
    out: Annotated[Path, typer.Option(help="Output path for starter config TOML.")] = Path(
        ".spo-cli.toml"
    ),
    force: Annotated[
        bool,
        typer.Option("--force", help="Overwrite if file already exists."),
    ] = False,
) -> None:
    """Create a starter project config file."""
    out_path = out.resolve()
    if out_path.exists() and not force:
        raise typer.BadParameter(
            f"Refusing to overwrite existing file: {out_path}. Use --force to overwrite."
        )
    out_path.parent.mkdir(parents=True, exist_ok=True)
    out_path.write_text(default_config_template(), encoding="utf-8")
    typer.echo(f"Wrote starter config: {out_path}")


@app.command("page-column-list")
def page_column_list_command(
    web_url: Annotated[
        str, typer.Option("--web-url", help="URL of the site where the page is located.")
    ],
    name: Annotated[str, typer.Option("--name", help="Name of the page to list columns of.")],
    section: Annotated[
        int, typer.Option("--section", min=1, help="Order of the section to list columns of.")
    ],
    access_token: Annotated[
        str | None,
        typer.Option(
            "--access-token",
            envvar="SPO_ACCESS_TOKEN",
            help="Access token for the SharePoint site.",
            show_default=False,
        ),
    ] = None,
    format: Annotated[str, typer.Option(help="Output format: text|json.")] = "text",
    config_file: Annotated[
        Path | None,
        typer.Option("--config", help="Path to config TOML file."),
    ] = None,
) -> None:
    """List columns in a specific section of a modern page."""
    output_format = _format_or_raise(format, ("text", "json"))
    url_error = validate_sharepoint_url(web_url)
    if url_error is not None:
        raise typer.BadParameter(url_error, param_hint="--web-url")
    if not access_token:
        raise typer.BadParameter(
            "Access token missing. Pass --access-token or set SPO_ACCESS_TOKEN.",
            param_hint="--access-token",
        )
    app_config = _load_config_or_raise(Path("."), config_file)

    log.info("Retrieving page %s from %s...", name, web_url)
    try:
        with SpoClient(web_url, access_token, timeout=app_config.spo.timeout) as client:
            page = client.get_page(name)
    except (SpoError, ValueError) as exc:
        raise typer.BadParameter(str(exc)) from exc

    json_output = output_format == "json"
    canvas_section = page.section(section)
    columns: list[dict[str, Any]] = []
    if canvas_section is None:
        log.info("Section %d not found on page %s", section, page.name)
    else:
        columns = [
            column_information(column, json_output=json_output)
            for column in canvas_section.columns
        ]

    if json_output:
        typer.echo(json.dumps(columns, sort_keys=True))
    elif columns:
        typer.echo(render_columns_text(columns))
    log.info("DONE")


def main() -> None:
    """Console script entrypoint."""
    app()


def _load_config_or_raise(project_path: Path, config_file: Path | None = None) -> AppConfig:
    try:
        return load_app_config(project_path, config_path=config_file)
    except ValueError as exc:
        raise typer.BadParameter(str(exc), param_hint="config") from exc


def _load_project_or_raise(project_path: Path) -> Project:
    try:
        return load_project(project_path)
    except ProjectError as exc:
        raise typer.BadParameter(str(exc), param_hint="--project-path") from exc


def _upgrade_or_raise(
    project: Project,
    *,
    to_version: str | None,
    app_config: AppConfig,
) -> UpgradeReport:
    try:
        return upgrade_project(
            project,
            to_version=to_version,
            enabled_rule_ids=app_config.rule_enable,
            disabled_rule_ids=app_config.rule_disable,
        )
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc


def _validate_rule_selection_or_raise(app_config: AppConfig) -> None:
    try:
        build_rules(
            from_version=latest_version(),
            to_version=latest_version(),
            enabled_rule_ids=app_config.rule_enable,
            disabled_rule_ids=app_config.rule_disable,
        )
    except ValueError as exc:
        raise typer.BadParameter(str(exc), param_hint="config.rules") from exc


def _format_or_raise(value: str, allowed: tuple[str, ...]) -> str:
    resolved = value.lower()
    if resolved not in allowed:
        choices = ", ".join(allowed)
        raise typer.BadParameter(f"format must be one of: {choices}", param_hint="--format")
    return resolved
