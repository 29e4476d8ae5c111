"""Modern page parsing, REST client and page-column-list command tests."""

from __future__ import annotations

import json

import httpx
import pytest
from typer.testing import CliRunner

from spo_cli import cli
from spo_cli.cli import app
from spo_cli.spo import SpoClient, SpoError, column_information, validate_sharepoint_url
from spo_cli.spo.client import MODERN_PAGE_APPLICATION_ID
from spo_cli.spo.pages import parse_canvas

runner = CliRunner()

WEB_URL = "https://contoso.sharepoint.com/sites/team-a"

CANVAS = [
    {
        "controlType": 3,
        "id": "wp-1",
        "webPartId": "8c88f208-6c77-4bdb-86a0-0c47b4316588",
        "position": {"zoneIndex": 1, "sectionIndex": 1, "sectionFactor": 8, "controlIndex": 1},
    },
    {
        "controlType": 4,
        "id": "text-1",
        "innerHTML": "<p>Hello</p>",
        "position": {"zoneIndex": 1, "sectionIndex": 1, "sectionFactor": 8, "controlIndex": 2},
    },
    {
        "controlType": 0,
        "position": {"zoneIndex": 1, "sectionIndex": 2, "sectionFactor": 4},
    },
    {
        "controlType": 4,
        "id": "text-2",
        "innerHTML": "<p>Footer</p>",
        "position": {"zoneIndex": 2, "sectionIndex": 1, "sectionFactor": 12, "controlIndex": 1},
    },
    {"controlType": 0, "pageSettingsSlice": {"isDefaultDescription": True}},
]


def _page_payload(application_id: str = MODERN_PAGE_APPLICATION_ID) -> dict:
    return {
        "Name": "home.aspx",
        "ListItemAllFields": {
            "ClientSideApplicationId": application_id,
            "CanvasContent1": json.dumps(CANVAS),
        },
    }


def _transport(status_code: int = 200, payload: dict | None = None) -> httpx.MockTransport:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.headers["Authorization"] == "Bearer token-123"
        assert "getfilebyserverrelativeurl" in str(request.url)
        assert "/sites/team-a/SitePages/home.aspx" in str(request.url)
        return httpx.Response(status_code, json=payload if payload is not None else _page_payload())

    return httpx.MockTransport(handler)


def test_parse_canvas_groups_controls_into_sections_and_columns() -> None:
    page = parse_canvas("home.aspx", json.dumps(CANVAS))

    assert [section.order for section in page.sections] == [1, 2]
    first = page.section(1)
    assert first is not None
    assert [(column.order, column.factor, len(column.controls)) for column in first.columns] == [
        (1, 8, 2),
        (2, 4, 0),
    ]
    assert page.section(3) is None


def test_parse_canvas_handles_empty_and_invalid_content() -> None:
    assert parse_canvas("empty.aspx", None).sections == []
    with pytest.raises(ValueError, match="invalid canvas content"):
        parse_canvas("broken.aspx", "{not json")


def test_parse_canvas_rejects_non_numeric_positions() -> None:
    null_zone = [{"controlType": 4, "position": {"zoneIndex": None, "sectionIndex": 1}}]
    with pytest.raises(ValueError, match="invalid canvas content"):
        parse_canvas("home.aspx", json.dumps(null_zone))

    null_factor = [
        {"controlType": 4, "position": {"zoneIndex": 1, "sectionIndex": 1, "sectionFactor": None}}
    ]
    with pytest.raises(ValueError, match="invalid canvas content"):
        parse_canvas("home.aspx", json.dumps(null_factor))

    text_section = [{"controlType": 4, "position": {"zoneIndex": 1, "sectionIndex": "first"}}]
    with pytest.raises(ValueError, match="invalid canvas content"):
        parse_canvas("home.aspx", json.dumps(text_section))


def test_column_information_includes_control_ids_for_json() -> None:
    column = parse_canvas("home.aspx", json.dumps(CANVAS)).sections[0].columns[0]

    assert column_information(column, json_output=False) == {
        "factor": 8,
        "order": 1,
        "controls": 2,
    }
    assert column_information(column, json_output=True)["controlIds"] == ["wp-1", "text-1"]


def test_validate_sharepoint_url() -> None:
    assert validate_sharepoint_url(WEB_URL) is None
    assert validate_sharepoint_url("http://contoso.sharepoint.com") is not None
    assert validate_sharepoint_url("https://example.com/sites/a") is not None


def test_client_get_page_appends_aspx_extension() -> None:
    with SpoClient(WEB_URL, "token-123", transport=_transport()) as client:
        page = client.get_page("home")

    assert page.name == "home.aspx"
    assert len(page.sections) == 2


def test_client_rejects_classic_pages() -> None:
    transport = _transport(payload=_page_payload(application_id=""))
    with SpoClient(WEB_URL, "token-123", transport=transport) as client:
        with pytest.raises(SpoError, match="is not a modern page"):
            client.get_page("home.aspx")


def test_client_surfaces_odata_error_message() -> None:
    error = {"odata.error": {"code": "-2130575338", "message": {"value": "File Not Found."}}}
    transport = _transport(status_code=404, payload=error)
    with SpoClient(WEB_URL, "token-123", transport=transport) as client:
        with pytest.raises(SpoError, match="File Not Found."):
            client.get_page("home.aspx")


def test_page_column_list_command_outputs_json(monkeypatch: pytest.MonkeyPatch) -> None:
    _patch_client(monkeypatch)

    result = runner.invoke(
        app,
        [
            "page-column-list",
            "--web-url",
            WEB_URL,
            "--name",
            "home.aspx",
            "--section",
            "1",
            "--access-token",
            "token-123",
            "--format",
            "json",
        ],
    )

    assert result.exit_code == 0
    payload = json.loads(result.stdout)
    assert [(item["order"], item["factor"], item["controls"]) for item in payload] == [
        (1, 8, 2),
        (2, 4, 0),
    ]


def test_page_column_list_command_reads_token_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    _patch_client(monkeypatch)
    monkeypatch.setenv("SPO_ACCESS_TOKEN", "token-123")

    result = runner.invoke(
        app,
        ["page-column-list", "--web-url", WEB_URL, "--name", "home.aspx", "--section", "2"],
    )

    assert result.exit_code == 0
    assert result.stdout.splitlines()[0] == "order  factor  controls"
    assert result.stdout.splitlines()[2] == "1      12      1"


def test_page_column_list_command_validates_input(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("SPO_ACCESS_TOKEN", raising=False)
    base_args = ["page-column-list", "--name", "home.aspx", "--section", "1"]

    bad_url = runner.invoke(
        app, [*base_args, "--web-url", "https://contoso.com", "--access-token", "t"]
    )
    assert bad_url.exit_code == 2

    missing_token = runner.invoke(app, [*base_args, "--web-url", WEB_URL])
    assert missing_token.exit_code == 2

    bad_section = runner.invoke(
        app,
        ["page-column-list", "--web-url", WEB_URL, "--name", "home.aspx", "--section", "one"],
    )
    assert bad_section.exit_code == 2

    for section in ("0", "-1"):
        out_of_range = runner.invoke(
            app,
            [*base_args[:-2], f"--section={section}", "--web-url", WEB_URL, "--access-token", "t"],
        )
        assert out_of_range.exit_code == 2


def test_page_column_list_command_rejects_malformed_canvas(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    payload = _page_payload()
    payload["ListItemAllFields"]["CanvasContent1"] = json.dumps(
        [{"controlType": 4, "position": {"zoneIndex": None, "sectionIndex": 1}}]
    )

    def factory(web_url: str, access_token: str, *, timeout: float = 30.0) -> SpoClient:
        return SpoClient(
            web_url, access_token, timeout=timeout, transport=_transport(payload=payload)
        )

    monkeypatch.setattr(cli, "SpoClient", factory)

    result = runner.invoke(
        app,
        [
            "page-column-list",
            "--web-url",
            WEB_URL,
            "--name",
            "home.aspx",
            "--section",
            "1",
            "--access-token",
            "token-123",
        ],
    )

    assert result.exit_code == 2
    assert result.exception is None or isinstance(result.exception, SystemExit)


def _patch_client(monkeypatch: pytest.MonkeyPatch) -> None:
    def factory(web_url: str, access_token: str, *, timeout: float = 30.0) -> SpoClient:
        return SpoClient(web_url, access_token, timeout=timeout, transport=_transport())

    monkeypatch.setattr(cli, "SpoClient", factory)
