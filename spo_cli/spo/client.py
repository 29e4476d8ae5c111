"""SharePoint Online REST client."""

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import quote, urlparse

import httpx

from spo_cli.spo.pages import ClientSidePage, parse_canvas

log = logging.getLogger(__name__)

MODERN_PAGE_APPLICATION_ID = "b6917cb1-93a0-4b97-a84d-7cf49975d4ec"
ODATA_ACCEPT = "application/json;odata=nometadata"


class SpoError(RuntimeError):
    """Raised when a SharePoint request fails."""


def validate_sharepoint_url(url: str) -> str | None:
    """Return an error message when ``url`` is not a SharePoint Online URL."""
    parsed = urlparse(url)
    if parsed.scheme != "https" or not parsed.hostname:
        return f"{url} is not a valid SharePoint Online site URL"
    if not parsed.hostname.lower().endswith(".sharepoint.com"):
        return f"{url} is not a valid SharePoint Online site URL"
    return None


class SpoClient:
    """Minimal REST client bound to one site and one access token."""

    def __init__(
        self,
        web_url: str,
        access_token: str,
        *,
        timeout: float = 30.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.web_url = web_url.rstrip("/")
        self._client = httpx.Client(
            timeout=timeout,
            transport=transport,
            headers={
                "Authorization": f"Bearer {access_token}",
                "Accept": ODATA_ACCEPT,
            },
        )

    def __enter__(self) -> SpoClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        self._client.close()

    def get_page(self, name: str) -> ClientSidePage:
        """Retrieve a modern page from the site's SitePages library."""
        page_name = name if name.lower().endswith(".aspx") else f"{name}.aspx"
        site_path = urlparse(self.web_url).path.rstrip("/")
        server_relative_url = quote(f"{site_path}/SitePages/{page_name}".replace("'", "''"))
        url = (
            f"{self.web_url}/_api/web/getfilebyserverrelativeurl('{server_relative_url}')"
            "?$expand=ListItemAllFields/ClientSideApplicationId"
        )
        payload = self._get_json(url)

        item = payload.get("ListItemAllFields")
        if not isinstance(item, dict):
            raise SpoError(f"Page {page_name} information not retrieved")
        application_id = str(item.get("ClientSideApplicationId") or "").lower()
        if application_id != MODERN_PAGE_APPLICATION_ID:
            raise SpoError(f"Page {page_name} is not a modern page.")
        return parse_canvas(page_name, item.get("CanvasContent1"))

    def _get_json(self, url: str) -> dict[str, Any]:
        log.debug("GET %s", url)
        try:
            response = self._client.get(url)
        except httpx.TimeoutException as exc:
            raise SpoError(f"Request timed out: {url}") from exc
        except httpx.HTTPError as exc:
            raise SpoError(f"Request failed: {exc}") from exc

        log.debug("Response %s from %s", response.status_code, url)
        if response.status_code >= 400:
            raise SpoError(_odata_error_message(response))
        try:
            payload = response.json()
        except ValueError as exc:
            raise SpoError(f"Invalid JSON response from {url}") from exc
        if not isinstance(payload, dict):
            raise SpoError(f"Unexpected response from {url}")
        return payload


def _odata_error_message(response: httpx.Response) -> str:
    try:
        payload = response.json()
    except ValueError:
        return response.text or f"HTTP {response.status_code}"

    if isinstance(payload, dict):
        error = payload.get("odata.error") or payload.get("error")
        if isinstance(error, dict):
            message = error.get("message")
            if isinstance(message, dict) and isinstance(message.get("value"), str):
                return message["value"]
            if isinstance(message, str):
                return message
        description = payload.get("error_description")
        if isinstance(description, str):
            return description
    return f"HTTP {response.status_code}"
