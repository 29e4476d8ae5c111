"""SharePoint Online REST helpers."""

from spo_cli.spo.client import SpoClient, SpoError, validate_sharepoint_url
from spo_cli.spo.pages import CanvasColumn, CanvasSection, ClientSidePage, column_information

__all__ = [
    "CanvasColumn",
    "CanvasSection",
    "ClientSidePage",
    "SpoClient",
    "SpoError",
    "column_information",
    "validate_sharepoint_url",
]
