"""Upgrade steps for SharePoint Framework v1.1.0."""

from __future__ import annotations

from spo_cli.rules.base import Rule
from spo_cli.rules.dependencies import dependency_remove, dependency_set

VERSION = "1.1.0"

RULES: tuple[Rule, ...] = (
    dependency_set("FN001001", "@microsoft/sp-core-library", VERSION),
    dependency_set("FN001002", "@microsoft/sp-lodash-subset", VERSION),
    dependency_set("FN001003", "@microsoft/office-ui-fabric-react-bundle", VERSION, optional=True),
    dependency_set("FN001004", "@microsoft/sp-webpart-base", VERSION),
    dependency_set("FN002001", "@microsoft/sp-build-web", VERSION, dev=True),
    dependency_set("FN002002", "@microsoft/sp-module-interfaces", VERSION, dev=True),
    dependency_set("FN002003", "@microsoft/sp-webpart-workbench", VERSION, dev=True),
    dependency_remove("FN001006", "@microsoft/sp-client-base"),
    dependency_remove("FN002004", "@microsoft/sp-client-preview", dev=True),
)
