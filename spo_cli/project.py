"""Read-only model of an SPFx project directory."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

log = logging.getLogger(__name__)

PACKAGE_JSON = "package.json"
YO_RC_JSON = ".yo-rc.json"
GENERATOR_KEY = "@microsoft/generator-sharepoint"
CORE_LIBRARY_PACKAGE = "@microsoft/sp-core-library"


class ProjectError(ValueError):
    """Raised when a directory cannot be loaded as a project."""


@dataclass(frozen=True, slots=True)
class Project:
    """Project directory plus metadata derived from its manifests."""

    path: str
    version: str | None = None
    package_json: dict[str, Any] | None = None
    yo_rc: dict[str, Any] | None = None

    def dependency_version(self, package: str, *, dev: bool = False) -> str | None:
        """Return the declared version of ``package`` or None when it is not listed."""
        if self.package_json is None:
            return None
        section = self.package_json.get("devDependencies" if dev else "dependencies")
        if not isinstance(section, dict):
            return None
        value = section.get(package)
        return value if isinstance(value, str) else None


def load_project(path: Path) -> Project:
    """Load a project rooted at ``path``."""
    root = path.resolve()
    if not root.is_dir():
        raise ProjectError(f"Project path is not a directory: {root}")

    package_json = _load_json(root / PACKAGE_JSON)
    yo_rc = _load_json(root / YO_RC_JSON)
    version = detect_version(package_json=package_json, yo_rc=yo_rc)
    log.debug("Loaded project %s (version=%s)", root, version)
    return Project(path=str(root), version=version, package_json=package_json, yo_rc=yo_rc)


def detect_version(
    *,
    package_json: dict[str, Any] | None,
    yo_rc: dict[str, Any] | None,
) -> str | None:
    """Detect the SPFx version from .yo-rc.json, falling back to package.json."""
    if yo_rc is not None:
        generator = yo_rc.get(GENERATOR_KEY)
        if isinstance(generator, dict):
            version = generator.get("version")
            if isinstance(version, str) and version:
                return version

    if package_json is not None:
        dependencies = package_json.get("dependencies")
        if isinstance(dependencies, dict):
            declared = dependencies.get(CORE_LIBRARY_PACKAGE)
            if isinstance(declared, str) and declared:
                return normalize_version(declared)
    return None


def normalize_version(value: str) -> str:
    """Strip range prefixes such as ``^``, ``~`` or ``v`` from a version string."""
    return value.strip().lstrip("^~=v")


def _load_json(path: Path) -> dict[str, Any] | None:
    if not path.is_file():
        return None
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ProjectError(f"Cannot read {path}: {exc}") from exc
    try:
        loaded = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ProjectError(f"Invalid JSON in {path}: {exc}") from exc
    if not isinstance(loaded, dict):
        raise ProjectError(f"Expected a JSON object in {path}")
    return loaded
