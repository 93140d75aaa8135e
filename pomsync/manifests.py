"""Project manifest reading and writing.

A project's version lives in exactly one source-of-truth manifest: pom.xml
when present, otherwise package.json. Every function here takes an optional
:class:`~pomsync.staging.StagedTree`; when it is omitted the change is made
through a throwaway tree and flushed straight to disk.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from . import pom
from .errors import (
    ManifestNotFound,
    ParseFailure,
    PatternNotMatched,
    VersionFieldMissing,
    VersionNotFound,
)
from .models import Coordinate, ManifestKind, ManifestLocation, VersionBump
from .shell import info
from .staging import StagedTree

# pom.xml takes precedence when both exist.
_PRECEDENCE = (ManifestKind.XML, ManifestKind.JSON)


def _root(project_root: Path | str) -> Path:
    return Path(project_root).resolve()


def _coordinate_label(coordinate: Coordinate | None) -> str:
    return f"coordinate {coordinate}" if coordinate else "project artifact"


def locate_manifest(project_root: Path, tree: StagedTree | None = None) -> ManifestLocation:
    """Find the manifest that holds a project's version.

    Raises:
        ManifestNotFound: If neither pom.xml nor package.json exists.
    """
    tree = tree or StagedTree(project_root)
    for kind in _PRECEDENCE:
        if tree.exists(_root(project_root) / kind.value):
            return ManifestLocation(project_root=_root(project_root), kind=kind)
    raise ManifestNotFound(
        "No pom.xml or package.json found for project", path=project_root
    )


def _read(tree: StagedTree, path: Path) -> str:
    text = tree.read(path)
    if text is None:
        raise ManifestNotFound(f"{path.name} not found", path=path)
    return text


def read_package_json(
    project_root: Path, tree: StagedTree | None = None
) -> dict[str, Any]:
    """Parse package.json into a dict, preserving key order."""
    tree = tree or StagedTree(project_root)
    path = _root(project_root) / ManifestKind.JSON.value
    text = _read(tree, path)
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ParseFailure(f"Invalid JSON: {exc}", path=path) from exc
    if not isinstance(data, dict):
        raise ParseFailure("Expected a JSON object at the top level", path=path)
    return data


def read_package_version(project_root: Path, tree: StagedTree | None = None) -> str:
    data = read_package_json(project_root, tree)
    version = data.get("version")
    if not isinstance(version, str):
        raise VersionFieldMissing(
            "No version field in package.json",
            path=_root(project_root) / ManifestKind.JSON.value,
        )
    return version


def read_pom_version(
    project_root: Path,
    coordinate: Coordinate | None = None,
    tree: StagedTree | None = None,
) -> str:
    tree = tree or StagedTree(project_root)
    path = _root(project_root) / ManifestKind.XML.value
    version = pom.read_project_version(_read(tree, path), coordinate)
    if version is None:
        raise VersionNotFound(
            f"Version tag not found for {_coordinate_label(coordinate)}", path=path
        )
    return version


def read_version(
    project_root: Path,
    coordinate: Coordinate | None = None,
    tree: StagedTree | None = None,
) -> str:
    """Read the current version from the project's source-of-truth manifest.

    Args:
        project_root: The project directory.
        coordinate: Maven coordinates scoping the pom.xml lookup. Ignored for
            package.json projects.
        tree: Staged writes to read through.

    Raises:
        ManifestNotFound: If the project has no manifest.
        VersionNotFound: If pom.xml has no version for the coordinate.
        VersionFieldMissing: If package.json has no version field.
        ParseFailure: If package.json is not valid JSON.
    """
    tree = tree or StagedTree(project_root)
    location = locate_manifest(project_root, tree)
    if location.kind is ManifestKind.XML:
        return read_pom_version(project_root, coordinate, tree)
    return read_package_version(project_root, tree)


def write_pom_version(
    project_root: Path,
    new_version: str,
    coordinate: Coordinate | None = None,
    tree: StagedTree | None = None,
) -> VersionBump:
    """Rewrite only the project's ``<version>`` text in pom.xml.

    Raises:
        PatternNotMatched: If the pom.xml no longer has the expected shape.
    """
    owned = tree is None
    tree = tree or StagedTree(project_root)
    path = _root(project_root) / ManifestKind.XML.value
    xml = _read(tree, path)

    old = pom.read_project_version(xml, coordinate)
    updated = pom.update_project_version(xml, coordinate, new_version)
    if old is None or updated is None:
        raise PatternNotMatched(
            f"Unable to update version: version tag not found for "
            f"{_coordinate_label(coordinate)}",
            path=path,
        )

    tree.write(path, updated)
    if owned:
        tree.flush()
    info(f"{path}: {old} → {new_version}")
    return VersionBump(old=old, new=new_version)


def write_package_version(
    project_root: Path, new_version: str, tree: StagedTree | None = None
) -> VersionBump:
    """Set ``version`` in package.json.

    The whole object is re-serialised with two-space indentation and a
    trailing newline, so incidental hand formatting is not preserved.
    """
    owned = tree is None
    tree = tree or StagedTree(project_root)
    path = _root(project_root) / ManifestKind.JSON.value
    data = read_package_json(project_root, tree)
    old = data.get("version")
    data["version"] = new_version

    tree.write(path, json.dumps(data, indent=2, ensure_ascii=False) + "\n")
    if owned:
        tree.flush()
    info(f"{path}: {old or '<none>'} → {new_version}")
    return VersionBump(old=str(old or ""), new=new_version)


def write_version(
    project_root: Path,
    new_version: str,
    coordinate: Coordinate | None = None,
    tree: StagedTree | None = None,
) -> VersionBump:
    """Write a new version to the project's source-of-truth manifest."""
    location = locate_manifest(project_root, tree)
    if location.kind is ManifestKind.XML:
        return write_pom_version(project_root, new_version, coordinate, tree)
    return write_package_version(project_root, new_version, tree)
