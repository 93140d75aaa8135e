"""pom.xml version reading and rewriting.

pom.xml files are never parsed into a tree here. Every operation locates the
exact span holding a version string and splices the new value into the
original text, so indentation, comments, attribute order and line endings
all survive untouched.

Limitations:
- Only explicit ``<version>`` declarations are supported; parent inheritance
  and ``${property}`` indirections are not resolved.
- The project pattern matches the first ``<groupId>`` equal to the project's
  namespace followed (possibly much later) by its ``<artifactId>`` and a
  ``<version>``. An unrelated block that happens to repeat the same pair
  earlier in the document wins.
"""

from __future__ import annotations

import re
from enum import Enum

from pydantic import BaseModel

from .models import Coordinate

# Sections whose <artifactId>/<version> pairs belong to other artifacts.
_FOREIGN_SECTIONS = (
    "parent",
    "dependencyManagement",
    "dependencies",
    "build",
    "profiles",
    "reporting",
)
_FOREIGN_SECTION_RE = re.compile(
    r"<(%s)>[\s\S]*?</\1>" % "|".join(_FOREIGN_SECTIONS)
)
_ANY_ARTIFACT_VERSION_RE = re.compile(
    r"(<artifactId>[^<]+</artifactId>\s*<version>\s*)([^<]+?)(\s*</version>)"
)
_DEPENDENCY_BLOCK_RE = re.compile(r"<dependency>(?:(?!</dependency>)[\s\S])*</dependency>")
_EXCLUSIONS_RE = re.compile(r"<exclusions>[\s\S]*?</exclusions>")
_GROUP_ID_RE = re.compile(r"<groupId>\s*([^<]+?)\s*</groupId>")
_ARTIFACT_ID_RE = re.compile(r"<artifactId>\s*([^<]+?)\s*</artifactId>")
_VERSION_RE = re.compile(r"(<version>\s*)([^<]+?)(\s*</version>)")


class DependencyStatus(str, Enum):
    UPDATED = "updated"
    # Block exists but declares no version, or already has this one.
    UNCHANGED = "unchanged"
    NOT_FOUND = "not-found"


class DependencyUpdate(BaseModel):
    status: DependencyStatus
    text: str


def _project_pattern(coordinate: Coordinate) -> re.Pattern[str]:
    namespace = re.escape(coordinate.namespace)
    name = re.escape(coordinate.name)
    return re.compile(
        rf"(<groupId>\s*{namespace}\s*</groupId>[\s\S]*?"
        rf"<artifactId>\s*{name}\s*</artifactId>\s*<version>\s*)"
        r"([^<]+?)(\s*</version>)"
    )


def _find_project_version(xml: str, coordinate: Coordinate | None) -> re.Match[str] | None:
    """Locate the match whose group 2 is the project's own version text."""
    if coordinate is not None:
        return _project_pattern(coordinate).search(xml)

    # Without coordinates, take the first artifactId/version pair that sits
    # at the project level rather than inside a parent/dependency section.
    foreign = [m.span() for m in _FOREIGN_SECTION_RE.finditer(xml)]
    for match in _ANY_ARTIFACT_VERSION_RE.finditer(xml):
        pos = match.start()
        if not any(start <= pos < end for start, end in foreign):
            return match
    return None


def read_project_version(xml: str, coordinate: Coordinate | None) -> str | None:
    """Return the project's declared version, or None if it can't be found.

    Args:
        xml: Full pom.xml content.
        coordinate: The project's Maven coordinates. When None, the first
            project-level ``<artifactId>`` immediately followed by a
            ``<version>`` is used.
    """
    match = _find_project_version(xml, coordinate)
    return match.group(2) if match else None


def update_project_version(
    xml: str, coordinate: Coordinate | None, new_version: str
) -> str | None:
    """Replace the project's own version, leaving every other byte alone.

    The scan is always re-run against ``xml``; a match from an earlier read
    is never reused.

    Returns:
        The updated XML, or None if the expected structure was not found.
    """
    match = _find_project_version(xml, coordinate)
    if match is None:
        return None
    return xml[: match.start(2)] + new_version + xml[match.end(2) :]


def _find_dependency_block(xml: str, coordinate: Coordinate) -> re.Match[str] | None:
    # Each candidate is bounded by a single <dependency>...</dependency> pair,
    # so neighbouring blocks can never be spanned.
    for block in _DEPENDENCY_BLOCK_RE.finditer(xml):
        head = _EXCLUSIONS_RE.sub("", block.group(0))
        group_id = _GROUP_ID_RE.search(head)
        artifact_id = _ARTIFACT_ID_RE.search(head)
        if (
            group_id
            and artifact_id
            and group_id.group(1) == coordinate.namespace
            and artifact_id.group(1) == coordinate.name
        ):
            return block
    return None


def read_dependency_version(xml: str, coordinate: Coordinate) -> str | None:
    """Return the version declared for a dependency, if it declares one."""
    block = _find_dependency_block(xml, coordinate)
    if block is None:
        return None
    version = _VERSION_RE.search(block.group(0))
    return version.group(2) if version else None


def update_dependency_version(
    xml: str, coordinate: Coordinate, new_version: str
) -> DependencyUpdate:
    """Point a ``<dependency>`` entry at a new version.

    A dependency without an explicit ``<version>`` is left alone: its version
    is inherited (dependencyManagement, parent or BOM) and must not be
    fabricated. That case is UNCHANGED, which callers treat as success,
    while NOT_FOUND means the manifest does not depend on the artifact at all.
    """
    block = _find_dependency_block(xml, coordinate)
    if block is None:
        return DependencyUpdate(status=DependencyStatus.NOT_FOUND, text=xml)

    version = _VERSION_RE.search(block.group(0))
    if version is None or version.group(2) == new_version:
        return DependencyUpdate(status=DependencyStatus.UNCHANGED, text=xml)

    start = block.start() + version.start(2)
    end = block.start() + version.end(2)
    return DependencyUpdate(
        status=DependencyStatus.UPDATED,
        text=xml[:start] + new_version + xml[end:],
    )
