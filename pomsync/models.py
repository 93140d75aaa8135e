"""Data models for pomsync.

These Pydantic models represent the core data structures used throughout
the release pipeline.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path

from pydantic import BaseModel, Field


class Coordinate(BaseModel):
    """Maven coordinates identifying a project inside pom.xml files.

    Attributes:
        namespace: The ``<groupId>`` value.
        name: The ``<artifactId>`` value.
    """

    namespace: str
    name: str

    def __str__(self) -> str:
        return f"{self.namespace}:{self.name}"


class ManifestKind(str, Enum):
    JSON = "package.json"
    XML = "pom.xml"


class ManifestLocation(BaseModel):
    """The manifest acting as a project's source of truth."""

    project_root: Path
    kind: ManifestKind

    @property
    def path(self) -> Path:
        return self.project_root / self.kind.value


class ProjectInfo(BaseModel):
    """A releasable project in the workspace.

    Attributes:
        name: Logical project name. Maven projects use ``groupId:artifactId``;
              JavaScript projects use their package.json name.
        root: Absolute path to the project directory.
        coordinate: Maven coordinates parsed from ``name``, if it has them.
    """

    name: str
    root: Path
    coordinate: Coordinate | None = None


class VersionBump(BaseModel):
    """Records a version change for a project.

    Attributes:
        old: The version before bumping.
        new: The version after bumping.
    """

    old: str
    new: str


class PlanEntry(BaseModel):
    project: str
    specifier: str


class VersionPlan(BaseModel):
    """One version plan file.

    Attributes:
        path: Where the plan was read from.
        entries: Header entries in the order they appear.
        notes: Free-text release notes following the header.
    """

    path: Path
    entries: list[PlanEntry] = Field(default_factory=list)
    notes: str = ""

    @property
    def bumps(self) -> dict[str, str]:
        return {entry.project: entry.specifier for entry in self.entries}


class ReleaseStage(str, Enum):
    """Linear release state machine. FAILED is absorbing."""

    IDLE = "idle"
    PLANS_LOADED = "plans-loaded"
    VERSIONS_RESOLVED = "versions-resolved"
    MANIFESTS_WRITTEN = "manifests-written"
    CHANGELOGS_GENERATED = "changelogs-generated"
    PLANS_CLEARED = "plans-cleared"
    LOCKFILE_REFRESHED = "lockfile-refreshed"
    DONE = "done"
    FAILED = "failed"


class ProjectFailure(BaseModel):
    project: str
    message: str


class ReleaseReport(BaseModel):
    """Outcome of a release run, including the decisions made in dry runs."""

    dry_run: bool = False
    stage: ReleaseStage = ReleaseStage.IDLE
    bumps: dict[str, VersionBump] = Field(default_factory=dict)
    failures: list[ProjectFailure] = Field(default_factory=list)
    deleted_plans: list[Path] = Field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.stage is ReleaseStage.DONE and not self.failures


class SyncResult(BaseModel):
    """pom.xml/package.json agreement for one project."""

    project: str
    pom_version: str
    package_version: str
    changed: bool = False


class SyncSummary(BaseModel):
    synced: list[SyncResult] = Field(default_factory=list)
    skipped: list[str] = Field(default_factory=list)
    failures: list[ProjectFailure] = Field(default_factory=list)
