"""Workspace configuration and project discovery.

Configuration lives in an optional ``pomsync.toml`` at the workspace root:

    projects = ["apps/*", "services/*"]
    plans-dir = ".nx/version-plans"
    changelog = "CHANGELOG.md"
    lockfile-command = ["npm", "install", "--package-lock-only"]

    [names]
    "com.example:orders" = "services/orders"

Every pipeline step receives a :class:`WorkspaceConfig` explicitly instead of
looking at the current directory, so several workspaces (e.g. in tests) can
be handled in one process.
"""

from __future__ import annotations

import glob
from pathlib import Path

import tomlkit
from pydantic import BaseModel, ConfigDict, Field, ValidationError
from tomlkit.exceptions import TOMLKitError

from .coords import parse_coordinate
from .errors import ConfigError, ReleaseError
from .manifests import read_package_json
from .models import ManifestKind, ProjectInfo
from .shell import info, step, warn

CONFIG_FILENAME = "pomsync.toml"


class WorkspaceConfig(BaseModel):
    """Settings for one workspace.

    Attributes:
        root: Absolute workspace root.
        project_globs: Glob patterns (relative to root) matching project dirs.
        plans_dir: Directory holding version plan files.
        changelog: Changelog filename inside each project.
        lockfile_command: Command run from root after a release. Empty to skip.
        names: Explicit project name → directory, for projects whose name is
               not their package.json name (e.g. ``groupId:artifactId``).
    """

    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    root: Path
    project_globs: list[str] = Field(default_factory=lambda: ["apps/*"], alias="projects")
    plans_dir: Path = Field(default=Path(".nx/version-plans"), alias="plans-dir")
    changelog: str = "CHANGELOG.md"
    lockfile_command: list[str] = Field(
        default_factory=lambda: ["npm", "install", "--package-lock-only"],
        alias="lockfile-command",
    )
    names: dict[str, str] = Field(default_factory=dict)

    @property
    def plans_path(self) -> Path:
        return self.root / self.plans_dir


def load_config(root: Path) -> WorkspaceConfig:
    """Load pomsync.toml from a workspace root, falling back to defaults.

    Raises:
        ConfigError: If the file is not valid TOML or has unknown/invalid keys.
    """
    root = Path(root).resolve()
    path = root / CONFIG_FILENAME
    if not path.exists():
        return WorkspaceConfig(root=root)

    try:
        data = tomlkit.parse(path.read_text(encoding="utf-8")).unwrap()
    except TOMLKitError as exc:
        raise ConfigError(f"Invalid TOML: {exc}", path=path) from exc

    if "root" in data:
        raise ConfigError("'root' cannot be set in the config file", path=path)
    try:
        return WorkspaceConfig.model_validate({"root": root, **data})
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration: {exc}", path=path) from exc


def _project_name(project_dir: Path) -> str:
    """Use the package.json name when there is one, else the directory name."""
    if not (project_dir / ManifestKind.JSON.value).exists():
        return project_dir.name
    try:
        name = read_package_json(project_dir).get("name")
    except ReleaseError as exc:
        warn(f"{exc}; using directory name")
        return project_dir.name
    return name if isinstance(name, str) and name else project_dir.name


def discover_projects(config: WorkspaceConfig) -> dict[str, ProjectInfo]:
    """Scan the workspace and discover all projects.

    Explicitly named projects come first. Directories matching the project
    globs are included when they hold a pom.xml or package.json.

    Returns:
        Map of project name to ProjectInfo.
    """
    step("Discovering workspace projects")

    projects: dict[str, ProjectInfo] = {}
    claimed: set[Path] = set()

    for name, rel in config.names.items():
        project_root = (config.root / rel).resolve()
        projects[name] = ProjectInfo(
            name=name, root=project_root, coordinate=parse_coordinate(name)
        )
        claimed.add(project_root)

    for pattern in config.project_globs:
        for match in sorted(glob.glob(str(config.root / pattern))):
            p = Path(match).resolve()
            if p in claimed or not p.is_dir():
                continue
            if not any((p / kind.value).exists() for kind in ManifestKind):
                continue
            name = _project_name(p)
            projects[name] = ProjectInfo(
                name=name, root=p, coordinate=parse_coordinate(name)
            )
            claimed.add(p)

    for name, project in projects.items():
        try:
            rel = project.root.relative_to(config.root)
        except ValueError:
            rel = project.root
        info(f"{name} ({rel})")

    return projects
