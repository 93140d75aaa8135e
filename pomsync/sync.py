"""pom.xml ↔ package.json synchronisation.

For projects carrying both manifests, package.json is the version of record
and pom.xml follows it.
"""

from __future__ import annotations

from pathlib import Path

from .config import WorkspaceConfig, discover_projects
from .coords import parse_coordinate
from .errors import ManifestNotFound, ReleaseError
from .manifests import read_package_json, read_package_version, read_pom_version, write_pom_version
from .models import ManifestKind, ProjectFailure, SyncResult, SyncSummary
from .shell import info, step, warn
from .staging import StagedTree


def has_both_manifests(project_root: Path) -> bool:
    return all((project_root / kind.value).exists() for kind in ManifestKind)


def sync_project(
    project_root: Path, tree: StagedTree | None = None, dry_run: bool = False
) -> SyncResult:
    """Bring pom.xml's project version into agreement with package.json.

    The pom.xml lookup is scoped by coordinates when the package name is
    ``groupId:artifactId``; otherwise the first project-level
    ``<artifactId>``/``<version>`` pair is used.

    Raises:
        ManifestNotFound: If either manifest is missing.
        VersionNotFound: If pom.xml declares no project version.
    """
    project_root = Path(project_root).resolve()
    pom_path = project_root / ManifestKind.XML.value
    if not (tree.exists(pom_path) if tree else pom_path.exists()):
        raise ManifestNotFound("No pom.xml found", path=pom_path)

    name = read_package_json(project_root, tree).get("name")
    if not isinstance(name, str) or not name:
        name = project_root.name
    package_version = read_package_version(project_root, tree)
    coordinate = parse_coordinate(name)
    pom_version = read_pom_version(project_root, coordinate, tree)

    result = SyncResult(
        project=name,
        pom_version=pom_version,
        package_version=package_version,
        changed=pom_version != package_version,
    )
    if not result.changed:
        info(f"{name}: pom.xml already at {pom_version}")
    elif dry_run:
        info(f"{name}: pom.xml {pom_version} → {package_version} (dry run)")
    else:
        write_pom_version(project_root, package_version, coordinate, tree)
    return result


def sync_all(config: WorkspaceConfig, dry_run: bool = False) -> SyncSummary:
    """Synchronise every project that has both manifests.

    A failing project is recorded and the rest are still processed.
    """
    projects = discover_projects(config)
    step("Synchronizing pom.xml files")

    summary = SyncSummary()
    for name, project in projects.items():
        if not has_both_manifests(project.root):
            summary.skipped.append(name)
            continue
        try:
            summary.synced.append(sync_project(project.root, dry_run=dry_run))
        except ReleaseError as exc:
            warn(f"Failed to sync {name}: {exc}")
            summary.failures.append(ProjectFailure(project=name, message=str(exc)))

    changed = sum(1 for result in summary.synced if result.changed)
    info(f"Synchronized {changed} of {len(summary.synced)} project(s)")
    if summary.skipped:
        info(f"Skipped {len(summary.skipped)} project(s) without both manifests")
    return summary


def preview(config: WorkspaceConfig) -> SyncSummary:
    """Report pom.xml versions that differ from package.json without writing."""
    return sync_all(config, dry_run=True)
