"""Release pipeline: plans → versions → manifests → changelogs → cleanup.

This module orchestrates a pomsync release:
1. Load and merge the version plans
2. Resolve each planned project's current version and compute the new one
3. Write the manifests, including dependents' references to released projects
4. Prepend release notes to each released project's changelog
5. Delete the consumed version plans
6. Refresh the workspace lockfile

Every manifest change is staged in memory until all versions have been
computed, so a bad specifier or missing manifest leaves the workspace
untouched. Past that point failures are not rolled back; plans are deleted
late so an interrupted release can simply be re-run.

A dry run walks the same stages and reports every decision, but replaces
each external effect with a message.
"""

from __future__ import annotations

from pathlib import Path

from .actions import MavenVersionActions
from .changelog import prepend_entry, render_entry, today
from .config import WorkspaceConfig, discover_projects
from .errors import ReleaseError
from .manifests import read_version, write_package_version, write_version
from .models import (
    ManifestKind,
    ProjectFailure,
    ProjectInfo,
    ReleaseReport,
    ReleaseStage,
    VersionBump,
    VersionPlan,
)
from .plans import load_plans, merge_plans, notes_for
from .shell import info, run, step, warn
from .staging import StagedTree
from .versions import compute_next_version

WORKSPACE = "<workspace>"


def load_version_plans(config: WorkspaceConfig) -> tuple[list[VersionPlan], dict[str, str]]:
    """Load every plan file and merge them.

    Returns:
        Tuple of (plans in processing order, project → specifier).

    Raises:
        PlansNotFound: If the plans directory does not exist.
    """
    step("Loading version plans")

    plans = load_plans(config.plans_path)
    info(f"Found {len(plans)} version plan(s) in {config.plans_dir}")
    planned = merge_plans(plans)
    for name, specifier in planned.items():
        info(f"- {name}: {specifier}")
    return plans, planned


def _has_both_manifests(project: ProjectInfo, tree: StagedTree) -> bool:
    return all(tree.exists(project.root / kind.value) for kind in ManifestKind)


def resolve_versions(
    planned: dict[str, str],
    projects: dict[str, ProjectInfo],
    tree: StagedTree,
    report: ReleaseReport,
    preid: str | None = None,
) -> dict[str, VersionBump]:
    """Compute and stage the new version of every planned project.

    Failures are recorded on ``report`` and the remaining projects are still
    processed, so one run surfaces every problem.

    Returns:
        Map of project name → VersionBump for projects whose version changes.
    """
    step("Resolving versions")

    bumps: dict[str, VersionBump] = {}
    for name, specifier in planned.items():
        project = projects.get(name)
        if project is None:
            warn(f"{name}: project not found in workspace")
            report.failures.append(
                ProjectFailure(project=name, message="Project not found in workspace")
            )
            continue

        try:
            current = read_version(project.root, project.coordinate, tree)
            new = compute_next_version(current, specifier, preid)
            if new == current:
                info(f"{name}: already at {current}")
                continue
            write_version(project.root, new, project.coordinate, tree)
            # package.json is the version of record for sync; keep it in step.
            if _has_both_manifests(project, tree):
                write_package_version(project.root, new, tree)
        except ReleaseError as exc:
            warn(f"{name}: {exc}")
            report.failures.append(ProjectFailure(project=name, message=str(exc)))
            continue

        bumps[name] = VersionBump(old=current, new=new)
    return bumps


def update_dependents(
    projects: dict[str, ProjectInfo],
    bumps: dict[str, VersionBump],
    tree: StagedTree,
) -> None:
    """Point every pom.xml's explicit dependency versions at released projects."""
    if not bumps:
        return

    step("Updating dependent projects")

    new_versions = {name: bump.new for name, bump in bumps.items()}
    for name, project in projects.items():
        if not tree.exists(project.root / ManifestKind.XML.value):
            continue
        others = {dep: v for dep, v in new_versions.items() if dep != name}
        for message in MavenVersionActions(project).update_project_dependencies(
            tree, others
        ):
            info(f"{name}: {message}")


def write_manifests(tree: StagedTree, dry_run: bool) -> list[Path]:
    step("Writing manifests")

    changes = tree.changes()
    if dry_run:
        for path in changes:
            info(f"[dry run] Would write {path}")
        tree.discard()
        return changes

    written = tree.flush()
    for path in written:
        info(f"Wrote {path}")
    return written


def generate_changelogs(
    config: WorkspaceConfig,
    projects: dict[str, ProjectInfo],
    bumps: dict[str, VersionBump],
    plans: list[VersionPlan],
    dry_run: bool,
) -> None:
    """Prepend a section to each released project's changelog.

    A changelog that can't be written is reported and skipped; it never
    fails the release.
    """
    step("Generating changelogs")

    released = today()
    for name, bump in bumps.items():
        path = projects[name].root / config.changelog
        entry = render_entry(bump.new, notes_for(plans, name), released)
        if dry_run:
            info(f"[dry run] Would add {bump.new} to {path}")
            continue
        tree = StagedTree(config.root)
        try:
            prepend_entry(tree, path, entry)
            tree.flush()
        except (OSError, UnicodeDecodeError) as exc:
            warn(f"Changelog generation failed for {name}: {exc}")
            continue
        info(f"{name}: {path}")


def clear_plans(plans: list[VersionPlan], dry_run: bool) -> list[Path]:
    step("Deleting version plans")

    deleted: list[Path] = []
    for plan in plans:
        if dry_run:
            info(f"[dry run] Would delete {plan.path.name}")
            continue
        plan.path.unlink()
        info(f"Deleted {plan.path.name}")
        deleted.append(plan.path)
    return deleted


def refresh_lockfile(config: WorkspaceConfig, dry_run: bool) -> None:
    """Run the configured lockfile command from the workspace root.

    Raises:
        ReleaseError: If the command can't be started or exits non-zero.
    """
    step("Refreshing lockfile")

    command = config.lockfile_command
    if not command:
        info("No lockfile command configured")
        return
    if dry_run:
        info(f"[dry run] Would run: {' '.join(command)}")
        return

    try:
        result = run(*command, cwd=config.root, check=False)
    except OSError as exc:
        raise ReleaseError(f"Unable to run {command[0]}: {exc}") from exc
    if result.returncode != 0:
        raise ReleaseError(
            f"Lockfile refresh failed: {' '.join(command)} exited with {result.returncode}"
        )


def _fail(report: ReleaseReport, exc: Exception | None = None) -> ReleaseReport:
    if exc is not None:
        report.failures.append(ProjectFailure(project=WORKSPACE, message=str(exc)))
    report.stage = ReleaseStage.FAILED

    step("Release failed")
    for failure in report.failures:
        info(f"{failure.project}: {failure.message}")
    return report


def run_release(
    config: WorkspaceConfig, *, dry_run: bool = False, preid: str | None = None
) -> ReleaseReport:
    """Execute the full release pipeline.

    Args:
        config: The workspace to release.
        dry_run: Compute and report everything, write nothing.
        preid: Prerelease identifier for pre* specifiers.

    Returns:
        The report; ``report.stage`` is DONE on success and FAILED otherwise.
    """
    report = ReleaseReport(dry_run=dry_run)
    step(f"Release mode: {'DRY RUN' if dry_run else 'REAL'}")
    if preid:
        info(f"Prerelease ID: {preid}")

    try:
        plans, planned = load_version_plans(config)
        report.stage = ReleaseStage.PLANS_LOADED
        if not planned:
            info("No projects found in version plans")
            report.stage = ReleaseStage.DONE
            return report

        projects = discover_projects(config)
        tree = StagedTree(config.root)
        report.bumps = resolve_versions(planned, projects, tree, report, preid)
        report.stage = ReleaseStage.VERSIONS_RESOLVED
        if report.failures:
            return _fail(report)

        update_dependents(projects, report.bumps, tree)
        write_manifests(tree, dry_run)
        report.stage = ReleaseStage.MANIFESTS_WRITTEN

        generate_changelogs(config, projects, report.bumps, plans, dry_run)
        report.stage = ReleaseStage.CHANGELOGS_GENERATED

        report.deleted_plans = clear_plans(plans, dry_run)
        report.stage = ReleaseStage.PLANS_CLEARED

        refresh_lockfile(config, dry_run)
        report.stage = ReleaseStage.LOCKFILE_REFRESHED
    except (ReleaseError, OSError) as exc:
        return _fail(report, exc)

    report.stage = ReleaseStage.DONE
    step("Release complete")
    for name, bump in report.bumps.items():
        info(f"{name}: {bump.old} → {bump.new}")
    if dry_run:
        info("This was a DRY RUN - no changes were made")
    return report
