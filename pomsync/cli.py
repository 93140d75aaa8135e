"""CLI entry point for pomsync."""

from __future__ import annotations

from pathlib import Path

import click

from pomsync.config import WorkspaceConfig, load_config
from pomsync.errors import ReleaseError
from pomsync.models import ReleaseReport, SyncSummary
from pomsync.pipeline import run_release
from pomsync.plans import parse_plans
from pomsync.sync import preview as preview_drift
from pomsync.sync import sync_all, sync_project


def _config(ctx: click.Context) -> WorkspaceConfig:
    try:
        return load_config(ctx.obj["root"])
    except ReleaseError as exc:
        raise click.ClickException(str(exc)) from exc


def _exit_on_failures(report: ReleaseReport | None, summary: SyncSummary | None) -> None:
    if (report is not None and not report.ok) or (summary is not None and summary.failures):
        raise SystemExit(1)


@click.group()
@click.version_option(package_name="pomsync")
@click.option(
    "--root",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=".",
    show_default=True,
    help="Workspace root.",
)
@click.pass_context
def cli(ctx: click.Context, root: Path) -> None:
    """Keep pom.xml and package.json versions in step across a monorepo."""
    ctx.ensure_object(dict)
    ctx.obj["root"] = root


@cli.command()
@click.option("--dry-run", is_flag=True, help="Report every decision, write nothing.")
@click.option("--preid", default=None, help="Prerelease identifier (e.g. beta).")
@click.pass_context
def release(ctx: click.Context, dry_run: bool, preid: str | None) -> None:
    """Apply version plans: bump manifests, write changelogs, delete plans."""
    report = run_release(_config(ctx), dry_run=dry_run, preid=preid)
    _exit_on_failures(report, None)


@cli.command()
@click.option("--preid", default=None, help="Prerelease identifier (e.g. beta).")
@click.pass_context
def preview(ctx: click.Context, preid: str | None) -> None:
    """Show what a release would change, including pom.xml drift."""
    config = _config(ctx)
    report = None
    if config.plans_path.is_dir():
        report = run_release(config, dry_run=True, preid=preid)
    else:
        click.echo(f"No version plans directory at {config.plans_dir}")

    summary = preview_drift(config)
    drifted = [result for result in summary.synced if result.changed]
    click.echo()
    if drifted:
        click.echo("pom.xml files out of sync with package.json:")
        for result in drifted:
            click.echo(f"  {result.project}: {result.pom_version} → {result.package_version}")
    else:
        click.echo("All pom.xml files are already in sync")
    _exit_on_failures(report, summary)


@cli.command()
@click.pass_context
def plans(ctx: click.Context) -> None:
    """Print the merged version plans."""
    config = _config(ctx)
    try:
        merged = parse_plans(config.plans_path)
    except ReleaseError as exc:
        raise click.ClickException(str(exc)) from exc

    if not merged:
        click.echo("No projects found in version plans")
    for name, specifier in merged.items():
        click.echo(f"{name}: {specifier}")


@cli.command()
@click.argument(
    "package_json", type=click.Path(exists=True, dir_okay=False, path_type=Path)
)
@click.option("--dry-run", is_flag=True, help="Report the change, write nothing.")
def sync(package_json: Path, dry_run: bool) -> None:
    """Sync the pom.xml next to PACKAGE_JSON to its version."""
    try:
        sync_project(package_json.parent, dry_run=dry_run)
    except ReleaseError as exc:
        raise click.ClickException(str(exc)) from exc


@cli.command("sync-all")
@click.option("--dry-run", is_flag=True, help="Report changes, write nothing.")
@click.pass_context
def sync_all_command(ctx: click.Context, dry_run: bool) -> None:
    """Sync every project's pom.xml to its package.json version."""
    summary = sync_all(_config(ctx), dry_run=dry_run)
    _exit_on_failures(None, summary)
