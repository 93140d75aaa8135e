"""Version plan parsing.

A version plan is a small markdown file describing one intended change:

    ---
    "com.example:orders": minor
    "@acme/web": patch
    ---

    Orders can now be cancelled from the web UI.

The header between the two ``---`` markers names projects and their bump
specifiers; everything after it is free-text release notes, used only for
changelog generation.
"""

from __future__ import annotations

import re
from pathlib import Path

from .errors import PlansNotFound
from .models import PlanEntry, VersionPlan
from .shell import warn

PLAN_SUFFIX = ".md"

_HEADER_RE = re.compile(
    r"\A---[ \t]*\r?\n(?:(.*?)\r?\n)?---[ \t]*(?:\r?\n|\Z)", re.DOTALL
)
_ENTRY_RE = re.compile(r"""^\s*(['"])([^'"]+)\1\s*:\s*([\w.+-]+)\s*$""")


def parse_plan_text(text: str, path: Path) -> VersionPlan:
    """Parse the contents of one plan file.

    Header lines that don't look like ``"<project>": <specifier>`` are
    skipped silently. A file without a header yields a plan with no entries.
    """
    match = _HEADER_RE.match(text)
    if not match:
        return VersionPlan(path=path, notes=text.strip())

    entries: list[PlanEntry] = []
    for line in (match.group(1) or "").splitlines():
        entry = _ENTRY_RE.match(line)
        if entry:
            entries.append(PlanEntry(project=entry.group(2), specifier=entry.group(3)))

    return VersionPlan(path=path, entries=entries, notes=text[match.end() :].strip())


def read_plan(path: Path) -> VersionPlan:
    return parse_plan_text(path.read_text(encoding="utf-8"), path)


def list_plan_files(directory: Path) -> list[Path]:
    """List the plan files in a directory.

    Files are sorted by name so that merging is reproducible regardless of
    the order the filesystem lists them in.

    Raises:
        PlansNotFound: If the directory does not exist.
    """
    if not directory.is_dir():
        raise PlansNotFound("No version plans directory found", path=directory)
    return sorted(
        (p for p in directory.iterdir() if p.is_file() and p.suffix == PLAN_SUFFIX),
        key=lambda p: p.name,
    )


def load_plans(directory: Path) -> list[VersionPlan]:
    return [read_plan(path) for path in list_plan_files(directory)]


def merge_plans(plans: list[VersionPlan]) -> dict[str, str]:
    """Merge plans into a single project → specifier mapping.

    When two plans disagree about a project, the one processed later wins and
    the override is reported.
    """
    merged: dict[str, str] = {}
    source: dict[str, Path] = {}
    for plan in plans:
        for entry in plan.entries:
            previous = merged.get(entry.project)
            if previous is not None and previous != entry.specifier:
                warn(
                    f"{entry.project}: {entry.specifier} from {plan.path.name} "
                    f"overrides {previous} from {source[entry.project].name}"
                )
            merged[entry.project] = entry.specifier
            source[entry.project] = plan.path
    return merged


def parse_plans(directory: Path) -> dict[str, str]:
    """Read every plan in a directory and merge them.

    Returns:
        Map of project name → bump specifier. Empty if the directory holds no
        plan files.
    """
    return merge_plans(load_plans(directory))


def notes_for(plans: list[VersionPlan], project: str) -> list[str]:
    """Release notes of every plan that names the project."""
    return [
        plan.notes
        for plan in plans
        if plan.notes and any(e.project == project for e in plan.entries)
    ]
