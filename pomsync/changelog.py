"""Changelog generation.

Each released project gets a new section at the top of its CHANGELOG.md
holding the release notes of every version plan that named it.
"""

from __future__ import annotations

from datetime import date
from pathlib import Path

from .staging import StagedTree

TITLE = "# Changelog"


def today() -> date:
    """The release date in the local timezone of whoever runs the release."""
    return date.today()


def render_entry(version: str, notes: list[str], released: date) -> str:
    lines = [f"## {version} ({released.isoformat()})", ""]
    for note in notes or ["No release notes."]:
        lines.extend([note.strip(), ""])
    return "\n".join(lines)


def prepend_entry(tree: StagedTree, path: Path, entry: str) -> None:
    """Stage ``entry`` as the newest section of the changelog at ``path``.

    A missing changelog is created with a title. An existing ``# Changelog``
    title stays on top.
    """
    existing = tree.read(path)
    if not existing:
        tree.write(path, f"{TITLE}\n\n{entry}")
        return

    if existing.startswith(TITLE):
        title, _, rest = existing.partition("\n")
        tree.write(path, f"{title}\n\n{entry}\n{rest.lstrip()}")
    else:
        tree.write(path, f"{entry}\n{existing}")
