"""Staged file writes.

A release computes every manifest change before touching the disk. Writes go
into a :class:`StagedTree` overlay keyed by absolute path; reads check the
overlay first and fall back to the filesystem. Nothing reaches disk until
:meth:`StagedTree.flush`, so a bad specifier or a missing manifest found
halfway through a release leaves the workspace untouched.
"""

from __future__ import annotations

from pathlib import Path

# Marker for a staged deletion.
_DELETED = None


class StagedTree:
    """In-memory write overlay with read-through to the filesystem.

    Args:
        root: Directory that relative paths are resolved against.
    """

    def __init__(self, root: Path) -> None:
        self.root = Path(root).resolve()
        self._staged: dict[Path, str | None] = {}

    def _key(self, path: Path | str) -> Path:
        p = Path(path)
        if not p.is_absolute():
            p = self.root / p
        return p.resolve()

    def read(self, path: Path | str) -> str | None:
        """Return the staged text for path, else the on-disk text, else None."""
        key = self._key(path)
        if key in self._staged:
            return self._staged[key]
        if key.is_file():
            # newline="" keeps CRLF files byte-identical on rewrite.
            with key.open(encoding="utf-8", newline="") as fh:
                return fh.read()
        return None

    def exists(self, path: Path | str) -> bool:
        key = self._key(path)
        if key in self._staged:
            return self._staged[key] is not _DELETED
        return key.is_file()

    def write(self, path: Path | str, content: str) -> None:
        self._staged[self._key(path)] = content

    def delete(self, path: Path | str) -> None:
        self._staged[self._key(path)] = _DELETED

    def is_staged(self, path: Path | str) -> bool:
        return self._key(path) in self._staged

    def changes(self) -> list[Path]:
        """Staged paths, in the order they were first staged."""
        return list(self._staged)

    def flush(self) -> list[Path]:
        """Apply every staged change to disk and clear the overlay.

        Returns:
            The paths written or deleted.
        """
        touched: list[Path] = []
        for path, content in self._staged.items():
            if content is _DELETED:
                path.unlink(missing_ok=True)
            else:
                path.parent.mkdir(parents=True, exist_ok=True)
                path.write_text(content, encoding="utf-8", newline="")
            touched.append(path)
        self._staged.clear()
        return touched

    def discard(self) -> None:
        self._staged.clear()
