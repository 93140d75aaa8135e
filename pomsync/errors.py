"""Exception taxonomy for pomsync.

Leaf components (manifest reader/writer, plan parser, version computation)
raise these; the release pipeline and ``sync_all`` catch them per project and
keep going, while single-project commands let them abort the run.
"""

from __future__ import annotations

from pathlib import Path


class ReleaseError(RuntimeError):
    """Base class for every failure pomsync reports to the user.

    Attributes:
        path: The offending file or directory, when there is one.
    """

    def __init__(self, message: str, path: Path | str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.path = Path(path) if path is not None else None

    def __str__(self) -> str:
        if self.path is None:
            return self.message
        return f"{self.message} ({self.path})"


class ManifestNotFound(ReleaseError):
    """Neither pom.xml nor package.json exists in a project root."""


class VersionNotFound(ReleaseError):
    """A manifest exists but no version could be located in it."""


class VersionFieldMissing(VersionNotFound):
    """package.json has no string ``version`` field."""


class ParseFailure(ReleaseError):
    """A manifest or version string could not be parsed."""


class PatternNotMatched(ReleaseError):
    """The expected pom.xml structure was absent at write time."""


class InvalidSpecifier(ReleaseError):
    """A bump specifier is neither a known keyword nor a valid version."""


class IncrementFailed(ReleaseError):
    """A semver increment could not be applied to the current version."""


class InvalidCoordinate(ReleaseError):
    """A project name is not in ``groupId:artifactId`` form."""


class PlansNotFound(ReleaseError):
    """The version plans directory does not exist."""


class ConfigError(ReleaseError):
    """pomsync.toml is malformed."""
