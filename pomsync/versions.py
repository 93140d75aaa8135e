"""Version computation.

Turns a current version plus a bump specifier into the next version. The
arithmetic is delegated to the ``semver`` library; this module only decides
which operation a specifier means and reproduces node-semver's prerelease
conventions (``1.2.3`` + ``prepatch`` with preid ``beta`` → ``1.2.4-beta.0``).
"""

from __future__ import annotations

import semver

from .errors import IncrementFailed, InvalidSpecifier, ParseFailure

RELEASE_KEYWORDS = ("major", "minor", "patch")
PRERELEASE_KEYWORDS = ("premajor", "preminor", "prepatch", "prerelease")
INCREMENT_KEYWORDS = RELEASE_KEYWORDS + PRERELEASE_KEYWORDS


def is_valid_version(version_str: str) -> bool:
    """Strict semver check: MAJOR.MINOR.PATCH[-PRERELEASE][+BUILD]."""
    return semver.Version.is_valid(version_str)


def parse_version(version_str: str) -> semver.Version:
    """Parse a version string into a semver.Version object.

    Unlike manifest reads, which accept whatever text sits inside the
    version tag, this is strict: "1.2" is rejected.

    Raises:
        ParseFailure: If the string is not valid semver.
    """
    try:
        return semver.Version.parse(version_str)
    except (TypeError, ValueError) as exc:
        raise ParseFailure(f"Invalid semantic version {version_str!r}") from exc


def _bump_release(version: semver.Version, part: str) -> semver.Version:
    # A prerelease of the target release is finalised (1.0.0-rc.1 → 1.0.0).
    if version.prerelease and (
        part == "patch"
        or (part == "minor" and version.patch == 0)
        or (part == "major" and version.minor == version.patch == 0)
    ):
        return version.finalize_version()
    return getattr(version, f"bump_{part}")()


def _start_prerelease(preid: str | None) -> str:
    return f"{preid}.0" if preid else "0"


def _bump_prerelease(version: semver.Version, preid: str | None) -> semver.Version:
    if not version.prerelease:
        return version.bump_patch().replace(prerelease=_start_prerelease(preid))

    parts = version.prerelease.split(".")
    if preid and parts[0] != preid:
        # Switching trains (e.g. alpha → beta) restarts the counter.
        return version.replace(prerelease=_start_prerelease(preid), build=None)
    if parts[-1].isdigit():
        parts[-1] = str(int(parts[-1]) + 1)
    else:
        parts.append("0")
    return version.replace(prerelease=".".join(parts), build=None)


def compute_next_version(
    current: str, specifier: str | None, preid: str | None = None
) -> str:
    """Compute the version a project moves to.

    Args:
        current: The version read from the project's manifest.
        specifier: An increment keyword (major, minor, patch, premajor,
            preminor, prepatch, prerelease) or an explicit version. Explicit
            versions are returned as-is. An empty specifier keeps ``current``.
        preid: Prerelease identifier used when starting a prerelease train.

    Examples:
        ("1.0.0", "minor") → "1.1.0"
        ("1.2.3-rc.1", "patch") → "1.2.3"
        ("1.2.3", "premajor", "beta") → "2.0.0-beta.0"
        ("2.0.0-beta.0", "prerelease", "beta") → "2.0.0-beta.1"
        ("1.0.0", "3.1.4") → "3.1.4"

    Raises:
        InvalidSpecifier: If the specifier is neither a keyword nor semver.
        IncrementFailed: If ``current`` is not valid semver.
    """
    if not specifier:
        return current

    if specifier not in INCREMENT_KEYWORDS:
        if is_valid_version(specifier):
            return specifier
        raise InvalidSpecifier(
            f"Invalid version specifier {specifier!r}: expected one of "
            f"{', '.join(INCREMENT_KEYWORDS)} or a semantic version"
        )

    try:
        version = parse_version(current)
    except ParseFailure as exc:
        raise IncrementFailed(
            f"Cannot apply {specifier!r} to {current!r}: not a semantic version"
        ) from exc

    if specifier in RELEASE_KEYWORDS:
        return str(_bump_release(version, specifier))
    if specifier == "prerelease":
        return str(_bump_prerelease(version, preid))

    bumped = getattr(version, f"bump_{specifier[len('pre'):]}")()
    return str(bumped.replace(prerelease=_start_prerelease(preid)))
