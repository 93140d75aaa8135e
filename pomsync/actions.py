"""Maven version actions.

Adapter for release frameworks that resolve versions per project through a
"version actions" extension point. It lets such a framework treat pom.xml as
a project's source manifest without requiring a package.json. Projects must
be named ``groupId:artifactId``.

All reads and writes go through a :class:`~pomsync.staging.StagedTree`, so the
caller decides when changes reach disk.
"""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path

from . import pom
from .coords import parse_coordinate
from .errors import InvalidCoordinate, ManifestNotFound, PatternNotMatched, VersionNotFound
from .models import Coordinate, ManifestKind, ProjectInfo
from .staging import StagedTree

REGISTRY_NOT_SUPPORTED = "maven:registry-not-supported"
DEPENDENCY_COLLECTION = "dependencies"


class MavenVersionActions:
    """Version actions for one Maven project.

    Args:
        project: The project being versioned.
        manifests_to_update: pom.xml files to rewrite. Defaults to the
            project's own pom.xml.
    """

    valid_manifest_filenames = (ManifestKind.XML.value,)

    def __init__(
        self, project: ProjectInfo, manifests_to_update: list[Path] | None = None
    ) -> None:
        self.project = project
        self.manifest_path = project.root / ManifestKind.XML.value
        self.manifests_to_update = manifests_to_update or [self.manifest_path]

    def _coordinate(self) -> Coordinate:
        coordinate = self.project.coordinate or parse_coordinate(self.project.name)
        if coordinate is None:
            raise InvalidCoordinate(
                f'Unable to determine Maven coordinates for project "{self.project.name}". '
                'Expected project name in the form "groupId:artifactId".'
            )
        return coordinate

    def read_current_version_from_source_manifest(
        self, tree: StagedTree
    ) -> tuple[Path, str]:
        """Read the project's own version from its pom.xml.

        Returns:
            Tuple of (manifest path, current version).
        """
        xml = tree.read(self.manifest_path)
        if xml is None:
            raise ManifestNotFound(
                f'Unable to determine the current version for project "{self.project.name}"',
                path=self.manifest_path,
            )

        coordinate = self._coordinate()
        version = pom.read_project_version(xml, coordinate)
        if version is None:
            raise VersionNotFound(
                f"Version tag not found for coordinate {coordinate}. Ensure the POM "
                "declares <groupId>, <artifactId>, and an explicit <version>.",
                path=self.manifest_path,
            )
        return self.manifest_path, version

    def read_current_version_from_registry(self) -> tuple[None, str]:
        # Maven registries are not consulted.
        return None, REGISTRY_NOT_SUPPORTED

    def read_current_version_of_dependency(
        self, tree: StagedTree, dependency_name: str
    ) -> tuple[str | None, str | None]:
        """Read the version this project's pom.xml declares for a dependency.

        Returns:
            Tuple of (declared version, dependency collection). Both are None
            when the dependency name has no coordinates or the pom is missing.
        """
        coordinate = parse_coordinate(dependency_name)
        if coordinate is None:
            return None, None
        xml = tree.read(self.manifest_path)
        if xml is None:
            return None, None
        return pom.read_dependency_version(xml, coordinate), DEPENDENCY_COLLECTION

    def update_project_version(self, tree: StagedTree, new_version: str) -> list[str]:
        """Stage the project's new version in every manifest to update.

        Returns:
            Log messages describing the writes.
        """
        coordinate = self._coordinate()
        messages: list[str] = []
        for path in self.manifests_to_update:
            xml = tree.read(path)
            if xml is None:
                raise ManifestNotFound("Unable to read manifest", path=path)

            updated = pom.update_project_version(xml, coordinate, new_version)
            if updated is None:
                raise PatternNotMatched(
                    f'Unable to update project version for "{self.project.name}": '
                    f"version tag not found for coordinate {coordinate}",
                    path=path,
                )
            tree.write(path, updated)
            messages.append(f"New version {new_version} written to manifest: {path}")
        return messages

    def update_project_dependencies(
        self, tree: StagedTree, dependencies_to_update: Mapping[str, str]
    ) -> list[str]:
        """Stage new versions for dependencies declared with explicit versions.

        Dependencies without a ``<version>`` (managed elsewhere) and names
        without coordinates are left alone.

        Args:
            tree: Staged writes.
            dependencies_to_update: Map of dependency project name → new version.

        Returns:
            Log messages describing the writes.
        """
        if not dependencies_to_update:
            return []

        messages: list[str] = []
        for path in self.manifests_to_update:
            xml = tree.read(path)
            if xml is None:
                raise ManifestNotFound("Unable to read manifest", path=path)

            updated_count = 0
            for dependency_name, new_version in dependencies_to_update.items():
                coordinate = parse_coordinate(dependency_name)
                if coordinate is None:
                    continue
                result = pom.update_dependency_version(xml, coordinate, new_version)
                if result.status is pom.DependencyStatus.UPDATED:
                    xml = result.text
                    updated_count += 1

            if updated_count:
                tree.write(path, xml)
                noun = "dependency" if updated_count == 1 else "dependencies"
                messages.append(f"Updated {updated_count} {noun} in manifest: {path}")
        return messages
