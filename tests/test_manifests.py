"""Tests for pomsync.manifests."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from conftest import ORDERS_POM, write_package_json

from pomsync.errors import (
    ManifestNotFound,
    ParseFailure,
    PatternNotMatched,
    VersionFieldMissing,
    VersionNotFound,
)
from pomsync.manifests import locate_manifest, read_version, write_version
from pomsync.models import Coordinate, ManifestKind
from pomsync.staging import StagedTree

ORDERS = Coordinate(namespace="com.example", name="orders")


class TestLocateManifest:
    def test_pom_takes_precedence(self, orders_pom: Path) -> None:
        write_package_json(orders_pom, "orders", "0.0.1")

        assert locate_manifest(orders_pom).kind is ManifestKind.XML

    def test_package_json(self, tmp_path: Path) -> None:
        write_package_json(tmp_path, "x", "1.0.0")

        location = locate_manifest(tmp_path)

        assert location.kind is ManifestKind.JSON
        assert location.path == tmp_path.resolve() / "package.json"

    def test_no_manifest(self, tmp_path: Path) -> None:
        with pytest.raises(ManifestNotFound):
            locate_manifest(tmp_path)

    def test_sees_staged_files(self, tmp_path: Path) -> None:
        tree = StagedTree(tmp_path)
        tree.write("pom.xml", ORDERS_POM)

        assert locate_manifest(tmp_path, tree).kind is ManifestKind.XML


class TestJsonManifest:
    def test_scenario_read_bump_write(self, tmp_path: Path) -> None:
        (tmp_path / "package.json").write_text('{"name":"x","version":"1.0.0"}')

        assert read_version(tmp_path) == "1.0.0"
        bump = write_version(tmp_path, "1.1.0")

        assert bump.old == "1.0.0"
        assert bump.new == "1.1.0"
        assert read_version(tmp_path) == "1.1.0"
        data = json.loads((tmp_path / "package.json").read_text())
        assert data["name"] == "x"

    def test_write_format(self, tmp_path: Path) -> None:
        (tmp_path / "package.json").write_text(
            '{"name": "x", "version": "1.0.0", "private": true, "description": "café"}'
        )

        write_version(tmp_path, "2.0.0")

        assert (tmp_path / "package.json").read_text(encoding="utf-8") == (
            "{\n"
            '  "name": "x",\n'
            '  "version": "2.0.0",\n'
            '  "private": true,\n'
            '  "description": "café"\n'
            "}\n"
        )

    def test_missing_version_field(self, tmp_path: Path) -> None:
        (tmp_path / "package.json").write_text('{"name": "x"}')

        with pytest.raises(VersionFieldMissing) as excinfo:
            read_version(tmp_path)
        assert "package.json" in str(excinfo.value)

    def test_version_field_missing_is_version_not_found(self, tmp_path: Path) -> None:
        (tmp_path / "package.json").write_text('{"name": "x"}')

        with pytest.raises(VersionNotFound):
            read_version(tmp_path)

    def test_invalid_json(self, tmp_path: Path) -> None:
        (tmp_path / "package.json").write_text("{not json")

        with pytest.raises(ParseFailure) as excinfo:
            read_version(tmp_path)
        assert excinfo.value.path == (tmp_path / "package.json").resolve()

    def test_non_object_json(self, tmp_path: Path) -> None:
        (tmp_path / "package.json").write_text("[1, 2]")

        with pytest.raises(ParseFailure):
            read_version(tmp_path)


class TestXmlManifest:
    def test_read(self, orders_pom: Path) -> None:
        assert read_version(orders_pom, ORDERS) == "1.0.0"

    def test_write_round_trip_confined_to_version(self, orders_pom: Path) -> None:
        write_version(orders_pom, "1.0.1", ORDERS)

        assert read_version(orders_pom, ORDERS) == "1.0.1"
        content = (orders_pom / "pom.xml").read_text()
        assert content == ORDERS_POM.replace(
            "<artifactId>orders</artifactId>\n    <version>1.0.0</version>",
            "<artifactId>orders</artifactId>\n    <version>1.0.1</version>",
        )

    def test_version_not_found_names_coordinate(self, orders_pom: Path) -> None:
        missing = Coordinate(namespace="com.example", name="ghost")

        with pytest.raises(VersionNotFound) as excinfo:
            read_version(orders_pom, missing)
        assert "com.example:ghost" in str(excinfo.value)
        assert "pom.xml" in str(excinfo.value)

    def test_write_pattern_not_matched(self, orders_pom: Path) -> None:
        missing = Coordinate(namespace="com.example", name="ghost")

        with pytest.raises(PatternNotMatched):
            write_version(orders_pom, "2.0.0", missing)
        assert (orders_pom / "pom.xml").read_text() == ORDERS_POM

    def test_write_rescans_changed_manifest(self, orders_pom: Path) -> None:
        """A pom that changed shape after the read is detected at write time."""
        assert read_version(orders_pom, ORDERS) == "1.0.0"
        (orders_pom / "pom.xml").write_text(
            ORDERS_POM.replace("<version>1.0.0</version>\n    <name>", "<name>")
        )

        with pytest.raises(PatternNotMatched):
            write_version(orders_pom, "2.0.0", ORDERS)

    def test_staged_write_leaves_disk(self, orders_pom: Path) -> None:
        tree = StagedTree(orders_pom)

        write_version(orders_pom, "3.0.0", ORDERS, tree)

        assert read_version(orders_pom, ORDERS, tree) == "3.0.0"
        assert read_version(orders_pom, ORDERS) == "1.0.0"
