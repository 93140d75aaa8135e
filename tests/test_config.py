"""Tests for pomsync.config."""

from __future__ import annotations

from pathlib import Path

import pytest
from conftest import write_package_json

from pomsync.config import discover_projects, load_config
from pomsync.errors import ConfigError
from pomsync.models import Coordinate


class TestLoadConfig:
    def test_defaults_without_file(self, tmp_path: Path) -> None:
        config = load_config(tmp_path)

        assert config.root == tmp_path.resolve()
        assert config.project_globs == ["apps/*"]
        assert config.plans_path == tmp_path.resolve() / ".nx" / "version-plans"
        assert config.lockfile_command == ["npm", "install", "--package-lock-only"]
        assert config.names == {}

    def test_reads_dashed_keys(self, tmp_path: Path) -> None:
        (tmp_path / "pomsync.toml").write_text(
            'projects = ["services/*"]\n'
            'plans-dir = "release/plans"\n'
            "lockfile-command = []\n"
            'changelog = "CHANGES.md"\n'
            "\n"
            "[names]\n"
            '"com.example:orders" = "services/orders"\n'
        )

        config = load_config(tmp_path)

        assert config.project_globs == ["services/*"]
        assert config.plans_path == tmp_path.resolve() / "release" / "plans"
        assert config.lockfile_command == []
        assert config.changelog == "CHANGES.md"
        assert config.names == {"com.example:orders": "services/orders"}

    def test_invalid_toml(self, tmp_path: Path) -> None:
        (tmp_path / "pomsync.toml").write_text("projects = [\n")

        with pytest.raises(ConfigError):
            load_config(tmp_path)

    def test_unknown_key(self, tmp_path: Path) -> None:
        (tmp_path / "pomsync.toml").write_text('colour = "blue"\n')

        with pytest.raises(ConfigError):
            load_config(tmp_path)

    def test_wrong_type(self, tmp_path: Path) -> None:
        (tmp_path / "pomsync.toml").write_text('projects = "apps/*"\n')

        with pytest.raises(ConfigError):
            load_config(tmp_path)

    def test_root_not_overridable(self, tmp_path: Path) -> None:
        (tmp_path / "pomsync.toml").write_text('root = "/elsewhere"\n')

        with pytest.raises(ConfigError):
            load_config(tmp_path)


class TestDiscoverProjects:
    def test_explicit_names_and_globs(self, workspace: Path) -> None:
        projects = discover_projects(load_config(workspace))

        assert set(projects) == {
            "com.example:orders",
            "com.example:common",
            "@acme/web",
            "@acme/api",
        }
        orders = projects["com.example:orders"]
        assert orders.root == workspace.resolve() / "apps" / "orders"
        assert orders.coordinate == Coordinate(namespace="com.example", name="orders")
        assert projects["@acme/web"].coordinate is None

    def test_directory_name_fallback(self, tmp_path: Path) -> None:
        (tmp_path / "apps" / "svc").mkdir(parents=True)
        (tmp_path / "apps" / "svc" / "pom.xml").write_text("<project/>")
        write_package_json(tmp_path / "apps" / "unnamed", "", "1.0.0")
        (tmp_path / "apps" / "empty").mkdir()

        projects = discover_projects(load_config(tmp_path))

        assert set(projects) == {"svc", "unnamed"}

    def test_invalid_package_json_falls_back(self, tmp_path: Path) -> None:
        (tmp_path / "apps" / "broken").mkdir(parents=True)
        (tmp_path / "apps" / "broken" / "package.json").write_text("{oops")

        projects = discover_projects(load_config(tmp_path))

        assert set(projects) == {"broken"}
