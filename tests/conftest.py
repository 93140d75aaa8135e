"""Shared test fixtures."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

ORDERS_POM = """\
<?xml version="1.0" encoding="UTF-8"?>
<project xmlns="http://maven.apache.org/POM/4.0.0">
    <modelVersion>4.0.0</modelVersion>

    <parent>
        <groupId>org.springframework.boot</groupId>
        <artifactId>spring-boot-starter-parent</artifactId>
        <version>3.2.0</version>
        <relativePath/>
    </parent>

    <groupId>com.example</groupId>
    <artifactId>orders</artifactId>
    <version>1.0.0</version>
    <name>orders</name>

    <dependencies>
        <dependency>
            <groupId>com.example</groupId>
            <artifactId>common</artifactId>
            <version>1.0.0</version>
        </dependency>
        <dependency>
            <groupId>com.example</groupId>
            <artifactId>billing</artifactId>
        </dependency>
        <dependency>
            <groupId>org.springframework.boot</groupId>
            <artifactId>spring-boot-starter-web</artifactId>
        </dependency>
    </dependencies>
</project>
"""

COMMON_POM = """\
<?xml version="1.0" encoding="UTF-8"?>
<project xmlns="http://maven.apache.org/POM/4.0.0">
    <modelVersion>4.0.0</modelVersion>
    <groupId>com.example</groupId>
    <artifactId>common</artifactId>
    <version>1.0.0</version>
    <packaging>jar</packaging>
</project>
"""

API_POM = """\
<?xml version="1.0" encoding="UTF-8"?>
<project xmlns="http://maven.apache.org/POM/4.0.0">
    <modelVersion>4.0.0</modelVersion>
    <groupId>com.example</groupId>
    <artifactId>api</artifactId>
    <version>0.9.0</version>
</project>
"""

FEATURE_PLAN = """\
---
"com.example:common": minor
"@acme/web": patch
---

Shared DTOs gained a currency field.
"""


def write_package_json(project_dir: Path, name: str, version: str) -> Path:
    project_dir.mkdir(parents=True, exist_ok=True)
    path = project_dir / "package.json"
    path.write_text(json.dumps({"name": name, "version": version}, indent=2) + "\n")
    return path


@pytest.fixture
def orders_pom(tmp_path: Path) -> Path:
    """A project directory holding the orders pom.xml."""
    project = tmp_path / "orders"
    project.mkdir()
    (project / "pom.xml").write_text(ORDERS_POM)
    return project


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    """A workspace with two Maven projects, a JS project and one version plan.

    - apps/orders: com.example:orders 1.0.0, depends on common 1.0.0
    - apps/common: com.example:common 1.0.0
    - apps/web: @acme/web 0.3.0 (package.json only)
    - apps/api: @acme/api 1.0.0 in package.json, 0.9.0 in pom.xml
    """
    (tmp_path / "pomsync.toml").write_text(
        'projects = ["apps/*"]\n'
        "\n"
        "[names]\n"
        '"com.example:orders" = "apps/orders"\n'
        '"com.example:common" = "apps/common"\n'
    )
    apps = tmp_path / "apps"
    (apps / "orders").mkdir(parents=True)
    (apps / "orders" / "pom.xml").write_text(ORDERS_POM)
    (apps / "common").mkdir()
    (apps / "common" / "pom.xml").write_text(COMMON_POM)
    write_package_json(apps / "web", "@acme/web", "0.3.0")
    write_package_json(apps / "api", "@acme/api", "1.0.0")
    (apps / "api" / "pom.xml").write_text(API_POM)

    plans = tmp_path / ".nx" / "version-plans"
    plans.mkdir(parents=True)
    (plans / "feature.md").write_text(FEATURE_PLAN)
    return tmp_path
