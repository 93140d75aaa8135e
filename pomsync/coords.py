"""Maven coordinate parsing.

Maven projects in the workspace are named ``groupId:artifactId``; the
coordinates are what locate a project's own block (and its dependency
entries) inside pom.xml files that repeat the same tag names many times.
"""

from __future__ import annotations

from .models import Coordinate

DELIMITER = ":"


def parse_coordinate(project_name: str | None) -> Coordinate | None:
    """Split a project name into Maven coordinates.

    Splits on the first ``:``. Returns None rather than raising when the
    delimiter is missing or either half is empty: such a project simply does
    not take part in coordinate-scoped pom.xml handling.

    Examples:
        "com.example:orders" → Coordinate(namespace="com.example", name="orders")
        "@acme/web" → None
        ":orders" → None
    """
    if not project_name or DELIMITER not in project_name:
        return None
    namespace, name = project_name.split(DELIMITER, 1)
    if not namespace or not name:
        return None
    return Coordinate(namespace=namespace, name=name)
