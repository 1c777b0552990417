"""Chart tree utilities.

A chart tree is acyclic by construction (children are owned, never
shared), so walking it needs no cycle detection. Paths name each chart by
its position, e.g. "parent/charts/child".
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterator

from .chart import Chart
from .errors import (
    DuplicateDependenciesError,
    MissingDependenciesError,
    UndeclaredDependenciesError,
)


def walk(chart: Chart, prefix: str = "") -> Iterator[tuple[str, Chart]]:
    """Yield (path, chart) for a chart and all its dependencies, parents first."""
    path = f"{prefix}/charts/{chart.name}" if prefix else chart.name
    yield path, chart
    for child in chart.dependencies:
        yield from walk(child, path)


def install_order(chart: Chart) -> list[str]:
    """Chart paths in install order: dependencies before their parents.

    Siblings keep the order they were added in.

    Example:
        parent → [a → [x], b] gives
        ["parent/charts/a/charts/x", "parent/charts/a", "parent/charts/b", "parent"]
    """
    order: list[str] = []

    def visit(node: Chart, path: str) -> None:
        for child in node.dependencies:
            visit(child, f"{path}/charts/{child.name}")
        order.append(path)

    visit(chart, chart.name)
    return order


def check_dependencies(chart: Chart) -> None:
    """Check declared and vendored dependencies agree, for the whole tree.

    Each declared dependency (by alias, else name) must have a matching
    vendored chart, each vendored chart must be declared, and no chart may
    be vendored twice under the same parent.

    Raises:
        MissingDependenciesError: A declared dependency has no vendored chart.
        UndeclaredDependenciesError: A vendored chart is not declared.
        DuplicateDependenciesError: A chart is vendored more than once.
    """
    for _, node in walk(chart):
        vendored = Counter(c.name for c in node.dependencies)
        declared = node.metadata.dependencies

        missing = [d.effective_name for d in declared if d.name not in vendored]
        if missing:
            raise MissingDependenciesError(missing)

        declared_names = {d.name for d in declared}
        undeclared = [name for name in vendored if name not in declared_names]
        if undeclared:
            raise UndeclaredDependenciesError(undeclared)

        duplicates = [name for name, count in vendored.items() if count > 1]
        if duplicates:
            raise DuplicateDependenciesError(duplicates)
