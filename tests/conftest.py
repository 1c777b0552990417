"""Shared test fixtures."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from chart_fixtures.capabilities import APIGroup, APIResource, APIResourceList, GroupVersion
from chart_fixtures.config import load_settings
from chart_fixtures.logging_config import setup_logging
from chart_fixtures.release import Release
from chart_fixtures.stubs import release_stub


@pytest.fixture(scope="session", autouse=True)
def configure_logging():
    """Apply the configured log level for the whole test session."""
    root = logging.getLogger()
    level = root.level
    handler = setup_logging(load_settings().log_level)
    yield handler
    root.removeHandler(handler)
    root.setLevel(level)


class FakeDiscovery:
    """Discovery client returning canned groups and resources, or raising."""

    def __init__(
        self,
        groups: list[APIGroup] | None = None,
        resources: list[APIResourceList] | None = None,
        error: Exception | None = None,
    ) -> None:
        self.groups = groups or []
        self.resources = resources or []
        self.error = error
        self.calls = 0

    def server_groups_and_resources(self) -> tuple[list[APIGroup], list[APIResourceList]]:
        self.calls += 1
        if self.error is not None:
            raise self.error
        return self.groups, self.resources


STANDARD_GROUPS = [
    APIGroup(name="", versions=[GroupVersion(group_version="v1", version="v1")]),
    APIGroup(name="apps", versions=[GroupVersion(group_version="apps/v1", version="v1")]),
]

STANDARD_RESOURCES = [
    APIResourceList(
        group_version="v1",
        resources=[
            APIResource(name="pods", kind="Pod", namespaced=True),
            APIResource(name="configmaps", kind="ConfigMap", namespaced=True),
        ],
    ),
    APIResourceList(
        group_version="apps/v1",
        resources=[
            APIResource(name="deployments", kind="Deployment", namespaced=True),
            APIResource(name="deployments/scale", kind="Scale", namespaced=True),
        ],
    ),
]


@pytest.fixture
def standard_discovery() -> FakeDiscovery:
    """A discovery client that looks like a small, healthy cluster."""
    return FakeDiscovery(groups=list(STANDARD_GROUPS), resources=list(STANDARD_RESOURCES))


@pytest.fixture
def make_discovery():
    """Factory for discovery clients with custom answers."""
    return FakeDiscovery


@pytest.fixture
def release() -> Release:
    return release_stub()


@pytest.fixture
def tmp_pyproject(tmp_path: Path) -> Path:
    """Create a temporary pyproject.toml with a [tool.chart-fixtures] table."""
    content = """\
[project]
name = "test-package"
version = "1.0.0"

[tool.chart-fixtures]
verbose = true
log-level = "debug"
temp-prefix = "custom-prefix"
"""
    pyproject = tmp_path / "pyproject.toml"
    pyproject.write_text(content)
    return pyproject
