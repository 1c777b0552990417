"""Chart data models.

A chart is a named, versioned package of raw template files plus default
values. Charts nest: a chart's resolved dependencies are themselves charts,
and its metadata separately lists the dependencies it declares.
"""

from __future__ import annotations

from typing import Any

import semver
from pydantic import BaseModel, Field

from .errors import ChartValidationError, InvalidConstraintError
from .versions import parse_constraint

API_VERSION_V1 = "v1"
API_VERSION_V2 = "v2"


class File(BaseModel):
    """A file carried by a chart.

    Attributes:
        name: Path relative to the chart root (e.g., "templates/hello").
        data: Raw, unrendered file content.
    """

    name: str
    data: bytes = b""


class Dependency(BaseModel):
    """A dependency declared in chart metadata.

    Declaring a dependency does not vendor it; the resolved chart lives in
    Chart.dependencies and may be absent.

    Attributes:
        name: Name of the depended-on chart.
        version: Version range the parent accepts (may be empty).
        repository: Where the chart can be fetched from.
        condition: Values path that toggles the dependency.
        tags: Tags used to toggle groups of dependencies.
        enabled: Whether the dependency is switched on.
        alias: Name the dependency is installed under, if not its own.
        import_values: Values to import from the child into the parent.
    """

    name: str
    version: str = ""
    repository: str = ""
    condition: str = ""
    tags: list[str] = Field(default_factory=list)
    enabled: bool = False
    alias: str = ""
    import_values: list[Any] = Field(default_factory=list)

    @property
    def effective_name(self) -> str:
        """The name the dependency is installed under."""
        return self.alias or self.name


class Metadata(BaseModel):
    """Identity and declared dependencies of a chart (Chart.yaml)."""

    api_version: str = API_VERSION_V1
    name: str
    version: str
    kube_version: str = ""
    description: str = ""
    app_version: str = ""
    dependencies: list[Dependency] = Field(default_factory=list)

    def check(self) -> None:
        """Check the metadata is well formed.

        Raises:
            ChartValidationError: On the first problem found.
        """
        if self.api_version not in (API_VERSION_V1, API_VERSION_V2):
            raise ChartValidationError(f"chart.metadata.apiVersion {self.api_version!r} is invalid")
        if not self.name:
            raise ChartValidationError("chart.metadata.name is required")
        if not self.version:
            raise ChartValidationError("chart.metadata.version is required")
        # Chart versions must be strict semver, unlike kube versions
        if not semver.Version.is_valid(self.version):
            raise ChartValidationError(
                f"chart.metadata.version {self.version!r} is invalid semver"
            )
        if self.kube_version:
            try:
                parse_constraint(self.kube_version)
            except InvalidConstraintError as e:
                raise ChartValidationError(
                    f"chart.metadata.kubeVersion {self.kube_version!r} is invalid"
                ) from e
        for dep in self.dependencies:
            if not dep.name:
                raise ChartValidationError("dependencies must have a name")


class Chart(BaseModel):
    """A chart and its resolved dependency tree.

    Attributes:
        metadata: Chart identity and declared dependencies.
        templates: Template files, in the order they were added.
        values: Default configuration. Arbitrarily nested; no schema.
        files: Non-template files (README, LICENSE, ...).
        dependencies: Resolved child charts, owned by this chart.
    """

    metadata: Metadata
    templates: list[File] = Field(default_factory=list)
    values: dict[str, Any] = Field(default_factory=dict)
    files: list[File] = Field(default_factory=list)
    dependencies: list[Chart] = Field(default_factory=list)

    @property
    def name(self) -> str:
        return self.metadata.name

    def add_dependency(self, *charts: Chart) -> None:
        """Append resolved child charts."""
        self.dependencies.extend(charts)

    def template(self, name: str) -> File | None:
        """Look up a template by path."""
        for f in self.templates:
            if f.name == name:
                return f
        return None

    def check(self) -> None:
        """Validate this chart and every chart beneath it.

        Raises:
            ChartValidationError: If any metadata in the tree is invalid.
        """
        self.metadata.check()
        for child in self.dependencies:
            child.check()
