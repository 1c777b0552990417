"""Exception types for chart-fixtures.

Everything raised on purpose derives from ChartFixturesError so callers can
catch the whole family in one place.
"""

from __future__ import annotations


class ChartFixturesError(Exception):
    """Base class for all chart-fixtures errors."""


class ConfigError(ChartFixturesError):
    """Raised when settings are malformed."""


class FixtureSetupError(ChartFixturesError):
    """Raised when a collaborator (temp dir, cache, client) cannot be built."""


class DiscoveryError(ChartFixturesError):
    """Raised when the cluster discovery call fails."""


class GroupDiscoveryFailedError(DiscoveryError):
    """Some API groups could not be discovered.

    Carries whatever the discovery call did manage to return, so callers
    can keep going with a partial answer.

    Attributes:
        groups: API groups that were discovered.
        resources: Resource lists that were discovered.
        failed: Map of group/version → error message for each failed group.
    """

    def __init__(self, groups=None, resources=None, failed: dict[str, str] | None = None):
        self.groups = list(groups or [])
        self.resources = list(resources or [])
        self.failed = dict(failed or {})
        names = ", ".join(sorted(self.failed)) or "<unknown>"
        super().__init__(f"unable to retrieve the complete list of server APIs: {names}")


class ChartValidationError(ChartFixturesError):
    """Raised when chart metadata is invalid."""


class InvalidConstraintError(ChartFixturesError):
    """Raised when a version constraint string cannot be parsed."""


class IncompatibleKubeVersionError(ChartFixturesError):
    """Raised when a chart's kube_version excludes the cluster version."""


class MissingDependenciesError(ChartFixturesError):
    """Declared dependencies have no vendored chart."""

    def __init__(self, missing: list[str]):
        self.missing = missing
        super().__init__(
            "found in Chart.yaml, but missing in charts/ directory: " + ", ".join(missing)
        )


class UndeclaredDependenciesError(ChartFixturesError):
    """Vendored charts have no matching declaration in the parent metadata."""

    def __init__(self, undeclared: list[str]):
        self.undeclared = undeclared
        super().__init__(
            "found in charts/ directory, but not declared in Chart.yaml: "
            + ", ".join(undeclared)
        )


class DuplicateDependenciesError(ChartFixturesError):
    """The same chart is vendored more than once under one parent."""

    def __init__(self, duplicates: list[str]):
        self.duplicates = duplicates
        super().__init__(
            "found more than once in charts/ directory: " + ", ".join(duplicates)
        )


class ReleaseExistsError(ChartFixturesError):
    """Raised when storing a release whose key is already taken."""


class ReleaseNotFoundError(ChartFixturesError):
    """Raised when a release lookup finds nothing."""
