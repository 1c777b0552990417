"""Cluster capabilities: Kubernetes version and supported API versions.

get_version_set() asks a discovery client which API group/versions (and
kinds within them) a cluster serves. The discovery client is anything with
a server_groups_and_resources() method; how it talks to the cluster is its
own business.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from typing import Protocol

from pydantic import BaseModel, ConfigDict, Field

from .errors import DiscoveryError, GroupDiscoveryFailedError

logger = logging.getLogger(__name__)


class GroupVersion(BaseModel):
    """One served version of an API group (e.g., "apps/v1")."""

    group_version: str
    version: str = ""


class APIGroup(BaseModel):
    """An API group and the versions the server offers for it."""

    name: str = ""
    versions: list[GroupVersion] = Field(default_factory=list)


class APIResource(BaseModel):
    name: str
    kind: str
    namespaced: bool = False


class APIResourceList(BaseModel):
    """Resources served under a single group/version."""

    group_version: str
    resources: list[APIResource] = Field(default_factory=list)


class DiscoveryInterface(Protocol):
    """What get_version_set() needs from a cluster discovery client."""

    def server_groups_and_resources(self) -> tuple[list[APIGroup], list[APIResourceList]]: ...


class VersionSet:
    """An immutable set of API version strings, queried by membership."""

    __slots__ = ("_versions",)

    def __init__(self, versions: Iterable[str] = ()) -> None:
        self._versions = frozenset(versions)

    def has(self, version: str) -> bool:
        """Check whether the cluster serves an API version."""
        return version in self._versions

    def __contains__(self, version: object) -> bool:
        return version in self._versions

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self._versions))

    def __len__(self) -> int:
        return len(self._versions)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, VersionSet):
            return NotImplemented
        return self._versions == other._versions

    def __hash__(self) -> int:
        return hash(self._versions)

    def __repr__(self) -> str:
        return f"VersionSet({sorted(self._versions)!r})"


DEFAULT_API_VERSIONS = (
    "v1",
    "admissionregistration.k8s.io/v1",
    "apiextensions.k8s.io/v1",
    "apps/v1",
    "autoscaling/v1",
    "autoscaling/v2beta2",
    "batch/v1",
    "batch/v1beta1",
    "certificates.k8s.io/v1",
    "coordination.k8s.io/v1",
    "networking.k8s.io/v1",
    "policy/v1beta1",
    "rbac.authorization.k8s.io/v1",
    "scheduling.k8s.io/v1",
    "storage.k8s.io/v1",
)


class KubeVersion(BaseModel):
    """The Kubernetes version of a cluster."""

    version: str = "v1.20.0"
    major: str = "1"
    minor: str = "20"

    def __str__(self) -> str:
        return self.version


class Capabilities(BaseModel):
    """What a target cluster supports."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    kube_version: KubeVersion = Field(default_factory=KubeVersion)
    api_versions: VersionSet = Field(default_factory=lambda: VersionSet(DEFAULT_API_VERSIONS))


def default_capabilities() -> Capabilities:
    """A fresh set of default capabilities (Kubernetes v1.20.0)."""
    return Capabilities()


def _collect(groups: list[APIGroup], resources: list[APIResourceList]) -> VersionSet:
    versions: set[str] = set()
    for group in groups:
        for gv in group.versions:
            versions.add(gv.group_version)
    # A kind can be listed more than once under a group/version
    for resource_list in resources:
        for resource in resource_list.resources:
            versions.add(f"{resource_list.group_version}/{resource.kind}")
    return VersionSet(versions)


def get_version_set(client: DiscoveryInterface) -> VersionSet:
    """Build the set of API versions a cluster serves.

    The set holds every served group/version ("v1", "apps/v1") plus every
    group/version/kind ("apps/v1/Deployment"). If only some groups failed
    discovery, the partial answer is used.

    Raises:
        DiscoveryError: If the discovery call fails outright.
    """
    try:
        groups, resources = client.server_groups_and_resources()
    except GroupDiscoveryFailedError as e:
        logger.warning("Partial API discovery, skipping groups: %s", ", ".join(sorted(e.failed)))
        groups, resources = e.groups, e.resources
    except DiscoveryError:
        raise
    except Exception as e:
        raise DiscoveryError(f"could not get apiVersions from Kubernetes: {e}") from e

    version_set = _collect(groups or [], resources or [])
    logger.debug("Discovered %d API versions", len(version_set))
    return version_set
