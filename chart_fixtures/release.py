"""Release and hook models.

A release is a chart installed with a particular configuration, tracked by
revision and status. Releases and hooks are frozen once constructed.
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime, timezone
from enum import Enum
from types import MappingProxyType
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .chart import Chart


def _freeze(value: Any) -> Any:
    """Read-only copy of nested values: mappings become proxies, lists tuples."""
    if isinstance(value, Mapping):
        return MappingProxyType({k: _freeze(v) for k, v in value.items()})
    if isinstance(value, (list, tuple)):
        return tuple(_freeze(v) for v in value)
    if isinstance(value, (set, frozenset)):
        return frozenset(_freeze(v) for v in value)
    return value


class HookEvent(str, Enum):
    """Lifecycle points at which hooks fire."""

    PRE_INSTALL = "pre-install"
    POST_INSTALL = "post-install"
    PRE_DELETE = "pre-delete"
    POST_DELETE = "post-delete"
    PRE_UPGRADE = "pre-upgrade"
    POST_UPGRADE = "post-upgrade"
    PRE_ROLLBACK = "pre-rollback"
    POST_ROLLBACK = "post-rollback"
    TEST = "test"


class HookDeletePolicy(str, Enum):
    """When a hook's resources are removed."""

    SUCCEEDED = "hook-succeeded"
    FAILED = "hook-failed"
    BEFORE_CREATION = "before-hook-creation"


class Status(str, Enum):
    """Release status."""

    UNKNOWN = "unknown"
    DEPLOYED = "deployed"
    UNINSTALLED = "uninstalled"
    SUPERSEDED = "superseded"
    FAILED = "failed"
    UNINSTALLING = "uninstalling"
    PENDING_INSTALL = "pending-install"
    PENDING_UPGRADE = "pending-upgrade"
    PENDING_ROLLBACK = "pending-rollback"

    def is_pending(self) -> bool:
        """Whether an operation on the release is still in flight."""
        return self in (Status.PENDING_INSTALL, Status.PENDING_UPGRADE, Status.PENDING_ROLLBACK)


class Hook(BaseModel):
    """A manifest applied at one or more lifecycle events.

    Attributes:
        name: Resource name of the hook.
        kind: Kubernetes kind (e.g., "ConfigMap", "Pod").
        path: Template path the hook came from.
        manifest: Raw manifest text, kept verbatim.
        events: Lifecycle events the hook fires on. Never empty; a hook may
                fire at several points.
        weight: Ordering among hooks firing on the same event.
        delete_policies: When the hook's resources are deleted.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    kind: str
    path: str
    manifest: str
    events: tuple[HookEvent, ...] = Field(min_length=1)
    weight: int = 0
    delete_policies: tuple[HookDeletePolicy, ...] = ()

    @field_validator("events")
    @classmethod
    def _unique_events(cls, events: tuple[HookEvent, ...]) -> tuple[HookEvent, ...]:
        if len(set(events)) != len(events):
            raise ValueError("hook events must not repeat")
        return events

    def fires_on(self, event: HookEvent) -> bool:
        return event in self.events


class Info(BaseModel):
    """Deployment bookkeeping for a release."""

    model_config = ConfigDict(frozen=True)

    first_deployed: datetime
    last_deployed: datetime
    deleted: datetime | None = None
    status: Status = Status.UNKNOWN
    description: str = ""
    notes: str = ""

    @field_validator("first_deployed", "last_deployed", "deleted")
    @classmethod
    def _as_utc(cls, value: datetime | None) -> datetime | None:
        # Naive timestamps are taken to be UTC
        if value is None:
            return None
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)

    @model_validator(mode="after")
    def _deploy_order(self) -> Info:
        if self.first_deployed > self.last_deployed:
            raise ValueError("first_deployed must not be after last_deployed")
        return self


class Release(BaseModel):
    """A chart deployed with a specific configuration.

    Attributes:
        name: Release name, unique per namespace.
        namespace: Namespace the release lives in.
        info: Timestamps, status and description.
        chart: The chart tree the release was built from. Passed in as
               ``chart``; the release keeps its own copy and hands out a
               fresh copy on every access.
        config: Values supplied for this release, read-only.
        manifest: Rendered manifest (empty for stubs).
        version: Revision number, starting at 1.
        hooks: Hooks extracted from the chart.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str
    namespace: str = "default"
    info: Info
    chart_snapshot: Chart = Field(alias="chart")
    config: Mapping[str, Any] = Field(default_factory=dict, validate_default=True)
    manifest: str = ""
    version: int = Field(default=1, ge=1)
    hooks: tuple[Hook, ...] = ()

    @field_validator("chart_snapshot")
    @classmethod
    def _own_chart(cls, chart: Chart) -> Chart:
        return chart.model_copy(deep=True)

    @field_validator("config")
    @classmethod
    def _own_config(cls, config: Mapping[str, Any]) -> Mapping[str, Any]:
        return _freeze(config)

    @property
    def chart(self) -> Chart:
        return self.chart_snapshot.model_copy(deep=True)

    def hooks_for(self, event: HookEvent) -> list[Hook]:
        """Hooks registered under an event, in declaration order."""
        return [h for h in self.hooks if h.fires_on(event)]
