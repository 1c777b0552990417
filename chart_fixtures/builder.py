"""Composable chart construction.

build_chart() seeds a small chart and applies option callables in order.
Each option edits one aspect of the chart under construction:

    chart = build_chart(
        with_name("parent"),
        with_sample_values(),
        with_dependency(with_name("child")),
    )

Every call builds a brand-new tree. Values handed to options are copied
when the option is applied, so two charts built from the same options
never share state.
"""

from __future__ import annotations

import copy
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from .chart import Chart, Dependency, File, Metadata
from .manifests import MANIFEST_WITH_HOOK, RBAC_MANIFESTS

DEFAULT_NAME = "hello"
DEFAULT_VERSION = "0.1.0"


@dataclass
class ChartOptions:
    """The chart being assembled by build_chart()."""

    chart: Chart


ChartOption = Callable[[ChartOptions], None]


def _seed_chart() -> Chart:
    return Chart(
        metadata=Metadata(api_version="v1", name=DEFAULT_NAME, version=DEFAULT_VERSION),
        # A basic template plus one carrying hooks
        templates=[
            File(name="templates/hello", data=b"hello: world"),
            File(name="templates/hooks", data=MANIFEST_WITH_HOOK.encode()),
        ],
    )


def build_chart(*opts: ChartOption) -> Chart:
    """Build a chart, applying each option in turn."""
    c = ChartOptions(chart=_seed_chart())
    for opt in opts:
        opt(c)
    return c.chart


def with_name(name: str) -> ChartOption:
    def apply(opts: ChartOptions) -> None:
        opts.chart.metadata.name = name

    return apply


SAMPLE_VALUES: dict[str, Any] = {
    "someKey": "someValue",
    "nestedKey": {
        "simpleKey": "simpleValue",
        "anotherNestedKey": {
            "yetAnotherNestedKey": {
                "youReadyForAnotherNestedKey": "No",
            },
        },
    },
}


def with_sample_values() -> ChartOption:
    return with_values(SAMPLE_VALUES)


def with_values(values: dict[str, Any]) -> ChartOption:
    """Replace the chart's values wholesale."""

    def apply(opts: ChartOptions) -> None:
        opts.chart.values = copy.deepcopy(values)

    return apply


def with_notes(notes: str) -> ChartOption:
    """Add a NOTES.txt template holding the given text."""

    def apply(opts: ChartOptions) -> None:
        opts.chart.templates.append(File(name="templates/NOTES.txt", data=notes.encode()))

    return apply


def with_dependency(*dependency_opts: ChartOption) -> ChartOption:
    """Vendor a subchart built from its own, independent option list."""

    def apply(opts: ChartOptions) -> None:
        opts.chart.add_dependency(build_chart(*dependency_opts))

    return apply


def with_metadata_dependency(dependency: Dependency) -> ChartOption:
    """Declare a dependency without vendoring a chart for it."""

    def apply(opts: ChartOptions) -> None:
        opts.chart.metadata.dependencies.append(dependency.model_copy(deep=True))

    return apply


def with_sample_templates() -> ChartOption:
    """Add plain templates plus a template that pulls in a partial."""

    def apply(opts: ChartOptions) -> None:
        opts.chart.templates.extend(
            [
                File(name="templates/goodbye", data=b"goodbye: world"),
                File(name="templates/empty", data=b""),
                File(name="templates/with-partials", data=b'hello: {{ template "_planet" . }}'),
                File(name="templates/partials/_planet", data=b'{{define "_planet"}}Earth{{end}}'),
            ]
        )

    return apply


def with_multiple_manifest_template() -> ChartOption:
    """Add a template holding two YAML documents."""

    def apply(opts: ChartOptions) -> None:
        opts.chart.templates.append(File(name="templates/rbac", data=RBAC_MANIFESTS.encode()))

    return apply


def with_kube(version: str) -> ChartOption:
    """Set the chart's kube_version constraint."""

    def apply(opts: ChartOptions) -> None:
        opts.chart.metadata.kube_version = version

    return apply
