"""Ready-made releases for tests.

Everything except the name and status is a fixed constant so tests get
reproducible fixtures.
"""

from __future__ import annotations

from datetime import datetime, timezone

from .builder import build_chart, with_sample_templates
from .manifests import MANIFEST_WITH_HOOK, MANIFEST_WITH_TEST_HOOK
from .release import Hook, HookEvent, Info, Release, Status

DEFAULT_RELEASE_NAME = "angry-panda"


def release_stub() -> Release:
    """A deployed release stub, complete with a sample chart."""
    return named_release_stub(DEFAULT_RELEASE_NAME, Status.DEPLOYED)


def named_release_stub(name: str, status: Status) -> Release:
    """Build a release stub with the given name and status.

    Both deploy timestamps are the same instant. The release carries two
    hooks: a ConfigMap firing on post-install and pre-delete, and a Pod
    firing on test.
    """
    now = datetime.now(timezone.utc)
    return Release(
        name=name,
        info=Info(
            first_deployed=now,
            last_deployed=now,
            status=status,
            description="Named Release Stub",
        ),
        chart=build_chart(with_sample_templates()),
        config={"name": "value"},
        version=1,
        hooks=(
            Hook(
                name="test-cm",
                kind="ConfigMap",
                path="test-cm",
                manifest=MANIFEST_WITH_HOOK,
                events=(HookEvent.POST_INSTALL, HookEvent.PRE_DELETE),
            ),
            Hook(
                name="finding-nemo",
                kind="Pod",
                path="finding-nemo",
                manifest=MANIFEST_WITH_TEST_HOOK,
                events=(HookEvent.TEST,),
            ),
        ),
    )
