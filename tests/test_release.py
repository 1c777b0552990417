"""Tests for chart_fixtures.release."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from chart_fixtures.builder import build_chart
from chart_fixtures.release import Hook, HookDeletePolicy, HookEvent, Info, Release, Status

NOW = datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


def _hook(name: str, *events: HookEvent) -> Hook:
    return Hook(name=name, kind="ConfigMap", path=name, manifest="kind: ConfigMap", events=events)


class TestHookEvent:
    def test_values(self) -> None:
        assert HookEvent("post-install") is HookEvent.POST_INSTALL
        assert HookEvent("test") is HookEvent.TEST

    def test_closed_set(self) -> None:
        with pytest.raises(ValueError):
            HookEvent("whenever")


class TestHook:
    def test_multiple_events(self) -> None:
        hook = _hook("cm", HookEvent.POST_INSTALL, HookEvent.PRE_DELETE)
        assert hook.events == (HookEvent.POST_INSTALL, HookEvent.PRE_DELETE)
        assert hook.fires_on(HookEvent.PRE_DELETE)
        assert not hook.fires_on(HookEvent.TEST)

    def test_events_parsed_from_strings(self) -> None:
        hook = Hook(name="h", kind="Pod", path="h", manifest="", events=["test"])
        assert hook.events == (HookEvent.TEST,)

    def test_events_must_not_be_empty(self) -> None:
        with pytest.raises(ValidationError):
            _hook("cm")

    def test_events_must_not_repeat(self) -> None:
        with pytest.raises(ValidationError, match="must not repeat"):
            _hook("cm", HookEvent.TEST, HookEvent.TEST)

    def test_defaults(self) -> None:
        hook = _hook("cm", HookEvent.TEST)
        assert hook.weight == 0
        assert hook.delete_policies == ()

    def test_delete_policies(self) -> None:
        hook = Hook(
            name="h",
            kind="Job",
            path="h",
            manifest="",
            events=[HookEvent.PRE_UPGRADE],
            delete_policies=["before-hook-creation"],
        )
        assert hook.delete_policies == (HookDeletePolicy.BEFORE_CREATION,)

    def test_frozen(self) -> None:
        hook = _hook("cm", HookEvent.TEST)
        with pytest.raises(ValidationError):
            hook.name = "other"


class TestStatus:
    def test_admits_full_set(self) -> None:
        assert {s.value for s in Status} == {
            "unknown",
            "deployed",
            "uninstalled",
            "superseded",
            "failed",
            "uninstalling",
            "pending-install",
            "pending-upgrade",
            "pending-rollback",
        }

    def test_is_pending(self) -> None:
        assert Status.PENDING_UPGRADE.is_pending()
        assert not Status.DEPLOYED.is_pending()


class TestInfo:
    def test_same_instant_allowed(self) -> None:
        info = Info(first_deployed=NOW, last_deployed=NOW, status=Status.DEPLOYED)
        assert info.first_deployed == info.last_deployed

    def test_first_after_last_rejected(self) -> None:
        with pytest.raises(ValidationError, match="first_deployed"):
            Info(first_deployed=NOW + timedelta(seconds=1), last_deployed=NOW)

    def test_naive_and_aware_mixed(self) -> None:
        info = Info(first_deployed=datetime(2024, 1, 1), last_deployed=NOW)
        assert info.first_deployed == datetime(2024, 1, 1, tzinfo=timezone.utc)
        assert info.first_deployed <= info.last_deployed

    def test_naive_after_aware_rejected(self) -> None:
        with pytest.raises(ValidationError, match="first_deployed"):
            Info(first_deployed=datetime(2024, 6, 1), last_deployed=NOW)

    def test_offsets_normalized_to_utc(self) -> None:
        plus_two = timezone(timedelta(hours=2))
        info = Info(first_deployed=datetime(2024, 1, 1, 14, tzinfo=plus_two), last_deployed=NOW)
        assert info.first_deployed == NOW
        assert info.first_deployed.tzinfo is timezone.utc


class TestRelease:
    def _release(self, **kwargs) -> Release:
        fields = {
            "name": "rel",
            "info": Info(first_deployed=NOW, last_deployed=NOW, status=Status.DEPLOYED),
            "chart": build_chart(),
        }
        fields.update(kwargs)
        return Release(**fields)

    def test_defaults(self) -> None:
        rls = self._release()
        assert rls.namespace == "default"
        assert rls.version == 1
        assert rls.config == {}
        assert rls.hooks == ()

    def test_version_starts_at_one(self) -> None:
        with pytest.raises(ValidationError):
            self._release(version=0)

    def test_hooks_for_fans_out(self) -> None:
        cm = _hook("cm", HookEvent.POST_INSTALL, HookEvent.PRE_DELETE)
        job = _hook("job", HookEvent.PRE_DELETE)
        rls = self._release(hooks=[cm, job])
        assert rls.hooks_for(HookEvent.POST_INSTALL) == [cm]
        assert rls.hooks_for(HookEvent.PRE_DELETE) == [cm, job]
        assert rls.hooks_for(HookEvent.POST_UPGRADE) == []

    def test_frozen(self) -> None:
        rls = self._release()
        with pytest.raises(ValidationError):
            rls.version = 2

    def test_owns_its_chart(self) -> None:
        chart = build_chart()
        rls = self._release(chart=chart)
        chart.templates.clear()
        assert len(rls.chart.templates) == 2

    def test_chart_edits_do_not_reach_release(self, release: Release) -> None:
        release.chart.templates.clear()
        release.chart.metadata.name = "changed"
        assert len(release.chart.templates) == 6
        assert release.chart.name == "hello"

    def test_config_is_read_only(self, release: Release) -> None:
        with pytest.raises(TypeError):
            release.config["name"] = "changed"
        assert release.config == {"name": "value"}

    def test_config_copied_deeply(self) -> None:
        config = {"image": {"tag": "1.0"}, "ports": [80]}
        rls = self._release(config=config)
        config["image"]["tag"] = "2.0"
        config["ports"].append(443)
        assert rls.config["image"]["tag"] == "1.0"
        assert rls.config["ports"] == (80,)
        with pytest.raises(TypeError):
            rls.config["image"]["tag"] = "3.0"

    def test_default_config_is_read_only(self) -> None:
        with pytest.raises(TypeError):
            self._release().config["x"] = 1
