"""Tests for chart_fixtures.storage."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from chart_fixtures.errors import ReleaseExistsError, ReleaseNotFoundError
from chart_fixtures.release import Release, Status
from chart_fixtures.storage import ReleaseStore, make_key
from chart_fixtures.stubs import named_release_stub


def _revision(name: str, version: int, status: Status) -> Release:
    return named_release_stub(name, status).model_copy(update={"version": version})


@pytest.fixture
def store() -> ReleaseStore:
    return ReleaseStore()


class TestMakeKey:
    def test_format(self) -> None:
        assert make_key("angry-panda", 3) == "sh.helm.release.v1.angry-panda.v3"


class TestCreateGet:
    def test_round_trip(self, store: ReleaseStore, release: Release) -> None:
        store.create(release)
        assert store.get("angry-panda", 1) is release

    def test_duplicate_rejected(self, store: ReleaseStore, release: Release) -> None:
        store.create(release)
        with pytest.raises(ReleaseExistsError, match="angry-panda.v1"):
            store.create(release)

    def test_get_missing(self, store: ReleaseStore) -> None:
        with pytest.raises(ReleaseNotFoundError):
            store.get("nope", 1)


class TestUpdateDelete:
    def test_update_replaces(self, store: ReleaseStore, release: Release) -> None:
        store.create(release)
        failed = named_release_stub("angry-panda", Status.FAILED)
        store.update(failed)
        assert store.get("angry-panda", 1).info.status is Status.FAILED

    def test_update_missing(self, store: ReleaseStore, release: Release) -> None:
        with pytest.raises(ReleaseNotFoundError):
            store.update(release)

    def test_delete(self, store: ReleaseStore, release: Release) -> None:
        store.create(release)
        assert store.delete("angry-panda", 1) is release
        with pytest.raises(ReleaseNotFoundError):
            store.get("angry-panda", 1)

    def test_delete_missing(self, store: ReleaseStore) -> None:
        with pytest.raises(ReleaseNotFoundError):
            store.delete("nope", 1)


class TestQueries:
    @pytest.fixture
    def populated(self, store: ReleaseStore) -> ReleaseStore:
        store.create(_revision("web", 2, Status.DEPLOYED))
        store.create(_revision("web", 1, Status.SUPERSEDED))
        store.create(_revision("web", 3, Status.FAILED))
        store.create(_revision("db", 1, Status.DEPLOYED))
        return store

    def test_history_oldest_first(self, populated: ReleaseStore) -> None:
        assert [r.version for r in populated.history("web")] == [1, 2, 3]

    def test_history_missing(self, store: ReleaseStore) -> None:
        with pytest.raises(ReleaseNotFoundError, match="ghost"):
            store.history("ghost")

    def test_last(self, populated: ReleaseStore) -> None:
        last = populated.last("web")
        assert last.version == 3
        assert last.info.status is Status.FAILED

    def test_deployed(self, populated: ReleaseStore) -> None:
        assert populated.deployed("web").version == 2

    def test_no_deployed_revision(self, store: ReleaseStore) -> None:
        store.create(_revision("broken", 1, Status.FAILED))
        with pytest.raises(ReleaseNotFoundError, match="no deployed releases"):
            store.deployed("broken")

    def test_list_releases(self, populated: ReleaseStore) -> None:
        assert [(r.name, r.version) for r in populated.list_releases()] == [
            ("db", 1),
            ("web", 1),
            ("web", 2),
            ("web", 3),
        ]

    def test_list_releases_filtered(self, populated: ReleaseStore) -> None:
        deployed = populated.list_releases(lambda r: r.info.status is Status.DEPLOYED)
        assert [(r.name, r.version) for r in deployed] == [("db", 1), ("web", 2)]


class TestLogging:
    def test_operations_logged_through_callback(self, release: Release) -> None:
        log = MagicMock()
        store = ReleaseStore(log=log)
        store.create(release)
        log.assert_called_with("creating release %r", "sh.helm.release.v1.angry-panda.v1")
