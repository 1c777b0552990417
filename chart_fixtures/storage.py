"""In-memory release storage.

Releases are stored under "sh.helm.release.v1.<name>.v<version>", one
record per revision. Nothing persists beyond the store object, which is
what tests want.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from .errors import ReleaseExistsError, ReleaseNotFoundError
from .logging_config import LogFunc
from .release import Release, Status

logger = logging.getLogger(__name__)


def make_key(name: str, version: int) -> str:
    """Storage key for one revision of a release."""
    return f"sh.helm.release.v1.{name}.v{version}"


class ReleaseStore:
    """Key/value store over release records."""

    def __init__(self, log: LogFunc | None = None) -> None:
        self._records: dict[str, Release] = {}
        self.log: LogFunc = log or (lambda fmt, *args: logger.debug(fmt, *args))

    def create(self, rls: Release) -> None:
        """Store a new revision.

        Raises:
            ReleaseExistsError: If this name/revision is already stored.
        """
        key = make_key(rls.name, rls.version)
        self.log("creating release %r", key)
        if key in self._records:
            raise ReleaseExistsError(f"release {key} already exists")
        self._records[key] = rls

    def update(self, rls: Release) -> None:
        """Replace a stored revision.

        Raises:
            ReleaseNotFoundError: If the revision was never stored.
        """
        key = make_key(rls.name, rls.version)
        self.log("updating release %r", key)
        if key not in self._records:
            raise ReleaseNotFoundError(f"release {key} not found")
        self._records[key] = rls

    def get(self, name: str, version: int) -> Release:
        """Fetch one revision.

        Raises:
            ReleaseNotFoundError: If it does not exist.
        """
        key = make_key(name, version)
        self.log("getting release %r", key)
        try:
            return self._records[key]
        except KeyError:
            raise ReleaseNotFoundError(f"release {key} not found") from None

    def delete(self, name: str, version: int) -> Release:
        """Remove and return one revision.

        Raises:
            ReleaseNotFoundError: If it does not exist.
        """
        key = make_key(name, version)
        self.log("deleting release %r", key)
        try:
            return self._records.pop(key)
        except KeyError:
            raise ReleaseNotFoundError(f"release {key} not found") from None

    def list_releases(self, predicate: Callable[[Release], bool] | None = None) -> list[Release]:
        """All stored revisions matching a predicate, ordered by name then revision."""
        self.log("listing all releases in storage")
        found = [r for r in self._records.values() if predicate is None or predicate(r)]
        return sorted(found, key=lambda r: (r.name, r.version))

    def history(self, name: str) -> list[Release]:
        """Every stored revision of a release, oldest first.

        Raises:
            ReleaseNotFoundError: If no revision of the release exists.
        """
        self.log("getting release history for %r", name)
        revisions = self.list_releases(lambda r: r.name == name)
        if not revisions:
            raise ReleaseNotFoundError(f"release: {name} not found")
        return revisions

    def last(self, name: str) -> Release:
        """The highest revision of a release, whatever its status."""
        return self.history(name)[-1]

    def deployed(self, name: str) -> Release:
        """The latest deployed revision of a release.

        Raises:
            ReleaseNotFoundError: If no revision is deployed.
        """
        self.log("getting deployed releases from %r history", name)
        deployed = [r for r in self.history(name) if r.info.status is Status.DEPLOYED]
        if not deployed:
            raise ReleaseNotFoundError(f"{name} has no deployed releases")
        return deployed[-1]
