"""Action configuration fixture.

Bundles what an install/upgrade/rollback action needs to run against a
fake world: a fresh in-memory release store, default cluster
capabilities, a registry cache in a scratch directory, and a log
callback. Cluster and registry clients are supplied by the caller.
"""

from __future__ import annotations

import logging
import tempfile
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from .capabilities import Capabilities, default_capabilities
from .config import FixtureSettings
from .errors import FixtureSetupError
from .logging_config import LogFunc, make_log_func
from .storage import ReleaseStore

logger = logging.getLogger(__name__)

CACHE_ROOT_DIR = "cache"


class RegistryCache(BaseModel):
    """Local content cache for a chart registry client."""

    root: Path
    debug: bool = False

    def ensure(self) -> None:
        """Create the cache directory if needed.

        Raises:
            FixtureSetupError: If the directory cannot be created.
        """
        try:
            self.root.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise FixtureSetupError(f"Cannot create registry cache at {self.root}: {e}") from e


class ActionConfiguration(BaseModel):
    """Everything an action is constructed with.

    Attributes:
        releases: Release storage.
        kube_client: Client applying and deleting manifests (caller supplied).
        capabilities: What the target cluster supports.
        registry_cache: Cache used by the registry client.
        registry_client: Chart registry client (caller supplied).
        log: printf-style log callback.
        tmp_dir: Scratch directory backing the fixture. Never cleaned up here.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    releases: ReleaseStore
    kube_client: Any = None
    capabilities: Capabilities = Field(default_factory=Capabilities)
    registry_cache: RegistryCache
    registry_client: Any = None
    log: LogFunc
    tmp_dir: Path


def _make_tmp_dir(prefix: str) -> Path:
    try:
        return Path(tempfile.mkdtemp(prefix=prefix))
    except OSError as e:
        raise FixtureSetupError(f"Cannot create temporary directory: {e}") from e


def action_config_fixture(
    settings: FixtureSettings | None = None,
    *,
    tmp_dir: Path | None = None,
    kube_client: Any = None,
    registry_client: Any = None,
) -> ActionConfiguration:
    """Assemble an ActionConfiguration for a test.

    Args:
        settings: Fixture settings; defaults apply if omitted.
        tmp_dir: Scratch directory to use. A new one is created with the
                 configured prefix if omitted.
        kube_client: Cluster client to inject.
        registry_client: Registry client to inject.

    Raises:
        FixtureSetupError: If the scratch directory or cache cannot be set up.
    """
    settings = settings or FixtureSettings()
    log = make_log_func(settings.verbose)

    root = tmp_dir if tmp_dir is not None else _make_tmp_dir(settings.temp_prefix)
    cache = RegistryCache(root=root / CACHE_ROOT_DIR, debug=settings.cache_debug)
    cache.ensure()
    logger.debug("Action fixture scratch directory: %s", root)

    return ActionConfiguration(
        releases=ReleaseStore(log=log),
        kube_client=kube_client,
        capabilities=default_capabilities(),
        registry_cache=cache,
        registry_client=registry_client,
        log=log,
        tmp_dir=root,
    )
