"""Version parsing and constraint matching.

Chart versions are strict semver. Kubernetes versions usually carry a
leading "v" and are sometimes incomplete ("v1.20"), so parsing is lenient
about both. Constraints use the range syntax charts put in kubeVersion:

    ">=1.16.0-0"
    ">= 1.19, < 1.22"
    "~1.20 || ^2.0"

A prerelease version (managed clusters report things like
"v1.20.0-gke.1") only satisfies terms that carry a prerelease of their
own, which is why charts write ">=1.16.0-0" rather than ">=1.16.0".
"""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING

import semver

from .errors import IncompatibleKubeVersionError, InvalidConstraintError

if TYPE_CHECKING:
    from .capabilities import Capabilities
    from .chart import Chart

logger = logging.getLogger(__name__)

_TERM_RE = re.compile(
    r"^(?P<op>>=|<=|!=|==|=|>|<|~|\^)?"
    r"v?(?P<version>\d+(?:\.\d+){0,2}(?:-[0-9A-Za-z.-]+)?(?:\+[0-9A-Za-z.-]+)?)$"
)
# Glue an operator to its version so "> = 1.2" style spacing splits cleanly
_OP_SPACE_RE = re.compile(r"(>=|<=|!=|==|=|>|<|~|\^)\s+")

Term = tuple[str, semver.Version, int]


def parse_version(version_str: str) -> semver.Version:
    """Parse a version string into a semver.Version object.

    Handles a leading "v" and incomplete versions by padding with zeros:
    - "v1.20.0" → "1.20.0"
    - "1.2" → "1.2.0"
    - "1.16-0" → "1.16.0-0"

    Raises:
        ValueError: If the string is not a version at all.
    """
    core, plus, build = version_str.strip().removeprefix("v").partition("+")
    core, dash, prerelease = core.partition("-")
    parts = core.split(".")
    # Pad with zeros to ensure we have at least 3 parts
    while len(parts) < 3:
        parts.append("0")
    text = ".".join(parts[:3])
    if dash:
        text += f"-{prerelease}"
    if plus:
        text += f"+{build}"
    return semver.Version.parse(text)


def parse_constraint(constraint: str) -> list[list[Term]]:
    """Parse a constraint string into OR-groups of AND-ed terms.

    Each term is (operator, version, number of components given). The
    component count matters for "~1" versus "~1.2".

    Raises:
        InvalidConstraintError: If any term is not understood.
    """
    groups: list[list[Term]] = []
    for alternative in constraint.split("||"):
        glued = _OP_SPACE_RE.sub(r"\1", alternative.strip())
        tokens = [t for t in re.split(r"[,\s]+", glued) if t]
        if not tokens:
            raise InvalidConstraintError(f"empty constraint in {constraint!r}")
        terms: list[Term] = []
        for token in tokens:
            match = _TERM_RE.match(token)
            if not match:
                raise InvalidConstraintError(f"invalid constraint term {token!r} in {constraint!r}")
            raw = match.group("version")
            given = len(raw.split("-")[0].split("+")[0].split("."))
            terms.append((match.group("op") or "=", parse_version(raw), given))
        groups.append(terms)
    return groups


def _term_matches(term: Term, version: semver.Version) -> bool:
    op, bound, given = term
    # Prereleases only match terms that name a prerelease themselves
    if version.prerelease and not bound.prerelease:
        return False
    cmp = version.compare(bound)
    if op in ("=", "=="):
        return cmp == 0
    if op == "!=":
        return cmp != 0
    if op == ">":
        return cmp > 0
    if op == ">=":
        return cmp >= 0
    if op == "<":
        return cmp < 0
    if op == "<=":
        return cmp <= 0
    if op == "~":
        # ~1 allows any 1.x, ~1.2 and ~1.2.3 allow patch-level changes
        upper = bound.bump_major() if given == 1 else bound.bump_minor()
        return cmp >= 0 and version.compare(upper) < 0
    # ^: changes that don't modify the left-most non-zero component
    if bound.major > 0 or given == 1:
        upper = bound.bump_major()
    elif bound.minor > 0 or given == 2:
        upper = bound.bump_minor()
    else:
        upper = bound.bump_patch()
    return cmp >= 0 and version.compare(upper) < 0


def is_compatible_range(constraint: str, version: str) -> bool:
    """Check whether a version satisfies a constraint.

    Unparseable constraints or versions are reported as incompatible
    rather than raised.
    """
    try:
        groups = parse_constraint(constraint)
        parsed = parse_version(version)
    except (InvalidConstraintError, ValueError) as e:
        logger.debug("Treating %r against %r as incompatible: %s", version, constraint, e)
        return False
    return any(all(_term_matches(t, parsed) for t in terms) for terms in groups)


def check_kube_version(chart: Chart, capabilities: Capabilities) -> None:
    """Ensure the cluster version satisfies the chart's kube_version.

    Charts without a kube_version are compatible with everything.

    Raises:
        IncompatibleKubeVersionError: If the constraint excludes the cluster.
    """
    constraint = chart.metadata.kube_version
    if not constraint:
        return
    cluster = capabilities.kube_version.version
    if not is_compatible_range(constraint, cluster):
        raise IncompatibleKubeVersionError(
            f"chart requires kubeVersion: {constraint} which is incompatible "
            f"with Kubernetes {cluster}"
        )
