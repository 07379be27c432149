"""Exploration engine: demand-driven traversal of a registry's dependency graph.

The engine owns three maps, all touched only by the coordinating thread:

* ``cache``: package name to ``None`` while its fetch is in flight, or the
  tuple of version records once fetched.
* ``done``: demand already submitted for each package.
* ``pending``: demand waiting for a fetch (or a derivation pass) to run.

A package is re-derived only when its accumulated demand strictly grows, and
only with the new slice of demand. That bounds cyclic graphs to finite work.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import partial
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

import requests

from constants import Constants
from common.errors import InvalidSemver, InvalidVersionRequirement
from common.http_client import build_session
from common.logging_utils import extra_context, is_debug_enabled, Timer
from registry.index.client import fetch_versions
from registry.index.models import DependencyKind, PackageVersionRecord
from versioning.semver import VersionReq, parse_version

from .demand import LookupFeatures
from .dispatch import Fetcher, FetchDispatcher

logger = logging.getLogger(__name__)


@dataclass
class ExplorationResult:
    """Outcome of a full exploration."""
    packages: Dict[str, LookupFeatures]
    elapsed_ms: int
    fetch_count: int

    def names(self) -> List[str]:
        return sorted(self.packages)


class Exploration:
    """Coordinator for one exploration run."""

    def __init__(
        self,
        fetch: Optional[Fetcher] = None,
        *,
        session: Optional[requests.Session] = None,
        base_url: Optional[str] = None,
        channel_size: Optional[int] = None,
    ):
        """Initialize the engine.

        Args:
            fetch: Callable returning version records for a package name.
                Defaults to the registry index client over a shared session.
            session: HTTP session for the default fetcher.
            base_url: Registry base URL for the default fetcher.
            channel_size: Capacity of the completed-fetch queue.
        """
        if fetch is None:
            fetch = partial(fetch_versions, session=session or build_session(), base_url=base_url)
        self._dispatcher = FetchDispatcher(fetch, channel_size)
        self.cache: Dict[str, Optional[Tuple[PackageVersionRecord, ...]]] = {}
        self.done: Dict[str, LookupFeatures] = {}
        self.pending: Dict[str, LookupFeatures] = {}

    @property
    def fetch_count(self) -> int:
        return self._dispatcher.dispatched

    def discovered(self) -> List[str]:
        """Names of every package whose exploration was submitted."""
        return sorted(self.done)

    def enqueue(self, name: str, wants: LookupFeatures) -> None:
        """Request exploration of ``name`` under ``wants``.

        Derives immediately when the package's records are cached, otherwise
        records the demand as pending and makes sure a fetch is running.
        """
        known = self.done.get(name)
        if known is None:
            self.done[name] = wants.copy()
        elif not known.merge(wants):
            # Nothing new required
            return

        if name in self.cache:
            records = self.cache[name]
            if records is not None:
                delta = self.pending.pop(name, None)
                if delta is None:
                    delta = wants.copy()
                else:
                    delta.merge(wants)
                if is_debug_enabled(logger):
                    logger.debug(
                        "Deriving from cached records",
                        extra=extra_context(
                            event="decision",
                            component="engine",
                            action="enqueue",
                            outcome="cached",
                            package=name
                        )
                    )
                self.derive(delta, records)
                return
        else:
            self.cache[name] = None
            self._dispatcher.dispatch(name)

        queued = self.pending.get(name)
        if queued is None:
            self.pending[name] = wants.copy()
        else:
            queued.merge(wants)

    def process_all(self) -> None:
        """Drain finished fetches until no package has pending demand.

        Raises:
            ExplorationError: The first fetch or derivation failure.
        """
        while self.pending:
            name, records = self._dispatcher.receive()
            self.cache[name] = records
            wants = self.pending.pop(name, None)
            if wants is not None:
                self.derive(wants, records)

    def derive(self, wants: LookupFeatures, versions: Sequence[PackageVersionRecord]) -> None:
        """Enqueue the dependency demand implied by ``wants`` over ``versions``.

        Only literal feature tokens are interpreted: ``dep`` or ``dep/feat``
        enables the optional dependency ``dep`` (and ``feat`` on it). Suffixes
        never reach non-optional dependencies. The
        package's own feature table is not expanded.

        Raises:
            InvalidSemver: A record carries an unparsable version.
            InvalidVersionRequirement: An edge carries an unparsable range.
        """
        enabled_optional: Dict[str, List[str]] = {}
        for token in wants.features:
            dep_name, _, with_feature = token.partition("/")
            extra = enabled_optional.setdefault(dep_name, [])
            if with_feature:
                extra.append(with_feature)

        dep_wants: Dict[str, LookupFeatures] = {}
        for record in versions:
            semver = parse_version_of(record)
            if not any(req.matches(semver) for req in wants.version_reqs):
                continue
            for dep in record.dependencies:
                if dep.kind is DependencyKind.DEV:
                    continue
                package = dep.lookup_key
                # do features refer to renamed packages? both spellings are accepted
                if dep.optional and dep.name not in enabled_optional and package not in enabled_optional:
                    continue

                req = parse_requirement_of(record, dep.name, dep.version_req)
                acc = dep_wants.setdefault(package, LookupFeatures())
                acc.version_reqs.add(req)
                if dep.default_features:
                    acc.features.add(Constants.DEFAULT_FEATURE)
                acc.features.update(f for f in dep.features if f)
                if dep.optional:
                    acc.features.update(enabled_optional.get(dep.name, ()))
                    if package != dep.name:
                        acc.features.update(enabled_optional.get(package, ()))

        for dep_name, dep_demand in dep_wants.items():
            self.enqueue(dep_name, dep_demand)

    def explore(self, seeds: Iterable[Tuple[str, LookupFeatures]]) -> ExplorationResult:
        """Enqueue every seed and run the exploration to completion."""
        with Timer() as timer:
            for name, wants in seeds:
                self.enqueue(name, wants)
            self.process_all()
        logger.info(
            "Exploration finished",
            extra=extra_context(
                event="function_exit",
                component="engine",
                action="explore",
                outcome="success",
                count=len(self.done),
                duration_ms=timer.duration_ms()
            )
        )
        return ExplorationResult(
            packages=dict(self.done),
            elapsed_ms=timer.duration_ms(),
            fetch_count=self.fetch_count,
        )


def parse_version_of(record: PackageVersionRecord):
    """Parse a record's version, naming the record on failure."""
    try:
        return parse_version(record.version)
    except InvalidSemver as exc:
        raise InvalidSemver(f"semver of {record.name}@{record.version}: {exc}", value=record.version) from exc


def parse_requirement_of(record: PackageVersionRecord, dep_name: str, raw: str) -> VersionReq:
    """Parse a dependency's version requirement, naming the edge on failure."""
    try:
        return VersionReq.parse(raw)
    except InvalidVersionRequirement as exc:
        raise InvalidVersionRequirement(f"dep {dep_name} of {record.name}: {exc}", value=raw) from exc

