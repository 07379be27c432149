"""Accumulated demand (features and version ranges) for one package."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Set

from constants import Constants
from versioning.semver import VersionReq


@dataclass
class LookupFeatures:
    """Union of every feature token and version range requested for a package.

    Feature tokens are either ``"default"`` or ``"<dependency>/<feature>"``;
    a bare ``"<dependency>"`` enables an optional dependency without features.
    A registry version is wanted when it satisfies any of ``version_reqs``.
    Both sets only ever grow.
    """

    features: Set[str] = field(default_factory=set)
    version_reqs: Set[VersionReq] = field(default_factory=set)

    @classmethod
    def seed(
        cls,
        requirement: VersionReq,
        features: Iterable[str] = (),
        default_features: bool = True,
    ) -> "LookupFeatures":
        """Initial demand for a package named on the command line."""
        wanted = {f for f in features if f}
        if default_features:
            wanted.add(Constants.DEFAULT_FEATURE)
        return cls(features=wanted, version_reqs={requirement})

    def merge(self, other: "LookupFeatures") -> bool:
        """Union ``other`` into this demand.

        Returns:
            bool: True if either set grew.
        """
        before = (len(self.features), len(self.version_reqs))
        self.features |= other.features
        self.version_reqs |= other.version_reqs
        return (len(self.features), len(self.version_reqs)) != before

    def copy(self) -> "LookupFeatures":
        return LookupFeatures(features=set(self.features), version_reqs=set(self.version_reqs))


Demand = LookupFeatures
