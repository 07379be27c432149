"""Token parsing utilities for seed package requests."""

from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

from constants import Constants
from common.errors import InvalidPackageName

from .semver import VersionReq


@dataclass(frozen=True)
class SeedRequest:
    """A package named on the command line with its version requirement."""
    name: str
    requirement: VersionReq
    raw_token: str


def tokenize_at(s: str) -> Tuple[str, Optional[str]]:
    """Return (name, spec or None) split on the first ``@``."""
    s = s.strip()
    name, sep, spec = s.partition("@")
    spec = spec.strip()
    if not sep or not spec:
        return name.strip(), None
    return name.strip(), spec


def parse_seed_token(token: str) -> SeedRequest:
    """Parse ``name`` or ``name@requirement`` into a SeedRequest.

    A missing requirement means any version.

    Raises:
        InvalidPackageName: The name part is empty.
        InvalidVersionRequirement: The requirement does not parse.
    """
    name, spec = tokenize_at(token)
    if not name:
        raise InvalidPackageName(f"missing package name in '{token}'", value=token)
    requirement = VersionReq.parse(spec if spec is not None else Constants.ANY_VERSION)
    return SeedRequest(name=name, requirement=requirement, raw_token=token)


def split_feature_list(values: Iterable[str]) -> List[str]:
    """Flatten ``--features a,b --features c`` style values into tokens."""
    tokens = []
    for value in values:
        for part in value.replace(" ", ",").split(","):
            part = part.strip()
            if part and part not in tokens:
                tokens.append(part)
    return tokens
