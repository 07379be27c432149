"""Semantic version parsing and registry-style version requirements.

Requirements use the Cargo dialect: a bare version such as ``1.2`` means
``^1.2``, ``=1.2.3`` pins a version, and comparators are separated by commas.
They are normalized into ``semantic_version.NpmSpec`` ranges, whose caret,
tilde and pre-release rules match Cargo's: a pre-release only satisfies a
range that names a pre-release of the same major.minor.patch.
"""
from __future__ import annotations

import re
from dataclasses import dataclass, field

import semantic_version

from constants import Constants
from common.errors import InvalidSemver, InvalidVersionRequirement

_COMPARATOR = re.compile(r'^(?P<op>\^|~|=|==|>=|<=|>|<)?\s*(?P<ver>[0-9A-Za-z.*+\-]+)$')
_WILDCARDS = ("*", "x", "X")


def parse_version(text: str) -> semantic_version.Version:
    """Parse a strict semver string.

    Raises:
        InvalidSemver: If the string is not a full major.minor.patch version.
    """
    try:
        return semantic_version.Version(text.strip())
    except ValueError as exc:
        raise InvalidSemver(f"invalid semver '{text}': {exc}", value=text) from exc


def _split_core(ver: str):
    """Split ``1.2.3-pre+build`` into ``("1.2.3", "-pre+build")``."""
    m = re.search(r'[-+]', ver)
    if not m:
        return ver, ""
    return ver[:m.start()], ver[m.start():]


def _normalize_comparator(part: str, raw: str) -> str:
    if part in _WILDCARDS:
        return Constants.ANY_VERSION
    m = _COMPARATOR.match(part)
    if not m:
        raise InvalidVersionRequirement(f"invalid version requirement '{raw}'", value=raw)
    op, ver = m.group("op"), m.group("ver")
    core, suffix = _split_core(ver)
    components = ["*" if c in _WILDCARDS else c for c in core.split(".")]
    wildcard = "*" in components
    ver = ".".join(components) + suffix
    if op is None:
        if wildcard:
            return ver
        # Cargo treats a bare version as a caret requirement
        op = "^"
    elif op == "==":
        op = "="
    return f"{op}{ver}"


def normalize_requirement(text: str) -> str:
    """Rewrite a Cargo-style requirement into NpmSpec syntax."""
    raw = text
    text = text.strip()
    if not text:
        return Constants.ANY_VERSION
    parts = [p.strip() for p in text.split(",")]
    if any(not p for p in parts):
        raise InvalidVersionRequirement(f"invalid version requirement '{raw}'", value=raw)
    normalized = [_normalize_comparator(p, raw) for p in parts]
    if Constants.ANY_VERSION in normalized and len(normalized) > 1:
        normalized = [p for p in normalized if p != Constants.ANY_VERSION]
    return " ".join(normalized)


@dataclass(frozen=True)
class VersionReq:
    """A parsed version requirement.

    Two requirements are equal when their normalized expressions are equal,
    which lets them live in sets of accumulated demand.
    """

    expression: str
    spec: semantic_version.NpmSpec = field(compare=False, repr=False)

    @classmethod
    def parse(cls, text: str) -> "VersionReq":
        """Parse ``text``; raises InvalidVersionRequirement on bad input."""
        expression = normalize_requirement(text)
        try:
            spec = semantic_version.NpmSpec(expression)
        except ValueError as exc:
            raise InvalidVersionRequirement(
                f"invalid version requirement '{text}': {exc}", value=text
            ) from exc
        return cls(expression=expression, spec=spec)

    @classmethod
    def any(cls) -> "VersionReq":
        return cls.parse(Constants.ANY_VERSION)

    def matches(self, version: semantic_version.Version) -> bool:
        return self.spec.match(version)

    def __str__(self) -> str:
        return self.expression
