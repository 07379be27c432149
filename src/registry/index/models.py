"""Record shapes read from the registry index.

Each line of an index file is one JSON object describing one published
version of a package.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Tuple

from constants import DependencyKinds


class DependencyKind(Enum):
    """Closed set of dependency kinds; only DEV is excluded from exploration."""
    NORMAL = DependencyKinds.NORMAL.value
    DEV = DependencyKinds.DEV.value
    BUILD = DependencyKinds.BUILD.value

    @classmethod
    def from_raw(cls, raw: Optional[str]) -> "DependencyKind":
        """Map the index ``kind`` field; absent or unknown kinds count as normal."""
        if raw is None:
            return cls.NORMAL
        try:
            return cls(raw)
        except ValueError:
            return cls.NORMAL


def _require(obj: Mapping[str, Any], key: str, expected: type) -> Any:
    if key not in obj:
        raise KeyError(f"missing field `{key}`")
    value = obj[key]
    if not isinstance(value, expected):
        raise TypeError(f"invalid type for `{key}`: expected {expected.__name__}, got {type(value).__name__}")
    return value


def _optional(obj: Mapping[str, Any], key: str) -> Optional[str]:
    value = obj.get(key)
    if value is not None and not isinstance(value, str):
        raise TypeError(f"invalid type for `{key}`: expected str, got {type(value).__name__}")
    return value


@dataclass(frozen=True)
class DependencyEdge:
    """One dependency declared by a published version."""
    name: str
    version_req: str
    features: Tuple[str, ...] = ()
    optional: bool = False
    default_features: bool = True
    rename: Optional[str] = None  # index field `package`
    platform: Optional[str] = None  # index field `target`
    kind: DependencyKind = DependencyKind.NORMAL

    @property
    def lookup_key(self) -> str:
        """Registry name to fetch for this dependency."""
        return self.rename or self.name

    @classmethod
    def from_json(cls, obj: Mapping[str, Any]) -> "DependencyEdge":
        if not isinstance(obj, Mapping):
            raise TypeError(f"dependency entry must be an object, got {type(obj).__name__}")
        return cls(
            name=_require(obj, "name", str),
            version_req=_require(obj, "req", str),
            features=tuple(_require(obj, "features", list)),
            optional=_require(obj, "optional", bool),
            default_features=_require(obj, "default_features", bool),
            rename=_optional(obj, "package"),
            platform=_optional(obj, "target"),
            kind=DependencyKind.from_raw(_optional(obj, "kind")),
        )


@dataclass(frozen=True)
class PackageVersionRecord:
    """One immutable (name, version) row from the index."""
    name: str
    version: str
    dependencies: Tuple[DependencyEdge, ...] = ()
    checksum: str = ""
    own_features: Dict[str, Tuple[str, ...]] = field(default_factory=dict, hash=False)
    yanked: bool = False

    @classmethod
    def from_json(cls, obj: Mapping[str, Any]) -> "PackageVersionRecord":
        """Build a record from a decoded index line.

        Raises:
            KeyError: A required field is missing.
            TypeError: A field has the wrong JSON type.
        """
        if not isinstance(obj, Mapping):
            raise TypeError(f"index line must be an object, got {type(obj).__name__}")
        features = _require(obj, "features", dict)
        return cls(
            name=_require(obj, "name", str),
            version=_require(obj, "vers", str),
            dependencies=tuple(DependencyEdge.from_json(d) for d in _require(obj, "deps", list)),
            checksum=_require(obj, "cksum", str),
            own_features={k: tuple(v) for k, v in features.items()},
            yanked=_require(obj, "yanked", bool),
        )
