"""Registry index access (crates.io index layout)."""

from .client import fetch_versions, index_path, index_url, parse_index_body
from .models import DependencyEdge, DependencyKind, PackageVersionRecord

__all__ = [
    "fetch_versions",
    "index_path",
    "index_url",
    "parse_index_body",
    "DependencyEdge",
    "DependencyKind",
    "PackageVersionRecord",
]
