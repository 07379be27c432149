"""Registry index client: name sharding and version metadata retrieval."""

from __future__ import annotations

import json
import logging
from typing import List, Optional

import requests

from constants import Constants
from common.errors import InvalidPackageName, ParseError
from common.http_client import safe_get
from common.logging_utils import extra_context, is_debug_enabled, safe_url

from .models import PackageVersionRecord

logger = logging.getLogger(__name__)


def index_path(name: str) -> str:
    """Return the index-relative path for a package name.

    Short names get their own top-level buckets; longer names are spread over
    two directory levels taken from their first four characters.

    Args:
        name: Package name as requested.

    Returns:
        str: Lower-cased path such as ``se/rd/serde``.
    """
    if not name:
        raise InvalidPackageName("package name must not be empty", value=name)
    length = len(name)
    if length == 1:
        path = f"1/{name}"
    elif length == 2:
        path = f"2/{name}"
    elif length == 3:
        path = f"3/{name[0]}/{name}"
    else:
        path = f"{name[0:2]}/{name[2:4]}/{name}"
    return path.lower()


def index_url(name: str, base_url: Optional[str] = None) -> str:
    """Join the registry base URL with the sharded path of ``name``."""
    base = base_url or Constants.REGISTRY_URL
    return f"{base.rstrip('/')}/{index_path(name)}"


def parse_index_body(name: str, url: str, body: str) -> List[PackageVersionRecord]:
    """Parse a newline-delimited JSON index file.

    Blank lines are skipped. Parsing stops at the first bad line.

    Raises:
        ParseError: With the decoder message, URL, body length, package and line.
    """
    records = []
    for line in body.split("\n"):
        line = line.rstrip("\r")
        if not line.strip():
            continue
        try:
            records.append(PackageVersionRecord.from_json(json.loads(line)))
        except (ValueError, KeyError, TypeError) as exc:
            raise ParseError(
                f"{exc}; {safe_url(url)} bodylen={len(body)}, while parsing {name} from {line}",
                package=name,
                line=line,
            ) from exc
    return records


def fetch_versions(
    name: str,
    *,
    session: Optional[requests.Session] = None,
    base_url: Optional[str] = None,
) -> List[PackageVersionRecord]:
    """Fetch every published version record of ``name``.

    Args:
        name: Package name.
        session: Shared HTTP session; plain ``requests.get`` when omitted.
        base_url: Registry base URL; defaults to Constants.REGISTRY_URL.

    Returns:
        list: One PackageVersionRecord per index line, in index order.
    """
    url = index_url(name, base_url)
    logger.info("Fetching %s from %s", name, safe_url(url))
    res = safe_get(url, context=name, session=session)
    body = res.text
    records = parse_index_body(name, url, body)
    if is_debug_enabled(logger):
        logger.debug(
            "Parsed index file",
            extra=extra_context(
                event="parse",
                component="index_client",
                action="fetch_versions",
                outcome="success",
                target=safe_url(url),
                package=name,
                count=len(records)
            )
        )
    return records
