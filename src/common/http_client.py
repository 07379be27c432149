"""Shared HTTP helpers used by the registry client.

Encapsulates session setup and request error handling so callers only deal
with the exploration error taxonomy. Requests are never retried.
"""
from __future__ import annotations

import logging
from typing import Any, Optional

import requests

from constants import Constants
from common.errors import HttpStatusError, NetworkError
from common.logging_utils import extra_context, is_debug_enabled, safe_url, Timer

logger = logging.getLogger(__name__)


def build_session(user_agent: Optional[str] = None) -> requests.Session:
    """Create a session shared by all fetch workers.

    The session keeps a connection pool per host and asks for gzip-compressed
    responses.
    """
    session = requests.Session()
    session.headers.update({
        "User-Agent": user_agent or Constants.USER_AGENT,
        "Accept-Encoding": "gzip",
    })
    return session


def safe_get(
    url: str,
    *,
    context: str,
    session: Optional[requests.Session] = None,
    **kwargs: Any,
) -> requests.Response:
    """Perform a GET request and map failures onto exploration errors.

    Args:
        url: Target URL.
        context: Human-readable source tag for logs (e.g. the package name).
        session: Session to send the request with; a module-level GET is used
            when omitted.
        **kwargs: Passed through to ``requests.get``.

    Returns:
        requests.Response: A response with a 2xx status.

    Raises:
        NetworkError: On timeouts and connection failures.
        HttpStatusError: On any non-2xx status.
    """
    safe_target = safe_url(url)
    getter = session.get if session is not None else requests.get
    timeout = (Constants.CONNECT_TIMEOUT, Constants.REQUEST_TIMEOUT)
    with Timer() as t:
        if is_debug_enabled(logger):
            logger.debug(
                "HTTP request",
                extra=extra_context(
                    event="http_request",
                    component="http_client",
                    action="GET",
                    target=safe_target,
                    context=context
                )
            )
        try:
            res = getter(url, timeout=timeout, **kwargs)
        except requests.Timeout as exc:
            raise NetworkError(
                f"{context}: request to {safe_target} timed out "
                f"(connect {Constants.CONNECT_TIMEOUT}s, read {Constants.REQUEST_TIMEOUT}s)",
                url=url,
            ) from exc
        except requests.RequestException as exc:  # includes ConnectionError
            raise NetworkError(f"{context}: connection error for {safe_target}: {exc}", url=url) from exc

    if not 200 <= res.status_code < 300:
        logger.warning(
            "HTTP non-2xx response",
            extra=extra_context(
                event="http_response",
                component="http_client",
                action="GET",
                outcome="http_error",
                status_code=res.status_code,
                duration_ms=t.duration_ms(),
                target=safe_target,
                context=context
            )
        )
        raise HttpStatusError(
            f"{context}: HTTP status {res.status_code} for {safe_target}",
            status_code=res.status_code,
            url=url,
        )

    if is_debug_enabled(logger):
        logger.debug(
            "HTTP response ok",
            extra=extra_context(
                event="http_response",
                component="http_client",
                action="GET",
                outcome="success",
                status_code=res.status_code,
                duration_ms=t.duration_ms(),
                target=safe_target,
                context=context
            )
        )
    return res
