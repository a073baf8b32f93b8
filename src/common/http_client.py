"""Shared HTTP helper used by the hosting API client.

Encapsulates request/timeout error handling and DEBUG traces so the client
does not duplicate try/except blocks. Unlike a CLI-facing helper it never
exits the process: every failure is raised as ``FetchError`` for the caller
to propagate.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Tuple

import requests

from constants import Constants
from common.logging_utils import extra_context, is_debug_enabled, safe_url, Timer
from versioning.errors import FetchError

logger = logging.getLogger(__name__)


def get_json(
    session: requests.Session,
    url: str,
    *,
    params: Optional[Dict[str, Any]] = None,
    context: str,
) -> Tuple[Any, requests.Response]:
    """Perform a GET request and parse its JSON body.

    Args:
        session: Session carrying authentication and default headers
        url: Target URL
        params: Optional query parameters
        context: Human-readable source tag for logs (e.g., "list_tags")

    Returns:
        Tuple of (parsed_json, response)

    Raises:
        FetchError: on timeout, connection error, non-200 status or bad JSON
    """
    safe_target = safe_url(url)
    with Timer() as t:
        if is_debug_enabled(logger):
            logger.debug(
                "HTTP request",
                extra=extra_context(
                    event="http_request",
                    component="http_client",
                    action="GET",
                    target=safe_target,
                    context=context,
                    params=params,
                )
            )
        try:
            response = session.get(url, params=params, timeout=Constants.REQUEST_TIMEOUT)
        except requests.Timeout as exc:
            raise FetchError(
                f"{context} request timed out after {Constants.REQUEST_TIMEOUT} seconds"
            ) from exc
        except requests.RequestException as exc:  # includes ConnectionError
            raise FetchError(f"{context} connection error: {exc}") from exc

        if response.status_code != 200:
            if is_debug_enabled(logger):
                logger.debug(
                    "HTTP response error",
                    extra=extra_context(
                        event="http_response",
                        component="http_client",
                        action="GET",
                        outcome="http_error",
                        status_code=response.status_code,
                        duration_ms=t.duration_ms(),
                        target=safe_target,
                        context=context
                    )
                )
            raise FetchError(
                f"{context} failed with HTTP {response.status_code} for {safe_target}",
                status_code=response.status_code,
            )

        try:
            data = response.json()
        except ValueError as exc:
            raise FetchError(
                f"{context} returned invalid JSON for {safe_target}",
                status_code=response.status_code,
            ) from exc

        if is_debug_enabled(logger):
            logger.debug(
                "HTTP response ok",
                extra=extra_context(
                    event="http_response",
                    component="http_client",
                    action="GET",
                    outcome="success",
                    status_code=response.status_code,
                    duration_ms=t.duration_ms(),
                    target=safe_target,
                    context=context
                )
            )
        return data, response
