"""GitHub API client for repository releases, tags and rate limits.

Provides the hosting API interface consumed by the paginated fetcher and
the rate budget monitor, and a lightweight REST implementation of it on
top of ``requests``. Authentication is carried by the session: either a
token (GITHUB_TOKEN env var or explicit) or a pre-built session whose
transport already signs requests.
"""
from __future__ import annotations

import logging
import os
from typing import Any, Dict, List, Optional, Protocol
from urllib.parse import parse_qs, urlsplit

import requests

from constants import Constants
from common.http_client import get_json
from repository.models import Page, RateLimitStatus, RawItem, optional_int
from versioning.errors import FetchError

logger = logging.getLogger(__name__)


class HostingAPI(Protocol):
    """Abstract paginated resource provider."""

    def list_releases(self, owner: str, name: str, page: int, per_page: int) -> Page:
        """Return one page of releases."""

    def list_tags(self, owner: str, name: str, page: int, per_page: int) -> Page:
        """Return one page of tags."""

    def rate_limits(self) -> RateLimitStatus:
        """Return the current core rate limit status."""


class GitHubClient:
    """Lightweight REST client for GitHub API operations.

    Supports optional authentication via the GITHUB_TOKEN environment
    variable, or an injected session that already authenticates requests.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        token: Optional[str] = None,
        session: Optional[requests.Session] = None,
    ):
        """Initialize GitHub client.

        Args:
            base_url: Base URL for GitHub API (defaults to Constants.GITHUB_API_BASE)
            token: GitHub token (defaults to GITHUB_TOKEN env var)
            session: Pre-built session; Authorization is only added to it for an explicit token
        """
        self.base_url = (base_url or Constants.GITHUB_API_BASE).rstrip("/")
        self.token = token or os.environ.get(Constants.ENV_GITHUB_TOKEN)
        self.session = session or requests.Session()
        self.session.headers.update(self._get_headers(include_auth=session is None or token is not None))

        if session is None and not self.token:
            logger.info(
                "no authentication provided. You might encounter Github API rate limiting issues."
            )

    def _get_headers(self, include_auth: bool = True) -> Dict[str, str]:
        """Get request headers including authorization if token is available."""
        headers = {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": Constants.GITHUB_API_VERSION,
            "User-Agent": Constants.USER_AGENT,
        }
        if include_auth and self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    def list_releases(self, owner: str, name: str, page: int, per_page: int) -> Page:
        """Fetch one page of repository releases.

        Args:
            owner: Repository owner
            name: Repository name
            page: 1-based page number
            per_page: Items per page (GitHub caps this at 100)

        Returns:
            Page of RawItem with the next page number (0 when exhausted)
        """
        data, response = self._get_page(f"repos/{owner}/{name}/releases", page, per_page, "list_releases")
        return Page(items=[RawItem.from_release(r) for r in data], next_page=self._next_page(response))

    def list_tags(self, owner: str, name: str, page: int, per_page: int) -> Page:
        """Fetch one page of repository tags.

        Args:
            owner: Repository owner
            name: Repository name
            page: 1-based page number
            per_page: Items per page (GitHub caps this at 100)

        Returns:
            Page of RawItem with the next page number (0 when exhausted)
        """
        data, response = self._get_page(f"repos/{owner}/{name}/tags", page, per_page, "list_tags")
        return Page(items=[RawItem.from_tag(t) for t in data], next_page=self._next_page(response))

    def rate_limits(self) -> RateLimitStatus:
        """Fetch the current rate limit status.

        Calls to ``/rate_limit`` do not count against the quota.
        """
        data, _ = get_json(self.session, f"{self.base_url}/rate_limit", context="rate_limits")
        if not isinstance(data, dict):
            raise FetchError("rate_limits returned an unexpected payload")
        return RateLimitStatus.from_api_response(data)

    def _get_page(self, endpoint: str, page: int, per_page: int, context: str):
        params = {"per_page": per_page, "page": page}
        data, response = get_json(self.session, f"{self.base_url}/{endpoint}", params=params, context=context)
        if not isinstance(data, list):
            raise FetchError(f"{context} returned an unexpected payload for {endpoint}")
        return [d for d in data if isinstance(d, dict)], response

    @staticmethod
    def _next_page(response: requests.Response) -> int:
        """Extract the next page number from the Link header, 0 if absent."""
        next_link: Dict[str, Any] = (response.links or {}).get("next") or {}
        url = next_link.get("url")
        if not url:
            return 0
        pages: List[str] = parse_qs(urlsplit(url).query).get("page") or []
        return (optional_int(pages[0]) or 0) if pages else 0
