"""Paginated collection of releases and tags.

The fetcher walks every page of a repository's releases or tags and returns
the complete ordered collection. It never returns a partial result and never
writes to a cache; memoization belongs to the resolver.
"""
from __future__ import annotations

import logging
from typing import Callable, Dict, List

from constants import Constants
from common.logging_utils import extra_context, is_debug_enabled, Timer
from repository.github import HostingAPI
from repository.models import Page, RawItem, ResourceKind, split_repo
from versioning.errors import FetchError

logger = logging.getLogger(__name__)


class PaginatedFetcher:
    """Collects all pages of one resource kind for a repository."""

    def __init__(self, api: HostingAPI, per_page: int = Constants.REPO_API_PER_PAGE):
        self.api = api
        self.per_page = per_page
        self._listers: Dict[ResourceKind, Callable[[str, str, int, int], Page]] = {
            ResourceKind.RELEASES: api.list_releases,
            ResourceKind.TAGS: api.list_tags,
        }

    def fetch_all(self, kind: ResourceKind, repo: str) -> List[RawItem]:
        """Fetch every page of ``kind`` for ``repo`` in page order.

        Args:
            kind: Which collection to list
            repo: Repository identity ``owner/name``

        Returns:
            All items across pages, in the order the host returned them

        Raises:
            InvalidIdentityError: if ``repo`` is malformed
            FetchError: if any page request fails; nothing is returned then
        """
        owner, name = split_repo(repo)
        list_page = self._listers[kind]

        items: List[RawItem] = []
        page = 1
        with Timer() as t:
            while True:
                if is_debug_enabled(logger):
                    logger.debug(
                        "Fetching page",
                        extra=extra_context(
                            event="fetch_page",
                            component="fetcher",
                            action=kind.value,
                            repo=repo,
                            page=page,
                        )
                    )
                try:
                    result = list_page(owner, name, page, self.per_page)
                except FetchError:
                    raise
                except Exception as exc:  # pylint: disable=broad-exception-caught
                    raise FetchError(f"listing {kind.value} for {repo} failed on page {page}: {exc}") from exc

                items.extend(result.items)
                if not result.next_page:
                    break
                page = result.next_page

        if is_debug_enabled(logger):
            logger.debug(
                "Fetch complete",
                extra=extra_context(
                    event="fetch_complete",
                    component="fetcher",
                    action=kind.value,
                    outcome="success",
                    repo=repo,
                    pages=page,
                    count=len(items),
                    duration_ms=t.duration_ms(),
                )
            )
        return items
