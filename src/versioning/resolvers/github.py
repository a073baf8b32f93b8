"""GitHub version resolver: releases or tags filtered through extraction and constraints."""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Optional, Tuple

from common.logging_utils import extra_context, is_debug_enabled
from repository.fetcher import PaginatedFetcher
from repository.models import RawItem, ResourceKind, cache_key
from repository.rate_budget import RateBudgetMonitor
from versioning.cache import TTLCache
from versioning.constraints import satisfies
from versioning.errors import BudgetCheckError, VersionResolutionError
from versioning.extraction import extract_version
from versioning.models import ResolutionRequest, Strategy, VersionList

logger = logging.getLogger(__name__)

# Cached collections are tuples so readers can never mutate a shared entry.
ItemCache = TTLCache[Tuple[RawItem, ...]]


class GitHubVersionResolver:
    """Resolves the versions a GitHub repository publishes.

    Releases and tags share one pipeline: budget check, cache lookup or
    fetch, extraction, then optional constraint filtering. The cache, the
    fetcher and the budget monitor are injected so that several resolvers
    (or tests) can each own isolated instances.

    Example:
        resolver = GitHubVersionResolver(fetcher, cache, monitor)
        versions = resolver.get_versions(ResolutionRequest.from_dict(source))
    """

    def __init__(
        self,
        fetcher: PaginatedFetcher,
        cache: ItemCache,
        budget: RateBudgetMonitor,
        strict_budget: bool = True,
    ):
        """Initialize the resolver and verify the host is reachable.

        Args:
            fetcher: Paginated fetcher bound to a hosting API
            cache: Cache holding fetched collections
            budget: Rate budget monitor bound to the same hosting API
            strict_budget: When False, a failed per-request budget check is
                logged and resolution continues. Construction always fails
                on a budget error.

        Raises:
            BudgetCheckError: if the initial rate-limit query fails
        """
        self.fetcher = fetcher
        self.cache = cache
        self.budget = budget
        self.strict_budget = strict_budget
        self.budget.check_budget()

    def get_versions(self, req: ResolutionRequest) -> VersionList:
        """Return the versions ``req`` selects, in source order.

        Raises:
            UnsupportedStrategyError: before any cache, network or budget access
            InvalidIdentityError, FetchError, BudgetCheckError, ConstraintError
        """
        strategy = Strategy.parse(req.strategy)
        self._check_budget()

        items = self.fetch_candidates(strategy.resource_kind, req.repo)
        matched = self.extract(req, items)
        if not req.constraint:
            return matched
        return self.apply_constraint(req.constraint, matched)

    def fetch_candidates(self, kind: ResourceKind, repo: str) -> Tuple[RawItem, ...]:
        """Return the cached collection for ``(kind, repo)``, fetching on a miss."""
        key = cache_key(kind, repo)
        cached, found = self.cache.lookup(key)
        if found and cached is not None:
            if is_debug_enabled(logger):
                logger.debug(
                    "Cache hit",
                    extra=extra_context(
                        event="cache_hit", component="github_resolver", action=kind.value, repo=repo
                    )
                )
            return cached

        if is_debug_enabled(logger):
            logger.debug(
                "Cache miss, fetching",
                extra=extra_context(
                    event="cache_miss", component="github_resolver", action=kind.value, repo=repo
                )
            )
        items = tuple(self.fetcher.fetch_all(kind, repo))
        self.cache.set(key, items)
        return items

    @staticmethod
    def extract(req: ResolutionRequest, items: Iterable[RawItem]) -> VersionList:
        """Run the extraction pattern over every item with a non-empty tag name."""
        pattern, template = req.extraction.pattern, req.extraction.result
        matched: VersionList = []
        for item in items:
            if not item.tag_name:
                continue
            ok, version = extract_version(pattern, template, item.name)
            if ok:
                matched.append(version)
        return matched

    @staticmethod
    def apply_constraint(constraint: str, versions: Iterable[str]) -> VersionList:
        """Keep versions satisfying ``constraint``; a parse error aborts."""
        return [v for v in versions if satisfies(constraint, v)]

    def resolve_many(self, requests: Iterable[ResolutionRequest]) -> List[Dict[str, Any]]:
        """Resolve several sources in order.

        Each result is the request in declarative form plus either
        ``versions`` or ``error``. Only ``VersionResolutionError`` is captured
        per source; anything else propagates.
        """
        results: List[Dict[str, Any]] = []
        for req in requests:
            entry = req.to_dict()
            try:
                entry["versions"] = self.get_versions(req)
            except VersionResolutionError as exc:
                logger.error("resolving %s failed: %s", req.repo, exc)
                entry["error"] = str(exc)
            results.append(entry)
        return results

    def _check_budget(self) -> Optional[int]:
        try:
            return self.budget.check_budget()
        except BudgetCheckError as exc:
            if self.strict_budget:
                raise
            logger.warning("rate limit check failed, continuing: %s", exc)
            return None
