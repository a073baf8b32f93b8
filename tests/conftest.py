"""Shared fakes for the GitHub version provider tests."""

from typing import Dict, List, Optional, Sequence

import pytest
from prometheus_client import CollectorRegistry

from common.metrics import build_rate_limit_gauge
from repository.models import Page, RateLimitStatus, RawItem, ResourceKind
from versioning.errors import FetchError


def tag_items(names: Sequence[str]) -> List[RawItem]:
    """Build tag items from plain names."""
    return [RawItem(name=n, tag_name=n) for n in names]


class FakeHostingAPI:
    """In-memory hosting API serving pre-built pages and recording calls."""

    def __init__(
        self,
        releases: Optional[List[List[RawItem]]] = None,
        tags: Optional[List[List[RawItem]]] = None,
        remaining: int = 4999,
        fail_on_page: Optional[int] = None,
    ):
        self.pages: Dict[ResourceKind, List[List[RawItem]]] = {
            ResourceKind.RELEASES: releases or [[]],
            ResourceKind.TAGS: tags or [[]],
        }
        self.remaining = remaining
        self.fail_on_page = fail_on_page
        self.rate_error: Optional[Exception] = None
        self.calls = []
        self.rate_calls = 0

    def _page(self, kind, owner, name, page, per_page):
        self.calls.append((kind, owner, name, page, per_page))
        if self.fail_on_page == page:
            raise FetchError(f"page {page} failed", status_code=502)
        pages = self.pages[kind]
        next_page = page + 1 if page < len(pages) else 0
        return Page(items=list(pages[page - 1]), next_page=next_page)

    def list_releases(self, owner, name, page, per_page):
        return self._page(ResourceKind.RELEASES, owner, name, page, per_page)

    def list_tags(self, owner, name, page, per_page):
        return self._page(ResourceKind.TAGS, owner, name, page, per_page)

    def rate_limits(self):
        self.rate_calls += 1
        if self.rate_error is not None:
            raise self.rate_error
        return RateLimitStatus(remaining=self.remaining, limit=5000, reset_time=0, used=5000 - self.remaining)


class ManualClock:
    """Monotonic clock advanced by hand."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def registry():
    """Isolated prometheus registry per test."""
    return CollectorRegistry()


@pytest.fixture
def gauge(registry):
    return build_rate_limit_gauge(registry)


@pytest.fixture
def clock():
    return ManualClock()
