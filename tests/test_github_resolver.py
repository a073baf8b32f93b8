"""Tests for the GitHub version resolver pipeline."""

import logging

import pytest

from conftest import FakeHostingAPI, tag_items
from repository.fetcher import PaginatedFetcher
from repository.models import RawItem, ResourceKind, cache_key
from repository.rate_budget import RateBudgetMonitor
from versioning.cache import TTLCache
from versioning.errors import (
    BudgetCheckError,
    ConstraintError,
    FetchError,
    InvalidIdentityError,
    UnsupportedStrategyError,
)
from versioning.models import ExtractionConfig, ResolutionRequest, Strategy
from versioning.resolvers.github import GitHubVersionResolver

SEMVER_TAG = r"^v(\d+\.\d+\.\d+)$"
GAUGE = "versionwatch_provider_github_rate_limit_remaining"


def create_request(strategy="tags", constraint="", repo="owner/name", pattern=SEMVER_TAG, result="$1"):
    """Helper to create resolution requests."""
    return ResolutionRequest(
        repo=repo,
        strategy=strategy,
        extraction=ExtractionConfig(pattern=pattern, result=result),
        constraint=constraint,
    )


@pytest.fixture
def cache(clock):
    return TTLCache(ttl=600, clock=clock)


def make_resolver(api, cache, gauge, strict_budget=True):
    return GitHubVersionResolver(
        PaginatedFetcher(api), cache, RateBudgetMonitor(api, gauge=gauge), strict_budget=strict_budget
    )


class TestGitHubVersionResolver:
    """End-to-end pipeline behavior against a fake host."""

    def test_tags_without_constraint(self, cache, gauge):
        api = FakeHostingAPI(tags=[tag_items(["v1.0.0", "not-a-version", "v2.0.0"])])
        resolver = make_resolver(api, cache, gauge)

        assert resolver.get_versions(create_request()) == ["1.0.0", "2.0.0"]

    def test_constraint_filters_matched_versions(self, cache, gauge):
        api = FakeHostingAPI(tags=[tag_items(["v1.0.0", "v1.2.0", "v2.0.0"])])
        resolver = make_resolver(api, cache, gauge)

        versions = resolver.get_versions(create_request(constraint=">=1.1.0 <2.0.0"))

        assert versions == ["1.2.0"]

    def test_source_order_is_preserved(self, cache, gauge):
        api = FakeHostingAPI(tags=[tag_items(["v3.0.0", "v1.0.0", "v2.0.0"])])
        resolver = make_resolver(api, cache, gauge)

        assert resolver.get_versions(create_request()) == ["3.0.0", "1.0.0", "2.0.0"]

    def test_no_matches_returns_empty_list(self, cache, gauge):
        api = FakeHostingAPI(tags=[tag_items(["latest", "nightly"])])
        resolver = make_resolver(api, cache, gauge)

        assert resolver.get_versions(create_request()) == []

    def test_releases_gate_on_tag_name_and_extract_from_name(self, cache, gauge):
        releases = [[
            RawItem(name="v1.0.0", tag_name="v1.0.0"),
            RawItem(name="v1.5.0", tag_name=""),
            RawItem(name="", tag_name="v2.0.0"),
            RawItem(name="v3.0.0", tag_name="3.0.0"),
        ]]
        api = FakeHostingAPI(releases=releases)
        resolver = make_resolver(api, cache, gauge)

        assert resolver.get_versions(create_request(strategy="releases")) == ["1.0.0", "3.0.0"]

    def test_strategy_enum_accepted(self, cache, gauge):
        api = FakeHostingAPI(tags=[tag_items(["v1.0.0"])])
        resolver = make_resolver(api, cache, gauge)

        assert resolver.get_versions(create_request(strategy=Strategy.TAGS)) == ["1.0.0"]

    def test_second_resolution_is_served_from_cache(self, cache, gauge):
        api = FakeHostingAPI(tags=[tag_items(["v1.0.0", "v2.0.0"])])
        resolver = make_resolver(api, cache, gauge)

        first = resolver.get_versions(create_request())
        second = resolver.get_versions(create_request())

        assert first == second
        assert len(api.calls) == 1

    def test_cache_expiry_refetches(self, cache, gauge, clock):
        api = FakeHostingAPI(tags=[tag_items(["v1.0.0"])])
        resolver = make_resolver(api, cache, gauge)

        resolver.get_versions(create_request())
        clock.advance(601)
        resolver.get_versions(create_request())

        assert len(api.calls) == 2

    def test_releases_and_tags_cached_separately(self, cache, gauge):
        api = FakeHostingAPI(releases=[tag_items(["v9.0.0"])], tags=[tag_items(["v1.0.0"])])
        resolver = make_resolver(api, cache, gauge)

        assert resolver.get_versions(create_request(strategy="releases")) == ["9.0.0"]
        assert resolver.get_versions(create_request(strategy="tags")) == ["1.0.0"]
        assert cache.get(cache_key(ResourceKind.RELEASES, "owner/name")) is not None
        assert cache.get(cache_key(ResourceKind.TAGS, "owner/name")) is not None

    @pytest.mark.parametrize("strategy", ["Tags", " releases ", "TAGS"])
    def test_strategy_must_match_exactly(self, cache, gauge, strategy):
        api = FakeHostingAPI(tags=[tag_items(["v1.0.0"])])
        resolver = make_resolver(api, cache, gauge)

        with pytest.raises(UnsupportedStrategyError):
            resolver.get_versions(create_request(strategy=strategy))
        assert api.calls == []

    def test_unsupported_strategy_touches_nothing(self, cache, gauge):
        api = FakeHostingAPI(tags=[tag_items(["v1.0.0"])])
        resolver = make_resolver(api, cache, gauge)
        rate_calls = api.rate_calls

        with pytest.raises(UnsupportedStrategyError):
            resolver.get_versions(create_request(strategy="branches"))

        assert api.calls == []
        assert api.rate_calls == rate_calls
        assert len(cache) == 0

    def test_mid_pagination_failure_leaves_cache_unset(self, cache, gauge):
        items = tag_items([f"v1.0.{i}" for i in range(250)])
        api = FakeHostingAPI(tags=[items[:100], items[100:200], items[200:]], fail_on_page=2)
        resolver = make_resolver(api, cache, gauge)

        with pytest.raises(FetchError):
            resolver.get_versions(create_request())

        assert cache.lookup(cache_key(ResourceKind.TAGS, "owner/name")) == (None, False)

    def test_invalid_identity(self, cache, gauge):
        resolver = make_resolver(FakeHostingAPI(), cache, gauge)
        with pytest.raises(InvalidIdentityError):
            resolver.get_versions(create_request(repo="not-a-repo"))

    def test_invalid_constraint_aborts(self, cache, gauge):
        api = FakeHostingAPI(tags=[tag_items(["v1.0.0"])])
        resolver = make_resolver(api, cache, gauge)

        with pytest.raises(ConstraintError):
            resolver.get_versions(create_request(constraint="not a constraint"))

    def test_unparseable_version_aborts(self, cache, gauge):
        api = FakeHostingAPI(tags=[tag_items(["v1.0.0", "build-nightly"])])
        resolver = make_resolver(api, cache, gauge)
        req = create_request(pattern=r"^(?:v|build-)(.+)$", constraint=">=1.0.0")

        with pytest.raises(ConstraintError):
            resolver.get_versions(req)

    def test_budget_checked_at_construction_and_per_request(self, cache, gauge, registry):
        api = FakeHostingAPI(tags=[tag_items(["v1.0.0"])], remaining=1200)
        resolver = make_resolver(api, cache, gauge)
        assert api.rate_calls == 1
        assert registry.get_sample_value(GAUGE) == 1200.0

        api.remaining = 1100
        resolver.get_versions(create_request())
        resolver.get_versions(create_request())

        assert api.rate_calls == 3
        assert registry.get_sample_value(GAUGE) == 1100.0

    def test_construction_fails_when_budget_unreadable(self, cache, gauge):
        api = FakeHostingAPI()
        api.rate_error = FetchError("rate_limits failed with HTTP 401", status_code=401)

        with pytest.raises(BudgetCheckError):
            make_resolver(api, cache, gauge)

    def test_strict_budget_failure_aborts_request(self, cache, gauge):
        api = FakeHostingAPI(tags=[tag_items(["v1.0.0"])])
        resolver = make_resolver(api, cache, gauge)
        api.rate_error = FetchError("down")

        with pytest.raises(BudgetCheckError):
            resolver.get_versions(create_request())
        assert api.calls == []

    def test_lenient_budget_failure_continues(self, cache, gauge, caplog):
        api = FakeHostingAPI(tags=[tag_items(["v1.0.0"])])
        resolver = make_resolver(api, cache, gauge, strict_budget=False)
        api.rate_error = FetchError("down")

        with caplog.at_level(logging.WARNING):
            assert resolver.get_versions(create_request()) == ["1.0.0"]
        assert "rate limit check failed" in caplog.text

    def test_resolve_many_reports_errors_per_source(self, cache, gauge):
        api = FakeHostingAPI(tags=[tag_items(["v1.0.0"])])
        resolver = make_resolver(api, cache, gauge)

        results = resolver.resolve_many([
            create_request(),
            create_request(strategy="branches"),
        ])

        assert results[0]["versions"] == ["1.0.0"]
        assert results[0]["strategy"] == "tags"
        assert "not supported" in results[1]["error"]
        assert "versions" not in results[1]
