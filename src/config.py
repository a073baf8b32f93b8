"""YAML configuration for the GitHub version provider and its sources.

Example::

    github:
      token: ghp_xxx          # GITHUB_TOKEN env var takes precedence
      api_base: https://api.github.com
      cache_ttl: 600
      strict_budget: true
    sources:
      - repo: owner/name
        strategy: tags
        extraction:
          regex:
            pattern: '^v(\\d+\\.\\d+\\.\\d+)$'
            result: '$1'
        constraint: '>=1.0.0'
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

import requests
import yaml
from prometheus_client import Gauge

from constants import Constants
from repository.fetcher import PaginatedFetcher
from repository.github import GitHubClient
from repository.rate_budget import RateBudgetMonitor
from versioning.cache import TTLCache
from versioning.errors import ConfigError
from versioning.models import ResolutionRequest
from versioning.resolvers.github import GitHubVersionResolver

logger = logging.getLogger(__name__)


@dataclass
class ProviderConfig:
    """Settings for one GitHub provider instance."""
    token: Optional[str] = None
    api_base: str = Constants.GITHUB_API_BASE
    cache_ttl: int = Constants.PROVIDER_CACHE_TTL_SEC
    per_page: int = Constants.REPO_API_PER_PAGE
    strict_budget: bool = True
    sources: List[ResolutionRequest] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "ProviderConfig":
        """Build from the parsed YAML document; environment overrides apply."""
        data = data or {}
        if not isinstance(data, Mapping):
            raise ConfigError("configuration root must be a mapping")

        github = data.get("github") or {}
        if not isinstance(github, Mapping):
            raise ConfigError("'github' section must be a mapping")

        sources = data.get("sources") or []
        if not isinstance(sources, list):
            raise ConfigError("'sources' must be a list")

        try:
            cache_ttl = int(github.get("cache_ttl", Constants.PROVIDER_CACHE_TTL_SEC))
            per_page = int(github.get("per_page", Constants.REPO_API_PER_PAGE))
        except (TypeError, ValueError) as exc:
            raise ConfigError(f"invalid numeric setting: {exc}") from exc
        if cache_ttl <= 0:
            raise ConfigError("cache_ttl must be positive")
        if not 1 <= per_page <= Constants.REPO_API_PER_PAGE:
            raise ConfigError(f"per_page must be between 1 and {Constants.REPO_API_PER_PAGE}")

        strict_budget = github.get("strict_budget", True)
        if not isinstance(strict_budget, bool):
            raise ConfigError("strict_budget must be true or false")

        return cls(
            token=os.environ.get(Constants.ENV_GITHUB_TOKEN) or github.get("token") or None,
            api_base=str(github.get("api_base") or Constants.GITHUB_API_BASE),
            cache_ttl=cache_ttl,
            per_page=per_page,
            strict_budget=strict_budget,
            sources=[ResolutionRequest.from_dict(s) for s in sources],
        )


def load_config(path: str) -> ProviderConfig:
    """Load a provider configuration from a YAML file.

    Raises:
        ConfigError: if the file is missing, unreadable or malformed
    """
    if not os.path.isfile(path):
        raise ConfigError(f"config file not found: {path}")
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as exc:
        raise ConfigError(f"failed to load config {path}: {exc}") from exc
    logger.debug("Loaded config from %s", path)
    return ProviderConfig.from_dict(data)


def build_resolver(
    config: ProviderConfig,
    *,
    session: Optional[requests.Session] = None,
    gauge: Optional[Gauge] = None,
) -> GitHubVersionResolver:
    """Wire client, fetcher, cache and budget monitor into a resolver.

    Raises:
        BudgetCheckError: if the host cannot report its rate limit
    """
    client = GitHubClient(base_url=config.api_base, token=config.token, session=session)
    return GitHubVersionResolver(
        fetcher=PaginatedFetcher(client, per_page=config.per_page),
        cache=TTLCache(ttl=config.cache_ttl),
        budget=RateBudgetMonitor(client, gauge=gauge),
        strict_budget=config.strict_budget,
    )


def describe(config: ProviderConfig) -> Dict[str, Any]:
    """Redacted view of a configuration for logging."""
    return {
        "api_base": config.api_base,
        "authenticated": bool(config.token),
        "cache_ttl": config.cache_ttl,
        "per_page": config.per_page,
        "strict_budget": config.strict_budget,
        "sources": len(config.sources),
    }
