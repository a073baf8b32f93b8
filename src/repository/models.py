"""Data models shared by the hosting API client and the fetcher."""
from __future__ import annotations

import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from constants import Constants
from versioning.errors import InvalidIdentityError


class ResourceKind(Enum):
    """Paginated collections a repository exposes."""
    RELEASES = "releases"
    TAGS = "tags"


@dataclass(frozen=True)
class RawItem:
    """A release or tag as returned by the host.

    ``tag_name`` gates whether the item is considered at all and ``name`` is
    the value handed to extraction. For tags both fields hold the tag name.
    """
    name: str
    tag_name: str

    @classmethod
    def from_release(cls, data: Dict[str, Any]) -> "RawItem":
        """Create from a GitHub release object."""
        return cls(name=data.get("name") or "", tag_name=data.get("tag_name") or "")

    @classmethod
    def from_tag(cls, data: Dict[str, Any]) -> "RawItem":
        """Create from a GitHub tag object."""
        name = data.get("name") or ""
        return cls(name=name, tag_name=name)


@dataclass
class Page:
    """One page of a paginated listing. ``next_page`` is 0 on the last page."""
    items: List[RawItem] = field(default_factory=list)
    next_page: int = 0


@dataclass
class RateLimitStatus:
    """GitHub API core rate limit status."""
    remaining: int
    limit: int
    reset_time: int  # Unix timestamp
    used: int

    @property
    def minutes_until_reset(self) -> int:
        """Minutes until rate limit resets."""
        now = int(time.time())
        return max(0, (self.reset_time - now) // 60)

    @classmethod
    def from_api_response(cls, data: Dict[str, Any]) -> "RateLimitStatus":
        """Create from the ``/rate_limit`` payload (``resources.core``)."""
        core = (data.get("resources") or {}).get("core") or data.get("rate") or {}
        return cls(
            remaining=int(core.get("remaining", 0)),
            limit=int(core.get("limit", 0)),
            reset_time=int(core.get("reset", 0)),
            used=int(core.get("used", 0)),
        )


def split_repo(repo: str) -> Tuple[str, str]:
    """Split ``owner/name`` on the first slash.

    Raises:
        InvalidIdentityError: when either segment is missing or empty.
    """
    owner, sep, name = (repo or "").partition("/")
    if not sep or not owner or not name:
        raise InvalidIdentityError(repo)
    return owner, name


def cache_key(kind: ResourceKind, repo: str) -> str:
    """Cache key namespacing releases and tags of the same repository."""
    return f"{Constants.CACHE_KEY_PREFIX}/{repo}/{kind.value}"


def optional_int(value: Optional[str]) -> Optional[int]:
    """Parse an integer header value, returning None when absent or invalid."""
    if value is None:
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None
