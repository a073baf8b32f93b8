"""Version resolvers for remote sources."""

from .github import GitHubVersionResolver

__all__ = [
    "GitHubVersionResolver",
]
