"""Exception hierarchy for remote version resolution.

Every error raised while resolving a source derives from
``VersionResolutionError`` so callers polling many sources can catch one
type per source. None of them are retried internally.
"""
from __future__ import annotations


class VersionResolutionError(Exception):
    """Base class for all resolution failures."""


class InvalidIdentityError(VersionResolutionError, ValueError):
    """Repository identity is not of the form ``owner/name``."""

    def __init__(self, repo: str):
        super().__init__(
            f"invalid repo: {repo!r}. it must be in the format of: owner/name"
        )
        self.repo = repo


class UnsupportedStrategyError(VersionResolutionError, ValueError):
    """Strategy is neither ``releases`` nor ``tags``."""

    def __init__(self, strategy: object):
        super().__init__(f"strategy {strategy} is not supported")
        self.strategy = strategy


class InvalidPatternError(VersionResolutionError, ValueError):
    """Extraction pattern does not compile."""


class FetchError(VersionResolutionError):
    """An upstream paginated request failed; no partial result is kept."""

    def __init__(self, message: str, *, status_code: int = 0):
        super().__init__(message)
        self.status_code = status_code


class BudgetCheckError(VersionResolutionError):
    """Rate-limit status could not be read from the host."""


class ConstraintError(VersionResolutionError, ValueError):
    """Constraint expression or a matched version could not be parsed."""


class ConfigError(VersionResolutionError, ValueError):
    """Declarative configuration is malformed."""
