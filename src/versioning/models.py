"""Data models for remote version resolution."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional

from repository.models import ResourceKind
from versioning.errors import ConfigError, UnsupportedStrategyError
from versioning.extraction import compile_pattern


class Strategy(Enum):
    """Which collection of a repository versions are resolved from."""
    RELEASES = "releases"
    TAGS = "tags"

    @classmethod
    def parse(cls, value: Any) -> "Strategy":
        """Parse a declarative strategy value.

        Values are matched exactly, so ``"Tags"`` is rejected.

        Raises:
            UnsupportedStrategyError: for anything but releases or tags
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError as exc:
            raise UnsupportedStrategyError(value) from exc

    @property
    def resource_kind(self) -> ResourceKind:
        return ResourceKind(self.value)


@dataclass(frozen=True)
class ExtractionConfig:
    """Regex plus result template; the pattern is validated on construction."""
    pattern: str
    result: str = ""

    def __post_init__(self) -> None:
        compile_pattern(self.pattern)

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "ExtractionConfig":
        """Build from ``{regex: {pattern, result}}``."""
        regex = (data or {}).get("regex")
        if not isinstance(regex, Mapping) or not regex.get("pattern"):
            raise ConfigError("extraction.regex.pattern is required")
        return cls(pattern=str(regex["pattern"]), result=str(regex.get("result") or ""))


@dataclass(frozen=True)
class ResolutionRequest:
    """One source to resolve. ``strategy`` is kept as given so that an
    unsupported value surfaces at resolution time, before any I/O."""
    repo: str
    strategy: Any
    extraction: ExtractionConfig
    constraint: str = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ResolutionRequest":
        """Build from ``{repo, strategy, extraction: {regex: {...}}, constraint}``."""
        if not isinstance(data, Mapping):
            raise ConfigError("source entry must be a mapping")
        repo = data.get("repo")
        if not repo or not isinstance(repo, str):
            raise ConfigError("source entry requires a 'repo' string")
        return cls(
            repo=repo.strip(),
            strategy=data.get("strategy", ""),
            extraction=ExtractionConfig.from_dict(data.get("extraction")),
            constraint=str(data.get("constraint") or "").strip(),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the declarative dictionary form."""
        strategy = self.strategy.value if isinstance(self.strategy, Strategy) else self.strategy
        return {
            "repo": self.repo,
            "strategy": strategy,
            "extraction": {"regex": {"pattern": self.extraction.pattern, "result": self.extraction.result}},
            "constraint": self.constraint,
        }


# Ordered, normalized versions in source order; may be empty.
VersionList = List[str]
