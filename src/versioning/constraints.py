"""Semantic-version constraint evaluation built on ``semantic_version``."""

from __future__ import annotations

import functools
import re
from typing import List, Union

import semantic_version

from versioning.errors import ConstraintError

# ">= 1.2.3" -> ">=1.2.3"; both spec grammars expect the operator attached.
_OPERATOR_GAP = re.compile(r"(<=|>=|!=|==|<|>|=|\^|~)\s+(?=\d|v)")
_COMPARATOR_GAP = re.compile(r"\s*,\s*|\s+")


class AnySpec:
    """Alternatives joined by ``||``; a version matches if any alternative does."""

    def __init__(self, alternatives: List[semantic_version.SimpleSpec]):
        self.alternatives = alternatives

    def match(self, version: semantic_version.Version) -> bool:
        return any(spec.match(version) for spec in self.alternatives)


Spec = Union[semantic_version.NpmSpec, AnySpec]


@functools.lru_cache(maxsize=128)
def parse_constraint(constraint: str) -> Spec:
    """Parse a constraint expression into a spec object.

    Space- or comma-separated comparators are ANDed and ``||`` separates
    alternatives. The npm grammar is tried first; expressions it rejects,
    such as ones using ``!=``, are parsed per alternative in comma form.

    Raises:
        ConstraintError: if the expression cannot be parsed
    """
    s = _OPERATOR_GAP.sub(r"\1", constraint.strip())
    try:
        return semantic_version.NpmSpec(s)
    except ValueError:
        pass
    try:
        return AnySpec([
            semantic_version.SimpleSpec(_COMPARATOR_GAP.sub(",", alt.strip()))
            for alt in s.split("||")
        ])
    except ValueError as exc:
        raise ConstraintError(f"invalid constraint {constraint!r}: {exc}") from exc


def parse_version(version: str) -> semantic_version.Version:
    """Parse a version leniently: a leading ``v`` is dropped and partial
    versions are coerced (``1.2`` -> ``1.2.0``).

    Raises:
        ConstraintError: if the string is not a version at all
    """
    s = version.strip()
    if s[:1] in ("v", "V"):
        s = s[1:]
    try:
        return semantic_version.Version(s)
    except ValueError:
        pass
    try:
        return semantic_version.Version.coerce(s)
    except ValueError as exc:
        raise ConstraintError(f"invalid version {version!r}: {exc}") from exc


def satisfies(constraint: str, version: str) -> bool:
    """Report whether ``version`` meets ``constraint``.

    Pre-release handling follows the npm range rules. A blank constraint
    matches everything.
    """
    if not constraint or not constraint.strip():
        return True
    return parse_constraint(constraint).match(parse_version(version))
