"""Regex-based extraction of normalized versions from raw tag/release names.

The result template uses ``$`` references: ``$1`` or ``${1}`` for numbered
groups, ``$name`` or ``${name}`` for named groups and ``$$`` for a literal
dollar sign. A bare reference takes the longest run of ``[A-Za-z0-9_]``, so
``$1x`` refers to a group called ``1x``; use ``${1}x`` to append text.
"""
from __future__ import annotations

import functools
import re
from typing import Tuple

from versioning.errors import InvalidPatternError

_TEMPLATE_REF = re.compile(r"\$(?:(\$)|\{([A-Za-z0-9_]+)\}|([A-Za-z0-9_]+))")

NO_MATCH: Tuple[bool, str] = (False, "")


class _UnknownGroup(LookupError):
    """Template references a group the pattern does not define."""


@functools.lru_cache(maxsize=256)
def compile_pattern(pattern: str) -> re.Pattern[str]:
    """Compile and memoize an extraction pattern.

    Raises:
        InvalidPatternError: if the pattern is not a valid regular expression
    """
    try:
        return re.compile(pattern)
    except re.error as exc:
        raise InvalidPatternError(f"invalid extraction pattern {pattern!r}: {exc}") from exc


def _group_value(match: re.Match[str], ref: str) -> str:
    if ref.isdigit():
        index = int(ref)
        if index > match.re.groups:
            raise _UnknownGroup(ref)
        return match.group(index) or ""
    if ref not in match.re.groupindex:
        raise _UnknownGroup(ref)
    return match.group(ref) or ""


def expand_template(match: re.Match[str], template: str) -> str:
    """Substitute group references in ``template`` with values from ``match``.

    An empty template yields the whole match. Groups that exist but did not
    participate in the match expand to an empty string.

    Raises:
        LookupError: if the template references a group missing from the pattern
    """
    if not template:
        return match.group(0)

    def _replace(ref: re.Match[str]) -> str:
        if ref.group(1):
            return "$"
        return _group_value(match, ref.group(2) or ref.group(3))

    return _TEMPLATE_REF.sub(_replace, template)


def extract_version(pattern: str, template: str, value: str) -> Tuple[bool, str]:
    """Apply ``pattern`` to ``value`` and build a version from ``template``.

    Returns:
        ``(True, version)`` on a match, ``(False, "")`` otherwise. A template
        that references a group the pattern does not define is a no-match.
    """
    match = compile_pattern(pattern).search(value)
    if match is None:
        return NO_MATCH
    try:
        return True, expand_template(match, template)
    except _UnknownGroup:
        return NO_MATCH
