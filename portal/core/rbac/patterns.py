"""Glob-style resource name matching for allow/deny rules.

Only ``*`` is special: it matches any run of characters, including none.
Everything else is matched literally and patterns are anchored at both ends,
so ``system-*`` matches ``system-core`` but not ``my-system-core``.
"""

import re
from functools import lru_cache
from typing import Iterable

from .models import WILDCARD


@lru_cache(maxsize=1024)
def _compile(pattern: str) -> "re.Pattern[str]":
    """Translate a wildcard pattern into an anchored regex."""
    literal_parts = (re.escape(part) for part in pattern.split(WILDCARD))
    return re.compile(".*".join(literal_parts), re.DOTALL)


def matches_pattern(name: str, pattern: str) -> bool:
    """Check a single resource name against a single pattern."""
    if pattern == WILDCARD:
        return True
    if WILDCARD in pattern:
        return _compile(pattern).fullmatch(name) is not None
    return pattern == name


def matches_any(name: str, patterns: Iterable[str]) -> bool:
    """Check if the name matches any pattern. An empty list never matches."""
    return any(matches_pattern(name, pattern) for pattern in patterns)
