"""Regex matching of user supplied patterns against alert text."""

import re
from functools import lru_cache
from typing import Any

from alarmageddon.models.alert import Alert, resolve_field
from alarmageddon.models.silence import MATCH_ALL_PATTERN

# Logical attributes joined into the search text, in order
SEARCH_FIELDS = ("title", "description", "severity", "service", "hostname", "source")


class InvalidPatternError(ValueError):
    """Raised when a pattern is not a valid regular expression."""

    def __init__(self, pattern: str, reason: str):
        self.pattern = pattern
        self.reason = reason
        super().__init__(f"Invalid pattern {pattern!r}: {reason}")


@lru_cache(maxsize=256)
def _compile(pattern: str) -> re.Pattern[str]:
    return re.compile(pattern, re.IGNORECASE)


def compile_pattern(pattern: str | None) -> re.Pattern[str]:
    """Compile a case-insensitive pattern; empty means match everything.

    Raises:
        InvalidPatternError: If the pattern is not a valid regular expression
    """
    try:
        return _compile(pattern or MATCH_ALL_PATTERN)
    except re.error as e:
        raise InvalidPatternError(pattern or "", str(e)) from e


def build_search_text(payload: dict[str, Any]) -> str:
    """Space-join the searchable attributes of an alert payload."""
    return " ".join(resolve_field(payload, name) for name in SEARCH_FIELDS)


def matches(pattern: str | None, alert: Alert | dict[str, Any]) -> bool:
    """Test a pattern against an alert's search text.

    Args:
        pattern: Regular expression; empty or None matches everything
        alert: Alert or raw payload

    Returns:
        True if the pattern matches anywhere in the search text

    Raises:
        InvalidPatternError: If the pattern is not a valid regular expression
    """
    payload = alert.payload if isinstance(alert, Alert) else alert
    return compile_pattern(pattern).search(build_search_text(payload)) is not None
