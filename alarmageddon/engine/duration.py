"""Human readable duration parsing."""

import re

_DURATION_RE = re.compile(r"([0-9]+)([smhd])")

UNIT_MILLIS = {
    "s": 1000,
    "m": 60 * 1000,
    "h": 60 * 60 * 1000,
    "d": 24 * 60 * 60 * 1000,
}


def parse_duration(text: str | None) -> int | None:
    """Parse a duration such as ``30s``, ``5m``, ``2h`` or ``1d``.

    Args:
        text: Duration string

    Returns:
        Duration in milliseconds, or None if the string is not a valid
        positive duration
    """
    if not isinstance(text, str):
        return None

    match = _DURATION_RE.fullmatch(text)
    if not match:
        return None

    value = int(match.group(1))
    if value <= 0:
        return None
    return value * UNIT_MILLIS[match.group(2)]
