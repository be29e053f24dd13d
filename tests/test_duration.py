"""Tests for duration parsing."""

import pytest

from alarmageddon.engine.duration import parse_duration


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("30s", 30_000),
        ("5m", 300_000),
        ("10m", 600_000),
        ("2h", 7_200_000),
        ("1d", 86_400_000),
        ("90m", 5_400_000),
    ],
)
def test_parse_valid_durations(text: str, expected: int) -> None:
    assert parse_duration(text) == expected


@pytest.mark.parametrize(
    "text",
    ["", "10", "m", "0m", "-5m", "1.5h", "10 m", " 10m", "10w", "10M", "10m\n", "5m30s", "١٠m"],
)
def test_parse_invalid_durations(text: str) -> None:
    assert parse_duration(text) is None


def test_parse_large_duration() -> None:
    assert parse_duration("3000000d") == 3_000_000 * 86_400_000


def test_parse_non_string_returns_none() -> None:
    assert parse_duration(None) is None
    assert parse_duration(10) is None  # type: ignore[arg-type]
