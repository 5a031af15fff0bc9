"""Tests for grace period formatting."""

import pytest
from cachetools import LRUCache

from queuebot.display.durations import DurationFormatter


@pytest.mark.parametrize(
    ("seconds", "expected"),
    [
        (0, ""),
        (1, "1 second"),
        (45, "45 seconds"),
        (60, "1 minute"),
        (65, "1 minute and 5 seconds"),
        (120, "2 minutes"),
        (125, "2 minutes and 5 seconds"),
        (3601, "60 minutes and 1 second"),
    ],
)
def test_format(seconds, expected):
    assert DurationFormatter().format(seconds) == expected


def test_format_is_idempotent_and_memoized():
    formatter = DurationFormatter()
    first = formatter.format(65)
    assert formatter.format(65) == first
    assert formatter.cache == {65: first}


def test_format_uses_injected_cache():
    cache = LRUCache(maxsize=2)
    formatter = DurationFormatter(cache)
    for seconds in (1, 2, 3):
        formatter.format(seconds)
    assert len(cache) == 2
    assert 1 not in cache
    assert formatter.format(1) == "1 second"


def test_format_rejects_negative():
    with pytest.raises(ValueError):
        DurationFormatter().format(-5)
