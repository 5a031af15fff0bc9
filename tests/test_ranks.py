"""Tests for rank tier classification."""

import math

import pytest

from queuebot.display.ranks import TIER_TABLE, UNRANKED, classify


@pytest.mark.parametrize(
    ("score", "tier"),
    [
        (0, "copper1"),
        (1599, "copper1"),
        (1600, "bronze5"),
        (2599, "silver1"),
        (2600, "gold3"),
        (3100, "gold1"),
        (4999, "diamond1"),
        (5000, "champions"),
        (12000, "champions"),
    ],
)
def test_classify_boundaries(score, tier):
    assert classify(score) == tier


def test_classify_unranked_flag_wins_over_score():
    assert classify(3100, unranked=True) == UNRANKED


def test_classify_missing_score():
    assert classify(None) == UNRANKED


def test_classify_negative_score_is_unranked():
    assert classify(-1) == UNRANKED


def test_returned_tier_interval_contains_score():
    bounds = {tier: (low, high) for low, high, tier in TIER_TABLE}
    for score in range(0, 6000, 7):
        low, high = bounds[classify(score)]
        assert low <= score < high


def test_table_is_contiguous():
    for (_, high, _), (low, _, _) in zip(TIER_TABLE, TIER_TABLE[1:]):
        assert high == low
    assert TIER_TABLE[-1][1] == math.inf


def test_classify_custom_table():
    table = ((0, 10, "low"), (10, 20, "high"))
    assert classify(9, table=table) == "low"
    assert classify(10, table=table) == "high"
    assert classify(20, table=table) == UNRANKED
