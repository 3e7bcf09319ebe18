"""Unit tests for ladder points and rank parsing."""

from __future__ import annotations

import pytest

from data.models.rank_snapshot import RankSnapshot


def test_ladder_points_within_a_division() -> None:
    assert RankSnapshot("GOLD", "II", 50).ladder_points == 1450
    assert RankSnapshot("IRON", "IV", 0).ladder_points == 0


def test_promotion_keeps_the_difference_continuous() -> None:
    before = RankSnapshot("GOLD", "I", 90)
    after = RankSnapshot("PLATINUM", "IV", 10)

    assert after.ladder_points - before.ladder_points == 20


def test_apex_tiers_share_one_base() -> None:
    assert RankSnapshot("MASTER", None, 0).ladder_points == 2800
    assert RankSnapshot("GRANDMASTER", None, 350).ladder_points == 3150
    assert RankSnapshot("CHALLENGER", "I", 900).ladder_points == 3700
    assert RankSnapshot("MASTER", None, 20).ladder_points - RankSnapshot("DIAMOND", "I", 80).ladder_points == 40


def test_ladder_points_are_case_insensitive() -> None:
    assert RankSnapshot("gold", "ii", 50).ladder_points == 1450


@pytest.mark.parametrize(
    "rank",
    [
        RankSnapshot.unranked(),
        RankSnapshot("GOLD", "II", None),
        RankSnapshot("GOLD", None, 50),
        RankSnapshot("WOOD", "II", 50),
    ],
)
def test_ladder_points_are_unknown_without_a_full_rank(rank: RankSnapshot) -> None:
    assert rank.ladder_points is None


def test_is_ranked_and_is_apex() -> None:
    assert not RankSnapshot.unranked().is_ranked
    assert RankSnapshot("SILVER", "III", 0).is_ranked
    assert RankSnapshot("Master", None, 5).is_apex
    assert not RankSnapshot("DIAMOND", "I", 5).is_apex


@pytest.mark.parametrize(
    ("words", "expected"),
    [
        (["gold", "2", "50"], RankSnapshot("GOLD", "II", 50)),
        (["Gold", "ii", "50"], RankSnapshot("GOLD", "II", 50)),
        (["iron", "4", "0"], RankSnapshot("IRON", "IV", 0)),
        (["master", "120"], RankSnapshot("MASTER", None, 120)),
    ],
)
def test_parse_accepts_numbers_and_numerals(words: list[str], expected: RankSnapshot) -> None:
    assert RankSnapshot.parse(words) == expected


@pytest.mark.parametrize(
    "words",
    [
        [],
        ["gold"],
        ["gold", "50"],
        ["gold", "5", "50"],
        ["gold", "2", "fifty"],
        ["gold", "2", "-5"],
        ["wood", "2", "50"],
        ["master", "1", "120"],
        ["gold", "2", "50", "extra"],
    ],
)
def test_parse_rejects_malformed_ranks(words: list[str]) -> None:
    with pytest.raises(ValueError):
        RankSnapshot.parse(words)
