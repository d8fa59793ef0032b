"""Unit tests for the match scoring formula."""
import pytest

from backend.services.matching import match_percent, round_half_up, skill_score, zone_score


def test_same_zone_one_level_apart_rounds_half_up():
    assert match_percent(5, 'X', 6, 'X') == 93


def test_other_zone_one_level_apart_rounds_half_up():
    # Banker's rounding would give 62 here.
    assert match_percent(5, 'X', 6, 'Y') == 63


def test_identical_players_score_full_marks():
    assert match_percent(7, 'Patia', 7, 'Patia') == 100


def test_skill_score_floors_at_zero():
    assert skill_score(1, 10) == 0
    assert match_percent(1, 'X', 10, 'Y') == 20


@pytest.mark.parametrize('value, expected', [
    (92.5, 93), (62.5, 63), (47.5, 48), (92.4, 92), (0.0, 0),
])
def test_round_half_up(value, expected):
    assert round_half_up(value) == expected


def test_zone_score():
    assert zone_score('X', 'X') == 100
    assert zone_score('X', 'x') == 40
