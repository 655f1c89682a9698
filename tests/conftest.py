"""Shared test fixtures."""

import pytest

from cupscore import Course, Format, Match, Player, Side
from cupscore.course import holes_from_par_and_rank
from cupscore.seed import make_initial_tournament


@pytest.fixture
def flat_course() -> Course:
    """All par 4, hole N has handicap rank N."""
    return Course(
        day=1,
        name='Testplatz',
        city='Phoenix, Arizona',
        holes=holes_from_par_and_rank([4] * 18, list(range(1, 19))),
    )


@pytest.fixture
def players_by_id() -> dict[str, Player]:
    """Four scratch players, two per team."""
    return {
        'a1': Player(id='a1', name='Anna A', team_id='JC', course_handicap=0),
        'a2': Player(id='a2', name='Arne A', team_id='JC', course_handicap=0),
        'b1': Player(id='b1', name='Bernd B', team_id='SG', course_handicap=0),
        'b2': Player(id='b2', name='Berta B', team_id='SG', course_handicap=0),
    }


@pytest.fixture
def fourball_match() -> Match:
    return Match(
        id='m1', day=1, match_no=1, format=Format.FOURBALL_NET,
        side_a=Side(id='m1-A', team_id='JC', player_ids=['a1', 'a2']),
        side_b=Side(id='m1-B', team_id='SG', player_ids=['b1', 'b2']),
    )


@pytest.fixture
def scramble_match() -> Match:
    return Match(
        id='m2', day=1, match_no=2, format=Format.SCRAMBLE_STABLEFORD,
        side_a=Side(id='m2-A', team_id='JC', player_ids=['a1', 'a2']),
        side_b=Side(id='m2-B', team_id='SG', player_ids=['b1', 'b2']),
    )


@pytest.fixture
def singles_match() -> Match:
    return Match(
        id='m3', day=1, match_no=3, format=Format.SINGLES_NET,
        side_a=Side(id='m3-A', team_id='JC', player_ids=['a1']),
        side_b=Side(id='m3-B', team_id='SG', player_ids=['b1']),
    )


@pytest.fixture
def tournament():
    """Fresh default tournament with no scores."""
    return make_initial_tournament()
