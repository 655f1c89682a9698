"""Default tournament setup: roster, teams, courses and the three days of matches."""

import copy

from cupscore import Day, Format, Match, Player, Side, Team, Tournament
from cupscore.course import COURSES

TOURNAMENT_TITLE = 'FRELLIS CUP 2026'
TOURNAMENT_SUBTITLE = 'Live Scoring — Player Entry + Real-Time Standings'

TEAMS = [
    Team(id='JC', name='Jumping Chollas', abbr='JCGC'),
    Team(id='SG', name='Saguaros', abbr='SGC'),
]

DAY_DATES = {
    1: 'March 5, 2026',
    2: 'March 6, 2026',
    3: 'March 7, 2026',
}

DAY_TITLES = {
    1: 'Day 1 — 2v2 Fourball (Net Match Play)',
    2: 'Day 2 — 2v2 Scramble (Stableford Match Play)',
    3: 'Day 3 — Singles (Net Match Play)',
}

# (slot id, team id, name, course handicap)
ROSTER_SLOTS = [
    ('slot-jc-1', 'JC', 'Matthew Ellis (C)', 13),
    ('slot-jc-2', 'JC', 'Jason Franklin', 8),
    ('slot-jc-3', 'JC', 'Ben Ellis', 12),
    ('slot-jc-4', 'JC', 'Anthony Heinrichs', 4),
    ('slot-jc-5', 'JC', 'Teddy Hill', 14),
    ('slot-jc-6', 'JC', 'Joe Barrett', 17),
    ('slot-jc-7', 'JC', 'Bryer Benham', 20),
    ('slot-jc-8', 'JC', 'Ted Robson', 22),
    ('slot-jc-9', 'JC', 'Ben Fabrizi', 22),
    ('slot-jc-10', 'JC', 'Sah Shah', 28),
    ('slot-sg-1', 'SG', 'Brett Sharpe (C)', 23),
    ('slot-sg-2', 'SG', 'Owen Guest', 3),
    ('slot-sg-3', 'SG', 'Chris Brezler', 6),
    ('slot-sg-4', 'SG', 'Gavin Robson', 12),
    ('slot-sg-5', 'SG', 'Jeff Trammell', 14),
    ('slot-sg-6', 'SG', 'Matt Paulina', 15),
    ('slot-sg-7', 'SG', 'Brian Ellis', 20),
    ('slot-sg-8', 'SG', 'Shawn Ellis', 21),
    ('slot-sg-9', 'SG', 'Pierce Robson', 28),
    ('slot-sg-10', 'SG', 'Jack Hankins', 17),
]

TEAM_SIZE = 10


def make_players() -> list[Player]:
    """Players p1..p20 built from the roster slots."""
    return [
        Player(id=f'p{idx}', name=name, team_id=team_id,
               course_handicap=hcp, slot_id=slot_id)
        for idx, (slot_id, team_id, name, hcp) in enumerate(ROSTER_SLOTS, start=1)
    ]


def _pair_match(day: int, match_no: int, fmt: Format, players: list[Player]) -> Match:
    i = match_no - 1
    a_ids = [players[i * 2].id, players[i * 2 + 1].id]
    b_ids = [players[TEAM_SIZE + i * 2].id, players[TEAM_SIZE + i * 2 + 1].id]
    return Match(
        id=f'd{day}m{match_no}',
        day=day,
        match_no=match_no,
        format=fmt,
        side_a=Side(id=f'd{day}m{match_no}-A', team_id='JC', player_ids=a_ids),
        side_b=Side(id=f'd{day}m{match_no}-B', team_id='SG', player_ids=b_ids),
    )


def _singles_match(day: int, match_no: int, players: list[Player]) -> Match:
    i = match_no - 1
    return Match(
        id=f'd{day}m{match_no}',
        day=day,
        match_no=match_no,
        format=Format.SINGLES_NET,
        side_a=Side(id=f'd{day}m{match_no}-A', team_id='JC', player_ids=[players[i].id]),
        side_b=Side(id=f'd{day}m{match_no}-B', team_id='SG',
                    player_ids=[players[TEAM_SIZE + i].id]),
    )


def make_initial_tournament() -> Tournament:
    """Build the default three-day event with no scores entered.

    Day 1 is five fourball matches, day 2 five scramble matches and day 3
    ten singles matches, all JC (side A) against SG (side B).
    """
    players = make_players()
    courses = copy.deepcopy(COURSES)

    day_matches = {
        1: [_pair_match(1, n, Format.FOURBALL_NET, players) for n in range(1, 6)],
        2: [_pair_match(2, n, Format.SCRAMBLE_STABLEFORD, players) for n in range(1, 6)],
        3: [_singles_match(3, n, players) for n in range(1, TEAM_SIZE + 1)],
    }
    days = [
        Day(day=d, date=DAY_DATES[d], title=DAY_TITLES[d],
            course_name=courses[d].name, matches=matches)
        for d, matches in day_matches.items()
    ]

    return Tournament(
        name=TOURNAMENT_TITLE,
        subtitle=TOURNAMENT_SUBTITLE,
        established=2023,
        teams=copy.deepcopy(TEAMS),
        courses=courses,
        players=players,
        days=days,
    )
