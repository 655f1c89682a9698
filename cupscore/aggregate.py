"""Match, day and tournament aggregation of team points."""

import logging
from typing import Optional

from cupscore import (
    Course,
    Day,
    DaySummary,
    Match,
    MatchCard,
    Player,
    Team,
    TeamTotals,
    Tournament,
)
from cupscore.formats import compute_match_holes
from cupscore.points import points_for_match
from cupscore.status import match_status

log = logging.getLogger(__name__)

TIED_LABEL = 'Tied'


def score_match(
    match: Match,
    course: Optional[Course],
    players_by_id: dict[str, Player],
) -> MatchCard:
    """Run the full scoring pipeline for one match.

    Args:
        match: The match with its raw gross entries.
        course: The day's course, or None if missing from the snapshot.
        players_by_id: Roster lookup for handicaps.

    Returns:
        MatchCard with the 18 hole results, status and team points.
    """
    holes = compute_match_holes(match, course, players_by_id)
    status = match_status(match, holes)
    points = points_for_match(status, match.side_a, match.side_b)
    return MatchCard(
        match=match,
        holes=holes,
        status=status,
        points=points,
        course_name=course.name if course is not None else '',
    )


def _zero_points(teams: list[Team]) -> dict[str, float]:
    return {t.id: 0.0 for t in teams}


def score_day(day: Day, tournament: Tournament) -> DaySummary:
    """Score every match of a day and sum the day's team points."""
    course = tournament.courses.get(day.day)
    players_by_id = tournament.players_by_id()

    points = _zero_points(tournament.teams)
    cards: list[MatchCard] = []
    for match in sorted(day.matches, key=lambda m: m.match_no):
        card = score_match(match, course, players_by_id)
        for team_id, pts in card.points.items():
            points[team_id] = points.get(team_id, 0.0) + pts
        cards.append(card)

    return DaySummary(
        day=day.day,
        title=day.title,
        course_name=course.name if course is not None else day.course_name,
        matches=cards,
        points=points,
    )


def leader_label(totals: dict[str, float], teams: list[Team]) -> str:
    """Abbreviation of the team with more points, or "Tied".

    Args:
        totals: Points keyed by team id.
        teams: The competing teams, for their abbreviations.

    Returns:
        Leader label for display.
    """
    if len(teams) < 2:
        return TIED_LABEL
    first, second = teams[0], teams[1]
    a = totals.get(first.id, 0.0)
    b = totals.get(second.id, 0.0)
    if a == b:
        return TIED_LABEL
    return first.abbr if a > b else second.abbr


def score_tournament(tournament: Tournament) -> TeamTotals:
    """Score the whole tournament from the current snapshot.

    Nothing is cached between calls; every call recomputes from raw input.

    Args:
        tournament: The tournament snapshot.

    Returns:
        TeamTotals with per-day summaries, grand totals and the leader.
    """
    days = [score_day(d, tournament) for d in sorted(tournament.days, key=lambda d: d.day)]

    totals = _zero_points(tournament.teams)
    for summary in days:
        for team_id, pts in summary.points.items():
            totals[team_id] = totals.get(team_id, 0.0) + pts

    leader = leader_label(totals, tournament.teams)
    log.debug("Gesamtstand: %s (Fuehrung: %s)", totals, leader)
    return TeamTotals(days=days, totals=totals, leader=leader)


def find_match(tournament: Tournament, match_id: str) -> Optional[Match]:
    """Look up a match anywhere in the tournament by id."""
    for day in tournament.days:
        for match in day.matches:
            if match.id == match_id:
                return match
    return None


def score_match_by_id(tournament: Tournament, match_id: str) -> Optional[MatchCard]:
    """Score a single match by id; None when the id is unknown.

    The course comes from the day that holds the match, as in ``score_day``.
    """
    for day in tournament.days:
        for match in day.matches:
            if match.id == match_id:
                return score_match(
                    match, tournament.courses.get(day.day), tournament.players_by_id(),
                )
    return None
