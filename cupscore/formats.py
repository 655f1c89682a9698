"""Per-hole scoring strategies for the three match formats."""

import logging
from typing import Callable, Optional

from cupscore import (
    HOLES_PER_ROUND,
    BestBall,
    Course,
    Format,
    FourballDetail,
    Hole,
    HoleResult,
    Match,
    Player,
    ScrambleDetail,
    Side,
    SinglesDetail,
)
from cupscore.course import hole_by_number
from cupscore.handicap import net_score

log = logging.getLogger(__name__)

# Stableford points by (gross - par), clamped to the ends of the table
STABLEFORD_POINTS: dict[int, int] = {
    -3: 10,   # double eagle or better
    -2: 6,    # eagle
    -1: 3,    # birdie
    0: 1,     # par
    1: -1,    # bogey
    2: -2,    # double bogey or worse
}


def stableford_from_diff(diff: int) -> int:
    """Return Stableford points for a score relative to par.

    Args:
        diff: Gross strokes minus par.

    Returns:
        Points from the fixed step table; anything below -3 scores like -3
        and anything above 2 scores like 2.
    """
    return STABLEFORD_POINTS[max(-3, min(2, diff))]


def _gross(match: Match, key: str, hole: int) -> Optional[int]:
    return match.gross.get(key, {}).get(hole)


def _best_ball(
    match: Match,
    side: Side,
    hole: Hole,
    players_by_id: dict[str, Player],
) -> Optional[BestBall]:
    """Lowest net among the side's players with an entry, None if nobody has one."""
    balls = []
    for pid in side.player_ids:
        gross = _gross(match, pid, hole.number)
        player = players_by_id.get(pid)
        if gross is None or player is None:
            continue
        net = net_score(gross, player.course_handicap, hole.handicap_rank)
        balls.append(BestBall(player_id=pid, gross=gross, net=net))
    if not balls:
        return None
    return min(balls, key=lambda b: b.net)


def _lower_wins(match: Match, a_value: int, b_value: int) -> Optional[str]:
    if a_value < b_value:
        return match.side_a.id
    if b_value < a_value:
        return match.side_b.id
    return None


def fourball_hole(
    match: Match,
    hole: Hole,
    players_by_id: dict[str, Player],
) -> HoleResult:
    """Score one hole of a fourball (best net ball) match."""
    a_best = _best_ball(match, match.side_a, hole, players_by_id)
    b_best = _best_ball(match, match.side_b, hole, players_by_id)

    if a_best is None or b_best is None:
        return HoleResult(hole.number, False, None, FourballDetail())

    winner = _lower_wins(match, a_best.net, b_best.net)
    return HoleResult(hole.number, True, winner, FourballDetail(a_best, b_best))


def scramble_hole(
    match: Match,
    hole: Hole,
    players_by_id: dict[str, Player],
) -> HoleResult:
    """Score one hole of a scramble match with Stableford points (no handicap)."""
    a_gross = _gross(match, match.side_a.id, hole.number)
    b_gross = _gross(match, match.side_b.id, hole.number)

    if a_gross is None or b_gross is None:
        return HoleResult(hole.number, False, None, ScrambleDetail())

    a_points = stableford_from_diff(a_gross - hole.par)
    b_points = stableford_from_diff(b_gross - hole.par)

    winner = None
    if a_points > b_points:
        winner = match.side_a.id
    elif b_points > a_points:
        winner = match.side_b.id

    detail = ScrambleDetail(a_gross, b_gross, a_points, b_points)
    return HoleResult(hole.number, True, winner, detail)


def _singles_entry(
    match: Match,
    side: Side,
    hole: Hole,
    players_by_id: dict[str, Player],
) -> tuple[Optional[int], Optional[int]]:
    """(gross, net) of the side's single player; (None, None) when unavailable."""
    if not side.player_ids:
        return None, None
    pid = side.player_ids[0]
    gross = _gross(match, pid, hole.number)
    player = players_by_id.get(pid)
    if gross is None or player is None:
        return None, None
    return gross, net_score(gross, player.course_handicap, hole.handicap_rank)


def singles_hole(
    match: Match,
    hole: Hole,
    players_by_id: dict[str, Player],
) -> HoleResult:
    """Score one hole of a singles net match."""
    a_gross, a_net = _singles_entry(match, match.side_a, hole, players_by_id)
    b_gross, b_net = _singles_entry(match, match.side_b, hole, players_by_id)

    if a_net is None or b_net is None:
        return HoleResult(hole.number, False, None, SinglesDetail())

    winner = _lower_wins(match, a_net, b_net)
    detail = SinglesDetail(a_gross, b_gross, a_net, b_net)
    return HoleResult(hole.number, True, winner, detail)


HoleScorer = Callable[[Match, Hole, dict[str, Player]], HoleResult]

HOLE_SCORERS: dict[Format, HoleScorer] = {
    Format.FOURBALL_NET: fourball_hole,
    Format.SCRAMBLE_STABLEFORD: scramble_hole,
    Format.SINGLES_NET: singles_hole,
}

_EMPTY_DETAIL = {
    Format.FOURBALL_NET: FourballDetail,
    Format.SCRAMBLE_STABLEFORD: ScrambleDetail,
    Format.SINGLES_NET: SinglesDetail,
}


def compute_match_holes(
    match: Match,
    course: Optional[Course],
    players_by_id: dict[str, Player],
) -> list[HoleResult]:
    """Score all 18 holes of a match.

    Holes missing from the course (or a missing course) come back as not
    played, so a partially set-up tournament still renders.

    Args:
        match: The match with its raw gross entries.
        course: The course played that day, or None if unknown.
        players_by_id: Roster lookup for handicaps.

    Returns:
        One HoleResult per hole number 1..18, in order.
    """
    scorer = HOLE_SCORERS[match.format]
    results: list[HoleResult] = []
    for number in range(1, HOLES_PER_ROUND + 1):
        hole = hole_by_number(course, number) if course is not None else None
        if hole is None:
            results.append(
                HoleResult(number, False, None, _EMPTY_DETAIL[match.format]())
            )
            continue
        results.append(scorer(match, hole, players_by_id))

    log.debug(
        "Match %s: %d von %d Loechern gespielt",
        match.id, sum(1 for r in results if r.played), HOLES_PER_ROUND,
    )
    return results
