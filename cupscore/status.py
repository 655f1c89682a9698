"""Running match status: match play (holes up) and Stableford totals."""

from typing import Optional

from cupscore import (
    HOLES_PER_ROUND,
    Format,
    HoleResult,
    Match,
    MatchState,
    MatchStatus,
    ScrambleDetail,
)


def match_play_state(played: int, diff: int) -> MatchState:
    """Classify a match-play position.

    Precedence: not started, closed out, all 18 played, in progress.
    A dormie match (lead equal to holes remaining) is still in progress.

    Args:
        played: Holes with an outcome (won or halved).
        diff: Holes won by side A minus holes won by side B.

    Returns:
        The MatchState for this position.
    """
    remaining = HOLES_PER_ROUND - played
    if played == 0:
        return MatchState.NOT_STARTED
    if abs(diff) > remaining:
        return MatchState.CLOSED_OUT
    if played == HOLES_PER_ROUND:
        return MatchState.FINAL_TIED if diff == 0 else MatchState.FINAL_DECIDED
    return MatchState.IN_PROGRESS


def match_play_label(state: MatchState, played: int, diff: int) -> str:
    """Human-readable status text for a match-play position."""
    up = abs(diff)
    if state is MatchState.NOT_STARTED:
        return 'Not Started'
    if state is MatchState.CLOSED_OUT:
        return f'Final {up}&{HOLES_PER_ROUND - played}'
    if state is MatchState.FINAL_TIED:
        return 'Final (Tied)'
    if state is MatchState.FINAL_DECIDED:
        return f'Final {up} Up'
    if diff == 0:
        return f'AS Thru {played}'
    return f'{up} Up Thru {played}'


def _leader(diff: int, side_a_id: str, side_b_id: str) -> Optional[str]:
    if diff > 0:
        return side_a_id
    if diff < 0:
        return side_b_id
    return None


def match_play_status(
    holes: list[HoleResult],
    side_a_id: str,
    side_b_id: str,
) -> MatchStatus:
    """Fold hole outcomes into a holes-up match-play status.

    Hole order does not matter; only the counts of holes won and halved.

    Args:
        holes: Hole outcomes of the match.
        side_a_id: Id of side A.
        side_b_id: Id of side B.

    Returns:
        The current MatchStatus.
    """
    a = b = halved = 0
    for h in holes:
        if not h.played:
            continue
        if h.winner_side_id == side_a_id:
            a += 1
        elif h.winner_side_id == side_b_id:
            b += 1
        else:
            halved += 1

    played = a + b + halved
    diff = a - b
    state = match_play_state(played, diff)

    return MatchStatus(
        state=state,
        label=match_play_label(state, played, diff),
        played=played,
        is_final=state in (
            MatchState.CLOSED_OUT, MatchState.FINAL_TIED, MatchState.FINAL_DECIDED,
        ),
        is_tied=diff == 0,
        leader_side_id=_leader(diff, side_a_id, side_b_id),
        a_holes=a,
        b_holes=b,
        halved=halved,
    )


def stableford_status(
    holes: list[HoleResult],
    side_a_id: str,
    side_b_id: str,
) -> MatchStatus:
    """Sum Stableford points over the holes both sides have played."""
    a_total = b_total = played = 0
    for h in holes:
        if not h.played or not isinstance(h.detail, ScrambleDetail):
            continue
        if h.detail.a_points is None or h.detail.b_points is None:
            continue
        played += 1
        a_total += h.detail.a_points
        b_total += h.detail.b_points

    if played == 0:
        return MatchStatus(
            state=MatchState.NOT_STARTED,
            label='—',
            played=0,
            is_final=False,
            is_tied=True,
            leader_side_id=None,
        )

    diff = a_total - b_total
    is_final = played == HOLES_PER_ROUND
    if not is_final:
        state = MatchState.IN_PROGRESS
    elif diff == 0:
        state = MatchState.FINAL_TIED
    else:
        state = MatchState.FINAL_DECIDED

    return MatchStatus(
        state=state,
        label=f'{a_total}–{b_total}',
        played=played,
        is_final=is_final,
        is_tied=diff == 0,
        leader_side_id=_leader(diff, side_a_id, side_b_id),
        a_points=a_total,
        b_points=b_total,
    )


def match_status(match: Match, holes: list[HoleResult]) -> MatchStatus:
    """Status of a match, using the tracker its format calls for."""
    if match.format is Format.SCRAMBLE_STABLEFORD:
        return stableford_status(holes, match.side_a.id, match.side_b.id)
    return match_play_status(holes, match.side_a.id, match.side_b.id)
