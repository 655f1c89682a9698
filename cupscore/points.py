"""Team point allocation for finished matches."""

from cupscore import MatchStatus, Side

WIN_POINTS = 1.0
HALF_POINTS = 0.5


def points_for_match(status: MatchStatus, side_a: Side, side_b: Side) -> dict[str, float]:
    """Split a match's point between the two teams.

    Unfinished matches give nothing; a finished tie is halved; otherwise the
    team owning the leading side takes the full point.

    Args:
        status: Current status of the match.
        side_a: Side A of the match (for its team).
        side_b: Side B of the match (for its team).

    Returns:
        Points keyed by team id.
    """
    if not status.is_final:
        return {side_a.team_id: 0.0, side_b.team_id: 0.0}
    if status.is_tied:
        return {side_a.team_id: HALF_POINTS, side_b.team_id: HALF_POINTS}

    winner, loser = (side_a, side_b) if status.leader_side_id == side_a.id else (side_b, side_a)
    return {winner.team_id: WIN_POINTS, loser.team_id: 0.0}
