"""Handicap stroke allocation and gross-to-net conversion."""

from typing import Optional

from cupscore import HOLES_PER_ROUND, Course


def strokes_received(course_hcp: int, hole_rank: int) -> int:
    """Return the handicap strokes a player receives on one hole.

    Every hole gets ``course_hcp // 18`` strokes; the remaining
    ``course_hcp % 18`` strokes go to the hardest holes (lowest rank).

    Args:
        course_hcp: The player's course handicap (non-negative).
        hole_rank: Stroke allocation rank of the hole (1 = hardest).

    Returns:
        Number of strokes received on that hole.
    """
    full, rem = divmod(course_hcp, HOLES_PER_ROUND)
    return full + (1 if hole_rank <= rem else 0)


def net_score(gross: Optional[int], course_hcp: int, hole_rank: int) -> Optional[int]:
    """Convert a gross score into a net score, or None if nothing was entered."""
    if gross is None:
        return None
    return gross - strokes_received(course_hcp, hole_rank)


def stroke_allocation(course_hcp: int, course: Course) -> dict[int, int]:
    """Strokes received per hole number for a whole course."""
    return {
        h.number: strokes_received(course_hcp, h.handicap_rank)
        for h in course.holes
    }
