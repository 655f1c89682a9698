"""Course definitions and scorecard validation."""

from typing import Optional

from cupscore import HOLES_PER_ROUND, Course, Hole

_VALID_PARS = (3, 4, 5)


def holes_from_par_and_rank(pars: list[int], ranks: list[int]) -> list[Hole]:
    """Build the ordered hole list from parallel par and rank sequences."""
    return [
        Hole(number=i, par=par, handicap_rank=rank)
        for i, (par, rank) in enumerate(zip(pars, ranks), start=1)
    ]


def validate_course(course: Course) -> None:
    """Check that a course is a well-formed 18-hole scorecard.

    Args:
        course: Course to check.

    Raises:
        ValueError: If hole numbers or handicap ranks are not a permutation
            of 1..18, or a par is outside 3..5.
    """
    expected = set(range(1, HOLES_PER_ROUND + 1))
    numbers = [h.number for h in course.holes]
    ranks = [h.handicap_rank for h in course.holes]

    if len(numbers) != HOLES_PER_ROUND or set(numbers) != expected:
        raise ValueError(
            f"Platz {course.name!r} (Tag {course.day}): "
            f"Lochnummern sind keine Permutation von 1..18"
        )
    if len(ranks) != HOLES_PER_ROUND or set(ranks) != expected:
        raise ValueError(
            f"Platz {course.name!r} (Tag {course.day}): "
            f"Handicap-Reihenfolge ist keine Permutation von 1..18"
        )
    bad_pars = [h.number for h in course.holes if h.par not in _VALID_PARS]
    if bad_pars:
        raise ValueError(
            f"Platz {course.name!r} (Tag {course.day}): "
            f"ungueltiges Par an Loch {', '.join(map(str, bad_pars))}"
        )


def hole_by_number(course: Course, number: int) -> Optional[Hole]:
    """Look up a hole by its number; None for unknown numbers."""
    for h in course.holes:
        if h.number == number:
            return h
    return None


COURSES: dict[int, Course] = {
    1: Course(
        day=1,
        name='Wildfire Golf Club (Fazio Course)',
        city='Phoenix, Arizona',
        holes=holes_from_par_and_rank(
            [4, 4, 5, 4, 3, 4, 4, 3, 5, 4, 5, 4, 3, 5, 3, 4, 4, 4],
            [12, 8, 2, 16, 18, 10, 4, 14, 6, 11, 5, 9, 17, 1, 13, 15, 3, 7],
        ),
    ),
    2: Course(
        day=2,
        name='Lookout Mountain Golf Club',
        city='Phoenix, Arizona',
        holes=holes_from_par_and_rank(
            [4, 5, 3, 4, 5, 3, 5, 4, 3, 4, 3, 4, 4, 4, 5, 3, 4, 5],
            [11, 9, 15, 3, 7, 13, 1, 5, 17, 4, 12, 2, 18, 8, 16, 6, 14, 10],
        ),
    ),
    3: Course(
        day=3,
        name='Papago Golf Club',
        city='Phoenix, Arizona',
        holes=holes_from_par_and_rank(
            [5, 4, 4, 3, 4, 4, 4, 3, 5, 5, 3, 4, 4, 4, 5, 4, 3, 4],
            [15, 13, 1, 9, 7, 5, 3, 11, 17, 18, 14, 16, 6, 10, 12, 2, 8, 4],
        ),
    ),
}
