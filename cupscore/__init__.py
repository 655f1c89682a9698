"""Core module for cup-scorer."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Union

HOLES_PER_ROUND = 18


class Format(str, Enum):
    """Scoring format of a match."""

    FOURBALL_NET = 'FOURBALL_NET'
    SCRAMBLE_STABLEFORD = 'SCRAMBLE_STABLEFORD'
    SINGLES_NET = 'SINGLES_NET'


class MatchState(str, Enum):
    """Named states of a match's running status."""

    NOT_STARTED = 'NOT_STARTED'
    IN_PROGRESS = 'IN_PROGRESS'
    CLOSED_OUT = 'CLOSED_OUT'
    FINAL_TIED = 'FINAL_TIED'
    FINAL_DECIDED = 'FINAL_DECIDED'


@dataclass(frozen=True)
class Hole:
    """A single hole of a course scorecard."""

    number: int           # 1..18
    par: int              # 3..5
    handicap_rank: int    # 1 = hardest


@dataclass
class Course:
    """Course played on one tournament day."""

    day: int
    name: str
    city: str
    holes: list[Hole]


@dataclass
class Player:
    """A rostered player."""

    id: str
    name: str
    team_id: str
    course_handicap: int = 0
    slot_id: Optional[str] = None


@dataclass
class Side:
    """One or two players competing as a unit within a match."""

    id: str
    team_id: str
    player_ids: list[str] = field(default_factory=list)


@dataclass
class Match:
    """A match and its raw score entries.

    ``gross`` maps a player id (Fourball, Singles) or side id (Scramble)
    to ``{hole number: gross strokes}``. Absent keys mean "not entered".
    """

    id: str
    day: int
    match_no: int
    format: Format
    side_a: Side
    side_b: Side
    gross: dict[str, dict[int, int]] = field(default_factory=dict)
    locked: bool = False


@dataclass
class Team:
    """One of the two competing teams."""

    id: str
    name: str
    abbr: str


@dataclass
class Day:
    """A tournament day with its matches."""

    day: int
    date: str = ''
    title: str = ''
    course_name: str = ''
    matches: list[Match] = field(default_factory=list)


@dataclass
class Tournament:
    """Full tournament snapshot as supplied by the persistence layer."""

    name: str
    teams: list[Team]
    courses: dict[int, Course]
    players: list[Player]
    days: list[Day]
    subtitle: str = ''
    established: Optional[int] = None
    claims: dict[str, str] = field(default_factory=dict)  # user id -> player id
    owner_user_id: Optional[str] = None
    admin_user_ids: list[str] = field(default_factory=list)

    def players_by_id(self) -> dict[str, Player]:
        return {p.id: p for p in self.players}


@dataclass
class ScoreEntry:
    """One row of an imported score sheet (a single-key write)."""

    match_id: str
    key: str                # player id or side id
    hole: int
    gross: Optional[int]    # None clears the entry


# --- derived records (never persisted) ---

@dataclass(frozen=True)
class BestBall:
    """The counting ball of a fourball side on one hole."""

    player_id: str
    gross: int
    net: int


@dataclass(frozen=True)
class FourballDetail:
    a_best: Optional[BestBall] = None
    b_best: Optional[BestBall] = None
    format: Format = field(default=Format.FOURBALL_NET, init=False)


@dataclass(frozen=True)
class ScrambleDetail:
    a_gross: Optional[int] = None
    b_gross: Optional[int] = None
    a_points: Optional[int] = None
    b_points: Optional[int] = None
    format: Format = field(default=Format.SCRAMBLE_STABLEFORD, init=False)


@dataclass(frozen=True)
class SinglesDetail:
    a_gross: Optional[int] = None
    b_gross: Optional[int] = None
    a_net: Optional[int] = None
    b_net: Optional[int] = None
    format: Format = field(default=Format.SINGLES_NET, init=False)


HoleDetail = Union[FourballDetail, ScrambleDetail, SinglesDetail]


@dataclass(frozen=True)
class HoleResult:
    """Outcome of one hole of a match."""

    hole: int
    played: bool
    winner_side_id: Optional[str]   # None = halved or not played
    detail: HoleDetail


@dataclass(frozen=True)
class MatchStatus:
    """Running status of a match.

    Match-play formats fill the ``*_holes`` tallies, Stableford fills
    ``*_points``.
    """

    state: MatchState
    label: str
    played: int
    is_final: bool
    is_tied: bool
    leader_side_id: Optional[str]
    a_holes: int = 0
    b_holes: int = 0
    halved: int = 0
    a_points: int = 0
    b_points: int = 0


@dataclass
class MatchCard:
    """Everything the presentation layer needs for one match."""

    match: Match
    holes: list[HoleResult]
    status: MatchStatus
    points: dict[str, float]    # team id -> points
    course_name: str = ''


@dataclass
class DaySummary:
    day: int
    title: str
    course_name: str
    matches: list[MatchCard]
    points: dict[str, float]


@dataclass
class TeamTotals:
    """Day-by-day and overall team points plus the leader label."""

    days: list[DaySummary]
    totals: dict[str, float]
    leader: str
