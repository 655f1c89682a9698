"""Report generation for scored tournaments (CSV, HTML, summary)."""

import csv
import logging
from pathlib import Path

from jinja2 import Environment, FileSystemLoader

from cupscore import (
    FourballDetail,
    HoleResult,
    MatchCard,
    Player,
    ScrambleDetail,
    Side,
    SinglesDetail,
    TeamTotals,
    Tournament,
)
from cupscore.course import hole_by_number

log = logging.getLogger(__name__)

TEMPLATE_DIR = Path(__file__).resolve().parent / 'templates'

CSV_COLUMNS = [
    'Day',
    'Match',
    'Format',
    'Side_A',
    'Side_B',
    'Team_A',
    'Team_B',
    'Status',
    'Played',
    'Final',
    'Points_A',
    'Points_B',
]


def side_label(side: Side, players_by_id: dict[str, Player]) -> str:
    """Player names of a side joined with " / " (ids for unknown players)."""
    return ' / '.join(
        players_by_id[pid].name if pid in players_by_id else pid
        for pid in side.player_ids
    )


def _card_to_row(card: MatchCard, players_by_id: dict[str, Player]) -> dict:
    """Convert a MatchCard to a flat dict for CSV/HTML output."""
    m = card.match
    return {
        'Day': str(m.day),
        'Match': str(m.match_no),
        'Format': m.format.value,
        'Side_A': side_label(m.side_a, players_by_id),
        'Side_B': side_label(m.side_b, players_by_id),
        'Team_A': m.side_a.team_id,
        'Team_B': m.side_b.team_id,
        'Status': card.status.label,
        'Played': str(card.status.played),
        'Final': 'ja' if card.status.is_final else 'nein',
        'Points_A': f'{card.points.get(m.side_a.team_id, 0.0):.1f}',
        'Points_B': f'{card.points.get(m.side_b.team_id, 0.0):.1f}',
    }


def hole_cells(hole: HoleResult) -> tuple[str, str]:
    """Display values for side A and side B on one hole."""
    if not hole.played:
        return '—', '—'
    d = hole.detail
    if isinstance(d, FourballDetail):
        return f'Net {d.a_best.net}', f'Net {d.b_best.net}'
    if isinstance(d, ScrambleDetail):
        return f'{d.a_points} Pts (G{d.a_gross})', f'{d.b_points} Pts (G{d.b_gross})'
    if isinstance(d, SinglesDetail):
        return f'Net {d.a_net} (G{d.a_gross})', f'Net {d.b_net} (G{d.b_gross})'
    raise TypeError(f"Unbekanntes Loch-Detail: {type(d).__name__}")


def hole_result_label(hole: HoleResult, card: MatchCard) -> str:
    """Winner column: A, B, ½ for a halved hole, — when not played."""
    if not hole.played:
        return '—'
    if hole.winner_side_id is None:
        return '½'
    return 'A' if hole.winner_side_id == card.match.side_a.id else 'B'


def write_csv_report(
    totals: TeamTotals,
    tournament: Tournament,
    output_path: Path,
) -> None:
    """Write one row per match as a CSV report.

    Uses UTF-8 with BOM (utf-8-sig) and semicolon delimiter for
    compatibility with German Excel.

    Args:
        totals: Scored tournament.
        tournament: The snapshot (for player names).
        output_path: Path for the output CSV file.
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    players_by_id = tournament.players_by_id()

    rows = 0
    with open(output_path, 'w', newline='', encoding='utf-8-sig') as f:
        writer = csv.DictWriter(
            f, fieldnames=CSV_COLUMNS, delimiter=';', extrasaction='ignore',
        )
        writer.writeheader()
        for day in totals.days:
            for card in day.matches:
                writer.writerow(_card_to_row(card, players_by_id))
                rows += 1

    log.info("CSV-Report geschrieben: %s (%d Zeilen)", output_path, rows)


def write_html_report(
    totals: TeamTotals,
    tournament: Tournament,
    output_path: Path,
) -> None:
    """Write standings and hole-by-hole match cards as an HTML report using Jinja2.

    Args:
        totals: Scored tournament.
        tournament: The snapshot (names, teams, courses).
        output_path: Path for the output HTML file.
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    env = Environment(
        loader=FileSystemLoader(str(TEMPLATE_DIR)),
        autoescape=True,
    )
    env.globals.update(hole_cells=hole_cells, hole_result_label=hole_result_label)
    template = env.get_template('report.html')

    players_by_id = tournament.players_by_id()
    days = [
        {
            'summary': day,
            'rows': [(card, _card_to_row(card, players_by_id)) for card in day.matches],
        }
        for day in totals.days
    ]

    html = template.render(
        tournament=tournament,
        teams=tournament.teams,
        totals=totals,
        days=days,
        courses=tournament.courses,
    )

    output_path.write_text(html, encoding='utf-8')
    log.info("HTML-Report geschrieben: %s", output_path)


def print_summary(totals: TeamTotals, tournament: Tournament) -> None:
    """Print the standings to stdout.

    Args:
        totals: Scored tournament.
        tournament: The snapshot (for team names).
    """
    finals = sum(1 for d in totals.days for c in d.matches if c.status.is_final)
    started = sum(1 for d in totals.days for c in d.matches if c.status.played > 0)
    count = sum(len(d.matches) for d in totals.days)

    print(f"\n=== Stand: {tournament.name} ===")
    for day in totals.days:
        points = '  '.join(
            f"{t.abbr} {day.points.get(t.id, 0.0):>4.1f}" for t in tournament.teams
        )
        print(f"Tag {day.day} ({day.course_name}): {points}")
    print("---")
    for t in tournament.teams:
        print(f"{t.name + ':':<26}{totals.totals.get(t.id, 0.0):>6.1f}")
    print(f"{'Fuehrung:':<26}{totals.leader:>6}")
    print(f"Matches beendet:          {finals:>3} / {count}")
    print(f"Matches begonnen:         {started:>3} / {count}")
    print()


def print_match(card: MatchCard, tournament: Tournament) -> None:
    """Print a hole-by-hole card for one match to stdout."""
    players_by_id = tournament.players_by_id()
    m = card.match
    day_no = next(
        (d.day for d in tournament.days if any(x is m for x in d.matches)), m.day,
    )
    course = tournament.courses.get(day_no)
    print(f"\n=== {m.id}: {m.format.value} ===")
    print(f"A: {side_label(m.side_a, players_by_id)} ({m.side_a.team_id})")
    print(f"B: {side_label(m.side_b, players_by_id)} ({m.side_b.team_id})")
    print(f"{'Loch':>4} {'Par':>3} {'HCP':>3}  {'A':<18} {'B':<18} Ergebnis")
    for hole in card.holes:
        meta = hole_by_number(course, hole.hole) if course is not None else None
        par = str(meta.par) if meta else '—'
        rank = str(meta.handicap_rank) if meta else '—'
        a_cell, b_cell = hole_cells(hole)
        print(f"{hole.hole:>4} {par:>3} {rank:>3}  {a_cell:<18} {b_cell:<18} "
              f"{hole_result_label(hole, card)}")
    print(f"Status: {card.status.label}")
    print()
