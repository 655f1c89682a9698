"""Tournament snapshot I/O (JSON) and tab-separated score sheet import."""

import csv
import io
import json
import logging
import os
import re
import tempfile
from pathlib import Path

from filelock import FileLock

from cupscore import (
    Course,
    Day,
    Format,
    Hole,
    Match,
    Player,
    ScoreEntry,
    Side,
    Team,
    Tournament,
)
from cupscore.course import validate_course
from cupscore.entry import validate_gross
from cupscore.seed import TEAMS

log = logging.getLogger(__name__)

# Matches any sequence of whitespace (including Unicode whitespace like U+2006)
_WHITESPACE_RE = re.compile(r'\s+')

# Snapshot field holding the raw scores of each format
GROSS_FIELDS: dict[Format, str] = {
    Format.FOURBALL_NET: 'fourballGrossByPlayer',
    Format.SCRAMBLE_STABLEFORD: 'scrambleGrossBySide',
    Format.SINGLES_NET: 'singlesGrossByPlayer',
}

REQUIRED_KEYS = {'courses', 'players', 'days'}
LOCK_TIMEOUT = 30
SHEET_COLUMNS = {'Match', 'Key', 'Hole', 'Gross'}


def detect_encoding(path: Path) -> str:
    """Detect file encoding by checking for BOM bytes.

    Args:
        path: Path to the file.

    Returns:
        Encoding string suitable for open().
    """
    with open(path, 'rb') as f:
        bom = f.read(2)
    if bom == b'\xff\xfe':
        return 'utf-16-le'
    return 'utf-8-sig'


def normalize_whitespace(value: str) -> str:
    """Collapse any whitespace run into one space and strip the ends."""
    return _WHITESPACE_RE.sub(' ', value).strip()


def _parse_side(raw: dict) -> Side:
    return Side(
        id=str(raw['id']),
        team_id=str(raw['teamId']),
        player_ids=[str(pid) for pid in raw.get('playerIds', [])],
    )


def _parse_gross(raw: dict, match_id: str) -> dict[str, dict[int, int]]:
    """Raw ``{key: {"hole": strokes}}`` to ints, dropping unusable entries."""
    gross: dict[str, dict[int, int]] = {}
    for key, per_hole in (raw or {}).items():
        if not isinstance(per_hole, dict):
            log.warning("Match %s: Eintraege fuer %s uebersprungen", match_id, key)
            continue
        cleaned: dict[int, int] = {}
        for hole, value in per_hole.items():
            try:
                strokes = validate_gross(value)
                hole_no = int(hole)
            except ValueError as exc:
                log.warning(
                    "Match %s: Loch %s fuer %s uebersprungen: %s", match_id, hole, key, exc,
                )
                continue
            if strokes is not None:
                cleaned[hole_no] = strokes
        if cleaned:
            gross[str(key)] = cleaned
    return gross


def _parse_match(raw: dict, day: int) -> Match:
    fmt = Format(raw['format'])
    match_id = str(raw['id'])
    return Match(
        id=match_id,
        day=int(raw.get('day', day)),
        match_no=int(raw.get('matchNo', 0)),
        format=fmt,
        side_a=_parse_side(raw['sideA']),
        side_b=_parse_side(raw['sideB']),
        gross=_parse_gross(raw.get(GROSS_FIELDS[fmt]), match_id),
        locked=bool(raw.get('locked', False)),
    )


def _parse_course(day: int, raw: dict) -> Course:
    holes = [
        Hole(number=int(h['hole']), par=int(h['par']), handicap_rank=int(h['hcpRank']))
        for h in raw.get('holes', [])
    ]
    course = Course(day=day, name=raw.get('name', ''), city=raw.get('city', ''), holes=holes)
    validate_course(course)
    return course


def _parse_player(raw: dict) -> Player:
    hcp = int(raw.get('courseHcp') or 0)
    if hcp < 0:
        raise ValueError(f"Spieler {raw['id']}: negatives Course-Handicap {hcp}")
    return Player(
        id=str(raw['id']),
        name=raw.get('name', ''),
        team_id=str(raw.get('teamId', '')),
        course_handicap=hcp,
        slot_id=raw.get('slotId'),
    )


def _parse_day(raw: dict) -> Day:
    day_no = int(raw['day'])
    matches: list[Match] = []
    for idx, raw_match in enumerate(raw.get('matches', [])):
        try:
            matches.append(_parse_match(raw_match, day_no))
        except (KeyError, TypeError, ValueError, OverflowError) as exc:
            log.warning("Tag %d, Match #%d uebersprungen: %s", day_no, idx + 1, exc)
    return Day(
        day=day_no,
        date=raw.get('date', ''),
        title=raw.get('title', ''),
        course_name=raw.get('courseName', ''),
        matches=matches,
    )


def tournament_from_dict(data: dict) -> Tournament:
    """Build a Tournament from a decoded snapshot.

    Raises:
        ValueError: If required keys are missing, or a course, player or
            day is malformed.
    """
    missing = REQUIRED_KEYS - set(data)
    if missing:
        raise ValueError(f"Fehlende Felder im Snapshot: {', '.join(sorted(missing))}")

    try:
        courses = {
            int(day): _parse_course(int(day), raw) for day, raw in data['courses'].items()
        }
        players = [_parse_player(p) for p in data['players']]
        days = [_parse_day(d) for d in data['days']]
        raw_teams = data.get('teams')
        teams = (
            [Team(id=t['id'], name=t.get('name', t['id']), abbr=t.get('abbr', t['id']))
             for t in raw_teams]
            if raw_teams else [Team(t.id, t.name, t.abbr) for t in TEAMS]
        )
        claims = dict(data.get('claims') or {})
        admin_user_ids = list(data.get('adminUserIds') or [])
    except (KeyError, TypeError, AttributeError, OverflowError) as exc:
        raise ValueError(f"Ungueltiger Snapshot: {type(exc).__name__} {exc}") from exc

    return Tournament(
        name=data.get('name', ''),
        subtitle=data.get('subtitle', ''),
        established=data.get('established'),
        teams=teams,
        courses=courses,
        players=players,
        days=days,
        claims=claims,
        owner_user_id=data.get('ownerUserId'),
        admin_user_ids=admin_user_ids,
    )


def tournament_to_dict(tournament: Tournament) -> dict:
    """Raw inputs only; nothing derived is written."""
    def side(s: Side) -> dict:
        return {'id': s.id, 'teamId': s.team_id, 'playerIds': list(s.player_ids)}

    def match(m: Match) -> dict:
        return {
            'id': m.id,
            'day': m.day,
            'matchNo': m.match_no,
            'format': m.format.value,
            'sideA': side(m.side_a),
            'sideB': side(m.side_b),
            'locked': m.locked,
            GROSS_FIELDS[m.format]: {
                key: {str(hole): strokes for hole, strokes in sorted(per_hole.items())}
                for key, per_hole in m.gross.items()
            },
        }

    return {
        'name': tournament.name,
        'subtitle': tournament.subtitle,
        'established': tournament.established,
        'ownerUserId': tournament.owner_user_id,
        'adminUserIds': list(tournament.admin_user_ids),
        'claims': dict(tournament.claims),
        'teams': [{'id': t.id, 'name': t.name, 'abbr': t.abbr} for t in tournament.teams],
        'courses': {
            str(day): {
                'name': c.name,
                'city': c.city,
                'holes': [
                    {'hole': h.number, 'par': h.par, 'hcpRank': h.handicap_rank}
                    for h in c.holes
                ],
            }
            for day, c in sorted(tournament.courses.items())
        },
        'players': [
            {'id': p.id, 'slotId': p.slot_id, 'name': p.name,
             'teamId': p.team_id, 'courseHcp': p.course_handicap}
            for p in tournament.players
        ],
        'days': [
            {'day': d.day, 'date': d.date, 'title': d.title,
             'courseName': d.course_name, 'matches': [match(m) for m in d.matches]}
            for d in tournament.days
        ],
    }


def load_tournament(path: str | Path) -> Tournament:
    """Read a tournament snapshot from a JSON file.

    Args:
        path: Path to the snapshot.

    Returns:
        The Tournament.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If the file is not valid JSON or misses required fields.
    """
    path = Path(path)
    with open(path, 'r', encoding=detect_encoding(path)) as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as exc:
            raise ValueError(f"Datei {path} ist kein gueltiges JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise ValueError(f"Datei {path} enthaelt keinen Turnier-Snapshot.")

    tournament = tournament_from_dict(data)
    log.info(
        "Turnier %r gelesen aus %s (%d Tage, %d Spieler)",
        tournament.name, path, len(tournament.days), len(tournament.players),
    )
    return tournament


def snapshot_lock(path: str | Path) -> FileLock:
    """Exclusive cross-process lock guarding load, mutate and save of a snapshot.

    The lock file sits next to the snapshot (``cup.json`` -> ``cup.json.lock``).
    """
    path = Path(path)
    return FileLock(str(path.with_name(path.name + '.lock')), timeout=LOCK_TIMEOUT)


def save_tournament(tournament: Tournament, path: str | Path) -> None:
    """Write the tournament's raw inputs to a JSON snapshot.

    The data goes to a temp file in the same directory first and then
    replaces the snapshot, so readers never see a half-written file.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(prefix=path.name + '.', suffix='.tmp', dir=path.parent)
    try:
        with os.fdopen(fd, 'w', encoding='utf-8') as f:
            json.dump(tournament_to_dict(tournament), f, indent=2, ensure_ascii=False)
            f.write('\n')
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise
    log.info("Snapshot geschrieben: %s", path)


def read_score_sheet(path: str | Path) -> list[ScoreEntry]:
    """Read hole scores from a tab-separated sheet.

    Columns: ``Match``, ``Key`` (player or side id), ``Hole``, ``Gross``.
    A blank or ``-`` gross clears the entry. Handles UTF-16LE (with BOM)
    and UTF-8 automatically; invalid rows are skipped with a warning.

    Args:
        path: Path to the sheet.

    Returns:
        List of ScoreEntry in file order.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If required columns are missing.
    """
    path = Path(path)
    encoding = detect_encoding(path)

    with open(path, 'r', encoding=encoding) as f:
        content = f.read()

    content = content.lstrip('\ufeff')
    reader = csv.DictReader(io.StringIO(content), delimiter='\t')

    if reader.fieldnames is None:
        raise ValueError(f"Datei {path} ist leer oder hat keine Header-Zeile.")
    actual_cols = {normalize_whitespace(c) for c in reader.fieldnames}
    missing = SHEET_COLUMNS - actual_cols
    if missing:
        raise ValueError(
            f"Fehlende Spalten in {path}: {', '.join(sorted(missing))}"
        )

    entries: list[ScoreEntry] = []
    for row_num, row in enumerate(reader, start=2):
        cleaned = {normalize_whitespace(k): normalize_whitespace(v or '')
                   for k, v in row.items() if k is not None}
        try:
            entries.append(ScoreEntry(
                match_id=cleaned['Match'],
                key=cleaned['Key'],
                hole=int(cleaned['Hole']),
                gross=validate_gross(cleaned.get('Gross', '')),
            ))
        except (ValueError, KeyError) as exc:
            log.warning("Zeile %d in %s uebersprungen: %s", row_num, path, exc)

    log.info("%d Eintraege gelesen aus %s", len(entries), path)
    return entries
