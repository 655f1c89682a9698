"""Score entry on the caller side: input validation, single-key writes, reseed and edit rights.

The scoring engine never calls into this module. It assumes raw gross values
have already passed ``validate_gross`` and that the writer was allowed to
write them.
"""

import logging
from typing import Optional

from cupscore import HOLES_PER_ROUND, Format, Match, Player, ScoreEntry, Tournament
from cupscore.seed import make_initial_tournament

log = logging.getLogger(__name__)

MAX_GROSS = 20
_CLEAR_TOKENS = {'', '-', 'x', 'X'}


def validate_gross(value) -> Optional[int]:
    """Convert user input into a gross score.

    Args:
        value: Raw input (int, numeric string, blank or a clear token).

    Returns:
        The gross as int, or None when the input clears the entry.

    Raises:
        ValueError: If the value is not a whole number between 1 and 20.
    """
    if value is None:
        return None
    if isinstance(value, str):
        value = value.strip()
        if value in _CLEAR_TOKENS:
            return None
    if isinstance(value, bool):
        raise ValueError(f"Ungueltiger Bruttowert: {value!r}")
    try:
        gross = int(value)
    except (TypeError, ValueError, OverflowError):
        raise ValueError(f"Ungueltiger Bruttowert: {value!r}") from None
    if isinstance(value, float) and value != gross:
        raise ValueError(f"Ungueltiger Bruttowert: {value!r}")
    if not 1 <= gross <= MAX_GROSS:
        raise ValueError(
            f"Bruttowert {gross} ausserhalb des erlaubten Bereichs 1..{MAX_GROSS}"
        )
    return gross


def score_key(match: Match, key: str) -> str:
    """Check that ``key`` is a valid raw-score key for this match.

    Scramble matches take one score per side, the other formats one score
    per player.

    Raises:
        KeyError: If the key does not belong to the match.
    """
    if match.format is Format.SCRAMBLE_STABLEFORD:
        valid = {match.side_a.id, match.side_b.id}
    else:
        valid = set(match.side_a.player_ids) | set(match.side_b.player_ids)
    if key not in valid:
        raise KeyError(f"{key!r} ist kein gueltiger Schluessel fuer Match {match.id}")
    return key


def set_gross(match: Match, key: str, hole: int, gross: Optional[int]) -> None:
    """Write or clear exactly one gross entry (last write wins).

    Args:
        match: Match to modify in place.
        key: Player id or side id, depending on the format.
        hole: Hole number 1..18.
        gross: Validated gross strokes, or None to clear the entry.

    Raises:
        PermissionError: If the match is locked.
        KeyError: If the key does not belong to the match.
        ValueError: If the hole number is outside 1..18.
    """
    if match.locked:
        raise PermissionError(f"Match {match.id} ist gesperrt")
    score_key(match, key)
    if not 1 <= hole <= HOLES_PER_ROUND:
        raise ValueError(f"Loch {hole} ausserhalb von 1..{HOLES_PER_ROUND}")

    per_hole = match.gross.setdefault(key, {})
    if gross is None:
        per_hole.pop(hole, None)
        if not per_hole:
            del match.gross[key]
        log.info("Match %s: Loch %d fuer %s geloescht", match.id, hole, key)
    else:
        per_hole[hole] = gross
        log.info("Match %s: Loch %d fuer %s = %d", match.id, hole, key, gross)


def clear_match_scores(match: Match) -> None:
    """Remove every raw entry of a match.

    Raises:
        PermissionError: If the match is locked.
    """
    if match.locked:
        raise PermissionError(f"Match {match.id} ist gesperrt")
    match.gross.clear()
    log.info("Match %s: alle Eintraege geloescht", match.id)


def reseed(
    tournament: Tournament,
    user_id: Optional[str],
    keep_claims: bool = True,
) -> Tournament:
    """Rebuild the default tournament, wiping all scores.

    Only the owner may reseed. Owner and admins carry over; claims carry
    over unless ``keep_claims`` is False.

    Raises:
        PermissionError: If ``user_id`` is not the tournament owner.
    """
    if tournament.owner_user_id is not None and user_id != tournament.owner_user_id:
        raise PermissionError("Nur der Eigentuemer darf das Turnier neu anlegen")

    fresh = make_initial_tournament()
    fresh.owner_user_id = tournament.owner_user_id or user_id
    fresh.admin_user_ids = list(tournament.admin_user_ids)
    fresh.claims = dict(tournament.claims) if keep_claims else {}
    log.info(
        "Turnier neu angelegt (%s)",
        'Claims beibehalten' if keep_claims else 'Claims geloescht',
    )
    return fresh


def is_admin(tournament: Tournament, user_id: Optional[str]) -> bool:
    """Owner and listed admins may edit anything."""
    if not user_id:
        return False
    return user_id == tournament.owner_user_id or user_id in tournament.admin_user_ids


def _participants(match: Match) -> set[str]:
    return set(match.side_a.player_ids) | set(match.side_b.player_ids)


def can_edit_player(
    match: Match,
    player_id: str,
    me: Optional[Player],
    players_by_id: dict[str, Player],
    admin: bool = False,
) -> bool:
    """Whether the claimed player ``me`` may edit ``player_id``'s score in this match.

    Singles players edit only their own card; fourball players edit the
    cards of their own team's players in their match.
    """
    if admin:
        return True
    if me is None or me.id not in _participants(match):
        return False
    if match.format is Format.SINGLES_NET:
        return player_id == me.id
    if match.format is not Format.FOURBALL_NET:
        return False
    player = players_by_id.get(player_id)
    if player is None:
        return False
    return player.team_id == me.team_id and player_id in _participants(match)


def can_edit_side(
    match: Match,
    side_id: str,
    me: Optional[Player],
    admin: bool = False,
) -> bool:
    """Whether ``me`` may edit the scramble score of ``side_id``."""
    if admin:
        return True
    if me is None or me.id not in _participants(match):
        return False
    if match.format is not Format.SCRAMBLE_STABLEFORD:
        return False
    side = match.side_a if side_id == match.side_a.id else match.side_b
    if side.id != side_id:
        return False
    return side.team_id == me.team_id


def apply_score_entries(tournament: Tournament, entries: list[ScoreEntry]) -> int:
    """Apply imported score rows one key at a time.

    Rows for unknown matches, foreign keys, locked matches or bad hole
    numbers are skipped with a warning.

    Returns:
        Number of rows applied.
    """
    matches = {m.id: m for d in tournament.days for m in d.matches}
    applied = 0
    for entry in entries:
        match = matches.get(entry.match_id)
        if match is None:
            log.warning("Unbekanntes Match %s uebersprungen", entry.match_id)
            continue
        try:
            set_gross(match, entry.key, entry.hole, entry.gross)
        except (KeyError, ValueError, PermissionError) as exc:
            log.warning("Eintrag fuer Match %s uebersprungen: %s", entry.match_id, exc)
            continue
        applied += 1
    log.info("%d von %d Eintraegen uebernommen", applied, len(entries))
    return applied
