"""Player-claim table: one player per user, one user per player."""

import logging
import threading
from typing import Optional

from rapidfuzz.distance import JaroWinkler

from cupscore import Player

log = logging.getLogger(__name__)

DEFAULT_NAME_THRESHOLD = 0.85

# Suffixes like "(C)" for captains are not part of the name
_NAME_SUFFIXES = ('(C)',)


class ClaimConflict(RuntimeError):
    """Raised when a player is already claimed by another user."""


class ClaimTable:
    """Shared claim table guarded by a lock.

    Every mutation is a single check-and-set under the lock, so two
    concurrent claims on the same player can never both succeed.
    """

    def __init__(self, claims: Optional[dict[str, str]] = None):
        self._lock = threading.Lock()
        self._by_user: dict[str, str] = {}
        self._by_player: dict[str, str] = {}
        for user_id, player_id in (claims or {}).items():
            if player_id in self._by_player:
                log.warning(
                    "Spieler %s mehrfach beansprucht, %s ignoriert", player_id, user_id,
                )
                continue
            self._by_user[user_id] = player_id
            self._by_player[player_id] = user_id

    def claim(self, user_id: str, player_id: str) -> None:
        """Claim ``player_id`` for ``user_id`` if nobody else holds it.

        A user who already holds another player gives that one up.

        Raises:
            ValueError: If either id is empty.
            ClaimConflict: If another user already holds the player.
        """
        if not user_id or not player_id:
            raise ValueError("Benutzer-ID und Spieler-ID duerfen nicht leer sein")
        with self._lock:
            holder = self._by_player.get(player_id)
            if holder is not None and holder != user_id:
                raise ClaimConflict(
                    f"Spieler {player_id} ist bereits von {holder} beansprucht"
                )
            previous = self._by_user.get(user_id)
            if previous is not None and previous != player_id:
                del self._by_player[previous]
            self._by_user[user_id] = player_id
            self._by_player[player_id] = user_id
        log.info("Spieler %s von %s beansprucht", player_id, user_id)

    def release(self, user_id: str) -> Optional[str]:
        """Drop the user's claim; returns the released player id, if any."""
        with self._lock:
            player_id = self._by_user.pop(user_id, None)
            if player_id is not None:
                del self._by_player[player_id]
        if player_id is not None:
            log.info("Anspruch von %s auf %s aufgehoben", user_id, player_id)
        return player_id

    def claimed_player(self, user_id: str) -> Optional[str]:
        with self._lock:
            return self._by_user.get(user_id)

    def owner_of(self, player_id: str) -> Optional[str]:
        with self._lock:
            return self._by_player.get(player_id)

    def snapshot(self) -> dict[str, str]:
        """Copy of the table as ``{user id: player id}``."""
        with self._lock:
            return dict(self._by_user)


def _normalize_name(name: str) -> str:
    for suffix in _NAME_SUFFIXES:
        name = name.replace(suffix, '')
    return ' '.join(name.split()).upper()


def find_player(
    name: str,
    players: list[Player],
    threshold: float = DEFAULT_NAME_THRESHOLD,
) -> Optional[Player]:
    """Find the rostered player best matching a typed name.

    Exact (case-insensitive) matches win outright; otherwise the highest
    Jaro-Winkler similarity at or above ``threshold`` is returned.

    Args:
        name: Name as typed by the user.
        players: The roster.
        threshold: Minimum similarity (0–1).

    Returns:
        The matching Player, or None.
    """
    wanted = _normalize_name(name)
    if not wanted:
        return None

    best: Optional[Player] = None
    best_sim = -1.0
    for p in players:
        candidate = _normalize_name(p.name)
        if candidate == wanted:
            return p
        sim = JaroWinkler.similarity(wanted, candidate)
        if sim >= threshold and sim > best_sim:
            best, best_sim = p, sim

    if best is None:
        log.info("Kein Spieler passend zu %r gefunden", name)
    return best
