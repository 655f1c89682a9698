"""Tests for cupscore.claims module."""

import threading

import pytest

from cupscore.claims import ClaimConflict, ClaimTable, find_player
from cupscore.seed import make_players


class TestClaimTable:
    """One player per user, one user per player."""

    def test_claim_and_lookup(self):
        table = ClaimTable()
        table.claim('u1', 'p1')
        assert table.claimed_player('u1') == 'p1'
        assert table.owner_of('p1') == 'u1'

    def test_conflict(self):
        table = ClaimTable()
        table.claim('u1', 'p1')
        with pytest.raises(ClaimConflict):
            table.claim('u2', 'p1')
        assert table.owner_of('p1') == 'u1'

    def test_reclaim_same_player(self):
        table = ClaimTable()
        table.claim('u1', 'p1')
        table.claim('u1', 'p1')
        assert table.snapshot() == {'u1': 'p1'}

    def test_moving_frees_old_player(self):
        table = ClaimTable()
        table.claim('u1', 'p1')
        table.claim('u1', 'p2')
        assert table.owner_of('p1') is None
        table.claim('u2', 'p1')
        assert table.snapshot() == {'u1': 'p2', 'u2': 'p1'}

    def test_release(self):
        table = ClaimTable({'u1': 'p1'})
        assert table.release('u1') == 'p1'
        assert table.release('u1') is None
        assert table.owner_of('p1') is None

    def test_empty_ids_rejected(self):
        with pytest.raises(ValueError):
            ClaimTable().claim('', 'p1')
        with pytest.raises(ValueError):
            ClaimTable().claim('u1', '')

    def test_duplicate_player_in_snapshot_ignored(self):
        table = ClaimTable({'u1': 'p1', 'u2': 'p1'})
        assert table.snapshot() == {'u1': 'p1'}

    def test_concurrent_claims_single_winner(self):
        table = ClaimTable()
        winners = []
        barrier = threading.Barrier(8)

        def worker(user_id):
            barrier.wait()
            try:
                table.claim(user_id, 'p7')
            except ClaimConflict:
                return
            winners.append(user_id)

        threads = [threading.Thread(target=worker, args=(f'u{i}',)) for i in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(winners) == 1
        assert table.owner_of('p7') == winners[0]


class TestFindPlayer:
    """Name lookup for claiming by typed name."""

    def test_exact_ignores_case_and_captain_suffix(self):
        player = find_player('matthew ellis', make_players())
        assert player.id == 'p1'

    def test_typo(self):
        player = find_player('Jason Franklyn', make_players())
        assert player.id == 'p2'

    def test_abbreviated_captain(self):
        player = find_player('Mat Elis', make_players())
        assert player.name == 'Matthew Ellis (C)'

    def test_no_match(self):
        assert find_player('Zygmunt Wolowski', make_players()) is None

    def test_blank(self):
        assert find_player('   ', make_players()) is None

    def test_threshold(self):
        assert find_player('Jason Franklyn', make_players(), threshold=1.0) is None
