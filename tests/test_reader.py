"""Tests for cupscore.reader module."""

import json

import pytest

from cupscore import Format, ScoreEntry
from cupscore.aggregate import find_match, score_tournament
from cupscore.reader import (
    detect_encoding,
    load_tournament,
    normalize_whitespace,
    read_score_sheet,
    save_tournament,
    snapshot_lock,
    tournament_from_dict,
    tournament_to_dict,
)


class TestDetectEncoding:
    """Tests for encoding detection."""

    def test_utf16le_bom(self, tmp_path):
        f = tmp_path / 'sheet.tsv'
        f.write_bytes('\ufeffMatch\tKey\tHole\tGross\n'.encode('utf-16-le'))
        assert detect_encoding(f) == 'utf-16-le'

    def test_utf8_fallback(self, tmp_path):
        f = tmp_path / 'test.json'
        f.write_text('hello', encoding='utf-8')
        assert detect_encoding(f) == 'utf-8-sig'


class TestNormalizeWhitespace:

    def test_collapses_and_strips(self):
        assert normalize_whitespace('  d1m1 \t ') == 'd1m1'

    def test_unicode_whitespace(self):
        # U+2006 = Six-Per-Em Space
        assert normalize_whitespace('a\u2006b') == 'a b'


class TestSnapshot:
    """JSON snapshot save and load."""

    def test_round_trip_scores_identically(self, tournament, tmp_path):
        find_match(tournament, 'd1m1').gross = {'p1': {1: 4, 2: 5}, 'p11': {1: 6}}
        find_match(tournament, 'd2m3').gross = {'d2m3-A': {1: 3}, 'd2m3-B': {1: 4}}
        tournament.claims = {'u1': 'p4'}
        tournament.owner_user_id = 'u1'

        path = tmp_path / 'snap' / 'cup.json'
        save_tournament(tournament, path)
        loaded = load_tournament(path)

        assert loaded.players == tournament.players
        assert loaded.courses == tournament.courses
        assert loaded.claims == {'u1': 'p4'}
        assert loaded.owner_user_id == 'u1'
        assert score_tournament(loaded) == score_tournament(tournament)

    def test_gross_stored_under_format_field(self, tournament):
        find_match(tournament, 'd3m2').gross = {'p2': {7: 4}}
        data = tournament_to_dict(tournament)
        raw = data['days'][2]['matches'][1]
        assert raw['format'] == 'SINGLES_NET'
        assert raw['singlesGrossByPlayer'] == {'p2': {'7': 4}}

    def test_missing_keys(self):
        with pytest.raises(ValueError, match='Fehlende Felder'):
            tournament_from_dict({'players': []})

    def test_bad_course_rejected(self, tournament):
        data = tournament_to_dict(tournament)
        data['courses']['1']['holes'][0]['hcpRank'] = 2
        with pytest.raises(ValueError):
            tournament_from_dict(data)

    def test_bad_match_skipped(self, tournament):
        data = tournament_to_dict(tournament)
        data['days'][0]['matches'][0]['format'] = 'BEST_OF_THREE'
        loaded = tournament_from_dict(data)
        assert [m.id for m in loaded.days[0].matches] == ['d1m2', 'd1m3', 'd1m4', 'd1m5']

    def test_bad_gross_entries_dropped(self, tournament):
        data = tournament_to_dict(tournament)
        data['days'][0]['matches'][0]['fourballGrossByPlayer'] = {
            'p1': {'1': 4, '2': 'abc', '3': 0, '4': None},
        }
        loaded = tournament_from_dict(data)
        assert loaded.days[0].matches[0].gross == {'p1': {1: 4}}

    def test_teams_default(self, tournament):
        data = tournament_to_dict(tournament)
        del data['teams']
        loaded = tournament_from_dict(data)
        assert [t.abbr for t in loaded.teams] == ['JCGC', 'SGC']

    def test_missing_hole_field(self, tournament):
        data = tournament_to_dict(tournament)
        del data['courses']['1']['holes'][0]['hcpRank']
        with pytest.raises(ValueError, match='Ungueltiger Snapshot'):
            tournament_from_dict(data)

    def test_player_without_id(self, tournament):
        data = tournament_to_dict(tournament)
        del data['players'][0]['id']
        with pytest.raises(ValueError):
            tournament_from_dict(data)

    def test_day_without_number(self, tournament):
        data = tournament_to_dict(tournament)
        del data['days'][0]['day']
        with pytest.raises(ValueError):
            tournament_from_dict(data)

    def test_negative_handicap_rejected(self, tournament):
        data = tournament_to_dict(tournament)
        data['players'][0]['courseHcp'] = -2
        with pytest.raises(ValueError, match='negatives Course-Handicap'):
            tournament_from_dict(data)

    def test_infinite_gross_dropped(self, tournament, tmp_path):
        data = tournament_to_dict(tournament)
        data['days'][2]['matches'][0]['singlesGrossByPlayer'] = {
            'p1': {'1': float('inf'), '2': 5},
        }
        f = tmp_path / 'cup.json'
        f.write_text(json.dumps(data), encoding='utf-8')
        assert 'Infinity' in f.read_text(encoding='utf-8')
        loaded = load_tournament(f)
        assert loaded.days[2].matches[0].gross == {'p1': {2: 5}}

    def test_save_leaves_no_temp_files(self, tournament, tmp_path):
        path = tmp_path / 'cup.json'
        save_tournament(tournament, path)
        save_tournament(tournament, path)
        assert [p.name for p in tmp_path.iterdir()] == ['cup.json']

    def test_failed_save_keeps_old_snapshot(self, tournament, tmp_path, monkeypatch):
        path = tmp_path / 'cup.json'
        save_tournament(tournament, path)
        before = path.read_text(encoding='utf-8')

        def broken(_tournament):
            raise RuntimeError('disk full')

        monkeypatch.setattr('cupscore.reader.tournament_to_dict', broken)
        with pytest.raises(RuntimeError):
            save_tournament(tournament, path)
        assert path.read_text(encoding='utf-8') == before
        assert [p.name for p in tmp_path.iterdir()] == ['cup.json']

    def test_lock_file_beside_snapshot(self, tmp_path):
        lock = snapshot_lock(tmp_path / 'cup.json')
        assert lock.lock_file == str(tmp_path / 'cup.json.lock')

    def test_invalid_json(self, tmp_path):
        f = tmp_path / 'broken.json'
        f.write_text('{"days": [', encoding='utf-8')
        with pytest.raises(ValueError, match='kein gueltiges JSON'):
            load_tournament(f)

    def test_not_an_object(self, tmp_path):
        f = tmp_path / 'list.json'
        f.write_text(json.dumps([1, 2, 3]), encoding='utf-8')
        with pytest.raises(ValueError):
            load_tournament(f)

    def test_file_not_found(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_tournament(tmp_path / 'nope.json')


class TestReadScoreSheet:
    """Tab-separated score import."""

    def test_rows(self, tmp_path):
        f = tmp_path / 'scores.tsv'
        f.write_text(
            'Match\tKey\tHole\tGross\n'
            'd1m1\tp1\t1\t4\n'
            ' d2m1 \td2m1-A\t2\t3\n'
            'd1m1\tp1\t3\t-\n',
            encoding='utf-8',
        )
        assert read_score_sheet(f) == [
            ScoreEntry('d1m1', 'p1', 1, 4),
            ScoreEntry('d2m1', 'd2m1-A', 2, 3),
            ScoreEntry('d1m1', 'p1', 3, None),
        ]

    def test_invalid_rows_skipped(self, tmp_path):
        f = tmp_path / 'scores.tsv'
        f.write_text(
            'Match\tKey\tHole\tGross\n'
            'd1m1\tp1\tone\t4\n'
            'd1m1\tp1\t2\t99\n'
            'd1m1\tp1\t3\t5\n',
            encoding='utf-8',
        )
        assert read_score_sheet(f) == [ScoreEntry('d1m1', 'p1', 3, 5)]

    def test_utf16(self, tmp_path):
        f = tmp_path / 'scores.tsv'
        f.write_bytes('\ufeffMatch\tKey\tHole\tGross\nd3m1\tp1\t18\t5\n'.encode('utf-16-le'))
        assert read_score_sheet(f) == [ScoreEntry('d3m1', 'p1', 18, 5)]

    def test_missing_columns(self, tmp_path):
        f = tmp_path / 'scores.tsv'
        f.write_text('Match\tKey\tGross\nd1m1\tp1\t4\n', encoding='utf-8')
        with pytest.raises(ValueError, match='Fehlende Spalten'):
            read_score_sheet(f)

    def test_empty_file(self, tmp_path):
        f = tmp_path / 'scores.tsv'
        f.write_text('', encoding='utf-8')
        with pytest.raises(ValueError):
            read_score_sheet(f)

    def test_format_enum_survives(self, tournament, tmp_path):
        path = tmp_path / 'cup.json'
        save_tournament(tournament, path)
        assert load_tournament(path).days[1].matches[0].format is Format.SCRAMBLE_STABLEFORD
