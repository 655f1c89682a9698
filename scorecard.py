"""cup-scorer – CLI-Tool fuer Live-Scoring eines Team-Golfturniers."""

import argparse
import logging
import sys
from pathlib import Path

from filelock import Timeout

from cupscore import Format
from cupscore.aggregate import find_match, score_match_by_id, score_tournament
from cupscore.claims import ClaimConflict, ClaimTable, DEFAULT_NAME_THRESHOLD, find_player
from cupscore.entry import (
    apply_score_entries,
    can_edit_player,
    can_edit_side,
    clear_match_scores,
    is_admin,
    reseed,
    set_gross,
    validate_gross,
)
from cupscore.reader import load_tournament, read_score_sheet, save_tournament, snapshot_lock
from cupscore.reporter import print_match, print_summary, write_csv_report, write_html_report
from cupscore.seed import make_initial_tournament


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the CLI."""
    parser = argparse.ArgumentParser(
        description='Live-Scoring fuer ein mehrtaegiges Team-Golfturnier.',
        prog='scorecard.py',
    )
    parser.add_argument(
        '--snapshot', required=True, type=Path,
        help='Pfad zum Turnier-Snapshot (JSON)',
    )
    sub = parser.add_subparsers(dest='command', required=True)

    standings = sub.add_parser('standings', help='Stand berechnen und Reports schreiben')
    standings.add_argument(
        '--output', type=Path,
        help='Pfad fuer die Report-Ausgabe (CSV)',
    )
    standings.add_argument(
        '--html', type=Path,
        help='Pfad fuer einen zusaetzlichen HTML-Report',
    )
    standings.add_argument(
        '--summary', action='store_true',
        help='Zusammenfassung auf stdout ausgeben',
    )

    match = sub.add_parser('match', help='Scorekarte eines Matches ausgeben')
    match.add_argument('match_id', help='Match-ID, z.B. d1m3')

    enter = sub.add_parser('enter', help='Einen Bruttowert eintragen oder loeschen')
    enter.add_argument('--match', required=True, help='Match-ID')
    enter.add_argument('--key', required=True, help='Spieler-ID (Fourball/Singles) oder Seiten-ID (Scramble)')
    enter.add_argument('--hole', required=True, type=int, help='Lochnummer 1..18')
    enter.add_argument('--gross', required=True, help="Bruttoschlaege; '-' loescht den Eintrag")
    enter.add_argument('--user', help='Benutzer-ID fuer die Rechtepruefung')

    clear = sub.add_parser('clear', help='Alle Eintraege eines Matches loeschen')
    clear.add_argument('--match', required=True, help='Match-ID')
    clear.add_argument('--user', help='Benutzer-ID (muss Admin sein)')

    claim = sub.add_parser('claim', help='Spieler fuer einen Benutzer beanspruchen')
    claim.add_argument('--user', required=True, help='Benutzer-ID')
    target = claim.add_mutually_exclusive_group(required=True)
    target.add_argument('--player', help='Spieler-ID')
    target.add_argument('--name', help='Spielername (unscharfe Suche)')
    claim.add_argument(
        '--fuzzy-threshold', type=float, default=DEFAULT_NAME_THRESHOLD,
        help=f'Schwellenwert fuer die Namenssuche (Standard: {DEFAULT_NAME_THRESHOLD})',
    )

    release = sub.add_parser('release', help='Anspruch eines Benutzers aufheben')
    release.add_argument('--user', required=True, help='Benutzer-ID')

    seed = sub.add_parser('seed', help='Turnier anlegen oder neu anlegen (setzt alle Scores zurueck)')
    seed.add_argument('--user', help='Benutzer-ID des Eigentuemers')
    seed.add_argument(
        '--clear-claims', action='store_true',
        help='Bestehende Spieler-Ansprueche verwerfen',
    )

    imp = sub.add_parser('import', help='Scores aus einer Tab-getrennten Datei uebernehmen')
    imp.add_argument('sheet', type=Path, help='Pfad zur Score-Datei')

    return parser


def cmd_standings(args: argparse.Namespace) -> int:
    tournament = load_tournament(args.snapshot)
    totals = score_tournament(tournament)

    if args.output:
        write_csv_report(totals, tournament, args.output)
    if args.html:
        write_html_report(totals, tournament, args.html)
    if args.summary or not (args.output or args.html):
        print_summary(totals, tournament)
    return 0


def cmd_match(args: argparse.Namespace) -> int:
    tournament = load_tournament(args.snapshot)
    card = score_match_by_id(tournament, args.match_id)
    if card is None:
        logging.error("Unbekanntes Match: %s", args.match_id)
        return 1
    print_match(card, tournament)
    return 0


def _may_edit(tournament, match, key: str, user_id: str | None) -> bool:
    """Operator mode (no user) may edit anything."""
    if user_id is None:
        return True
    admin = is_admin(tournament, user_id)
    players_by_id = tournament.players_by_id()
    me = players_by_id.get(tournament.claims.get(user_id, ''))
    if match.format is Format.SCRAMBLE_STABLEFORD:
        return can_edit_side(match, key, me, admin)
    return can_edit_player(match, key, me, players_by_id, admin)


def cmd_enter(args: argparse.Namespace) -> int:
    tournament = load_tournament(args.snapshot)
    match = find_match(tournament, args.match)
    if match is None:
        logging.error("Unbekanntes Match: %s", args.match)
        return 1
    if not _may_edit(tournament, match, args.key, args.user):
        logging.error("Benutzer %s darf %s in Match %s nicht bearbeiten",
                      args.user, args.key, match.id)
        return 1
    try:
        gross = validate_gross(args.gross)
        set_gross(match, args.key, args.hole, gross)
    except (KeyError, ValueError, PermissionError) as exc:
        logging.error("%s", exc)
        return 1

    save_tournament(tournament, args.snapshot)
    card = score_match_by_id(tournament, match.id)
    print(f"{match.id}: {card.status.label}")
    return 0


def cmd_clear(args: argparse.Namespace) -> int:
    tournament = load_tournament(args.snapshot)
    match = find_match(tournament, args.match)
    if match is None:
        logging.error("Unbekanntes Match: %s", args.match)
        return 1
    if args.user is not None and not is_admin(tournament, args.user):
        logging.error("Nur Admins duerfen Match %s leeren", match.id)
        return 1
    try:
        clear_match_scores(match)
    except PermissionError as exc:
        logging.error("%s", exc)
        return 1
    save_tournament(tournament, args.snapshot)
    return 0


def cmd_claim(args: argparse.Namespace) -> int:
    tournament = load_tournament(args.snapshot)
    if args.name:
        player = find_player(args.name, tournament.players, args.fuzzy_threshold)
        if player is None:
            logging.error("Kein Spieler passend zu %r gefunden", args.name)
            return 1
        player_id = player.id
    else:
        player_id = args.player
        if player_id not in tournament.players_by_id():
            logging.error("Unbekannter Spieler: %s", player_id)
            return 1

    table = ClaimTable(tournament.claims)
    try:
        table.claim(args.user, player_id)
    except ClaimConflict as exc:
        logging.error("%s", exc)
        return 1
    tournament.claims = table.snapshot()
    save_tournament(tournament, args.snapshot)
    print(f"{args.user} -> {tournament.players_by_id()[player_id].name}")
    return 0


def cmd_release(args: argparse.Namespace) -> int:
    tournament = load_tournament(args.snapshot)
    table = ClaimTable(tournament.claims)
    if table.release(args.user) is None:
        logging.warning("Benutzer %s hat keinen Spieler beansprucht.", args.user)
    tournament.claims = table.snapshot()
    save_tournament(tournament, args.snapshot)
    return 0


def cmd_seed(args: argparse.Namespace) -> int:
    if args.snapshot.exists():
        current = load_tournament(args.snapshot)
        try:
            tournament = reseed(current, args.user, keep_claims=not args.clear_claims)
        except PermissionError as exc:
            logging.error("%s", exc)
            return 1
    else:
        tournament = make_initial_tournament()
        tournament.owner_user_id = args.user
        if args.user:
            tournament.admin_user_ids = [args.user]
    save_tournament(tournament, args.snapshot)
    return 0


def cmd_import(args: argparse.Namespace) -> int:
    tournament = load_tournament(args.snapshot)
    entries = read_score_sheet(args.sheet)
    apply_score_entries(tournament, entries)
    save_tournament(tournament, args.snapshot)
    return 0


COMMANDS = {
    'standings': cmd_standings,
    'match': cmd_match,
    'enter': cmd_enter,
    'clear': cmd_clear,
    'claim': cmd_claim,
    'release': cmd_release,
    'seed': cmd_seed,
    'import': cmd_import,
}


# Commands that rewrite the snapshot run under its file lock
MUTATING_COMMANDS = {'enter', 'clear', 'claim', 'release', 'seed', 'import'}


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    logging.basicConfig(
        level=logging.INFO,
        format='%(levelname)s: %(message)s',
    )

    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command != 'seed' and not args.snapshot.exists():
        parser.error(f'Snapshot {args.snapshot} existiert nicht (zuerst "seed" ausfuehren).')

    handler = COMMANDS[args.command]
    try:
        if args.command not in MUTATING_COMMANDS:
            return handler(args)
        args.snapshot.parent.mkdir(parents=True, exist_ok=True)
        with snapshot_lock(args.snapshot):
            return handler(args)
    except Timeout:
        logging.error("Snapshot %s ist gesperrt, bitte erneut versuchen.", args.snapshot)
        return 1
    except ValueError as exc:
        parser.error(str(exc))


if __name__ == '__main__':
    sys.exit(main())
