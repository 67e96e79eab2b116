"""
Golf Round Scoring
Scores a round snapshot JSON file and prints the summary, side bet status and an optional Excel export
"""

import argparse
import json
import logging
import sys

import config
from errors import ScoringError
from excel_handler import ExcelHandler
from leaderboard import calculate_leaderboard
from models import RoundSnapshot, parse_side_bets
from side_bets import calculate_side_bet_status
from summary import generate_round_summary, generate_side_bet_summary


def load_snapshot(path):
    with open(path, encoding='utf-8') as f:
        return json.load(f)


def create_parser():
    parser = argparse.ArgumentParser(description="Score a golf round snapshot")
    parser.add_argument('snapshot', help="Path to a JSON file with config, players, holes and scores")
    parser.add_argument('--excel', metavar='PATH', help="Write the leaderboard to this Excel file")
    parser.add_argument('--side-bets', action='store_true', help="Also report side bet status")
    parser.add_argument('--log-level', default=config.LOG_LEVEL, help="Logging level")
    return parser


def main(argv=None):
    args = create_parser().parse_args(argv)
    logging.basicConfig(level=args.log_level.upper(), format='%(levelname)s %(name)s: %(message)s')

    print(f"[*] Loading snapshot from {args.snapshot}...")
    data = load_snapshot(args.snapshot)

    try:
        snapshot = RoundSnapshot.from_dict(data)
        print(f"[+] Loaded {len(snapshot.players)} players, {len(snapshot.holes)} holes, {len(snapshot.scores)} scores")

        print("[*] Calculating leaderboard...")
        result = calculate_leaderboard(snapshot)

        bet_statuses = None
        if args.side_bets:
            print("[*] Calculating side bets...")
            bet_statuses = calculate_side_bet_status(snapshot, parse_side_bets(data.get('side_bets')))
    except ScoringError as e:
        print(f"[-] {e}")
        return 1

    print("\n" + "=" * 70)
    print(generate_round_summary(result, snapshot.config.name))
    if bet_statuses:
        names = {p.id: p.name for p in snapshot.players}
        print(generate_side_bet_summary(bet_statuses, names))
    print("=" * 70)

    if args.excel:
        print("[*] Generating Excel export...")
        handler = ExcelHandler(args.excel)
        handler.write_leaderboard(result)
        handler.write_settlements(result['settlements'])
        handler.save()
        print(f"[+] Excel file generated: {args.excel}")

    return 0


if __name__ == '__main__':
    sys.exit(main())
