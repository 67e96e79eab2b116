"""
Multi-day standings
Rolls per-round finishing positions into a points table across a multi-round event
"""

import logging

import pandas as pd

import config
import formats
from leaderboard import build_player_stats, calculate_leaderboard
from settlements import apply_payout_structure

logger = logging.getLogger(__name__)

RESULT_COLUMNS = [
    'master_id', 'round_id', 'round_number', 'day_number', 'round_name',
    'position', 'points', 'gross_total', 'to_par', 'win',
]


def _number(value):
    value = float(value)
    return int(value) if value.is_integer() else value


def normalize_point_system(point_system):
    """
    Points table as {place: points}.
    Accepts [{'place': 1, 'points': 10}, ...], {1: 10, ...} or [{1: 10}, {2: 6}].
    """
    table = {}
    if isinstance(point_system, dict):
        items = [point_system]
    else:
        items = point_system or []

    for item in items:
        if 'place' in item:
            table[int(item['place'])] = item.get('points', 0)
        else:
            for place, points in item.items():
                table[int(place)] = points
    return table


def _to_par(hole_scores):
    return sum(hs['gross'] - hs['par'] for hs in hole_scores if hs['gross'] is not None)


def calculate_round_results(snapshot, calculator=None):
    """
    Finishing positions for one round, teams or individuals per the round's config.

    Returns:
        List of dicts with position, the player ids sharing it, gross total and to-par
    """
    cfg = snapshot.config

    if cfg.is_team_game:
        player_stats, _ = build_player_stats(snapshot, calculator)
        team_format = cfg.game_type if cfg.game_type in (config.SCRAMBLE, config.BEST_BALL) else config.BEST_BALL
        ranked = formats.calculate_team_scores(player_stats, team_format, calculator)
        entries = [
            {
                'player_ids': [m['player']['id'] for m in team['players']],
                'name': team['name'],
                'gross_total': team['gross_total'],
                'holes_played': team['holes_played'],
                'to_par': _to_par(team['hole_scores']),
            }
            for team in ranked
        ]
    else:
        ranked = calculate_leaderboard(snapshot, calculator)['leaderboard']
        entries = [
            {
                'player_ids': [ps['player']['id']],
                'name': ps['player']['name'],
                'gross_total': ps['gross_total'],
                'holes_played': ps['holes_played'],
                'to_par': ps['to_par'],
            }
            for ps in ranked
        ]

    for position, entry in enumerate(entries, start=1):
        entry['position'] = position
    return entries


def calculate_multi_day_standings(master_players, rounds, point_system, payout_structure=None, pot=0, calculator=None):
    """
    Overall standings for a multi-day event.

    Args:
        master_players: Event-level Player records
        rounds: RoundSnapshot per round; round players link to a master player via master_id
        point_system: Points per finishing place (see normalize_point_system)
        payout_structure: Optional payout rules applied to the final order
        pot: Prize pot the payout rules share out

    Returns:
        List of standings sorted by points, then wins, then fewest strokes
    """
    points_table = normalize_point_system(point_system)
    masters = {p.id: p for p in master_players}
    rows = []

    for snapshot in rounds:
        cfg = snapshot.config
        if cfg.status in config.UNPLAYED_ROUND_STATUSES:
            logger.debug("Skipping round %s (%s)", cfg.id, cfg.status)
            continue

        links = {p.id: p.master_id for p in snapshot.players}
        for result in calculate_round_results(snapshot, calculator):
            points = points_table.get(result['position'], 0)
            for pid in result['player_ids']:
                master_id = links.get(pid)
                if master_id not in masters:
                    continue
                rows.append({
                    'master_id': master_id,
                    'round_id': cfg.id,
                    'round_number': cfg.round_number,
                    'day_number': cfg.day_number,
                    'round_name': cfg.name,
                    'position': result['position'],
                    'points': points,
                    'gross_total': result['gross_total'],
                    'to_par': result['to_par'],
                    'win': result['position'] == 1,
                })

    results = pd.DataFrame(rows, columns=RESULT_COLUMNS)
    standings = pd.DataFrame({'player_id': list(masters)})

    if not results.empty:
        totals = results.groupby('master_id').agg(
            total_points=('points', 'sum'),
            wins=('win', 'sum'),
            total_strokes=('gross_total', 'sum'),
            rounds_played=('position', 'count'),
        ).reset_index().rename(columns={'master_id': 'player_id'})
        standings = standings.merge(totals, on='player_id', how='left')

    for column in ('total_points', 'wins', 'total_strokes', 'rounds_played'):
        if column not in standings:
            standings[column] = 0
    standings = standings.fillna(0)

    standings = standings.sort_values(
        ['total_points', 'wins', 'total_strokes'],
        ascending=[False, False, True],
        kind='mergesort',
    ).reset_index(drop=True)

    output = []
    for position, row in enumerate(standings.to_dict('records'), start=1):
        master = masters[row['player_id']]
        output.append({
            'position': position,
            'player_id': master.id,
            'player_name': master.name,
            'team': master.team,
            'total_points': _number(row['total_points']),
            'wins': int(row['wins']),
            'total_strokes': int(row['total_strokes']),
            'rounds_played': int(row['rounds_played']),
            'round_results': [
                {k: v for k, v in r.items() if k not in ('master_id', 'win')}
                for r in rows
                if r['master_id'] == master.id
            ],
        })

    if payout_structure is not None:
        output = apply_payout_structure(output, pot, payout_structure)

    return output
