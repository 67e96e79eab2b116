"""
Game format standings
Ranks per-player hole-by-hole results under each supported game type.

Every function takes player stat dicts as built by leaderboard.build_player_stats,
where each entry carries a 'hole_scores' list aligned on the round's holes and
unplayed holes have gross/net set to None.
"""

import logging

import config
from errors import InsufficientDataError
from handicap import HandicapCalculator

logger = logging.getLogger(__name__)


def format_match_status(holes_won, opponent_holes_won):
    if holes_won > opponent_holes_won:
        return f"{holes_won - opponent_holes_won} UP"
    if holes_won < opponent_holes_won:
        return f"{opponent_holes_won - holes_won} DN"
    return "AS"


def calculate_match_play_status(player1_holes, player2_holes, holes_played, total_holes=18):
    """
    Match state from player 1's point of view: "3 UP", "2 DN", "AS", "DORMIE" or "4&3".
    """
    holes_remaining = total_holes - holes_played
    diff = player1_holes - player2_holes
    abs_diff = abs(diff)
    leader = 'P1' if diff > 0 else 'P2'

    if diff == 0:
        if holes_remaining == 0:
            return {'status': 'AS', 'description': 'All Square (Tied)'}
        return {'status': 'AS', 'description': 'All Square'}

    if holes_remaining == 0:
        return {
            'status': f"{abs_diff} UP",
            'description': f"{leader} wins {abs_diff} up",
            'winner': leader,
        }

    if abs_diff > holes_remaining:
        return {
            'status': f"{abs_diff}&{holes_remaining}",
            'description': f"{leader} wins {abs_diff}&{holes_remaining}",
            'winner': leader,
        }

    if abs_diff == holes_remaining:
        return {
            'status': 'DORMIE',
            'description': f"{leader} is dormie ({abs_diff} up, {holes_remaining} to play)",
            'leader': leader,
        }

    return {
        'status': f"{abs_diff} UP" if diff > 0 else f"{abs_diff} DN",
        'description': f"{abs_diff} up" if diff > 0 else f"{abs_diff} down",
        'leader': leader,
    }


def _not_started(ps):
    return ps['holes_played'] == 0


def sort_stroke_play(player_stats):
    """Stroke play ranks on gross total, lowest first. Players yet to tee off go last."""
    return sorted(player_stats, key=lambda ps: (_not_started(ps), ps['gross_total']))


def sort_by_net(player_stats):
    return sorted(player_stats, key=lambda ps: (_not_started(ps), ps['net_total']))


def calculate_match_play(player_stats):
    """
    Calculate match play results (1v1) on net score per hole.
    Holes where either player has no score are not counted.
    """
    if len(player_stats) != 2:
        raise InsufficientDataError(
            "Match play needs exactly two players",
            {'players': len(player_stats)},
        )

    p1, p2 = player_stats
    p1_holes = 0
    p2_holes = 0
    holes_played = 0

    for s1, s2 in zip(p1['hole_scores'], p2['hole_scores']):
        if s1['net'] is None or s2['net'] is None:
            continue
        holes_played += 1
        if s1['net'] < s2['net']:
            p1_holes += 1
        elif s2['net'] < s1['net']:
            p2_holes += 1

    total_holes = len(p1['hole_scores'])
    state = calculate_match_play_status(p1_holes, p2_holes, holes_played, total_holes)

    results = [
        {**p1, 'match_status': format_match_status(p1_holes, p2_holes), 'holes_won': p1_holes,
         'match_holes_played': holes_played, 'match_state': state},
        {**p2, 'match_status': format_match_status(p2_holes, p1_holes), 'holes_won': p2_holes,
         'match_holes_played': holes_played, 'match_state': state},
    ]
    return sorted(results, key=lambda r: r['holes_won'], reverse=True)


def group_by_team(player_stats):
    """Group players by team tag in order of first appearance; untagged players share team 0."""
    teams = {}
    for ps in player_stats:
        team_id = ps['player']['team'] or 0
        teams.setdefault(team_id, []).append(ps)
    return teams


def calculate_team_scores(player_stats, game_type, calculator=None):
    """
    Calculate team scores (scramble, best ball).

    Best ball takes the lowest gross and lowest net of the players who scored
    each hole; a scramble has a single score entered for the team. Holes
    nobody on the team has scored add nothing.
    """
    calc = calculator or HandicapCalculator()
    team_results = []

    for team_id, members in group_by_team(player_stats).items():
        team_gross = 0
        team_net = 0
        holes_played = 0
        hole_scores = []

        for i, hole_score in enumerate(members[0]['hole_scores']):
            scores = [m['hole_scores'][i] for m in members if m['hole_scores'][i]['gross'] is not None]
            if not scores:
                hole_scores.append({'hole': hole_score['hole'], 'gross': None, 'net': None, 'par': hole_score['par']})
                continue

            if game_type == config.BEST_BALL:
                best_gross = min(s['gross'] for s in scores)
                best_net = min(s['net'] for s in scores)
            else:
                best_gross = scores[0]['gross']
                best_net = scores[0]['net']

            team_gross += best_gross
            team_net += best_net
            holes_played += 1
            hole_scores.append({'hole': hole_score['hole'], 'gross': best_gross, 'net': best_net, 'par': hole_score['par']})

        result = {
            'team': team_id,
            'name': ' & '.join(m['player']['name'] for m in members),
            'players': members,
            'gross_total': team_gross,
            'net_total': team_net,
            'holes_played': holes_played,
            'hole_scores': hole_scores,
        }
        if game_type == config.SCRAMBLE:
            result['team_handicap'] = calc.calculate_scramble_handicap(
                [m['player']['course_handicap'] for m in members]
            )
        team_results.append(result)

    return sorted(team_results, key=lambda t: t['net_total'])


def calculate_skins(player_stats, skin_value):
    """
    Calculate skins with carryovers.

    The sole lowest net score on a hole wins the skin plus every skin carried
    into it; a tie carries the skin to the next hole. Holes nobody has scored
    are passed over without touching the carryover.

    Returns:
        Tuple of (players sorted by skins won, list of skins, carryover left unpaid)
    """
    skins = []
    carryover = 0
    hole_count = len(player_stats[0]['hole_scores']) if player_stats else 0

    for i in range(hole_count):
        scores = [
            (ps['player'], ps['hole_scores'][i])
            for ps in player_stats
            if ps['hole_scores'][i]['net'] is not None
        ]
        if not scores:
            continue

        best = min(s['net'] for _, s in scores)
        winners = [player for player, s in scores if s['net'] == best]

        if len(winners) == 1:
            skins.append({
                'hole': scores[0][1]['hole'],
                'winner': winners[0],
                'value': skin_value * (1 + carryover),
                'carryovers': carryover,
            })
            carryover = 0
        else:
            carryover += 1

    results = []
    for ps in player_stats:
        won = [s for s in skins if s['winner']['id'] == ps['player']['id']]
        results.append({**ps, 'skins_won': won, 'skins_total': sum(s['value'] for s in won)})

    if carryover:
        logger.debug("%s skin(s) still carried over after the last scored hole", carryover)

    results.sort(key=lambda r: r['skins_total'], reverse=True)
    return results, skins, carryover


def _decide(team1_points, team2_points):
    if team1_points > team2_points:
        return 'team1', team1_points - team2_points
    if team2_points > team1_points:
        return 'team2', team2_points - team1_points
    return 'tie', 0


def calculate_high_low(team1_stats, team2_stats, nassau_format=config.DEFAULT_NASSAU_FORMAT):
    """
    Calculate High-Low standings between two teams.

    Low point: the lower team low wins. High point: the lower team high wins
    (the better of the bad scores). Ties award nothing. Points accumulate per
    Nassau segment and overall.
    """
    if not team1_stats or not team2_stats:
        raise InsufficientDataError(
            "High-low needs two teams with at least one player each",
            {'team1': len(team1_stats), 'team2': len(team2_stats)},
        )

    segments = config.NASSAU_SEGMENTS[nassau_format]
    result = {
        'team1': {
            'name': ' & '.join(ps['player']['name'] for ps in team1_stats),
            'player_ids': [ps['player']['id'] for ps in team1_stats],
        },
        'team2': {
            'name': ' & '.join(ps['player']['name'] for ps in team2_stats),
            'player_ids': [ps['player']['id'] for ps in team2_stats],
        },
        'hole_results': [],
        'segments': {
            name: {'team1_points': 0, 'team2_points': 0, 'holes_played': 0, 'range': list(bounds)}
            for name, bounds in segments.items()
        },
        'overall': {'team1_points': 0, 'team2_points': 0, 'holes_played': 0},
    }

    for i, reference in enumerate(team1_stats[0]['hole_scores']):
        hole_num = reference['hole']
        team1_nets = [ps['hole_scores'][i]['net'] for ps in team1_stats if ps['hole_scores'][i]['net'] is not None]
        team2_nets = [ps['hole_scores'][i]['net'] for ps in team2_stats if ps['hole_scores'][i]['net'] is not None]

        if not team1_nets or not team2_nets:
            result['hole_results'].append({'hole': hole_num, 'status': 'incomplete'})
            continue

        team1_low, team1_high = min(team1_nets), max(team1_nets)
        team2_low, team2_high = min(team2_nets), max(team2_nets)

        low_point_winner, _ = _decide(-team1_low, -team2_low)
        high_point_winner, _ = _decide(-team1_high, -team2_high)
        team1_hole_points = (low_point_winner == 'team1') + (high_point_winner == 'team1')
        team2_hole_points = (low_point_winner == 'team2') + (high_point_winner == 'team2')

        result['hole_results'].append({
            'hole': hole_num,
            'team1_low': team1_low,
            'team1_high': team1_high,
            'team2_low': team2_low,
            'team2_high': team2_high,
            'low_point_winner': low_point_winner,
            'high_point_winner': high_point_winner,
            'team1_points': team1_hole_points,
            'team2_points': team2_hole_points,
        })

        result['overall']['team1_points'] += team1_hole_points
        result['overall']['team2_points'] += team2_hole_points
        result['overall']['holes_played'] += 1

        for name, (start, end) in segments.items():
            if start <= hole_num <= end:
                seg = result['segments'][name]
                seg['team1_points'] += team1_hole_points
                seg['team2_points'] += team2_hole_points
                seg['holes_played'] += 1
                break

    for totals in list(result['segments'].values()) + [result['overall']]:
        totals['winner'], totals['margin'] = _decide(totals['team1_points'], totals['team2_points'])

    return result
