"""
Leaderboard
Turns a round snapshot into per-player stats and ranks them by the round's game type
"""

import logging

import config
import formats
from errors import InsufficientDataError
from handicap import HandicapCalculator, net_score
from settlements import calculate_bet_settlements

logger = logging.getLogger(__name__)


def _score_type(diff):
    if diff <= -1:
        return 'birdies'
    if diff == 0:
        return 'pars'
    if diff == 1:
        return 'bogeys'
    if diff == 2:
        return 'doubles'
    return 'others'


def build_player_stats(snapshot, calculator=None):
    """
    Per-player totals and hole-by-hole breakdown.

    Net scores use the fair stroke allocation on each player's display
    handicap, so the strokes reported per hole are the scorecard dots.

    Returns:
        Tuple of (list of player stat dicts in snapshot order, lowest course handicap)
    """
    calc = calculator or HandicapCalculator()
    cfg = snapshot.config
    course_handicaps, display_handicaps, lowest = calc.calculate_round_handicaps(
        snapshot.players, cfg.slope_rating, cfg.handicap_mode
    )
    scores = snapshot.score_lookup()

    player_stats = []
    for player in snapshot.players:
        stroke_map = calc.build_stroke_allocation_map(display_handicaps[player.id], snapshot.holes)

        gross_total = 0
        net_total = 0
        front9_gross = back9_gross = front9_net = back9_net = 0
        par_played = 0
        holes_played = 0
        greenies_won = 0
        stats = {'birdies': 0, 'pars': 0, 'bogeys': 0, 'doubles': 0, 'others': 0}
        hole_scores = []

        for hole in snapshot.holes:
            score = scores.get((player.id, hole.number))
            hole_strokes = stroke_map.get(hole.number, 0)

            if score is None or not score.is_played:
                hole_scores.append({
                    'hole': hole.number,
                    'gross': None,
                    'net': None,
                    'par': hole.par,
                    'strokes': hole_strokes,
                })
                continue

            gross = score.strokes
            net = net_score(gross, hole_strokes)

            gross_total += gross
            net_total += net
            par_played += hole.par
            holes_played += 1

            if hole.number <= 9:
                front9_gross += gross
                front9_net += net
            else:
                back9_gross += gross
                back9_net += net

            stats[_score_type(gross - hole.par)] += 1

            if score.greenie and hole.number in cfg.greenie_holes:
                greenies_won += 1

            hole_scores.append({
                'hole': hole.number,
                'gross': gross,
                'net': net,
                'par': hole.par,
                'strokes': hole_strokes,
                'greenie': score.greenie,
                'greenie_distance': score.greenie_distance,
            })

        player_stats.append({
            'player': {
                'id': player.id,
                'name': player.name,
                'handicap_index': player.handicap_index,
                'course_handicap': course_handicaps[player.id],
                'display_handicap': display_handicaps[player.id],
                'team': player.team,
                'tee_color': player.tee_color,
            },
            'gross_total': gross_total,
            'net_total': net_total,
            'front9_gross': front9_gross,
            'back9_gross': back9_gross,
            'front9_net': front9_net,
            'back9_net': back9_net,
            'holes_played': holes_played,
            'to_par': gross_total - par_played,
            'to_par_net': net_total - par_played,
            'stats': stats,
            'greenies_won': greenies_won,
            'hole_scores': hole_scores,
        })

    return player_stats, lowest


def split_two_teams(player_stats):
    """Split player stats into exactly two teams by team tag."""
    teams = formats.group_by_team(player_stats)
    if len(teams) != 2:
        raise InsufficientDataError("Players must form exactly two teams", {'teams': list(teams)})
    team1, team2 = teams.values()
    return team1, team2


def calculate_high_low_standings(snapshot, team1_ids=None, team2_ids=None, calculator=None):
    """
    High-low standings for two teams of a round.
    Without explicit team rosters the players' team tags decide the sides.
    """
    player_stats, _ = build_player_stats(snapshot, calculator)
    if team1_ids is None and team2_ids is None:
        team1, team2 = split_two_teams(player_stats)
    else:
        team1 = [ps for ps in player_stats if ps['player']['id'] in set(team1_ids or ())]
        team2 = [ps for ps in player_stats if ps['player']['id'] in set(team2_ids or ())]
    return formats.calculate_high_low(team1, team2, snapshot.config.nassau_format)


def calculate_leaderboard(snapshot, calculator=None):
    """
    Calculate full leaderboard with all scoring details.

    Returns:
        Dict with the ranked 'leaderboard' (players, or teams for team games),
        individual 'players', 'settlements' and par/handicap context
    """
    cfg = snapshot.config
    holes = snapshot.holes
    player_stats, lowest = build_player_stats(snapshot, calculator)

    result = {
        'game_type': cfg.game_type,
        'handicap_mode': cfg.handicap_mode,
        'lowest_handicap': lowest,
        'total_par': sum(h.par for h in holes),
        'front9_par': sum(h.par for h in holes if h.number <= 9),
        'back9_par': sum(h.par for h in holes if h.number > 9),
        'greenie_holes': sorted(cfg.greenie_holes),
        'players': player_stats,
    }

    if cfg.game_type == config.STROKE_PLAY:
        ranked = formats.sort_stroke_play(player_stats)
    elif cfg.game_type == config.MATCH_PLAY:
        ranked = formats.calculate_match_play(player_stats)
    elif cfg.game_type in (config.SCRAMBLE, config.BEST_BALL):
        ranked = formats.calculate_team_scores(player_stats, cfg.game_type, calculator)
    elif cfg.game_type == config.SKINS:
        ranked, skins, carryover = formats.calculate_skins(player_stats, cfg.skins_amount)
        result['skins'] = skins
        result['carryover'] = carryover
    else:
        ranked = formats.sort_by_net(player_stats)
        if cfg.game_type == config.HIGH_LOW:
            teams = formats.group_by_team(player_stats)
            if len(teams) == 2:
                team1, team2 = teams.values()
                result['high_low'] = formats.calculate_high_low(team1, team2, cfg.nassau_format)
            else:
                logger.info("High-low round has %s teams; standings need exactly two", len(teams))

    result['leaderboard'] = ranked
    result['settlements'] = calculate_bet_settlements(player_stats, cfg)
    return result
