import copy

import pytest

from errors import ConfigError, InsufficientDataError
from leaderboard import build_player_stats, calculate_high_low_standings, calculate_leaderboard
from models import Player, RoundConfig, RoundSnapshot, Score

PLAYERS = [
    (1, 'Alice', 10, None),
    (2, 'Bob', 0, None),
    (3, 'Carol', 5, None),
]


def test_player_stats_full_round(snapshot_factory):
    snapshot = snapshot_factory('stroke_play', PLAYERS[:1], {1: [5] * 18})

    [stats], lowest = build_player_stats(snapshot)

    assert lowest == 0
    assert stats['gross_total'] == 90
    assert stats['net_total'] == 80
    assert stats['front9_gross'] + stats['back9_gross'] == 90
    assert stats['front9_net'] + stats['back9_net'] == 80
    assert stats['holes_played'] == 18
    assert stats['to_par'] == 18
    assert stats['to_par_net'] == 8
    # par 3s and par 5s at 5 are doubles and pars, par 4s bogeys
    assert stats['stats'] == {'birdies': 0, 'pars': 4, 'bogeys': 10, 'doubles': 4, 'others': 0}
    assert stats['player']['course_handicap'] == 10
    assert stats['player']['display_handicap'] == 10


def test_player_stats_partial_round_ignores_unplayed_holes(snapshot_factory):
    snapshot = snapshot_factory('stroke_play', PLAYERS[:1], {1: [4, 4, 3] + [None] * 15})

    [stats], _ = build_player_stats(snapshot)

    assert stats['holes_played'] == 3
    assert stats['gross_total'] == 11
    # to-par counts only the par of holes actually played
    assert stats['to_par'] == 0
    hole4 = stats['hole_scores'][3]
    assert hole4['gross'] is None and hole4['net'] is None
    assert hole4['strokes'] == 1


def test_zero_strokes_counts_as_unplayed(holes):
    snapshot = RoundSnapshot(
        config=RoundConfig.from_dict({'game_type': 'stroke_play'}),
        players=[Player(1, 'Alice')],
        holes=holes,
        scores=[Score(1, 1, 0), Score(1, 2, 5)],
    )

    [stats], _ = build_player_stats(snapshot)

    assert stats['holes_played'] == 1
    assert stats['gross_total'] == 5


def test_net_mode_plays_off_lowest(snapshot_factory):
    snapshot = snapshot_factory('stroke_play', PLAYERS, {1: [4] * 18, 2: [4] * 18, 3: [4] * 18},
                                handicap_mode='net')

    stats, lowest = build_player_stats(snapshot)

    assert lowest == 0
    assert [s['player']['display_handicap'] for s in stats] == [10, 0, 5]
    assert [s['net_total'] for s in stats] == [62, 72, 67]


def test_stroke_play_ranks_on_gross(snapshot_factory):
    gross = {1: [5] * 18, 2: [4] * 18, 3: [6] * 18}
    result = calculate_leaderboard(snapshot_factory('stroke_play', PLAYERS, gross))

    assert [e['player']['name'] for e in result['leaderboard']] == ['Bob', 'Alice', 'Carol']
    assert result['total_par'] == 72
    assert result['front9_par'] + result['back9_par'] == 72
    assert result['game_type'] == 'stroke_play'


def test_leaderboard_is_idempotent_and_leaves_snapshot_alone(snapshot_factory):
    snapshot = snapshot_factory('skins', PLAYERS, {1: [5] * 18, 2: [4] * 18, 3: [6] * 18}, skins_amount=2)
    before = copy.deepcopy(snapshot)

    first = calculate_leaderboard(snapshot)
    second = calculate_leaderboard(snapshot)

    assert first == second
    assert snapshot == before


def test_skins_round_reports_skins_and_carryover(snapshot_factory):
    gross = {1: [4, 5] + [None] * 16, 2: [4, 4] + [None] * 16}
    snapshot = snapshot_factory('skins', [(1, 'Alice', 0, None), (2, 'Bob', 0, None)], gross, skins_amount=3)

    result = calculate_leaderboard(snapshot)

    assert result['skins'][0]['value'] == 6
    assert result['carryover'] == 0
    assert result['leaderboard'][0]['player']['name'] == 'Bob'


def test_team_game_ranks_teams(snapshot_factory):
    players = [(1, 'Alice', 0, 1), (2, 'Bob', 0, 1), (3, 'Carol', 0, 2), (4, 'Dan', 0, 2)]
    gross = {1: [5] * 18, 2: [4] * 18, 3: [5] * 18, 4: [5] * 18}

    result = calculate_leaderboard(snapshot_factory('best_ball', players, gross))

    assert [t['team'] for t in result['leaderboard']] == [1, 2]
    assert len(result['players']) == 4


def test_high_low_round_attaches_standings_for_two_teams(snapshot_factory):
    players = [(1, 'Alice', 0, 1), (2, 'Bob', 0, 1), (3, 'Carol', 0, 2), (4, 'Dan', 0, 2)]
    gross = {1: [4] * 18, 2: [5] * 18, 3: [4] * 18, 4: [6] * 18}

    result = calculate_leaderboard(snapshot_factory('high_low', players, gross))

    assert result['high_low']['overall']['team1_points'] == 18
    assert result['high_low']['overall']['team2_points'] == 0


def test_high_low_round_without_two_teams_skips_standings(snapshot_factory):
    result = calculate_leaderboard(snapshot_factory('high_low', PLAYERS, {1: [4] * 18}))

    assert 'high_low' not in result


def test_high_low_standings_with_explicit_rosters(snapshot_factory):
    gross = {1: [4] * 18, 2: [5] * 18, 3: [4] * 18}
    snapshot = snapshot_factory('high_low', PLAYERS, gross)

    result = calculate_high_low_standings(snapshot, team1_ids=[2], team2_ids=[1, 3])

    assert result['team1']['player_ids'] == [2]
    assert result['overall']['team2_points'] > 0

    with pytest.raises(InsufficientDataError):
        calculate_high_low_standings(snapshot)


def test_greenies_count_only_on_greenie_holes(holes):
    snapshot = RoundSnapshot(
        config=RoundConfig.from_dict({
            'game_type': 'stroke_play', 'greenie_holes': '3,7', 'greenie_amount': 2,
        }),
        players=[Player(1, 'Alice'), Player(2, 'Bob')],
        holes=holes,
        scores=[
            Score(1, 3, 3, greenie=True, greenie_distance=8.5),
            Score(1, 4, 5, greenie=True),
            Score(2, 3, 4),
        ],
    )

    result = calculate_leaderboard(snapshot)

    alice = result['players'][0]
    assert alice['greenies_won'] == 1
    assert alice['hole_scores'][2]['greenie_distance'] == 8.5
    assert result['greenie_holes'] == [3, 7]
    assert result['settlements'] == [{
        'from': 'Bob', 'from_id': 2, 'to': 'Alice', 'to_id': 1, 'amount': 2.0, 'reason': 'Greenies (1)',
    }]


def test_missing_game_type_is_config_error():
    with pytest.raises(ConfigError) as exc_info:
        RoundSnapshot.from_dict({'config': {'slope_rating': 120}, 'players': [], 'holes': []})

    assert exc_info.value.code.value == 'config_missing'


def test_players_yet_to_start_rank_last_and_sit_out_main_bet(snapshot_factory):
    gross = {1: [4, 4, 3] + [None] * 15, 2: [None] * 18}
    snapshot = snapshot_factory('stroke_play', PLAYERS[:2], gross, bet_amount=10)

    result = calculate_leaderboard(snapshot)

    assert [e['player']['name'] for e in result['leaderboard']] == ['Alice', 'Bob']
    assert result['settlements'] == []
