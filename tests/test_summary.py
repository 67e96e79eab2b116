from leaderboard import calculate_leaderboard
from models import SideBet
from side_bets import calculate_side_bet_status
from summary import (
    format_score_to_par,
    generate_multi_day_summary,
    generate_round_summary,
    generate_side_bet_summary,
    get_score_label,
)


def test_format_score_to_par():
    assert format_score_to_par(0) == 'E'
    assert format_score_to_par(3) == '+3'
    assert format_score_to_par(-2) == '-2'


def test_score_labels():
    assert get_score_label(2, 5) == 'Albatross'
    assert get_score_label(3, 5) == 'Eagle'
    assert get_score_label(3, 4) == 'Birdie'
    assert get_score_label(4, 4) == 'Par'
    assert get_score_label(5, 4) == 'Bogey'
    assert get_score_label(6, 4) == 'Double'
    assert get_score_label(7, 4) == '+3'


def test_round_summary_lists_results_and_settlements(snapshot_factory):
    players = [(1, 'Alice', 0, None), (2, 'Bob', 0, None)]
    # a 3 on the first hole plus four birdies on the par 5s
    snapshot = snapshot_factory('stroke_play', players, {1: [3] + [4] * 17, 2: [5] * 18}, bet_amount=10)

    message = generate_round_summary(calculate_leaderboard(snapshot), 'Saturday Game')

    assert message.startswith('SATURDAY GAME\n')
    assert 'Stroke Play | Par 72' in message
    assert '[1st] Alice - 71 gross (-1)' in message
    assert 'Birdies or better: Alice (5)' in message
    assert 'Bob pays Alice $10.00 (Main bet)' in message


def test_team_round_summary(snapshot_factory):
    players = [(1, 'Alice', 0, 1), (2, 'Bob', 0, 2)]
    snapshot = snapshot_factory('scramble', players, {1: [4] * 18, 2: [5] * 18})

    message = generate_round_summary(calculate_leaderboard(snapshot))

    assert '[1st] Alice - 72 gross, 72 net (18 holes)' in message
    assert '[2nd] Bob - 90 gross' in message


def test_multi_day_summary():
    standings = [
        {'position': 1, 'player_name': 'Alice', 'total_points': 16, 'wins': 1, 'total_strokes': 162, 'payout': 40.0},
        {'position': 2, 'player_name': 'Bob', 'total_points': 12, 'wins': 0, 'total_strokes': 170, 'payout': 0.0},
    ]

    message = generate_multi_day_summary(standings, 'Club Championship')

    assert 'CLUB CHAMPIONSHIP' in message
    assert '[1st] Alice - 16 pts (1 wins, 162 strokes) | $40.00' in message
    assert '[2nd] Bob - 12 pts (0 wins, 170 strokes)\n' in message


def test_side_bet_summary(snapshot_factory):
    players = [(1, 'Alice', 0, None), (2, 'Bob', 0, None)]
    snapshot = snapshot_factory('match_play', players, {1: [3, 3, 2, 4], 2: [4, 4, 3, 5]})
    bets = [
        SideBet.from_dict({'id': 'b1', 'party1': 1, 'party2': 2}),
        SideBet.from_dict({'id': 'p1', 'parent_bet_id': 'b1', 'segment': 'front', 'start_hole': 3}),
    ]

    message = generate_side_bet_summary(calculate_side_bet_status(snapshot, bets), {1: 'Alice', 2: 'Bob'})

    assert 'Alice vs Bob' in message
    assert 'Front: 4&2 Alice' in message
    assert 'Middle: AS\n' in message
    assert 'Press (front from 3): 2 UP' in message
