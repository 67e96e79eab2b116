from calcutta import calculate_calcutta_results, calculate_team_standings

FOURSOMES = [
    (1, 'Alice', 0, 1),
    (2, 'Bob', 0, 1),
    (3, 'Carol', 0, 2),
    (4, 'Dan', 0, 2),
    (5, 'Eve', 0, 3),
    (6, 'Frank', 0, 3),
    (7, 'Solo', 0, None),
]

GROSS = {
    1: [4, 5, 3],
    2: [5, 4, 4],
    3: [5, 5, 3],
    4: [4, 6, 3],
    5: [6, 5, None],
    6: [5, 5, None],
    7: [3, 3, 3],
}


def test_best_ball_standings(snapshot_factory):
    standings = calculate_team_standings(snapshot_factory('best_ball', FOURSOMES, GROSS))

    assert [(t['team_number'], t['score'], t['holes_played']) for t in standings] == [
        (3, 10, 2),
        (1, 11, 3),
        (2, 12, 3),
    ]
    assert standings[1]['team_name'] == 'Alice & Bob'
    assert standings[1]['player_ids'] == [1, 2]


def test_high_low_standings_add_low_and_high(snapshot_factory):
    standings = calculate_team_standings(snapshot_factory('high_low', FOURSOMES, GROSS))

    by_team = {t['team_number']: t['score'] for t in standings}
    assert by_team == {1: 25, 2: 26, 3: 21}


def test_equal_scores_rank_more_holes_first(snapshot_factory):
    gross = {1: [4, 4], 2: [None, None], 3: [8], 4: [None]}
    standings = calculate_team_standings(snapshot_factory('stroke_play', FOURSOMES[:4], gross))

    assert [t['team_number'] for t in standings] == [1, 2]


def test_calcutta_payouts(snapshot_factory):
    snapshot = snapshot_factory('best_ball', FOURSOMES, GROSS)
    purchases = [
        {'team_number': 1, 'buyer_name': 'Gina', 'amount': 100},
        {'team_number': 3, 'buyer_name': 'Hank', 'amount': 200},
    ]

    result = calculate_calcutta_results(snapshot, purchases)

    assert result['total_pot'] == 300
    first, second, third = result['payouts']
    assert (first['team_number'], first['buyer_name'], first['payout'], first['profit']) == (3, 'Hank', 150.0, -50.0)
    assert (second['buyer_name'], second['payout'], second['profit']) == ('Gina', 90.0, -10.0)
    assert (third['buyer_name'], third['purchase_amount'], third['payout']) == ('Unsold', 0.0, 60.0)
    assert sum(p['payout'] for p in result['payouts']) == result['total_pot']


def test_calcutta_custom_structure(snapshot_factory):
    snapshot = snapshot_factory('best_ball', FOURSOMES, GROSS)
    structure = [{'place': 1, 'type': 'percent', 'value': 100}]

    result = calculate_calcutta_results(snapshot, [{'team_number': 2, 'buyer_name': 'Ivy', 'amount': 50}], structure)

    assert [p['payout'] for p in result['payouts']] == [50.0, 0.0, 0.0]
    assert result['payout_structure'] == structure
