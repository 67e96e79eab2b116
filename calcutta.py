"""
Calcutta pool
Teams are auctioned before the round; the pot pays out to the buyers by finishing place.
"""

import config
from settlements import apply_payout_structure


def calculate_team_standings(snapshot):
    """
    Team standings on gross score by game type.

    Scramble and best ball count the low score on each hole, high-low counts
    low plus high, anything else sums every score. Equal scores rank the team
    with more holes played first. Players without a team are left out.
    """
    scores = snapshot.score_lookup()
    teams = {}
    for player in snapshot.players:
        if player.team:
            teams.setdefault(player.team, []).append(player)

    game_type = snapshot.config.game_type
    standings = []
    for team_number, members in teams.items():
        total_score = 0
        holes_played = 0

        for hole in snapshot.holes:
            hole_scores = [
                scores[(p.id, hole.number)].strokes
                for p in members
                if (p.id, hole.number) in scores and scores[(p.id, hole.number)].is_played
            ]
            if not hole_scores:
                continue
            holes_played += 1

            if game_type in (config.SCRAMBLE, config.BEST_BALL):
                total_score += min(hole_scores)
            elif game_type == config.HIGH_LOW:
                total_score += min(hole_scores) + max(hole_scores)
            else:
                total_score += sum(hole_scores)

        standings.append({
            'team_number': team_number,
            'team_name': ' & '.join(p.name for p in members),
            'player_ids': [p.id for p in members],
            'score': total_score,
            'holes_played': holes_played,
        })

    standings.sort(key=lambda t: (t['score'], -t['holes_played']))
    return standings


def calculate_calcutta_results(snapshot, purchases, payout_structure=None):
    """
    Args:
        snapshot: RoundSnapshot for the round
        purchases: List of {'team_number', 'buyer_name', 'amount'}
        payout_structure: Payout rules; defaults to 50/30/20 percent of the pot

    Returns:
        Dict with the total pot, team standings and per-team payouts
    """
    structure = config.DEFAULT_CALCUTTA_PAYOUTS if payout_structure is None else payout_structure
    total_pot = round(sum(float(p.get('amount') or 0) for p in purchases), 2)
    by_team = {p['team_number']: p for p in purchases}
    standings = calculate_team_standings(snapshot)

    payouts = []
    for entry in apply_payout_structure(standings, total_pot, structure):
        purchase = by_team.get(entry['team_number'])
        purchase_amount = float(purchase.get('amount') or 0) if purchase else 0.0
        payouts.append({
            'place': entry['place'],
            'team_number': entry['team_number'],
            'team_name': entry['team_name'],
            'score': entry['score'],
            'holes_played': entry['holes_played'],
            'buyer_name': purchase['buyer_name'] if purchase else 'Unsold',
            'purchase_amount': purchase_amount,
            'payout': entry['payout'],
            'profit': round(entry['payout'] - purchase_amount, 2),
        })

    return {
        'total_pot': total_pot,
        'standings': standings,
        'payouts': payouts,
        'payout_structure': structure,
    }
