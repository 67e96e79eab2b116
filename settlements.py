"""
Bet settlements
Works out who pays whom for the main bet and greenies, and applies payout structures to a pot
"""

import logging

import config

logger = logging.getLogger(__name__)


def _money(amount):
    return round(amount + 0.0, 2)


def _party(entry):
    return entry['player']['id'], entry['player']['name']


def main_bet_obligations(player_stats, bet_amount):
    """
    Stroke play main bet on net score.

    Everyone strictly behind the lowest net pays bet_amount; when several
    players share the lowest net the payment is split between them, and the
    tied leaders owe each other nothing. Players who have not played a hole
    are left out of the bet.
    """
    player_stats = [ps for ps in player_stats if ps['holes_played'] > 0]
    if not bet_amount or len(player_stats) < 2:
        return []

    best = min(ps['net_total'] for ps in player_stats)
    leaders = [ps for ps in player_stats if ps['net_total'] == best]
    losers = [ps for ps in player_stats if ps['net_total'] != best]
    share = bet_amount / len(leaders)

    obligations = []
    for loser in losers:
        for leader in leaders:
            obligations.append({
                'from': _party(loser),
                'to': _party(leader),
                'amount': share,
                'reason': 'Main bet',
            })
    return obligations


def greenie_obligations(player_stats, greenie_amount):
    """Every other player pays each greenie winner greenie_amount per greenie won."""
    if not greenie_amount:
        return []

    obligations = []
    for winner in player_stats:
        won = winner['greenies_won']
        if won <= 0:
            continue
        for other in player_stats:
            if other['player']['id'] == winner['player']['id']:
                continue
            obligations.append({
                'from': _party(other),
                'to': _party(winner),
                'amount': greenie_amount * won,
                'reason': f"Greenies ({won})",
            })
    return obligations


def consolidate_settlements(obligations):
    """
    Net the obligations between each pair of players into one payment.

    Opposing debts cancel; only the remainder is reported, in the direction
    it is owed. Pairs that cancel out entirely are dropped.
    """
    balances = {}
    reasons = {}
    order = []

    for ob in obligations:
        (from_id, from_name), (to_id, to_name) = ob['from'], ob['to']
        key = frozenset((from_id, to_id))
        if key not in balances:
            # positive balance means the first-seen debtor owes the first-seen creditor
            balances[key] = [(from_id, from_name), (to_id, to_name), 0.0]
            reasons[key] = []
            order.append(key)
        debtor, _, _ = balances[key]
        sign = 1 if debtor[0] == from_id else -1
        balances[key][2] += sign * ob['amount']
        if ob['reason'] not in reasons[key]:
            reasons[key].append(ob['reason'])

    settlements = []
    for key in order:
        debtor, creditor, amount = balances[key]
        amount = _money(amount)
        if amount == 0:
            continue
        if amount < 0:
            debtor, creditor, amount = creditor, debtor, -amount
        settlements.append({
            'from': debtor[1],
            'from_id': debtor[0],
            'to': creditor[1],
            'to_id': creditor[0],
            'amount': amount,
            'reason': ', '.join(reasons[key]),
        })
    return settlements


def calculate_bet_settlements(player_stats, round_config):
    """
    Calculate bet settlements for a round.

    Args:
        player_stats: Individual player stat dicts (net totals and greenies won)
        round_config: RoundConfig with bet_amount, greenie_amount and game_type

    Returns:
        List of consolidated payments
    """
    if not round_config.bet_amount and not round_config.greenie_amount:
        return []

    obligations = []
    if round_config.game_type == config.STROKE_PLAY:
        obligations.extend(main_bet_obligations(player_stats, round_config.bet_amount))
    obligations.extend(greenie_obligations(player_stats, round_config.greenie_amount))

    settlements = consolidate_settlements(obligations)
    logger.debug("%s obligations consolidated into %s settlements", len(obligations), len(settlements))
    return settlements


def payout_for_place(place, pot, structure):
    """A payout rule is a percent of the pot or a fixed amount; places without a rule get nothing."""
    for rule in structure or []:
        if int(rule.get('place', 0)) != place:
            continue
        if rule.get('type', 'percent') == 'percent':
            return _money(pot * float(rule.get('value', 0)) / 100)
        return _money(float(rule.get('value', 0)))
    return 0.0


def apply_payout_structure(ranked, pot, structure=None):
    """Attach 'payout' to each ranked entry by its finishing place (1-based order)."""
    structure = config.DEFAULT_CALCUTTA_PAYOUTS if structure is None else structure
    return [
        {**entry, 'place': place, 'payout': payout_for_place(place, pot, structure)}
        for place, entry in enumerate(ranked, start=1)
    ]
