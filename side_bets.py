"""
Side bet match engine
Live match status for party-vs-party side bets: Nassau segments, presses and skins.

Side bets compare net scores with the simple stroke formula (no strokes on
par 3s) rather than the leaderboard's fair allocation, so a player's net on a
hole can differ between the two views.
"""

import logging

import config
from errors import ValidationError
from handicap import HandicapCalculator, net_score
from models import party_member_ids

logger = logging.getLogger(__name__)

# Two down is the customary trigger for an automatic press
AUTO_PRESS_DEFICIT = 2


class BetTree:
    """Side bets indexed by id, with each bet's presses listed under it."""

    def __init__(self, bets):
        self.nodes = {}
        self.children = {}
        self.roots = []

        for bet in bets:
            if bet.id in self.nodes:
                raise ValidationError("Duplicate side bet id", {'bet_id': bet.id})
            self.nodes[bet.id] = bet
            self.children[bet.id] = []

        for bet in bets:
            if bet.parent_bet_id is None:
                self.roots.append(bet.id)
            elif bet.parent_bet_id not in self.nodes:
                raise ValidationError("Press references an unknown bet", {'bet_id': bet.id, 'parent_bet_id': bet.parent_bet_id})
            else:
                self.children[bet.parent_bet_id].append(bet.id)

        for bet_id in self.nodes:
            self.root_of(bet_id)

        for bet_id in self.children:
            self.children[bet_id].sort(key=lambda cid: (self.nodes[cid].start_hole, str(cid)))

    def root_of(self, bet_id):
        seen = set()
        bet = self.nodes[bet_id]
        while bet.parent_bet_id is not None:
            if bet.id in seen:
                raise ValidationError("Press chain loops back on itself", {'bet_id': bet_id})
            seen.add(bet.id)
            bet = self.nodes[bet.parent_bet_id]
        return bet

    def descendants(self, bet_id):
        found = []
        stack = list(self.children.get(bet_id, []))
        while stack:
            child = stack.pop()
            found.append(child)
            stack.extend(self.children[child])
        return found


def build_bet_tree(bets):
    return BetTree(bets)


def delete_bet(bets, bet_id):
    """Remove a bet together with every press hanging off it, however deep."""
    tree = build_bet_tree(bets)
    if bet_id not in tree.nodes:
        raise ValidationError("Unknown side bet", {'bet_id': bet_id})
    removed = {bet_id, *tree.descendants(bet_id)}
    return [bet for bet in bets if bet.id not in removed]


def segment_bounds(nassau_format):
    bounds = dict(config.NASSAU_SEGMENTS[nassau_format])
    bounds['overall'] = config.OVERALL_SEGMENT
    return bounds


def calculate_net_lookup(snapshot, calculator=None):
    """Net score per (player id, hole number) for every played hole, using the simple stroke formula."""
    calc = calculator or HandicapCalculator()
    cfg = snapshot.config
    _, display, _ = calc.calculate_round_handicaps(snapshot.players, cfg.slope_rating, cfg.handicap_mode)
    holes = {h.number: h for h in snapshot.holes}

    nets = {}
    for score in snapshot.scores:
        if not score.is_played:
            continue
        strokes = calc.simple_strokes_on_hole(display[score.player_id], holes[score.hole_number])
        nets[(score.player_id, score.hole_number)] = net_score(score.strokes, strokes)
    return nets


def party_score(nets, high_low):
    """Best ball takes the low net; high-low adds the low and the high."""
    if high_low:
        return min(nets) + max(nets)
    return min(nets)


def format_segment_status(diff, holes_remaining, closed_out):
    if closed_out:
        return f"{abs(diff)}&{holes_remaining}"
    if diff == 0:
        return "AS"
    return f"{abs(diff)} UP"


def calculate_segment(party1_ids, party2_ids, nets, start_hole, end_hole, high_low=False):
    """
    Match status over holes start_hole..end_hole.

    A hole counts only once every member of both parties has a score on it.
    """
    party1_wins = 0
    party2_wins = 0
    ties = 0
    holes_played = 0
    next_hole = None

    for hole in range(start_hole, end_hole + 1):
        p1 = [nets.get((pid, hole)) for pid in party1_ids]
        p2 = [nets.get((pid, hole)) for pid in party2_ids]
        if None in p1 or None in p2:
            if next_hole is None:
                next_hole = hole
            continue

        holes_played += 1
        s1 = party_score(p1, high_low)
        s2 = party_score(p2, high_low)
        if s1 < s2:
            party1_wins += 1
        elif s2 < s1:
            party2_wins += 1
        else:
            ties += 1

    diff = party1_wins - party2_wins
    segment_length = end_hole - start_hole + 1
    holes_remaining = segment_length - holes_played
    closed_out = abs(diff) > holes_remaining and holes_remaining > 0

    return {
        'start_hole': start_hole,
        'end_hole': end_hole,
        'party1_wins': party1_wins,
        'party2_wins': party2_wins,
        'ties': ties,
        'diff': diff,
        'holes_played': holes_played,
        'holes_remaining': holes_remaining,
        'next_hole': next_hole,
        'closed_out': closed_out,
        'dormie': diff != 0 and abs(diff) == holes_remaining,
        'complete': closed_out or holes_remaining == 0,
        'leader': 'party1' if diff > 0 else 'party2' if diff < 0 else 'tied',
        'display_status': format_segment_status(diff, holes_remaining, closed_out),
    }


def calculate_skins_segment(member_ids, nets, start_hole, end_hole, unit_value=0.0):
    """
    Skins among every member of both parties.

    The sole low net wins one unit plus the carryover; a tie adds to the
    carryover. Holes someone has not scored are skipped and leave the
    carryover alone.
    """
    carryover = 0
    holes_played = 0
    skins = []
    units = {pid: 0 for pid in member_ids}

    for hole in range(start_hole, end_hole + 1):
        hole_nets = {pid: nets.get((pid, hole)) for pid in member_ids}
        if None in hole_nets.values():
            continue

        holes_played += 1
        best = min(hole_nets.values())
        winners = [pid for pid, n in hole_nets.items() if n == best]
        if len(winners) == 1:
            won = 1 + carryover
            units[winners[0]] += won
            skins.append({'hole': hole, 'winner_id': winners[0], 'units': won, 'value': won * unit_value})
            carryover = 0
        else:
            carryover += 1

    return {
        'start_hole': start_hole,
        'end_hole': end_hole,
        'skins': skins,
        'units': units,
        'values': {pid: n * unit_value for pid, n in units.items()},
        'carryover': carryover,
        'holes_played': holes_played,
        'holes_remaining': (end_hole - start_hole + 1) - holes_played,
    }


def _validate_parties(bet, player_ids):
    party1 = party_member_ids(bet.party1)
    party2 = party_member_ids(bet.party2)
    if not party1 or not party2:
        raise ValidationError("Side bet needs players on both sides", {'bet_id': bet.id})
    overlap = set(party1) & set(party2)
    if overlap:
        raise ValidationError("A player cannot be on both sides of a bet", {'bet_id': bet.id, 'players': sorted(overlap, key=str)})
    unknown = [pid for pid in party1 + party2 if pid not in player_ids]
    if unknown:
        raise ValidationError("Side bet references players not in the round", {'bet_id': bet.id, 'players': unknown})
    return party1, party2


def _is_high_low(bet):
    return bet.use_high_low or bet.game_type == config.HIGH_LOW


def _press_status(tree, press_id, root, party1, party2, nets, bounds):
    press = tree.nodes[press_id]
    segment = press.segment or 'overall'
    if segment not in bounds:
        raise ValidationError("Press segment is not part of this round's format", {'bet_id': press.id, 'segment': segment})
    seg_start, seg_end = bounds[segment]
    start = max(press.start_hole, seg_start)
    if start > seg_end:
        raise ValidationError("Press starts after its segment ends", {'bet_id': press.id, 'start_hole': press.start_hole})

    amount = press.amount_for(segment) or press.overall_amount
    if root.game_type == config.SKINS:
        status = calculate_skins_segment(party1 + party2, nets, start, seg_end, amount)
    else:
        status = calculate_segment(party1, party2, nets, start, seg_end, _is_high_low(root))
    status['amount'] = amount

    return {
        'id': press.id,
        'parent_bet_id': press.parent_bet_id,
        'segment': segment,
        'start_hole': start,
        'amount': amount,
        'status': status,
        'presses': [
            _press_status(tree, child, root, party1, party2, nets, bounds)
            for child in tree.children[press.id]
        ],
    }


def calculate_bet_status(bet, party1, party2, nets, bounds):
    """Segment statuses for one top-level bet (presses excluded)."""
    if bet.game_type == config.SKINS:
        first, last = bounds['overall']
        status = calculate_skins_segment(party1 + party2, nets, max(bet.start_hole, first), last, bet.overall_amount)
        status['amount'] = bet.overall_amount
        return {'skins': status}

    high_low = _is_high_low(bet)
    status = {}
    for segment, (seg_start, seg_end) in bounds.items():
        start = max(bet.start_hole, seg_start)
        if start > seg_end:
            continue
        status[segment] = calculate_segment(party1, party2, nets, start, seg_end, high_low)
        status[segment]['amount'] = bet.amount_for(segment)
    return status


def calculate_side_bet_status(snapshot, bets, calculator=None):
    """
    Status tree for every side bet of a round: bet -> segment statuses -> presses.

    Presses inherit parties, game type and the high-low flag from the bet at
    the top of their chain and are reported under their parent, never mixed
    into the parent's own segments.
    """
    tree = build_bet_tree(bets)
    nets = calculate_net_lookup(snapshot, calculator)
    bounds = segment_bounds(snapshot.config.nassau_format)
    player_ids = snapshot.player_ids

    results = []
    for root_id in tree.roots:
        bet = tree.nodes[root_id]
        party1, party2 = _validate_parties(bet, player_ids)
        results.append({
            'id': bet.id,
            'name': bet.name,
            'game_type': bet.game_type,
            'use_high_low': _is_high_low(bet),
            'party1': party1,
            'party2': party2,
            'status': calculate_bet_status(bet, party1, party2, nets, bounds),
            'presses': [
                _press_status(tree, child, bet, party1, party2, nets, bounds)
                for child in tree.children[bet.id]
            ],
        })

    logger.debug("Calculated status for %s side bets (%s presses)", len(tree.roots), len(tree.nodes) - len(tree.roots))
    return results


def suggest_presses(bet_statuses, deficit=AUTO_PRESS_DEFICIT):
    """
    Segments where one side has fallen `deficit` holes down with holes still
    to play, as press suggestions starting on the first hole not yet played
    in that segment.
    """
    suggestions = []
    for bet in bet_statuses:
        for segment, status in bet['status'].items():
            if 'diff' not in status or status['complete']:
                continue
            if abs(status['diff']) < deficit:
                continue
            suggestions.append({
                'bet_id': bet['id'],
                'segment': segment,
                'pressing_party': 'party2' if status['diff'] > 0 else 'party1',
                'start_hole': status['next_hole'],
            })
    return suggestions
