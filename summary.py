"""
Results summary
Plain-text round summary for sharing in a group chat or email body
"""

import config


def format_score_to_par(score_to_par):
    if score_to_par == 0:
        return 'E'
    return f"{score_to_par:+d}"


def get_score_label(score, par):
    """Name for a hole score relative to par (Birdie, Bogey, +3, ...)"""
    diff = score - par
    if diff <= -3:
        return 'Albatross'
    if diff == -2:
        return 'Eagle'
    if diff == -1:
        return 'Birdie'
    if diff == 0:
        return 'Par'
    if diff == 1:
        return 'Bogey'
    if diff == 2:
        return 'Double'
    return f"+{diff}"


def _place(i):
    return "[1st]" if i == 1 else "[2nd]" if i == 2 else "[3rd]" if i == 3 else f"{i}."


def _money(amount):
    return f"${amount:,.2f}"


def generate_round_summary(result, round_name=''):
    """
    Generate a formatted summary message from a calculate_leaderboard result.
    """
    game = config.GAME_TYPE_INFO[result['game_type']]['name']
    message = f"{round_name.upper()}\n" if round_name else ""
    message += f"{game} | Par {result['total_par']} | Handicaps: {result['handicap_mode']}\n\n"

    message += "RESULTS:\n"
    for i, entry in enumerate(result['leaderboard'], start=1):
        if 'team' in entry and 'player' not in entry:
            message += f"{_place(i)} {entry['name']} - {entry['gross_total']} gross, {entry['net_total']} net"
            message += f" ({entry['holes_played']} holes)\n"
            continue

        player = entry['player']
        message += f"{_place(i)} {player['name']} - {entry['gross_total']} gross"
        message += f" ({format_score_to_par(entry['to_par'])}), {entry['net_total']} net"
        message += f" (HC {player['display_handicap']}, thru {entry['holes_played']})"
        if 'match_status' in entry:
            message += f" | {entry['match_status']}"
        if 'skins_total' in entry and entry['skins_won']:
            message += f" | {len(entry['skins_won'])} skins {_money(entry['skins_total'])}"
        message += "\n"

    if result.get('carryover'):
        message += f"\nSkins carried over: {result['carryover']}\n"

    high_low = result.get('high_low')
    if high_low:
        message += "\nHIGH-LOW:\n"
        for name, seg in list(high_low['segments'].items()) + [('overall', high_low['overall'])]:
            message += f"  {name.title()}: {seg['team1_points']}-{seg['team2_points']}"
            if seg['winner'] != 'tie':
                message += f" ({high_low[seg['winner']]['name']} by {seg['margin']})"
            message += "\n"

    birdies = [
        (ps['player']['name'], ps['stats']['birdies'])
        for ps in result.get('players', [])
        if ps['stats']['birdies']
    ]
    if birdies:
        message += "\nBirdies or better: "
        message += ", ".join(f"{name} ({count})" for name, count in birdies)
        message += "\n"

    if result['settlements']:
        message += "\nSETTLE UP:\n"
        for s in result['settlements']:
            message += f"  {s['from']} pays {s['to']} {_money(s['amount'])} ({s['reason']})\n"

    return message


def generate_multi_day_summary(standings, event_name=''):
    message = f"{event_name.upper()}\n" if event_name else ""
    message += "OVERALL STANDINGS:\n"
    for entry in standings:
        message += f"{_place(entry['position'])} {entry['player_name']} - {entry['total_points']} pts"
        message += f" ({entry['wins']} wins, {entry['total_strokes']} strokes)"
        if entry.get('payout'):
            message += f" | {_money(entry['payout'])}"
        message += "\n"
    return message


def generate_side_bet_summary(bet_statuses, player_names):
    def party_name(ids):
        return ' & '.join(str(player_names.get(pid, pid)) for pid in ids)

    message = "SIDE BETS:\n"
    for bet in bet_statuses:
        message += f"{party_name(bet['party1'])} vs {party_name(bet['party2'])}\n"
        for segment, status in bet['status'].items():
            if 'display_status' in status:
                leader = status['leader']
                who = party_name(bet[leader]) if leader != 'tied' else ''
                message += f"  {segment.title()}: {status['display_status']} {who}".rstrip() + "\n"
            else:
                message += f"  Skins: {sum(status['units'].values())} won, {status['carryover']} carried\n"
        for press in bet['presses']:
            status = press['status']
            if 'display_status' in status:
                message += f"  Press ({press['segment']} from {press['start_hole']}): {status['display_status']}\n"
    return message
