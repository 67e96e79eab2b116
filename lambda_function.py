"""
AWS Lambda Function for Golf Competition Scoring
Scores a round snapshot sent in the request and returns leaderboard, side bet,
multi-day or Calcutta results. Nothing is stored between invocations.
"""

import json
import logging
import traceback

import config
from calcutta import calculate_calcutta_results
from errors import ScoringError, ValidationError
from leaderboard import calculate_high_low_standings, calculate_leaderboard
from models import Player, RoundSnapshot, parse_side_bets
from multiday import calculate_multi_day_standings
from side_bets import calculate_side_bet_status, suggest_presses
from summary import generate_multi_day_summary, generate_round_summary

logging.getLogger().setLevel(config.LOG_LEVEL)

HEADERS = {
    'Content-Type': 'application/json',
    'Access-Control-Allow-Origin': '*',
}


def _response(status_code, payload):
    return {
        'statusCode': status_code,
        'headers': HEADERS,
        'body': json.dumps(payload, default=str),
    }


def parse_body(event):
    """Function URLs send the body as a string; direct invokes pass the payload itself"""
    if not isinstance(event, dict):
        raise ValidationError("Event must be a JSON object")

    if 'body' in event and isinstance(event['body'], str):
        try:
            body = json.loads(event['body'])
        except json.JSONDecodeError as e:
            raise ValidationError("Request body is not valid JSON", {'reason': str(e)})
        # iOS Shortcut format: {"JSON": "{\"action\": ...}"}
        if isinstance(body, dict) and isinstance(body.get('JSON'), str):
            try:
                body = json.loads(body['JSON'])
            except json.JSONDecodeError as e:
                raise ValidationError("Shortcut JSON payload is not valid JSON", {'reason': str(e)})
        return body
    if 'body' in event and isinstance(event['body'], dict):
        return event['body']
    return event


def handle_leaderboard(body):
    return calculate_leaderboard(RoundSnapshot.from_dict(body))


def handle_high_low(body):
    snapshot = RoundSnapshot.from_dict(body)
    return calculate_high_low_standings(snapshot, body.get('team1'), body.get('team2'))


def handle_side_bets(body):
    snapshot = RoundSnapshot.from_dict(body)
    statuses = calculate_side_bet_status(snapshot, parse_side_bets(body.get('side_bets')))
    return {'side_bets': statuses, 'press_suggestions': suggest_presses(statuses)}


def _pot(body):
    try:
        return float(body.get('pot') or 0)
    except (TypeError, ValueError):
        raise ValidationError("Pot must be a number", {'field': 'pot', 'value': body.get('pot')})


def handle_multi_day(body):
    masters = [Player.from_dict(p) for p in body.get('players', [])]
    rounds = [RoundSnapshot.from_dict(r) for r in body.get('rounds', [])]
    standings = calculate_multi_day_standings(
        masters,
        rounds,
        body.get('point_system', []),
        payout_structure=body.get('payout_structure'),
        pot=_pot(body),
    )
    return {
        'standings': standings,
        'summary': generate_multi_day_summary(standings, body.get('name') or ''),
    }


def handle_calcutta(body):
    snapshot = RoundSnapshot.from_dict(body)
    return calculate_calcutta_results(snapshot, body.get('purchases', []), body.get('payout_structure'))


def handle_summary(body):
    snapshot = RoundSnapshot.from_dict(body)
    result = calculate_leaderboard(snapshot)
    return {'summary': generate_round_summary(result, snapshot.config.name)}


ACTIONS = {
    'leaderboard': handle_leaderboard,
    'high_low': handle_high_low,
    'side_bets': handle_side_bets,
    'multi_day': handle_multi_day,
    'calcutta': handle_calcutta,
    'summary': handle_summary,
}


def lambda_handler(event, context):
    """
    Expected event format:
    {
        "action": "leaderboard",
        "config": {...}, "players": [...], "holes": [...], "scores": [...]
    }
    Actions: leaderboard (default), high_low, side_bets, multi_day, calcutta, summary
    """
    print("=== Lambda Invoked ===")

    try:
        body = parse_body(event)
        action = body.get('action') or 'leaderboard'
        print(f"Action: {action}")

        handler = ACTIONS.get(action)
        if handler is None:
            raise ValidationError(f"Unknown action '{action}'", {'allowed': sorted(ACTIONS)})

        return _response(200, handler(body))

    except ScoringError as e:
        print(f"[-] {type(e).__name__}: {e}")
        return _response(400, e.to_dict())

    except Exception as e:
        print(f"ERROR: {str(e)}")
        traceback.print_exc()
        return _response(500, {
            'error': str(e),
            'error_type': type(e).__name__,
        })
