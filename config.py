"""
Scoring configuration
Constants, game type tables and environment defaults shared by the scoring modules
"""

import os

# Slope rating of a course of standard difficulty
NEUTRAL_SLOPE = 113

DEFAULT_SLOPE_RATING = int(os.environ.get('GOLF_DEFAULT_SLOPE', NEUTRAL_SLOPE))
DEFAULT_HANDICAP_MODE = os.environ.get('GOLF_DEFAULT_HANDICAP_MODE', 'gross')
DEFAULT_NASSAU_FORMAT = '6-6-6'
DEFAULT_PAR = 4

# Holes without a rating are allocated strokes last
MISSING_RATING_PRIORITY = 99

# A player never receives more than this many strokes on one hole
MAX_STROKES_PER_HOLE = 5

LOG_LEVEL = os.environ.get('GOLF_SCORING_LOG_LEVEL', 'WARNING')
EXCEL_OUTPUT_PATH = os.environ.get('GOLF_EXCEL_OUTPUT', 'leaderboard.xlsx')

HANDICAP_MODES = ('none', 'gross', 'net')

# Game types
STROKE_PLAY = 'stroke_play'
MATCH_PLAY = 'match_play'
SCRAMBLE = 'scramble'
BEST_BALL = 'best_ball'
HIGH_LOW = 'high_low'
SKINS = 'skins'
NASSAU = 'nassau'

GAME_TYPE_INFO = {
    STROKE_PLAY: {
        'name': 'Stroke Play',
        'description': 'Total strokes. Low score wins.',
        'is_team_game': False,
    },
    MATCH_PLAY: {
        'name': 'Match Play',
        'description': 'Win holes, not strokes. Most holes won wins.',
        'is_team_game': False,
    },
    SCRAMBLE: {
        'name': 'Scramble',
        'description': 'Team picks best shot, all play from there.',
        'is_team_game': True,
    },
    BEST_BALL: {
        'name': 'Best Ball',
        'description': 'Each plays own ball, best score counts.',
        'is_team_game': True,
    },
    HIGH_LOW: {
        'name': 'High-Low',
        'description': 'Two teams. Low point + high point per hole. Nassau betting.',
        'is_team_game': True,
    },
    SKINS: {
        'name': 'Skins',
        'description': 'Win hole outright, win the skin.',
        'is_team_game': False,
    },
    NASSAU: {
        'name': 'Nassau',
        'description': 'Separate bets on each segment plus the overall match.',
        'is_team_game': False,
    },
}

GAME_TYPES = tuple(GAME_TYPE_INFO)
TEAM_GAME_TYPES = tuple(k for k, v in GAME_TYPE_INFO.items() if v['is_team_game'])

# Segment name -> (first hole, last hole)
NASSAU_SEGMENTS = {
    '6-6-6': {'front': (1, 6), 'middle': (7, 12), 'back': (13, 18)},
    '9-9': {'front': (1, 9), 'back': (10, 18)},
}
OVERALL_SEGMENT = (1, 18)

# Round statuses that have not been played yet
UNPLAYED_ROUND_STATUSES = ('setup', 'scheduled')

DEFAULT_CALCUTTA_PAYOUTS = [
    {'place': 1, 'type': 'percent', 'value': 50},
    {'place': 2, 'type': 'percent', 'value': 30},
    {'place': 3, 'type': 'percent', 'value': 20},
]
