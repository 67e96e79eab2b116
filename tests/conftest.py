import os
import sys

import pytest

# Ensure the project root (containing the scoring modules) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
PROJECT_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from models import Hole, Player, RoundConfig, RoundSnapshot, Score  # noqa: E402

# Par 72 layout with the four par 3s rated 15-18
PARS = [4, 4, 3, 5, 4, 4, 3, 4, 5, 4, 4, 3, 5, 4, 4, 3, 4, 5]
RATINGS = [7, 3, 15, 1, 11, 5, 16, 9, 13, 8, 2, 17, 4, 12, 6, 18, 10, 14]


def build_holes():
    return [
        Hole(number=i + 1, par=par, handicap_rating=rating)
        for i, (par, rating) in enumerate(zip(PARS, RATINGS))
    ]


def make_snapshot(game_type, players, gross_by_player, holes=None, **config_fields):
    """
    players: list of (id, name, handicap_index, team)
    gross_by_player: {player_id: [strokes for hole 1, hole 2, ...]} with None for unplayed
    """
    holes = holes or build_holes()
    scores = []
    for pid, strokes in gross_by_player.items():
        for hole_number, gross in enumerate(strokes, start=1):
            if gross is not None:
                scores.append(Score(player_id=pid, hole_number=hole_number, strokes=gross))

    round_config = RoundConfig.from_dict({'game_type': game_type, **config_fields})
    return RoundSnapshot(
        config=round_config,
        players=[Player(id=pid, name=name, handicap_index=hi, team=team) for pid, name, hi, team in players],
        holes=holes,
        scores=scores,
    )


@pytest.fixture()
def holes():
    return build_holes()


@pytest.fixture()
def snapshot_factory():
    return make_snapshot
