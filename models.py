"""
Snapshot records
Typed views of the tournament config, players, holes, scores and side bets
supplied by the storage layer, parsed from their wire dictionaries.
"""

from dataclasses import dataclass, field, replace
from typing import Any

import config
from errors import ConfigError, ValidationError


def _coerce(cast, value, default, field_name, error):
    if value is None or value == '':
        return default
    try:
        return cast(value)
    except (TypeError, ValueError):
        raise error(f"Field '{field_name}' must be a number", {'field': field_name, 'value': value})


def _to_float(value, default=0.0, field_name='value', error=ValidationError):
    return _coerce(float, value, default, field_name, error)


def _to_int(value, default=None, field_name='value', error=ValidationError):
    return _coerce(int, value, default, field_name, error)


def _require(data, key, record):
    if data.get(key) is None:
        raise ValidationError(f"{record} is missing '{key}'", {record.lower(): data})
    return data[key]


@dataclass(frozen=True)
class Hole:
    number: int
    par: int = config.DEFAULT_PAR
    handicap_rating: int | None = None
    yardages: dict[str, int] = field(default_factory=dict, compare=False, hash=False)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> 'Hole':
        number = _to_int(data.get('hole_number', data.get('number')), field_name='hole_number')
        if number is None:
            raise ValidationError("Hole is missing its number", {'hole': data})

        yardages = dict(data.get('yardages') or {})
        for key, value in data.items():
            if key.startswith('yardage_') and value not in (None, ''):
                yardages[key[len('yardage_'):]] = _to_int(value, field_name=key)

        return cls(
            number=number,
            par=_to_int(data.get('par'), config.DEFAULT_PAR, 'par'),
            handicap_rating=_to_int(data.get('handicap_rating'), field_name='handicap_rating'),
            yardages=yardages,
        )


@dataclass
class Player:
    id: int
    name: str
    handicap_index: float = 0.0
    team: Any = None
    tee_color: str = 'white'
    master_id: int | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> 'Player':
        if data.get('id') is None:
            raise ValidationError("Player is missing an id", {'player': data})
        return cls(
            id=data['id'],
            name=data.get('name') or f"Player {data['id']}",
            handicap_index=_to_float(data.get('handicap_index', data.get('handicap')), field_name='handicap_index'),
            team=data.get('team'),
            tee_color=data.get('tee_color') or 'white',
            master_id=data.get('multi_day_player_id', data.get('master_id')),
        )


@dataclass(frozen=True)
class Score:
    player_id: int
    hole_number: int
    strokes: int | None = None
    greenie: bool = False
    greenie_distance: float | None = None

    @property
    def is_played(self) -> bool:
        return bool(self.strokes) and self.strokes > 0

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> 'Score':
        return cls(
            player_id=_require(data, 'player_id', 'Score'),
            hole_number=_to_int(_require(data, 'hole_number', 'Score'), field_name='hole_number'),
            strokes=_to_int(data.get('strokes'), field_name='strokes'),
            greenie=bool(data.get('greenie')),
            greenie_distance=_to_float(data.get('greenie_distance'), None, 'greenie_distance'),
        )


@dataclass(frozen=True)
class ScorePatch:
    """The score fields a player may change while a round is in progress."""
    strokes: int | None = None
    greenie: bool | None = None
    greenie_distance: float | None = None

    FIELDS = ('strokes', 'greenie', 'greenie_distance')

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> 'ScorePatch':
        unknown = sorted(set(data) - set(cls.FIELDS))
        if unknown:
            raise ValidationError("Score update contains fields that cannot be changed", {'fields': unknown})
        return cls(
            strokes=_to_int(data.get('strokes'), field_name='strokes'),
            greenie=None if data.get('greenie') is None else bool(data['greenie']),
            greenie_distance=_to_float(data.get('greenie_distance'), None, 'greenie_distance'),
        )


def apply_patch(score: Score, patch: ScorePatch) -> Score:
    """Return a copy of the score with every field set on the patch applied."""
    changes = {name: getattr(patch, name) for name in ScorePatch.FIELDS if getattr(patch, name) is not None}
    return replace(score, **changes)


def upsert_score(scores: list[Score], score: Score) -> list[Score]:
    """Insert or replace the score for (player, hole), keeping one row per pair."""
    key = (score.player_id, score.hole_number)
    updated = [s for s in scores if (s.player_id, s.hole_number) != key]
    updated.append(score)
    return updated


@dataclass(frozen=True)
class IndividualRef:
    player_id: Any

    @property
    def player_ids(self) -> tuple:
        return (self.player_id,)


@dataclass(frozen=True)
class TeamRef:
    members: tuple

    @property
    def player_ids(self) -> tuple:
        return self.members


Party = IndividualRef | TeamRef


def parse_party_ref(data) -> Party:
    if isinstance(data, dict):
        if 'team' in data or 'player_ids' in data:
            return TeamRef(tuple(data.get('team') or data.get('player_ids') or ()))
        if 'player_id' in data or 'id' in data:
            return IndividualRef(data.get('player_id', data.get('id')))
        raise ValidationError("Unrecognised party reference", {'party': data})
    if isinstance(data, (list, tuple)):
        return TeamRef(tuple(data))
    return IndividualRef(data)


def parse_party(data) -> list[Party]:
    """A party is an ordered list of references; a bare reference is a party of one."""
    if data is None:
        return []
    if isinstance(data, list) and all(isinstance(item, (dict, list, tuple)) for item in data):
        return [parse_party_ref(item) for item in data]
    return [parse_party_ref(data)]


def party_member_ids(party: list[Party]) -> list:
    ids = []
    for ref in party:
        for pid in ref.player_ids:
            if pid not in ids:
                ids.append(pid)
    return ids


@dataclass
class RoundConfig:
    game_type: str
    slope_rating: int = config.DEFAULT_SLOPE_RATING
    handicap_mode: str = config.DEFAULT_HANDICAP_MODE
    bet_amount: float = 0.0
    greenie_amount: float = 0.0
    skins_amount: float = 0.0
    greenie_holes: frozenset = frozenset()
    nassau_format: str = config.DEFAULT_NASSAU_FORMAT
    status: str = 'in_progress'
    is_team_game: bool = False
    id: Any = None
    name: str = ''
    round_number: int | None = None
    day_number: int | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> 'RoundConfig':
        game_type = data.get('game_type')
        if not game_type:
            raise ConfigError("Round config has no game_type", {'config': data.get('id')}, missing=True)
        if game_type not in config.GAME_TYPES:
            raise ConfigError(f"Unknown game type '{game_type}'", {'allowed': list(config.GAME_TYPES)})

        handicap_mode = data.get('handicap_mode') or config.DEFAULT_HANDICAP_MODE
        if handicap_mode not in config.HANDICAP_MODES:
            raise ConfigError(f"Unknown handicap mode '{handicap_mode}'", {'allowed': list(config.HANDICAP_MODES)})

        nassau_format = data.get('nassau_format') or config.DEFAULT_NASSAU_FORMAT
        if nassau_format not in config.NASSAU_SEGMENTS:
            raise ConfigError(f"Unknown nassau format '{nassau_format}'", {'allowed': list(config.NASSAU_SEGMENTS)})

        greenie_holes = data.get('greenie_holes') or []
        if isinstance(greenie_holes, str):
            greenie_holes = [h for h in greenie_holes.split(',') if h.strip()]

        return cls(
            game_type=game_type,
            slope_rating=_to_int(data.get('slope_rating'), config.DEFAULT_SLOPE_RATING, 'slope_rating', ConfigError),
            handicap_mode=handicap_mode,
            bet_amount=_to_float(data.get('bet_amount'), field_name='bet_amount', error=ConfigError),
            greenie_amount=_to_float(data.get('greenie_amount'), field_name='greenie_amount', error=ConfigError),
            skins_amount=_to_float(data.get('skins_amount'), field_name='skins_amount', error=ConfigError),
            greenie_holes=frozenset(_to_int(h, field_name='greenie_holes', error=ConfigError) for h in greenie_holes),
            nassau_format=nassau_format,
            status=data.get('status') or 'in_progress',
            is_team_game=bool(data.get('is_team_game')) or game_type in config.TEAM_GAME_TYPES,
            id=data.get('id'),
            name=data.get('name') or '',
            round_number=_to_int(data.get('round_number'), field_name='round_number', error=ConfigError),
            day_number=_to_int(data.get('day_number'), field_name='day_number', error=ConfigError),
        )


SEGMENT_NAMES = ('front', 'middle', 'back', 'overall')


@dataclass
class SideBet:
    id: Any
    party1: list
    party2: list
    game_type: str = config.MATCH_PLAY
    parent_bet_id: Any = None
    use_high_low: bool = False
    front_amount: float = 0.0
    middle_amount: float = 0.0
    back_amount: float = 0.0
    overall_amount: float = 0.0
    start_hole: int = 1
    segment: str | None = None
    name: str = ''

    @property
    def is_press(self) -> bool:
        return self.parent_bet_id is not None

    def amount_for(self, segment: str) -> float:
        return getattr(self, f'{segment}_amount', 0.0)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> 'SideBet':
        if data.get('id') is None:
            raise ValidationError("Side bet is missing an id", {'bet': data})
        segment = data.get('segment')
        if segment is not None and segment not in SEGMENT_NAMES:
            raise ValidationError(f"Unknown bet segment '{segment}'", {'bet': data['id']})
        return cls(
            id=data['id'],
            party1=parse_party(data.get('party1', data.get('party1_id'))),
            party2=parse_party(data.get('party2', data.get('party2_id'))),
            game_type=data.get('game_type') or data.get('bet_type') or config.MATCH_PLAY,
            parent_bet_id=data.get('parent_bet_id'),
            use_high_low=bool(data.get('use_high_low')),
            front_amount=_to_float(data.get('front_amount'), field_name='front_amount'),
            middle_amount=_to_float(data.get('middle_amount'), field_name='middle_amount'),
            back_amount=_to_float(data.get('back_amount'), field_name='back_amount'),
            overall_amount=_to_float(data.get('overall_amount', data.get('amount')), field_name='overall_amount'),
            start_hole=_to_int(data.get('start_hole'), 1, 'start_hole'),
            segment=segment,
            name=data.get('name') or '',
        )


@dataclass
class RoundSnapshot:
    """One consistent read of a round: config, players, holes and scores."""
    config: RoundConfig
    players: list[Player]
    holes: list[Hole]
    scores: list[Score] = field(default_factory=list)

    def __post_init__(self):
        self.holes = sorted(self.holes, key=lambda h: h.number)
        numbers = [h.number for h in self.holes]
        if len(numbers) != len(set(numbers)):
            raise ValidationError("Hole numbers must be unique", {'holes': numbers})

        player_ids = {p.id for p in self.players}
        hole_numbers = set(numbers)
        seen = set()
        for score in self.scores:
            if score.player_id not in player_ids:
                raise ValidationError("Score references an unknown player", {'player_id': score.player_id})
            if score.hole_number not in hole_numbers:
                raise ValidationError("Score references an unknown hole", {'hole_number': score.hole_number})
            key = (score.player_id, score.hole_number)
            if key in seen:
                raise ValidationError("Duplicate score for player and hole", {'player_id': key[0], 'hole_number': key[1]})
            seen.add(key)

    @property
    def player_ids(self) -> set:
        return {p.id for p in self.players}

    def score_lookup(self) -> dict:
        return {(s.player_id, s.hole_number): s for s in self.scores}

    def player(self, player_id) -> Player:
        for p in self.players:
            if p.id == player_id:
                return p
        raise ValidationError("Unknown player", {'player_id': player_id})

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> 'RoundSnapshot':
        round_data = data.get('config') or data.get('tournament') or data.get('round')
        if round_data is None:
            raise ConfigError("Snapshot has no round config", missing=True)
        return cls(
            config=RoundConfig.from_dict(round_data),
            players=[Player.from_dict(p) for p in data.get('players', [])],
            holes=[Hole.from_dict(h) for h in data.get('holes', [])],
            scores=[Score.from_dict(s) for s in data.get('scores', [])],
        )


def parse_side_bets(items) -> list[SideBet]:
    return [SideBet.from_dict(item) for item in items or []]
