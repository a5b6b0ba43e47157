"""
Box-score aggregation over a stat log.

Every view (live tracker, saved game, shared game, season page) folds the
same log through `aggregate`, so the counting rules live here and nowhere else.
"""
import math
from dataclasses import dataclass, fields
from typing import Callable, Dict, Iterable, List, Optional

from shotify.domain.entities.game_events import (
    GameEvent,
    make_unique_player_id,
    normalize_events,
    split_unique_player_id,
)
from shotify.domain.value_objects.stat_enums import StatType

# Counter deltas per stat type. 3PT shots also count as field goals.
STAT_INCREMENTS: Dict[StatType, Dict[str, int]] = {
    StatType.FG_MADE: {'points': 2, 'fg_made': 1, 'fg_attempts': 1},
    StatType.FG_MISSED: {'fg_attempts': 1},
    StatType.THREE_PT_MADE: {
        'points': 3, 'fg_made': 1, 'fg_attempts': 1,
        'three_pt_made': 1, 'three_pt_attempts': 1,
    },
    StatType.THREE_PT_MISSED: {'fg_attempts': 1, 'three_pt_attempts': 1},
    StatType.FT_MADE: {'points': 1, 'ft_made': 1, 'ft_attempts': 1},
    StatType.FT_MISSED: {'ft_attempts': 1},
    StatType.REBOUND: {'rebounds': 1},
    StatType.ASSIST: {'assists': 1},
    StatType.STEAL: {'steals': 1},
    StatType.BLOCK: {'blocks': 1},
    StatType.TURNOVER: {'turnovers': 1},
    StatType.FOUL: {'fouls': 1},
}

# snake_case attribute -> exported field name
EXPORT_NAMES = {
    'points': 'points',
    'fg_made': 'fgMade',
    'fg_attempts': 'fgAttempts',
    'two_pt_made': 'twoPtMade',
    'two_pt_attempts': 'twoPtAttempts',
    'three_pt_made': 'threePtMade',
    'three_pt_attempts': 'threePtAttempts',
    'ft_made': 'ftMade',
    'ft_attempts': 'ftAttempts',
    'rebounds': 'rebounds',
    'assists': 'assists',
    'steals': 'steals',
    'blocks': 'blocks',
    'turnovers': 'turnovers',
    'fouls': 'fouls',
    'fg_percentage': 'fgPercentage',
    'two_pt_percentage': 'twoPtPercentage',
    'three_pt_percentage': 'threePtPercentage',
    'ft_percentage': 'ftPercentage',
}


def js_round(value: float) -> int:
    """Round half up, matching how the web client has always displayed numbers."""
    return int(math.floor(value + 0.5))


def percentage(made: int, attempts: int) -> int:
    if attempts <= 0:
        return 0
    return js_round(made / attempts * 100)


@dataclass
class BoxScore:
    """
    Counting stats plus shooting percentages for a player or a whole team.
    `name` is None for team totals.
    """
    team: Optional[str] = None
    name: Optional[str] = None
    points: int = 0
    fg_made: int = 0
    fg_attempts: int = 0
    two_pt_made: int = 0
    two_pt_attempts: int = 0
    three_pt_made: int = 0
    three_pt_attempts: int = 0
    ft_made: int = 0
    ft_attempts: int = 0
    rebounds: int = 0
    assists: int = 0
    steals: int = 0
    blocks: int = 0
    turnovers: int = 0
    fouls: int = 0
    fg_percentage: int = 0
    two_pt_percentage: int = 0
    three_pt_percentage: int = 0
    ft_percentage: int = 0

    @property
    def unique_player_id(self) -> Optional[str]:
        if self.name is None or self.team is None:
            return None
        return make_unique_player_id(self.team, self.name)

    def add(self, stat_type: StatType) -> None:
        for attr, delta in STAT_INCREMENTS[stat_type].items():
            setattr(self, attr, getattr(self, attr) + delta)

    def finalize(self) -> 'BoxScore':
        """Derive 2PT splits and percentages from the raw counters."""
        self.two_pt_made = self.fg_made - self.three_pt_made
        self.two_pt_attempts = self.fg_attempts - self.three_pt_attempts
        self.fg_percentage = percentage(self.fg_made, self.fg_attempts)
        self.two_pt_percentage = percentage(self.two_pt_made, self.two_pt_attempts)
        self.three_pt_percentage = percentage(self.three_pt_made, self.three_pt_attempts)
        self.ft_percentage = percentage(self.ft_made, self.ft_attempts)
        return self

    def merge(self, other: 'BoxScore') -> None:
        """Sum the raw counters of another box score into this one."""
        for attr in COUNTER_FIELDS:
            setattr(self, attr, getattr(self, attr) + getattr(other, attr))

    def get(self, stat_name: str, default=0):
        """Look up a stat by its exported (camelCase) or attribute name."""
        attr = EXPORT_TO_ATTR.get(stat_name, stat_name)
        return getattr(self, attr, default)

    def to_dict(self) -> Dict:
        data = {export: getattr(self, attr) for attr, export in EXPORT_NAMES.items()}
        if self.name is not None:
            data['name'] = self.name
        if self.team is not None:
            data['team'] = self.team
        return data


EXPORT_TO_ATTR = {export: attr for attr, export in EXPORT_NAMES.items()}
COUNTER_FIELDS = tuple(
    f.name for f in fields(BoxScore)
    if f.name not in ('team', 'name') and not f.name.endswith('percentage')
    and not f.name.startswith('two_pt')
)


def _fold(events: Iterable[GameEvent], matches: Callable[[GameEvent], bool], box: BoxScore) -> BoxScore:
    for evt in events:
        if not evt.is_valid or not matches(evt):
            continue
        box.add(evt.type)
    return box.finalize()


def aggregate(events, team: str, player: Optional[str] = None) -> BoxScore:
    """
    Fold the log into a box score.

    Team mode (player is None) sums every event of `team`. Player mode also
    requires the event's player name to match. Unknown types and events
    missing a player or team are skipped. No matching events yields zeros.
    """
    events = normalize_events(events)
    if player is None:
        return _fold(events, lambda evt: evt.team == team, BoxScore(team=team))
    return _fold(
        events,
        lambda evt: evt.team == team and evt.player == player,
        BoxScore(team=team, name=player),
    )


def player_stats(events, player: str, team: str) -> BoxScore:
    return aggregate(events, team=team, player=player)


def player_stats_by_id(events, unique_player_id: str) -> BoxScore:
    """Player mode keyed on `team|player`; legacy events get the key derived on ingestion."""
    events = normalize_events(events)
    team, player = split_unique_player_id(unique_player_id)
    return _fold(
        events,
        lambda evt: evt.unique_player_id == unique_player_id,
        BoxScore(team=team, name=player),
    )


def team_stats(events, team: str) -> BoxScore:
    return aggregate(events, team=team)


def players_with_stats(events) -> List[BoxScore]:
    """One box score per distinct player id in the log, in order of first appearance."""
    events = normalize_events(events)
    player_ids = []
    seen = set()
    for evt in events:
        if not evt.unique_player_id or evt.unique_player_id in seen:
            continue
        seen.add(evt.unique_player_id)
        player_ids.append(evt.unique_player_id)
    return [player_stats_by_id(events, player_id) for player_id in player_ids]


def roster_stats(events, team: str, roster: Iterable[str]) -> List[BoxScore]:
    """Box scores for every roster name of `team`, in roster order."""
    events = normalize_events(events)
    return [aggregate(events, team=team, player=name) for name in roster]


def efficiency(box: BoxScore) -> int:
    """Single-number efficiency rating shown next to each player."""
    fg_score = box.fg_made - (box.fg_attempts - box.fg_made)
    three_pt_score = box.three_pt_made * 1.5 - (box.three_pt_attempts - box.three_pt_made)
    ft_score = box.ft_made - (box.ft_attempts - box.ft_made)

    total = (
        fg_score
        + three_pt_score
        + ft_score
        + box.rebounds * 0.5
        + box.assists * 1.5
        + box.steals * 2
        + box.blocks * 2
        - box.turnovers * 2
        - box.fouls * 0.5
    )
    return js_round(total)


# Player and team totals share one shape
PlayerAggregate = BoxScore
TeamAggregate = BoxScore
