import math
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional

from shotify.domain.value_objects.stat_enums import StatType

PLAYER_ID_SEPARATOR = "|"


def make_unique_player_id(team: str, player: str) -> str:
    """Composite key that keeps same-named players on different teams apart."""
    return f"{team}{PLAYER_ID_SEPARATOR}{player}"


def split_unique_player_id(unique_player_id: str) -> tuple:
    """Inverse of make_unique_player_id. Player names may themselves contain '|'."""
    team, _, player = unique_player_id.partition(PLAYER_ID_SEPARATOR)
    return team, player


def format_time(seconds: float) -> str:
    """Render a video offset in seconds as M:SS."""
    seconds = float(seconds or 0)
    if not math.isfinite(seconds) or seconds < 0:
        seconds = 0.0
    mins = math.floor(seconds / 60)
    secs = math.floor(seconds % 60)
    return f"{mins}:{secs:02d}"


@dataclass
class GameEvent:
    """
    One tagged action from the tracker.

    Example stat as stored by the API:
    {
        'id': 1712345678901,
        'type': '3PT Made',
        'value': 1,
        'player': 'Curry',
        'team': 'team1',
        'uniquePlayerId': 'team1|Curry',
        'timestamp': 83.4,
        'formattedTime': '1:23'
    }

    `type` is None when the raw type string is not one of the known stat
    types. Such events are kept so the log round-trips, but they never
    contribute to any statistic.
    """
    id: Optional[str]
    type: Optional[StatType]
    player: Optional[str]
    team: Optional[str]
    timestamp: float = 0.0
    unique_player_id: Optional[str] = None
    formatted_time: Optional[str] = None
    value: int = 1
    created_at: Optional[str] = None
    raw_type: Optional[str] = None

    @property
    def is_valid(self) -> bool:
        return self.type is not None and bool(self.player) and bool(self.team)

    def to_dict(self) -> Dict:
        return {
            'id': self.id,
            'type': self.type.value if self.type is not None else self.raw_type,
            'value': self.value,
            'player': self.player,
            'team': self.team,
            'uniquePlayerId': self.unique_player_id,
            'timestamp': self.timestamp,
            'formattedTime': self.formatted_time,
            'createdAt': self.created_at,
        }

    @classmethod
    def from_dict(cls, data: Dict) -> 'GameEvent':
        """
        Build a normalized event from API/local-storage JSON.
        `uniquePlayerId` and `formattedTime` are filled in when absent.
        """
        raw_type = data.get('type')
        player = data.get('player')
        team = data.get('team')
        timestamp = data.get('timestamp')
        try:
            timestamp = float(timestamp) if timestamp is not None else 0.0
        except (TypeError, ValueError):
            timestamp = 0.0
        if not math.isfinite(timestamp):
            timestamp = 0.0

        unique_player_id = data.get('uniquePlayerId')
        if not unique_player_id and player and team:
            unique_player_id = make_unique_player_id(team, player)

        event_id = data.get('id', data.get('_id'))
        return cls(
            id=str(event_id) if event_id is not None else None,
            type=StatType.parse(raw_type),
            player=player,
            team=team,
            timestamp=timestamp,
            unique_player_id=unique_player_id,
            formatted_time=data.get('formattedTime') or format_time(timestamp),
            value=data.get('value') or 1,
            created_at=data.get('createdAt'),
            raw_type=raw_type,
        )


def normalize_event(raw) -> GameEvent:
    if isinstance(raw, GameEvent):
        return raw
    if not isinstance(raw, dict):
        # Stray entries (null, strings) are kept as invalid events
        return GameEvent(id=None, type=None, player=None, team=None, formatted_time=format_time(0))
    return GameEvent.from_dict(raw)


def normalize_events(raw_events) -> List[GameEvent]:
    """
    Ingest a stat log (dicts or GameEvents) into GameEvents.
    A log that is not a list is a caller bug, not bad data.
    """
    if not isinstance(raw_events, (list, tuple)):
        raise TypeError(
            f"Event log must be a list, got {type(raw_events).__name__}"
        )
    return [normalize_event(raw) for raw in raw_events]


def sort_timeline(events: Iterable[GameEvent]) -> List[GameEvent]:
    """Chronological view of the log. Insertion order is not chronological."""
    return sorted(events, key=lambda evt: evt.timestamp)
