from dataclasses import dataclass, field
from typing import Dict, List, Optional

from shotify.domain.entities.game_events import GameEvent, normalize_events
from shotify.domain.value_objects.stat_enums import TeamSlot

DEFAULT_TEAM_NAMES = {
    TeamSlot.TEAM1.value: 'Team 1',
    TeamSlot.TEAM2.value: 'Team 2',
}


@dataclass
class TeamRoster:
    name: str
    players: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict:
        return {'name': self.name, 'players': list(self.players)}

    @classmethod
    def from_dict(cls, data: Optional[Dict], default_name: str) -> 'TeamRoster':
        data = data or {}
        return cls(
            name=data.get('name') or default_name,
            players=list(data.get('players') or []),
        )


def default_teams() -> Dict[str, TeamRoster]:
    return {slot: TeamRoster(name=name) for slot, name in DEFAULT_TEAM_NAMES.items()}


def teams_from_dict(data: Optional[Dict]) -> Dict[str, TeamRoster]:
    data = data or {}
    return {
        slot: TeamRoster.from_dict(data.get(slot), default_name)
        for slot, default_name in DEFAULT_TEAM_NAMES.items()
    }


def teams_to_dict(teams: Dict[str, TeamRoster]) -> Dict:
    return {slot: roster.to_dict() for slot, roster in teams.items()}


@dataclass
class Game:
    """
    A saved game document:
    {
        'title': 'Rec league week 3',
        'videoId': 'dQw4w9WgXcQ',
        'teams': {'team1': {'name': 'Ballers', 'players': ['A', 'B']}, 'team2': {...}},
        'stats': [ ...GameEvent dicts... ]
    }
    """
    title: str
    video_id: str
    teams: Dict[str, TeamRoster] = field(default_factory=default_teams)
    stats: List[GameEvent] = field(default_factory=list)
    internal_id: Optional[str] = None
    share_id: Optional[str] = None
    is_shared: bool = False
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    def roster(self, team: str) -> List[str]:
        roster = self.teams.get(team)
        return list(roster.players) if roster else []

    def team_name(self, team: str) -> str:
        roster = self.teams.get(team)
        return roster.name if roster else team

    def to_dict(self) -> Dict:
        return {
            'title': self.title,
            'videoId': self.video_id,
            'internalId': self.internal_id,
            'teams': teams_to_dict(self.teams),
            'stats': [evt.to_dict() for evt in self.stats],
            'shareId': self.share_id,
            'isShared': self.is_shared,
            'createdAt': self.created_at,
            'updatedAt': self.updated_at,
        }

    @classmethod
    def from_dict(cls, data: Dict) -> 'Game':
        return cls(
            title=data.get('title', ''),
            video_id=data.get('videoId', ''),
            teams=teams_from_dict(data.get('teams')),
            stats=normalize_events(data.get('stats') or []),
            internal_id=data.get('internalId'),
            share_id=data.get('shareId'),
            is_shared=bool(data.get('isShared', False)),
            created_at=data.get('createdAt'),
            updated_at=data.get('updatedAt'),
        )


@dataclass
class Season:
    name: str
    game_ids: List[str] = field(default_factory=list)
    season_id: Optional[int] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    def to_dict(self) -> Dict:
        return {
            'id': self.season_id,
            'name': self.name,
            'gameIds': list(self.game_ids),
            'createdAt': self.created_at,
            'updatedAt': self.updated_at,
        }
