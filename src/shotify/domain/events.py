from dataclasses import dataclass, field
from typing import Dict
import datetime


@dataclass(frozen=True)
class DomainEvent:
    domain_event_id: str
    aggregate_id: str   # video_id
    # When the DomainEvent was created, not the video offset of the stat
    occurred_on: datetime.datetime


@dataclass(frozen=True)
class StatRecorded(DomainEvent):
    """
    Fired when the tracker tags an action against the video clock.
    `stat` is the GameEvent dict exactly as it will be stored.
    """
    stat: Dict = field(default_factory=dict)

    def __repr__(self) -> str:
        return (
            f"StatRecorded(type={self.stat.get('type')}, player={self.stat.get('player')}, "
            f"team={self.stat.get('team')}, time={self.stat.get('formattedTime')})"
        )


@dataclass(frozen=True)
class StatDeleted(DomainEvent):
    stat_id: str


@dataclass(frozen=True)
class LastStatUndone(DomainEvent):
    pass


@dataclass(frozen=True)
class StatsCleared(DomainEvent):
    pass


@dataclass(frozen=True)
class PlayerAdded(DomainEvent):
    team: str
    player: str


@dataclass(frozen=True)
class PlayerRemoved(DomainEvent):
    team: str
    player: str


@dataclass(frozen=True)
class PlayerRenamed(DomainEvent):
    """
    Fired when a roster name is corrected mid-game. Every earlier stat of that
    player moves to the new name so the box score stays on one line.
    """
    team: str
    old_name: str
    new_name: str

    def __repr__(self) -> str:
        return f"PlayerRenamed(team={self.team}, {self.old_name} -> {self.new_name})"


@dataclass(frozen=True)
class TeamRenamed(DomainEvent):
    team: str
    name: str
