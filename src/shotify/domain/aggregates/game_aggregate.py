from copy import deepcopy
from typing import Dict, List, Optional
from uuid import uuid4
from datetime import datetime

from shotify.domain.entities.game_events import (
    GameEvent,
    format_time,
    make_unique_player_id,
    normalize_events,
)
from shotify.domain.entities.games import TeamRoster, default_teams
from shotify.domain.events import (
    DomainEvent,
    LastStatUndone,
    PlayerAdded,
    PlayerRemoved,
    PlayerRenamed,
    StatDeleted,
    StatRecorded,
    StatsCleared,
    TeamRenamed,
)
from shotify.domain.value_objects.stat_enums import StatType, TeamSlot


class GameAggregate:
    """
    The live tracking session for one video: both rosters plus the stat log,
    in insertion order.
    """

    def __init__(
        self,
        video_id: str,
        teams: Optional[Dict[str, TeamRoster]] = None,
        stats: Optional[List[GameEvent]] = None,
    ):
        self.video_id = video_id
        # Own copies; renames mutate rosters and events in place
        self.teams: Dict[str, TeamRoster] = deepcopy(teams) if teams else default_teams()
        self.stats: List[GameEvent] = deepcopy(normalize_events(stats or []))

        # Domain events that haven't been persisted yet
        self._uncommitted_events: List[DomainEvent] = []

    # ------------------------------------------------------------------
    # APPLY methods: these mutate the aggregate's in-memory state
    # ------------------------------------------------------------------

    def apply(self, evt: DomainEvent):
        if isinstance(evt, StatRecorded):
            self.stats.append(GameEvent.from_dict(evt.stat))
        elif isinstance(evt, StatDeleted):
            self.stats = [stat for stat in self.stats if stat.id != evt.stat_id]
        elif isinstance(evt, LastStatUndone):
            self.stats = self.stats[:-1]
        elif isinstance(evt, StatsCleared):
            self.stats = []
        elif isinstance(evt, PlayerAdded):
            self.teams[evt.team].players.append(evt.player)
        elif isinstance(evt, PlayerRemoved):
            roster = self.teams[evt.team]
            roster.players = [p for p in roster.players if p != evt.player]
        elif isinstance(evt, PlayerRenamed):
            self._apply_player_renamed(evt)
        elif isinstance(evt, TeamRenamed):
            self.teams[evt.team].name = evt.name

    def _apply_player_renamed(self, evt: PlayerRenamed):
        roster = self.teams[evt.team]
        roster.players = [evt.new_name if p == evt.old_name else p for p in roster.players]
        for stat in self.stats:
            if stat.team == evt.team and stat.player == evt.old_name:
                stat.player = evt.new_name
                stat.unique_player_id = make_unique_player_id(evt.team, evt.new_name)

    # ------------------------------------------------------------------
    # PUBLIC "HANDLE" methods:
    #   Callers use these to validate a command and record its domain event.
    # ------------------------------------------------------------------

    def handle_record_stat(
        self,
        stat_type,
        player: str,
        team: str,
        timestamp: float,
        now: Optional[datetime] = None,
    ) -> GameEvent:
        parsed = StatType.parse(stat_type)
        if parsed is None:
            raise ValueError(f"Unknown stat type: {stat_type}")
        team = self._check_team(team)
        if not player:
            raise ValueError("Select a player before recording a stat")

        now = now or datetime.utcnow()
        stat = GameEvent(
            id=str(uuid4()),
            type=parsed,
            player=player,
            team=team,
            timestamp=float(timestamp),
            unique_player_id=make_unique_player_id(team, player),
            formatted_time=format_time(timestamp),
            value=1,
            created_at=now.isoformat() + 'Z',
        )
        self._record(StatRecorded(**self._envelope(now), stat=stat.to_dict()))
        return self.stats[-1]

    def handle_delete_stat(self, stat_id: str) -> bool:
        if not any(stat.id == stat_id for stat in self.stats):
            return False
        self._record(StatDeleted(**self._envelope(), stat_id=stat_id))
        return True

    def handle_undo_last_stat(self) -> Optional[GameEvent]:
        """Drop the most recently recorded stat. Nothing to undo is not an error."""
        if not self.stats:
            return None
        last = self.stats[-1]
        self._record(LastStatUndone(**self._envelope()))
        return last

    def handle_clear_stats(self):
        self._record(StatsCleared(**self._envelope()))

    def handle_add_player(self, team: str, player: str) -> str:
        team = self._check_team(team)
        name = (player or '').strip()
        if not name:
            raise ValueError("Please enter a player name")
        if name in self.teams[team].players:
            raise ValueError(f"{name} already exists in {self.teams[team].name}")
        self._record(PlayerAdded(**self._envelope(), team=team, player=name))
        return name

    def handle_remove_player(self, team: str, player: str):
        team = self._check_team(team)
        if self.player_has_stats(team, player):
            raise ValueError(f"Cannot remove {player} - they have recorded stats")
        if player not in self.teams[team].players:
            return
        self._record(PlayerRemoved(**self._envelope(), team=team, player=player))

    def handle_rename_player(self, team: str, old_name: str, new_name: str) -> str:
        team = self._check_team(team)
        name = (new_name or '').strip()
        if not name:
            raise ValueError("Please enter a player name")
        roster = self.teams[team].players
        if old_name not in roster:
            raise ValueError(f"{old_name} is not on {self.teams[team].name}")
        if name != old_name and name in roster:
            raise ValueError(f"{name} already exists in {self.teams[team].name}")
        self._record(PlayerRenamed(**self._envelope(), team=team, old_name=old_name, new_name=name))
        return name

    def handle_rename_team(self, team: str, name: str):
        team = self._check_team(team)
        self._record(TeamRenamed(**self._envelope(), team=team, name=name))

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def player_has_stats(self, team: str, player: str) -> bool:
        return any(stat.team == team and stat.player == player for stat in self.stats)

    # ------------------------------------------------------------------
    # COMMIT / TRACKING
    # ------------------------------------------------------------------

    def _envelope(self, now: Optional[datetime] = None) -> Dict:
        return {
            'domain_event_id': str(uuid4()),
            'aggregate_id': self.video_id,
            'occurred_on': now or datetime.utcnow(),
        }

    def _check_team(self, team: str) -> str:
        slot = TeamSlot.parse(team)
        if slot is None:
            raise ValueError(f"Unknown team: {team}")
        return slot.value

    def _record(self, domain_event: DomainEvent):
        """
        1. Apply the domain event to update aggregate state
        2. Keep track of uncommitted domain events
        """
        self.apply(domain_event)
        self._uncommitted_events.append(domain_event)

    def get_uncommitted_events(self) -> List[DomainEvent]:
        return self._uncommitted_events

    def clear_uncommitted_events(self):
        self._uncommitted_events = []
