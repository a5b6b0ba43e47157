import logging
from copy import deepcopy
from datetime import datetime
from typing import Dict, List, Optional

from shotify.domain.aggregates.game_aggregate import GameAggregate
from shotify.domain.entities.game_events import GameEvent, sort_timeline
from shotify.domain.entities.games import Game, teams_from_dict, teams_to_dict
from shotify.domain.stats.badges import Badge, evaluate_badges
from shotify.domain.stats.box_score import (
    BoxScore,
    player_stats,
    players_with_stats,
    team_stats,
)
from shotify.domain.stats.leaders import TeamLeaders, team_leaders_for_roster
from shotify.infra.repo.kv_store.base import KeyValueStore
from shotify.utils.logging import setup_logger


def stats_key(video_id: str) -> str:
    return f"stats-{video_id}"


def teams_key(video_id: str) -> str:
    return f"teams-{video_id}"


class GameTracker:
    """
    Owns the mutable stat log for one video. Every change goes through the
    GameAggregate and is written back to the store straight away, so a
    tracker built later for the same video continues where this one stopped.
    """

    def __init__(
        self,
        video_id: str,
        store: KeyValueStore,
        log_dir: Optional[str] = None,
    ):
        if not video_id:
            raise ValueError("A video id is required to track a game")
        self.video_id = video_id
        self.store = store
        self.logger = setup_logger(video_id, log_dir=log_dir)

        self.aggregate = GameAggregate(
            video_id,
            teams=teams_from_dict(store.get(teams_key(video_id))),
            stats=self._load_stats(),
        )
        if self.aggregate.stats:
            self.logger.info(f"Continuing game with {len(self.aggregate.stats)} recorded stats")

    @classmethod
    def continue_game(cls, game: Game, store: KeyValueStore, log_dir: Optional[str] = None) -> 'GameTracker':
        """Seed the store from a saved game and resume tracking it."""
        store.set(stats_key(game.video_id), [evt.to_dict() for evt in game.stats])
        store.set(teams_key(game.video_id), teams_to_dict(game.teams))
        return cls(game.video_id, store, log_dir=log_dir)

    def _load_stats(self) -> List[Dict]:
        saved = self.store.get(stats_key(self.video_id))
        if saved is None:
            return []
        if not isinstance(saved, list):
            self.logger.warning(f"Ignoring malformed saved stats of type {type(saved).__name__}")
            return []
        return saved

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def record_stat(self, stat_type, player: str, team: str, timestamp: float,
                    now: Optional[datetime] = None) -> GameEvent:
        stat = self.aggregate.handle_record_stat(stat_type, player, team, timestamp, now=now)
        self._commit()
        self.logger.info(
            f"Recorded: {stat.type.value} for {player} ({self.aggregate.teams[stat.team].name}) "
            f"at {stat.formatted_time}"
        )
        return stat

    def delete_stat(self, stat_id: str) -> bool:
        deleted = self.aggregate.handle_delete_stat(stat_id)
        if deleted:
            self._commit()
            self.logger.info(f"Stat {stat_id} deleted")
        return deleted

    def undo_last_stat(self) -> Optional[GameEvent]:
        undone = self.aggregate.handle_undo_last_stat()
        if undone is None:
            self.logger.info("No stats to undo")
            return None
        self._commit()
        self.logger.info(f"Undone: {undone.raw_type} for {undone.player} at {undone.formatted_time}")
        return undone

    def clear_stats(self):
        self.aggregate.handle_clear_stats()
        self.aggregate.clear_uncommitted_events()
        self.store.remove(stats_key(self.video_id))
        self.logger.info("All stats have been cleared")

    def add_player(self, team: str, player: str) -> str:
        name = self.aggregate.handle_add_player(team, player)
        self._commit()
        self.logger.info(f"Added {name} to {self.aggregate.teams[team].name}")
        return name

    def remove_player(self, team: str, player: str):
        self.aggregate.handle_remove_player(team, player)
        self._commit()
        self.logger.info(f"Removed {player} from {self.aggregate.teams[team].name}")

    def rename_player(self, team: str, old_name: str, new_name: str) -> str:
        name = self.aggregate.handle_rename_player(team, old_name, new_name)
        self._commit()
        self.logger.info(f"Renamed {old_name} to {name}")
        return name

    def rename_team(self, team: str, name: str):
        self.aggregate.handle_rename_team(team, name)
        self._commit()

    def _commit(self):
        """Write the current snapshot and mark pending domain events as persisted."""
        pending = self.aggregate.get_uncommitted_events()
        if not pending:
            return
        try:
            self.store.set(stats_key(self.video_id), [evt.to_dict() for evt in self.aggregate.stats])
            self.store.set(teams_key(self.video_id), teams_to_dict(self.aggregate.teams))
        except (OSError, TypeError) as e:
            self.logger.error(f"Error saving tracker state: {e}")
            raise
        self.logger.debug(f"Persisted {len(pending)} domain events")
        self.aggregate.clear_uncommitted_events()

    # ------------------------------------------------------------------
    # Views
    # ------------------------------------------------------------------

    @property
    def stats(self) -> List[GameEvent]:
        return list(self.aggregate.stats)

    @property
    def teams(self):
        return self.aggregate.teams

    def timeline(self) -> List[GameEvent]:
        return sort_timeline(self.aggregate.stats)

    def player_stats(self, player: str, team: str) -> BoxScore:
        return player_stats(self.aggregate.stats, player, team)

    def team_stats(self, team: str) -> BoxScore:
        return team_stats(self.aggregate.stats, team)

    def players_with_stats(self) -> List[BoxScore]:
        return players_with_stats(self.aggregate.stats)

    def team_leaders(self, team: str) -> TeamLeaders:
        return team_leaders_for_roster(self.aggregate.stats, team, self.aggregate.teams[team].players)

    def badges(self, player: str, team: str) -> List[Badge]:
        return evaluate_badges(self.player_stats(player, team), self.team_leaders(team))

    def to_game(self, title: str) -> Game:
        """Snapshot for saving through the stats API."""
        if not title or not title.strip():
            raise ValueError("Please enter a game title")
        return Game(
            title=title.strip(),
            video_id=self.video_id,
            teams=deepcopy(self.aggregate.teams),
            stats=deepcopy(self.aggregate.stats),
        )
