import logging
import secrets
from datetime import datetime
from typing import List, Optional

from shotify.config.settings import settings
from shotify.domain.entities.game_events import GameEvent
from shotify.domain.entities.games import Game, teams_from_dict, teams_to_dict
from shotify.infra.models import GameModel, GameStatModel

logger = logging.getLogger(__name__)


class GameAlreadyExistsError(Exception):
    """The user already owns a saved game for this video"""
    def __init__(self, video_id: str):
        super().__init__(f"You already have this game saved: {video_id}")
        self.video_id = video_id


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


def make_internal_id(user_id: str, video_id: str) -> str:
    return f"vid_{user_id}_{video_id}_{secrets.token_hex(4)}"


def make_share_id(video_id: str) -> str:
    return f"{video_id[:4]}_{secrets.token_hex(6)}"


class GameRepository:
    """
    Saved games and their stat rows. Every game belongs to one user and is
    addressed by its original video id within that user's games.
    """
    def __init__(self, session_factory, batch_size: Optional[int] = None):
        self.session_factory = session_factory
        self.batch_size = batch_size or settings.stats_batch_size

    # ------------- Mapping -------------
    def _to_entity(self, model: GameModel) -> Game:
        return Game(
            title=model.title,
            video_id=model.video_id,
            teams=teams_from_dict(model.teams),
            stats=[self._stat_to_entity(row) for row in model.stats],
            internal_id=model.internal_id,
            share_id=model.share_id,
            is_shared=bool(model.is_shared),
            created_at=_iso(model.created_at),
            updated_at=_iso(model.updated_at),
        )

    def _stat_to_entity(self, row: GameStatModel) -> GameEvent:
        return GameEvent.from_dict({
            'id': row.id,
            'type': row.type,
            'value': row.value,
            'player': row.player,
            'team': row.team,
            'timestamp': row.timestamp,
            'formattedTime': row.formatted_time,
            'createdAt': _iso(row.created_at),
        })

    def _stat_rows(self, internal_id: str, user_id: str, stats: List[GameEvent]) -> List[GameStatModel]:
        return [
            GameStatModel(
                game_internal_id=internal_id,
                type=evt.type.value if evt.type is not None else str(evt.raw_type),
                value=evt.value or 1,
                player=evt.player,
                team=evt.team,
                timestamp=evt.timestamp,
                formatted_time=evt.formatted_time,
                created_by=user_id,
            )
            for evt in stats
        ]

    def _insert_stats(self, session, rows: List[GameStatModel]) -> int:
        saved = 0
        for i in range(0, len(rows), self.batch_size):
            batch = rows[i:i + self.batch_size]
            session.add_all(batch)
            session.flush()
            saved += len(batch)
        return saved

    def _find(self, session, user_id: str, video_id: str) -> Optional[GameModel]:
        return session.query(GameModel).filter_by(video_id=video_id, created_by=user_id).first()

    # ------------- Commands -------------
    def save_game(self, user_id: str, game: Game) -> Game:
        """
        Create or overwrite the user's game for `game.video_id`. The stored stat
        log is replaced wholesale by `game.stats`.
        """
        if not game.video_id or not game.title:
            raise ValueError("Missing required fields: videoId and title are required")
        if not game.stats:
            raise ValueError("Stats must be a non-empty array")

        session = self.session_factory()
        try:
            now = datetime.utcnow()
            model = self._find(session, user_id, game.video_id)
            if model is None:
                model = GameModel(
                    internal_id=make_internal_id(user_id, game.video_id),
                    video_id=game.video_id,
                    created_by=user_id,
                    created_at=now,
                )
                session.add(model)
            else:
                session.query(GameStatModel).filter_by(
                    game_internal_id=model.internal_id, created_by=user_id
                ).delete(synchronize_session=False)

            model.title = game.title
            model.teams = teams_to_dict(game.teams)
            model.total_stats = len(game.stats)
            model.updated_at = now
            session.flush()

            saved = self._insert_stats(session, self._stat_rows(model.internal_id, user_id, game.stats))
            session.commit()
            session.refresh(model)
            logger.info(f"Saved game {model.internal_id} with {saved} stats")
            return self._to_entity(model)
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def delete_game(self, user_id: str, video_id: str) -> bool:
        session = self.session_factory()
        try:
            model = self._find(session, user_id, video_id)
            if model is None:
                return False
            session.delete(model)
            session.commit()
            logger.info(f"Deleted game {model.internal_id}")
            return True
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def share_game(self, user_id: str, video_id: str) -> Optional[Game]:
        """Mark a game as shared. A game keeps its share id once it has one."""
        session = self.session_factory()
        try:
            model = self._find(session, user_id, video_id)
            if model is None:
                return None
            if not model.share_id:
                model.share_id = make_share_id(model.video_id)
            model.is_shared = True
            session.commit()
            session.refresh(model)
            return self._to_entity(model)
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def copy_shared_game(self, user_id: str, share_id: str) -> Optional[Game]:
        """Save someone else's shared game into the user's own games."""
        session = self.session_factory()
        try:
            shared = session.query(GameModel).filter_by(share_id=share_id, is_shared=True).first()
            if shared is None:
                return None
            if self._find(session, user_id, shared.video_id) is not None:
                raise GameAlreadyExistsError(shared.video_id)

            now = datetime.utcnow()
            copy = GameModel(
                internal_id=make_internal_id(user_id, shared.video_id),
                video_id=shared.video_id,
                title=f"{shared.title} (Copy)",
                teams=shared.teams,
                total_stats=len(shared.stats),
                created_by=user_id,
                created_at=now,
                updated_at=now,
            )
            session.add(copy)
            session.flush()

            rows = [
                GameStatModel(
                    game_internal_id=copy.internal_id,
                    type=row.type,
                    value=row.value,
                    player=row.player,
                    team=row.team,
                    timestamp=row.timestamp,
                    formatted_time=row.formatted_time,
                    created_by=user_id,
                )
                for row in shared.stats
            ]
            self._insert_stats(session, rows)
            session.commit()
            session.refresh(copy)
            logger.info(f"Copied shared game {share_id} to {copy.internal_id}")
            return self._to_entity(copy)
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    # ------------- Queries -------------
    def list_games(self, user_id: str) -> List[Game]:
        """The user's games, most recently updated first."""
        session = self.session_factory()
        try:
            models = (
                session.query(GameModel)
                .filter_by(created_by=user_id)
                .order_by(GameModel.updated_at.desc(), GameModel.id.desc())
                .all()
            )
            return [self._to_entity(model) for model in models]
        finally:
            session.close()

    def get_game(self, user_id: str, video_id: str) -> Optional[Game]:
        session = self.session_factory()
        try:
            model = self._find(session, user_id, video_id)
            return self._to_entity(model) if model else None
        finally:
            session.close()

    def get_games(self, user_id: str, video_ids: List[str]) -> List[Game]:
        """The user's games for `video_ids`, in the order given. Unknown ids are skipped."""
        if not video_ids:
            return []
        session = self.session_factory()
        try:
            models = (
                session.query(GameModel)
                .filter(GameModel.created_by == user_id, GameModel.video_id.in_(video_ids))
                .all()
            )
            by_video = {model.video_id: model for model in models}
            return [self._to_entity(by_video[vid]) for vid in video_ids if vid in by_video]
        finally:
            session.close()

    def get_shared_game(self, share_id: str) -> Optional[Game]:
        session = self.session_factory()
        try:
            model = session.query(GameModel).filter_by(share_id=share_id, is_shared=True).first()
            return self._to_entity(model) if model else None
        finally:
            session.close()
