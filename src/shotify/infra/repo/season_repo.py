import logging
from datetime import datetime
from typing import List, Optional

from shotify.domain.entities.games import Season
from shotify.infra.models import SeasonModel

logger = logging.getLogger(__name__)


def _validate(name: Optional[str], game_ids) -> None:
    if not name or not isinstance(game_ids, list) or len(game_ids) == 0:
        raise ValueError("Invalid data. Name and at least one game ID are required")


class SeasonRepository:
    """A season is a named list of the owner's saved games, by video id."""
    def __init__(self, session_factory):
        self.session_factory = session_factory

    def _to_entity(self, model: SeasonModel) -> Season:
        return Season(
            name=model.name,
            game_ids=list(model.game_ids or []),
            season_id=model.id,
            created_at=model.created_at.isoformat() if model.created_at else None,
            updated_at=model.updated_at.isoformat() if model.updated_at else None,
        )

    def _find(self, session, user_id: str, season_id: int) -> Optional[SeasonModel]:
        return session.query(SeasonModel).filter_by(id=season_id, created_by=user_id).first()

    def list_seasons(self, user_id: str) -> List[Season]:
        session = self.session_factory()
        try:
            models = (
                session.query(SeasonModel)
                .filter_by(created_by=user_id)
                .order_by(SeasonModel.created_at.desc(), SeasonModel.id.desc())
                .all()
            )
            return [self._to_entity(model) for model in models]
        finally:
            session.close()

    def get_season(self, user_id: str, season_id: int) -> Optional[Season]:
        session = self.session_factory()
        try:
            model = self._find(session, user_id, season_id)
            return self._to_entity(model) if model else None
        finally:
            session.close()

    def create_season(self, user_id: str, name: str, game_ids: List[str]) -> Season:
        _validate(name, game_ids)
        session = self.session_factory()
        try:
            now = datetime.utcnow()
            model = SeasonModel(
                name=name,
                game_ids=list(game_ids),
                created_by=user_id,
                created_at=now,
                updated_at=now,
            )
            session.add(model)
            session.commit()
            session.refresh(model)
            logger.info(f"Created season {model.id} with {len(game_ids)} games")
            return self._to_entity(model)
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def update_season(
        self,
        user_id: str,
        season_id: int,
        name: Optional[str] = None,
        game_ids: Optional[List[str]] = None,
    ) -> Optional[Season]:
        """Partial update: only a truthy name and a list of game ids are applied."""
        session = self.session_factory()
        try:
            model = self._find(session, user_id, season_id)
            if model is None:
                return None
            if name:
                model.name = name
            if isinstance(game_ids, list):
                model.game_ids = list(game_ids)
            model.updated_at = datetime.utcnow()
            session.commit()
            session.refresh(model)
            return self._to_entity(model)
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def delete_season(self, user_id: str, season_id: int) -> bool:
        session = self.session_factory()
        try:
            model = self._find(session, user_id, season_id)
            if model is None:
                return False
            session.delete(model)
            session.commit()
            return True
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()
