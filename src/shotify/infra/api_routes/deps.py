from typing import Optional
from fastapi import Depends, Header, HTTPException

from shotify.infra.db import SessionLocal
from shotify.infra.repo.game_repo import GameRepository
from shotify.infra.repo.season_repo import SeasonRepository


def get_session_factory():
    return SessionLocal


def get_user_id(x_user_id: Optional[str] = Header(None)) -> str:
    """Identity is established upstream; the verified user id arrives as X-User-Id."""
    if not x_user_id:
        raise HTTPException(status_code=401, detail="Authentication required")
    return x_user_id


def get_game_repository(session_factory=Depends(get_session_factory)) -> GameRepository:
    return GameRepository(session_factory)


def get_season_repository(session_factory=Depends(get_session_factory)) -> SeasonRepository:
    return SeasonRepository(session_factory)
