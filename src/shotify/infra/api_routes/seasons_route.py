from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel

from shotify.domain.stats.season import filter_games_by_timeframe, season_summary
from shotify.infra.api_routes.deps import get_game_repository, get_season_repository, get_user_id
from shotify.infra.repo.game_repo import GameRepository
from shotify.infra.repo.season_repo import SeasonRepository

import logging
logger = logging.getLogger(__name__)

router = APIRouter()


class CreateSeasonRequest(BaseModel):
    name: Optional[str] = None
    gameIds: Optional[List[str]] = None


class UpdateSeasonRequest(BaseModel):
    name: Optional[str] = None
    gameIds: Optional[List[str]] = None


@router.get("")
async def list_seasons(
    user_id: str = Depends(get_user_id),
    repo: SeasonRepository = Depends(get_season_repository),
) -> List[dict]:
    try:
        return [season.to_dict() for season in repo.list_seasons(user_id)]
    except Exception as e:
        logger.error(f"Failed to fetch seasons: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch seasons")


@router.get("/{season_id}")
async def get_season(
    season_id: int,
    user_id: str = Depends(get_user_id),
    repo: SeasonRepository = Depends(get_season_repository),
) -> dict:
    season = repo.get_season(user_id, season_id)
    if season is None:
        raise HTTPException(status_code=404, detail="Season not found")
    return season.to_dict()


@router.post("", status_code=201)
async def create_season(
    request: CreateSeasonRequest,
    user_id: str = Depends(get_user_id),
    repo: SeasonRepository = Depends(get_season_repository),
) -> dict:
    try:
        season = repo.create_season(user_id, request.name, request.gameIds)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error(f"Failed to create season: {e}")
        raise HTTPException(status_code=500, detail="Failed to create season")
    return season.to_dict()


@router.put("/{season_id}")
async def update_season(
    season_id: int,
    request: UpdateSeasonRequest,
    user_id: str = Depends(get_user_id),
    repo: SeasonRepository = Depends(get_season_repository),
) -> dict:
    try:
        season = repo.update_season(user_id, season_id, request.name, request.gameIds)
    except Exception as e:
        logger.error(f"Failed to update season {season_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to update season")
    if season is None:
        raise HTTPException(status_code=404, detail="Season not found")
    return season.to_dict()


@router.delete("/{season_id}")
async def delete_season(
    season_id: int,
    user_id: str = Depends(get_user_id),
    repo: SeasonRepository = Depends(get_season_repository),
) -> dict:
    try:
        deleted = repo.delete_season(user_id, season_id)
    except Exception as e:
        logger.error(f"Failed to delete season {season_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to delete season")
    if not deleted:
        raise HTTPException(status_code=404, detail="Season not found")
    return {"message": "Season deleted successfully"}


@router.get("/{season_id}/summary")
async def get_season_summary(
    season_id: int,
    timeframe: str = Query("season"),
    user_id: str = Depends(get_user_id),
    seasons: SeasonRepository = Depends(get_season_repository),
    games: GameRepository = Depends(get_game_repository),
) -> dict:
    """
    Record, streaks, advanced ratings and per-player season lines over the
    season's games, optionally narrowed to the last week or month.
    """
    season = seasons.get_season(user_id, season_id)
    if season is None:
        raise HTTPException(status_code=404, detail="Season not found")
    try:
        season_games = filter_games_by_timeframe(
            games.get_games(user_id, season.game_ids), timeframe
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    summary = season_summary(season_games).to_dict()
    summary['season'] = season.to_dict()
    summary['timeframe'] = timeframe
    summary['gameCount'] = len(season_games)
    return summary
