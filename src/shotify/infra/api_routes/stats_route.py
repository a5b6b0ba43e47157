from typing import Dict, List, Optional
from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from shotify.config.settings import settings
from shotify.domain.entities.game_events import normalize_events
from shotify.domain.entities.games import Game, teams_from_dict
from shotify.infra.api_routes.deps import get_game_repository, get_user_id
from shotify.infra.repo.game_repo import GameAlreadyExistsError, GameRepository

import logging
logger = logging.getLogger(__name__)

router = APIRouter()


class SaveGameRequest(BaseModel):
    title: str
    videoId: str
    teams: Optional[Dict] = None
    stats: List[Dict] = []


def video_url(video_id: str) -> str:
    return f"https://www.youtube.com/watch?v={video_id}"


def game_response(game: Game) -> Dict:
    data = game.to_dict()
    data['videoUrl'] = video_url(game.video_id)
    return data


@router.post("/saveGame", status_code=201)
async def save_game(
    request: SaveGameRequest,
    user_id: str = Depends(get_user_id),
    repo: GameRepository = Depends(get_game_repository),
) -> dict:
    """
    Save the tracker's game, replacing any earlier save of the same video.
    """
    if request.teams is None:
        raise HTTPException(status_code=400, detail="Teams data is required")
    try:
        game = Game(
            title=request.title,
            video_id=request.videoId,
            teams=teams_from_dict(request.teams),
            stats=normalize_events(request.stats),
        )
        saved = repo.save_game(user_id, game)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error(f"Failed to save game {request.videoId}: {e}")
        raise HTTPException(status_code=500, detail=f"Failed to save game: {str(e)}")

    return {
        "message": "Game saved successfully",
        "videoId": saved.video_id,
        "internalId": saved.internal_id,
        "title": saved.title,
        "statsCount": len(saved.stats),
    }


@router.get("/savedGames")
async def list_saved_games(
    user_id: str = Depends(get_user_id),
    repo: GameRepository = Depends(get_game_repository),
) -> List[dict]:
    try:
        games = repo.list_games(user_id)
    except Exception as e:
        logger.error(f"Failed to fetch saved games: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch saved games")
    return [game_response(game) for game in games]


@router.get("/games/{video_id}")
async def get_saved_game(
    video_id: str,
    user_id: str = Depends(get_user_id),
    repo: GameRepository = Depends(get_game_repository),
) -> dict:
    game = repo.get_game(user_id, video_id)
    if game is None:
        raise HTTPException(status_code=404, detail="Game not found")
    return game_response(game)


@router.delete("/deleteGame/{video_id}")
async def delete_game(
    video_id: str,
    user_id: str = Depends(get_user_id),
    repo: GameRepository = Depends(get_game_repository),
) -> dict:
    try:
        deleted = repo.delete_game(user_id, video_id)
    except Exception as e:
        logger.error(f"Failed to delete game {video_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to delete game")
    if not deleted:
        raise HTTPException(status_code=404, detail="Video not found")
    return {"message": "Game and all associated stats deleted successfully"}


@router.post("/shareGame/{video_id}")
async def share_game(
    video_id: str,
    user_id: str = Depends(get_user_id),
    repo: GameRepository = Depends(get_game_repository),
) -> dict:
    try:
        game = repo.share_game(user_id, video_id)
    except Exception as e:
        logger.error(f"Failed to share game {video_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to share game")
    if game is None:
        raise HTTPException(status_code=404, detail="Game not found")
    return {
        "message": "Game shared successfully",
        "shareId": game.share_id,
        "shareUrl": settings.share_url(game.share_id),
    }


@router.get("/shared/{share_id}")
async def get_shared_game(
    share_id: str,
    repo: GameRepository = Depends(get_game_repository),
) -> dict:
    """Public read of a shared game. No identity required."""
    game = repo.get_shared_game(share_id)
    if game is None:
        raise HTTPException(status_code=404, detail="Shared game not found")
    return game_response(game)


@router.post("/saveSharedGame/{share_id}", status_code=201)
async def save_shared_game(
    share_id: str,
    user_id: str = Depends(get_user_id),
    repo: GameRepository = Depends(get_game_repository),
) -> dict:
    try:
        game = repo.copy_shared_game(user_id, share_id)
    except GameAlreadyExistsError as e:
        raise HTTPException(
            status_code=409,
            detail={"message": "You already have this game saved", "videoId": e.video_id},
        )
    except Exception as e:
        logger.error(f"Failed to save shared game {share_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to save shared game")
    if game is None:
        raise HTTPException(status_code=404, detail="Shared game not found")
    return {
        "message": "Game saved successfully to your account",
        "videoId": game.video_id,
        "internalId": game.internal_id,
        "title": game.title,
        "statsCount": len(game.stats),
    }
