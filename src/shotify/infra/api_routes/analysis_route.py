from typing import Dict, List, Optional
from fastapi import APIRouter, HTTPException
from pydantic import BaseModel

from shotify.domain.entities.game_events import normalize_events
from shotify.domain.entities.games import Game, teams_from_dict
from shotify.domain.stats.badges import evaluate_badges
from shotify.domain.stats.box_score import BoxScore, EXPORT_TO_ATTR
from shotify.services.game_analysis import analyze_game

router = APIRouter()


class AnalyzeGameRequest(BaseModel):
    title: str = ''
    videoId: str = ''
    teams: Optional[Dict] = None
    stats: List[Dict] = []


class BadgesRequest(BaseModel):
    # camelCase box score as returned by the analysis and stats endpoints
    stats: Dict
    teamLeaders: Optional[Dict] = None


@router.post("/game")
async def analyze(request: AnalyzeGameRequest) -> dict:
    """Box scores, leaders and badges for a posted game. Nothing is stored."""
    try:
        game = Game(
            title=request.title,
            video_id=request.videoId,
            teams=teams_from_dict(request.teams),
            stats=normalize_events(request.stats),
        )
    except (TypeError, ValueError) as e:
        raise HTTPException(status_code=400, detail=str(e))
    return analyze_game(game)


@router.post("/badges")
async def badges(request: BadgesRequest) -> List[dict]:
    stats = {
        key: value for key, value in request.stats.items()
        if key in EXPORT_TO_ATTR and isinstance(value, (int, float))
    }
    box = BoxScore(**{EXPORT_TO_ATTR[key]: value for key, value in stats.items()})
    return [badge.to_dict() for badge in evaluate_badges(box, request.teamLeaders)]
