"""
Read-side report for one game: team totals, per-player lines, leaders and
badges. Everything is derived from the stat log on each call.
"""
from typing import Dict, List

from shotify.domain.entities.games import Game
from shotify.domain.stats.badges import evaluate_badges
from shotify.domain.stats.box_score import BoxScore, efficiency, player_stats, team_stats
from shotify.domain.stats.leaders import leaders_to_dict, team_leaders_for_roster
from shotify.domain.value_objects.stat_enums import TeamSlot


def team_roster(game: Game, team: str) -> List[str]:
    """
    Roster names for `team`, followed by anyone in the log missing from it
    (older games were saved before rosters were kept in sync).
    """
    names = game.roster(team)
    for evt in game.stats:
        if evt.team == team and evt.player and evt.player not in names:
            names.append(evt.player)
    return names


def player_line(box: BoxScore) -> Dict:
    line = box.to_dict()
    line['uniquePlayerId'] = box.unique_player_id
    line['efficiency'] = efficiency(box)
    return line


def analyze_game(game: Game) -> Dict:
    report = {'title': game.title, 'videoId': game.video_id, 'teams': {}}
    for slot in TeamSlot:
        team = slot.value
        roster = team_roster(game, team)
        leaders = team_leaders_for_roster(game.stats, team, roster)
        players = []
        for name in roster:
            box = player_stats(game.stats, name, team)
            line = player_line(box)
            line['badges'] = [badge.to_dict() for badge in evaluate_badges(box, leaders)]
            players.append(line)
        report['teams'][team] = {
            'name': game.team_name(team),
            'totals': team_stats(game.stats, team).to_dict(),
            'players': players,
            'leaders': leaders_to_dict(leaders),
        }
    return report
