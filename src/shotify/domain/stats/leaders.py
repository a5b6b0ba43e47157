from dataclasses import dataclass, field
from typing import Dict, Iterable, List

from shotify.domain.stats.box_score import BoxScore, roster_stats

LEADER_STATS = (
    'points',
    'rebounds',
    'assists',
    'steals',
    'blocks',
    'fgPercentage',
    'threePtMade',
    'turnovers',
    'ftPercentage',
)

# A percentage leader needs a minimum number of attempts: stat -> (attempts field, floor)
MIN_ATTEMPTS = {
    'fgPercentage': ('fgAttempts', 5),
    'ftPercentage': ('ftAttempts', 2),
}


@dataclass
class Leader:
    value: float = 0
    players: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict:
        return {'value': self.value, 'players': list(self.players)}


TeamLeaders = Dict[str, Leader]


def empty_leaders() -> TeamLeaders:
    return {stat: Leader() for stat in LEADER_STATS}


def _is_eligible(box: BoxScore, stat: str) -> bool:
    if stat not in MIN_ATTEMPTS:
        return True
    attempts_field, floor = MIN_ATTEMPTS[stat]
    return box.get(attempts_field) >= floor


def team_leaders(players: Iterable[BoxScore]) -> TeamLeaders:
    """
    Per-statistic maximum across a team's players and everyone tied at it.

    `players` must be in roster order; ties keep that order. Every player
    starts level with the zero-initialised leader, so a stat nobody recorded
    lists all eligible players at value 0.
    """
    leaders = empty_leaders()
    for box in players:
        for stat in LEADER_STATS:
            if not _is_eligible(box, stat):
                continue
            value = box.get(stat)
            leader = leaders[stat]
            if value > leader.value:
                leaders[stat] = Leader(value=value, players=[box.name])
            elif value == leader.value:
                leader.players.append(box.name)
    return leaders


def team_leaders_for_roster(events, team: str, roster: Iterable[str]) -> TeamLeaders:
    return team_leaders(roster_stats(events, team, roster))


def team_leaders_for_game(game, team: str) -> TeamLeaders:
    """Leaders for one team of a saved Game, evaluated over its roster."""
    return team_leaders_for_roster(game.stats, team, game.roster(team))


def leaders_to_dict(leaders: TeamLeaders) -> Dict:
    return {stat: leader.to_dict() for stat, leader in leaders.items()}
