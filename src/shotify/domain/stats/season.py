"""
Season rollups: a season is a list of saved games, always read from the
`team1` side (the tracking user's own team).
"""
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Dict, Iterable, List, Optional, Tuple

from shotify.domain.entities.games import Game
from shotify.domain.stats.box_score import BoxScore, js_round, team_stats
from shotify.domain.value_objects.stat_enums import TeamSlot

HOME = TeamSlot.TEAM1.value
AWAY = TeamSlot.TEAM2.value

TIMEFRAMES = ('week', 'month', 'season')


def _one_decimal(value: float) -> float:
    return js_round(value * 10) / 10


def _as_games(games: Iterable) -> List[Game]:
    return [g if isinstance(g, Game) else Game.from_dict(g) for g in games or []]


@dataclass
class SeasonLine:
    box: BoxScore
    games_played: int = 0
    ppg: float = 0
    rpg: float = 0
    apg: float = 0
    spg: float = 0
    bpg: float = 0

    def to_dict(self) -> Dict:
        data = self.box.to_dict()
        data.update({
            'gamesPlayed': self.games_played,
            'ppg': self.ppg,
            'rpg': self.rpg,
            'apg': self.apg,
            'spg': self.spg,
            'bpg': self.bpg,
        })
        return data


def season_players(games) -> List[Tuple[str, str]]:
    """Distinct (team, player) pairs across the season, first appearance first."""
    seen = {}
    for game in _as_games(games):
        for evt in game.stats:
            if evt.player and evt.team:
                seen.setdefault((evt.team, evt.player), None)
    return list(seen)


def player_season_stats(games, team: str, player: str) -> Optional[SeasonLine]:
    games = _as_games(games)
    if not games:
        return None

    box = BoxScore(team=team, name=player)
    games_played = 0
    for game in games:
        game_box = BoxScore(team=team, name=player)
        appeared = False
        for evt in game.stats:
            if evt.team != team or evt.player != player:
                continue
            appeared = True
            if evt.is_valid:
                game_box.add(evt.type)
        if appeared:
            games_played += 1
        box.merge(game_box)
    box.finalize()

    line = SeasonLine(box=box, games_played=games_played)
    if games_played:
        line.ppg = _one_decimal(box.points / games_played)
        line.rpg = _one_decimal(box.rebounds / games_played)
        line.apg = _one_decimal(box.assists / games_played)
        line.spg = _one_decimal(box.steals / games_played)
        line.bpg = _one_decimal(box.blocks / games_played)
    return line


def _score(game: Game) -> Tuple[int, int]:
    return team_stats(game.stats, HOME).points, team_stats(game.stats, AWAY).points


def season_record(games) -> Dict[str, int]:
    """Wins and losses for team1. Tied games count as neither."""
    record = {'wins': 0, 'losses': 0}
    for game in _as_games(games):
        ours, theirs = _score(game)
        if ours > theirs:
            record['wins'] += 1
        elif ours < theirs:
            record['losses'] += 1
    return record


def win_percentage(record: Dict[str, int]) -> float:
    decided = record['wins'] + record['losses']
    if decided == 0:
        return 0.0
    return _one_decimal(record['wins'] / decided * 100)


def season_streaks(games) -> Dict:
    """
    Streaks in game order. Anything that is not a win (ties included)
    extends a losing streak.
    """
    current_streak = 0
    longest_win = 0
    longest_lose = 0
    current_type = None

    for game in _as_games(games):
        ours, theirs = _score(game)
        is_win = ours > theirs
        if current_type is None or current_type != is_win:
            if current_type is True:
                longest_win = max(longest_win, current_streak)
            elif current_type is False:
                longest_lose = max(longest_lose, current_streak)
            current_type = is_win
            current_streak = 1
        else:
            current_streak += 1

    if current_type is True:
        longest_win = max(longest_win, current_streak)
    elif current_type is False:
        longest_lose = max(longest_lose, current_streak)

    streak_type = None
    if current_type is not None:
        streak_type = 'W' if current_type else 'L'
    return {
        'longestWinStreak': longest_win,
        'longestLoseStreak': longest_lose,
        'currentStreak': current_streak,
        'currentStreakType': streak_type,
    }


def possessions(ours: BoxScore, theirs: BoxScore) -> float:
    """Possession estimate for both teams combined."""
    return (
        ours.fg_attempts + theirs.fg_attempts
        - (ours.rebounds + theirs.rebounds)
        + (ours.turnovers + theirs.turnovers)
        + 0.4 * (ours.ft_attempts + theirs.ft_attempts)
    )


def season_advanced(games) -> Dict[str, float]:
    """
    Per-game averages of pace and ratings over every game. A game with no
    positive possession estimate contributes zeros.
    """
    totals = {'pace': 0.0, 'offRtg': 0.0, 'defRtg': 0.0, 'netRtg': 0.0}
    games = _as_games(games)
    for game in games:
        ours = team_stats(game.stats, HOME)
        theirs = team_stats(game.stats, AWAY)
        poss = possessions(ours, theirs)
        if poss <= 0:
            continue
        off_rtg = ours.points / poss * 100
        def_rtg = theirs.points / poss * 100
        totals['pace'] += 48 * (poss / 40)
        totals['offRtg'] += off_rtg
        totals['defRtg'] += def_rtg
        totals['netRtg'] += off_rtg - def_rtg

    if not games:
        return totals
    return {key: _one_decimal(value / len(games)) for key, value in totals.items()}


def season_team_averages(games) -> Dict[str, float]:
    """team1 per-game scoring and shooting. Shooting averages each game's percentage."""
    games = _as_games(games)
    averages = {'ppg': 0.0, 'fgPercentage': 0.0, 'threePtPercentage': 0.0,
                'apg': 0.0, 'rpg': 0.0, 'spg': 0.0}
    if not games:
        return averages

    sums = dict.fromkeys(averages, 0.0)
    for game in games:
        box = team_stats(game.stats, HOME)
        sums['ppg'] += box.points
        sums['apg'] += box.assists
        sums['rpg'] += box.rebounds
        sums['spg'] += box.steals
        if box.fg_attempts:
            sums['fgPercentage'] += box.fg_made / box.fg_attempts * 100
        if box.three_pt_attempts:
            sums['threePtPercentage'] += box.three_pt_made / box.three_pt_attempts * 100
    return {key: _one_decimal(value / len(games)) for key, value in sums.items()}


def _naive_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def _parse_created_at(value) -> Optional[datetime]:
    if isinstance(value, datetime):
        return _naive_utc(value)
    if not value:
        return None
    try:
        return _naive_utc(datetime.fromisoformat(str(value).replace('Z', '+00:00')))
    except ValueError:
        return None


def filter_games_by_timeframe(games, timeframe: str, now: Optional[datetime] = None) -> List[Game]:
    """
    Restrict a season to recent games: 'week' (7 days), 'month' (30 days)
    or 'season' (everything). Games without a creation date drop out of the
    week/month views.
    """
    if timeframe not in TIMEFRAMES:
        raise ValueError(f"Unknown timeframe: {timeframe}")
    games = _as_games(games)
    if timeframe == 'season':
        return games

    now = _naive_utc(now) if now else datetime.utcnow()
    cutoff = now - (timedelta(days=7) if timeframe == 'week' else timedelta(days=30))
    recent = []
    for game in games:
        created = _parse_created_at(game.created_at)
        if created is None:
            continue
        if created >= cutoff:
            recent.append(game)
    return recent


@dataclass
class SeasonSummary:
    record: Dict[str, int]
    win_percentage: float
    streaks: Dict
    advanced: Dict[str, float]
    team_averages: Dict[str, float]
    players: List[SeasonLine] = field(default_factory=list)

    def to_dict(self) -> Dict:
        return {
            'record': self.record,
            'winPercentage': self.win_percentage,
            'streaks': self.streaks,
            'advanced': self.advanced,
            'teamAverages': self.team_averages,
            'players': [line.to_dict() for line in self.players],
        }


def season_summary(games) -> SeasonSummary:
    games = _as_games(games)
    record = season_record(games)
    players = [
        player_season_stats(games, team, player)
        for team, player in season_players(games)
    ]
    return SeasonSummary(
        record=record,
        win_percentage=win_percentage(record),
        streaks=season_streaks(games),
        advanced=season_advanced(games),
        team_averages=season_team_averages(games),
        players=[line for line in players if line is not None],
    )
