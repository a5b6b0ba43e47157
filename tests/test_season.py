from datetime import datetime

import pytest

from shotify.domain.stats.season import (
    filter_games_by_timeframe,
    player_season_stats,
    season_advanced,
    season_players,
    season_record,
    season_streaks,
    season_summary,
    season_team_averages,
    win_percentage,
)
from tests.conftest import stat


def game(video_id, stats, created_at=None):
    return {'title': video_id, 'videoId': video_id, 'stats': stats, 'createdAt': created_at}


@pytest.fixture
def season_games(sample_stats):
    win = game('win', sample_stats)
    loss = game('loss', [stat('FG Made', 'A', 'team1'), stat('3PT Made', 'X', 'team2')])
    tie = game('tie', [stat('FG Made', 'B', 'team1'), stat('FG Made', 'X', 'team2')])
    return [win, loss, tie]


def test_record_ignores_ties(season_games):
    record = season_record(season_games)
    assert record == {'wins': 1, 'losses': 1}
    assert win_percentage(record) == 50.0


def test_win_percentage_without_decided_games():
    assert win_percentage({'wins': 0, 'losses': 0}) == 0.0
    assert win_percentage({'wins': 2, 'losses': 1}) == 66.7


def test_streaks_count_ties_as_losses(season_games):
    assert season_streaks(season_games) == {
        'longestWinStreak': 1,
        'longestLoseStreak': 2,
        'currentStreak': 2,
        'currentStreakType': 'L',
    }


def test_streaks_without_games():
    streaks = season_streaks([])
    assert streaks['currentStreak'] == 0
    assert streaks['currentStreakType'] is None


def test_player_season_line(season_games):
    line = player_season_stats(season_games, 'team1', 'A')
    assert line.games_played == 2
    assert line.box.points == 7
    assert line.box.fg_percentage == 100
    assert line.ppg == 3.5

    data = line.to_dict()
    assert data['gamesPlayed'] == 2
    assert data['ppg'] == 3.5
    assert data['name'] == 'A'


def test_player_season_line_without_games():
    assert player_season_stats([], 'team1', 'A') is None


def test_player_absent_all_season():
    line = player_season_stats([game('g', [stat('Steal', 'B')])], 'team1', 'A')
    assert line.games_played == 0
    assert line.ppg == 0


def test_season_players_in_first_appearance_order(season_games):
    assert season_players(season_games) == [('team1', 'A'), ('team1', 'B'), ('team2', 'X')]


def test_advanced_averages_over_every_game():
    played = game('g1', [stat('FG Made', 'A', 'team1'), stat('FG Missed', 'A', 'team1')])
    empty = game('g2', [])
    assert season_advanced([played]) == {'pace': 2.4, 'offRtg': 100.0, 'defRtg': 0.0, 'netRtg': 100.0}
    assert season_advanced([played, empty]) == {'pace': 1.2, 'offRtg': 50.0, 'defRtg': 0.0, 'netRtg': 50.0}


def test_advanced_without_games():
    assert season_advanced([]) == {'pace': 0.0, 'offRtg': 0.0, 'defRtg': 0.0, 'netRtg': 0.0}


def test_team_averages(sample_stats):
    assert season_team_averages([game('g', sample_stats)]) == {
        'ppg': 7.0,
        'fgPercentage': 100.0,
        'threePtPercentage': 100.0,
        'apg': 1.0,
        'rpg': 1.0,
        'spg': 0.0,
    }


def test_filter_games_by_timeframe():
    now = datetime(2026, 10, 19, 12, 0, 0)
    games = [
        game('this-week', [], '2026-10-15T12:00:00Z'),
        game('this-month', [], '2026-10-01T08:30:00'),
        game('summer', [], '2026-08-01T10:00:00'),
        game('undated', []),
    ]

    def ids(timeframe):
        return [g.video_id for g in filter_games_by_timeframe(games, timeframe, now=now)]

    assert ids('week') == ['this-week']
    assert ids('month') == ['this-week', 'this-month']
    assert ids('season') == ['this-week', 'this-month', 'summer', 'undated']


def test_unknown_timeframe():
    with pytest.raises(ValueError):
        filter_games_by_timeframe([], 'decade')


def test_summary(season_games):
    summary = season_summary(season_games).to_dict()
    assert summary['record'] == {'wins': 1, 'losses': 1}
    assert summary['winPercentage'] == 50.0
    assert summary['streaks']['currentStreakType'] == 'L'
    assert [p['name'] for p in summary['players']] == ['A', 'B', 'X']
    assert set(summary['advanced']) == {'pace', 'offRtg', 'defRtg', 'netRtg'}
