import pytest

from shotify.domain.entities.games import Game
from shotify.domain.value_objects.stat_enums import BadgeLevel
from shotify.infra.repo.kv_store.memory import InMemoryKeyValueStore
from shotify.services.game_tracker import GameTracker, stats_key, teams_key


@pytest.fixture
def store():
    return InMemoryKeyValueStore()


@pytest.fixture
def tracker(store):
    tracker = GameTracker('vid123', store)
    tracker.add_player('team1', 'A')
    tracker.add_player('team2', 'X')
    return tracker


def test_requires_video_id(store):
    with pytest.raises(ValueError):
        GameTracker('', store)


def test_every_change_is_persisted(tracker, store):
    tracker.record_stat('FG Made', 'A', 'team1', 12.0)
    tracker.rename_team('team1', 'Ballers')

    saved_stats = store.get(stats_key('vid123'))
    assert len(saved_stats) == 1
    assert saved_stats[0]['uniquePlayerId'] == 'team1|A'
    assert store.get(teams_key('vid123'))['team1'] == {'name': 'Ballers', 'players': ['A']}
    assert tracker.aggregate.get_uncommitted_events() == []


def test_new_tracker_continues_saved_session(tracker, store):
    tracker.record_stat('3PT Made', 'A', 'team1', 30.0)

    resumed = GameTracker('vid123', store)
    assert resumed.team_stats('team1').points == 3
    assert resumed.teams['team2'].players == ['X']


def test_clear_stats_drops_saved_log(tracker, store):
    tracker.record_stat('FG Made', 'A', 'team1', 1.0)
    tracker.clear_stats()
    assert store.get(stats_key('vid123')) is None
    assert tracker.stats == []


def test_undo_and_delete(tracker, store):
    first = tracker.record_stat('FG Made', 'A', 'team1', 1.0)
    tracker.record_stat('Rebound', 'A', 'team1', 2.0)

    assert tracker.undo_last_stat().raw_type == 'Rebound'
    assert tracker.delete_stat(first.id) is True
    assert store.get(stats_key('vid123')) == []
    assert tracker.undo_last_stat() is None


def test_rename_player_moves_the_box_score(tracker):
    tracker.record_stat('FG Made', 'A', 'team1', 1.0)
    tracker.rename_player('team1', 'A', 'Ann')
    assert tracker.player_stats('Ann', 'team1').points == 2
    assert tracker.player_stats('A', 'team1').points == 0


def test_views(tracker):
    tracker.add_player('team1', 'B')
    tracker.record_stat('Assist', 'B', 'team1', 40.0)
    for t in range(10):
        tracker.record_stat('Assist', 'A', 'team1', float(t))

    assert [evt.timestamp for evt in tracker.timeline()][:2] == [0.0, 1.0]
    assert [box.name for box in tracker.players_with_stats()] == ['B', 'A']
    assert tracker.team_leaders('team1')['assists'].players == ['A']

    badges = {badge.name: badge for badge in tracker.badges('A', 'team1')}
    assert badges['Playmaker'].level is BadgeLevel.GOLD


def test_malformed_saved_stats_are_ignored(store):
    store.set(stats_key('vid9'), {'not': 'a list'})
    assert GameTracker('vid9', store).stats == []


def test_continue_saved_game(store, sample_stats, sample_teams):
    game = Game.from_dict({'title': 'Week 3', 'videoId': 'vid7', 'teams': sample_teams, 'stats': sample_stats})
    tracker = GameTracker.continue_game(game, store)

    assert tracker.team_stats('team1').points == 7
    assert tracker.teams['team1'].name == 'Ballers'
    assert len(store.get(stats_key('vid7'))) == len(sample_stats)


def test_to_game(tracker):
    tracker.record_stat('FG Made', 'A', 'team1', 1.0)
    game = tracker.to_game('  Rec league  ')
    assert game.title == 'Rec league'
    assert game.video_id == 'vid123'
    assert len(game.stats) == 1
    with pytest.raises(ValueError):
        tracker.to_game(' ')


def test_session_log_file(store, tmp_path):
    tracker = GameTracker('vidlog', store, log_dir=str(tmp_path))
    tracker.add_player('team1', 'A')
    tracker.record_stat('FG Made', 'A', 'team1', 1.0)
    assert (tmp_path / 'game_vidlog.log').exists()


def test_saved_snapshot_is_unaffected_by_later_changes(tracker):
    tracker.record_stat('FG Made', 'A', 'team1', 1.0)
    game = tracker.to_game('Week 1')

    tracker.rename_player('team1', 'A', 'B')
    tracker.rename_team('team1', 'Ballers')

    assert game.stats[0].player == 'A'
    assert game.stats[0].unique_player_id == 'team1|A'
    assert game.teams['team1'].players == ['A']
    assert game.teams['team1'].name == 'Team 1'


def test_stray_saved_entries_are_skipped(store):
    store.set(stats_key('vid9'), [None, {'type': 'FG Made', 'player': 'A', 'team': 'team1'}])
    tracker = GameTracker('vid9', store)
    assert tracker.team_stats('team1').points == 2
