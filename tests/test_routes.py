import pytest

from tests.conftest import stat

USER = {'X-User-Id': 'user1'}
OTHER = {'X-User-Id': 'user2'}


@pytest.fixture
def saved_game(client, sample_stats, sample_teams):
    payload = {'title': 'Week 3', 'videoId': 'vid123abc', 'teams': sample_teams, 'stats': sample_stats}
    response = client.post('/stats/saveGame', json=payload, headers=USER)
    assert response.status_code == 201
    return response.json()


def test_identity_required(client):
    assert client.get('/stats/savedGames').status_code == 401
    assert client.get('/seasons').status_code == 401


def test_save_and_list_games(client, saved_game, sample_stats):
    assert saved_game['statsCount'] == len(sample_stats)
    assert saved_game['videoId'] == 'vid123abc'

    games = client.get('/stats/savedGames', headers=USER).json()
    assert len(games) == 1
    assert games[0]['videoUrl'] == 'https://www.youtube.com/watch?v=vid123abc'
    assert games[0]['stats'][0]['uniquePlayerId'] == 'team1|A'
    assert client.get('/stats/savedGames', headers=OTHER).json() == []


def test_save_game_validation(client, sample_teams):
    payload = {'title': 'Empty', 'videoId': 'v', 'teams': sample_teams, 'stats': []}
    assert client.post('/stats/saveGame', json=payload, headers=USER).status_code == 400

    payload = {'title': 'No teams', 'videoId': 'v', 'stats': [stat('FG Made')]}
    assert client.post('/stats/saveGame', json=payload, headers=USER).status_code == 400


def test_get_and_delete_game(client, saved_game):
    assert client.get('/stats/games/vid123abc', headers=USER).json()['title'] == 'Week 3'
    assert client.get('/stats/games/vid123abc', headers=OTHER).status_code == 404

    assert client.delete('/stats/deleteGame/vid123abc', headers=OTHER).status_code == 404
    assert client.delete('/stats/deleteGame/vid123abc', headers=USER).status_code == 200
    assert client.get('/stats/games/vid123abc', headers=USER).status_code == 404


def test_share_view_and_copy(client, saved_game):
    share = client.post('/stats/shareGame/vid123abc', headers=USER).json()
    assert share['shareUrl'].endswith(f"/shared/{share['shareId']}")

    shared = client.get(f"/stats/shared/{share['shareId']}")
    assert shared.status_code == 200
    assert shared.json()['isShared'] is True

    copied = client.post(f"/stats/saveSharedGame/{share['shareId']}", headers=OTHER)
    assert copied.status_code == 201
    assert copied.json()['title'] == 'Week 3 (Copy)'

    again = client.post(f"/stats/saveSharedGame/{share['shareId']}", headers=OTHER)
    assert again.status_code == 409

    assert client.get('/stats/shared/nope').status_code == 404
    assert client.post('/stats/shareGame/nope', headers=USER).status_code == 404


def test_season_crud_and_summary(client, saved_game):
    bad = client.post('/seasons', json={'name': 'Fall', 'gameIds': []}, headers=USER)
    assert bad.status_code == 400

    created = client.post('/seasons', json={'name': 'Fall', 'gameIds': ['vid123abc']}, headers=USER)
    assert created.status_code == 201
    season_id = created.json()['id']

    assert [s['name'] for s in client.get('/seasons', headers=USER).json()] == ['Fall']
    assert client.get(f'/seasons/{season_id}', headers=OTHER).status_code == 404

    renamed = client.put(f'/seasons/{season_id}', json={'name': 'Fall League'}, headers=USER)
    assert renamed.json()['name'] == 'Fall League'
    assert renamed.json()['gameIds'] == ['vid123abc']

    summary = client.get(f'/seasons/{season_id}/summary', headers=USER).json()
    assert summary['gameCount'] == 1
    assert summary['record'] == {'wins': 1, 'losses': 0}
    assert summary['teamAverages']['ppg'] == 7.0

    assert client.get(f'/seasons/{season_id}/summary?timeframe=decade', headers=USER).status_code == 400

    assert client.delete(f'/seasons/{season_id}', headers=USER).status_code == 200
    assert client.delete(f'/seasons/{season_id}', headers=USER).status_code == 404


def test_analyze_game(client, sample_stats, sample_teams):
    response = client.post('/analysis/game', json={'teams': sample_teams, 'stats': sample_stats})
    assert response.status_code == 200
    report = response.json()

    team1 = report['teams']['team1']
    assert team1['name'] == 'Ballers'
    assert team1['totals']['points'] == 7
    assert [p['name'] for p in team1['players']] == ['A', 'B']
    assert team1['leaders']['points'] == {'value': 5, 'players': ['A']}
    assert report['teams']['team2']['players'][0]['uniquePlayerId'] == 'team2|X'


def test_analyze_game_adds_unlisted_players(client):
    response = client.post('/analysis/game', json={'stats': [stat('Steal', 'Ghost', 'team2')]})
    players = response.json()['teams']['team2']['players']
    assert [p['name'] for p in players] == ['Ghost']


def test_analyze_game_with_infinite_timestamp(client):
    body = '{"stats": [{"type": "FG Made", "player": "A", "team": "team1", "timestamp": Infinity}]}'
    response = client.post('/analysis/game', content=body, headers={'Content-Type': 'application/json'})
    assert response.status_code == 200
    assert response.json()['teams']['team1']['totals']['points'] == 2


def test_badges_endpoint(client):
    response = client.post('/analysis/badges', json={'stats': {'assists': 10, 'turnovers': 0}})
    assert response.status_code == 200
    names = {badge['name']: badge['level'] for badge in response.json()}
    assert names == {'MVP': 'Silver', 'Playmaker': 'Gold'}


def test_unexpected_repository_failure_is_a_500(client, mocker):
    from shotify.infra.repo.game_repo import GameRepository

    mocker.patch.object(GameRepository, 'list_games', side_effect=RuntimeError("db down"))
    response = client.get('/stats/savedGames', headers=USER)
    assert response.status_code == 500
    assert response.json()['detail'] == "Failed to fetch saved games"


def test_save_failure_rolls_back(client, mocker, sample_stats, sample_teams):
    from shotify.infra.repo.game_repo import GameRepository

    mocker.patch.object(GameRepository, '_insert_stats', side_effect=RuntimeError("disk full"))
    payload = {'title': 'Week 3', 'videoId': 'vid9', 'teams': sample_teams, 'stats': sample_stats}
    assert client.post('/stats/saveGame', json=payload, headers=USER).status_code == 500

    mocker.stopall()
    assert client.get('/stats/savedGames', headers=USER).json() == []
