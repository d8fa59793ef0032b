"""Tests for player profiles, listing and matchmaking routes."""
import json

from backend.models import AuthSession


def test_list_players_excludes_admins(client, register, admin_headers):
    register(name='Ravi', zone='Patia', skill_level=4)
    register(name='Sam', zone='Jaydev Vihar', skill_level=7)

    res = client.get('/api/players')
    assert res.status_code == 200
    data = json.loads(res.data)
    assert data['count'] == 2
    assert {p['name'] for p in data['players']} == {'Ravi', 'Sam'}


def test_list_players_filters(client, register):
    register(name='Ravi', zone='Patia', skill_level=4)
    register(name='Sam', zone='Jaydev Vihar', skill_level=7)
    register(name='Tia', zone='Patia', skill_level=7)

    by_zone = json.loads(client.get('/api/players?zone=Patia').data)
    assert {p['name'] for p in by_zone['players']} == {'Ravi', 'Tia'}

    by_both = json.loads(client.get('/api/players?zone=Patia&skill=7').data)
    assert [p['name'] for p in by_both['players']] == ['Tia']


def test_get_player(client, register):
    _, player = register(name='Ravi')
    res = client.get(f'/api/players/{player["id"]}')
    assert res.status_code == 200
    assert json.loads(res.data)['player']['name'] == 'Ravi'


def test_get_player_not_found(client):
    res = client.get('/api/players/999')
    assert res.status_code == 404
    assert json.loads(res.data) == {'error': 'Player not found'}


def test_update_own_profile(client, register):
    headers, player = register(name='Ravi')
    res = client.put(f'/api/players/{player["id"]}', json={
        'bio': 'Weekend striker', 'skill_level': 8, 'name': '',
    }, headers=headers)
    assert res.status_code == 200
    updated = json.loads(res.data)['player']
    assert updated['bio'] == 'Weekend striker'
    assert updated['skill_level'] == 8
    assert updated['name'] == 'Ravi'


def test_update_other_profile_forbidden(client, register):
    headers, _ = register(name='Ravi')
    _, other = register(name='Sam')
    res = client.put(f'/api/players/{other["id"]}', json={'bio': 'hacked'}, headers=headers)
    assert res.status_code == 403


def test_admin_can_update_any_profile(client, register, admin_headers):
    _, other = register(name='Sam')
    res = client.put(f'/api/players/{other["id"]}', json={'zone': 'Khandagiri'}, headers=admin_headers)
    assert res.status_code == 200
    assert json.loads(res.data)['player']['zone'] == 'Khandagiri'


def test_update_requires_login(client, register):
    _, player = register()
    res = client.put(f'/api/players/{player["id"]}', json={'bio': 'x'})
    assert res.status_code == 401


def test_update_rejects_bad_skill(client, register):
    headers, player = register()
    res = client.put(f'/api/players/{player["id"]}', json={'skill_level': 0}, headers=headers)
    assert res.status_code == 400


def test_delete_player_admin_only(client, register, admin_headers):
    headers, player = register(name='Ravi')
    res = client.delete(f'/api/players/{player["id"]}', headers=headers)
    assert res.status_code == 403

    res = client.delete(f'/api/players/{player["id"]}', headers=admin_headers)
    assert res.status_code == 200
    assert client.get(f'/api/players/{player["id"]}').status_code == 404
    # Sessions of a deleted player stop resolving.
    assert client.get('/api/auth/me', headers=headers).status_code == 401


def test_delete_unknown_player(client, admin_headers):
    res = client.delete('/api/players/999', headers=admin_headers)
    assert res.status_code == 404


def test_admin_list_all_includes_admins(client, register, admin_headers):
    headers, _ = register(name='Ravi')
    assert client.get('/api/players/admin/all', headers=headers).status_code == 403
    assert client.get('/api/players/admin/all').status_code == 401

    res = client.get('/api/players/admin/all', headers=admin_headers)
    assert res.status_code == 200
    players = json.loads(res.data)['players']
    assert {p['name'] for p in players} == {'Ravi', 'Admin'}


def test_match_scores_and_orders_candidates(client, register, admin_headers):
    _, target = register(name='A', zone='X', skill_level=5)
    register(name='B', zone='X', skill_level=6)   # 0.5*85 + 0.5*100 = 92.5 -> 93
    register(name='C', zone='Y', skill_level=6)   # 0.5*85 + 0.5*40 = 62.5 -> 63
    register(name='D', zone='X', skill_level=5)   # 100

    res = client.get(f'/api/players/match/{target["id"]}')
    assert res.status_code == 200
    data = json.loads(res.data)
    assert data['player']['name'] == 'A'
    scores = [(m['name'], m['match_percent']) for m in data['matches']]
    assert scores == [('D', 100), ('B', 93), ('C', 63)]
    assert all(m['connection_status'] is None for m in data['matches'])


def test_match_reports_viewer_connections(client, register):
    headers, target = register(name='A', zone='X', skill_level=5)
    _, friend = register(name='B', zone='X', skill_level=6)
    register(name='C', zone='X', skill_level=6)

    client.post('/api/connections', json={'to_player_id': friend['id']}, headers=headers)

    data = json.loads(client.get(f'/api/players/match/{target["id"]}', headers=headers).data)
    status_by_name = {m['name']: m['connection_status'] for m in data['matches']}
    assert status_by_name == {'B': 'connected', 'C': None}


def test_match_unknown_player(client):
    assert client.get('/api/players/match/999').status_code == 404


def test_delete_player_with_persisted_sessions(fk_client, fk_register, fk_admin_headers):
    headers, player = fk_register(name='Ravi')
    assert AuthSession.query.filter_by(player_id=player['id']).count() == 1

    res = fk_client.delete(f'/api/players/{player["id"]}', headers=fk_admin_headers)
    assert res.status_code == 200
    assert AuthSession.query.filter_by(player_id=player['id']).count() == 0
    assert fk_client.get('/api/auth/me', headers=headers).status_code == 401
    assert fk_client.get('/api/auth/me', headers=fk_admin_headers).status_code == 200


def test_delete_referenced_player_conflicts(fk_client, fk_register, fk_admin_headers):
    a_headers, _ = fk_register(name='Ravi')
    b_headers, b = fk_register(name='Sam')
    fk_client.post('/api/connections', json={'to_player_id': b['id']}, headers=a_headers)

    res = fk_client.delete(f'/api/players/{b["id"]}', headers=fk_admin_headers)
    assert res.status_code == 409
    assert json.loads(res.data)['error'] == 'Player still has dependent records'
    assert fk_client.get(f'/api/players/{b["id"]}').status_code == 200
    # Token removal rolled back with the failed delete.
    assert fk_client.get('/api/auth/me', headers=b_headers).status_code == 200
