def _create(client, num_teams=3):
    res = client.post('/api/game/create', json={'num_teams': num_teams})
    assert res.status_code == 201
    return res.get_json()


def test_index_and_palette(client):
    assert client.get('/').status_code == 200
    data = client.get('/api/teams').get_json()
    assert data['teams'][:3] == ['Red', 'Blue', 'Green']
    assert data['max_teams'] == 8
    assert data['colors']['Blue'] == '#3b82f6'


def test_create_session(client):
    data = _create(client)
    assert data['teams'] == ['Red', 'Blue', 'Green']
    assert len(data['session_id']) == 4
    assert set(data['colors']) == {'Red', 'Blue', 'Green'}


def test_create_session_validation(client):
    res = client.post('/api/game/create', json={})
    assert res.status_code == 400
    for bad in (0, 9, 'two'):
        res = client.post('/api/game/create', json={'num_teams': bad})
        assert res.status_code == 400
        assert res.get_json()['code'] == 'invalid_team_count'


def test_state_of_new_session(client):
    sid = _create(client, 2)['session_id']
    state = client.get(f'/api/game/state/{sid}').get_json()
    assert state == {
        'session_id': sid,
        'teams': ['Red', 'Blue'],
        'buzzes': [],
        'start_time': None,
        'state': 'armed',
        'colors': {'Red': '#ef4444', 'Blue': '#3b82f6'},
    }


def test_state_of_unknown_session(client):
    res = client.get('/api/game/state/ZZZZ')
    assert res.status_code == 404
    assert res.get_json() == {'error': 'Game not found', 'code': 'session_not_found'}


def test_buzz_flow_and_reset(client):
    sid = _create(client)['session_id']

    res = client.post('/api/game/buzz', json={'session_id': sid, 'name': 'Ann', 'team': 'Blue'})
    assert res.status_code == 200
    assert res.get_json() == {'success': True, 'buzz': {'team': 'Blue', 'name': 'Ann', 'relative_time': 0}}

    res = client.post('/api/game/buzz', json={'session_id': sid, 'name': 'Bo', 'team': 'Red'})
    assert res.get_json()['buzz']['relative_time'] >= 0

    state = client.get(f'/api/game/state/{sid}').get_json()
    assert state['state'] == 'locked'
    assert [b['name'] for b in state['buzzes']] == ['Ann', 'Bo']
    assert state['start_time'] is not None

    res = client.post('/api/game/reset', json={'session_id': sid})
    assert res.get_json() == {'success': True}
    state = client.get(f'/api/game/state/{sid}').get_json()
    assert state['buzzes'] == [] and state['start_time'] is None and state['state'] == 'armed'


def test_buzz_errors(client):
    sid = _create(client, 2)['session_id']
    res = client.post('/api/game/buzz', json={'session_id': sid, 'name': 'Ann'})
    assert res.status_code == 400

    res = client.post('/api/game/buzz', json={'session_id': sid, 'name': 'Ann', 'team': 'Green'})
    assert res.status_code == 400
    assert res.get_json()['code'] == 'invalid_team'

    res = client.post('/api/game/buzz', json={'session_id': sid, 'name': 'A' * 21, 'team': 'Red'})
    assert res.status_code == 400
    assert res.get_json()['code'] == 'invalid_name'

    res = client.post('/api/game/buzz', json={'session_id': 'ZZZZ', 'name': 'Ann', 'team': 'Red'})
    assert res.status_code == 404

    assert client.get(f'/api/game/state/{sid}').get_json()['buzzes'] == []


def test_reset_errors(client):
    assert client.post('/api/game/reset', json={}).status_code == 400
    res = client.post('/api/game/reset', json={'session_id': 'ZZZZ'})
    assert res.status_code == 404
    assert res.get_json()['code'] == 'session_not_found'


def test_busy_session_answers_409(flask_app, client):
    sid = _create(client, 2)['session_id']
    manager = flask_app.extensions['session_manager']
    manager.lock_timeout = 0.05
    with manager.locks.hold(sid, 1.0):
        res = client.post('/api/game/buzz', json={'session_id': sid, 'name': 'Ann', 'team': 'Red'})
        assert res.status_code == 409
        assert res.get_json()['code'] == 'session_busy'
        res = client.post('/api/game/reset', json={'session_id': sid})
        assert res.status_code == 409
    assert client.get(f'/api/game/state/{sid}').get_json()['buzzes'] == []


def test_locked_round_answers_409():
    from conftest import TestConfig
    from buzzboard import create_app, db

    class LockingConfig(TestConfig):
        LOCK_ON_FIRST_BUZZ = True

    application = create_app(LockingConfig)
    with application.app_context():
        db.create_all()
        client = application.test_client()
        sid = _create(client, 2)['session_id']
        assert client.post('/api/game/buzz', json={'session_id': sid, 'name': 'Ann', 'team': 'Red'}).status_code == 200

        res = client.post('/api/game/buzz', json={'session_id': sid, 'name': 'Bo', 'team': 'Blue'})
        assert res.status_code == 409
        assert res.get_json()['code'] == 'round_locked'
        assert [b['name'] for b in client.get(f'/api/game/state/{sid}').get_json()['buzzes']] == ['Ann']

        client.post('/api/game/reset', json={'session_id': sid})
        res = client.post('/api/game/buzz', json={'session_id': sid, 'name': 'Bo', 'team': 'Blue'})
        assert res.status_code == 200
        db.session.remove()
        db.drop_all()
