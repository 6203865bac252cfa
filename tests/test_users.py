# tests/test_users.py
"""
Testes de cadastro, login, token de API, perfil e seguidores
"""
from thankswall import db as _db
from thankswall.models import User, UserFollow
from tests.conftest import login, logout, make_thanks

SIGNUP = {'name': 'Carla Dias', 'email': 'Carla@Test.com', 'password': 'segredo1'}


class TestSignup:
    """POST /auth/signup"""

    def test_signup_logs_in(self, app, client):
        resp = client.post('/auth/signup', json=SIGNUP)
        assert resp.status_code == 201
        user = resp.get_json()['user']
        assert user['email'] == 'carla@test.com'
        assert user['isAdmin'] is False

        assert client.get('/users/me').get_json()['email'] == 'carla@test.com'
        with app.app_context():
            stored = User.query.filter_by(email='carla@test.com').one()
            assert stored.password_hash != 'segredo1'
            assert stored.check_password('segredo1')

    def test_duplicate_email(self, client, alice):
        resp = client.post('/auth/signup', json=dict(SIGNUP, email='ALICE@test.com'))
        assert resp.status_code == 409

    def test_short_password(self, client):
        resp = client.post('/auth/signup', json=dict(SIGNUP, password='123'))
        assert resp.status_code == 400
        assert resp.get_json()['field'] == 'password'

    def test_invalid_email(self, client):
        resp = client.post('/auth/signup', json=dict(SIGNUP, email='carla'))
        assert resp.status_code == 400
        assert resp.get_json()['field'] == 'email'

    def test_admin_email_flagged(self, client):
        resp = client.post('/auth/signup', json=dict(SIGNUP, email='admin@test.com'))
        assert resp.get_json()['user']['isAdmin'] is True


class TestLogin:
    """Login, logout e token Bearer"""

    def test_login_and_logout(self, client, alice):
        resp = login(client, 'alice@test.com')
        assert resp.status_code == 200
        assert resp.get_json()['user']['name'] == 'Alice Souza'
        assert client.get('/users/me').status_code == 200

        assert logout(client).status_code == 200
        assert client.get('/users/me').status_code == 401

    def test_wrong_password(self, client, alice):
        resp = login(client, 'alice@test.com', 'errada123')
        assert resp.status_code == 401
        assert client.get('/users/me').status_code == 401

    def test_unknown_email(self, client):
        assert login(client, 'ninguem@test.com').status_code == 401

    def test_email_case_insensitive(self, client, alice):
        assert login(client, 'ALICE@TEST.COM').status_code == 200

    def test_bearer_token(self, app, client, alice):
        resp = client.post('/auth/token', json={'email': 'alice@test.com', 'password': 'senha123'})
        assert resp.status_code == 200
        token = resp.get_json()['token']

        fresh = app.test_client()
        me = fresh.get('/users/me', headers={'Authorization': f'Bearer {token}'})
        assert me.status_code == 200
        assert me.get_json()['id'] == alice.id

    def test_token_from_session(self, client, alice):
        login(client, 'alice@test.com')
        assert client.post('/auth/token').status_code == 200

    def test_token_bad_credentials(self, client, alice):
        resp = client.post('/auth/token', json={'email': 'alice@test.com', 'password': 'errada123'})
        assert resp.status_code == 401

    def test_invalid_bearer(self, client):
        resp = client.get('/users/me', headers={'Authorization': 'Bearer invalido'})
        assert resp.status_code == 401


class TestProfile:
    """GET/PATCH /users/me e perfil público"""

    def test_update_profile(self, client, alice):
        login(client, 'alice@test.com')
        resp = client.patch('/users/me', json={
            'name': '  Alice S.  ',
            'bio': 'Confeiteira',
            'website': 'https://alice.dev',
            'location': '',
        })
        assert resp.status_code == 200
        data = resp.get_json()
        assert data['name'] == 'Alice S.'
        assert data['bio'] == 'Confeiteira'
        assert data['website'] == 'https://alice.dev'
        assert data['location'] is None

    def test_name_too_short(self, client, alice):
        login(client, 'alice@test.com')
        resp = client.patch('/users/me', json={'name': 'A'})
        assert resp.status_code == 400
        assert resp.get_json()['field'] == 'name'

    def test_invalid_website(self, client, alice):
        login(client, 'alice@test.com')
        resp = client.patch('/users/me', json={'name': 'Alice', 'website': 'alice.dev'})
        assert resp.status_code == 400
        assert resp.get_json()['field'] == 'website'

    def test_public_profile_stats(self, app, client, alice, bob, company):
        make_thanks(app, alice, company=company)
        make_thanks(app, alice, target_user=bob)
        make_thanks(app, bob, target_user=alice, is_approved=False)

        data = client.get(f'/users/{alice.id}').get_json()
        assert data['name'] == 'Alice Souza'
        assert 'email' not in data
        assert data['stats'] == {'thanksGiven': 2, 'thanksReceived': 0, 'followers': 0, 'following': 0}

        bob_data = client.get(f'/users/{bob.id}').get_json()
        assert bob_data['stats']['thanksReceived'] == 1

    def test_unknown_user(self, client):
        assert client.get('/users/9999').status_code == 404


class TestUserFollow:
    """GET/POST/DELETE /users/<id>/follow"""

    def test_follow_cycle(self, app, client, alice, bob):
        assert client.get(f'/users/{alice.id}/follow').get_json() == {'isFollowing': False}

        login(client, 'bob@test.com')
        assert client.post(f'/users/{alice.id}/follow').status_code == 201
        assert client.get(f'/users/{alice.id}/follow').get_json() == {'isFollowing': True}
        assert client.post(f'/users/{alice.id}/follow').status_code == 409

        stats = client.get(f'/users/{alice.id}').get_json()['stats']
        assert stats['followers'] == 1

        assert client.delete(f'/users/{alice.id}/follow').status_code == 200
        assert client.delete(f'/users/{alice.id}/follow').status_code == 404
        with app.app_context():
            assert UserFollow.query.count() == 0

    def test_cannot_follow_self(self, client, alice):
        login(client, 'alice@test.com')
        assert client.post(f'/users/{alice.id}/follow').status_code == 400

    def test_follow_unknown_user(self, client, alice):
        login(client, 'alice@test.com')
        assert client.post('/users/9999/follow').status_code == 404

    def test_follow_requires_login(self, client, alice):
        assert client.post(f'/users/{alice.id}/follow').status_code == 401


class TestTopUsers:
    """GET /top/users"""

    def test_ranking_by_likes(self, app, client, alice, bob, company):
        make_thanks(app, alice, company=company, like_count=2)
        make_thanks(app, alice, company=company, like_count=1)
        make_thanks(app, bob, company=company, like_count=7)
        make_thanks(app, bob, company=company, like_count=50, is_approved=False)

        data = client.get('/top/users').get_json()
        ranking = [(u['name'], u['totalLikes'], u['thanksCount']) for u in data['users']]
        assert ranking == [('Bruno Lima', 7, 1), ('Alice Souza', 3, 2)]
        assert 'email' not in data['users'][0]

    def test_admin_flag_persisted(self, app, admin_user):
        with app.app_context():
            assert _db.session.get(User, admin_user.id).is_admin is True
