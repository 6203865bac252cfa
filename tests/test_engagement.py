# tests/test_engagement.py
"""
Testes de curtidas e comentários
"""
import pytest
from sqlalchemy import delete, update

from thankswall import db as _db
from thankswall.errors import Conflict
from thankswall.models import Comment, Like, Thanks
from thankswall.services.engagement_service import EngagementService
from tests.conftest import login


def like_state(app, thanks_id):
    with app.app_context():
        thanks = _db.session.get(Thanks, thanks_id)
        return thanks.like_count, Like.query.filter_by(thanks_id=thanks_id).count()


class TestLikeToggle:
    """Testes do toggle de curtida"""

    def test_requires_login(self, client, thanks):
        resp = client.post(f'/thanks/{thanks.id}/like')
        assert resp.status_code == 401
        assert 'error' in resp.get_json()

    def test_like_then_unlike(self, app, client, bob, thanks):
        login(client, 'bob@test.com')

        resp = client.post(f'/thanks/{thanks.id}/like')
        assert resp.status_code == 200
        assert resp.get_json() == {'liked': True, 'likeCount': 1}
        assert like_state(app, thanks.id) == (1, 1)

        resp = client.post(f'/thanks/{thanks.id}/like')
        assert resp.get_json() == {'liked': False, 'likeCount': 0}
        assert like_state(app, thanks.id) == (0, 0)

    def test_counter_matches_rows_with_many_users(self, app, client, alice, bob, admin_user, thanks):
        clients = {}
        for email in ('alice@test.com', 'bob@test.com', 'admin@test.com'):
            clients[email] = app.test_client()
            login(clients[email], email)

        for email in ('alice@test.com', 'bob@test.com', 'admin@test.com', 'bob@test.com'):
            clients[email].post(f'/thanks/{thanks.id}/like')

        like_count, rows = like_state(app, thanks.id)
        assert like_count == rows == 2

    def test_like_pending_thanks_not_found(self, client, bob, pending_thanks):
        login(client, 'bob@test.com')
        assert client.post(f'/thanks/{pending_thanks.id}/like').status_code == 404

    def test_like_missing_thanks_not_found(self, client, bob):
        login(client, 'bob@test.com')
        assert client.post('/thanks/9999/like').status_code == 404

    def test_feed_shows_liked_by_me(self, app, client, bob, thanks):
        login(client, 'bob@test.com')
        client.post(f'/thanks/{thanks.id}/like')

        item = client.get('/thanks').get_json()['thanks'][0]
        assert item['likedByMe'] is True
        assert item['likeCount'] == 1

        anonymous = app.test_client().get('/thanks').get_json()['thanks'][0]
        assert 'likedByMe' not in anonymous


class TestConcurrentToggle:
    """Toggles concorrentes do mesmo usuário não desajustam o contador"""

    def test_unlike_of_already_removed_like(self, db, monkeypatch, bob, thanks):
        EngagementService.toggle_like(thanks.id, bob.id)
        find_like = EngagementService.find_like

        def find_then_unlike_elsewhere(user_id, thanks_id):
            like = find_like(user_id, thanks_id)
            # Outro request descurte entre a leitura e a remoção
            db.session.execute(delete(Like).where(Like.id == like.id))
            db.session.execute(
                update(Thanks).where(Thanks.id == thanks_id).values(like_count=Thanks.like_count - 1)
            )
            db.session.commit()
            return like

        monkeypatch.setattr(EngagementService, 'find_like', staticmethod(find_then_unlike_elsewhere))

        with pytest.raises(Conflict):
            EngagementService.toggle_like(thanks.id, bob.id)

        db.session.expire_all()
        assert db.session.get(Thanks, thanks.id).like_count == 0
        assert Like.query.filter_by(thanks_id=thanks.id).count() == 0

    def test_duplicate_like_insert(self, db, monkeypatch, bob, thanks):
        EngagementService.toggle_like(thanks.id, bob.id)
        # Leitura feita antes de o outro curtir ser gravado
        monkeypatch.setattr(EngagementService, 'find_like', staticmethod(lambda user_id, thanks_id: None))

        with pytest.raises(Conflict):
            EngagementService.toggle_like(thanks.id, bob.id)

        assert db.session.get(Thanks, thanks.id).like_count == 1
        assert Like.query.filter_by(thanks_id=thanks.id).count() == 1


class TestComments:
    """Testes de comentários"""

    def test_create_comment_starts_pending(self, app, client, bob, thanks):
        login(client, 'bob@test.com')
        resp = client.post(f'/thanks/{thanks.id}/comments', json={'text': '  Concordo totalmente!  '})
        assert resp.status_code == 201
        comment = resp.get_json()['comment']
        assert comment['isApproved'] is False
        assert comment['text'] == 'Concordo totalmente!'
        assert comment['user']['name'] == 'Bruno Lima'

        # Pendente não aparece na listagem pública
        data = client.get(f'/thanks/{thanks.id}/comments').get_json()
        assert data['comments'] == []
        assert data['pagination']['total'] == 0

    def test_approved_comment_is_listed(self, app, client, bob, thanks):
        login(client, 'bob@test.com')
        client.post(f'/thanks/{thanks.id}/comments', json={'text': 'Concordo totalmente!'})
        with app.app_context():
            Comment.query.update({Comment.is_approved: True})
            _db.session.commit()

        data = client.get(f'/thanks/{thanks.id}/comments').get_json()
        assert len(data['comments']) == 1
        assert data['pagination'] == {'page': 1, 'size': 20, 'total': 1, 'totalPages': 1}

        feed_item = client.get('/thanks').get_json()['thanks'][0]
        assert feed_item['commentCount'] == 1

    def test_empty_comment_rejected(self, client, bob, thanks):
        login(client, 'bob@test.com')
        resp = client.post(f'/thanks/{thanks.id}/comments', json={'text': '   '})
        assert resp.status_code == 400
        assert resp.get_json()['field'] == 'text'

    def test_long_comment_rejected(self, client, bob, thanks):
        login(client, 'bob@test.com')
        resp = client.post(f'/thanks/{thanks.id}/comments', json={'text': 'a' * 501})
        assert resp.status_code == 400

    def test_profanity_rejected(self, app, client, bob, thanks):
        login(client, 'bob@test.com')
        resp = client.post(f'/thanks/{thanks.id}/comments', json={'text': 'que atendente imbecil'})
        assert resp.status_code == 400
        assert resp.get_json()['field'] == 'text'
        with app.app_context():
            assert Comment.query.count() == 0

    def test_comment_on_missing_thanks(self, client, bob):
        login(client, 'bob@test.com')
        assert client.post('/thanks/9999/comments', json={'text': 'Oi'}).status_code == 404

    def test_comment_on_pending_thanks(self, client, bob, pending_thanks):
        login(client, 'bob@test.com')
        resp = client.post(f'/thanks/{pending_thanks.id}/comments', json={'text': 'Oi'})
        assert resp.status_code == 404

    def test_comment_requires_login(self, client, thanks):
        assert client.post(f'/thanks/{thanks.id}/comments', json={'text': 'Oi'}).status_code == 401
