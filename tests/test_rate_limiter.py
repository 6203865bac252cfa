# tests/test_rate_limiter.py
"""
Testes do rate limiter (janela fixa em memória)
"""
import pytest
from thankswall.errors import RateLimited
from thankswall.services.rate_limiter import (
    MemoryRateLimitStore, RateLimiter, RateLimitPolicy, RATE_LIMITS,
)
from tests.conftest import login


class FakeClock:
    """Relógio controlado pelo teste (milissegundos)"""

    def __init__(self, now=1_000_000):
        self.now = now

    def __call__(self):
        return self.now


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def limiter(clock):
    return RateLimiter(clock=clock)


POLICY = RateLimitPolicy(max_requests=3, window_ms=1000)


class TestFixedWindow:
    """Testes da contagem por janela"""

    def test_allows_exactly_max_requests(self, limiter):
        results = [limiter.check('1', 'thanks:create', POLICY) for _ in range(3)]
        assert all(r.success for r in results)
        assert [r.remaining for r in results] == [2, 1, 0]

    def test_rejects_request_over_limit(self, limiter, clock):
        for _ in range(3):
            limiter.check('1', 'thanks:create', POLICY)
        result = limiter.check('1', 'thanks:create', POLICY)
        assert result.success is False
        assert result.remaining == 0
        assert result.limit == 3
        assert result.reset_at == clock.now + 1000

    def test_rejection_does_not_extend_window(self, limiter, clock):
        first = limiter.check('1', 'a', POLICY)
        for _ in range(5):
            limiter.check('1', 'a', POLICY)
        clock.now += 500
        assert limiter.check('1', 'a', POLICY).reset_at == first.reset_at

    def test_still_blocked_at_reset_instant(self, limiter, clock):
        for _ in range(4):
            result = limiter.check('1', 'a', POLICY)
        clock.now = result.reset_at
        assert limiter.check('1', 'a', POLICY).success is False

    def test_new_window_after_reset(self, limiter, clock):
        for _ in range(4):
            result = limiter.check('1', 'a', POLICY)
        clock.now = result.reset_at + 1

        results = [limiter.check('1', 'a', POLICY) for _ in range(3)]
        assert all(r.success for r in results)
        assert results[0].remaining == 2
        assert results[0].reset_at == clock.now + 1000
        assert limiter.check('1', 'a', POLICY).success is False

    def test_keys_are_independent(self, limiter):
        for _ in range(3):
            limiter.check('1', 'a', POLICY)
        assert limiter.check('1', 'a', POLICY).success is False
        assert limiter.check('2', 'a', POLICY).success is True
        assert limiter.check('1', 'b', POLICY).success is True

    def test_disabled_limiter_always_allows(self, clock):
        limiter = RateLimiter(enabled=False, clock=clock)
        results = [limiter.check('1', 'a', POLICY) for _ in range(10)]
        assert all(r.success for r in results)
        assert len(limiter.store) == 0

    def test_predefined_policies(self):
        assert RATE_LIMITS['THANKS_CREATE'] == RateLimitPolicy(10, 60000)
        assert RATE_LIMITS['COMMENT_CREATE'] == RateLimitPolicy(30, 60000)
        assert RATE_LIMITS['LIKE_TOGGLE'] == RateLimitPolicy(100, 60000)


class TestSweep:
    """Limpeza periódica das janelas expiradas"""

    def test_sweep_removes_expired_entries(self, clock):
        store = MemoryRateLimitStore()
        limiter = RateLimiter(store=store, sweep_interval_ms=100, clock=clock)
        limiter.check('1', 'a', POLICY)
        assert len(store) == 1

        clock.now += 5000
        limiter.check('2', 'a', POLICY)
        assert store.get('1:a') is None
        assert store.get('2:a') is not None
        assert len(store) == 1

    def test_sweep_waits_for_interval(self, clock):
        store = MemoryRateLimitStore()
        limiter = RateLimiter(store=store, sweep_interval_ms=60 * 1000, clock=clock)
        limiter.check('1', 'a', POLICY)
        clock.now += 5000
        limiter.check('2', 'a', POLICY)
        # Janela de '1:a' expirou, mas a varredura ainda não rodou
        assert len(store) == 2


class TestEnforce:
    """Testes do enforce (exceção 429)"""

    def test_raises_rate_limited(self, limiter):
        for _ in range(3):
            limiter.enforce('1', 'a', POLICY)
        with pytest.raises(RateLimited) as exc:
            limiter.enforce('1', 'a', POLICY, 'Calma!')
        error = exc.value
        assert error.status_code == 429
        assert error.message == 'Calma!'
        assert error.to_dict()['resetAt'] == error.result.reset_at
        assert error.headers()['X-RateLimit-Limit'] == '3'
        assert error.headers()['X-RateLimit-Remaining'] == '0'


class TestRateLimitedRoutes:
    """429 nas rotas quando o limite estoura"""

    def test_thanks_creation_limited_to_ten_per_minute(self, app, client, alice, company, rate_limited):
        login(client, 'alice@test.com')
        payload = {'companyId': company.id, 'text': 'Muito obrigado pelo pão fresquinho!'}
        for _ in range(10):
            resp = client.post('/thanks', json=payload)
            assert resp.status_code == 201

        resp = client.post('/thanks', json=payload)
        assert resp.status_code == 429
        data = resp.get_json()
        assert 'error' in data
        assert 'resetAt' in data
        assert resp.headers['X-RateLimit-Limit'] == '10'
        assert resp.headers['X-RateLimit-Remaining'] == '0'
        assert resp.headers['X-RateLimit-Reset'] == str(data['resetAt'])

    def test_comment_limit_is_per_user(self, app, client, alice, bob, thanks, rate_limited):
        login(client, 'alice@test.com')
        for _ in range(30):
            assert client.post(f'/thanks/{thanks.id}/comments', json={'text': 'Concordo!'}).status_code == 201
        assert client.post(f'/thanks/{thanks.id}/comments', json={'text': 'Concordo!'}).status_code == 429

        other = app.test_client()
        login(other, 'bob@test.com')
        assert other.post(f'/thanks/{thanks.id}/comments', json={'text': 'Eu também!'}).status_code == 201
