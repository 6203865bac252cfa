# thankswall/services/rate_limiter.py
"""
Rate limiting por janela fixa (identificador + ação)

O estado padrão fica em memória do processo: é perdido ao reiniciar e não é
compartilhado entre instâncias. Para rodar com várias instâncias, registre
outro RateLimitStore (ex.: contador em um serviço compartilhado).
"""
import logging
import threading
import time
from collections import namedtuple

from flask import current_app

from thankswall.errors import RateLimited

logger = logging.getLogger(__name__)

RateLimitPolicy = namedtuple('RateLimitPolicy', ['max_requests', 'window_ms'])
RateLimitResult = namedtuple('RateLimitResult', ['success', 'limit', 'remaining', 'reset_at'])

# Políticas pré-definidas
RATE_LIMITS = {
    'THANKS_CREATE': RateLimitPolicy(max_requests=10, window_ms=60 * 1000),
    'COMMENT_CREATE': RateLimitPolicy(max_requests=30, window_ms=60 * 1000),
    'LIKE_TOGGLE': RateLimitPolicy(max_requests=100, window_ms=60 * 1000),
}


class RateLimitEntry:
    __slots__ = ('count', 'reset_at')

    def __init__(self, count, reset_at):
        self.count = count
        self.reset_at = reset_at


class RateLimitStore:
    """Interface do armazenamento de contadores"""

    def get(self, key):
        raise NotImplementedError

    def set(self, key, entry):
        raise NotImplementedError

    def sweep(self, now_ms):
        """Remove janelas expiradas, retorna quantas foram removidas"""
        raise NotImplementedError


class MemoryRateLimitStore(RateLimitStore):
    """Contadores em um dict do processo"""

    def __init__(self):
        self._entries = {}

    def get(self, key):
        return self._entries.get(key)

    def set(self, key, entry):
        self._entries[key] = entry

    def sweep(self, now_ms):
        expired = [key for key, entry in self._entries.items() if entry.reset_at < now_ms]
        for key in expired:
            del self._entries[key]
        return len(expired)

    def __len__(self):
        return len(self._entries)


class RateLimiter:
    """Limitador de janela fixa com store plugável"""

    def __init__(self, store=None, enabled=True, sweep_interval_ms=5 * 60 * 1000, clock=None):
        self.store = store if store is not None else MemoryRateLimitStore()
        self.enabled = enabled
        self.sweep_interval_ms = sweep_interval_ms
        self._clock = clock or (lambda: int(time.time() * 1000))
        self._lock = threading.Lock()
        self._last_sweep = self._clock()

    def check(self, identifier, action, policy):
        """
        Registra uma requisição e informa se ela está dentro do limite

        Args:
            identifier: ID do usuário (ou IP)
            action: nome da ação, ex. 'comment:create'
            policy: RateLimitPolicy

        Returns:
            RateLimitResult
        """
        now = self._clock()
        if not self.enabled:
            return RateLimitResult(True, policy.max_requests, policy.max_requests, now + policy.window_ms)

        key = f"{identifier}:{action}"
        with self._lock:
            self._maybe_sweep(now)
            entry = self.store.get(key)

            # Sem registro ou janela expirada: nova janela
            if entry is None or entry.reset_at < now:
                entry = RateLimitEntry(1, now + policy.window_ms)
                self.store.set(key, entry)
                return RateLimitResult(True, policy.max_requests, policy.max_requests - 1, entry.reset_at)

            if entry.count >= policy.max_requests:
                return RateLimitResult(False, policy.max_requests, 0, entry.reset_at)

            entry.count += 1
            self.store.set(key, entry)
            return RateLimitResult(True, policy.max_requests, policy.max_requests - entry.count, entry.reset_at)

    def enforce(self, identifier, action, policy, message=None):
        """Como check(), mas levanta RateLimited quando o limite estoura"""
        result = self.check(identifier, action, policy)
        if not result.success:
            logger.warning(f"Rate limit excedido: {identifier}:{action}")
            raise RateLimited(result, message)
        return result

    def _maybe_sweep(self, now):
        if now - self._last_sweep < self.sweep_interval_ms:
            return
        removed = self.store.sweep(now)
        self._last_sweep = now
        if removed:
            logger.debug(f"Rate limiter: {removed} janelas expiradas removidas")


def init_rate_limiter(app, store=None):
    """Cria o limitador da aplicação e registra em app.extensions"""
    limiter = RateLimiter(
        store=store,
        enabled=app.config.get('RATELIMIT_ENABLED', True),
        sweep_interval_ms=app.config.get('RATELIMIT_SWEEP_INTERVAL_MS', 5 * 60 * 1000),
    )
    app.extensions['rate_limiter'] = limiter
    return limiter


def get_rate_limiter():
    return current_app.extensions['rate_limiter']
