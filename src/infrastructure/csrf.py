"""Double-submit CSRF protection for mutating requests."""

import hmac
import logging
import secrets

from domain.exceptions import CsrfError
from infrastructure.key_store import KeyedStore, MemoryStore
from infrastructure.settings import CSRF_ENABLED, CSRF_TOKEN_TTL_SECONDS

logger = logging.getLogger(__name__)

CSRF_HEADER = "X-CSRF-Token"
SAFE_METHODS = {"GET", "HEAD", "OPTIONS"}


class CsrfProtection:
    def __init__(self, store: KeyedStore, enabled: bool = False, ttl: int = CSRF_TOKEN_TTL_SECONDS):
        self.store = store
        self.enabled = enabled
        self.ttl = ttl

    def issue(self, key: str) -> str:
        """Generate a token for key; replaces any previous one."""
        token = secrets.token_hex(32)
        self.store.set(f"csrf:{key}", token, ttl=self.ttl)
        return token

    def verify(self, key: str, token: str | None) -> None:
        stored = self.store.get(f"csrf:{key}")
        if not token or not stored or not hmac.compare_digest(token, stored):
            logger.warning("CSRF token rejected for %s", key)
            raise CsrfError("Invalid or missing CSRF token")

    def clear(self) -> int:
        return self.store.clear()


csrf_protection = CsrfProtection(MemoryStore(), enabled=CSRF_ENABLED)
