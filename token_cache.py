# Filename: token_cache.py

import logging
import time
from typing import Callable, Dict, List

logger = logging.getLogger("TokenCache")


class TokenCache:
    """In-memory record of transaction signatures the poller already handled."""

    def __init__(self, max_lifetime: int = 3600, max_entries: int = 5000,
                 clock: Callable[[], float] = time.time):
        self.max_lifetime = max_lifetime  # 1 hour
        self.max_entries = max_entries
        self._clock = clock
        self.cache: Dict[str, float] = {}  # signature -> expires_at

    def should_process(self, key: str) -> bool:
        expires_at = self.cache.get(key)
        return expires_at is None or expires_at <= self._clock()

    def mark_processed(self, key: str):
        self.cache[key] = self._clock() + self.max_lifetime
        if len(self.cache) > self.max_entries:
            self.cleanup_expired_tokens()
        if len(self.cache) > self.max_entries:
            # drop the entries closest to expiry
            oldest = sorted(self.cache.items(), key=lambda kv: kv[1])[: len(self.cache) - self.max_entries]
            for k, _ in oldest:
                self.cache.pop(k, None)

    def get_ready_for_purge(self) -> List[str]:
        now = self._clock()
        return [key for key, expires_at in self.cache.items() if now >= expires_at]

    def cleanup_expired_tokens(self):
        expired = self.get_ready_for_purge()
        for key in expired:
            self.cache.pop(key, None)
        if expired:
            logger.debug(f"[CACHE] Removed {len(expired)} expired entries")

    def __len__(self) -> int:
        return len(self.cache)
