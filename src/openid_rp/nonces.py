"""
Replay protection for OpenID positive assertions.

Every accepted ``openid.response_nonce`` is remembered so the same assertion
cannot be used to log in twice. The cache is bounded: once ``capacity``
entries are held, the oldest inserted nonce is forgotten. Eviction is by
insertion order only; seeing a nonce again never extends its lifetime.
"""
from __future__ import annotations

import logging
import threading
from collections import OrderedDict
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import List

from openid_rp.settings.config import MAX_OLD_NONCES

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NonceRecord:
    value: str
    observed_at: datetime


class NonceCache:
    """Bounded, insertion-ordered set of nonces with atomic insert-if-absent."""

    def __init__(self, capacity: int = MAX_OLD_NONCES) -> None:
        if capacity < 1:
            raise ValueError("capacity must be a positive integer")
        self._capacity = capacity
        self._entries: OrderedDict[str, NonceRecord] = OrderedDict()
        self._lock = threading.Lock()

    @property
    def capacity(self) -> int:
        return self._capacity

    def add(self, nonce: str) -> bool:
        """Remember ``nonce``.

        Returns ``True`` when the nonce had not been seen (it is now stored)
        and ``False`` when it is already present, in which case nothing
        changes. Callers must treat ``False`` as a replay.
        """
        with self._lock:
            if nonce in self._entries:
                return False
            self._entries[nonce] = NonceRecord(nonce, datetime.now(timezone.utc))
            evicted = 0
            while len(self._entries) > self._capacity:
                self._entries.popitem(last=False)
                evicted += 1
        if evicted:
            logger.debug("evicted %d oldest nonce(s)", evicted)
        return True

    def size(self) -> int:
        with self._lock:
            return len(self._entries)

    def snapshot(self) -> List[NonceRecord]:
        """Records currently held, newest first."""
        with self._lock:
            return list(reversed(self._entries.values()))

    def __len__(self) -> int:
        return self.size()

    def __contains__(self, nonce: object) -> bool:
        with self._lock:
            return nonce in self._entries

    def __repr__(self) -> str:
        return f"NonceCache(size={self.size()}, capacity={self._capacity})"
