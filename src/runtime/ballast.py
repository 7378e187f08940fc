"""Memory ballast: an explicitly owned store that only ever grows.

Backs the ``/blow`` endpoint, which exists to push the memory-allocation
liveness probe over its threshold on demand.
"""

from __future__ import annotations

import logging
import threading

logger = logging.getLogger(__name__)

CHUNKS_PER_GROW = 10
CHUNK_LEN = 999_999


class MemoryBallast:
    """Holds references to allocated buffers so they are never collected."""

    def __init__(self) -> None:
        self._chunks: list[list[int]] = []
        self._lock = threading.Lock()

    def grow(self, chunks: int = CHUNKS_PER_GROW, chunk_len: int = CHUNK_LEN) -> int:
        """Allocate ``chunks`` new buffers. Returns the total number held."""
        new = [[0] * chunk_len for _ in range(chunks)]
        with self._lock:
            self._chunks.extend(new)
            total = len(self._chunks)
        logger.info("Ballast grew by %d chunks (total %d)", chunks, total)
        return total

    def release(self) -> None:
        with self._lock:
            self._chunks.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._chunks)
