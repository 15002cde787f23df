"""Content fingerprints used as cache keys."""

from __future__ import annotations

import hashlib
import logging
import time

logger = logging.getLogger(__name__)


class ContentHasher:
    """Fingerprint image bytes for the result cache.

    Identical bytes always map to the same key. When the hash algorithm is
    not available the hasher still returns a key, built from size, filename
    and the current time; such keys never produce a cache hit.
    """

    def __init__(self, algorithm: str = "sha256") -> None:
        self._algorithm = algorithm

    def hash(self, data: bytes, filename: str = "") -> str:
        try:
            return hashlib.new(self._algorithm, data).hexdigest()
        except (ValueError, TypeError) as e:
            logger.warning(
                "Алгоритм хеширования %s недоступен, используется слабый ключ: %s",
                self._algorithm,
                e,
            )
            return f"fallback-hash-{len(data)}-{filename}-{time.time_ns()}"
