"""Fixed-window rate limiter persisted in a JSON file.

Each key maps to ``{"count": n, "reset_at": epoch_ms}``.  The file is
guarded by its own lock so separate CLI invocations share the budget.
Expired windows are pruned on every write.
"""

from __future__ import annotations

import json
import logging
import time
from pathlib import Path
from typing import Callable

from storefront.application.security import RateLimiter
from storefront.infrastructure.persistence.atomic_write import write_json_atomic
from storefront.infrastructure.persistence.file_lock import FileLock

logger = logging.getLogger(__name__)


class JsonRateLimiter(RateLimiter):

    def __init__(
        self,
        file_path: Path,
        lock_timeout: float = 5.0,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._file_path = file_path
        self._lock = FileLock(file_path.with_name(file_path.name + ".lock"), lock_timeout)
        self._clock = clock

    def check(self, key: str, max_count: int, window_ms: int) -> bool:
        now_ms = int(self._clock() * 1000)
        with self._lock.locked():
            windows = {
                k: w for k, w in self._load_raw().items() if w["reset_at"] > now_ms
            }
            window = windows.get(key)
            if window is None:
                windows[key] = {"count": 1, "reset_at": now_ms + window_ms}
                allowed = True
            elif window["count"] >= max_count:
                allowed = False
            else:
                window["count"] += 1
                allowed = True
            self._persist_raw(windows)

        if not allowed:
            logger.warning("Rate limit exceeded for %s", key)
        return allowed

    # --- File helpers ---------------------------------------------------------

    def _load_raw(self) -> dict[str, dict]:
        if not self._file_path.exists():
            return {}
        try:
            return json.loads(self._file_path.read_text(encoding="utf-8"))
        except json.JSONDecodeError:
            logger.warning("Resetting unreadable rate limit file %s", self._file_path)
            return {}

    def _persist_raw(self, windows: dict[str, dict]) -> None:
        write_json_atomic(self._file_path, windows)
