"""Exclusive inter-process lock on a sidecar ``.lock`` file (POSIX flock)."""

from __future__ import annotations

import fcntl
import logging
import time
from contextlib import contextmanager
from pathlib import Path
from typing import IO, Iterator

from storefront.domain.exceptions import ExternalDependencyError

logger = logging.getLogger(__name__)

_POLL_INTERVAL = 0.01


class FileLock:
    """Non-reentrant exclusive lock.

    Each ``acquire`` opens its own file description, so two FileLock
    objects on the same path exclude each other even inside one process.
    """

    def __init__(self, path: Path, timeout: float) -> None:
        self._path = path
        self._timeout = timeout
        self._handle: IO[str] | None = None

    @property
    def held(self) -> bool:
        return self._handle is not None

    def acquire(self) -> None:
        if self._handle is not None:
            raise RuntimeError(f"Lock {self._path} is already held")
        self._path.parent.mkdir(parents=True, exist_ok=True)
        handle = open(self._path, "a", encoding="utf-8")
        deadline = time.monotonic() + self._timeout
        while True:
            try:
                fcntl.flock(handle.fileno(), fcntl.LOCK_EX | fcntl.LOCK_NB)
                break
            except BlockingIOError:
                if time.monotonic() >= deadline:
                    handle.close()
                    logger.warning("Timed out after %.1fs waiting for %s", self._timeout, self._path)
                    raise ExternalDependencyError("Store is busy, please retry") from None
                time.sleep(_POLL_INTERVAL)
        self._handle = handle

    def release(self) -> None:
        if self._handle is None:
            return
        try:
            fcntl.flock(self._handle.fileno(), fcntl.LOCK_UN)
        finally:
            self._handle.close()
            self._handle = None

    @contextmanager
    def locked(self) -> Iterator[None]:
        self.acquire()
        try:
            yield
        finally:
            self.release()
