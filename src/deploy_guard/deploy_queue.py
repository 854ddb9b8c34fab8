"""
deploy-guard — deploy queue

File: src/deploy_guard/deploy_queue.py
Last updated: 2026-10-19

Purpose
- Process-wide deploy lock so only one deploy runs at a time.
- A deploy requested while the lock is held is queued (latest request wins)
  and runs once the lock is released.

Functional requirements
- ``unlock`` is idempotent: releasing a free lock is a no-op.
- Cooperative, single event loop; no thread safety is promised.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from typing import ClassVar

logger = logging.getLogger(__name__)

DeployAction = Callable[[], Awaitable[object]]


class DeployQueue:
    _instance: ClassVar[DeployQueue | None] = None

    def __init__(self) -> None:
        self._locked = False
        self._pending: DeployAction | None = None
        self._unlock_count = 0

    @classmethod
    def get(cls) -> DeployQueue:
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        """Drop the process-wide instance."""

        cls._instance = None

    @property
    def locked(self) -> bool:
        return self._locked

    @property
    def has_pending(self) -> bool:
        return self._pending is not None

    @property
    def unlock_count(self) -> int:
        """Number of releases that actually freed a held lock."""

        return self._unlock_count

    async def lock(self) -> bool:
        """Acquire the lock; ``False`` when it is already held."""

        if self._locked:
            return False
        self._locked = True
        return True

    async def unlock(self) -> None:
        if not self._locked:
            return
        self._locked = False
        self._unlock_count += 1
        pending, self._pending = self._pending, None
        if pending is not None:
            logger.info("running queued deploy")
            await self.enqueue(pending)

    async def enqueue(self, action: DeployAction) -> bool:
        """Run ``action`` under the lock now, or queue it; ``True`` when it ran."""

        if not await self.lock():
            self._pending = action
            logger.info("deploy already in progress; queued")
            return False
        try:
            await action()
        finally:
            await self.unlock()
        return True


__all__ = ["DeployAction", "DeployQueue"]
