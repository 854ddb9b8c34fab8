"""
deploy-guard — unit tests for the deploy queue

File: tests/unit/test_deploy_queue.py
Last updated: 2026-10-19

Purpose
- Verify the global deploy lock: idempotent unlock, queued re-run, singleton reset.
"""

from __future__ import annotations

from collections.abc import Iterator

import pytest

from deploy_guard.conflict import DeployLock
from deploy_guard.deploy_queue import DeployQueue


@pytest.fixture(autouse=True)
def _reset_queue() -> Iterator[None]:
    DeployQueue.reset()
    yield
    DeployQueue.reset()


def test_singleton_is_process_wide() -> None:
    first = DeployQueue.get()
    assert DeployQueue.get() is first
    assert isinstance(first, DeployLock)
    DeployQueue.reset()
    assert DeployQueue.get() is not first


@pytest.mark.asyncio
async def test_lock_and_idempotent_unlock() -> None:
    queue = DeployQueue()

    assert await queue.lock() is True
    assert await queue.lock() is False
    assert queue.locked

    await queue.unlock()
    await queue.unlock()

    assert not queue.locked
    assert queue.unlock_count == 1


@pytest.mark.asyncio
async def test_enqueue_runs_under_lock_and_releases() -> None:
    queue = DeployQueue()
    observed: list[bool] = []

    async def deploy() -> None:
        observed.append(queue.locked)

    assert await queue.enqueue(deploy) is True
    assert observed == [True]
    assert not queue.locked


@pytest.mark.asyncio
async def test_enqueue_while_locked_runs_after_unlock() -> None:
    queue = DeployQueue()
    runs: list[str] = []

    async def first() -> None:
        runs.append("first")

    async def latest() -> None:
        runs.append("latest")

    await queue.lock()
    assert await queue.enqueue(first) is False
    assert await queue.enqueue(latest) is False
    assert queue.has_pending

    await queue.unlock()

    assert runs == ["latest"]
    assert not queue.locked
    assert not queue.has_pending


@pytest.mark.asyncio
async def test_failed_deploy_still_releases_lock() -> None:
    queue = DeployQueue()

    async def broken() -> None:
        raise RuntimeError("deploy failed")

    with pytest.raises(RuntimeError, match="deploy failed"):
        await queue.enqueue(broken)
    assert not queue.locked
