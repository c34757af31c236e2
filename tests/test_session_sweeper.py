"""Tests for the idle upload session sweeper."""

import asyncio

import pytest

from server.session_sweeper import SessionSweeper


@pytest.mark.asyncio
async def test_sweep_drops_idle_sessions(manager):
    idle = await manager.begin_chunked("idle.bin", 4)
    active = await manager.begin_chunked("active.bin", 4)
    manager.sessions._sessions[idle].last_activity -= 3600

    sweeper = SessionSweeper(manager, ttl_seconds=60, interval_seconds=3600)
    dropped = await sweeper.sweep()

    assert dropped == 1
    assert idle not in manager.sessions
    assert active in manager.sessions


@pytest.mark.asyncio
async def test_background_loop_sweeps(manager):
    session_id = await manager.begin_chunked("idle.bin", 4)
    manager.sessions._sessions[session_id].last_activity -= 3600

    sweeper = SessionSweeper(manager, ttl_seconds=60, interval_seconds=0.01)
    await sweeper.start()
    try:
        for _ in range(100):
            if session_id not in manager.sessions:
                break
            await asyncio.sleep(0.01)
    finally:
        await sweeper.stop()

    assert session_id not in manager.sessions


@pytest.mark.asyncio
async def test_start_twice_and_stop_twice(manager):
    sweeper = SessionSweeper(manager, ttl_seconds=60, interval_seconds=3600)
    await sweeper.start()
    first_task = sweeper._task
    await sweeper.start()

    assert sweeper._task is first_task

    await sweeper.stop()
    await sweeper.stop()
    assert first_task.done()
