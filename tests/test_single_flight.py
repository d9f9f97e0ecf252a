"""
Single-flight guard
"""

import asyncio

import pytest

from utils import SingleFlight


@pytest.mark.asyncio
async def test_concurrent_callers_share_one_call():
    guard = SingleFlight()
    calls = 0
    release = asyncio.Event()

    async def work():
        nonlocal calls
        calls += 1
        await release.wait()
        return "token"

    tasks = [asyncio.create_task(guard.do("key", work)) for _ in range(4)]
    await asyncio.sleep(0)
    assert guard.in_flight("key") is True

    release.set()
    results = await asyncio.gather(*tasks)

    assert results == ["token"] * 4
    assert calls == 1
    assert guard.in_flight("key") is False


@pytest.mark.asyncio
async def test_failure_propagates_to_all_waiters_and_releases_key():
    guard = SingleFlight()
    release = asyncio.Event()

    async def failing():
        await release.wait()
        raise RuntimeError("exchange failed")

    tasks = [asyncio.create_task(guard.do("key", failing)) for _ in range(3)]
    await asyncio.sleep(0)
    release.set()
    results = await asyncio.gather(*tasks, return_exceptions=True)

    assert all(isinstance(r, RuntimeError) for r in results)

    async def succeeding():
        return "ok"

    assert await guard.do("key", succeeding) == "ok"


@pytest.mark.asyncio
async def test_different_keys_run_independently():
    guard = SingleFlight()
    seen = []

    async def work(name):
        seen.append(name)
        await asyncio.sleep(0)
        return name

    results = await asyncio.gather(
        guard.do("a", lambda: work("a")),
        guard.do("b", lambda: work("b")),
    )

    assert results == ["a", "b"]
    assert sorted(seen) == ["a", "b"]


@pytest.mark.asyncio
async def test_cancelled_waiter_does_not_cancel_leader():
    guard = SingleFlight()
    release = asyncio.Event()

    async def work():
        await release.wait()
        return "done"

    leader = asyncio.create_task(guard.do("key", work))
    waiter = asyncio.create_task(guard.do("key", work))
    await asyncio.sleep(0)

    waiter.cancel()
    release.set()

    assert await leader == "done"
    with pytest.raises(asyncio.CancelledError):
        await waiter
