import asyncio

import pytest

from core.versioning.locks import ProjectLockTable


@pytest.mark.asyncio
async def test_same_project_bodies_never_interleave():
    locks = ProjectLockTable()
    events: list[str] = []

    def body(name: str):
        async def _run():
            events.append(f"{name}:start")
            await asyncio.sleep(0.01)
            events.append(f"{name}:end")
            return name

        return _run

    results = await asyncio.gather(*(locks.run_exclusive(1, body(n)) for n in ("a", "b", "c")))

    assert results == ["a", "b", "c"]
    assert events == ["a:start", "a:end", "b:start", "b:end", "c:start", "c:end"]


@pytest.mark.asyncio
async def test_different_projects_run_in_parallel():
    locks = ProjectLockTable()
    first_entered = asyncio.Event()
    second_entered = asyncio.Event()

    async def first():
        first_entered.set()
        await asyncio.wait_for(second_entered.wait(), timeout=2)

    async def second():
        await asyncio.wait_for(first_entered.wait(), timeout=2)
        second_entered.set()

    # would time out if project 2 waited on project 1's lock
    await asyncio.gather(locks.run_exclusive(1, first), locks.run_exclusive(2, second))


@pytest.mark.asyncio
async def test_lock_released_on_failure_and_cancellation():
    locks = ProjectLockTable()

    async def boom():
        raise RuntimeError("boom")

    with pytest.raises(RuntimeError, match="boom"):
        await locks.run_exclusive(7, boom)
    assert not locks.is_locked(7)

    started = asyncio.Event()

    async def hang():
        started.set()
        await asyncio.sleep(60)

    task = asyncio.create_task(locks.run_exclusive(7, hang))
    await started.wait()
    assert locks.is_locked(7)
    task.cancel()
    with pytest.raises(asyncio.CancelledError):
        await task
    assert not locks.is_locked(7)


@pytest.mark.asyncio
async def test_hold_context_manager_blocks_other_callers():
    locks = ProjectLockTable()
    ran = asyncio.Event()

    async def body():
        ran.set()

    async with locks.hold(3):
        task = asyncio.create_task(locks.run_exclusive(3, body))
        await asyncio.sleep(0.01)
        assert not ran.is_set()

    await task
    assert ran.is_set()
