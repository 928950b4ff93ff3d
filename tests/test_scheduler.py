import asyncio

import pytest

from localvoicemod.services.scheduler import LoopScheduler


@pytest.mark.asyncio
async def test_callback_fires_on_the_running_loop():
    fired = asyncio.Event()
    LoopScheduler().call_later(0.01, fired.set)
    await asyncio.wait_for(fired.wait(), timeout=2)


@pytest.mark.asyncio
async def test_cancel_prevents_firing_and_is_idempotent():
    calls = []
    handle = LoopScheduler().call_later(0.01, lambda: calls.append(1))

    handle.cancel()
    handle.cancel()
    await asyncio.sleep(0.05)

    assert calls == []


@pytest.mark.asyncio
async def test_failing_callback_is_logged_not_raised(caplog):
    def boom():
        raise RuntimeError("timer bug")

    LoopScheduler().call_later(0, boom)
    await asyncio.sleep(0.02)

    assert "Scheduled callback failed" in caplog.text
