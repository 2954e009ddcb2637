from __future__ import annotations

import asyncio

from persistence.debounce import Debouncer


def test_triggers_inside_window_run_action_once():
    async def _run():
        calls = []

        async def action():
            calls.append(asyncio.get_running_loop().time())

        debouncer = Debouncer(0.1, action)
        for _ in range(5):
            debouncer.trigger()
            await asyncio.sleep(0.005)

        assert calls == []
        await asyncio.sleep(0.3)
        assert len(calls) == 1
        assert debouncer.pending is False

    asyncio.run(_run())


def test_cancel_drops_pending_timer():
    async def _run():
        calls = []

        async def action():
            calls.append(1)

        debouncer = Debouncer(0.01, action)
        assert debouncer.cancel() is False

        debouncer.trigger()
        assert debouncer.cancel() is True
        await asyncio.sleep(0.05)
        assert calls == []

    asyncio.run(_run())


def test_flush_runs_pending_action_now():
    async def _run():
        calls = []

        async def action():
            calls.append(1)

        debouncer = Debouncer(60.0, action)
        await debouncer.flush()
        assert calls == []

        debouncer.trigger()
        await debouncer.flush()
        assert calls == [1]
        assert debouncer.pending is False

    asyncio.run(_run())


def test_trigger_does_not_cancel_a_running_action():
    async def _run():
        events = []
        started = asyncio.Event()
        release = asyncio.Event()

        async def action():
            events.append("start")
            started.set()
            await release.wait()
            events.append("end")

        debouncer = Debouncer(0.01, action)
        debouncer.trigger()
        await started.wait()

        debouncer.trigger()
        release.set()
        await debouncer.flush()

        assert events == ["start", "end", "start", "end"]

    asyncio.run(_run())
