import asyncio

from circuit_challenge.game import GameTimer


def test_ticks_until_stopped():
    ticks = []

    async def run():
        timer = GameTimer(on_tick=ticks.append, clock=lambda: 1500, interval=0.01)
        assert timer.start(start_time=1000)
        assert timer.running
        await asyncio.sleep(0.05)
        timer.stop()
        assert not timer.running
        count = len(ticks)
        await asyncio.sleep(0.03)
        return count

    count = asyncio.run(run())
    assert count >= 1
    assert len(ticks) == count
    assert set(ticks) == {500}


def test_start_outside_event_loop():
    timer = GameTimer(on_tick=lambda elapsed: None, clock=lambda: 0)
    assert not timer.start(start_time=0)
    assert not timer.running
    timer.stop()
