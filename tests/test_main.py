import asyncio

from asset_tracker.cache.ttl_cache import TTLCache
from asset_tracker.main import sweep_cache_forever


def test_sweeper_evicts_expired_entries(clock):
    cache = TTLCache(clock=clock)
    cache.set("stale", 1, ttl_seconds=1)
    clock.advance(5)

    async def run_briefly():
        task = asyncio.create_task(sweep_cache_forever(cache, 0.01))
        await asyncio.sleep(0.05)
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass

    asyncio.run(run_briefly())
    assert cache.metrics()["size"] == 0
