from __future__ import annotations

import asyncio
import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Callable, Mapping, Sequence

from asset_tracker.schemas.asset import AssetQuote
from asset_tracker.services.price_service import PriceService
from asset_tracker.utils.asset_class import AssetClass

logger = logging.getLogger(__name__)

# Ask for more symbols than the caller wants; some of them will fail upstream.
OVERFETCH_FACTOR = 3


async def gather_in_threads(fn: Callable[..., Any], calls: Sequence[tuple]) -> list[Any]:
    """Run every call on its own thread and collect results or exceptions in order.

    The pool is sized to the batch so total latency tracks the slowest call.
    """
    if not calls:
        return []
    loop = asyncio.get_running_loop()
    executor = ThreadPoolExecutor(max_workers=len(calls), thread_name_prefix="fetch")
    try:
        return await asyncio.gather(
            *(loop.run_in_executor(executor, fn, *args) for args in calls),
            return_exceptions=True,
        )
    finally:
        executor.shutdown(wait=False)


class BatchFetcher:
    def __init__(self, price_service: PriceService, universes: Mapping[AssetClass, Sequence[str]]):
        self.price_service = price_service
        self.universes = {asset_class: list(symbols) for asset_class, symbols in universes.items()}

    def candidates(self, asset_class: AssetClass, limit: int) -> list[str]:
        universe = self.universes.get(asset_class, [])
        return universe[: min(max(limit, 0) * OVERFETCH_FACTOR, len(universe))]

    async def fetch_top_assets(self, asset_class: AssetClass, limit: int, period: str) -> list[AssetQuote]:
        """Fetch a prefix of the class universe concurrently and keep the successes.

        Every lookup runs to completion on its own worker thread; a failing
        symbol is logged and dropped without affecting the others.
        """
        symbols = self.candidates(asset_class, limit)
        if not symbols:
            return []

        outcomes = await gather_in_threads(
            self.price_service.get_price, [(asset_class, symbol, period) for symbol in symbols]
        )

        quotes: list[AssetQuote] = []
        for symbol, outcome in zip(symbols, outcomes):
            if isinstance(outcome, BaseException):
                logger.warning(f"Unexpected error fetching {asset_class.value}:{symbol}: {outcome}")
                continue
            result, _ = outcome
            if not result.ok:
                logger.warning(f"Dropping {asset_class.value}:{symbol} from batch: {result.error}")
                continue
            quotes.append(AssetQuote.from_result(symbol, result))

        logger.info(
            "batch_fetch_complete",
            extra={
                "asset_class": asset_class.value,
                "period": period,
                "requested": len(symbols),
                "succeeded": len(quotes),
            },
        )
        return quotes
