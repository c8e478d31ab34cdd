"""Throttled concurrent fan-out for upstream calls."""
import asyncio
import logging
from typing import Any, Awaitable, Callable, List, Sequence

logger = logging.getLogger(__name__)


async def run_in_batches(
    units: Sequence[Any],
    worker: Callable[[Any], Awaitable[Any]],
    batch_size: int,
    delay_seconds: float,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> List[Any]:
    """Run ``worker`` over ``units`` in concurrent batches, all-settled.

    Results keep the input order; a failed unit yields its exception instead
    of a value. Batches are separated by ``delay_seconds`` to stay under the
    upstream rate limit.
    """
    size = max(batch_size, 1)
    results: List[Any] = []
    for start in range(0, len(units), size):
        if start > 0 and delay_seconds > 0:
            await sleep(delay_seconds)
        batch = units[start:start + size]
        logger.debug(f"Running batch {start // size + 1} ({len(batch)} units)")
        results.extend(await asyncio.gather(*(worker(unit) for unit in batch), return_exceptions=True))
    return results
