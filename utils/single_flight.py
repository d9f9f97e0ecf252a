"""Collapse concurrent calls for the same key into one in-flight operation"""

from __future__ import annotations

import asyncio
from typing import Any, Awaitable, Callable, Dict


class SingleFlight:
    """The first caller for a key runs the operation, later callers await its result

    Once the leader finishes (successfully or not) the key is released, so the
    next call after completion starts a fresh operation. Registration happens
    without an await in between, which is what makes it race-free on one loop.
    """

    def __init__(self) -> None:
        self._inflight: Dict[str, asyncio.Future] = {}

    async def do(self, key: str, fn: Callable[[], Awaitable[Any]]) -> Any:
        future = self._inflight.get(key)
        if future is not None:
            # shield: a cancelled waiter must not cancel the shared result
            return await asyncio.shield(future)

        future = asyncio.get_running_loop().create_future()
        self._inflight[key] = future
        try:
            result = await fn()
        except asyncio.CancelledError:
            future.cancel()
            raise
        except Exception as exc:
            future.set_exception(exc)
            # Mark retrieved so a failure nobody waited on isn't logged by asyncio
            future.exception()
            raise
        else:
            future.set_result(result)
            return result
        finally:
            self._inflight.pop(key, None)

    def in_flight(self, key: str) -> bool:
        return key in self._inflight
