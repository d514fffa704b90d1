"""Single-flight — collapse concurrent computations for one key.

The first caller for a key runs the computation; callers that arrive
while it is in flight wait on the same result instead of repeating the
work. The flight is cleared once it settles, success or failure, so a
failed computation is never served to later callers.

Usage::

    flights: SingleFlight[str, bytes] = SingleFlight()
    data = await flights.do(path, lambda: read(path))
"""

from collections.abc import Awaitable, Callable, Hashable
from typing import Generic, TypeVar

import anyio

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")


class _Call(Generic[V]):
    """One in-flight computation and its eventual outcome."""

    __slots__ = ("done", "error", "settled", "value")

    def __init__(self) -> None:
        self.done = anyio.Event()
        self.value: V | None = None
        self.error: Exception | None = None
        self.settled = False


class SingleFlight(Generic[K, V]):
    """Map of key -> in-flight call."""

    __slots__ = ("_calls",)

    def __init__(self) -> None:
        self._calls: dict[K, _Call[V]] = {}

    def __contains__(self, key: object) -> bool:
        return key in self._calls

    def __len__(self) -> int:
        return len(self._calls)

    async def do(self, key: K, fn: Callable[[], Awaitable[V]]) -> V:
        """Run *fn* for *key*, or join the call already in flight."""
        call = self._calls.get(key)
        if call is not None:
            await call.done.wait()
            if not call.settled:
                # Leader was cancelled before producing anything; take over.
                return await self.do(key, fn)
            if call.error is not None:
                raise call.error
            return call.value  # type: ignore[return-value]

        call = _Call()
        self._calls[key] = call
        try:
            call.value = await fn()
            call.settled = True
        except Exception as exc:
            call.error = exc
            call.settled = True
            raise
        finally:
            del self._calls[key]
            call.done.set()
        return call.value
