"""Debounced callbacks on the asyncio event loop.

A callback scheduled under a key only runs once nothing new has been
scheduled under that key for the quiet period. Scheduling again cancels the
pending call, so only the latest input is ever processed.
"""

import asyncio
from typing import Any, Callable, Dict, Hashable, Optional


class Debouncer:
    """Cancellable delayed calls keyed by input identity.

    Attributes:
        delay: Quiet period in seconds before a scheduled call runs

    Examples:
        >>> async def demo():
        ...     seen = []
        ...     debouncer = Debouncer(delay=0.01)
        ...     debouncer.schedule("import", seen.append, "a")
        ...     debouncer.schedule("import", seen.append, "b")
        ...     await asyncio.sleep(0.05)
        ...     return seen
        >>> asyncio.run(demo())
        ['b']
    """

    def __init__(self, delay: float, loop: Optional[asyncio.AbstractEventLoop] = None):
        self.delay = delay
        self._loop = loop
        self._pending: Dict[Hashable, asyncio.TimerHandle] = {}

    def _get_loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        return self._loop

    def schedule(self, key: Hashable, callback: Callable[..., Any], *args: Any) -> None:
        """Run callback(*args) after the quiet period, superseding any pending call for key."""
        self.cancel(key)
        self._pending[key] = self._get_loop().call_later(self.delay, self._fire, key, callback, args)

    def cancel(self, key: Hashable) -> bool:
        """Cancel the pending call for key. Returns True if one was pending."""
        handle = self._pending.pop(key, None)
        if handle is None:
            return False
        handle.cancel()
        return True

    def cancel_all(self) -> None:
        for key in list(self._pending):
            self.cancel(key)

    def is_pending(self, key: Hashable) -> bool:
        return key in self._pending

    def _fire(self, key: Hashable, callback: Callable[..., Any], args: tuple) -> None:
        self._pending.pop(key, None)
        callback(*args)
