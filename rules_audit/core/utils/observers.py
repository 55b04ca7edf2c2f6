"""
Synchronous observer lists.

Stores and engines hold an ObserverList and call notify() right after each
mutation. Listeners run in subscription order on the caller's stack.
"""

import logging
from collections.abc import Callable

logger = logging.getLogger(__name__)

Listener = Callable[[], None]


class ObserverList:
    """
    Ordered set of zero-argument callbacks.

    A listener that raises is logged and skipped; the remaining listeners
    are still notified. Listeners must not re-enter the mutation that
    triggered them.
    """

    def __init__(self, name: str = "observers"):
        self.name = name
        # dict keeps insertion order and gives O(1) removal by handle
        self._listeners: dict[int, Listener] = {}
        self._next_handle = 0

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """
        Register a listener.

        Args:
            listener: Callback invoked with no arguments after each change

        Returns:
            A disposer; calling it more than once is harmless.
        """
        handle = self._next_handle
        self._next_handle += 1
        self._listeners[handle] = listener

        def unsubscribe() -> None:
            self._listeners.pop(handle, None)

        return unsubscribe

    def notify(self) -> None:
        """Call every listener in subscription order."""
        for listener in list(self._listeners.values()):
            try:
                listener()
            except Exception as e:
                logger.exception(f"Listener {listener!r} on {self.name} failed: {e}")

    def clear(self) -> None:
        self._listeners.clear()

    def __len__(self) -> int:
        return len(self._listeners)
