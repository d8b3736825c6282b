"""Repeating-callback abstraction the engine drives its display refresh with."""

DEFAULT_INTERVAL_MS = 10


class Ticker:
    """Calls ``callback()`` every ``interval_ms`` between ``start`` and ``stop``.

    Subclasses bind this to a real event loop (see ``sw.ui.ticker.QtTicker``).
    ``stop()`` must be safe to call when already stopped.
    """

    def __init__(self, interval_ms=DEFAULT_INTERVAL_MS):
        self.interval_ms = interval_ms

    @property
    def active(self):
        raise NotImplementedError

    def start(self, callback):
        raise NotImplementedError

    def stop(self):
        raise NotImplementedError
