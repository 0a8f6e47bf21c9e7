# Exp_Tracker/engine/signal.py
"""
Signal - Host notification channel.

Every host-fired notification (track ended/stopped, marker reached,
character added) and the tracker's own outgoing TrackEvent are Signals.

Single-threaded: listeners run synchronously inside fire(), on the
thread that fires. Exceptions raised by a listener propagate to the caller.

Usage:
    ended = Signal("Ended")
    conn = ended.connect(lambda: print("done"))
    ended.fire()
    conn.disconnect()
"""

from typing import Callable, List


class Connection:
    """A single listener bound to a Signal."""

    __slots__ = ('_signal', '_callback', 'connected')

    def __init__(self, signal: "Signal", callback: Callable):
        self._signal = signal
        self._callback = callback
        self.connected = True

    def disconnect(self) -> None:
        """Detach the listener. Safe to call more than once."""
        if not self.connected:
            return
        self.connected = False
        self._signal._remove(self)

    def __repr__(self) -> str:
        state = "connected" if self.connected else "disconnected"
        return f"Connection({self._signal.name!r}, {state})"


class Signal:
    """
    Multi-listener notification channel.

    fire() walks a snapshot of the current listeners, so listeners may
    connect or disconnect while the signal is firing. A listener
    disconnected during a fire is skipped if it has not run yet.
    """

    __slots__ = ('name', '_connections')

    def __init__(self, name: str = ""):
        self.name = name
        self._connections: List[Connection] = []

    def connect(self, callback: Callable) -> Connection:
        """Bind a listener. Returns the Connection that owns it."""
        if not callable(callback):
            raise TypeError(f"Signal '{self.name}' listener must be callable")
        conn = Connection(self, callback)
        self._connections.append(conn)
        return conn

    def once(self, callback: Callable) -> Connection:
        """Bind a listener that detaches itself before its first run."""
        conn = None

        def _fire_once(*args):
            conn.disconnect()
            callback(*args)

        conn = self.connect(_fire_once)
        return conn

    def fire(self, *args) -> None:
        for conn in list(self._connections):
            if conn.connected:
                conn._callback(*args)

    def disconnect_all(self) -> None:
        """Detach every listener."""
        for conn in list(self._connections):
            conn.connected = False
        self._connections.clear()

    destroy = disconnect_all

    @property
    def connection_count(self) -> int:
        return len(self._connections)

    def _remove(self, conn: Connection) -> None:
        if conn in self._connections:
            self._connections.remove(conn)

    def __repr__(self) -> str:
        return f"Signal({self.name!r}, listeners={len(self._connections)})"
