"""
Point buffer and flush coalescer for TailPlot.

The producer thread appends; the GUI thread flushes.  Only the first
append into an empty buffer schedules a flush, so a burst of thousands
of lines costs one redraw rather than thousands.  Field announcements
and restarts travel through the same FIFO so the GUI sees them in
exactly the order the producer emitted them.

The lock guards the FIFO swap only.  ``schedule`` and ``deliver`` are
always called with the lock released.
"""

import threading
from dataclasses import dataclass
from typing import Callable, List, Tuple, Union

from .data_model import Field, Point


@dataclass(frozen=True)
class FieldsEstablished:
    """Buffered control item: the session's field set is known."""
    fields: Tuple[Field, ...]


class SessionRestart:
    """Buffered control item: a new session starts."""

    def __repr__(self):
        return "SessionRestart()"


BufferItem = Union[Point, FieldsEstablished, SessionRestart]


class PointBuffer:
    """FIFO between the producer and a single-threaded consumer.

    Parameters
    ----------
    schedule : callable
        ``schedule(callback)`` must arrange for ``callback()`` to run
        once on the consumer's thread (e.g. via a queued Qt signal).
    deliver : callable
        Receives each flushed batch, a list of ``BufferItem`` in append
        order, on the consumer's thread.
    """

    def __init__(
        self,
        schedule: Callable[[Callable[[], None]], None],
        deliver: Callable[[List[BufferItem]], None],
    ):
        self._schedule = schedule
        self._deliver = deliver
        self._lock = threading.Lock()
        self._pending: List[BufferItem] = []

    def __len__(self):
        with self._lock:
            return len(self._pending)

    def _put(self, item: BufferItem, discard_pending: bool = False) -> None:
        with self._lock:
            was_empty = not self._pending
            if discard_pending:
                self._pending.clear()
            self._pending.append(item)
        if was_empty:
            self._schedule(self.flush)

    def append(self, point: Point) -> None:
        """Queue *point*; schedule a flush only if none is pending."""
        self._put(point)

    def post_fields(self, fields: Tuple[Field, ...]) -> None:
        self._put(FieldsEstablished(tuple(fields)))

    def post_restart(self) -> None:
        """Queue a restart, dropping items of the session it ends."""
        self._put(SessionRestart(), discard_pending=True)

    def flush(self) -> None:
        """Deliver everything queued so far.  Consumer thread only."""
        with self._lock:
            batch, self._pending = self._pending, []
        if batch:
            self._deliver(batch)
