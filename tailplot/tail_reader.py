"""
Tailing reader for TailPlot.

Follows a growing file (or reads a stream such as standard input) and
yields its lines one at a time, forever.  ``follow()`` is a generator
that runs on the producer thread; every other public method is safe to
call from the GUI thread.

State machine::

    OPENING -> READING <-> EOF_WAIT
                  |
                  v
             RESTARTING -> OPENING          CLOSED (terminal)

A restart happens when the file shrinks or is replaced by a new file at
the same path (truncation or rotation, while auto-restart is on), or
when ``request_restart()`` is called.  Standard input is not
restartable and its end-of-input is final.
"""

import enum
import os
import sys
import threading
from dataclasses import dataclass
from typing import IO, Iterator, Optional, Union

from .constants import POLL_INTERVAL_S


class ReaderState(enum.Enum):
    OPENING = "opening"
    READING = "reading"
    EOF_WAIT = "eof_wait"
    RESTARTING = "restarting"
    CLOSED = "closed"


@dataclass(frozen=True)
class Line:
    """One complete line; *number* is 1-based within the current pass."""
    number: int
    text: str


class Restart:
    """Marker yielded by ``follow()`` before the lines of a new pass."""

    def __repr__(self):
        return "RESTART"


RESTART = Restart()


class RestartFlag:
    """Lock-protected restart request shared by producer and GUI."""

    def __init__(self):
        self._lock = threading.Lock()
        self._requested = False

    def request(self) -> bool:
        """Set the flag; ``False`` if it was already set."""
        with self._lock:
            already = self._requested
            self._requested = True
        return not already

    def consume(self) -> bool:
        """Clear the flag, returning whether it was set."""
        with self._lock:
            requested = self._requested
            self._requested = False
        return requested

    @property
    def is_set(self) -> bool:
        with self._lock:
            return self._requested


class ObservedSize:
    """Lock-protected last observed file size (truncation detection)."""

    def __init__(self):
        self._lock = threading.Lock()
        self._size = 0

    def exchange(self, size: int) -> int:
        """Store *size*, returning the previous value."""
        with self._lock:
            previous = self._size
            self._size = size
        return previous

    def reset(self) -> None:
        with self._lock:
            self._size = 0

    @property
    def value(self) -> int:
        with self._lock:
            return self._size


class TailReader:
    """Restartable, never-ending line source.

    Parameters
    ----------
    path : str, optional
        File to follow.  When omitted, *stream* (default: ``sys.stdin``)
        is read until end-of-input.
    stream : text stream, optional
        Used only when *path* is ``None``; never closed by the reader.
    poll_interval : float
        Seconds to wait at end-of-file before looking for new data.
    auto_restart : bool
        Restart when the file is seen to shrink.
    """

    def __init__(
        self,
        path: Optional[str] = None,
        stream: Optional[IO[str]] = None,
        poll_interval: float = POLL_INTERVAL_S,
        auto_restart: bool = True,
        encoding: str = 'utf-8-sig',
    ):
        self._path = path
        self._stream = stream if stream is not None else sys.stdin
        self._poll_interval = poll_interval
        self._encoding = encoding

        self._restart = RestartFlag()
        self._observed_size = ObservedSize()
        self._auto_restart = threading.Event()
        if auto_restart:
            self._auto_restart.set()
        self._wake = threading.Event()
        self._stopped = threading.Event()

        self.state = ReaderState.OPENING
        self.line_number = 0

    # ── Controls (any thread) ────────────────────────────────────────

    @property
    def is_file(self) -> bool:
        return self._path is not None

    @property
    def auto_restart(self) -> bool:
        return self._auto_restart.is_set()

    def set_auto_restart(self, enabled: bool) -> None:
        if enabled:
            self._auto_restart.set()
        else:
            self._auto_restart.clear()

    def request_restart(self) -> bool:
        """Ask the producer to start over from the top of the file.

        Returns ``False`` for streams, and when a restart is already
        pending.
        """
        if not self.is_file:
            return False
        requested = self._restart.request()
        self._wake.set()
        return requested

    def stop(self) -> None:
        """End ``follow()`` at its next check (cooperative)."""
        self._stopped.set()
        self._wake.set()

    # ── Producer side ────────────────────────────────────────────────

    def follow(self) -> Iterator[Union[Line, Restart]]:
        """Yield ``Line`` objects, and ``RESTART`` before each new pass.

        ``OSError`` from opening or reading the source propagates.
        """
        try:
            while not self._stopped.is_set():
                self.state = ReaderState.OPENING
                handle = self._open()
                # Requests made while restarting are already satisfied
                self._restart.consume()
                try:
                    restart = yield from self._read_pass(handle)
                finally:
                    if self.is_file:
                        handle.close()
                if not restart:
                    break
                self.state = ReaderState.RESTARTING
                yield RESTART
        finally:
            self.state = ReaderState.CLOSED

    def _open(self) -> IO[str]:
        if self._path is None:
            return self._stream
        return open(self._path, 'r', encoding=self._encoding, errors='replace')

    def _file_shrank(self) -> bool:
        try:
            size = os.path.getsize(self._path)
        except FileNotFoundError:
            # Rotated away and not yet recreated; check again next poll
            return False
        return size < self._observed_size.exchange(size)

    def _file_replaced(self, handle: IO[str]) -> bool:
        """Path now names a different file than the open handle (rotation)."""
        try:
            current = os.stat(self._path)
        except FileNotFoundError:
            return False
        return current.st_ino != os.fstat(handle.fileno()).st_ino

    def _read_pass(self, handle: IO[str]):
        """Read one pass; return ``True`` to restart, ``False`` when done."""
        self.line_number = 0
        self._observed_size.reset()
        partial = ''
        while True:
            if self._stopped.is_set():
                return False
            if (self.is_file and self._auto_restart.is_set()
                    and (self._file_shrank() or self._file_replaced(handle))):
                self._restart.request()
            if self._restart.consume():
                return True

            self.state = ReaderState.READING
            chunk = handle.readline()
            if not chunk:
                if not self.is_file:
                    if partial:
                        yield self._next_line(partial)
                    return False
                self.state = ReaderState.EOF_WAIT
                self._wake.wait(self._poll_interval)
                self._wake.clear()
                continue

            partial += chunk
            if not partial.endswith('\n'):
                # Writer is mid-line; wait for the rest
                continue
            text, partial = partial, ''
            yield self._next_line(text)

    def _next_line(self, text: str) -> Line:
        self.line_number += 1
        return Line(self.line_number, text.rstrip('\r\n'))
