"""
Producer loop for TailPlot.

Wires the tailing reader, the line parser and the point buffer together
on the producer thread.  ``build_pipeline`` assembles the full chain
down to a ``DisplayAdapter`` given a function that schedules work on the
display's thread.
"""

from typing import Callable, Optional, Tuple

from .config import TailPlotConfig
from .data_model import Point
from .display import ChartFeed, DisplayAdapter
from .line_parser import LineParser
from .point_buffer import PointBuffer
from .tail_reader import Restart, TailReader


class Producer:
    """Reads, parses and buffers lines until the source ends or is stopped.

    ``run()`` blocks and belongs on a background thread; ``stop()`` and
    ``request_restart()`` may be called from any thread.
    """

    def __init__(
        self,
        config: TailPlotConfig,
        buffer: PointBuffer,
        reader: Optional[TailReader] = None,
    ):
        self._config = config
        self._buffer = buffer
        self.reader = reader if reader is not None else TailReader(
            path=config.path,
            poll_interval=config.poll_interval,
            auto_restart=config.auto_restart,
        )
        self.parser = LineParser(config, on_fields_established=buffer.post_fields)

    @property
    def problems(self) -> int:
        """Diagnostics reported in the current session."""
        return self.parser.problems

    def run(self) -> None:
        """Ingest until end-of-input or ``stop()``.  ``OSError`` propagates."""
        for event in self.reader.follow():
            if isinstance(event, Restart):
                self._buffer.post_restart()
                self.parser.reset_session()
                continue
            result = self.parser.parse(event.text, event.number)
            if isinstance(result, Point):
                self._buffer.append(result)

    def request_restart(self) -> bool:
        return self.reader.request_restart()

    def stop(self) -> None:
        self.reader.stop()


def build_pipeline(
    config: TailPlotConfig,
    adapter: DisplayAdapter,
    schedule: Callable[[Callable[[], None]], None],
    reader: Optional[TailReader] = None,
) -> Tuple[Producer, PointBuffer, ChartFeed]:
    """Connect reader → parser → buffer → feed → *adapter*."""
    feed = ChartFeed(adapter)
    buffer = PointBuffer(schedule, feed.deliver)
    producer = Producer(config, buffer, reader=reader)
    return producer, buffer, feed
