"""Playback scheduler: reveals stroke groups one at a time on the event loop.

IDLE → RUNNING → COMPLETED | CANCELLED | FAILED. Each group lands in the sink as a
single append, then the scheduler sleeps for a delay that depends on the group
(spaces are quick, busy glyphs slow). ``on_complete`` fires exactly once however
the run ends; the handle's state tells how. A failing append or ``on_group``
callback stops the run and is kept on ``error``.
"""

from __future__ import annotations

import asyncio
import enum
import logging
from collections.abc import Callable, Sequence

from inkspace.engine.config import LayoutConfig
from inkspace.engine.context import StrokeGroup
from inkspace.engine.sink import StrokeSink

logger = logging.getLogger(__name__)

GroupCallback = Callable[[int, StrokeGroup], None]
CompleteCallback = Callable[["PlaybackHandle"], None]


class PlaybackState(enum.Enum):
    IDLE = "idle"
    RUNNING = "running"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    FAILED = "failed"


def group_delay(group: StrokeGroup, config: LayoutConfig | None = None) -> float:
    """Pause after revealing ``group``."""
    config = config or LayoutConfig()
    if not group:
        return config.space_delay
    if len(group) > config.complex_glyph_strokes:
        return config.complex_glyph_delay
    return config.glyph_delay


class PlaybackHandle:
    """Cancellation handle and progress view for one playback run."""

    def __init__(
        self,
        groups: Sequence[StrokeGroup],
        sink: StrokeSink,
        on_group: GroupCallback | None = None,
        on_complete: CompleteCallback | None = None,
        config: LayoutConfig | None = None,
    ) -> None:
        self._groups = list(groups)
        self._sink = sink
        self._on_group = on_group
        self._on_complete = on_complete
        self._config = config or LayoutConfig()
        self._state = PlaybackState.IDLE
        self._task: asyncio.Task[None] | None = None
        self._finished = False
        self.revealed = 0
        self.error: Exception | None = None

    @property
    def state(self) -> PlaybackState:
        return self._state

    @property
    def cancelled(self) -> bool:
        return self._state is PlaybackState.CANCELLED

    @property
    def done(self) -> bool:
        return self._state in (PlaybackState.COMPLETED, PlaybackState.CANCELLED, PlaybackState.FAILED)

    @property
    def total(self) -> int:
        return len(self._groups)

    def start(self) -> PlaybackHandle:
        """Schedule the run on the current event loop."""
        if self._task is not None:
            raise RuntimeError("Playback already started")
        self._task = asyncio.get_running_loop().create_task(self._run())
        return self

    def cancel(self) -> bool:
        """Stop revealing groups. Returns False if playback had already ended."""
        if self.done:
            return False
        never_ran = self._state is PlaybackState.IDLE
        self._state = PlaybackState.CANCELLED
        if self._task is not None:
            self._task.cancel()
        if never_ran:
            # The coroutine body will not run, so report from here.
            self._finish()
        logger.debug("Playback cancelled after %d/%d groups", self.revealed, self.total)
        return True

    async def wait(self) -> PlaybackState:
        """Wait for the run to end without raising; check ``error`` when the state is FAILED."""
        if self._task is not None:
            await asyncio.wait({self._task})
        return self._state

    async def _run(self) -> None:
        self._state = PlaybackState.RUNNING
        try:
            for index, group in enumerate(self._groups):
                if self._state is not PlaybackState.RUNNING:
                    break
                with self._sink.suspend_notifications():
                    self._sink.append_strokes(group)
                self.revealed += 1
                if self._on_group is not None:
                    self._on_group(index, group)
                await asyncio.sleep(group_delay(group, self._config))
        except asyncio.CancelledError:
            self._state = PlaybackState.CANCELLED
            raise
        except Exception as e:
            self._state = PlaybackState.FAILED
            self.error = e
            logger.exception("Playback failed after %d/%d groups", self.revealed, self.total)
        finally:
            if self._state is PlaybackState.RUNNING:
                self._state = PlaybackState.COMPLETED
                logger.debug("Playback complete: %d groups", self.revealed)
            self._finish()

    def _finish(self) -> None:
        if self._finished:
            return
        self._finished = True
        if self._on_complete is not None:
            self._on_complete(self)


def play(
    groups: Sequence[StrokeGroup],
    sink: StrokeSink,
    on_group: GroupCallback | None = None,
    on_complete: CompleteCallback | None = None,
    config: LayoutConfig | None = None,
) -> PlaybackHandle:
    """Start revealing ``groups`` into ``sink``. Must be called from a running event loop."""
    return PlaybackHandle(groups, sink, on_group, on_complete, config).start()
