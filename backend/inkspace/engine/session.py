"""Interaction session: one response cycle at a time over a shared canvas.

A cycle is: analyze the canvas, capture the annotated snapshot, ask the
reasoning service, place the reply, synthesize it and play it back into the
canvas. New user ink cancels whatever cycle is active, and with auto-send on,
re-arms a debounce timer that starts the next one once the user pauses.
"""

from __future__ import annotations

import asyncio
import enum
import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass

from inkspace.engine.config import LayoutConfig
from inkspace.engine.context import Placement, Stroke
from inkspace.engine.placement import place
from inkspace.engine.playback import PlaybackHandle, PlaybackState, play
from inkspace.engine.sink import InkCanvas
from inkspace.engine.synthesis import GlyphSynthesizer
from inkspace.errors import ExternalServiceError
from inkspace.reasoning.service import ReasoningService
from inkspace.render.snapshot import CanvasCapture, capture_canvas

logger = logging.getLogger(__name__)

CaptureFunction = Callable[[Sequence[Stroke], int, LayoutConfig], CanvasCapture]


class CycleStatus(enum.Enum):
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    CANCELLED = "cancelled"
    SKIPPED = "skipped"


@dataclass(frozen=True)
class CycleResult:
    """Outcome of one response cycle."""

    status: CycleStatus
    recognized_text: str = ""
    response_text: str = ""
    placement: Placement | None = None
    error: Exception | None = None


ResultCallback = Callable[[CycleResult], None]


class InkSession:
    """Owns the cycle state for one canvas.

    State kept between cycles:
      - ``ai_baseline``: stroke count right after the last revealed group of
        generated ink; strokes past it are the user's latest writing.
      - ``last_user_count``: stroke count last seen by the change listener.
    """

    def __init__(
        self,
        canvas: InkCanvas,
        reasoning: ReasoningService,
        synthesizer: GlyphSynthesizer,
        config: LayoutConfig | None = None,
        auto_send: bool = False,
        capture: CaptureFunction = capture_canvas,
        on_result: ResultCallback | None = None,
        content_size: tuple[float, float] | None = None,
    ) -> None:
        self.canvas = canvas
        self.reasoning = reasoning
        self.synthesizer = synthesizer
        self.config = config or LayoutConfig()
        self.auto_send = auto_send
        self.content_size = content_size
        self._capture = capture
        self._on_result = on_result

        self.ai_baseline = 0
        self.last_user_count = len(canvas)
        self.last_result: CycleResult | None = None
        self._cycle = 0
        self._task: asyncio.Task[CycleResult] | None = None
        self._playback: PlaybackHandle | None = None
        self._debounce: asyncio.TimerHandle | None = None

        canvas.add_listener(self.handle_canvas_change)

    @property
    def active(self) -> bool:
        return self._task is not None and not self._task.done()

    @property
    def debounce_pending(self) -> bool:
        return self._debounce is not None

    def handle_canvas_change(self) -> None:
        """Canvas listener. Only user edits reach here; playback writes are suspended."""
        count = len(self.canvas)
        if count <= self.last_user_count:
            # Strokes removed: keep the baseline inside the canvas.
            self.last_user_count = count
            self.ai_baseline = min(self.ai_baseline, count)
            return

        self.last_user_count = count
        if self.active:
            logger.info("New ink cancelled the active response cycle")
        self.cancel()

        if self.auto_send:
            loop = asyncio.get_running_loop()
            self._debounce = loop.call_later(self.config.debounce_seconds, self._debounced_send)
            logger.debug("Auto-send armed (%.1fs)", self.config.debounce_seconds)

    def send(self) -> asyncio.Task[CycleResult]:
        """Start a response cycle now, cancelling any active one."""
        self.cancel()
        self._cycle += 1
        token = self._cycle
        task = asyncio.get_running_loop().create_task(self._run_cycle(token))
        task.add_done_callback(lambda t: self._cycle_done(token, t))
        self._task = task
        return task

    def cancel(self) -> bool:
        """Cancel the debounce timer and the active cycle. Returns True if anything was active."""
        cancelled = False
        if self._debounce is not None:
            self._debounce.cancel()
            self._debounce = None
            cancelled = True
        if self._playback is not None:
            cancelled = self._playback.cancel() or cancelled
            self._playback = None
        if self._task is not None and not self._task.done():
            self._task.cancel()
            cancelled = True
        self._task = None
        return cancelled

    def clear(self) -> None:
        """Cancel everything, reset the counters and empty the canvas."""
        self.cancel()
        self.ai_baseline = 0
        self.last_user_count = 0
        self.canvas.clear()

    def _debounced_send(self) -> None:
        self._debounce = None
        logger.debug("Auto-send firing after pause")
        self.send()

    async def _run_cycle(self, token: int) -> CycleResult:
        strokes = self.canvas.strokes
        if not strokes:
            logger.debug("Cycle %d skipped: empty canvas", token)
            return CycleResult(status=CycleStatus.SKIPPED)

        recent_count = max(1, len(strokes) - self.ai_baseline)
        logger.info("Cycle %d: %d strokes, %d recent", token, len(strokes), recent_count)

        reply = None
        placement = None
        try:
            capture = self._capture(strokes, recent_count, self.config)
            reply = await self.reasoning.respond(capture.image, capture.metadata)
            placement = place(capture.metadata, self.content_size, self.config)
            groups = self.synthesizer.synthesize(reply.response_text, placement.origin, placement.width)

            playback = self._playback = play(
                groups,
                self.canvas,
                on_group=lambda _index, _group: self._group_revealed(token),
                config=self.config,
            )
            state = await playback.wait()
        except ExternalServiceError as e:
            logger.warning("Cycle %d failed: %s", token, e)
            return CycleResult(status=CycleStatus.FAILED, error=e)
        except asyncio.CancelledError:
            if self._playback is not None and token == self._cycle:
                self._playback.cancel()
            logger.info("Cycle %d cancelled", token)
            return CycleResult(
                status=CycleStatus.CANCELLED,
                recognized_text=reply.recognized_text if reply else "",
                response_text=reply.response_text if reply else "",
                placement=placement,
            )

        if state is PlaybackState.FAILED:
            logger.warning("Cycle %d failed during playback: %s", token, playback.error)
            status = CycleStatus.FAILED
        elif state is PlaybackState.COMPLETED:
            status = CycleStatus.SUCCEEDED
        else:
            status = CycleStatus.CANCELLED
        logger.info("Cycle %d %s: %r", token, status.value, reply.response_text)
        return CycleResult(
            status=status,
            recognized_text=reply.recognized_text,
            response_text=reply.response_text,
            placement=placement,
            error=playback.error,
        )

    def _group_revealed(self, token: int) -> None:
        if token != self._cycle:
            return
        count = len(self.canvas)
        self.ai_baseline = count
        self.last_user_count = count

    def _cycle_done(self, token: int, task: asyncio.Task[CycleResult]) -> None:
        if task.cancelled():
            # Cancelled before the coroutine ever ran.
            result = CycleResult(status=CycleStatus.CANCELLED)
        elif task.exception() is not None:
            error = task.exception()
            logger.error("Cycle %d raised: %s", token, error)
            result = CycleResult(status=CycleStatus.FAILED, error=error)
        else:
            result = task.result()

        if token == self._cycle:
            self._playback = None
            self._task = None
        self.last_result = result
        if self._on_result is not None:
            self._on_result(result)

