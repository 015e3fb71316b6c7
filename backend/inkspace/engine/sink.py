"""Live stroke collection shared by user input and playback."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Iterator, Sequence
from contextlib import AbstractContextManager, contextmanager
from typing import Protocol

from inkspace.engine.context import Stroke

logger = logging.getLogger(__name__)

ChangeListener = Callable[[], None]


class StrokeSink(Protocol):
    """What the playback scheduler needs from the presentation surface."""

    @property
    def strokes(self) -> Sequence[Stroke]: ...

    def append_strokes(self, strokes: Iterable[Stroke]) -> None: ...

    def suspend_notifications(self) -> AbstractContextManager[None]: ...


class InkCanvas:
    """In-memory drawing: an ordered stroke list plus change listeners.

    Every mutation notifies listeners once, unless it happens inside
    ``suspend_notifications()``; that is how playback keeps its own writes from
    looking like new user ink.
    """

    def __init__(self, strokes: Iterable[Stroke] = ()) -> None:
        self._strokes: list[Stroke] = list(strokes)
        self._listeners: list[ChangeListener] = []
        self._suspended = 0

    @property
    def strokes(self) -> tuple[Stroke, ...]:
        return tuple(self._strokes)

    def __len__(self) -> int:
        return len(self._strokes)

    @property
    def notifications_suspended(self) -> bool:
        return self._suspended > 0

    def add_listener(self, listener: ChangeListener) -> None:
        self._listeners.append(listener)

    def remove_listener(self, listener: ChangeListener) -> None:
        self._listeners.remove(listener)

    def add_stroke(self, stroke: Stroke) -> None:
        """Capture-surface entry point for one finished user stroke."""
        self.append_strokes([stroke])

    def append_strokes(self, strokes: Iterable[Stroke]) -> None:
        """Append all strokes as one update (listeners fire once, after the append)."""
        batch = list(strokes)
        self._strokes.extend(batch)
        self._notify()

    def clear(self) -> None:
        logger.debug("Clearing %d strokes", len(self._strokes))
        self._strokes.clear()
        self._notify()

    @contextmanager
    def suspend_notifications(self) -> Iterator[None]:
        self._suspended += 1
        try:
            yield
        finally:
            self._suspended -= 1

    def _notify(self) -> None:
        if self._suspended:
            return
        for listener in list(self._listeners):
            listener()
