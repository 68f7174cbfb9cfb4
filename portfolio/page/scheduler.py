"""
Timer scheduling for the page runtime.

The page is single-threaded: everything runs from one loop, and timers
are the only deferred work. The Scheduler keeps its own clock so the
page can be driven deterministically, either by advancing time
explicitly or by draining every pending timer.
"""

import heapq
import itertools
import logging
from typing import Callable, List, Optional, Tuple

logger = logging.getLogger(__name__)


class TimerHandle:
    """A scheduled callback that can be cancelled before it fires."""

    def __init__(self, when: float, callback: Callable[..., None], args: tuple):
        self.when = when
        self.callback = callback
        self.args = args
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True

    def __repr__(self) -> str:
        state = " cancelled" if self.cancelled else ""
        return f"<TimerHandle when={self.when:.3f}{state}>"


class Scheduler:
    """
    Virtual-clock timer queue.

    Example:
        scheduler = Scheduler()
        scheduler.call_later(0.3, print, "fired")
        scheduler.advance(0.3)  # prints "fired"
    """

    def __init__(self):
        self.now = 0.0
        self._queue: List[Tuple[float, int, TimerHandle]] = []
        self._sequence = itertools.count()
        # Called with any exception raised by a timer callback
        self.on_error: Optional[Callable[[BaseException], None]] = None

    def call_later(self, delay: float, callback: Callable[..., None], *args) -> TimerHandle:
        handle = TimerHandle(self.now + max(0.0, delay), callback, args)
        heapq.heappush(self._queue, (handle.when, next(self._sequence), handle))
        return handle

    @property
    def pending(self) -> int:
        return sum(1 for _, _, h in self._queue if not h.cancelled)

    def _run(self, handle: TimerHandle) -> None:
        try:
            handle.callback(*handle.args)
        except Exception as e:
            if self.on_error is not None:
                self.on_error(e)
            else:
                logger.error(f"Uncaught error in timer callback: {e}", exc_info=e)

    def advance(self, seconds: float) -> int:
        """
        Move the clock forward, firing every timer that falls due.

        Returns:
            Number of callbacks run
        """
        deadline = self.now + seconds
        ran = 0
        while self._queue and self._queue[0][0] <= deadline:
            when, _, handle = heapq.heappop(self._queue)
            if handle.cancelled:
                continue
            self.now = max(self.now, when)
            self._run(handle)
            ran += 1
        self.now = deadline
        return ran

    def run_until_idle(self) -> int:
        """Fire all pending timers, including ones scheduled along the way."""
        ran = 0
        while self._queue:
            when, _, handle = heapq.heappop(self._queue)
            if handle.cancelled:
                continue
            self.now = max(self.now, when)
            self._run(handle)
            ran += 1
        return ran

    def debounce(self, callback: Callable[..., None], wait: float) -> Callable[..., None]:
        """
        Wrap callback so a burst of calls runs it once, with the last
        call's arguments, after ``wait`` seconds of quiet.

        The wrapper's ``cancel()`` drops a pending call.
        """
        state = {'handle': None}

        def debounced(*args) -> None:
            if state['handle'] is not None:
                state['handle'].cancel()
            state['handle'] = self.call_later(wait, fire, *args)

        def fire(*args) -> None:
            state['handle'] = None
            callback(*args)

        def cancel() -> None:
            if state['handle'] is not None:
                state['handle'].cancel()
                state['handle'] = None

        debounced.cancel = cancel
        return debounced
