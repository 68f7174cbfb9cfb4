"""
Screen reader announcements through an ARIA live region.
"""

import logging
from collections import deque
from typing import Deque, Optional

from .document import Document, Element
from .scheduler import Scheduler, TimerHandle

logger = logging.getLogger(__name__)

LIVE_REGION_ID = 'live-region'
CLEAR_AFTER_SECONDS = 1.0
HISTORY_LIMIT = 50


class Announcer:
    """
    Writes status messages into a polite live region and clears them
    shortly after, so repeated messages are read again. The last
    ``history_limit`` messages are kept in ``history``.
    """

    def __init__(self, document: Document, scheduler: Scheduler,
                 region_id: str = LIVE_REGION_ID, clear_after: float = CLEAR_AFTER_SECONDS,
                 history_limit: int = HISTORY_LIMIT):
        self.document = document
        self.scheduler = scheduler
        self.region_id = region_id
        self.clear_after = clear_after
        self.history: Deque[str] = deque(maxlen=history_limit)
        self._clear_handle: Optional[TimerHandle] = None

    def region(self) -> Element:
        """The live region, created on first use if the page lacks one."""
        region = self.document.get_element_by_id(self.region_id)
        if region is None:
            region = self.document.create_element('div', {
                'id': self.region_id,
                'aria-live': 'polite',
                'aria-atomic': 'true',
                'class': 'visually-hidden',
            })
            self.document.body.append_child(region)
        return region

    def announce(self, message: str) -> None:
        region = self.region()
        region.text_content = message
        self.history.append(message)
        logger.debug(f"Announced: {message}")

        if self._clear_handle is not None:
            self._clear_handle.cancel()
        self._clear_handle = self.scheduler.call_later(self.clear_after, self._clear, region)

    def _clear(self, region: Element) -> None:
        self._clear_handle = None
        region.text_content = ''
