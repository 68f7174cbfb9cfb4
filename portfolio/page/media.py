"""
The operating-system color scheme preference.

Stands in for ``matchMedia('(prefers-color-scheme: dark)')``: it reports
whether dark mode is preferred and notifies listeners when that changes.
"""

import os
import logging
from typing import Callable, List, Optional

logger = logging.getLogger(__name__)


class ColorSchemeQuery:
    """Whether the OS prefers a dark color scheme."""

    def __init__(self, prefers_dark: bool = False):
        self._matches = prefers_dark
        self._listeners: List[Callable[[bool], None]] = []

    @property
    def matches(self) -> bool:
        return self._matches

    def add_listener(self, listener: Callable[[bool], None]) -> None:
        self._listeners.append(listener)

    def set_matches(self, prefers_dark: bool) -> None:
        """Record an OS preference change and notify listeners."""
        if prefers_dark == self._matches:
            return
        self._matches = prefers_dark
        logger.debug(f"System color scheme changed: {'dark' if prefers_dark else 'light'}")
        for listener in list(self._listeners):
            listener(prefers_dark)

    @classmethod
    def from_environment(cls, configured: Optional[str] = None) -> 'ColorSchemeQuery':
        """
        Resolve the preference from config, then the terminal.

        ``configured`` may be "light" or "dark". Otherwise ``COLORFGBG``
        ("fg;bg", set by many terminals) decides: a background color of
        0-6 or 8 is dark. Defaults to light.
        """
        if configured in ('light', 'dark'):
            return cls(prefers_dark=configured == 'dark')

        colorfgbg = os.environ.get('COLORFGBG', '')
        background = colorfgbg.split(';')[-1] if colorfgbg else ''
        if background.isdigit():
            return cls(prefers_dark=int(background) in (0, 1, 2, 3, 4, 5, 6, 8))
        return cls(prefers_dark=False)
