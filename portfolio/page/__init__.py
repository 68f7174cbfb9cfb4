"""
Headless page runtime for portfolio.

- Document/Element: the page tree, focus and event dispatch
- Scheduler: timers on a virtual clock
- Announcer: screen reader live region
- ColorSchemeQuery: the OS light/dark preference
- build_document: the page skeleton the components bind to
"""

from .document import (
    Document,
    Element,
    Event,
    Text,
    Window,
    OpenedLink,
    focusable_elements,
    is_focusable,
    is_hidden,
)
from .scheduler import Scheduler, TimerHandle
from .announcer import Announcer
from .media import ColorSchemeQuery
from .layout import build_document

__all__ = [
    'Document',
    'Element',
    'Event',
    'Text',
    'Window',
    'OpenedLink',
    'focusable_elements',
    'is_focusable',
    'is_hidden',
    'Scheduler',
    'TimerHandle',
    'Announcer',
    'ColorSchemeQuery',
    'build_document',
]
