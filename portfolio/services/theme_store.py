"""
Theme store for portfolio.

Holds the light/dark flag for the page lifetime. The stored user choice
wins over the OS preference; without one, the page follows the OS and
keeps following it as it changes. Storage problems are logged and the
store carries on with its in-memory value.
"""

import logging
from typing import Callable, List, Optional

from ..analytics import track_event
from ..domain import Theme
from ..errors import StorageError
from ..page import Announcer, ColorSchemeQuery, Document, Event

logger = logging.getLogger(__name__)

THEME_KEY = 'portfolio-theme'
THEME_ATTRIBUTE = 'data-theme'


class ThemeStore:
    """
    Light/dark theme state bound to the document root.

    Example:
        store = ThemeStore(document, LocalStorage(path), ColorSchemeQuery())
        store.initialize()
        store.subscribe(lambda theme: print("now", theme))
        store.toggle()
    """

    def __init__(
        self,
        document: Document,
        storage,
        system: ColorSchemeQuery,
        announcer: Optional[Announcer] = None,
        storage_key: str = THEME_KEY,
    ):
        self.document = document
        self.storage = storage
        self.system = system
        self.announcer = announcer
        self.storage_key = storage_key
        self._theme = Theme.LIGHT
        self._explicit = False
        self._listeners: List[Callable[[Theme], None]] = []
        self._bound = False

    @property
    def current(self) -> Theme:
        return self._theme

    @property
    def is_dark(self) -> bool:
        return self._theme is Theme.DARK

    # -- persistence ------------------------------------------------------

    def stored_theme(self) -> Optional[Theme]:
        """The saved theme, or None when nothing valid is saved."""
        try:
            value = self.storage.get_item(self.storage_key)
        except (StorageError, OSError) as e:
            logger.warning(f"Could not access storage for theme: {e}")
            return None
        if value is None:
            return None
        try:
            return Theme.parse(value)
        except ValueError:
            logger.warning(f"Ignoring invalid stored theme: {value!r}")
            return None

    def _store(self, theme: Theme) -> None:
        try:
            self.storage.set_item(self.storage_key, theme.value)
        except (StorageError, OSError) as e:
            logger.warning(f"Could not store theme: {e}")

    def _system_theme(self) -> Theme:
        return Theme.DARK if self.system.matches else Theme.LIGHT

    # -- applying ---------------------------------------------------------

    def _apply(self, theme: Theme, store: bool = True) -> None:
        self._theme = theme
        self.document.root.set_attribute(THEME_ATTRIBUTE, theme.value)
        self._update_toggle_button()
        if store:
            self._store(theme)
        for listener in list(self._listeners):
            try:
                listener(theme)
            except Exception as e:
                self.document.report_error(e)

    def _update_toggle_button(self) -> None:
        button = self.document.query_selector('.theme-toggle')
        icon = self.document.query_selector('.theme-toggle-icon')
        if button is None or icon is None:
            return
        label = 'Switch to light mode' if self.is_dark else 'Switch to dark mode'
        icon.text_content = '☀️' if self.is_dark else '🌙'
        button.set_attribute('aria-label', label)
        button.set_attribute('title', label)

    # -- public operations ------------------------------------------------

    def initialize(self) -> Theme:
        """
        Resolve and apply the starting theme: stored choice, else OS.

        Binds the toggle control and the OS preference listener on the
        first call.
        """
        stored = self.stored_theme()
        self._explicit = stored is not None
        self._apply(stored or self._system_theme(), store=False)

        if not self._bound:
            self._bound = True
            self._bind_toggle_button()
            self.system.add_listener(self._on_system_change)

        logger.debug(f"Theme initialized: {self._theme.value}")
        return self._theme

    def toggle(self) -> Theme:
        """Flip the theme, persist it, and announce the change."""
        theme = self._theme.opposite
        self._explicit = True
        self._apply(theme)
        if self.announcer is not None:
            self.announcer.announce(f"Switched to {theme.value} mode")
        track_event('theme_toggle', theme=theme.value)
        return theme

    def force_set(self, theme) -> None:
        """Apply and persist an explicit theme; invalid values are ignored."""
        try:
            theme = Theme.parse(theme)
        except ValueError:
            logger.warning(f"Invalid theme: {theme!r}")
            return
        self._explicit = True
        self._apply(theme)

    def reset_to_system(self) -> Theme:
        """Forget the stored choice and follow the OS preference again."""
        self._explicit = False
        try:
            self.storage.remove_item(self.storage_key)
        except (StorageError, OSError) as e:
            logger.warning(f"Could not clear theme from storage: {e}")
        self._apply(self._system_theme(), store=False)
        return self._theme

    def subscribe(self, callback: Callable[[Theme], None]) -> None:
        """Call ``callback(theme)`` after every change, in registration order."""
        self._listeners.append(callback)

    # -- bindings ---------------------------------------------------------

    def _on_system_change(self, prefers_dark: bool) -> None:
        if self._explicit or self.stored_theme() is not None:
            return
        self._apply(Theme.DARK if prefers_dark else Theme.LIGHT, store=False)

    def _bind_toggle_button(self) -> None:
        button = self.document.query_selector('.theme-toggle')
        if button is None:
            logger.warning('Theme toggle button not found')
            return

        def on_click(event: Event) -> None:
            event.prevent_default()
            self.toggle()

        def on_keydown(event: Event) -> None:
            if event.key in ('Enter', ' '):
                event.prevent_default()
                self.toggle()

        button.add_event_listener('click', on_click)
        button.add_event_listener('keydown', on_keydown)
        self._update_toggle_button()
