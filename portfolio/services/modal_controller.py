"""
Modal dialog controller for portfolio.

One dialog at a time, Closed -> Open -> Closed. Opening while a dialog is
already open replaces its content and close callback in place; the focus
to restore is still the one captured when the first dialog opened.

While open, Escape closes the dialog and Tab/Shift+Tab cycle through the
focusable elements inside it and nowhere else.
"""

import logging
from concurrent.futures import Future
from dataclasses import dataclass
from typing import Callable, Optional

from ..analytics import track_event
from ..markup import alert_html, confirm_html
from ..page import Announcer, Document, Element, Event, focusable_elements

logger = logging.getLogger(__name__)

OVERLAY_ID = 'modal-overlay'
PERMANENT_CLASSES = ('modal-overlay', 'hidden')


@dataclass
class _Session:
    title: str
    on_close: Optional[Callable[[], None]]
    previously_focused: Optional[Element]
    # Settles a pending confirm/alert result as dismissed
    dismiss: Optional[Callable[[], None]] = None


def _settle(future: Future, value) -> None:
    """Resolve a dialog result unless it already has one."""
    if not future.done():
        future.set_result(value)


class ModalController:
    """
    Accessible modal dialog bound to ``#modal-overlay``.

    Example:
        modal = ModalController(document, announcer)
        modal.initialize()
        answer = modal.show_confirm("Delete?", "This cannot be undone.")
        ...
        if answer.result():
            ...
    """

    def __init__(self, document: Document, announcer: Optional[Announcer] = None,
                 overlay_id: str = OVERLAY_ID):
        self.document = document
        self.announcer = announcer
        self.overlay_id = overlay_id
        self._session: Optional[_Session] = None
        self._closing: Optional[_Session] = None
        self._bound = False

    @property
    def is_open(self) -> bool:
        return self._session is not None

    @property
    def title(self) -> Optional[str]:
        return self._session.title if self._session else None

    def _overlay(self) -> Optional[Element]:
        return self.document.get_element_by_id(self.overlay_id)

    def _announce(self, message: str) -> None:
        if self.announcer is not None:
            self.announcer.announce(message)

    # -- setup ------------------------------------------------------------

    def initialize(self) -> None:
        """Bind the close button, overlay clicks and keyboard handling."""
        if self._bound:
            return
        overlay = self._overlay()
        if overlay is None:
            logger.warning('Modal overlay not found')
            return
        self._bound = True

        close_button = overlay.query_selector('.modal-close')
        if close_button is not None:
            close_button.add_event_listener('click', lambda event: self.close())

        def on_overlay_click(event: Event) -> None:
            if event.target is overlay:
                self.close()

        overlay.add_event_listener('click', on_overlay_click)

        container = overlay.query_selector('.modal-container')
        if container is not None:
            container.add_event_listener('click', lambda event: event.stop_propagation())

        self.document.add_event_listener('keydown', self._on_keydown)
        logger.debug('Modal system initialized')

    # -- lifecycle --------------------------------------------------------

    def open(self, title: str, content: str, class_name: Optional[str] = None,
             on_close: Optional[Callable[[], None]] = None) -> bool:
        """
        Show the dialog with a title and markup content.

        Returns:
            False if the modal elements are missing from the page
        """
        overlay = self._overlay()
        title_el = self.document.get_element_by_id('modal-title')
        body_el = self.document.get_element_by_id('modal-body')
        if overlay is None or title_el is None or body_el is None:
            logger.error('Modal elements not found')
            return False

        replaced = self._session
        if replaced is not None:
            previously_focused = replaced.previously_focused
            self._strip_classes(overlay)
        elif self._closing is not None:
            # Reopened from an on_close callback
            previously_focused = self._closing.previously_focused
        else:
            previously_focused = self.document.active_element

        title_el.text_content = title
        body_el.inner_html = content
        if class_name:
            overlay.add_class(class_name)

        self._session = _Session(title, on_close, previously_focused)
        if replaced is not None and replaced.dismiss is not None:
            # The replaced on_close is dropped, but its result still resolves
            replaced.dismiss()
        overlay.remove_class('hidden')
        self.document.body.style['overflow'] = 'hidden'

        close_button = overlay.query_selector('.modal-close')
        if close_button is not None:
            close_button.focus()

        if not focusable_elements(overlay):
            container = overlay.query_selector('.modal-container')
            if container is not None:
                container.set_attribute('tabindex', '-1')
                container.focus()

        self._announce(f"Dialog opened: {title}")
        track_event('modal_opened', title=title)
        return True

    def close(self) -> None:
        """Run the close callback once, hide the dialog, restore focus."""
        session = self._session
        if session is None:
            return
        self._session = None
        self._closing = session

        try:
            callback, session.on_close = session.on_close, None
            if callback is not None:
                try:
                    callback()
                except Exception as e:
                    self.document.report_error(e)
        finally:
            self._closing = None

        if self._session is not None:
            return

        overlay = self._overlay()
        if overlay is not None:
            self._strip_classes(overlay)
            overlay.add_class('hidden')
        self.document.body.style.pop('overflow', None)

        if session.previously_focused is not None:
            session.previously_focused.focus()

        self._announce('Dialog closed')
        track_event('modal_closed')

    def _strip_classes(self, overlay: Element) -> None:
        overlay.class_name = ' '.join(c for c in overlay.class_list if c in PERMANENT_CLASSES)
        overlay.add_class('modal-overlay')

    # -- keyboard ---------------------------------------------------------

    def _on_keydown(self, event: Event) -> None:
        if not self.is_open:
            return
        if event.key == 'Escape':
            event.prevent_default()
            self.close()
        elif event.key == 'Tab':
            self._trap_tab(event)

    def _trap_tab(self, event: Event) -> None:
        overlay = self._overlay()
        if overlay is None:
            return
        event.prevent_default()
        focusables = focusable_elements(overlay)
        if not focusables:
            return

        active = self.document.active_element
        if active in focusables:
            step = -1 if event.shift_key else 1
            target = focusables[(focusables.index(active) + step) % len(focusables)]
        else:
            target = focusables[-1] if event.shift_key else focusables[0]
        target.focus()

    # -- dialogs with results ---------------------------------------------

    def show_confirm(self, title: str, message: str, confirm_text: str = 'OK',
                     cancel_text: str = 'Cancel') -> 'Future[bool]':
        """
        Ask a yes/no question.

        Returns:
            Future resolving to True for the confirm button, False for any
            other way the dialog is dismissed
        """
        result: Future = Future()
        opened = self.open(
            title,
            confirm_html(message, confirm_text, cancel_text),
            class_name='confirm-modal',
            on_close=lambda: _settle(result, False),
        )
        if not opened:
            _settle(result, False)
            return result
        self._session.dismiss = lambda: _settle(result, False)

        def on_cancel(event: Event) -> None:
            _settle(result, False)
            self.close()

        def on_ok(event: Event) -> None:
            _settle(result, True)
            self.close()

        cancel_button = self.document.get_element_by_id('confirm-cancel')
        ok_button = self.document.get_element_by_id('confirm-ok')
        if cancel_button is not None:
            cancel_button.add_event_listener('click', on_cancel)
        if ok_button is not None:
            ok_button.add_event_listener('click', on_ok)
            ok_button.focus()
        return result

    def show_alert(self, title: str, message: str, button_text: str = 'OK') -> 'Future[None]':
        """
        Show a message with a single acknowledge button.

        Returns:
            Future resolving to None once the dialog is dismissed by any path
        """
        result: Future = Future()
        opened = self.open(
            title,
            alert_html(message, button_text),
            class_name='alert-modal',
            on_close=lambda: _settle(result, None),
        )
        if not opened:
            _settle(result, None)
            return result
        self._session.dismiss = lambda: _settle(result, None)

        def on_ok(event: Event) -> None:
            _settle(result, None)
            self.close()

        ok_button = self.document.get_element_by_id('alert-ok')
        if ok_button is not None:
            ok_button.add_event_listener('click', on_ok)
            ok_button.focus()
        return result
