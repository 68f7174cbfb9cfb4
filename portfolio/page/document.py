"""
Headless document model for the portfolio page.

A small tree of elements with the parts of the browser DOM the page
components rely on:

- attributes, class lists, inline styles, text content
- ``inner_html`` parsing (html.parser) and serialization
- compound selectors: ``tag``, ``#id``, ``.class``, ``[attr]``, ``[attr="v"]``
- focus tracking and sequential (Tab) navigation
- event dispatch with bubbling, ``stop_propagation`` and ``prevent_default``
- default actions: Tab moves focus, Enter/Space press buttons, clicking a
  link opens it through the window

Exceptions raised by listeners never reach the caller of a dispatch; they
are reported to ``Document.on_error`` the way a browser reports them to
``window.onerror``.
"""

import re
import logging
from dataclasses import dataclass
from html import escape
from html.parser import HTMLParser
from typing import Callable, Dict, Iterator, List, Optional, Tuple, Union

logger = logging.getLogger(__name__)

VOID_ELEMENTS = frozenset({
    'area', 'base', 'br', 'col', 'embed', 'hr', 'img', 'input',
    'link', 'meta', 'source', 'track', 'wbr',
})
RAW_TEXT_ELEMENTS = frozenset({'script', 'style'})
FORM_CONTROLS = frozenset({'button', 'input', 'select', 'textarea'})

Listener = Callable[['Event'], None]


class Event:
    """A dispatched UI event (click, keydown, input, ...)."""

    def __init__(self, type: str, key: Optional[str] = None, shift_key: bool = False, detail=None):
        self.type = type
        self.key = key
        self.shift_key = shift_key
        self.detail = detail
        self.target: Optional['Element'] = None
        self.current_target = None
        self.default_prevented = False
        self.propagation_stopped = False

    def prevent_default(self) -> None:
        self.default_prevented = True

    def stop_propagation(self) -> None:
        self.propagation_stopped = True

    def __repr__(self) -> str:
        return f"Event({self.type!r}, key={self.key!r})"


class Text:
    """A text node."""

    def __init__(self, data: str):
        self.data = data
        self.parent: Optional['Element'] = None

    def __repr__(self) -> str:
        return f"Text({self.data!r})"


# ---------------------------------------------------------------------------
# Selectors
# ---------------------------------------------------------------------------

_TAG_RE = re.compile(r'\*|[a-zA-Z][\w-]*')
_PART_RE = re.compile(
    r'#(?P<id>[\w-]+)'
    r'|\.(?P<cls>[\w-]+)'
    r'|\[\s*(?P<attr>[\w-]+)\s*(?:=\s*(?P<q>["\']?)(?P<val>[^"\'\]]*)(?P=q)\s*)?\]'
)


@dataclass(frozen=True)
class _Compound:
    tag: Optional[str]
    ids: Tuple[str, ...]
    classes: Tuple[str, ...]
    attrs: Tuple[Tuple[str, Optional[str]], ...]

    def matches(self, element: 'Element') -> bool:
        if self.tag and self.tag != '*' and element.tag != self.tag:
            return False
        if any(element.id != i for i in self.ids):
            return False
        if any(not element.has_class(c) for c in self.classes):
            return False
        for name, value in self.attrs:
            if not element.has_attribute(name):
                return False
            if value is not None and element.get_attribute(name) != value:
                return False
        return True


def compile_selector(selector: str) -> List[_Compound]:
    """
    Compile a comma-separated list of compound selectors.

    Raises:
        ValueError: For combinators or pseudo-classes, which are not supported
    """
    compounds = []
    for part in selector.split(','):
        part = part.strip()
        if not part:
            raise ValueError(f"Empty selector in {selector!r}")
        pos = 0
        tag = None
        m = _TAG_RE.match(part)
        if m:
            tag = m.group(0).lower()
            pos = m.end()
        ids, classes, attrs = [], [], []
        while pos < len(part):
            m = _PART_RE.match(part, pos)
            if not m:
                raise ValueError(f"Unsupported selector: {selector!r}")
            if m.group('id'):
                ids.append(m.group('id'))
            elif m.group('cls'):
                classes.append(m.group('cls'))
            else:
                attrs.append((m.group('attr').lower(), m.group('val') if m.group('q') is not None else None))
            pos = m.end()
        compounds.append(_Compound(tag, tuple(ids), tuple(classes), tuple(attrs)))
    return compounds


# ---------------------------------------------------------------------------
# Elements
# ---------------------------------------------------------------------------

class Element:
    """An element node."""

    def __init__(self, tag: str, document: Optional['Document'] = None, attributes: Optional[Dict[str, str]] = None):
        self.tag = tag.lower()
        self.document = document
        self.parent: Optional['Element'] = None
        self.children: List[Union['Element', Text]] = []
        self.attributes: Dict[str, str] = {}
        self.style: Dict[str, str] = {}
        self._listeners: Dict[str, List[Listener]] = {}
        for name, value in (attributes or {}).items():
            self.set_attribute(name, value)

    def __repr__(self) -> str:
        ident = f"#{self.id}" if self.id else ""
        classes = "".join(f".{c}" for c in self.class_list)
        return f"<{self.tag}{ident}{classes}>"

    # -- attributes -------------------------------------------------------

    def get_attribute(self, name: str) -> Optional[str]:
        return self.attributes.get(name.lower())

    def set_attribute(self, name: str, value) -> None:
        name = name.lower()
        if name == 'style':
            self.style = _parse_style(str(value))
            return
        self.attributes[name] = '' if value is None else str(value)

    def remove_attribute(self, name: str) -> None:
        self.attributes.pop(name.lower(), None)

    def has_attribute(self, name: str) -> bool:
        return name.lower() in self.attributes

    def data(self, name: str) -> Optional[str]:
        """Value of a ``data-*`` attribute."""
        return self.get_attribute(f'data-{name}')

    @property
    def id(self) -> Optional[str]:
        return self.attributes.get('id')

    @property
    def value(self) -> str:
        return self.attributes.get('value', '')

    @value.setter
    def value(self, text: str) -> None:
        self.attributes['value'] = text

    @property
    def disabled(self) -> bool:
        return 'disabled' in self.attributes

    # -- classes ----------------------------------------------------------

    @property
    def class_list(self) -> List[str]:
        return self.attributes.get('class', '').split()

    @property
    def class_name(self) -> str:
        return ' '.join(self.class_list)

    @class_name.setter
    def class_name(self, value: str) -> None:
        classes = value.split()
        if classes:
            self.attributes['class'] = ' '.join(classes)
        else:
            self.attributes.pop('class', None)

    def has_class(self, name: str) -> bool:
        return name in self.class_list

    def add_class(self, *names: str) -> None:
        classes = self.class_list
        for name in names:
            if name and name not in classes:
                classes.append(name)
        self.class_name = ' '.join(classes)

    def remove_class(self, *names: str) -> None:
        self.class_name = ' '.join(c for c in self.class_list if c not in names)

    # -- tree -------------------------------------------------------------

    def append_child(self, node):
        if node.parent is not None:
            node.parent.remove_child(node)
        node.parent = self
        if isinstance(node, Element):
            node._adopt(self.document)
        self.children.append(node)
        return node

    def remove_child(self, node) -> None:
        self.children.remove(node)
        node.parent = None

    def remove(self) -> None:
        """Detach from the parent, if any."""
        if self.parent is not None:
            self.parent.remove_child(self)

    def clear(self) -> None:
        for child in list(self.children):
            self.remove_child(child)

    def _adopt(self, document: Optional['Document']) -> None:
        self.document = document
        for child in self.children:
            if isinstance(child, Element):
                child._adopt(document)

    def iter_descendants(self) -> Iterator['Element']:
        """Descendant elements in document order (self excluded)."""
        for child in self.children:
            if isinstance(child, Element):
                yield child
                yield from child.iter_descendants()

    def ancestors(self) -> Iterator['Element']:
        node = self.parent
        while node is not None:
            yield node
            node = node.parent

    def contains(self, other: Optional['Element']) -> bool:
        """True if other is this element or one of its descendants."""
        if other is None:
            return False
        return other is self or any(a is self for a in other.ancestors())

    @property
    def is_connected(self) -> bool:
        """Attached to its document's tree."""
        if self.document is None:
            return False
        root = self.document.root
        return self is root or any(a is root for a in self.ancestors())

    # -- selectors --------------------------------------------------------

    def matches(self, selector: str) -> bool:
        return any(c.matches(self) for c in compile_selector(selector))

    def closest(self, selector: str) -> Optional['Element']:
        compounds = compile_selector(selector)
        node: Optional[Element] = self
        while node is not None:
            if any(c.matches(node) for c in compounds):
                return node
            node = node.parent
        return None

    def query_selector_all(self, selector: str) -> List['Element']:
        compounds = compile_selector(selector)
        return [el for el in self.iter_descendants() if any(c.matches(el) for c in compounds)]

    def query_selector(self, selector: str) -> Optional['Element']:
        compounds = compile_selector(selector)
        for el in self.iter_descendants():
            if any(c.matches(el) for c in compounds):
                return el
        return None

    # -- content ----------------------------------------------------------

    @property
    def text_content(self) -> str:
        parts = []
        for child in self.children:
            if isinstance(child, Text):
                parts.append(child.data)
            else:
                parts.append(child.text_content)
        return ''.join(parts)

    @text_content.setter
    def text_content(self, text: str) -> None:
        self.clear()
        if text:
            self.append_child(Text(text))

    @property
    def inner_html(self) -> str:
        return ''.join(serialize(child) for child in self.children)

    @inner_html.setter
    def inner_html(self, markup: str) -> None:
        self.clear()
        for node in parse_fragment(markup, self.document):
            self.append_child(node)

    @property
    def outer_html(self) -> str:
        return serialize(self)

    # -- events and focus -------------------------------------------------

    def add_event_listener(self, type: str, listener: Listener) -> None:
        self._listeners.setdefault(type, []).append(listener)

    def remove_event_listener(self, type: str, listener: Listener) -> None:
        listeners = self._listeners.get(type, [])
        if listener in listeners:
            listeners.remove(listener)

    def focus(self) -> bool:
        """Move focus here; silently ignored when detached."""
        if self.document is None:
            return False
        return self.document.set_focus(self)

    def blur(self) -> None:
        if self.document is not None and self.document.active_element is self:
            self.document.active_element = self.document.body

    def click(self) -> Event:
        if self.document is None:
            return Event('click')
        return self.document.click(self)


# ---------------------------------------------------------------------------
# Focusability and visibility
# ---------------------------------------------------------------------------

def _tab_index(element: Element) -> Optional[int]:
    raw = element.get_attribute('tabindex')
    if raw is None:
        return None
    try:
        return int(raw)
    except ValueError:
        return None


def is_hidden(element: Element) -> bool:
    """Hidden through display, visibility or opacity on itself or an ancestor."""
    for node in [element, *element.ancestors()]:
        if node.has_class('hidden') or node.has_attribute('hidden'):
            return True
        if node.style.get('display') == 'none' or node.style.get('visibility') == 'hidden':
            return True
        opacity = node.style.get('opacity')
        if opacity is not None and opacity.strip() in ('0', '0.0'):
            return True
    return False


def is_disabled(element: Element) -> bool:
    if element.tag in FORM_CONTROLS and element.disabled:
        return True
    return any(n.get_attribute('aria-disabled') == 'true' for n in [element, *element.ancestors()])


def is_focusable(element: Element) -> bool:
    """
    Part of the sequential focus order: an interactive tag or a
    non-negative tabindex, not disabled and not hidden.
    """
    tab_index = _tab_index(element)
    if tab_index is not None and tab_index < 0:
        return False
    interactive = (
        element.tag in FORM_CONTROLS
        or (element.tag == 'a' and element.has_attribute('href'))
        or element.get_attribute('contenteditable') == 'true'
        or tab_index is not None
    )
    if not interactive:
        return False
    return not is_disabled(element) and not is_hidden(element)


def focusable_elements(container: Element) -> List[Element]:
    return [el for el in container.iter_descendants() if is_focusable(el)]


# ---------------------------------------------------------------------------
# Window and document
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class OpenedLink:
    url: str
    target: str
    features: str


class Window:
    """Browsing-context operations; opened URLs are recorded and logged."""

    def __init__(self):
        self.opened: List[OpenedLink] = []

    def open(self, url: str, target: str = '_blank', features: str = '') -> None:
        logger.info(f"Opening {url} in {target}")
        self.opened.append(OpenedLink(url, target, features))


class Document:
    """
    The page document.

    Example:
        doc = Document()
        button = doc.create_element('button', {'id': 'ok'})
        doc.body.append_child(button)
        button.focus()
        doc.press_key('Tab')
    """

    def __init__(self, window: Optional[Window] = None):
        self.window = window or Window()
        self.root = Element('html', document=self)
        self.head = self.root.append_child(Element('head', document=self))
        self.body = self.root.append_child(Element('body', document=self))
        self.active_element: Element = self.body
        self._listeners: Dict[str, List[Listener]] = {}
        # Called with any exception raised by a listener
        self.on_error: Optional[Callable[[BaseException], None]] = None

    def create_element(self, tag: str, attributes: Optional[Dict[str, str]] = None) -> Element:
        return Element(tag, document=self, attributes=attributes)

    def parse_fragment(self, markup: str) -> List[Union[Element, Text]]:
        return parse_fragment(markup, self)

    def get_element_by_id(self, element_id: str) -> Optional[Element]:
        if self.root.id == element_id:
            return self.root
        for el in self.root.iter_descendants():
            if el.id == element_id:
                return el
        return None

    def query_selector(self, selector: str) -> Optional[Element]:
        if self.root.matches(selector):
            return self.root
        return self.root.query_selector(selector)

    def query_selector_all(self, selector: str) -> List[Element]:
        found = self.root.query_selector_all(selector)
        return [self.root] + found if self.root.matches(selector) else found

    def add_event_listener(self, type: str, listener: Listener) -> None:
        self._listeners.setdefault(type, []).append(listener)

    def remove_event_listener(self, type: str, listener: Listener) -> None:
        listeners = self._listeners.get(type, [])
        if listener in listeners:
            listeners.remove(listener)

    # -- dispatch ---------------------------------------------------------

    def report_error(self, exc: BaseException) -> None:
        if self.on_error is not None:
            self.on_error(exc)
        else:
            logger.error(f"Uncaught error in event listener: {exc}", exc_info=exc)

    def _invoke(self, listeners: List[Listener], event: Event) -> None:
        for listener in list(listeners):
            try:
                listener(event)
            except Exception as e:
                self.report_error(e)

    def dispatch_event(self, target: Element, event: Event) -> bool:
        """
        Dispatch an event at target and bubble it to the document.

        Returns:
            False if a listener called prevent_default()
        """
        event.target = target
        for node in [target, *target.ancestors()]:
            event.current_target = node
            self._invoke(node._listeners.get(event.type, []), event)
            if event.propagation_stopped:
                return not event.default_prevented
        if target.is_connected:
            event.current_target = self
            self._invoke(self._listeners.get(event.type, []), event)
        return not event.default_prevented

    # -- user interaction ---------------------------------------------------

    def set_focus(self, element: Element) -> bool:
        if element.document is not self or not element.is_connected:
            return False
        self.active_element = element
        return True

    def click(self, element: Element) -> Event:
        """Click an element; links open through the window unless prevented."""
        event = Event('click')
        if element.tag in FORM_CONTROLS and element.disabled:
            return event
        self.dispatch_event(element, event)
        if not event.default_prevented:
            link = element.closest('a[href]')
            if link is not None:
                rel = link.get_attribute('rel') or ''
                self.window.open(
                    link.get_attribute('href'),
                    link.get_attribute('target') or '_self',
                    ','.join(rel.split()),
                )
        return event

    def press_key(self, key: str, shift: bool = False) -> Event:
        """Press a key on the focused element."""
        target = self.active_element if self.active_element.is_connected else self.body
        event = Event('keydown', key=key, shift_key=shift)
        self.dispatch_event(target, event)
        if event.default_prevented:
            return event
        if key == 'Tab':
            self._move_focus(target, backwards=shift)
        elif key in ('Enter', ' ') and (
            target.tag == 'button' or (key == 'Enter' and target.tag == 'a' and target.has_attribute('href'))
        ):
            self.click(target)
        return event

    def type_text(self, element: Element, text: str) -> Event:
        """Replace an input's value and fire an input event."""
        element.value = text
        event = Event('input', detail=text)
        self.dispatch_event(element, event)
        return event

    def _move_focus(self, current: Element, backwards: bool = False) -> None:
        order = focusable_elements(self.root)
        if not order:
            return
        if current in order:
            index = order.index(current) + (-1 if backwards else 1)
            index %= len(order)
        else:
            index = -1 if backwards else 0
        order[index].focus()

    # -- serialization ----------------------------------------------------

    def to_html(self) -> str:
        return '<!DOCTYPE html>\n' + serialize(self.root) + '\n'


# ---------------------------------------------------------------------------
# Parsing and serialization
# ---------------------------------------------------------------------------

def _parse_style(text: str) -> Dict[str, str]:
    style = {}
    for declaration in text.split(';'):
        if ':' in declaration:
            name, value = declaration.split(':', 1)
            if name.strip():
                style[name.strip().lower()] = value.strip()
    return style


class _FragmentParser(HTMLParser):

    def __init__(self, document: Optional[Document]):
        super().__init__(convert_charrefs=True)
        self.document = document
        self.top = Element('#fragment', document=document)
        self.stack = [self.top]

    def handle_starttag(self, tag, attrs):
        element = Element(tag, document=self.document)
        for name, value in attrs:
            element.set_attribute(name, value if value is not None else '')
        self.stack[-1].append_child(element)
        if element.tag not in VOID_ELEMENTS:
            self.stack.append(element)

    def handle_startendtag(self, tag, attrs):
        self.handle_starttag(tag, attrs)
        if tag.lower() not in VOID_ELEMENTS:
            self.stack.pop()

    def handle_endtag(self, tag):
        tag = tag.lower()
        for i in range(len(self.stack) - 1, 0, -1):
            if self.stack[i].tag == tag:
                del self.stack[i:]
                return

    def handle_data(self, data):
        self.stack[-1].append_child(Text(data))


def parse_fragment(markup: str, document: Optional[Document] = None) -> List[Union[Element, Text]]:
    """Parse an HTML fragment into detached nodes."""
    parser = _FragmentParser(document)
    parser.feed(markup)
    parser.close()
    nodes = list(parser.top.children)
    parser.top.clear()
    return nodes


def serialize(node: Union[Element, Text]) -> str:
    if isinstance(node, Text):
        if node.parent is not None and node.parent.tag in RAW_TEXT_ELEMENTS:
            return node.data
        return escape(node.data, quote=False)

    attrs = ''.join(
        f' {name}' if value == '' and name in ('disabled', 'hidden') else f' {name}="{escape(value)}"'
        for name, value in node.attributes.items()
    )
    if node.style:
        style = '; '.join(f'{k}: {v}' for k, v in node.style.items())
        attrs += f' style="{escape(style)}"'
    if node.tag in VOID_ELEMENTS:
        return f'<{node.tag}{attrs}>'
    inner = ''.join(serialize(child) for child in node.children)
    return f'<{node.tag}{attrs}>{inner}</{node.tag}>'
