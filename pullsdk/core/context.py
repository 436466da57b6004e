from __future__ import annotations

from typing import Dict, Iterable, List, Optional, Tuple

from pullsdk.core.events import DOCUMENT_END, XmlEvent
from pullsdk.core.exceptions import UnexpectedEndOfDocument


class UnmarshallerContext(object):
    """Cursor over a stream of parse events.

    Tracks the stack of open elements so unmarshallers can ask whether
    the current event sits at a given path and depth.  An attribute event
    reports the depth of its element plus one, i.e. attributes are treated
    as pseudo-children, so ``@Id`` declared on a shape is tested at the
    same depth as that shape's child elements.

    A context belongs to a single unmarshall call and is not thread safe.
    """

    def __init__(self, events: Iterable[XmlEvent]):
        self._events = iter(events)
        self._stack: List[str] = []
        self._attribute: Optional[str] = None
        self._current: Optional[XmlEvent] = None
        self._metadata_expressions: List[Tuple[str, int, Optional[str]]] = []
        self.metadata: Dict[str, str] = {}

    @property
    def current_event(self) -> Optional[XmlEvent]:
        return self._current

    @property
    def current_depth(self) -> int:
        depth = len(self._stack)
        if self._attribute is not None:
            depth += 1
        return depth

    @property
    def current_path(self) -> str:
        path = "/" + "/".join(self._stack)
        if self._attribute is not None:
            path += "/@" + self._attribute
        return path

    def is_start_of_document(self) -> bool:
        return self._current is None

    def register_metadata_expression(
        self, expression: str, depth: int, key: Optional[str] = None
    ) -> None:
        """Capture the text of matching elements into ``self.metadata``.

        A trailing ``/*`` matches any child element, which is then stored
        under its own tag name.
        """
        self._metadata_expressions.append((expression, depth, key))

    def next_event(self) -> XmlEvent:
        event = next(self._events, DOCUMENT_END)
        self._current = event
        if event.is_start_element:
            self._attribute = None
            self._stack.append(event.name)
        elif event.is_attribute:
            self._attribute = event.name
        elif event.is_end_element:
            self._attribute = None
            if self._metadata_expressions:
                self._capture_metadata(event)
            if self._stack:
                self._stack.pop()
        elif event.is_end_document:
            self._attribute = None
        return event

    def test_expression(self, expression: str, depth: int) -> bool:
        if expression == ".":
            return True
        depth += expression.count("/")
        if depth != self.current_depth:
            return False
        return self.current_path.endswith("/" + expression)

    def read_text(self) -> str:
        """Return the text of the element (or attribute) just entered.

        For an element this consumes every event up to and including its
        closing tag.
        """
        current = self._current
        if current is not None and current.is_attribute:
            return current.value
        name = self._stack[-1] if self._stack else None
        depth = len(self._stack)
        while True:
            event = self.next_event()
            if event.is_end_document:
                raise UnexpectedEndOfDocument(name)
            if event.is_end_element and len(self._stack) < depth:
                return event.value or ""

    def _capture_metadata(self, event):
        for expression, depth, key in self._metadata_expressions:
            if expression.endswith("/*"):
                expression = expression[:-1] + event.name
                key = key or event.name
            if self.test_expression(expression, depth):
                self.metadata[key or event.name] = event.value or ""
