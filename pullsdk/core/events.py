"""Lazily produced XML parse events.

The unmarshallers never see a DOM.  They walk a flat, forward-only
sequence of structural events::

    START_DOCUMENT
    START_ELEMENT  ModifyDBParameterGroupResponse
    START_ELEMENT  ModifyDBParameterGroupResult
    START_ELEMENT  DBParameterGroupName
    END_ELEMENT    DBParameterGroupName   (value="mygroup")
    END_ELEMENT    ModifyDBParameterGroupResult
    END_ELEMENT    ModifyDBParameterGroupResponse
    END_DOCUMENT

Each start element is immediately followed by one ``ATTRIBUTE`` event per
attribute on that element.  Names are local names; namespace URIs are
dropped because AWS responses put every element in the service namespace.
"""

from __future__ import annotations

from typing import IO, Iterator, Optional, Union
from xml.etree import ElementTree

from pullsdk import settings

START_DOCUMENT = "start-document"
START_ELEMENT = "start-element"
ATTRIBUTE = "attribute"
END_ELEMENT = "end-element"
END_DOCUMENT = "end-document"


def local_name(tag: str) -> str:
    if tag[:1] == "{":
        return tag.rsplit("}", 1)[1]
    return tag


class XmlEvent(object):
    __slots__ = ("kind", "name", "value")

    def __init__(self, kind: str, name: Optional[str] = None, value: Optional[str] = None):
        self.kind = kind
        self.name = name
        self.value = value

    @property
    def is_start_document(self) -> bool:
        return self.kind == START_DOCUMENT

    @property
    def is_start_element(self) -> bool:
        return self.kind == START_ELEMENT

    @property
    def is_attribute(self) -> bool:
        return self.kind == ATTRIBUTE

    @property
    def is_end_element(self) -> bool:
        return self.kind == END_ELEMENT

    @property
    def is_end_document(self) -> bool:
        return self.kind == END_DOCUMENT

    def __eq__(self, other):
        if not isinstance(other, XmlEvent):
            return NotImplemented
        return (self.kind, self.name, self.value) == (other.kind, other.name, other.value)

    def __hash__(self):
        return hash((self.kind, self.name, self.value))

    def __repr__(self):
        if self.name is None:
            return f"XmlEvent({self.kind})"
        return f"XmlEvent({self.kind}, {self.name!r}, {self.value!r})"


def start_element(name: str) -> XmlEvent:
    return XmlEvent(START_ELEMENT, name)


def attribute(name: str, value: str) -> XmlEvent:
    return XmlEvent(ATTRIBUTE, name, value)


def end_element(name: str, text: str = "") -> XmlEvent:
    return XmlEvent(END_ELEMENT, name, text)


DOCUMENT_START = XmlEvent(START_DOCUMENT)
DOCUMENT_END = XmlEvent(END_DOCUMENT)


class XmlEventStream(object):
    """Iterate over the parse events of an XML body.

    :param source: ``bytes``, ``str`` or any object with a ``read`` method.
    :param chunk_size: How much input is handed to the tokenizer at a time.

    A body that is empty (or only whitespace) is an empty document rather
    than an error; botocore hands us exactly that for operations whose
    response carries no payload.  Anything else that is not well formed
    raises ``xml.etree.ElementTree.ParseError`` while iterating.
    """

    def __init__(self, source: Union[bytes, str, IO], chunk_size: Optional[int] = None):
        if chunk_size is None:
            chunk_size = settings.get_read_chunk_size()
        self._source = source
        self._chunk_size = chunk_size
        self._events = None

    def __iter__(self) -> Iterator[XmlEvent]:
        if self._events is None:
            self._events = self._generate()
        return self._events

    def _chunks(self):
        source = self._source
        if hasattr(source, "read"):
            while True:
                chunk = source.read(self._chunk_size)
                if not chunk:
                    return
                yield chunk
        else:
            for offset in range(0, len(source), self._chunk_size):
                yield source[offset : offset + self._chunk_size]

    def _generate(self):
        parser = ElementTree.XMLPullParser(events=("start", "end"))
        seen_content = False
        yield DOCUMENT_START
        for chunk in self._chunks():
            if not seen_content and chunk.strip():
                seen_content = True
            parser.feed(chunk)
            yield from self._drain(parser)
        if seen_content:
            parser.close()
            yield from self._drain(parser)
        yield DOCUMENT_END

    def _drain(self, parser):
        for event, element in parser.read_events():
            name = local_name(element.tag)
            if event == "start":
                yield XmlEvent(START_ELEMENT, name)
                for key, value in element.attrib.items():
                    yield XmlEvent(ATTRIBUTE, local_name(key), value)
            else:
                text = element.text or ""
                # Children have all been reported; drop them so long
                # responses don't accumulate a full tree in memory.
                element.clear()
                yield XmlEvent(END_ELEMENT, name, text)
