"""Unmarshallers for XML responses read from a parse event stream.

Every unmarshaller exposes a single method, ``unmarshall(context)``, which
is called with the context positioned on the element (or attribute) that
holds the value, and returns the value.  Unmarshallers keep no per-call
state: a single instance can be shared freely between threads as long as
each call gets its own :class:`UnmarshallerContext`.

Structured values are described declaratively.  A
:class:`StructureUnmarshaller` owns an ordered table of rules, each of
which says "at this path, relative to my children's depth, read a value
with this unmarshaller and store it under this name".  The traversal loop
itself never changes from shape to shape::

    rules = [FieldRule("DBParameterGroupName", "db_parameter_group_name", STRING)]
    unmarshaller = StructureUnmarshaller(ModifyDBParameterGroupResult, rules)

"""

from __future__ import annotations

import base64
import collections
from typing import Any, Callable, Iterable, Optional, Sequence, Tuple

from botocore.utils import parse_timestamp

from pullsdk.core.context import UnmarshallerContext
from pullsdk.core.events import XmlEventStream

# A top level response is wrapped in <{Operation}Response><{Operation}Result>
# before the fields of the result shape begin.
ENVELOPE_DEPTH = 2

MapEntry = collections.namedtuple("MapEntry", ["key", "value"])


class StringUnmarshaller(object):
    def unmarshall(self, context):
        return context.read_text()


class IntegerUnmarshaller(object):
    def unmarshall(self, context):
        return int(context.read_text())


class FloatUnmarshaller(object):
    def unmarshall(self, context):
        return float(context.read_text())


class BooleanUnmarshaller(object):
    def unmarshall(self, context):
        return context.read_text().strip().lower() == "true"


class TimestampUnmarshaller(object):
    def __init__(self, timestamp_parser=None):
        if timestamp_parser is None:
            timestamp_parser = parse_timestamp
        self._timestamp_parser = timestamp_parser

    def unmarshall(self, context):
        return self._timestamp_parser(context.read_text())


class BlobUnmarshaller(object):
    def __init__(self, blob_parser=None):
        if blob_parser is None:
            blob_parser = base64.b64decode
        self._blob_parser = blob_parser

    def unmarshall(self, context):
        return self._blob_parser(context.read_text())


STRING = StringUnmarshaller()
INTEGER = IntegerUnmarshaller()
FLOAT = FloatUnmarshaller()
BOOLEAN = BooleanUnmarshaller()
TIMESTAMP = TimestampUnmarshaller()
BLOB = BlobUnmarshaller()


def _get_member(result, name):
    if isinstance(result, dict):
        return result.get(name)
    return getattr(result, name, None)


def _set_member(result, name, value):
    if isinstance(result, dict):
        result[name] = value
    else:
        setattr(result, name, value)


class Rule(object):
    """One row of a structure's rule table.

    :param expression: Path of the element, relative to the structure's
        children, e.g. ``"Name"``, ``"Attributes/member"`` or ``"@Id"``.
    :param name: Key (for dict results) or attribute (for objects) the value
        is stored under.  Collection rules accept ``None``, meaning the
        result itself is the collection.
    """

    def __init__(self, expression: str, name: Optional[str], unmarshaller=None):
        self.expression = expression
        self.name = name
        self.unmarshaller = unmarshaller

    def apply(self, result, context: UnmarshallerContext) -> None:
        raise NotImplementedError("%s.apply" % self.__class__.__name__)

    def __repr__(self):
        return f"{self.__class__.__name__}({self.expression!r}, {self.name!r})"


class FieldRule(Rule):
    def apply(self, result, context):
        _set_member(result, self.name, self.unmarshaller.unmarshall(context))


class AttributeRule(FieldRule):
    def __init__(self, attribute_name, name, unmarshaller):
        super().__init__("@" + attribute_name, name, unmarshaller)


class ListMemberRule(Rule):
    def apply(self, result, context):
        value = self.unmarshaller.unmarshall(context)
        if self.name is None:
            result.append(value)
            return
        members = _get_member(result, self.name)
        if members is None:
            members = []
            _set_member(result, self.name, members)
        members.append(value)


class MapEntryRule(Rule):
    def apply(self, result, context):
        entry = self.unmarshaller.unmarshall(context)
        if self.name is None:
            result[entry.key] = entry.value
            return
        entries = _get_member(result, self.name)
        if entries is None:
            entries = {}
            _set_member(result, self.name, entries)
        entries[entry.key] = entry.value


class ContainerRule(Rule):
    """Start an empty list or dict as soon as its wrapper element opens.

    Nothing is consumed, so the member rules further down the table still
    see the wrapper's children.  This is what turns ``<Tags/>`` into an
    empty list rather than an unset field.
    """

    def __init__(self, expression, name, factory=list):
        super().__init__(expression, name)
        self.factory = factory

    def apply(self, result, context):
        if _get_member(result, self.name) is None:
            _set_member(result, self.name, self.factory())


class StructureUnmarshaller(object):
    """Build one result record from the children of the current element.

    :param result_factory: Called with no arguments to create the empty
        result (``dict``, ``list`` or a record class).
    :param rules: Rule table; the first rule matching an event wins.
    :param envelope_depth: Extra nesting between the document root and the
        result's fields.  Only used when unmarshalling starts at the very
        beginning of the document.
    """

    def __init__(
        self,
        result_factory: Callable[[], Any] = dict,
        rules: Iterable[Rule] = (),
        envelope_depth: int = ENVELOPE_DEPTH,
    ):
        self.result_factory = result_factory
        self.rules = list(rules)
        self.envelope_depth = envelope_depth

    def with_envelope(self, envelope_depth: int) -> "StructureUnmarshaller":
        # The rule list is shared, so rules added later to one are seen by both.
        copy = StructureUnmarshaller(self.result_factory, (), envelope_depth)
        copy.rules = self.rules
        return copy

    def unmarshall(self, context: UnmarshallerContext):
        result = self.result_factory()
        original_depth = context.current_depth
        target_depth = original_depth + 1
        if context.is_start_of_document():
            target_depth += self.envelope_depth

        while True:
            event = context.next_event()
            if event.is_end_document:
                return result
            if event.is_start_element or event.is_attribute:
                for rule in self.rules:
                    if context.test_expression(rule.expression, target_depth):
                        rule.apply(result, context)
                        break
            elif event.is_end_element:
                if context.current_depth < original_depth:
                    return result

    def __repr__(self):
        return f"StructureUnmarshaller({self.result_factory!r}, {self.rules!r})"


class MapEntryUnmarshaller(object):
    """Read one ``<entry><key/><value/></entry>`` pair as a :data:`MapEntry`."""

    def __init__(self, key_unmarshaller, value_unmarshaller, key_name="key", value_name="value"):
        self._entry = StructureUnmarshaller(
            dict,
            [
                FieldRule(key_name, "key", key_unmarshaller),
                FieldRule(value_name, "value", value_unmarshaller),
            ],
        )

    def unmarshall(self, context):
        entry = self._entry.unmarshall(context)
        return MapEntry(entry.get("key"), entry.get("value"))


def list_unmarshaller(member_unmarshaller, member_name="member"):
    """Unmarshaller for a list that is itself a value (e.g. a list of lists)."""
    return StructureUnmarshaller(
        list, [ListMemberRule(member_name, None, member_unmarshaller)]
    )


def map_unmarshaller(entry_unmarshaller, entry_name="entry"):
    return StructureUnmarshaller(
        dict, [MapEntryRule(entry_name, None, entry_unmarshaller)]
    )


def unmarshall(
    unmarshaller,
    source,
    metadata_expressions: Sequence[Tuple[str, int]] = (),
):
    """Unmarshall a complete XML body.

    :param source: ``bytes``, ``str`` or a file-like object.
    :param metadata_expressions: ``(expression, depth)`` pairs captured
        into ``context.metadata`` while the body is read.
    :return: ``(result, metadata)``
    """
    context = UnmarshallerContext(XmlEventStream(source))
    for expression, depth in metadata_expressions:
        context.register_metadata_expression(expression, depth)
    result = unmarshaller.unmarshall(context)
    return result, context.metadata
