"""Derive unmarshaller rule tables from botocore shapes.

The tables built here produce the same dictionaries botocore's own XML
parsers do (member names as keys, scalars converted by type), but the
response is read as a stream of events instead of a parsed tree.
"""

from __future__ import annotations

import logging
import threading

from pullsdk.core.model import (
    is_flattened,
    list_member_xml_name,
    member_xml_name,
    result_wrapper,
)
from pullsdk.core.unmarshallers import (
    BOOLEAN,
    FLOAT,
    INTEGER,
    STRING,
    AttributeRule,
    BlobUnmarshaller,
    ContainerRule,
    FieldRule,
    ListMemberRule,
    MapEntryRule,
    MapEntryUnmarshaller,
    StructureUnmarshaller,
    TimestampUnmarshaller,
    list_unmarshaller,
    map_unmarshaller,
)

LOG = logging.getLogger(__name__)


def _structure_key(shape):
    # botocore hands out a fresh Shape object every time a member is
    # resolved, so identity alone never terminates on recursive shapes.
    # Names are only unique within one model, hence the resolver.
    return getattr(shape, "_shape_resolver", None), shape.name


class ShapeUnmarshallerFactory(object):
    """Build (and cache) unmarshallers for botocore shapes.

    Instances are safe to share between parsers and threads. Building is
    serialized by a re-entrant lock, so no thread ever sees a structure
    whose rules are still being filled in.
    """

    def __init__(self, timestamp_parser=None, blob_parser=None):
        self._scalars = {
            "string": STRING,
            "character": STRING,
            "integer": INTEGER,
            "long": INTEGER,
            "short": INTEGER,
            "byte": INTEGER,
            "float": FLOAT,
            "double": FLOAT,
            "boolean": BOOLEAN,
            "timestamp": TimestampUnmarshaller(timestamp_parser),
            "blob": BlobUnmarshaller(blob_parser),
        }
        self._structures = {}
        self._outputs = {}
        self._lock = threading.RLock()

    def for_output(self, shape):
        """Unmarshaller for the top level output shape of an operation.

        Query responses wrap the result in both ``<{Op}Response>`` and the
        shape's ``resultWrapper``; EC2 responses only have the former.
        """
        unmarshaller = self._outputs.get(shape)
        if unmarshaller is not None:
            return unmarshaller
        with self._lock:
            unmarshaller = self._outputs.get(shape)
            if unmarshaller is None:
                envelope_depth = 2 if result_wrapper(shape) else 1
                unmarshaller = self.for_shape(shape).with_envelope(envelope_depth)
                self._outputs[shape] = unmarshaller
        return unmarshaller

    def for_shape(self, shape):
        handler = getattr(self, "_build_%s" % shape.type_name, None)
        if handler is None:
            return self._scalars.get(shape.type_name, STRING)
        with self._lock:
            return handler(shape)

    def _build_structure(self, shape):
        key = _structure_key(shape)
        unmarshaller = self._structures.get(key)
        if unmarshaller is not None:
            return unmarshaller
        LOG.debug("Building unmarshaller for shape %s", shape.name)
        unmarshaller = StructureUnmarshaller(dict)
        # Cached before the members are visited so recursive shapes
        # resolve to this same instance.
        self._structures[key] = unmarshaller
        for member_name, member_shape in shape.members.items():
            unmarshaller.rules.extend(self._member_rules(member_name, member_shape))
        return unmarshaller

    def _build_list(self, shape):
        return list_unmarshaller(
            self.for_shape(shape.member), list_member_xml_name(shape)
        )

    def _build_map(self, shape):
        return map_unmarshaller(self._map_entry(shape))

    def _map_entry(self, shape):
        return MapEntryUnmarshaller(
            self.for_shape(shape.key),
            self.for_shape(shape.value),
            key_name=shape.key.serialization.get("name", "key"),
            value_name=shape.value.serialization.get("name", "value"),
        )

    def _member_rules(self, member_name, member_shape):
        serialization = member_shape.serialization
        if "location" in serialization:
            return []
        xml_name = member_xml_name(member_shape, member_name)
        if serialization.get("xmlAttribute"):
            return [AttributeRule(xml_name, member_name, self.for_shape(member_shape))]
        if member_shape.type_name == "list":
            member_unmarshaller = self.for_shape(member_shape.member)
            if is_flattened(member_shape):
                return [ListMemberRule(xml_name, member_name, member_unmarshaller)]
            return [
                ContainerRule(xml_name, member_name, list),
                ListMemberRule(
                    "%s/%s" % (xml_name, list_member_xml_name(member_shape)),
                    member_name,
                    member_unmarshaller,
                ),
            ]
        if member_shape.type_name == "map":
            entry_unmarshaller = self._map_entry(member_shape)
            if is_flattened(member_shape):
                return [MapEntryRule(xml_name, member_name, entry_unmarshaller)]
            return [
                ContainerRule(xml_name, member_name, dict),
                MapEntryRule("%s/entry" % xml_name, member_name, entry_unmarshaller),
            ]
        return [FieldRule(xml_name, member_name, self.for_shape(member_shape))]
