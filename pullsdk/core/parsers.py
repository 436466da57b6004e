# Copyright 2014 Amazon.com, Inc. or its affiliates. All Rights Reserved.
#
# Licensed under the Apache License, Version 2.0 (the "License"). You
# may not use this file except in compliance with the License. A copy of
# the License is located at
#
# http://aws.amazon.com/apache2.0/
#
# or in the "license" file accompanying this file. This file is
# distributed on an "AS IS" BASIS, WITHOUT WARRANTIES OR CONDITIONS OF
# ANY KIND, either express or implied. See the License for the specific
# language governing permissions and limitations under the License.
"""Response parsers that read XML bodies as a stream of events.

botocore's XML parsers build an ElementTree for the whole body and then
walk it.  The parsers here plug into the same extension point (the
session's ``response_parser_factory`` component) but hand the body to a
:class:`~pullsdk.core.unmarshallers.StructureUnmarshaller` derived from the
operation's output shape, so no intermediate tree is kept around.

Only successful responses take the streaming path.  Error bodies are small
and their layout differs per service, so they keep botocore's handling,
which means ``ClientError`` codes and messages are exactly what botocore
would produce.

::

                   +---------------------+
                   |botocore.QueryParser |
                   +---------------------+
                      ^               ^
                      |               |
      +---------------+-----+   +-----+-------------------+
      |QueryResponseParser  |   |botocore.EC2QueryParser  |
      +---------------------+   +-------------------------+
                                            ^
                                            |
                                +-----------+-----------+
                                |EC2ResponseParser      |
                                +-----------------------+

"""

from __future__ import annotations

import logging

from botocore.parsers import EC2QueryParser, QueryParser
from botocore.parsers import ResponseParserFactory as BotocoreResponseParserFactory

from pullsdk.core.context import UnmarshallerContext
from pullsdk.core.events import XmlEventStream
from pullsdk.core.shapes import ShapeUnmarshallerFactory

LOG = logging.getLogger(__name__)


class StreamingXMLParserMixin(object):
    # (expression, depth, key) triples captured into ResponseMetadata.
    METADATA_EXPRESSIONS = ()

    def __init__(self, timestamp_parser=None, blob_parser=None, unmarshallers=None):
        super().__init__(timestamp_parser=timestamp_parser, blob_parser=blob_parser)
        if unmarshallers is None:
            unmarshallers = ShapeUnmarshallerFactory(
                timestamp_parser=self._timestamp_parser,
                blob_parser=self._blob_parser,
            )
        self._unmarshallers = unmarshallers

    def _do_parse(self, response, shape):
        context = UnmarshallerContext(XmlEventStream(response["body"]))
        for expression, depth, key in self.METADATA_EXPRESSIONS:
            context.register_metadata_expression(expression, depth, key)
        parsed = {}
        if shape is not None:
            LOG.debug("Unmarshalling %s from event stream", shape.name)
            parsed = self._unmarshallers.for_output(shape).unmarshall(context)
        else:
            # Nothing to build, but the metadata still has to be read.
            while not context.next_event().is_end_document:
                pass
        if context.metadata:
            parsed["ResponseMetadata"] = dict(context.metadata)
        return parsed


class QueryResponseParser(StreamingXMLParserMixin, QueryParser):
    METADATA_EXPRESSIONS = (("ResponseMetadata/*", 2, None),)


class EC2ResponseParser(StreamingXMLParserMixin, EC2QueryParser):
    METADATA_EXPRESSIONS = (("requestId", 2, "RequestId"),)


PROTOCOL_PARSERS = {
    "query": QueryResponseParser,
    "ec2": EC2ResponseParser,
}


class ResponseParserFactory(BotocoreResponseParserFactory):
    """Drop-in replacement for botocore's parser factory.

    Protocols in :data:`PROTOCOL_PARSERS` get a streaming parser; all other
    protocols fall through to botocore.  Every parser created by one factory
    shares one :class:`ShapeUnmarshallerFactory`, so rule tables are built
    once per shape rather than once per request.
    """

    def __init__(self):
        super().__init__()
        self._unmarshallers = None

    def set_parser_defaults(self, **kwargs):
        super().set_parser_defaults(**kwargs)
        self._unmarshallers = None

    def create_parser(self, protocol_name):
        parser_cls = PROTOCOL_PARSERS.get(protocol_name)
        if parser_cls is None:
            return super().create_parser(protocol_name)
        if self._unmarshallers is None:
            self._unmarshallers = ShapeUnmarshallerFactory(
                timestamp_parser=self._defaults.get("timestamp_parser"),
                blob_parser=self._defaults.get("blob_parser"),
            )
        return parser_cls(unmarshallers=self._unmarshallers, **self._defaults)


def create_parser(protocol):
    return ResponseParserFactory().create_parser(protocol)
