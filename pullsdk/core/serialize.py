"""Protocol output serializers.

The inverse of the unmarshallers: take a result value and the operation
model and produce the HTTP response a service would have sent.  Used to
serve canned responses to a botocore client and for round-trip checks.

The return value of ``serialize_to_response`` is a plain dictionary with
``status_code``, ``headers`` and ``body`` keys so it is not tied to any
particular HTTP library.
"""
import base64
import calendar
import datetime
import uuid

import xmltodict
from botocore import xform_name
from botocore.compat import formatdate
from botocore.model import NoShapeFoundError
from botocore.utils import parse_to_aware_datetime

DEFAULT_TIMESTAMP_FORMAT = "iso8601"
ISO8601 = "%Y-%m-%dT%H:%M:%SZ"
# Same as ISO8601, but with microsecond precision.
ISO8601_MICRO = "%Y-%m-%dT%H:%M:%S.%fZ"


def get_random_request_id():
    return str(uuid.uuid4())


def create_serializer(protocol_name):
    return SERIALIZERS[protocol_name]()


class Serializer(object):
    DEFAULT_RESPONSE_CODE = 200
    DEFAULT_ERROR_RESPONSE_CODE = 400
    MAP_TYPE = dict
    DEFAULT_ENCODING = "utf-8"
    TIMESTAMP_FORMAT = DEFAULT_TIMESTAMP_FORMAT

    def serialize_to_response(self, value, operation_model):
        raise NotImplementedError("serialize_to_response")

    def _create_default_response(self):
        return {
            "status_code": self.DEFAULT_RESPONSE_CODE,
            "headers": {},
            "body": b"",
        }

    def _is_error_result(self, result):
        return isinstance(result, Exception)

    def _timestamp_iso8601(self, value):
        if value.microsecond > 0:
            timestamp_format = ISO8601_MICRO
        else:
            timestamp_format = ISO8601
        return value.strftime(timestamp_format)

    def _timestamp_unixtimestamp(self, value):
        return int(calendar.timegm(value.timetuple()))

    def _timestamp_rfc822(self, value):
        if isinstance(value, datetime.datetime):
            value = self._timestamp_unixtimestamp(value)
        return formatdate(value, usegmt=True)

    def _convert_timestamp_to_str(self, value, timestamp_format=None):
        if timestamp_format is None:
            timestamp_format = self.TIMESTAMP_FORMAT
        datetime_obj = parse_to_aware_datetime(value)
        if datetime_obj.utcoffset():
            datetime_obj = datetime_obj.astimezone(datetime.timezone.utc)
        converter = getattr(self, "_timestamp_%s" % timestamp_format.lower())
        return converter(datetime_obj)

    def _get_serialized_name(self, shape, default_name):
        return shape.serialization.get("name", default_name)

    def _get_base64(self, value):
        if isinstance(value, str):
            value = value.encode(self.DEFAULT_ENCODING)
        return base64.b64encode(value).strip().decode(self.DEFAULT_ENCODING)


class QueryResponseSerializer(Serializer):
    """Render results as query protocol XML through ``xmltodict``.

    Results may be dictionaries keyed by member name or objects whose
    attributes follow either the member name or its snake_case form, so
    ``{"DBParameterGroupName": "g"}`` and a record with a
    ``db_parameter_group_name`` attribute serialize the same way.
    """

    CONTENT_TYPE = "text/xml"

    def serialize_to_response(self, value, operation_model):
        serialized = self._create_default_response()
        request_id = get_random_request_id()
        serialized["headers"] = {
            "x-amzn-RequestId": request_id,
            "Content-Type": self.CONTENT_TYPE,
            "Date": formatdate(usegmt=True),
        }
        if self._is_error_result(value):
            body = self._serialize_error(serialized, value, operation_model, request_id)
        else:
            root = self.MAP_TYPE()
            root["@xmlns"] = operation_model.metadata["xmlNamespace"]
            output_shape = operation_model.output_shape
            if output_shape is not None:
                wrapper = output_shape.serialization.get("resultWrapper")
                if wrapper is not None:
                    root[wrapper] = self.MAP_TYPE()
                    self._serialize_type_structure(root[wrapper], value, output_shape)
                else:
                    self._serialize_type_structure(root, value, output_shape)
            root["ResponseMetadata"] = {"RequestId": request_id}
            body = {"%sResponse" % operation_model.name: root}
        serialized["body"] = self._encode_body(body)
        serialized["headers"]["Content-Length"] = str(len(serialized["body"]))
        return serialized

    def _encode_body(self, body):
        return xmltodict.unparse(body, full_document=False).encode(
            self.DEFAULT_ENCODING
        )

    def _serialize_error(self, serialized, error, operation_model, request_id):
        shape_name = getattr(error, "code", error.__class__.__name__)
        try:
            shape = operation_model.service_model.shape_for(shape_name)
            error_code = shape.error_code or shape_name
            error_metadata = shape.metadata.get("error", {})
            status_code = error_metadata.get(
                "httpStatusCode", self.DEFAULT_ERROR_RESPONSE_CODE
            )
            sender_fault = error_metadata.get("senderFault", False)
        except NoShapeFoundError:
            error_code = shape_name
            status_code = self.DEFAULT_ERROR_RESPONSE_CODE
            sender_fault = True
        serialized["status_code"] = status_code
        error = {
            "Type": "Sender" if sender_fault else "Receiver",
            "Code": error_code,
            "Message": str(error),
        }
        return {
            "ErrorResponse": {
                "@xmlns": operation_model.metadata["xmlNamespace"],
                "Error": error,
                "RequestId": request_id,
            }
        }

    def _serialize(self, serialized, value, shape, key):
        method = getattr(
            self, "_serialize_type_%s" % shape.type_name, self._default_serialize
        )
        method(serialized, value, shape, key)

    def _get_value(self, value, key):
        for possible_key in (key, xform_name(key)):
            if isinstance(value, dict):
                new_value = value.get(possible_key)
            else:
                new_value = getattr(value, possible_key, None)
            if new_value is not None:
                return new_value
        return None

    def _serialize_type_structure(self, serialized, value, shape, key=None):
        if value is None:
            return
        if key is not None:
            new_serialized = self.MAP_TYPE()
            serialized[key] = new_serialized
            serialized = new_serialized
        for member_key, member_shape in shape.members.items():
            if "location" in member_shape.serialization:
                continue
            member_value = self._get_value(value, member_key)
            if member_value is None:
                continue
            xml_name = self._get_serialized_name(member_shape, member_key)
            if member_shape.serialization.get("xmlAttribute"):
                self._serialize(serialized, member_value, member_shape, "@" + xml_name)
            else:
                self._serialize(serialized, member_value, member_shape, xml_name)

    def _serialize_type_list(self, serialized, value, shape, key):
        member_shape = shape.member
        items = []
        for list_item in value:
            # Serialize each item under a throwaway key so scalars and
            # structures can share one code path.
            wrapper = {}
            self._serialize(wrapper, list_item, member_shape, "__current__")
            items.append(wrapper["__current__"])
        if shape.serialization.get("flattened"):
            serialized[self._get_serialized_name(member_shape, key)] = items
        else:
            serialized[key] = {self._get_serialized_name(member_shape, "member"): items}

    def _serialize_type_map(self, serialized, value, shape, key):
        key_name = self._get_serialized_name(shape.key, "key")
        value_name = self._get_serialized_name(shape.value, "value")
        entries = []
        for map_key, map_value in value.items():
            entry = self.MAP_TYPE()
            self._serialize(entry, map_key, shape.key, key_name)
            self._serialize(entry, map_value, shape.value, value_name)
            entries.append(entry)
        if shape.serialization.get("flattened"):
            serialized[key] = entries
        else:
            serialized[key] = {"entry": entries}

    def _default_serialize(self, serialized, value, shape, key):
        serialized[key] = str(value)

    def _serialize_type_boolean(self, serialized, value, shape, key):
        serialized[key] = "true" if value else "false"

    def _serialize_type_timestamp(self, serialized, value, shape, key):
        serialized[key] = self._convert_timestamp_to_str(
            value, shape.serialization.get("timestampFormat")
        )

    def _serialize_type_blob(self, serialized, value, shape, key):
        serialized[key] = self._get_base64(value)


SERIALIZERS = {
    "query": QueryResponseSerializer,
}
