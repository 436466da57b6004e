"""Serve canned responses to a botocore client without touching the network."""
import io
from urllib.parse import parse_qs

from botocore.awsrequest import AWSResponse
from botocore.credentials import Credentials

from pullsdk.core.serialize import create_serializer

CREDENTIALS = Credentials("AKIDEXAMPLE", "wJalrXUtnFEMI/K7MDENG+bPxRfiCYEXAMPLEKEY")


class RawBody(io.BytesIO):
    def stream(self, **kwargs):
        contents = self.read()
        while contents:
            yield contents
            contents = self.read()


class ServiceError(Exception):
    """A modeled service failure, serialized by its ``code``."""

    def __init__(self, code, message):
        super().__init__(message)
        self.code = code


def _request_params(request):
    body = request.body or ""
    if isinstance(body, bytes):
        body = body.decode("utf-8")
    return {key: values[0] for key, values in parse_qs(body).items()}


def serve(client, responses):
    """Answer every request ``client`` makes from ``responses``.

    ``responses`` maps an action name to a result value, an exception, or
    a callable taking the request parameters and returning either.
    Returns the list of request parameters seen, in order.
    """
    service_model = client.meta.service_model
    serializer = create_serializer(service_model.protocol)
    seen = []

    def _send(request, **kwargs):
        params = _request_params(request)
        seen.append(params)
        action = params["Action"]
        value = responses[action]
        if callable(value) and not isinstance(value, Exception):
            value = value(params)
        serialized = serializer.serialize_to_response(
            value, service_model.operation_model(action)
        )
        return AWSResponse(
            request.url,
            serialized["status_code"],
            serialized["headers"],
            RawBody(serialized["body"]),
        )

    client.meta.events.register("before-send", _send)
    return seen
