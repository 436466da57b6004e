import logging

import boto3
from botocore.session import get_session

from pullsdk import settings
from pullsdk.core.parsers import ResponseParserFactory

LOG = logging.getLogger(__name__)


def create_session(region_name=None):
    """A boto3 session whose clients parse query/ec2 responses as event streams."""
    botocore_session = get_session()
    botocore_session.register_component(
        "response_parser_factory", ResponseParserFactory()
    )
    return boto3.Session(
        botocore_session=botocore_session,
        region_name=region_name or settings.DEFAULT_REGION,
    )


def create_client(service_name, credentials=None, config=None, region_name=None):
    """Create a synchronous botocore client for ``service_name``.

    :param credentials: ``botocore.credentials.Credentials``; when omitted
        the normal botocore credential chain applies.
    :param config: ``botocore.config.Config``, passed through unchanged.
    """
    kwargs = {"config": config}
    if credentials is not None:
        kwargs.update(
            aws_access_key_id=credentials.access_key,
            aws_secret_access_key=credentials.secret_key,
            aws_session_token=credentials.token,
        )
    LOG.debug("Creating %s client", service_name)
    return create_session(region_name).client(service_name, **kwargs)
