import os

DEFAULT_REGION = os.environ.get(
    "PULLSDK_DEFAULT_REGION", os.environ.get("AWS_DEFAULT_REGION", "us-east-1")
)

DEFAULT_READ_CHUNK_SIZE = 8192


def get_max_workers():
    """Size of the worker pool an async client creates when none is supplied.

    ``None`` lets ThreadPoolExecutor pick its own default.
    """
    value = os.environ.get("PULLSDK_MAX_WORKERS")
    if not value:
        return None
    return int(value)


def get_read_chunk_size():
    return int(os.environ.get("PULLSDK_READ_CHUNK_SIZE", DEFAULT_READ_CHUNK_SIZE))
