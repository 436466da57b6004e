from .client import SimpleDBAsyncClient  # noqa

__all__ = ["SimpleDBAsyncClient"]
