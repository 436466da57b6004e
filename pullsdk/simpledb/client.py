from pullsdk.core.async_client import AsyncClient
from pullsdk.core.client import create_client


class SimpleDBAsyncClient(AsyncClient):
    """Asynchronous client for Amazon SimpleDB.

    Can be built three ways:

    * ``SimpleDBAsyncClient(credentials)`` creates and owns a worker pool
      for the lifetime of the client.
    * ``SimpleDBAsyncClient(credentials, executor=pool)`` uses the caller's
      pool, which :meth:`close` leaves running.
    * ``SimpleDBAsyncClient(credentials, config=Config(...), executor=pool)``
      additionally configures the synchronous client (retries, proxies,
      timeouts).

    ``client=`` injects a ready-made synchronous client instead.
    """

    SERVICE_NAME = "sdb"

    OPERATIONS = {
        "batch_delete_attributes": "BatchDeleteAttributes",
        "batch_put_attributes": "BatchPutAttributes",
        "create_domain": "CreateDomain",
        "delete_attributes": "DeleteAttributes",
        "delete_domain": "DeleteDomain",
        "domain_metadata": "DomainMetadata",
        "get_attributes": "GetAttributes",
        "list_domains": "ListDomains",
        "put_attributes": "PutAttributes",
        "select": "Select",
    }

    VOID_OPERATIONS = frozenset(
        [
            "batch_delete_attributes",
            "batch_put_attributes",
            "create_domain",
            "delete_attributes",
            "delete_domain",
            "put_attributes",
        ]
    )

    def __init__(
        self, credentials=None, config=None, executor=None, region_name=None, client=None
    ):
        if client is None:
            client = create_client(
                self.SERVICE_NAME,
                credentials=credentials,
                config=config,
                region_name=region_name,
            )
        super().__init__(client, executor=executor)

    def batch_delete_attributes_async(self, **request):
        """Delete attributes from many items at once.  Resolves to ``None``."""
        return self.submit("batch_delete_attributes", **request)

    def batch_put_attributes_async(self, **request):
        """Put attributes on many items at once.  Resolves to ``None``."""
        return self.submit("batch_put_attributes", **request)

    def create_domain_async(self, **request):
        return self.submit("create_domain", **request)

    def delete_attributes_async(self, **request):
        return self.submit("delete_attributes", **request)

    def delete_domain_async(self, **request):
        return self.submit("delete_domain", **request)

    def domain_metadata_async(self, **request):
        """Resolves to the ``DomainMetadata`` result (item and attribute counts)."""
        return self.submit("domain_metadata", **request)

    def get_attributes_async(self, **request):
        return self.submit("get_attributes", **request)

    def list_domains_async(self, **request):
        return self.submit("list_domains", **request)

    def put_attributes_async(self, **request):
        return self.submit("put_attributes", **request)

    def select_async(self, **request):
        return self.submit("select", **request)
