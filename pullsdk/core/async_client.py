"""Non-blocking clients that delegate to a synchronous botocore client.

Every ``<operation>_async`` method hands exactly one call of the matching
synchronous method to a worker pool and returns a :class:`TaskHandle`
straight away.  Nothing here retries, logs or translates failures: whatever
the synchronous call raises is captured in the handle's :class:`Outcome`
and surfaces only when the caller asks for it.

::

    with SimpleDBAsyncClient(credentials) as sdb:
        handle = sdb.list_domains_async(MaxNumberOfDomains=10)
        outcome = handle.outcome()
        if outcome.ok:
            print(outcome.value["DomainNames"])

"""

from __future__ import annotations

import asyncio
import functools
import logging
import threading
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from dataclasses import dataclass
from typing import Any, Callable, FrozenSet, Mapping, Optional

from botocore import xform_name

from pullsdk import settings
from pullsdk.core.client import create_client
from pullsdk.core.exceptions import ClientClosedError, UnknownOperationError
from pullsdk.core.model import load_service_model

LOG = logging.getLogger(__name__)


@dataclass(frozen=True)
class Outcome(object):
    """The settled result of a task: a value or the failure that replaced it."""

    value: Any = None
    error: Optional[BaseException] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self):
        if self.error is not None:
            raise self.error
        return self.value


class TaskHandle(object):
    """A handle on one submitted operation.

    Wraps the executor's :class:`~concurrent.futures.Future`.  The handle is
    settled exactly once, when the synchronous call returns or raises, and
    never changes afterwards.
    """

    def __init__(self, future: Future, operation_name: str):
        self._future = future
        self.operation_name = operation_name

    def done(self) -> bool:
        return self._future.done()

    def running(self) -> bool:
        return self._future.running()

    def cancelled(self) -> bool:
        return self._future.cancelled()

    def cancel(self) -> bool:
        # Only possible while queued; a call already in flight runs to completion.
        return self._future.cancel()

    def outcome(self, timeout: Optional[float] = None) -> Outcome:
        """Wait for the task and return its :class:`Outcome`.

        Raises ``concurrent.futures.CancelledError`` if the task was
        cancelled and ``TimeoutError`` if it does not settle in time.
        """
        error = self._future.exception(timeout)
        if error is not None:
            return Outcome(error=error)
        return Outcome(value=self._future.result())

    def result(self, timeout: Optional[float] = None):
        return self.outcome(timeout).unwrap()

    def exception(self, timeout: Optional[float] = None) -> Optional[BaseException]:
        return self.outcome(timeout).error

    def add_done_callback(self, fn: Callable[["TaskHandle"], Any]) -> None:
        self._future.add_done_callback(lambda _future: fn(self))

    def as_asyncio_future(self, loop=None) -> asyncio.Future:
        return asyncio.wrap_future(self._future, loop=loop)

    def __repr__(self):
        if self._future.cancelled():
            state = "cancelled"
        elif self._future.done():
            state = "done"
        else:
            state = "pending"
        return f"<TaskHandle {self.operation_name} {state}>"


def _call(method, void, request):
    result = method(**request)
    if void:
        return None
    return result


class AsyncClient(object):
    """Run a synchronous client's operations on a worker pool.

    :param client: The synchronous client every call is delegated to.
    :param executor: Pool to submit to.  When omitted the client creates a
        ``ThreadPoolExecutor`` and shuts it down on :meth:`close`; a pool
        passed in stays the caller's to shut down.
    """

    # Method name -> operation name.  ``None`` accepts any method the
    # wrapped client has.
    OPERATIONS: Optional[Mapping[str, str]] = None
    # Method names whose synchronous result is discarded.
    VOID_OPERATIONS: FrozenSet[str] = frozenset()

    def __init__(self, client, executor: Optional[Executor] = None):
        self._client = client
        self._owns_executor = executor is None
        if executor is None:
            executor = ThreadPoolExecutor(
                max_workers=settings.get_max_workers(),
                thread_name_prefix="pullsdk",
            )
        self._executor = executor
        self._closed = False
        self._lock = threading.Lock()

    @property
    def client(self):
        return self._client

    @property
    def executor(self) -> Executor:
        return self._executor

    @property
    def closed(self) -> bool:
        return self._closed

    def submit(self, method_name: str, **request) -> TaskHandle:
        method = self._resolve(method_name)
        void = method_name in self.VOID_OPERATIONS
        with self._lock:
            if self._closed:
                raise ClientClosedError(method_name)
            LOG.debug("Submitting %s to %r", method_name, self._executor)
            future = self._executor.submit(_call, method, void, request)
        return TaskHandle(future, method_name)

    def _resolve(self, method_name):
        operations = self.OPERATIONS
        if operations is None:
            # Without a declared table, fall back to the wrapped botocore
            # client's own operation map, when it has one.
            meta = getattr(self._client, "meta", None)
            operations = getattr(meta, "method_to_api_mapping", None)
        if operations is not None and method_name not in operations:
            raise UnknownOperationError(method_name, self)
        method = getattr(self._client, method_name, None)
        if not callable(method):
            raise UnknownOperationError(method_name, self)
        return method

    def close(self) -> None:
        with self._lock:
            if self._closed:
                return
            self._closed = True
        if self._owns_executor:
            self._executor.shutdown(wait=True)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.close()


def _make_async_method(method_name, operation_name):
    def _api_call(self, **request):
        return self.submit(method_name, **request)

    _api_call.__name__ = "%s_async" % method_name
    _api_call.__doc__ = (
        "Submit ``%s`` to the worker pool and return a :class:`TaskHandle`."
        % operation_name
    )
    return _api_call


@functools.lru_cache(maxsize=None)
def get_async_client_class(service_name: str, api_version: Optional[str] = None):
    """Build an :class:`AsyncClient` subclass from a botocore service model."""
    model = load_service_model(service_name, api_version)
    class_attributes = {
        "SERVICE_NAME": service_name,
        "OPERATIONS": dict(model.method_names),
        "VOID_OPERATIONS": frozenset(
            xform_name(name) for name in model.void_operation_names
        ),
    }
    for method_name, operation_name in model.method_names.items():
        class_attributes["%s_async" % method_name] = _make_async_method(
            method_name, operation_name
        )
    class_name = "%sAsyncClient" % str(model.service_id).replace(" ", "")
    LOG.debug("Created %s with %d operations", class_name, len(model.method_names))
    return type(class_name, (AsyncClient,), class_attributes)


def create_async_client(
    service_name,
    credentials=None,
    config=None,
    executor=None,
    region_name=None,
    client=None,
):
    cls = get_async_client_class(service_name)
    if client is None:
        client = create_client(
            service_name, credentials=credentials, config=config, region_name=region_name
        )
    return cls(client, executor=executor)
