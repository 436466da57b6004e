from .async_client import AsyncClient, Outcome, TaskHandle  # noqa: F401
from .async_client import create_async_client  # noqa: F401
from .client import create_client  # noqa: F401
from .unmarshallers import StructureUnmarshaller, unmarshall  # noqa: F401
