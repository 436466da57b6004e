class PullSDKError(Exception):
    """Base class for errors raised by pullsdk itself."""

    pass


class UnexpectedEndOfDocument(PullSDKError, ValueError):
    def __init__(self, element_name):
        super().__init__(
            f"Document ended before the closing tag of <{element_name}> was read"
        )
        self.element_name = element_name


class UnknownOperationError(PullSDKError, AttributeError):
    def __init__(self, operation_name, client):
        super().__init__(
            f"{client.__class__.__name__} has no operation named {operation_name!r}"
        )
        self.operation_name = operation_name


class ClientClosedError(PullSDKError, RuntimeError):
    def __init__(self, operation_name):
        super().__init__(
            f"Cannot submit {operation_name!r}: the async client has been closed"
        )
        self.operation_name = operation_name
