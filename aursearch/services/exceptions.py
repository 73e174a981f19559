"""Domain-specific exceptions."""


class ServiceError(Exception):
    pass


class ClientError(ServiceError):
    pass


class UpstreamError(ClientError):
    """Network failure, timeout or 5xx answer that survived all retries."""


class ApiError(ClientError):
    """The AUR answered, but reported a logical error."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message
